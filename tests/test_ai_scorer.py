"""
Tests for the AI collaborator — heuristic substitute, LLM parsing,
and fallback when the LLM misbehaves.

No real LLM calls: a MockLLM returns canned responses.
"""

import json
from types import SimpleNamespace

import pytest
from jobshield.ai_scorer import (
    AIAssessment,
    HeuristicAIScorer,
    LLMAIScorer,
    get_ai_scorer,
    parse_assessment,
)
from jobshield.llm import LLMProvider

CLEAN_TEXT = (
    "Globex Corporation is hiring a data analyst to join the finance team. "
    "Requirements: SQL, Python and three years of reporting experience."
)


class MockLLM(LLMProvider):
    """Returns a fixed response, or raises if given an exception."""

    def __init__(self, response=None, error: Exception = None):
        self.response = response
        self.error = error
        self.calls = 0

    async def generate(self, prompt, system_instruction=None, temperature=0.7, json_mode=False):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if isinstance(self.response, str):
            return self.response
        return json.dumps(self.response)


# ============================================================
# HEURISTIC SCORER
# ============================================================

class TestHeuristicScorer:

    def test_fee_and_whatsapp(self):
        ai = HeuristicAIScorer().assess("Pay the fee and contact us on WhatsApp")
        assert ai.score == 100
        assert ai.classification == "Fake"
        assert ai.confidence == 95
        assert ai.source == "heuristic"

    def test_clean_text_is_neutral(self):
        ai = HeuristicAIScorer().assess(CLEAN_TEXT)
        assert ai.score == 30
        assert ai.classification == "Legit"
        assert ai.confidence == 40
        assert ai.red_flags == (
            "No major red flags detected by AI analysis",
            "Job posting appears to follow professional standards",
        )

    def test_income_promise(self):
        ai = HeuristicAIScorer().assess("Earn money from home. " + "Details follow. " * 10)
        assert ai.score == 50
        assert ai.classification == "Suspicious"
        assert "Makes unrealistic income promises" in ai.red_flags

    @pytest.mark.asyncio
    async def test_analyze_matches_assess(self):
        scorer = HeuristicAIScorer()
        assert await scorer.analyze(CLEAN_TEXT) == scorer.assess(CLEAN_TEXT)


# ============================================================
# RESPONSE PARSING
# ============================================================

class TestParseAssessment:

    @pytest.mark.parametrize("label,score", [
        ("Legit", 20), ("legit", 20), ("Fake", 90), ("FAKE", 90),
        ("Suspicious", 55), ("Unclear", 55),
    ])
    def test_classification_scores(self, label, score):
        assert parse_assessment({"classification": label}).score == score

    def test_missing_flags_fallback(self):
        ai = parse_assessment({"classification": "Legit", "confidence": 80})
        assert ai.red_flags == ("AI analysis completed",)

    def test_camel_case_flags_accepted(self):
        ai = parse_assessment({"classification": "Fake", "redFlags": ["- Asks for money"]})
        assert ai.red_flags == ("Asks for money",)

    @pytest.mark.parametrize("raw,expected", [
        (150, 100), (-5, 0), ("72", 72), ("high", 50), (None, 50), (33.6, 34),
    ])
    def test_confidence_normalized(self, raw, expected):
        assert parse_assessment({"classification": "Fake", "confidence": raw}).confidence == expected


# ============================================================
# LLM SCORER
# ============================================================

class TestLLMScorer:

    @pytest.mark.asyncio
    async def test_fake_classification(self):
        llm = MockLLM({"classification": "Fake", "confidence": 88, "red_flags": ["Upfront fee"]})
        ai = await LLMAIScorer(llm).analyze("some posting")
        assert ai.score == 90
        assert ai.confidence == 88
        assert ai.red_flags == ("Upfront fee",)
        assert ai.source == "llm"
        assert llm.calls == 1

    @pytest.mark.asyncio
    async def test_fenced_json(self):
        llm = MockLLM('```json\n{"classification": "Legit", "confidence": 70}\n```')
        ai = await LLMAIScorer(llm).analyze("some posting")
        assert ai.score == 20

    @pytest.mark.asyncio
    async def test_provider_error_falls_back(self):
        llm = MockLLM(error=RuntimeError("503 unavailable"))
        ai = await LLMAIScorer(llm).analyze(CLEAN_TEXT)
        assert ai == HeuristicAIScorer().assess(CLEAN_TEXT)

    @pytest.mark.asyncio
    async def test_invalid_json_falls_back(self):
        ai = await LLMAIScorer(MockLLM("not json at all")).analyze(CLEAN_TEXT)
        assert ai.source == "heuristic"

    @pytest.mark.asyncio
    async def test_json_array_falls_back(self):
        ai = await LLMAIScorer(MockLLM("[1, 2, 3]")).analyze(CLEAN_TEXT)
        assert ai.source == "heuristic"


# ============================================================
# FACTORY
# ============================================================

class TestFactory:

    def test_heuristic_when_ai_disabled(self):
        scorer = get_ai_scorer(SimpleNamespace(ai_enabled=False, AI_PROVIDER="gemini"))
        assert isinstance(scorer, HeuristicAIScorer)

    def test_llm_when_ai_enabled(self):
        scorer = get_ai_scorer(SimpleNamespace(ai_enabled=True, AI_PROVIDER="gemini"))
        assert isinstance(scorer, LLMAIScorer)

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError):
            get_ai_scorer(SimpleNamespace(ai_enabled=True, AI_PROVIDER="nope"))

    def test_skipped_placeholder(self):
        ai = AIAssessment.skipped()
        assert ai.score == 0
        assert ai.red_flags == ()
        assert ai.source == "skipped"
