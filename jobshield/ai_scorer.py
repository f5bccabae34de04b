"""
AI Scorer — External Assessment of a Posting

The engine blends its rule score with an AI-derived score. This module
provides that collaborator behind one interface:

  - LLMAIScorer:       asks the configured LLM for a classification
  - HeuristicAIScorer: deterministic keyword substitute, used when no
                       LLM is configured and as the LLM's fallback

Every scorer is total: ``analyze`` never raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from jobshield.llm import LLMProvider

logger = logging.getLogger(__name__)

CLASSIFICATION_SCORES = {"legit": 20, "fake": 90}
UNKNOWN_CLASSIFICATION_SCORE = 55
DEFAULT_CONFIDENCE = 50
COMPLETED_FLAG = "AI analysis completed"


@dataclass(frozen=True)
class AIAssessment:
    score: int
    confidence: int
    red_flags: tuple[str, ...] = ()
    classification: str = "Suspicious"
    source: str = "heuristic"

    @classmethod
    def skipped(cls) -> "AIAssessment":
        """Placeholder when the AI call was not made (critical hit)."""
        return cls(score=0, confidence=0, classification="Skipped", source="skipped")

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "confidence": self.confidence,
            "redFlags": list(self.red_flags),
            "classification": self.classification,
            "source": self.source,
        }


class AIScorer(ABC):
    """Capability interface consumed by the orchestrator."""

    name: str = "ai"

    @abstractmethod
    async def analyze(self, text: str) -> AIAssessment:
        """Assess the posting. Must not raise."""
        ...


# ============================================================
# HEURISTIC SUBSTITUTE
# ============================================================

class HeuristicAIScorer(AIScorer):
    """Keyword-driven stand-in with the same output shape as the LLM."""

    name = "heuristic"

    def assess(self, text: str) -> AIAssessment:
        text = text or ""
        lower = text.lower()
        score = 30
        flags: list[str] = []

        if any(k in lower for k in ("fee", "payment", "deposit")):
            score += 35
            flags.append("Mentions payment or fees which is unusual for legitimate jobs")

        if "whatsapp" in lower or "telegram" in lower:
            score += 25
            flags.append("Uses informal messaging apps instead of professional communication")

        if "gmail" in lower or "yahoo" in lower:
            score += 15
            flags.append("Uses personal email domain instead of company domain")

        if "earn" in lower and ("$" in lower or "money" in lower):
            score += 20
            flags.append("Makes unrealistic income promises")

        if len(text) < 100:
            score += 10
            flags.append("Job description is unusually brief and lacks important details")

        if not flags:
            flags.append("No major red flags detected by AI analysis")
            flags.append("Job posting appears to follow professional standards")

        score = min(score, 100)

        if score > 70:
            classification = "Fake"
        elif score > 30:
            classification = "Suspicious"
        else:
            classification = "Legit"

        return AIAssessment(
            score=score,
            confidence=min(score + 10, 95),
            red_flags=tuple(flags),
            classification=classification,
            source=self.name,
        )

    async def analyze(self, text: str) -> AIAssessment:
        return self.assess(text)


# ============================================================
# LLM-BACKED SCORER
# ============================================================

SYSTEM_INSTRUCTION = (
    "You are an AI fraud detection assistant specializing in identifying "
    "fake job postings. Provide structured, accurate analysis."
)

ANALYSIS_PROMPT = """Analyze the following job description and determine whether it is Legit, Suspicious, or Fake.

Identify red flags such as:
- Payment or fee requests
- Vague company details
- Unrealistic salaries or promises
- Suspicious contact methods (WhatsApp, Telegram, personal emails)
- Poor grammar or unprofessional language
- Urgency tactics or pressure
- Too-good-to-be-true claims

## Job Description
\"\"\"
{text}
\"\"\"

Return a JSON object with:
1. "classification" — "Legit" | "Suspicious" | "Fake"
2. "confidence" — integer 0 to 100
3. "red_flags" — array of short strings, each referencing actual content from the description

Return ONLY valid JSON."""


def _to_int(value: Any, default: int) -> int:
    try:
        return max(0, min(100, int(round(float(value)))))
    except (TypeError, ValueError):
        return default


def parse_assessment(raw: dict, source: str = "llm") -> AIAssessment:
    """Normalize an LLM JSON payload into an AIAssessment."""
    classification = str(raw.get("classification", "Suspicious")).strip() or "Suspicious"
    score = CLASSIFICATION_SCORES.get(
        classification.lower(), UNKNOWN_CLASSIFICATION_SCORE,
    )
    confidence = _to_int(raw.get("confidence"), DEFAULT_CONFIDENCE)

    raw_flags = raw.get("red_flags", raw.get("redFlags", []))
    if not isinstance(raw_flags, list):
        raw_flags = []
    flags = tuple(
        str(f).lstrip("-•* ").strip() for f in raw_flags if str(f).strip()
    )

    return AIAssessment(
        score=score,
        confidence=confidence,
        red_flags=flags or (COMPLETED_FLAG,),
        classification=classification.capitalize(),
        source=source,
    )


class LLMAIScorer(AIScorer):
    """Classifies a posting with the configured LLM provider."""

    name = "llm"

    def __init__(self, llm: LLMProvider, fallback: Optional[HeuristicAIScorer] = None):
        self._llm = llm
        self._fallback = fallback or HeuristicAIScorer()

    async def analyze(self, text: str) -> AIAssessment:
        try:
            raw = await self._llm.generate_json(
                ANALYSIS_PROMPT.format(text=text),
                system_instruction=SYSTEM_INSTRUCTION,
                temperature=0.3,
            )
            return parse_assessment(raw, source=self.name)
        except Exception as e:
            logger.warning(
                "AI scorer failed, using heuristic fallback: %s", e,
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return self._fallback.assess(text)


def get_ai_scorer(settings=None) -> AIScorer:
    """Factory — LLM-backed scorer when configured, heuristic otherwise."""
    if settings is None:
        from jobshield.config import settings
    if not settings.ai_enabled:
        return HeuristicAIScorer()
    from jobshield.llm.factory import get_provider
    return LLMAIScorer(get_provider(settings.AI_PROVIDER))
