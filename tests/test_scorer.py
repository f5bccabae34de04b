"""
Tests for score blending and verdict classification.
"""

import pytest
from jobshield.categories import CategoryResult
from jobshield.critical import CriticalResult
from jobshield.scorer import (
    BLEND_POLICIES,
    EngineState,
    Verdict,
    blend_scores,
    clamp_score,
    classify_verdict,
)

CRITICAL = CriticalResult(matches=("registration fee",))
CLEAN = CriticalResult()


class TestCriticalBlend:
    def test_rule_score_forced_to_100(self):
        blend = blend_scores(CRITICAL, None, 0)
        assert blend.rule_score == 100
        assert blend.final_score == 100

    def test_ai_score_ignored(self):
        low = blend_scores(CRITICAL, None, 0)
        high = blend_scores(CRITICAL, None, 100)
        assert low.final_score == high.final_score == 100

    def test_category_result_ignored(self):
        blend = blend_scores(CRITICAL, CategoryResult(score=0), 0)
        assert blend.final_score == 100

    def test_weights_labels(self):
        blend = blend_scores(CRITICAL, None, 40)
        assert blend.weights == {
            "ruleBased": "100%",
            "ai": "0% (overridden by critical rule)",
        }

    def test_policy_floor(self):
        assert BLEND_POLICIES[EngineState.CRITICAL_HIT].score_floor == 85


class TestNormalBlend:
    def test_sixty_forty(self):
        blend = blend_scores(CLEAN, CategoryResult(score=40), 60)
        assert blend.final_score == 48
        assert blend.weights == {"ruleBased": "60%", "ai": "40%"}

    def test_urgency_example(self):
        assert blend_scores(CLEAN, CategoryResult(score=10), 0).final_score == 6

    @pytest.mark.parametrize("rule,ai,expected", [
        (0, 0, 0),
        (100, 100, 100),
        (1, 0, 1),     # 0.6 rounds up
        (0, 1, 0),     # 0.4 rounds down
        (5, 5, 5),
        (25, 90, 51),  # 15 + 36
        (35, 55, 43),  # 21 + 22
    ])
    def test_rounding(self, rule, ai, expected):
        assert blend_scores(CLEAN, CategoryResult(score=rule), ai).final_score == expected

    def test_out_of_range_ai_is_clamped(self):
        assert blend_scores(CLEAN, CategoryResult(score=0), 150).final_score == 40
        assert blend_scores(CLEAN, CategoryResult(score=50), -20).final_score == 30
        assert blend_scores(CLEAN, CategoryResult(score=0), 150).ai_score == 100

    def test_missing_category_counts_as_zero(self):
        assert blend_scores(CLEAN, None, 50).final_score == 20


class TestClampScore:
    @pytest.mark.parametrize("value,expected", [
        (49.5, 50), (49.4, 49), (-3, 0), (101, 100), (0.5, 1), (72, 72),
    ])
    def test_clamp(self, value, expected):
        assert clamp_score(value) == expected


class TestVerdict:
    @pytest.mark.parametrize("score,expected", [
        (0, Verdict.LIKELY_LEGIT),
        (30, Verdict.LIKELY_LEGIT),
        (31, Verdict.SUSPICIOUS),
        (70, Verdict.SUSPICIOUS),
        (71, Verdict.POTENTIAL_SCAM),
        (100, Verdict.POTENTIAL_SCAM),
    ])
    def test_thresholds(self, score, expected):
        assert classify_verdict(score, False) is expected

    @pytest.mark.parametrize("score", [0, 30, 50, 100])
    def test_critical_always_scam(self, score):
        assert classify_verdict(score, True) is Verdict.POTENTIAL_SCAM

    def test_verdict_values(self):
        assert [v.value for v in Verdict] == ["Likely Legit", "Suspicious", "Potential Scam"]
