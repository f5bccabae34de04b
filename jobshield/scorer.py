"""
Risk Score Blender and Verdict Classifier

Combines the rule-based score with the externally supplied AI score.

  Critical hit:  rule score 100, AI ignored, final score >= 85 (= 100),
                 verdict forced to Potential Scam.
  Otherwise:     final = round_half_up(rule * 0.6 + ai * 0.4)
                 <= 30 Likely Legit, <= 70 Suspicious, > 70 Potential Scam.

The override contract lives in BLEND_POLICIES, keyed by the terminal
engine state, so both paths are plain data rather than branches.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from jobshield.categories import CategoryResult
from jobshield.critical import CriticalResult

Number = Union[int, float]

LEGIT_MAX = 30
SUSPICIOUS_MAX = 70


class Verdict(str, Enum):
    LIKELY_LEGIT = "Likely Legit"
    SUSPICIOUS = "Suspicious"
    POTENTIAL_SCAM = "Potential Scam"


class EngineState(str, Enum):
    """Scanning -> CriticalHit | Completed."""
    SCANNING = "scanning"
    CRITICAL_HIT = "critical_hit"
    COMPLETED = "completed"


@dataclass(frozen=True)
class BlendPolicy:
    """How a terminal state turns scores into a verdict."""
    rule_weight: int              # percent
    ai_weight: int                # percent
    rule_label: str
    ai_label: str
    score_floor: int = 0
    forced_rule_score: Optional[int] = None
    forced_verdict: Optional[Verdict] = None


BLEND_POLICIES: dict[EngineState, BlendPolicy] = {
    EngineState.CRITICAL_HIT: BlendPolicy(
        rule_weight=100,
        ai_weight=0,
        rule_label="100%",
        ai_label="0% (overridden by critical rule)",
        score_floor=85,
        forced_rule_score=100,
        forced_verdict=Verdict.POTENTIAL_SCAM,
    ),
    EngineState.COMPLETED: BlendPolicy(
        rule_weight=60,
        ai_weight=40,
        rule_label="60%",
        ai_label="40%",
    ),
}


@dataclass(frozen=True)
class BlendResult:
    final_score: int
    rule_score: int
    ai_score: int
    weights: dict[str, str]


def clamp_score(value: Number) -> int:
    """Round half-up and clamp to [0, 100]."""
    if isinstance(value, float):
        value = int(value + 0.5) if value >= 0 else -int(-value + 0.5)
    return max(0, min(100, int(value)))


def state_for(critical: CriticalResult) -> EngineState:
    return EngineState.CRITICAL_HIT if critical.detected else EngineState.COMPLETED


def blend_scores(
    critical: CriticalResult,
    category: Optional[CategoryResult],
    ai_score: Number,
) -> BlendResult:
    """Blend rule and AI scores according to the scan outcome."""
    policy = BLEND_POLICIES[state_for(critical)]
    ai = clamp_score(ai_score)

    if policy.forced_rule_score is not None:
        rule = policy.forced_rule_score
    else:
        rule = clamp_score(category.score if category else 0)

    # Integer arithmetic keeps .5 boundaries exact: (r*60 + a*40 + 50) // 100
    weighted = rule * policy.rule_weight + ai * policy.ai_weight
    final = (weighted + 50) // 100
    final = max(policy.score_floor, final)

    return BlendResult(
        final_score=clamp_score(final),
        rule_score=rule,
        ai_score=ai,
        weights={"ruleBased": policy.rule_label, "ai": policy.ai_label},
    )


def classify_verdict(final_score: Number, has_critical_flag: bool) -> Verdict:
    """Map a final score to a verdict. A critical flag always wins."""
    if has_critical_flag:
        forced = BLEND_POLICIES[EngineState.CRITICAL_HIT].forced_verdict
        if forced is not None:
            return forced
    if final_score <= LEGIT_MAX:
        return Verdict.LIKELY_LEGIT
    if final_score <= SUSPICIOUS_MAX:
        return Verdict.SUSPICIOUS
    return Verdict.POTENTIAL_SCAM
