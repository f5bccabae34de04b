"""
Risk Engine — Pure Scoring Pipeline

    text ─▶ CriticalDetector ─┬─ hit ──▶ CRITICAL_HIT (score 100, forced verdict)
                              └─ clean ─▶ CategoryScorer ─▶ blend 60/40 ─▶ COMPLETED

The engine is a deterministic function of (text, AI assessment). It
holds no per-call state, performs no I/O and never raises for any
string input. Instead of logging, it returns a decision trace that the
caller may emit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from jobshield.ai_scorer import AIAssessment
from jobshield.categories import CategoryResult, CategoryScorer, category_scorer
from jobshield.critical import CriticalDetector, CriticalResult, critical_detector
from jobshield.reasons import aggregate_reasons
from jobshield.scorer import (
    EngineState,
    Verdict,
    blend_scores,
    clamp_score,
    classify_verdict,
    state_for,
)

EMPTY_TEXT_SCORE = 50
EMPTY_TEXT_REASON = "no text provided for analysis"
EMPTY_TEXT_WEIGHTS = {"ruleBased": "100%", "ai": "0% (no text provided)"}


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class TraceEvent:
    """One decision taken by the engine."""
    event: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"event": self.event, "data": self.data}


@dataclass(frozen=True)
class AnalysisResult:
    score: int
    verdict: Verdict
    reasons: tuple[str, ...]
    has_critical_flag: bool
    critical_reason: Optional[str]
    rule_score: int
    ai_score: int
    ai_confidence: int
    weights: dict[str, str]

    def to_dict(self) -> dict:
        """Wire format shared by the API and the history store."""
        return {
            "score": self.score,
            "status": self.verdict.value,
            "reasons": list(self.reasons),
            "aiConfidence": self.ai_confidence,
            "hasCriticalFlags": self.has_critical_flag,
            "criticalReason": self.critical_reason,
            "breakdown": {
                "ruleBasedScore": self.rule_score,
                "aiScore": self.ai_score,
                "weights": dict(self.weights),
            },
        }


@dataclass(frozen=True)
class Evaluation:
    """Engine output: the result, how the run ended, and why."""
    result: AnalysisResult
    state: EngineState
    critical: CriticalResult
    category: Optional[CategoryResult]
    trace: tuple[TraceEvent, ...]


# ============================================================
# THE ENGINE
# ============================================================

class RiskEngine:
    """
    Instantiated once as a singleton. Collaborators are injected so
    tests can swap the catalog-backed detectors.
    """

    def __init__(
        self,
        detector: CriticalDetector = critical_detector,
        categories: CategoryScorer = category_scorer,
    ):
        self._detector = detector
        self._categories = categories

    def scan_critical(self, text: str) -> CriticalResult:
        """First phase on its own, so callers can skip the AI call on a hit."""
        return self._detector.detect(text or "")

    def evaluate(
        self,
        text: str,
        ai: AIAssessment,
        critical: Optional[CriticalResult] = None,
    ) -> Evaluation:
        """
        Score a posting.

        Args:
            text: Combined posting text (typed text + OCR text).
            ai: Assessment from the AI collaborator. Ignored on a critical hit
                apart from its non-neutral red flags.
            critical: A precomputed critical scan of the same text, if the
                caller already ran one.

        Returns:
            Evaluation with the final result, terminal state and trace.
        """
        text = text or ""
        trace: list[TraceEvent] = []
        ai_score = clamp_score(ai.score)
        ai_confidence = clamp_score(ai.confidence)

        if not text.strip():
            return self._empty(ai_score, ai_confidence)

        state = EngineState.SCANNING
        if critical is None:
            critical = self.scan_critical(text)
        trace.append(TraceEvent("critical_scan", {
            "detected": critical.detected,
            "matches": list(critical.matches),
            "spans": [s.to_dict() for s in critical.spans],
            "suppressed": [s.match for s in critical.suppressed],
        }))

        state = state_for(critical)
        category = None
        if state is EngineState.COMPLETED:
            category = self._categories.score(text)
            trace.append(TraceEvent("category_scored", {
                "score": category.score,
                "triggered": sorted(category.triggered_categories),
            }))

        blend = blend_scores(critical, category, ai_score)
        trace.append(TraceEvent("blended", {
            "state": state.value,
            "rule_score": blend.rule_score,
            "ai_score": blend.ai_score,
            "final_score": blend.final_score,
            "weights": blend.weights,
        }))

        verdict = classify_verdict(blend.final_score, critical.detected)
        trace.append(TraceEvent("classified", {"verdict": verdict.value}))

        reasons = aggregate_reasons(
            critical_reasons=critical.reasons,
            category_reasons=category.reasons if category else (),
            ai_red_flags=ai.red_flags,
            has_critical_flag=critical.detected,
        )

        result = AnalysisResult(
            score=blend.final_score,
            verdict=verdict,
            reasons=tuple(reasons),
            has_critical_flag=critical.detected,
            critical_reason=critical.critical_reason,
            rule_score=blend.rule_score,
            ai_score=blend.ai_score,
            ai_confidence=100 if critical.detected else ai_confidence,
            weights=blend.weights,
        )
        return Evaluation(
            result=result,
            state=state,
            critical=critical,
            category=category,
            trace=tuple(trace),
        )

    @staticmethod
    def _empty(ai_score: int, ai_confidence: int) -> Evaluation:
        """Blank input is neutral uncertainty, not an error."""
        result = AnalysisResult(
            score=EMPTY_TEXT_SCORE,
            verdict=Verdict.SUSPICIOUS,
            reasons=(EMPTY_TEXT_REASON,),
            has_critical_flag=False,
            critical_reason=None,
            rule_score=EMPTY_TEXT_SCORE,
            ai_score=ai_score,
            ai_confidence=ai_confidence,
            weights=dict(EMPTY_TEXT_WEIGHTS),
        )
        return Evaluation(
            result=result,
            state=EngineState.COMPLETED,
            critical=CriticalResult(),
            category=None,
            trace=(TraceEvent("empty_input", {"score": EMPTY_TEXT_SCORE}),),
        )


engine = RiskEngine()
