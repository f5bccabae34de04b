"""
JobShield — Job Posting Fraud-Risk Scoring

A deterministic rule engine that scores job postings for scam risk,
blended with an externally supplied AI assessment.

Public API:
  - engine:            Pure scoring pipeline (RiskEngine singleton)
  - CATALOG:           Immutable detection rules
  - critical_detector: Payment/fee override scan
  - category_scorer:   Weighted heuristic categories
  - blend_scores / classify_verdict: Score blending and verdicts
  - aggregate_reasons / OrderedSet:  Explanation merging
  - analyze_posting:   Async orchestrator (OCR + AI + engine)

Usage:
    from jobshield import engine, AIAssessment
    evaluation = engine.evaluate(text, AIAssessment(score=40, confidence=70))
    evaluation.result.to_dict()
"""

__version__ = "1.0.0"

from jobshield.catalog import CATALOG, CATALOG_VERSION, PatternCatalog, PatternRule, HeuristicCategory
from jobshield.critical import CriticalDetector, CriticalResult, MatchSpan, critical_detector
from jobshield.categories import CategoryResult, CategoryScorer, category_scorer
from jobshield.scorer import EngineState, Verdict, blend_scores, classify_verdict
from jobshield.reasons import OrderedSet, aggregate_reasons
from jobshield.ai_scorer import AIAssessment, AIScorer, HeuristicAIScorer, LLMAIScorer
from jobshield.engine import AnalysisResult, Evaluation, RiskEngine, TraceEvent, engine
from jobshield.detector import analyze_posting

__all__ = [
    "CATALOG",
    "CATALOG_VERSION",
    "PatternCatalog",
    "PatternRule",
    "HeuristicCategory",
    "CriticalDetector",
    "CriticalResult",
    "MatchSpan",
    "critical_detector",
    "CategoryResult",
    "CategoryScorer",
    "category_scorer",
    "EngineState",
    "Verdict",
    "blend_scores",
    "classify_verdict",
    "OrderedSet",
    "aggregate_reasons",
    "AIAssessment",
    "AIScorer",
    "HeuristicAIScorer",
    "LLMAIScorer",
    "AnalysisResult",
    "Evaluation",
    "RiskEngine",
    "TraceEvent",
    "engine",
    "analyze_posting",
]
