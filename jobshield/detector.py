"""
Detector — Analysis Orchestrator

Coordinates the collaborators around the pure risk engine:

  1. OCR:      extract text from the uploaded image (if any)
  2. Combine:  typed text + extracted text
  3. Critical: run the critical scan first
  4. AI:       ask the AI scorer, unless a critical hit already decided
               the verdict and skipping is enabled
  5. Engine:   blend, classify, aggregate reasons
  6. Trace:    emit the engine's decision trace to the log

The engine never logs; this module is where its trace is written out.
"""

from __future__ import annotations

import logging
from typing import Optional

from jobshield.ai_scorer import AIAssessment, AIScorer
from jobshield.engine import Evaluation, RiskEngine, engine as default_engine
from jobshield.logging import emit_trace
from jobshield.ocr import NullTextExtractor, TextExtractor, combine_text

logger = logging.getLogger(__name__)


def log_trace(evaluation: Evaluation) -> None:
    """Write each engine decision at the configured trace level."""
    emit_trace(logger, evaluation.trace)


async def analyze_posting(
    job_text: Optional[str],
    image: Optional[bytes] = None,
    mime_type: Optional[str] = None,
    *,
    ai_scorer: AIScorer,
    text_extractor: Optional[TextExtractor] = None,
    skip_ai_on_critical: bool = True,
    risk_engine: Optional[RiskEngine] = None,
) -> dict:
    """
    Analyze a job posting end to end.

    Returns the engine's wire dict plus ``extractedText``,
    ``extractedTextLength``, ``aiSkipped`` and ``aiSource``.
    """
    risk_engine = risk_engine or default_engine
    text_extractor = text_extractor or NullTextExtractor()

    extracted = ""
    if image:
        extracted = await text_extractor.extract_text(image, mime_type or "image/png")
        logger.info("Extracted %d characters from image", len(extracted))

    text = combine_text(job_text, extracted)

    critical = risk_engine.scan_critical(text)
    # Blank text and critical hits never need the AI call
    ai_skipped = not text or (critical.detected and skip_ai_on_critical)
    if ai_skipped:
        ai = AIAssessment.skipped()
    else:
        ai = await ai_scorer.analyze(text)

    evaluation = risk_engine.evaluate(text, ai, critical=critical)
    log_trace(evaluation)

    result = evaluation.result
    logger.info(
        "Analysis complete: score=%d status=%s", result.score, result.verdict.value,
        extra={
            "score": result.score,
            "status": result.verdict.value,
            "has_critical": result.has_critical_flag,
            "ai_source": ai.source,
            "ai_skipped": ai_skipped,
        },
    )

    payload = result.to_dict()
    payload.update({
        "extractedText": extracted,
        "extractedTextLength": len(extracted),
        "aiSkipped": ai_skipped,
        "aiSource": ai.source,
    })
    return payload
