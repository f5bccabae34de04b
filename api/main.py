"""
JobShield API — Main Application

POST   /api/analyze-job      — Score a job posting (text and/or image)
GET    /api/history          — Paginated history for the caller
GET    /api/analysis/{id}    — One stored analysis
DELETE /api/analysis/{id}    — Delete a stored analysis
GET    /api/patterns         — Detection catalog (read-only)
GET    /api/health           — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from jobshield.ai_scorer import AIScorer, get_ai_scorer
from jobshield.auth import require_owner, auth_enabled
from jobshield.catalog import CATALOG, CATALOG_VERSION
from jobshield.config import settings
from jobshield.detector import analyze_posting
from jobshield.history import AnalysisStore, _get_store
from jobshield.logging import setup_logging, get_logger
from jobshield.ocr import TextExtractor, get_text_extractor
from jobshield.schemas.analysis import (
    AnalysisResponse,
    AnalyzeResponse,
    HealthResponse,
    HistoryResponse,
    MessageResponse,
)

logger = get_logger("api")

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"}


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(
        "JobShield API starting",
        extra={"data": {"auth_enabled": auth_enabled(), "ai_enabled": settings.ai_enabled}},
    )
    yield
    logger.info("JobShield API shutting down")


app = FastAPI(
    title="JobShield API",
    description="Fraud-risk scoring for job postings",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["X-API-Key", "Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# DEPENDENCIES
# ============================================================

@lru_cache(maxsize=1)
def get_store() -> AnalysisStore:
    return _get_store()


@lru_cache(maxsize=1)
def get_scorer() -> AIScorer:
    return get_ai_scorer(settings)


@lru_cache(maxsize=1)
def get_extractor() -> TextExtractor:
    return get_text_extractor(settings)


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Error analyzing job posting"},
    )


# ============================================================
# ROUTES
# ============================================================

@app.post("/api/analyze-job", response_model=AnalyzeResponse)
async def analyze_job(
    jobText: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    owner_id: str = Depends(require_owner),
    store: AnalysisStore = Depends(get_store),
    scorer: AIScorer = Depends(get_scorer),
    extractor: TextExtractor = Depends(get_extractor),
):
    """Score a job posting from typed text, an uploaded image, or both."""
    start = time.time()

    image_bytes: Optional[bytes] = None
    mime_type: Optional[str] = None
    if image is not None and image.filename:
        mime_type = (image.content_type or "").lower()
        if mime_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(415, "Only image uploads are supported.")
        image_bytes = await image.read()
        if len(image_bytes) > settings.MAX_UPLOAD_MB * 1024 * 1024:
            raise HTTPException(413, f"Image exceeds {settings.MAX_UPLOAD_MB}MB limit.")

    if not (jobText and jobText.strip()) and not image_bytes:
        raise HTTPException(400, "Please provide job description text or upload an image")

    result = await analyze_posting(
        jobText,
        image_bytes,
        mime_type,
        ai_scorer=scorer,
        text_extractor=extractor,
        skip_ai_on_critical=settings.SKIP_AI_ON_CRITICAL,
    )

    if not (jobText or "").strip() and not result["extractedText"].strip():
        raise HTTPException(400, "No text found to analyze")

    record = store.save(result, {
        "owner_id": owner_id,
        "job_text": jobText or "",
        "extracted_text": result["extractedText"],
        "image_name": image.filename if image_bytes else None,
    })

    logger.info(
        f"Analysis stored: score={result['score']} status={result['status']}",
        extra={
            "analysis_id": record["id"],
            "owner_id": owner_id,
            "score": result["score"],
            "status": result["status"],
            "duration_ms": int((time.time() - start) * 1000),
        },
    )

    return {
        "success": True,
        "message": (
            "Critical scam indicators detected"
            if result["hasCriticalFlags"] else "Job analysis completed"
        ),
        "data": {
            "id": record["id"],
            "riskScore": result["score"],
            "status": result["status"],
            "reasons": result["reasons"],
            "aiConfidence": result["aiConfidence"],
            "hasCriticalFlags": result["hasCriticalFlags"],
            "criticalReason": result["criticalReason"],
            "breakdown": result["breakdown"],
            "hasImage": image_bytes is not None,
            "extractedTextLength": result["extractedTextLength"],
            "aiSkipped": result["aiSkipped"],
            "createdAt": record["createdAt"],
        },
    }


@app.get("/api/history", response_model=HistoryResponse)
async def history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    owner_id: str = Depends(require_owner),
    store: AnalysisStore = Depends(get_store),
):
    """The caller's analyses, newest first."""
    return {"success": True, "data": store.list(owner_id, page=page, limit=limit)}


@app.get("/api/analysis/{analysis_id}", response_model=AnalysisResponse)
async def get_analysis(
    analysis_id: str,
    owner_id: str = Depends(require_owner),
    store: AnalysisStore = Depends(get_store),
):
    record = store.get(analysis_id, owner_id)
    if record is None:
        raise HTTPException(404, "Analysis not found")
    return {"success": True, "data": record}


@app.delete("/api/analysis/{analysis_id}", response_model=MessageResponse)
async def delete_analysis(
    analysis_id: str,
    owner_id: str = Depends(require_owner),
    store: AnalysisStore = Depends(get_store),
):
    if not store.delete(analysis_id, owner_id):
        raise HTTPException(404, "Analysis not found")
    logger.info("Analysis deleted", extra={"analysis_id": analysis_id, "owner_id": owner_id})
    return {"success": True, "message": "Analysis deleted successfully"}


@app.get("/api/patterns")
async def get_patterns(owner_id: str = Depends(require_owner)):
    """The detection catalog: critical rules, safe phrases and categories."""
    return CATALOG.describe()


@app.get("/api/health", response_model=HealthResponse)
async def health(store: AnalysisStore = Depends(get_store)):
    """Health check — no auth required."""
    return {
        "status": "operational",
        "version": settings.VERSION,
        "catalog_version": CATALOG_VERSION,
        "ai_provider": settings.AI_PROVIDER if settings.ai_enabled else "heuristic",
        "mock_mode": not settings.ai_enabled,
        "skip_ai_on_critical": settings.SKIP_AI_ON_CRITICAL,
        "stored_analyses": store.count(),
    }


# --- Security Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-JobShield-Version"] = settings.VERSION
    response.headers["X-Catalog-Version"] = CATALOG_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/api/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
