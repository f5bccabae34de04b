"""
API Schemas — Response Models

Pydantic models for the JobShield API. The analyze endpoint takes
multipart form data, so only responses are modelled here.
"""

from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel, Field


Status = Literal["Likely Legit", "Suspicious", "Potential Scam"]


# ============================================================
# ANALYSIS
# ============================================================

class Weights(BaseModel):
    ruleBased: str
    ai: str


class Breakdown(BaseModel):
    ruleBasedScore: int = Field(..., ge=0, le=100)
    aiScore: int = Field(..., ge=0, le=100)
    weights: Weights


class AnalysisData(BaseModel):
    """Scored posting as returned by POST /api/analyze-job."""
    id: str
    riskScore: int = Field(..., ge=0, le=100)
    status: Status
    reasons: list[str] = Field(..., max_length=10)
    aiConfidence: int = Field(..., ge=0, le=100)
    hasCriticalFlags: bool
    criticalReason: Optional[str] = None
    breakdown: Breakdown
    hasImage: bool = False
    extractedTextLength: int = 0
    aiSkipped: bool = False
    createdAt: str


class AnalyzeResponse(BaseModel):
    success: bool = True
    message: str
    data: AnalysisData


# ============================================================
# HISTORY
# ============================================================

class StoredAnalysis(BaseModel):
    id: str
    jobText: str
    extractedImageText: str
    imageName: Optional[str] = None
    riskScore: int
    status: Status
    reasons: list[str]
    aiConfidence: int
    hasCriticalFlags: bool
    criticalReason: Optional[str] = None
    breakdown: Breakdown
    createdAt: str


class Pagination(BaseModel):
    total: int
    page: int
    pages: int
    limit: int


class HistoryData(BaseModel):
    analyses: list[StoredAnalysis]
    pagination: Pagination


class HistoryResponse(BaseModel):
    success: bool = True
    data: HistoryData


class AnalysisResponse(BaseModel):
    success: bool = True
    data: StoredAnalysis


class MessageResponse(BaseModel):
    success: bool
    message: str


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    catalog_version: str
    ai_provider: str
    mock_mode: bool
    skip_ai_on_critical: bool
    stored_analyses: int
