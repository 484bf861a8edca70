"""
API Schemas — Request and Response Models

Pydantic models for the Klartext API.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


# ============================================================
# ANALYZE
# ============================================================

class AnalyzeRequest(BaseModel):
    """POST /analyze request body."""
    text: str = Field(..., min_length=1, max_length=200_000,
                      description="Raw letter text (OCR output, PDF text or typed).")
    input_source: str = Field("text", pattern="^(pdf|camera|text)$",
                              description="Where the text came from.")
    include_highlights: bool = Field(False, description="Also return highlight spans.")
    save_to_history: bool = Field(False, description="Store a reduced entry in the history.")

    model_config = {"json_schema_extra": {"examples": [
        {"text": "Es droht eine Pfändung Ihres Kontos. Reagieren Sie innerhalb von 3 Tagen.",
         "input_source": "text"},
    ]}}


class TextRequest(BaseModel):
    """POST /highlight and POST /extract request body."""
    text: str = Field(..., min_length=1, max_length=200_000)


class MatchResponse(BaseModel):
    keyword: str
    category: str
    urgency: str
    original_weight: int
    effective_weight: int
    is_neutralized: bool
    reason: str
    context: str
    rule: str


class ScoringResponse(BaseModel):
    urgency: str
    score: int
    category: str
    category_label: str
    matches: list[MatchResponse]
    summary: str
    urgency_description: str
    recommendations: list[str]
    engine_version: str


class AmountResponse(BaseModel):
    value: float
    formatted: str


class ExtractedResponse(BaseModel):
    dates: list[str]
    amounts: list[AmountResponse]
    ibans: list[str]
    references: list[str]
    deadline_days: Optional[int] = None


class HighlightSpanResponse(BaseModel):
    keyword: str
    start: int
    end: int
    urgency: str
    category: str
    is_neutralized: bool
    reason: str
    original_weight: int
    effective_weight: int
    sentence_context: str


class HighlightResponse(BaseModel):
    spans: list[HighlightSpanResponse]
    active_count: dict[str, int]
    neutralized_count: int


class AnalyzeResponse(BaseModel):
    """POST /analyze response body."""
    text: str
    extracted: ExtractedResponse
    scoring: ScoringResponse
    highlights: Optional[HighlightResponse] = None
    history_id: Optional[str] = None


# ============================================================
# DICTIONARIES
# ============================================================

class KeywordEntry(BaseModel):
    keyword: str
    category: str
    urgency: str
    weight: int


class KeywordsResponse(BaseModel):
    keywords: list[KeywordEntry]
    total: int


class PatternEntry(BaseModel):
    table: str
    name: str
    kind: str
    regex: str
    reduction: float
    neutralizes: bool


class PatternsResponse(BaseModel):
    patterns: list[PatternEntry]
    total: int


# ============================================================
# HISTORY
# ============================================================

class HistoryMatchResponse(BaseModel):
    keyword: str
    weight: int
    effective_weight: int
    is_neutralized: bool
    reason: str


class HistoryEntryResponse(BaseModel):
    id: str
    timestamp: int
    input_source: str
    input_source_label: str
    urgency: str
    score: int
    category: str
    category_label: str
    preview: str
    summary: str
    matches: list[HistoryMatchResponse]
    recommendations: list[str]


class HistoryResponse(BaseModel):
    entries: list[HistoryEntryResponse]
    total_count: int


class DeleteResponse(BaseModel):
    deleted: int


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    engine_version: str
    keywords: int
    patterns: int
    history_entries: int
