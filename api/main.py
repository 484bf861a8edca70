"""
Klartext API — Main Application

POST   /analyze        — Validate, extract and score a letter
POST   /highlight      — Highlight spans for a text
POST   /extract        — Extract dates, amounts, IBANs, references, deadline
GET    /keywords       — Keyword dictionary (optionally by urgency tier)
GET    /patterns       — Context modifier patterns
GET    /history        — Recent analyses (newest first)
GET    /history/{id}   — One history entry
DELETE /history/{id}   — Delete one history entry
DELETE /history        — Clear the history
GET    /health         — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from klartext import __version__
from klartext.analyzer import InvalidLetterError, analyze_letter
from klartext.config import settings
from klartext.extractor import extract_data
from klartext.highlighter import get_highlight_spans
from klartext.history import (
    INPUT_SOURCE_LABELS,
    HistoryEntry,
    create_history_entry,
    history_store,
)
from klartext.keywords import ALL_KEYWORDS, get_keywords
from klartext.logging import get_logger, setup_logging
from klartext.patterns import get_patterns
from klartext.schemas.analysis import (
    AnalyzeRequest,
    AnalyzeResponse,
    DeleteResponse,
    ExtractedResponse,
    HealthResponse,
    HighlightResponse,
    HistoryEntryResponse,
    HistoryResponse,
    KeywordsResponse,
    PatternsResponse,
    TextRequest,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Klartext API starting",
                extra={"engine_version": settings.ENGINE_VERSION})
    yield
    logger.info("Klartext API shutting down")


app = FastAPI(
    title="Klartext API",
    description="Urgency classification for German official letters",
    version=f"{__version__} (engine {settings.ENGINE_VERSION})",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Log the traceback, answer with a generic 500 body."""
    logger.error(
        "Unhandled %s on %s", type(exc).__name__, request.url.path,
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The letter could not be analyzed."},
    )


def _history_entry_response(entry: HistoryEntry) -> dict:
    data = entry.to_dict()
    data["input_source_label"] = INPUT_SOURCE_LABELS.get(entry.input_source, entry.input_source)
    return data


# ============================================================
# ROUTES
# ============================================================

@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest):
    """Analyze a letter and return its urgency verdict."""
    try:
        analysis = analyze_letter(
            request.text, include_highlights=request.include_highlights,
        )
    except InvalidLetterError as e:
        raise HTTPException(422, e.message)

    history_id: Optional[str] = None
    if request.save_to_history:
        entry = create_history_entry(analysis.scoring, request.text, request.input_source)
        history_id = history_store.save(entry)
        logger.info(
            "History entry saved",
            extra={"entry_id": history_id, "input_source": request.input_source},
        )

    return {
        "text": analysis.text,
        "extracted": asdict(analysis.extracted),
        "scoring": asdict(analysis.scoring),
        "highlights": asdict(analysis.highlights) if analysis.highlights else None,
        "history_id": history_id,
    }


@app.post("/highlight", response_model=HighlightResponse)
async def highlight(request: TextRequest):
    """Highlight spans for the text exactly as submitted."""
    return asdict(get_highlight_spans(request.text))


@app.post("/extract", response_model=ExtractedResponse)
async def extract(request: TextRequest):
    return asdict(extract_data(request.text))


@app.get("/keywords", response_model=KeywordsResponse)
async def keywords(
    urgency: Optional[str] = Query(None, pattern="^(red|yellow|green)$"),
):
    """Return the keyword dictionary, optionally for a single urgency tier."""
    entries = get_keywords(urgency)
    return {"keywords": entries, "total": len(entries)}


@app.get("/patterns", response_model=PatternsResponse)
async def patterns():
    """Return all context modifier patterns with their kinds and reductions."""
    entries = get_patterns()
    return {"patterns": entries, "total": len(entries)}


@app.get("/history", response_model=HistoryResponse)
async def get_history(limit: int = Query(20, ge=1, le=100)):
    entries = history_store.get_recent(limit=limit)
    return {
        "entries": [_history_entry_response(e) for e in entries],
        "total_count": history_store.get_count(),
    }


@app.get("/history/{entry_id}", response_model=HistoryEntryResponse)
async def get_history_entry(entry_id: str):
    entry = history_store.get(entry_id)
    if entry is None:
        raise HTTPException(404, "History entry not found.")
    return _history_entry_response(entry)


@app.delete("/history/{entry_id}", response_model=DeleteResponse)
async def delete_history_entry(entry_id: str):
    if not history_store.delete(entry_id):
        raise HTTPException(404, "History entry not found.")
    logger.info("History entry deleted", extra={"entry_id": entry_id})
    return {"deleted": 1}


@app.delete("/history", response_model=DeleteResponse)
async def clear_history():
    deleted = history_store.clear()
    logger.info("History cleared", extra={"deleted": deleted})
    return {"deleted": deleted}


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "engine_version": settings.ENGINE_VERSION,
        "keywords": len(ALL_KEYWORDS),
        "patterns": len(get_patterns()),
        "history_entries": history_store.get_count(),
    }


# ============================================================
# MIDDLEWARE
# ============================================================

_RESPONSE_HEADERS = {
    "X-Klartext-Version": __version__,
    "X-Engine-Version": settings.ENGINE_VERSION,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}

# Letters are capped at MAX_TEXT_LENGTH characters; 1 MB leaves room for JSON and UTF-8
_MAX_BODY_BYTES = 1_048_576


def _body_too_large() -> JSONResponse:
    return JSONResponse(status_code=413, content={"detail": "Request body too large."})


@app.middleware("http")
async def add_response_headers(request: Request, call_next):
    """Stamp version and security headers on every response."""
    response = await call_next(request)
    response.headers.update(_RESPONSE_HEADERS)
    return response


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject bodies over 1 MB, by declared length first, then by actual size."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > _MAX_BODY_BYTES:
        return _body_too_large()

    if request.method == "POST" and len(await request.body()) > _MAX_BODY_BYTES:
        return _body_too_large()

    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One log line per request; health probes are not logged."""
    if request.url.path == "/health":
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000, 1)

    logger.info(
        "%s %s -> %d (%.1fms)", request.method, request.url.path,
        response.status_code, duration_ms,
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
