"""
FastAPI backend for WhatsApp Analysis.

IMPORTANT: This API is read-only. It parses the chat export on each request
and NEVER writes unresolved contact names to the replacements file.

Configure it with environment variables (see Config.from_env):
    WHATSAPP_EXPORT_PATH, WHATSAPP_REPLACEMENTS_PATH, WHATSAPP_TIMEZONE
"""

from __future__ import annotations

import os
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from whatsapp_analysis.analysis import (
    get_chat_summary,
    get_contact_totals,
    get_latest_messages,
)
from whatsapp_analysis.config import Config
from whatsapp_analysis.etl.aggregators import Granularity, buckets_to_records
from whatsapp_analysis.etl.pipeline import PipelineResult, analyze_export
from whatsapp_analysis.exceptions import (
    ExportNotFoundError,
    NoMessagesError,
    ReplacementsFileError,
)
from whatsapp_analysis.logger_config import setup_logging


def _run_analysis() -> PipelineResult:
    """
    Run the pipeline on the configured export.

    Raises HTTPException if the export is missing or unreadable.
    """
    config = Config.from_env()
    try:
        return analyze_export(
            config.export_path,
            config.replacements_path,
            tz=config.timezone,
            persist_unresolved=False,
        )
    except ExportNotFoundError:
        raise HTTPException(
            status_code=503,
            detail={
                "error": "chat export not found",
                "message": "Set WHATSAPP_EXPORT_PATH to a WhatsApp _chat.txt export",
                "path": config.export_path_str,
            },
        )
    except NoMessagesError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "no messages", "message": str(e), "path": config.export_path_str},
        )
    except ReplacementsFileError as e:
        raise HTTPException(
            status_code=500,
            detail={"error": "invalid replacements file", "message": str(e)},
        )


app = FastAPI(
    title="WhatsApp Analysis API",
    version="0.1.0",
    description="Read-only API over a WhatsApp chat export.",
)

# Local dev CORS defaults
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        os.getenv("WHATSAPP_ALLOWED_ORIGIN", "http://127.0.0.1:5173"),
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> Dict[str, Any]:
    """Health check - also verifies the chat export is accessible."""
    config = Config.from_env()
    exists = config.validate()
    return {
        "status": "ok" if exists else "degraded",
        "export_exists": exists,
        "export_path": config.export_path_str,
    }


@app.get("/summary")
def summary() -> Dict[str, Any]:
    """Get summary statistics for the chat."""
    return get_chat_summary(_run_analysis())


@app.get("/contacts")
def contacts() -> List[Dict[str, Any]]:
    """Get message and character totals per contact."""
    return get_contact_totals(_run_analysis().messages)


@app.get("/messages")
def messages(limit: int = Query(default=50, ge=1, le=1000)) -> List[Dict[str, Any]]:
    """Get the latest messages, newest first."""
    return get_latest_messages(_run_analysis().messages, limit=limit)


@app.get("/charts/{granularity}")
def charts(granularity: str) -> List[Dict[str, Any]]:
    """Get chart records (date + per-contact counters) for a granularity."""
    try:
        selected = Granularity(granularity)
    except ValueError:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown granularity '{granularity}', expected day, month or year",
        )

    result = _run_analysis()
    return buckets_to_records(result.chart_data.get(selected), result.contacts)


def main() -> None:
    """Serve the API with uvicorn (API_HOST / API_PORT, default 127.0.0.1:8000)."""
    setup_logging()
    uvicorn.run(
        app,
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
