"""
WhatsApp Analysis - A tool for analyzing WhatsApp plain-text chat exports.

This package provides functionality to:
- Parse a WhatsApp "Export chat" text file into messages
- Resolve contact display names through a curated replacement table
- Aggregate message and character counts by day, month and year
- Visualize the aggregated data
"""

__version__ = "0.1.0"

from whatsapp_analysis.config import get_config, Config
from whatsapp_analysis.etl.pipeline import analyze_export, run_pipeline, PipelineResult
from whatsapp_analysis.exceptions import NoMessagesError, WhatsAppAnalysisError

__all__ = [
    "get_config",
    "Config",
    "analyze_export",
    "run_pipeline",
    "PipelineResult",
    "NoMessagesError",
    "WhatsAppAnalysisError",
]
