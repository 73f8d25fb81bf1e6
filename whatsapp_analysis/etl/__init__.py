"""
ETL (Extract, Transform, Load) module for WhatsApp Analysis.

Turns a plain-text WhatsApp chat export into messages and chart data.

Architecture Overview:
    _chat.txt  →  parser  →  [Message]  →  aggregators  →  ChartData
                    ↑                                      ├── by_day
            contacts (replacements.json)                   ├── by_month
                                                           └── by_year

Key Design Decisions:
    1. The export is treated as loosely structured text, parsed best-effort
    2. Contact names are cleaned of invisible marks before lookup
    3. Unresolved names are queued in the replacements file for curation
    4. Aggregation is a pure function of the message list
"""

from whatsapp_analysis.etl.normalizers import (
    clean_contact_name,
    contact_field_prefix,
    build_field_prefixes,
)
from whatsapp_analysis.etl.contacts import ContactRegistry, ReplacementStore
from whatsapp_analysis.etl.parser import (
    Message,
    ParseResult,
    join_continuation_lines,
    parse_chat,
    parse_message_block,
)
from whatsapp_analysis.etl.aggregators import (
    ChartBucket,
    ChartData,
    ContactCounter,
    Granularity,
    aggregate,
    bucket_key,
    build_chart_data,
    buckets_to_records,
)
from whatsapp_analysis.etl.pipeline import (
    PipelineResult,
    analyze_export,
    read_export,
    run_pipeline,
)

__all__ = [
    # Normalizers
    "clean_contact_name",
    "contact_field_prefix",
    "build_field_prefixes",
    # Contacts
    "ContactRegistry",
    "ReplacementStore",
    # Parser
    "Message",
    "ParseResult",
    "join_continuation_lines",
    "parse_chat",
    "parse_message_block",
    # Aggregators
    "ChartBucket",
    "ChartData",
    "ContactCounter",
    "Granularity",
    "aggregate",
    "bucket_key",
    "build_chart_data",
    "buckets_to_records",
    # Pipeline
    "PipelineResult",
    "analyze_export",
    "read_export",
    "run_pipeline",
]
