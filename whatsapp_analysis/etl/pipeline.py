"""
Pipeline orchestration.

This module composes the parser and the chart aggregator into a single run
over one chat export.

Pipeline Steps:
    1. Read the export file (UTF-8, BOM tolerated)
    2. Load the contact replacement table
    3. Parse messages (continuation joining, name resolution)
    4. Queue unresolved contact names for curation (at most once)
    5. Aggregate by day, month and year

If no message can be extracted the run stops after step 3 with
NoMessagesError and no chart data is produced.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from pathlib import Path
from typing import List, Optional

from whatsapp_analysis.etl.aggregators import ChartData, build_chart_data, collect_contacts
from whatsapp_analysis.etl.contacts import ContactRegistry
from whatsapp_analysis.etl.parser import Message, parse_chat
from whatsapp_analysis.exceptions import ExportNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of a pipeline run."""

    messages: List[Message]
    unresolved_names: List[str]
    chart_data: ChartData
    names_queued: int = 0
    export_path: Optional[Path] = None
    duration_seconds: float = 0.0
    contacts: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        source = f" from {self.export_path.name}" if self.export_path else ""
        unresolved_info = ""
        if self.unresolved_names:
            unresolved_info = (
                f"\n  Unresolved contacts: {len(self.unresolved_names)}"
                f" ({self.names_queued} newly queued)"
            )
        return (
            f"Analysis SUCCESS{source}\n"
            f"  Messages: {len(self.messages)} from {len(self.contacts)} contacts"
            f"{unresolved_info}\n"
            f"  Buckets: {len(self.chart_data.by_day)} days, "
            f"{len(self.chart_data.by_month)} months, {len(self.chart_data.by_year)} years\n"
            f"  Duration: {self.duration_seconds:.2f}s"
        )


def read_export(path: Path) -> str:
    """
    Read the content of a chat export file.

    Raises:
        ExportNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise ExportNotFoundError(f"Chat export not found at {path}.")
    return path.read_text(encoding="utf-8-sig")


def run_pipeline(
    raw_text: str,
    registry: Optional[ContactRegistry] = None,
    tz: Optional[tzinfo] = None,
    persist_unresolved: bool = True,
) -> PipelineResult:
    """
    Run parsing and aggregation over the content of a chat export.

    Args:
        raw_text: Full export content.
        registry: Contact registry. None resolves no names.
        tz: Display timezone for message dates. None means system local.
        persist_unresolved: Queue unresolved names in the registry's store.

    Returns:
        PipelineResult with messages and chart data.

    Raises:
        NoMessagesError: If no message could be extracted.
    """
    start_time = datetime.now()
    if registry is None:
        registry = ContactRegistry()

    logger.info("Step 1: Parsing messages...")
    parsed = parse_chat(raw_text, registry, tz=tz)

    names_queued = 0
    if persist_unresolved and parsed.unresolved_names:
        logger.info("Step 2: Saving unresolved contact names...")
        names_queued = registry.save_replacements(parsed.unresolved_names)

    logger.info("Step 3: Aggregating chart data...")
    chart_data = build_chart_data(parsed.messages)

    contacts = collect_contacts(parsed.messages)
    duration = (datetime.now() - start_time).total_seconds()

    return PipelineResult(
        messages=parsed.messages,
        unresolved_names=parsed.unresolved_names,
        chart_data=chart_data,
        names_queued=names_queued,
        duration_seconds=duration,
        contacts=contacts,
    )


def analyze_export(
    export_path: Path,
    replacements_path: Optional[Path] = None,
    tz: Optional[tzinfo] = None,
    persist_unresolved: bool = True,
) -> PipelineResult:
    """
    Run the full pipeline on an export file.

    Args:
        export_path: Path to the chat export (_chat.txt).
        replacements_path: Optional path to the contact replacements file.
        tz: Display timezone for message dates. None means system local.
        persist_unresolved: Queue unresolved names in the replacements file.

    Returns:
        PipelineResult with messages and chart data.
    """
    export_path = Path(export_path)
    raw_text = read_export(export_path)
    logger.info(f"Read {len(raw_text):,} characters from {export_path}")

    registry = (
        ContactRegistry.from_file(Path(replacements_path))
        if replacements_path
        else ContactRegistry()
    )
    logger.info(f"Loaded {len(registry)} contact replacements")

    result = run_pipeline(raw_text, registry, tz=tz, persist_unresolved=persist_unresolved)
    result.export_path = export_path
    logger.info(f"Analysis completed in {result.duration_seconds:.2f}s")
    return result
