"""
Pytest fixtures for WhatsApp Analysis tests.

This module provides shared fixtures for testing the parser, the aggregator
and the pipeline, including a sample chat export.

Fixture Categories:
    1. Export fixtures (sample export text and file)
    2. Contact fixtures (replacements file, registry)
    3. Parsed data fixtures (messages, chart data)

Design Notes:
    - Fixtures use tmp_path for isolation between tests
    - Dates are rendered in UTC so expectations do not depend on the
      machine timezone
    - The sample export contains a system notice, a multi-line message,
      an invisible direction mark and a body with an embedded colon
"""

import json
from datetime import timezone
from pathlib import Path
from typing import List

import pytest

from whatsapp_analysis.config import set_config
from whatsapp_analysis.etl.aggregators import ChartData, build_chart_data
from whatsapp_analysis.etl.contacts import ContactRegistry
from whatsapp_analysis.etl.parser import Message, parse_chat

UTC = timezone.utc

SAMPLE_EXPORT_LINES = [
    "[01/02/2023, 10:00:00] Messages and calls are end-to-end encrypted.",
    "[01/02/2023, 10:00:05] Alice: Hello",
    "[01/02/2023, 10:01:00] Bob: Hi there",
    "how are you?",
    "[02/02/2023, 08:30:00] \u200eCarol Jones: Meeting at 10: ok?",
    "[15/03/2023, 21:15:00] Alice: See you",
    "[31/12/2023, 23:59:59] Bob: Happy new year",
    "[01/01/2024, 00:00:01] Alice: \U0001f389",
]

SAMPLE_REPLACEMENTS = {
    "Bob": "Robert",
    "Dave": "",
}


# =============================================================================
# Export fixtures
# =============================================================================


@pytest.fixture
def sample_export_text() -> str:
    """Sample export content, as a file on disk would contain it."""
    return "\n".join(SAMPLE_EXPORT_LINES) + "\n"


@pytest.fixture
def sample_export_file(tmp_path: Path, sample_export_text: str) -> Path:
    """
    Write the sample export to a _chat.txt file.

    Returns:
        Path to the sample export.
    """
    path = tmp_path / "_chat.txt"
    path.write_text(sample_export_text, encoding="utf-8")
    return path


@pytest.fixture
def empty_export_file(tmp_path: Path) -> Path:
    """An export file without a single message line."""
    path = tmp_path / "empty_chat.txt"
    path.write_text("This is not a chat export\nat all\n", encoding="utf-8")
    return path


# =============================================================================
# Contact fixtures
# =============================================================================


@pytest.fixture
def replacements_file(tmp_path: Path) -> Path:
    """
    Replacements file with one curated entry and one queued entry.

    Returns:
        Path to replacements.json.
    """
    path = tmp_path / "replacements.json"
    path.write_text(json.dumps(SAMPLE_REPLACEMENTS), encoding="utf-8")
    return path


@pytest.fixture
def registry(replacements_file: Path) -> ContactRegistry:
    """Registry loaded from the sample replacements file."""
    return ContactRegistry.from_file(replacements_file)


# =============================================================================
# Parsed data fixtures
# =============================================================================


@pytest.fixture
def sample_messages(sample_export_text: str) -> List[Message]:
    """Messages of the sample export, with Bob resolved to Robert."""
    return parse_chat(sample_export_text, ContactRegistry({"Bob": "Robert"}), tz=UTC).messages


@pytest.fixture
def sample_chart_data(sample_messages: List[Message]) -> ChartData:
    """Chart data of the sample export."""
    return build_chart_data(sample_messages)


@pytest.fixture(autouse=True)
def reset_global_config():
    """Reset the global configuration between tests."""
    set_config(None)
    yield
    set_config(None)


def pytest_configure(config):
    config.addinivalue_line("markers", "property: Hypothesis property-based tests")
