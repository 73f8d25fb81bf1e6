"""
Analysis functions for parsed WhatsApp chats.

Provides high-level summaries over the messages and chart data of a
pipeline run.
"""

import logging
from typing import Any, Dict, List, Sequence

from whatsapp_analysis.etl.aggregators import collect_contacts
from whatsapp_analysis.etl.parser import Message
from whatsapp_analysis.etl.pipeline import PipelineResult

logger = logging.getLogger(__name__)


def get_contact_totals(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    """
    Get message and character totals per contact.

    Args:
        messages: Parsed messages.

    Returns:
        List of dictionaries with keys: contact, message_count,
        character_count, percentage. Sorted by message count, most active
        first; ties keep first-appearance order.
    """
    totals: Dict[str, Dict[str, Any]] = {
        contact: {"contact": contact, "message_count": 0, "character_count": 0}
        for contact in collect_contacts(messages)
    }

    for message in messages:
        totals[message.contact]["message_count"] += 1
        totals[message.contact]["character_count"] += message.chars

    total_messages = len(messages)
    for stats in totals.values():
        stats["percentage"] = (
            round(stats["message_count"] / total_messages * 100, 1) if total_messages else 0.0
        )

    result = sorted(totals.values(), key=lambda stats: stats["message_count"], reverse=True)
    logger.info(f"Computed totals for {len(result)} contacts")
    return result


def get_latest_messages(messages: Sequence[Message], limit: int = 10) -> List[Dict[str, Any]]:
    """
    Get the latest messages, newest first.

    Args:
        messages: Parsed messages in file order.
        limit: Number of messages to return.
    """
    if limit <= 0:
        return []
    return [message.to_dict() for message in reversed(messages[-limit:])]


def get_chat_summary(result: PipelineResult) -> Dict[str, Any]:
    """
    Get a summary of a pipeline run.

    Args:
        result: Pipeline result.

    Returns:
        Dictionary with message, character and contact totals, the date range
        and the bucket count per granularity.
    """
    messages = result.messages

    summary: Dict[str, Any] = {
        "total_messages": len(messages),
        "total_characters": sum(message.chars for message in messages),
        "total_contacts": len(collect_contacts(messages)),
        "unresolved_contacts": len(result.unresolved_names),
        "first_message_date": messages[0].date if messages else None,
        "last_message_date": messages[-1].date if messages else None,
        "buckets": {
            "day": len(result.chart_data.by_day),
            "month": len(result.chart_data.by_month),
            "year": len(result.chart_data.by_year),
        },
    }

    logger.info("Generated chat summary")
    return summary
