"""
Chart aggregation for parsed messages.

This module buckets messages by day, month and year and accumulates
per-contact message and character counters, ready for charting.

Design Decisions:
    1. The full contact list is collected in a pre-pass, so every bucket is
       seeded with a zero counter for every contact when it is created
    2. Bucket keys are truncations of the rendered message date
       (day: MM/DD/YYYY, month: MM/YYYY, year: YYYY)
    3. Buckets keep first-encounter order; there is no sort and no gap
       filling (a month without messages has no bucket)
    4. Counters are kept per contact name; the flat "Name_Messages" record
       shape is only produced at the edge, with collision-safe prefixes
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from whatsapp_analysis.etl.normalizers import FIELD_SEPARATOR, build_field_prefixes
from whatsapp_analysis.etl.parser import Message

logger = logging.getLogger(__name__)

MESSAGES_FIELD = "Messages"
CHARS_FIELD = "Chars"


class Granularity(str, Enum):
    """Time bucket size."""

    DAY = "day"
    MONTH = "month"
    YEAR = "year"


@dataclass
class ContactCounter:
    """Message and character counters for one contact in one bucket."""

    messages: int = 0
    chars: int = 0

    def add(self, message: Message) -> None:
        self.messages += 1
        self.chars += message.chars


@dataclass
class ChartBucket:
    """Aggregated counters for one time period."""

    date: str
    counters: Dict[str, ContactCounter] = field(default_factory=dict)

    @classmethod
    def seeded(cls, date: str, contacts: Iterable[str]) -> "ChartBucket":
        """Create a bucket with a zero counter for every contact."""
        return cls(date=date, counters={contact: ContactCounter() for contact in contacts})

    def to_record(self, prefixes: Dict[str, str]) -> Dict[str, Any]:
        """
        Flatten the bucket into a chart record.

        Args:
            prefixes: Contact name → field prefix, see build_field_prefixes.

        Returns:
            {"date": ..., "<prefix>_Messages": n, "<prefix>_Chars": n, ...}
        """
        record: Dict[str, Any] = {"date": self.date}
        for contact, counter in self.counters.items():
            prefix = prefixes[contact]
            record[f"{prefix}{FIELD_SEPARATOR}{MESSAGES_FIELD}"] = counter.messages
            record[f"{prefix}{FIELD_SEPARATOR}{CHARS_FIELD}"] = counter.chars
        return record


@dataclass
class ChartData:
    """Bucketed chart data for all three granularities."""

    by_day: List[ChartBucket]
    by_month: List[ChartBucket]
    by_year: List[ChartBucket]

    def get(self, granularity: Granularity) -> List[ChartBucket]:
        return {
            Granularity.DAY: self.by_day,
            Granularity.MONTH: self.by_month,
            Granularity.YEAR: self.by_year,
        }[Granularity(granularity)]


def bucket_key(date: str, granularity: Granularity) -> str:
    """
    Derive the bucket key of a rendered message date.

    Examples:
        >>> bucket_key("02/01/2023 10:00:00", Granularity.DAY)
        '02/01/2023'
        >>> bucket_key("02/01/2023 10:00:00", Granularity.MONTH)
        '02/2023'
        >>> bucket_key("02/01/2023 10:00:00", Granularity.YEAR)
        '2023'
    """
    day = date.split(" ")[0]
    if granularity == Granularity.DAY:
        return day

    month, _, year = day.split("/")
    if granularity == Granularity.MONTH:
        return f"{month}/{year}"
    return year


def collect_contacts(messages: Iterable[Message]) -> List[str]:
    """Return every contact in the messages, in order of first appearance."""
    return list(dict.fromkeys(message.contact for message in messages))


def aggregate(
    messages: Sequence[Message],
    granularity: Granularity,
    contacts: Optional[List[str]] = None,
) -> List[ChartBucket]:
    """
    Bucket messages for one granularity.

    Args:
        messages: Messages in chronological (file) order.
        granularity: Bucket size.
        contacts: Full contact list to seed buckets with. Collected from
            the messages when not given.

    Returns:
        Buckets in first-encounter order.
    """
    granularity = Granularity(granularity)
    if contacts is None:
        contacts = collect_contacts(messages)

    buckets: List[ChartBucket] = []
    index: Dict[str, ChartBucket] = {}

    for message in messages:
        key = bucket_key(message.date, granularity)
        bucket = index.get(key)
        if bucket is None:
            bucket = ChartBucket.seeded(key, contacts)
            index[key] = bucket
            buckets.append(bucket)
        bucket.counters[message.contact].add(message)

    logger.debug(f"Created {len(buckets)} {granularity.value} buckets")
    return buckets


def build_chart_data(messages: Sequence[Message]) -> ChartData:
    """Aggregate messages by day, month and year."""
    contacts = collect_contacts(messages)
    return ChartData(
        by_day=aggregate(messages, Granularity.DAY, contacts),
        by_month=aggregate(messages, Granularity.MONTH, contacts),
        by_year=aggregate(messages, Granularity.YEAR, contacts),
    )


def buckets_to_records(
    buckets: Sequence[ChartBucket],
    contacts: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Flatten buckets into chart records.

    Args:
        buckets: Buckets of one granularity.
        contacts: Contact order for field prefixes. Defaults to the counter
            order of the first bucket.
    """
    if not buckets:
        return []

    if contacts is None:
        contacts = list(buckets[0].counters)
    prefixes = build_field_prefixes(contacts)
    return [bucket.to_record(prefixes) for bucket in buckets]
