"""
Tests for the chart aggregator.

Tests bucket keys, zero seeding, first-encounter ordering, flattening to
chart records and consistency across granularities.
"""

from typing import List

import pytest

from whatsapp_analysis.etl.aggregators import (
    ChartBucket,
    ChartData,
    ContactCounter,
    Granularity,
    aggregate,
    bucket_key,
    build_chart_data,
    buckets_to_records,
    collect_contacts,
)
from whatsapp_analysis.etl.parser import Message


def _message(date: str, contact: str, content: str) -> Message:
    return Message(date=date, contact=contact, content=content)


class TestBucketKey:
    """Tests for bucket key derivation."""

    def test_day_drops_time(self):
        assert bucket_key("02/01/2023 10:00:05", Granularity.DAY) == "02/01/2023"

    def test_month_drops_day_of_month(self):
        assert bucket_key("02/01/2023 10:00:05", Granularity.MONTH) == "02/2023"

    def test_year_keeps_year_only(self):
        assert bucket_key("02/01/2023 10:00:05", Granularity.YEAR) == "2023"

    def test_accepts_string_granularity(self):
        assert bucket_key("12/31/2023 23:59:59", "month") == "12/2023"  # type: ignore[arg-type]


class TestCollectContacts:
    """Tests for the contact pre-pass."""

    def test_first_appearance_order(self, sample_messages: List[Message]):
        assert collect_contacts(sample_messages) == ["Alice", "Robert", "Carol Jones"]

    def test_empty(self):
        assert collect_contacts([]) == []


class TestContactCounter:
    """Tests for ContactCounter."""

    def test_starts_at_zero(self):
        counter = ContactCounter()
        assert counter.messages == 0
        assert counter.chars == 0

    def test_add(self):
        counter = ContactCounter()
        counter.add(_message("02/01/2023 10:00:00", "Alice", "Hello"))
        counter.add(_message("02/01/2023 10:00:01", "Alice", "Hi"))
        assert counter == ContactCounter(messages=2, chars=7)


class TestAggregate:
    """Tests for bucket aggregation."""

    def test_reference_example_day_bucket(self):
        messages = [
            _message("02/01/2023 10:00:00", "Alice", "Hello"),
            _message("02/01/2023 10:00:05", "Bob", "Hi there\nhow are you?"),
        ]
        buckets = aggregate(messages, Granularity.DAY)

        assert len(buckets) == 1
        assert buckets[0].date == "02/01/2023"
        assert buckets[0].counters == {
            "Alice": ContactCounter(messages=1, chars=5),
            "Bob": ContactCounter(messages=1, chars=21),
        }

    def test_day_buckets(self, sample_messages: List[Message]):
        buckets = aggregate(sample_messages, Granularity.DAY)

        assert [b.date for b in buckets] == [
            "02/01/2023",
            "02/02/2023",
            "03/15/2023",
            "12/31/2023",
            "01/01/2024",
        ]
        assert buckets[0].counters["Robert"] == ContactCounter(messages=1, chars=21)
        assert buckets[1].counters["Carol Jones"] == ContactCounter(messages=1, chars=18)

    def test_month_buckets(self, sample_messages: List[Message]):
        buckets = aggregate(sample_messages, Granularity.MONTH)

        assert [b.date for b in buckets] == ["02/2023", "03/2023", "12/2023", "01/2024"]
        assert buckets[0].counters == {
            "Alice": ContactCounter(messages=1, chars=5),
            "Robert": ContactCounter(messages=1, chars=21),
            "Carol Jones": ContactCounter(messages=1, chars=18),
        }

    def test_year_buckets(self, sample_messages: List[Message]):
        buckets = aggregate(sample_messages, Granularity.YEAR)

        assert [b.date for b in buckets] == ["2023", "2024"]
        assert buckets[0].counters == {
            "Alice": ContactCounter(messages=2, chars=12),
            "Robert": ContactCounter(messages=2, chars=35),
            "Carol Jones": ContactCounter(messages=1, chars=18),
        }
        assert buckets[1].counters["Alice"] == ContactCounter(messages=1, chars=1)

    def test_every_bucket_seeded_with_every_contact(self, sample_messages: List[Message]):
        """Contacts without messages in a bucket still have a zero counter."""
        for granularity in Granularity:
            for bucket in aggregate(sample_messages, granularity):
                assert list(bucket.counters) == ["Alice", "Robert", "Carol Jones"]

    def test_contact_first_seen_later_is_seeded_in_earlier_buckets(self):
        messages = [
            _message("01/01/2023 10:00:00", "Alice", "a"),
            _message("01/02/2023 10:00:00", "Bob", "b"),
        ]
        buckets = aggregate(messages, Granularity.DAY)
        assert buckets[0].counters["Bob"] == ContactCounter()

    def test_first_encounter_order_without_sorting(self):
        """Buckets follow message order even if dates go backwards."""
        messages = [
            _message("03/01/2023 10:00:00", "Alice", "a"),
            _message("01/01/2023 10:00:00", "Alice", "b"),
            _message("03/01/2023 11:00:00", "Alice", "c"),
        ]
        buckets = aggregate(messages, Granularity.DAY)
        assert [b.date for b in buckets] == ["03/01/2023", "01/01/2023"]
        assert buckets[0].counters["Alice"].messages == 2

    def test_no_gap_filling(self, sample_messages: List[Message]):
        """Months without messages have no bucket."""
        dates = [b.date for b in aggregate(sample_messages, Granularity.MONTH)]
        assert "04/2023" not in dates

    def test_explicit_contacts_used_for_seeding(self):
        messages = [_message("01/01/2023 10:00:00", "Alice", "a")]
        buckets = aggregate(messages, Granularity.DAY, contacts=["Alice", "Bob"])
        assert buckets[0].counters["Bob"] == ContactCounter()

    def test_empty_messages(self):
        assert aggregate([], Granularity.DAY) == []


class TestBuildChartData:
    """Tests for the three-granularity aggregation."""

    def test_structure(self, sample_chart_data: ChartData):
        assert len(sample_chart_data.by_day) == 5
        assert len(sample_chart_data.by_month) == 4
        assert len(sample_chart_data.by_year) == 2

    def test_get_by_granularity(self, sample_chart_data: ChartData):
        assert sample_chart_data.get(Granularity.MONTH) is sample_chart_data.by_month
        assert sample_chart_data.get("year") is sample_chart_data.by_year  # type: ignore[arg-type]

    def test_granularities_do_not_share_buckets(self, sample_chart_data: ChartData):
        sample_chart_data.by_day[0].counters["Alice"].messages += 100
        assert sample_chart_data.by_month[0].counters["Alice"].messages == 1
        assert sample_chart_data.by_year[0].counters["Alice"].messages == 2

    def test_totals_match_across_granularities(
        self, sample_messages: List[Message], sample_chart_data: ChartData
    ):
        for contact in collect_contacts(sample_messages):
            expected_messages = sum(1 for m in sample_messages if m.contact == contact)
            expected_chars = sum(m.chars for m in sample_messages if m.contact == contact)
            for granularity in Granularity:
                buckets = sample_chart_data.get(granularity)
                assert sum(b.counters[contact].messages for b in buckets) == expected_messages
                assert sum(b.counters[contact].chars for b in buckets) == expected_chars


class TestChartRecords:
    """Tests for flattening buckets to chart records."""

    def test_reference_example_record(self):
        messages = [
            _message("02/01/2023 10:00:00", "Alice", "Hello"),
            _message("02/01/2023 10:00:05", "Bob", "Hi there\nhow are you?"),
        ]
        records = buckets_to_records(aggregate(messages, Granularity.DAY))

        assert records == [
            {
                "date": "02/01/2023",
                "Alice_Messages": 1,
                "Alice_Chars": 5,
                "Bob_Messages": 1,
                "Bob_Chars": 21,
            }
        ]

    def test_whitespace_in_names_sanitized(self, sample_chart_data: ChartData):
        records = buckets_to_records(sample_chart_data.by_year)
        assert records[0]["Carol_Jones_Messages"] == 1
        assert records[0]["Carol_Jones_Chars"] == 18
        assert records[1]["Carol_Jones_Messages"] == 0

    def test_colliding_names_get_distinct_fields(self):
        messages = [
            _message("01/01/2023 10:00:00", "Ann Lee", "a"),
            _message("01/01/2023 10:00:01", "Ann_Lee", "bb"),
        ]
        record = buckets_to_records(aggregate(messages, Granularity.DAY))[0]
        assert record["Ann_Lee_Messages"] == 1
        assert record["Ann_Lee_Chars"] == 1
        assert record["Ann_Lee_2_Messages"] == 1
        assert record["Ann_Lee_2_Chars"] == 2

    def test_to_record_field_order(self):
        bucket = ChartBucket.seeded("2023", ["Alice"])
        assert list(bucket.to_record({"Alice": "Alice"})) == [
            "date",
            "Alice_Messages",
            "Alice_Chars",
        ]

    def test_empty_buckets(self):
        assert buckets_to_records([]) == []
