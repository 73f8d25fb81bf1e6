#!/usr/bin/env python3
"""
Main entry point for WhatsApp Analysis.

Provides a command-line interface to analyze a WhatsApp chat export.
"""
from typing import List, Optional
import argparse
import json
import logging
import sys

from whatsapp_analysis.analysis import get_chat_summary, get_contact_totals
from whatsapp_analysis.config import get_config
from whatsapp_analysis.etl.aggregators import Granularity, buckets_to_records
from whatsapp_analysis.etl.pipeline import analyze_export
from whatsapp_analysis.exceptions import WhatsAppAnalysisError
from whatsapp_analysis.logger_config import setup_logging
from whatsapp_analysis.utils import Colors, format_count
from whatsapp_analysis.visualization import write_all_charts

logger = logging.getLogger(__name__)


def print_section(title: str) -> None:
    """Print a formatted section title."""
    print(f"\n{Colors.BOLD}{Colors.HEADER}{'=' * 60}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.HEADER}{title}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.HEADER}{'=' * 60}{Colors.ENDC}\n")


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze a WhatsApp chat export (_chat.txt).")
    parser.add_argument(
        "--export-path",
        default=None,
        help="Path to the chat export (default: ./_chat.txt).",
    )
    parser.add_argument(
        "--replacements-path",
        default=None,
        help="Path to the contact replacements JSON file (default: ./replacements.json).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to write charts into (default: ./charts).",
    )
    parser.add_argument(
        "--timezone",
        default=None,
        help="IANA timezone for message dates, e.g. Europe/Madrid (default: system local).",
    )
    parser.add_argument(
        "--no-charts",
        action="store_true",
        help="Do not write HTML charts.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write the day/month/year chart records to <output-dir>/chart_data.json.",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="How many contacts to list (default: 10).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main function."""
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    setup_logging(log_file=args.log_file)

    try:
        config = get_config(
            export_path=args.export_path,
            replacements_path=args.replacements_path,
            output_dir=args.output_dir,
            timezone_name=args.timezone,
        )
    except ValueError as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        sys.exit(1)

    if not config.validate():
        print(f"{Colors.FAIL}Error: Chat export not found or not readable.{Colors.ENDC}")
        print("Export the chat from WhatsApp (without media) and place _chat.txt at:")
        print(f"  {config.export_path_str}")
        sys.exit(1)

    print(f"{Colors.OKGREEN}Using export: {config.export_path_str}{Colors.ENDC}")

    try:
        result = analyze_export(
            config.export_path,
            config.replacements_path,
            tz=config.timezone,
        )
    except WhatsAppAnalysisError as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        logger.exception("Error during analysis")
        sys.exit(1)

    print_section("Chat Summary")
    summary = get_chat_summary(result)
    print(f"Total messages: {summary['total_messages']:,}")
    print(f"Total characters: {summary['total_characters']:,}")
    print(f"Contacts: {summary['total_contacts']}")
    print(f"First message: {summary['first_message_date']}")
    print(f"Last message: {summary['last_message_date']}")
    buckets = summary["buckets"]
    print(f"Active days: {buckets['day']}, months: {buckets['month']}, years: {buckets['year']}")

    print_section(f"Top Contacts ({args.top})")
    for i, stats in enumerate(get_contact_totals(result.messages)[: args.top], 1):
        print(
            f"{i:2d}. {stats['contact']:30s}: {format_count(stats['message_count']):>7} messages, "
            f"{format_count(stats['character_count']):>7} chars ({stats['percentage']}%)"
        )

    if result.unresolved_names:
        print_section("Unresolved Contacts")
        for name in result.unresolved_names:
            print(f"  - {name}")
        print(
            f"\n{Colors.WARNING}{result.names_queued} new names queued in "
            f"{config.replacements_path_str}; fill in their canonical names "
            f"and run again.{Colors.ENDC}"
        )

    if args.json or not args.no_charts:
        config.ensure_output_dir()

    if args.json:
        chart_file = config.output_dir / "chart_data.json"
        records = {
            granularity.value: buckets_to_records(
                result.chart_data.get(granularity), result.contacts
            )
            for granularity in Granularity
        }
        chart_file.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"\n{Colors.OKGREEN}Chart data written to {chart_file}{Colors.ENDC}")

    if not args.no_charts:
        written = write_all_charts(result.chart_data, config.output_dir)
        print(f"\n{Colors.OKGREEN}{len(written)} charts written to {config.output_dir}{Colors.ENDC}")


if __name__ == '__main__':
    main()
