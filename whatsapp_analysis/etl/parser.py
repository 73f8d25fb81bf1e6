"""
Chat export parser.

This module turns the raw text of a WhatsApp "Export chat" file into an
ordered list of immutable Message records, in a tolerant, best-effort manner.

Design Decisions:
    1. Line breaks are normalized (\\r\\n, \\r → \\n) before anything else
    2. Parsing runs in two phases: boundary detection, then field extraction
    3. Lines that do not start a message are continuation lines of the
       previous message (multi-line bodies, pasted text)
    4. Blocks that do not have an "Author: Body" shape are dropped silently
       (system notices, encryption banners)
    5. Timestamps are read as UTC and rendered in the display timezone
    6. Output order is input order; nothing is sorted

Export Format:
    [DD/MM/YYYY, HH:MM:SS] Author: Body
    continuation line
    [DD/MM/YYYY, HH:MM:SS] Author: Body

    Some exports prefix lines with invisible directionality marks
    (U+200E), which are tolerated in front of the opening bracket.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional

from whatsapp_analysis.etl.contacts import ContactRegistry
from whatsapp_analysis.etl.normalizers import INVISIBLE_CHARS
from whatsapp_analysis.exceptions import NoMessagesError

logger = logging.getLogger(__name__)

# Rendered display form of a message date, e.g. "02/01/2023 10:00:00"
DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

# Phase 1: a line that starts a new message
MESSAGE_HEAD_PATTERN = re.compile(
    rf"^[{INVISIBLE_CHARS}]*\[\d{{2}}/\d{{2}}/\d{{4}},\s\d{{2}}:\d{{2}}:\d{{2}}\]\s"
)

# Phase 2: day, month, year, hour, minute, second, author, body.
# The author stays on the head line and ends at the first ": ";
# the body takes everything else, continuation lines included.
MESSAGE_PATTERN = re.compile(
    rf"^[{INVISIBLE_CHARS}]*"
    r"\[(\d{2})/(\d{2})/(\d{4}),\s(\d{2}):(\d{2}):(\d{2})\]\s"
    r"([^\n]+?):\s(.+)",
    re.DOTALL,
)

LINE_BREAK_PATTERN = re.compile(r"\r\n?")


@dataclass(frozen=True)
class Message:
    """A single parsed chat message."""

    date: str  # DATE_FORMAT, display timezone
    contact: str  # canonical name, or cleaned raw name if unresolved
    content: str
    chars: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "chars", len(self.content))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "contact": self.contact,
            "content": self.content,
            "chars": self.chars,
        }


@dataclass(frozen=True)
class RawMessage:
    """Fields matched from one logical message, before name resolution."""

    timestamp: datetime  # UTC
    author: str
    body: str


@dataclass
class ParseResult:
    """Result of parsing a chat export."""

    messages: List[Message]
    unresolved_names: List[str] = field(default_factory=list)


def normalize_line_breaks(text: str) -> str:
    """Convert \\r\\n and lone \\r line breaks to \\n."""
    return LINE_BREAK_PATTERN.sub("\n", text)


def split_lines(text: str) -> List[str]:
    """
    Split export text into lines after normalizing line breaks.

    A single trailing line break (the usual end of a text file) does not
    produce an extra empty continuation line.
    """
    text = normalize_line_breaks(text)
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def is_message_head(line: str) -> bool:
    """Check whether a line starts a new message."""
    return MESSAGE_HEAD_PATTERN.match(line) is not None


def join_continuation_lines(lines: List[str]) -> List[str]:
    """
    Reconstruct logical messages from a list of lines.

    Every head line starts a new logical message; every other line is
    appended, after a line break, to the message before it.

    Args:
        lines: Export lines, in file order.

    Returns:
        Logical message blocks, in file order.
    """
    blocks: List[str] = []
    orphans = 0

    for line in lines:
        if is_message_head(line):
            blocks.append(line)
        elif blocks:
            blocks[-1] += f"\n{line}"
        else:
            orphans += 1

    if orphans:
        logger.debug(f"Dropped {orphans} lines found before the first message")

    return blocks


def parse_message_block(block: str) -> Optional[RawMessage]:
    """
    Extract timestamp, author and body from a logical message.

    Returns:
        RawMessage, or None if the block does not have the message shape or
        its date fields are not a valid date.
    """
    match = MESSAGE_PATTERN.match(block)
    if not match:
        return None

    day, month, year, hour, minute, second = (int(value) for value in match.groups()[:6])
    try:
        timestamp = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    except ValueError:
        logger.debug(f"Invalid date in message block: {block[:40]!r}")
        return None

    return RawMessage(timestamp=timestamp, author=match.group(7), body=match.group(8))


def format_message_date(timestamp: datetime, tz: Optional[tzinfo] = None) -> str:
    """
    Render a UTC timestamp as a display date string.

    Args:
        timestamp: Timezone-aware timestamp.
        tz: Display timezone. None means the system local timezone.

    Returns:
        Date string in DATE_FORMAT, e.g. "02/01/2023 10:00:00".
    """
    return timestamp.astimezone(tz).strftime(DATE_FORMAT)


def parse_chat(
    raw_text: str,
    registry: Optional[ContactRegistry] = None,
    tz: Optional[tzinfo] = None,
) -> ParseResult:
    """
    Parse the raw text of a chat export.

    Args:
        raw_text: Full content of the export file.
        registry: Contact registry used to resolve author names. An empty
            registry leaves every name unresolved.
        tz: Display timezone for message dates. None means system local.

    Returns:
        ParseResult with messages in file order and the unresolved names in
        order of first appearance.

    Raises:
        NoMessagesError: If no message could be extracted.
    """
    if registry is None:
        registry = ContactRegistry()

    blocks = join_continuation_lines(split_lines(raw_text))
    logger.debug(f"Found {len(blocks)} logical messages")

    messages: List[Message] = []
    unresolved: Dict[str, None] = {}  # insertion-ordered set

    for block in blocks:
        raw = parse_message_block(block)
        if raw is None:
            continue

        contact = registry.clean(raw.author)
        canonical = registry.replace(contact)
        if canonical:
            contact = canonical
        else:
            unresolved.setdefault(contact, None)

        messages.append(
            Message(
                date=format_message_date(raw.timestamp, tz),
                contact=contact,
                content=raw.body,
            )
        )

    if not messages:
        raise NoMessagesError("Failed to read messages from the chat export")

    dropped = len(blocks) - len(messages)
    logger.info(
        f"Parsed {len(messages)} messages ({dropped} blocks dropped, "
        f"{len(unresolved)} unresolved contacts)"
    )
    return ParseResult(messages=messages, unresolved_names=list(unresolved))
