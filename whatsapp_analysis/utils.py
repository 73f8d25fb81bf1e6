"""
Utility functions and classes for WhatsApp Analysis.
"""


class Colors:
    """ANSI color codes for terminal output."""

    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


def format_count(count: int) -> str:
    """
    Format a message or character count with appropriate units.

    Args:
        count: Number of messages or characters.

    Returns:
        Formatted string (e.g., "987", "1.2K" or "3.4M").
    """
    if count < 1000:
        return str(count)
    elif count < 1_000_000:
        return f"{count / 1000:.1f}K"
    else:
        return f"{count / 1_000_000:.1f}M"


def truncate(text: str, width: int = 60) -> str:
    """
    Shorten text to a single line of at most width characters.

    Line breaks are shown as spaces; truncated text ends with "...".
    """
    single_line = " ".join(text.split("\n"))
    if len(single_line) <= width:
        return single_line
    return single_line[: max(width - 3, 0)] + "..."
