"""
Contact name normalization utilities.

This module provides functions to normalize display names found in a chat
export into stable lookup keys, and to derive chart field prefixes from them.

Design Decisions:
    1. Invisible formatting characters are removed anywhere in the name
    2. Surrounding whitespace is trimmed, inner whitespace is preserved
    3. Field prefixes replace each whitespace character with an underscore
    4. Prefix collisions are resolved with a numeric suffix (_2, _3, ...)

Invisible Characters:
    WhatsApp inserts directionality marks around names depending on the
    locale of the exporting device (e.g. U+200E LEFT-TO-RIGHT MARK before
    names of contacts saved with a phone number). Without stripping them the
    same person shows up under two different keys.
"""

import re
from typing import Dict, Iterable

# Zero-width characters, bidi marks/embeddings/isolates, word joiner and BOM
INVISIBLE_CHARS = "\u200b\u200c\u200d\u200e\u200f\u202a\u202b\u202c\u202d\u202e\u2060\u2066\u2067\u2068\u2069\ufeff"

INVISIBLE_CHARS_PATTERN = re.compile(f"[{INVISIBLE_CHARS}]")
WHITESPACE_PATTERN = re.compile(r"\s")

FIELD_SEPARATOR = "_"


def clean_contact_name(raw: str) -> str:
    """
    Normalize a raw display name extracted from a chat export.

    Args:
        raw: Display name as it appears in the export.

    Returns:
        Name with invisible formatting characters removed and surrounding
        whitespace trimmed.

    Examples:
        >>> clean_contact_name("\\u200eAlice Smith")
        'Alice Smith'
        >>> clean_contact_name("  \\u202a+44 7700 900123\\u202c ")
        '+44 7700 900123'
    """
    if not raw:
        return raw

    return INVISIBLE_CHARS_PATTERN.sub("", raw).strip()


def contact_field_prefix(name: str) -> str:
    """
    Derive the chart field prefix for a contact name.

    Examples:
        >>> contact_field_prefix("Alice Smith")
        'Alice_Smith'
    """
    return WHITESPACE_PATTERN.sub(FIELD_SEPARATOR, name)


def build_field_prefixes(contacts: Iterable[str]) -> Dict[str, str]:
    """
    Build unique field prefixes for an ordered collection of contacts.

    Two distinct names can sanitize to the same prefix ("Ann Lee" and
    "Ann_Lee"). The first one keeps the plain prefix, later ones get a
    numeric suffix.

    Args:
        contacts: Contact names in first-appearance order.

    Returns:
        Mapping of contact name to its unique field prefix, in input order.
    """
    prefixes: Dict[str, str] = {}
    taken = set()

    for contact in contacts:
        if contact in prefixes:
            continue

        base = contact_field_prefix(contact)
        prefix = base
        suffix = 2
        while prefix in taken:
            prefix = f"{base}{FIELD_SEPARATOR}{suffix}"
            suffix += 1

        taken.add(prefix)
        prefixes[contact] = prefix

    return prefixes
