"""
Contact name resolution for the parser.

This module resolves raw display names found in a chat export to canonical
names curated by the user. Resolution is a lookup, not a guess: a name that
has no curated entry passes through unchanged and is queued for curation.

Design Decisions:
    1. The replacement table is a JSON object file: {"raw name": "canonical"}
    2. Queued (not yet curated) names are stored with an empty canonical value
    3. Empty canonical values never resolve; the name stays unresolved
    4. Appending never overwrites an existing entry

Curation Workflow:
    1. Run the analysis; unresolved names are appended to replacements.json
    2. Fill in the canonical name for each queued entry
    3. Re-run; the curated names now resolve
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

from whatsapp_analysis.etl.normalizers import clean_contact_name
from whatsapp_analysis.exceptions import ReplacementsFileError

logger = logging.getLogger(__name__)


class ReplacementStore:
    """JSON-file-backed persistence for the contact replacement table."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_raw(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ReplacementsFileError(
                f"Failed to read replacements file {self.path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ReplacementsFileError(
                f"Replacements file {self.path} must contain a JSON object, "
                f"got {type(data).__name__}."
            )

        return {str(key): "" if value is None else str(value) for key, value in data.items()}

    def load(self) -> Dict[str, str]:
        """
        Load curated replacements.

        Returns:
            Mapping of raw name to canonical name. Queued entries with an
            empty canonical name are left out.

        Raises:
            ReplacementsFileError: If the file exists but is not a JSON object.
        """
        replacements = {key: value for key, value in self._read_raw().items() if value}
        logger.debug(f"Loaded {len(replacements)} contact replacements from {self.path}")
        return replacements

    def append(self, names: Iterable[str]) -> int:
        """
        Queue names for curation.

        Each name not already present is added with an empty canonical value.
        Existing entries (curated or queued) are kept as they are.

        Args:
            names: Raw names to queue.

        Returns:
            Number of names added.
        """
        data = self._read_raw()
        added = 0
        for name in names:
            if name not in data:
                data[name] = ""
                added += 1

        if added == 0:
            return 0

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            raise ReplacementsFileError(
                f"Failed to write replacements file {self.path}: {e}"
            ) from e

        logger.info(f"Queued {added} unresolved contact names in {self.path}")
        return added


class ContactRegistry:
    """Read-only raw name → canonical name lookup used while parsing."""

    def __init__(
        self,
        replacements: Optional[Dict[str, str]] = None,
        store: Optional[ReplacementStore] = None,
    ):
        self._replacements: Dict[str, str] = dict(replacements or {})
        self._store = store

    @classmethod
    def from_file(cls, path: Path) -> "ContactRegistry":
        """Create a registry loaded from (and saving to) a replacements file."""
        store = ReplacementStore(path)
        return cls(store.load(), store=store)

    def __len__(self) -> int:
        return len(self._replacements)

    def __contains__(self, name: object) -> bool:
        return name in self._replacements

    @staticmethod
    def clean(raw_name: str) -> str:
        return clean_contact_name(raw_name)

    def replace(self, raw_name: str) -> Optional[str]:
        """
        Look up the canonical name for a cleaned raw name.

        Returns:
            The canonical name, or None if the name is unresolved.
        """
        return self._replacements.get(raw_name) or None

    def save_replacements(self, names: Iterable[str]) -> int:
        """
        Hand unresolved names to the persistence store for later curation.

        Args:
            names: Unresolved raw names, in first-appearance order.

        Returns:
            Number of names newly queued (0 without a store).
        """
        names = list(names)
        if not names:
            return 0

        if self._store is None:
            logger.debug(f"No replacements store configured, {len(names)} names not saved")
            return 0

        return self._store.append(names)
