"""
Configuration module for WhatsApp Analysis project.

Handles configuration settings including file paths and the display timezone.

File Paths:
    - _chat.txt: WhatsApp chat export (read-only source)
    - replacements.json: contact name replacement table (read-write)
    - charts/: output directory for rendered charts
"""

import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Config:
    """Configuration class for WhatsApp Analysis."""

    # Default export file name, as produced by WhatsApp "Export chat"
    DEFAULT_EXPORT_NAME = "_chat.txt"

    # Default contact replacements file name
    DEFAULT_REPLACEMENTS_NAME = "replacements.json"

    # Default output directory for charts
    DEFAULT_OUTPUT_DIR = "charts"

    def __init__(
        self,
        export_path: Optional[str] = None,
        replacements_path: Optional[str] = None,
        output_dir: Optional[str] = None,
        timezone_name: Optional[str] = None,
    ):
        """
        Initialize configuration.

        Args:
            export_path: Optional path to the chat export. Defaults to
                    ./_chat.txt.
            replacements_path: Optional path to the replacements file.
                    Defaults to ./replacements.json.
            output_dir: Optional chart output directory. Defaults to ./charts.
            timezone_name: Optional IANA timezone name (e.g. "Europe/Paris")
                    used to display message dates. Defaults to the system
                    local timezone.

        Raises:
            ValueError: If timezone_name is not a known timezone.
        """
        self._export_path = (
            Path(export_path) if export_path else Path.cwd() / self.DEFAULT_EXPORT_NAME
        )
        self._replacements_path = (
            Path(replacements_path)
            if replacements_path
            else Path.cwd() / self.DEFAULT_REPLACEMENTS_NAME
        )
        self._output_dir = Path(output_dir) if output_dir else Path.cwd() / self.DEFAULT_OUTPUT_DIR

        self._timezone_name = timezone_name or None
        self._timezone: Optional[ZoneInfo] = None
        if self._timezone_name:
            try:
                self._timezone = ZoneInfo(self._timezone_name)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {self._timezone_name}") from e

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create a configuration from environment variables.

        Environment Variables:
            WHATSAPP_EXPORT_PATH: Path to the chat export.
            WHATSAPP_REPLACEMENTS_PATH: Path to the replacements file.
            WHATSAPP_OUTPUT_DIR: Chart output directory.
            WHATSAPP_TIMEZONE: IANA timezone name for message dates.
        """
        return cls(
            export_path=os.getenv("WHATSAPP_EXPORT_PATH"),
            replacements_path=os.getenv("WHATSAPP_REPLACEMENTS_PATH"),
            output_dir=os.getenv("WHATSAPP_OUTPUT_DIR"),
            timezone_name=os.getenv("WHATSAPP_TIMEZONE"),
        )

    @property
    def export_path(self) -> Path:
        """Get the chat export file path."""
        return self._export_path

    @property
    def export_path_str(self) -> str:
        """Get the chat export file path as a string."""
        return str(self._export_path)

    @property
    def replacements_path(self) -> Path:
        """Get the contact replacements file path."""
        return self._replacements_path

    @property
    def replacements_path_str(self) -> str:
        """Get the contact replacements file path as a string."""
        return str(self._replacements_path)

    @property
    def output_dir(self) -> Path:
        """Get the chart output directory."""
        return self._output_dir

    @property
    def timezone(self) -> Optional[ZoneInfo]:
        """Get the display timezone (None means system local)."""
        return self._timezone

    @property
    def timezone_name(self) -> Optional[str]:
        return self._timezone_name

    def validate(self) -> bool:
        """
        Validate that the chat export exists and is readable.

        Returns:
            True if the export exists and is readable, False otherwise.
        """
        return self._export_path.is_file() and os.access(self._export_path, os.R_OK)

    def ensure_output_dir(self) -> None:
        """
        Ensure the chart output directory exists.

        Creates the directory if it doesn't exist.
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
_config: Optional[Config] = None


def get_config(
    export_path: Optional[str] = None,
    replacements_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    timezone_name: Optional[str] = None,
) -> Config:
    """
    Get or create the global configuration instance.

    A new instance is created when none exists yet or when any argument is
    given.

    Returns:
        Config instance.
    """
    global _config
    overrides = (export_path, replacements_path, output_dir, timezone_name)
    if _config is None or any(value is not None for value in overrides):
        _config = Config(export_path, replacements_path, output_dir, timezone_name)
    return _config


def set_config(config: Optional[Config]) -> None:
    """
    Set the global configuration instance.

    Args:
        config: Config instance to use, or None to reset.
    """
    global _config
    _config = config
