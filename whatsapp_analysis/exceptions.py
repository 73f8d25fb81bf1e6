"""Exception hierarchy for WhatsApp Analysis."""


class WhatsAppAnalysisError(Exception):
    """Base exception for all WhatsApp Analysis errors."""


# Export
class ExportNotFoundError(WhatsAppAnalysisError):
    """The chat export file does not exist or is not readable."""


class ExportParseError(WhatsAppAnalysisError):
    """Base exception for chat export parsing failures."""


class NoMessagesError(ExportParseError):
    """No messages could be extracted from the chat export."""


# Contacts
class ReplacementsFileError(WhatsAppAnalysisError):
    """The contact replacements file could not be read or written."""
