"""SDK-level errors."""

class SdkError(Exception):
    """Base SDK error."""


class ConfigError(SdkError):
    """Configuration resolution error."""
