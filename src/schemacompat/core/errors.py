"""Core exception hierarchy."""

class SchemaCompatError(Exception):
    """Base class for SchemaCompat errors."""


class SchemaError(SchemaCompatError):
    """Schema structure or parsing error."""


class SchemaConstructionError(SchemaError):
    """A schema node could not be evaluated while being rewritten."""


class ProviderError(SchemaCompatError):
    """LLM provider error."""


class ExtractionError(SchemaCompatError):
    """Title extraction error."""
