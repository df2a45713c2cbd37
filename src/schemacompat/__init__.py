"""SchemaCompat: rewrite rich schema trees into provider-compatible dialects."""

__version__ = "0.1.0"
