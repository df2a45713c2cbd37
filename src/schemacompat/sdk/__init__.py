"""Configuration and command-line entry points for SchemaCompat."""
