"""Helpers shared by the core modules."""
