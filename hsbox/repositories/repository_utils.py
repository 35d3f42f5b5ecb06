"""Shared utility functions for repository modules."""
from __future__ import annotations

# Stay well below SQLITE_MAX_VARIABLE_NUMBER on older builds (999)
MAX_SQL_VARIABLES = 500


def placeholders(count: int) -> str:
    """Build a `?, ?, ...` list for a parameterized IN clause."""
    return ", ".join("?" * count)
