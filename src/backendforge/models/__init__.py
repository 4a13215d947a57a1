"""Data models shared across the reconciliation pipeline."""

from backendforge.models.generation import (
    CodeSnippet,
    ColumnSchema,
    GeneratedResult,
    TableSchema,
)
from backendforge.models.stack import (
    DEFAULT_STACK_PRESET,
    STACK_PRESETS,
    TechStack,
    get_stack_preset,
)

__all__ = [
    "CodeSnippet",
    "ColumnSchema",
    "GeneratedResult",
    "TableSchema",
    "DEFAULT_STACK_PRESET",
    "STACK_PRESETS",
    "TechStack",
    "get_stack_preset",
]
