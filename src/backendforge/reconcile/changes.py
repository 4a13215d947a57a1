"""Explicit "keep previous" markers for fields a model may leave unchanged."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

KEEP_SENTINEL: Final = "__KEEP__"
KEEP_SENTINELS: frozenset[str] = frozenset({KEEP_SENTINEL, f"// {KEEP_SENTINEL}"})


class Unchanged:
    """The model asked to keep the previous turn's value."""

    _instance: Unchanged | None = None

    def __new__(cls) -> Unchanged:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCHANGED"


UNCHANGED: Final = Unchanged()


@dataclass(frozen=True)
class Replacement:
    """The model supplied new content for the field."""

    content: str


FieldChange = Unchanged | Replacement


def parse_change(value: str | None) -> FieldChange:
    """Classify a raw text field as a keep marker or replacement content."""
    if value is None:
        return UNCHANGED
    stripped = value.strip()
    if not stripped or stripped in KEEP_SENTINELS:
        return UNCHANGED
    return Replacement(value)
