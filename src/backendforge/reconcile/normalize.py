"""Map provider-specific result shapes into the canonical models.

Providers disagree on field names (``tableName`` vs ``name``, ``columns``
vs ``fields``) and on how column flags are encoded (booleans, Prisma-style
``attributes`` arrays, ``optional`` flags, ``Type?`` suffixes). Every one of
those variants is resolved here; nothing downstream sees a raw shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from backendforge.models.generation import (
    CodeSnippet,
    ColumnSchema,
    GeneratedResult,
    TableSchema,
)

UNNAMED_TABLE = "Unnamed Table"
UNKNOWN_COLUMN = "unknown"
DEFAULT_COLUMN_TYPE = "String"
GENERIC_RELATION = "Relation"
UNTITLED_SNIPPET = "Untitled"
DEFAULT_SNIPPET_LANGUAGE = "text"

_PRIMARY_ATTRIBUTE = "@id"
_UNIQUE_ATTRIBUTE = "@unique"
_NULLABLE_SUFFIX = "?"


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return value
    return {}


def _text(value: Any, default: str = "") -> str:
    """Coerce a loosely typed value to text, using ``default`` when it is falsy."""
    if not value or isinstance(value, (dict, list)):
        return default
    if isinstance(value, str):
        return value
    return str(value)


def _has_attribute(attributes: Any, marker: str) -> bool:
    if not isinstance(attributes, list):
        return False
    return any(isinstance(item, str) and marker in item for item in attributes)


def _relation(value: Any) -> str | None:
    if isinstance(value, list):
        return ", ".join("" if item is None else str(item) for item in value)
    if value is True:
        return GENERIC_RELATION
    if isinstance(value, str):
        return value
    return None


def normalize_column(raw: Any) -> ColumnSchema:
    column = _as_mapping(raw)
    attributes = column.get("attributes")
    raw_type = column.get("type")

    is_nullable = column.get("isNullable") is True or column.get("optional") is True
    if not is_nullable and isinstance(raw_type, str) and raw_type.endswith(_NULLABLE_SUFFIX):
        is_nullable = True

    return ColumnSchema(
        name=_text(column.get("name"), UNKNOWN_COLUMN),
        type=_text(raw_type, DEFAULT_COLUMN_TYPE),
        is_primary=column.get("isPrimary") is True
        or _has_attribute(attributes, _PRIMARY_ATTRIBUTE),
        is_nullable=is_nullable,
        is_unique=column.get("isUnique") is True
        or _has_attribute(attributes, _UNIQUE_ATTRIBUTE),
        relation=_relation(column.get("relation")),
    )


def normalize_table(raw: Any) -> TableSchema:
    table = _as_mapping(raw)
    raw_columns = table.get("columns")
    if raw_columns is None:
        raw_columns = table.get("fields")
    if not isinstance(raw_columns, list):
        raw_columns = []

    return TableSchema(
        table_name=_text(table.get("tableName") or table.get("name"), UNNAMED_TABLE),
        description=_text(table.get("description")),
        columns=[normalize_column(column) for column in raw_columns],
    )


def normalize_schema(raw: Any) -> list[TableSchema]:
    """Normalize any supported schema encoding; non-list input yields ``[]``."""
    if not isinstance(raw, list):
        return []
    return [normalize_table(table) for table in raw]


def normalize_snippets(raw: Any) -> list[CodeSnippet]:
    """Normalize snippets and rename duplicate titles so titles stay unique."""
    if not isinstance(raw, list):
        return []

    snippets: list[CodeSnippet] = []
    taken: set[str] = set()
    for item in raw:
        snippet = _as_mapping(item)
        base_title = title = _text(snippet.get("title"), UNTITLED_SNIPPET)
        count = 1
        while title in taken:
            count += 1
            title = f"{base_title} ({count})"
        taken.add(title)
        snippets.append(
            CodeSnippet(
                title=title,
                language=_text(snippet.get("language"), DEFAULT_SNIPPET_LANGUAGE),
                code=_text(snippet.get("code")),
                description=_text(snippet.get("description")),
            )
        )
    return snippets


def normalize_result(payload: Mapping[str, Any]) -> GeneratedResult:
    """Build a canonical result from a decoded payload object."""
    chat_response = payload.get("chatResponse")
    return GeneratedResult(
        chat_response=_text(chat_response) if chat_response is not None else None,
        tables=normalize_schema(payload.get("schema")),
        snippets=normalize_snippets(payload.get("snippets")),
        explanation=_text(payload.get("explanation")),
        project_setup_guide=_text(payload.get("projectSetupGuide")),
        api_doc=_text(payload.get("apiDoc")),
    )
