"""Typed generation payload exchanged between turns."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _DocumentModel(BaseModel):
    """Base model serialized with the camelCase keys of the result document."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class ColumnSchema(_DocumentModel):
    name: str
    type: str
    is_primary: bool = False
    is_nullable: bool = False
    is_unique: bool = False
    relation: str | None = None


class TableSchema(_DocumentModel):
    table_name: str = Field(min_length=1)
    description: str = ""
    columns: list[ColumnSchema] = Field(default_factory=list)


class CodeSnippet(_DocumentModel):
    title: str
    language: str
    code: str
    description: str = ""


class GeneratedResult(_DocumentModel):
    """Unit of state carried across generation turns."""

    chat_response: str | None = None
    tables: list[TableSchema] = Field(default_factory=list, alias="schema")
    snippets: list[CodeSnippet] = Field(default_factory=list)
    explanation: str = ""
    project_setup_guide: str = ""
    api_doc: str = ""

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document shape used for export and prompts."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def summary_context(self) -> dict[str, Any]:
        """Condensed view sent back to the model: full schema, snippet headers only."""
        return {
            "schema": [
                table.model_dump(mode="json", by_alias=True, exclude_none=True)
                for table in self.tables
            ],
            "snippets": [
                {"title": snippet.title, "description": snippet.description}
                for snippet in self.snippets
            ],
        }

    def with_snippet_code(self, index: int, code: str) -> GeneratedResult:
        """Return a copy with the code of ``snippets[index]`` replaced."""
        snippets = list(self.snippets)
        snippets[index] = snippets[index].model_copy(update={"code": code})
        return self.model_copy(update={"snippets": snippets})

    def with_explanation(self, explanation: str) -> GeneratedResult:
        return self.model_copy(update={"explanation": explanation})

    def with_setup_guide(self, guide: str) -> GeneratedResult:
        return self.model_copy(update={"project_setup_guide": guide})
