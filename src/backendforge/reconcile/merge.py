"""Reconcile a freshly generated result with the previous turn's result.

Models are told to signal "no change" with empty arrays or the keep sentinel
instead of re-emitting unchanged content. They do not always comply, so the
merge treats empty values the same way as the sentinel and falls back to the
previous turn for each field independently.
"""

from __future__ import annotations

from backendforge.models.generation import CodeSnippet, GeneratedResult
from backendforge.reconcile.changes import Unchanged, parse_change

_TEXT_FIELDS = ("explanation", "project_setup_guide", "api_doc")


def _merge_snippets(
    new_snippets: list[CodeSnippet],
    previous_snippets: list[CodeSnippet],
) -> list[CodeSnippet]:
    if not new_snippets:
        return [snippet.model_copy(deep=True) for snippet in previous_snippets]

    previous_by_title: dict[str, CodeSnippet] = {}
    for snippet in previous_snippets:
        previous_by_title.setdefault(snippet.title, snippet)

    merged: list[CodeSnippet] = []
    for snippet in new_snippets:
        previous = previous_by_title.get(snippet.title)
        if previous is not None and isinstance(parse_change(snippet.code), Unchanged):
            merged.append(previous.model_copy(deep=True))
        else:
            merged.append(snippet)
    return merged


def merge_results(
    new: GeneratedResult,
    previous: GeneratedResult | None,
) -> GeneratedResult:
    """Return the result to present, restoring fields the new turn left unchanged."""
    if previous is None:
        return new

    update: dict[str, object] = {
        "tables": list(new.tables)
        or [table.model_copy(deep=True) for table in previous.tables],
        "snippets": _merge_snippets(new.snippets, previous.snippets),
    }
    for field_name in _TEXT_FIELDS:
        if isinstance(parse_change(getattr(new, field_name)), Unchanged):
            update[field_name] = getattr(previous, field_name)
    return new.model_copy(update=update)
