"""Result document persistence (export/import of generated results)."""

from __future__ import annotations

import json
from pathlib import Path

from backendforge.models.generation import GeneratedResult
from backendforge.reconcile.normalize import normalize_result

_REQUIRED_KEYS = ("snippets", "schema")


class DocumentError(RuntimeError):
    """Raised when result document operations fail."""


def save_result_document(path: Path, result: GeneratedResult) -> None:
    """Write ``result`` as a camelCase JSON document."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DocumentError(f"Failed to create result directory: {exc}") from exc

    try:
        path.write_text(
            json.dumps(result.to_document(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    except OSError as exc:
        raise DocumentError(f"Failed to write result document: {exc}") from exc


def load_result_document(path: Path) -> GeneratedResult:
    """Load and validate a result document, normalizing its schema and snippets."""
    if not path.exists():
        raise DocumentError(f"Result document does not exist: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DocumentError(f"Result document is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise DocumentError(f"Failed to read result document: {exc}") from exc

    if not isinstance(payload, dict):
        raise DocumentError("Result document root must be a JSON object.")

    missing = [key for key in _REQUIRED_KEYS if payload.get(key) is None]
    if missing:
        raise DocumentError(
            "Result document is missing required field(s): " + ", ".join(missing)
        )

    return normalize_result(payload)
