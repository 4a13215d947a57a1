"""Turn raw model text into a payload object, repairing truncation once."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from backendforge.reconcile.repair import repair_truncated_json
from backendforge.reconcile.sanitize import strip_code_fences

logger = logging.getLogger(__name__)

TRUNCATION_FINISH_REASON = "length"
TRUNCATION_NOTE = (
    "(Note: the model output hit its length limit and may be truncated; "
    "it was repaired automatically.)"
)
_RAW_TAIL_CHARS = 50


class PayloadDecodeError(ValueError):
    """Raised when model output cannot be decoded into a result payload."""


@dataclass(frozen=True)
class DecodedPayload:
    """Parsed payload plus whether the repair path produced it."""

    payload: dict[str, Any]
    repaired: bool = False


def _raw_tail(text: str) -> str:
    return text[-_RAW_TAIL_CHARS:]


def decode_payload(text: str, *, finish_reason: str | None = None) -> DecodedPayload:
    """Sanitize and parse ``text``; fall back to structural repair on syntax errors."""
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning(
            "Initial JSON parse failed (finish_reason=%s): %s", finish_reason, exc
        )
    else:
        if not isinstance(parsed, dict):
            raise PayloadDecodeError(
                "Model output must be a JSON object, got "
                f"{type(parsed).__name__}."
            )
        return DecodedPayload(payload=parsed)

    repaired_text = repair_truncated_json(cleaned)
    try:
        parsed = json.loads(repaired_text)
    except json.JSONDecodeError as exc:
        logger.error("JSON repair failed: %s", exc)
        raise PayloadDecodeError(
            "Model output was not valid JSON and could not be repaired "
            "(likely truncated; try narrowing the request). "
            f"Raw tail: ...{_raw_tail(text)}"
        ) from exc

    if not isinstance(parsed, dict) or (
        parsed.get("snippets") is None and parsed.get("schema") is None
    ):
        raise PayloadDecodeError(
            "Repaired model output is missing both 'schema' and 'snippets'. "
            f"Raw tail: ...{_raw_tail(text)}"
        )

    logger.info("Recovered model output via JSON repair (finish_reason=%s).", finish_reason)
    return DecodedPayload(payload=parsed, repaired=True)


def append_truncation_note(chat_response: str | None) -> str:
    """Attach the user-visible truncation note to a chat response."""
    if not chat_response:
        return TRUNCATION_NOTE
    return f"{chat_response}\n\n{TRUNCATION_NOTE}"
