"""Response reconciliation: sanitize, repair, normalize and merge model output."""

from backendforge.reconcile.changes import (
    KEEP_SENTINEL,
    UNCHANGED,
    FieldChange,
    Replacement,
    Unchanged,
    parse_change,
)
from backendforge.reconcile.decode import (
    TRUNCATION_NOTE,
    DecodedPayload,
    PayloadDecodeError,
    append_truncation_note,
    decode_payload,
)
from backendforge.reconcile.merge import merge_results
from backendforge.reconcile.normalize import (
    normalize_result,
    normalize_schema,
    normalize_snippets,
)
from backendforge.reconcile.repair import repair_truncated_json
from backendforge.reconcile.sanitize import strip_code_fences

__all__ = [
    "KEEP_SENTINEL",
    "UNCHANGED",
    "FieldChange",
    "Replacement",
    "Unchanged",
    "parse_change",
    "TRUNCATION_NOTE",
    "DecodedPayload",
    "PayloadDecodeError",
    "append_truncation_note",
    "decode_payload",
    "merge_results",
    "normalize_result",
    "normalize_schema",
    "normalize_snippets",
    "repair_truncated_json",
    "strip_code_fences",
]
