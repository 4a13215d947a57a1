"""Best-effort structural repair for JSON cut off mid-stream.

The repair handles truncation, not corruption. It closes a dangling string
(dropping an incomplete escape sequence), drops a member key left without
its value, and closes any still-open arrays or objects, in that order,
exactly once. Interior damage (a half-written literal, stray characters) is
left alone and the caller is expected to treat a second parse failure as
fatal.
"""

from __future__ import annotations

import re

_CLOSERS = {"{": "}", "[": "]"}
_UNICODE_ESCAPE_DIGITS = 4

# A complete string at the end of the text, optionally followed by a colon.
_TRAILING_STRING = re.compile(r'"(?:[^"\\]|\\.)*"\s*:?\s*$', re.DOTALL)


def _scan(text: str) -> tuple[list[str], bool, int | None]:
    """Return open closers, whether a string is still open, and where an
    unfinished escape sequence starts (``None`` when there is none)."""
    expected: list[str] = []
    in_string = False
    escape_start: int | None = None
    hex_digits_left = 0
    for index, char in enumerate(text):
        if in_string:
            if escape_start is not None:
                if hex_digits_left:
                    hex_digits_left -= 1
                    if not hex_digits_left:
                        escape_start = None
                elif char == "u":
                    hex_digits_left = _UNICODE_ESCAPE_DIGITS
                else:
                    escape_start = None
            elif char == "\\":
                escape_start = index
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            expected.append(_CLOSERS[char])
        elif char in "}]":
            # Tolerant scan: only pop on a matching closer.
            if expected and expected[-1] == char:
                expected.pop()
    return expected, in_string, escape_start


def _drop_dangling_key(text: str) -> str:
    """Remove an object member that has a key but no value yet.

    Only valid while the innermost open structure is an object: there a
    trailing string after ``{`` or ``,`` can only be a key.
    """
    match = _TRAILING_STRING.search(text)
    if match is None:
        return text
    head = text[: match.start()].rstrip()
    if head.endswith(","):
        return head[:-1]
    if head.endswith("{"):
        return head
    return text


def repair_truncated_json(text: str) -> str:
    """Close an unterminated string and any open structures in ``text``."""
    repaired = text.strip()

    _, in_string, escape_start = _scan(repaired)
    if in_string:
        if escape_start is not None:
            repaired = repaired[:escape_start]
        repaired += '"'

    expected, _, _ = _scan(repaired)
    if expected and expected[-1] == "}":
        repaired = _drop_dangling_key(repaired)

    repaired = repaired.rstrip()
    if repaired.endswith(","):
        repaired = repaired[:-1]

    expected, _, _ = _scan(repaired)
    return repaired + "".join(reversed(expected))
