"""
Phone normalization
-------------------
  - to_canonical_phone(raw)   -> digits only, used for storage/validation
  - to_display_phone(raw)     -> "(DDD) DDD-DDDD" when exactly 10 digits
  - live_format_phone(raw)    -> incremental formatter for keystrokes

Only ASCII 0-9 count as digits. None / ints are accepted and stringified.
"""
from __future__ import annotations

import re
from typing import Any

_NON_DIGIT_RE = re.compile(r"[^0-9]")

PHONE_DIGITS = 10


def _digits(raw: Any) -> str:
    if raw is None:
        return ""
    return _NON_DIGIT_RE.sub("", str(raw))


def to_canonical_phone(raw: Any) -> str:
    # never pads or truncates; the validator decides if it's usable
    return _digits(raw)


def to_display_phone(raw: Any) -> str:
    p = _digits(raw)
    if len(p) != PHONE_DIGITS:
        return p
    return f"({p[:3]}) {p[3:6]}-{p[6:]}"


def live_format_phone(current_input: Any) -> str:
    p = _digits(current_input)[:PHONE_DIGITS]
    if len(p) >= 6:
        return f"({p[:3]}) {p[3:6]}-{p[6:]}"
    if len(p) >= 3:
        return f"({p[:3]}) {p[3:]}"
    return p


__all__ = ["PHONE_DIGITS", "to_canonical_phone", "to_display_phone", "live_format_phone"]
