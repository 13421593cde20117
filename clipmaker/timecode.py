"""Conversion between seconds and ``HH:MM:SS`` display strings."""

import math
import re

FIELD_RE = re.compile(r"[0-9]+")


class TimecodeError(ValueError):
    """Raised when text cannot be read as ``H:M:S``."""
    pass


def to_display(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS``. The hours field is not capped at 24."""
    total = int(math.floor(seconds))
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def from_display(text: str) -> int:
    """Parse ``H:M:S`` or ``HH:MM:SS`` into whole seconds.

    Each of the three fields must be ASCII digits (surrounding spaces allowed).
    Signs, fractions and digit separators are rejected with TimecodeError.
    """
    parts = [p.strip() for p in text.strip().split(":")]
    if len(parts) != 3:
        raise TimecodeError(f"Expected H:M:S, got {text!r}")
    if not all(FIELD_RE.fullmatch(p) for p in parts):
        raise TimecodeError(f"Non-numeric field in {text!r}")
    h, m, s = (int(p) for p in parts)
    return h * 3600 + m * 60 + s
