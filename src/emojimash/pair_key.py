"""Canonical keys for unordered emoji pairs."""

from __future__ import annotations

from emojimash._constants import PAIR_SEPARATOR
from emojimash.exceptions import InputFormatError

PairKey = tuple[str, str]


def normalize(a: str, b: str) -> PairKey:
    """Return ``(a, b)`` in lexicographic order.

    Used both when indexing records and when querying, so a lookup for
    ``(B, A)`` hits the entry stored for ``(A, B)``.
    """
    if b < a:
        return (b, a)
    return (a, b)


def split_pair(raw: str, separator: str = PAIR_SEPARATOR) -> tuple[str, str]:
    """Split a ``A_B`` query into its two tokens.

    Surrounding whitespace of each token is dropped. Raises
    :class:`InputFormatError` unless there are exactly two non-empty tokens.
    """
    parts = raw.split(separator)
    if len(parts) != 2:
        raise InputFormatError(f"expected two emoji separated by {separator!r}, got {len(parts)} part(s)")
    left, right = parts[0].strip(), parts[1].strip()
    if not left or not right:
        raise InputFormatError("both emoji of the pair must be non-empty")
    return left, right
