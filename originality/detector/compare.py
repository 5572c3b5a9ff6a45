"""Signature comparison: the MinHash estimate of Jaccard similarity."""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .errors import LengthMismatchError, MalformedSignatureError
from .minhash import EMPTY_SLOT


def _as_array(sig: Sequence[int]) -> np.ndarray:
    try:
        arr = np.asarray(sig)
    except (TypeError, ValueError) as exc:
        raise MalformedSignatureError(f"Signature is not an integer sequence: {exc}") from exc
    if arr.ndim != 1:
        raise MalformedSignatureError(f"Signature must be one-dimensional, got shape {arr.shape}")
    if arr.size and arr.dtype.kind not in "iu":
        raise MalformedSignatureError(f"Signature entries must be integers, got dtype {arr.dtype}")
    if arr.dtype.kind == "i" and arr.size and arr.min() < 0:
        raise MalformedSignatureError("Signature entries must be non-negative")
    return arr.astype(np.uint64, copy=False)


def compare(sig_a: Sequence[int], sig_b: Sequence[int]) -> float:
    """Return the fraction of positions where *sig_a* and *sig_b* agree.

    Positions where both signatures hold :data:`EMPTY_SLOT` do not count as
    agreement, so two empty documents compare as 0.0.
    """
    a = _as_array(sig_a)
    b = _as_array(sig_b)
    if a.shape[0] != b.shape[0]:
        raise LengthMismatchError(a.shape[0], b.shape[0])
    if a.shape[0] == 0:
        raise MalformedSignatureError("Cannot compare empty signatures")

    equal = a == b
    matches = int(np.count_nonzero(equal & (a != EMPTY_SLOT)))
    return matches / a.shape[0]


def to_percent(similarity: float) -> int:
    """Round a [0, 1] similarity to an integer percentage, halves rounding up."""
    return int(math.floor(similarity * 100 + 0.5))
