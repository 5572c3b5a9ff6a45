"""Tokenisation and word shingling.

A *shingle* is ``k`` consecutive word tokens joined by a single space. A
document is represented by the **set** of its shingles, so repeated passages
collapse to one instance.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List, Set

DEFAULT_SHINGLE_SIZE = 5

_WORD_RE = re.compile(r"\w+")


def tokenize(text: str) -> List[str]:
    """Split *text* into lower-cased word tokens.

    Punctuation and whitespace both delimit words. NFKC normalisation folds
    compatibility forms (ligatures, full-width digits) so visually identical
    text yields identical tokens regardless of how it was typed.
    """
    # Cast non-string (e.g. None) to empty string.
    if not isinstance(text, str):
        return []
    text = unicodedata.normalize("NFKC", text).lower()
    return _WORD_RE.findall(text)


def ngrams(tokens: List[str], n: int = DEFAULT_SHINGLE_SIZE) -> Iterable[str]:
    """Generate *n*-grams (as space-joined strings) from *tokens*, step one."""
    if n < 1:
        raise ValueError(f"n-gram size must be positive, got {n}")
    for i in range(len(tokens) - n + 1):
        yield " ".join(tokens[i : i + n])  # noqa: E203


def shingle(text: str, k: int = DEFAULT_SHINGLE_SIZE) -> Set[str]:
    """Return the set of distinct *k*-word shingles in *text*.

    Texts with fewer than *k* tokens produce an empty set.
    """
    return set(ngrams(tokenize(text), k))
