"""Exception hierarchy for the originality checker.

Every failure the core can signal derives from :class:`OriginalityError` so the
calling layer can catch the whole family at once, while still telling a bad
request (:class:`ValidationError`) apart from an unreadable corpus
(:class:`RetrievalError`).
"""
from __future__ import annotations


class OriginalityError(Exception):
    """Base class for all checker errors."""


class ValidationError(OriginalityError):
    """Submitted text is missing or shorter than the configured minimum."""


class ConfigError(OriginalityError):
    """Engine configuration is invalid."""


class SignatureError(OriginalityError):
    """A signature cannot be compared."""


class LengthMismatchError(SignatureError):
    """Two signatures have different lengths (``num_perm`` drift)."""

    def __init__(self, left: int, right: int):
        super().__init__(
            f"Signature length mismatch: {left} != {right}. "
            "Signatures computed with a different num_perm must be re-ingested."
        )
        self.left = left
        self.right = right


class MalformedSignatureError(SignatureError):
    """A signature holds something other than non-negative integers."""


class StoreError(OriginalityError):
    """Raised by document stores."""


class StoreUnavailableError(StoreError):
    """The backing storage could not be read or written."""


class RetrievalError(OriginalityError):
    """Corpus candidates could not be fetched; no result was produced."""
