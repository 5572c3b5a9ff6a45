"""MinHash signatures for shingle sets.

Each shingle is keyed with 32-bit xxHash and pushed through ``datasketch``'s
universal hash family ``h_i(x) = ((a_i * x + b_i) mod p) & (2**32 - 1)`` with
``p = 2**61 - 1``. The ``(a_i, b_i)`` coefficient table is derived once from a
fixed seed and shared by every signature an engine produces; regenerating it
per call would make signatures from different documents incomparable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np
import xxhash
from datasketch import MinHash

DEFAULT_NUM_PERM = 128
DEFAULT_SEED = 1

# Value of every slot when the shingle set is empty.
EMPTY_SLOT: int = (1 << 32) - 1

Signature = Tuple[int, ...]


def _xxh32(data: bytes) -> int:
    return xxhash.xxh32_intdigest(data)


@dataclass(frozen=True)
class Fingerprint:
    signature: Signature
    shingle_count: int

    @property
    def is_empty(self) -> bool:
        return self.shingle_count == 0


class MinHashEngine:
    """Compute fixed-length signatures with a fixed coefficient table."""

    def __init__(self, num_perm: int = DEFAULT_NUM_PERM, seed: int = DEFAULT_SEED) -> None:
        if num_perm < 1:
            raise ValueError(f"num_perm must be positive, got {num_perm}")
        self.num_perm = num_perm
        self.seed = seed
        # Generated once; every MinHash below reuses it.
        self._permutations = MinHash(num_perm=num_perm, seed=seed).permutations

    @classmethod
    def from_coefficients(
        cls, a: Sequence[int], b: Sequence[int], seed: int = DEFAULT_SEED
    ) -> "MinHashEngine":
        """Rebuild an engine from a stored coefficient table."""
        if len(a) != len(b) or not a:
            raise ValueError("Coefficient vectors must be non-empty and of equal length")
        engine = cls.__new__(cls)
        engine.num_perm = len(a)
        engine.seed = seed
        engine._permutations = (
            np.asarray(a, dtype=np.uint64),
            np.asarray(b, dtype=np.uint64),
        )
        return engine

    @property
    def coefficients(self) -> List[Tuple[int, int]]:
        """The ``(a_i, b_i)`` pairs, one per hash function."""
        a, b = self._permutations
        return [(int(x), int(y)) for x, y in zip(a, b)]

    def compute_signature(self, shingles: Iterable[str]) -> Signature:
        """Return the ``num_perm``-entry signature of *shingles*.

        An empty input yields a signature made entirely of :data:`EMPTY_SLOT`.
        """
        mh = MinHash(
            num_perm=self.num_perm,
            seed=self.seed,
            hashfunc=_xxh32,
            permutations=self._permutations,
        )
        encoded = [s.encode("utf-8") for s in set(shingles)]
        if encoded:
            mh.update_batch(encoded)
        return tuple(int(v) for v in mh.hashvalues)

    def compute_fingerprint(self, shingles: Iterable[str]) -> Fingerprint:
        unique = set(shingles)
        return Fingerprint(signature=self.compute_signature(unique), shingle_count=len(unique))
