"""Basic sanity tests for shingling and MinHash signatures."""
from __future__ import annotations

import numpy as np
import pytest
import xxhash

from originality.detector.compare import compare, to_percent
from originality.detector.errors import LengthMismatchError, MalformedSignatureError
from originality.detector.minhash import EMPTY_SLOT, MinHashEngine
from originality.detector.shingles import ngrams, shingle, tokenize


def test_tokenize_lowercases_and_splits_on_punctuation() -> None:
    assert tokenize("Hello, World! It's  a\tTEST.") == ["hello", "world", "it", "s", "a", "test"]


def test_tokenize_handles_cyrillic_and_compat_forms() -> None:
    assert tokenize("Курсовая РАБОТА, ﬁle") == ["курсовая", "работа", "file"]


def test_tokenize_non_string() -> None:
    assert tokenize(None) == []  # type: ignore[arg-type]


def test_ngrams_step_one() -> None:
    grams = list(ngrams(["a", "b", "c", "d"], n=2))
    assert grams == ["a b", "b c", "c d"]


def test_ngrams_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        list(ngrams(["a"], n=0))


def test_shingle_count_for_ten_words() -> None:
    text = "one two three four five six seven eight nine ten"
    shingles = shingle(text, 5)
    assert len(shingles) == 6
    assert "one two three four five" in shingles
    assert "six seven eight nine ten" in shingles


def test_shingle_duplicates_collapse() -> None:
    text = " ".join(["same words repeat here again"] * 4)
    # 20 tokens -> 16 windows, but only 5 distinct ones
    assert len(shingle(text, 5)) == 5


def test_shingle_too_few_tokens() -> None:
    assert shingle("only four words here", 5) == set()


def test_signature_has_num_perm_entries() -> None:
    engine = MinHashEngine()
    sig = engine.compute_signature(shingle("a b c d e f g h i j", 5))
    assert len(sig) == 128
    assert all(isinstance(v, int) and 0 <= v <= EMPTY_SLOT for v in sig)


def test_empty_shingle_set_yields_sentinel_signature() -> None:
    engine = MinHashEngine(num_perm=16)
    sig = engine.compute_signature(set())
    assert sig == (EMPTY_SLOT,) * 16


def test_empty_signatures_are_maximally_dissimilar() -> None:
    engine = MinHashEngine()
    empty = engine.compute_signature(set())
    full = engine.compute_signature(shingle("a b c d e f g h i j", 5))
    assert compare(empty, empty) == 0.0
    assert compare(empty, full) == 0.0


def test_minhash_collision() -> None:
    engine = MinHashEngine()
    toks1 = " ".join(f"tok{i}" for i in range(100))
    toks2 = " ".join(f"tok{i + 1000}" for i in range(100))
    similarity = compare(
        engine.compute_signature(shingle(toks1)),
        engine.compute_signature(shingle(toks2)),
    )
    assert similarity < 0.2  # low collision rate


def test_engines_with_same_seed_agree() -> None:
    shingles = shingle(" ".join(f"w{i}" for i in range(60)))
    assert MinHashEngine(seed=7).compute_signature(shingles) == MinHashEngine(
        seed=7
    ).compute_signature(shingles)


def test_engines_with_different_seeds_differ() -> None:
    shingles = shingle(" ".join(f"w{i}" for i in range(60)))
    assert MinHashEngine(seed=1).compute_signature(shingles) != MinHashEngine(
        seed=2
    ).compute_signature(shingles)


def test_engine_rebuilt_from_coefficients() -> None:
    engine = MinHashEngine(num_perm=32, seed=3)
    a, b = zip(*engine.coefficients)
    restored = MinHashEngine.from_coefficients(a, b, seed=3)
    shingles = shingle(" ".join(f"w{i}" for i in range(30)))
    assert restored.num_perm == 32
    assert restored.compute_signature(shingles) == engine.compute_signature(shingles)


def test_from_coefficients_rejects_ragged_table() -> None:
    with pytest.raises(ValueError):
        MinHashEngine.from_coefficients([1, 2], [3])


def test_fingerprint_counts_shingles() -> None:
    fp = MinHashEngine().compute_fingerprint(shingle("one two three four five six seven"))
    assert fp.shingle_count == 3
    assert not fp.is_empty


def test_compare_length_mismatch() -> None:
    with pytest.raises(LengthMismatchError):
        compare([1, 2, 3], [1, 2])


def test_compare_rejects_malformed_signatures() -> None:
    with pytest.raises(MalformedSignatureError):
        compare([1, -2, 3], [1, 2, 3])
    with pytest.raises(MalformedSignatureError):
        compare(["a", "b"], [1, 2])
    with pytest.raises(MalformedSignatureError):
        compare([[1, 2]], [[1, 2]])
    with pytest.raises(MalformedSignatureError):
        compare([], [])


def test_compare_counts_equal_positions() -> None:
    assert compare([1, 2, 3, 4], [1, 2, 0, 0]) == 0.5


@pytest.mark.parametrize(
    "similarity, expected",
    [(0.0, 0), (1.0, 100), (0.125, 13), (115 / 128, 90), (38 / 128, 30), (13 / 128, 10)],
)
def test_to_percent_rounds_half_up(similarity: float, expected: int) -> None:
    assert to_percent(similarity) == expected


MERSENNE_PRIME = (1 << 61) - 1


def _reference_signature(shingles, num_perm: int, seed: int):
    """Recompute a signature from first principles with plain integers."""
    gen = np.random.RandomState(seed)
    table = [
        (
            int(gen.randint(1, MERSENNE_PRIME, dtype=np.uint64)),
            int(gen.randint(0, MERSENNE_PRIME, dtype=np.uint64)),
        )
        for _ in range(num_perm)
    ]
    keys = [xxhash.xxh32_intdigest(s.encode("utf-8")) for s in shingles]
    # uint64 arithmetic wraps before the modulo
    signature = tuple(
        min((((k * a + b) & 0xFFFFFFFFFFFFFFFF) % MERSENNE_PRIME) & EMPTY_SLOT for k in keys)
        for a, b in table
    )
    return table, signature


def test_coefficient_table_is_pinned() -> None:
    shingles = shingle("the quick brown fox jumps over the lazy dog near the river bank", 5)
    table, expected = _reference_signature(shingles, num_perm=16, seed=1)

    engine = MinHashEngine(num_perm=16, seed=1)
    assert engine.coefficients == table
    assert engine.compute_signature(shingles) == expected
