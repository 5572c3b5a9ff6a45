"""Corpus scan: scope filtering, comparison and top-K ranking.

Every retained candidate is compared against the query signature; there is no
LSH shortlist, so the reported similarity of each candidate is always its full
MinHash estimate.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .compare import compare, to_percent
from .store import CorpusDocument

# Categories that are checked against each other.
CROSS_CHECKED_CATEGORIES = frozenset({"coursework", "diploma"})
ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class ScopeParams:
    """Which part of the corpus a check is run against."""

    owner: Optional[str] = None
    institution: Optional[str] = None
    category: Optional[str] = None
    top_k: Optional[int] = None


@dataclass(frozen=True)
class ComparisonResult:
    document_id: int
    similarity: int
    category: str = ""
    title: str = ""
    author: Optional[str] = None
    owner: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.document_id,
            "similarity": self.similarity,
            "category": self.category,
            "title": self.title,
            "author": self.author,
            "owner": self.owner,
        }


@dataclass(frozen=True)
class ScanOutcome:
    ranked: List[ComparisonResult]
    scanned: int


# -----------------------------------------------------------
# Filtering
# -----------------------------------------------------------


def filter_candidates(documents: Sequence[CorpusDocument], scope: ScopeParams) -> List[CorpusDocument]:
    """Apply owner exclusion, institution and category scoping, in that order."""
    kept = list(documents)

    if scope.owner:
        kept = [d for d in kept if d.owner != scope.owner]

    if scope.institution:
        kept = [d for d in kept if d.institution == scope.institution]

    category = scope.category
    if category in CROSS_CHECKED_CATEGORIES:
        kept = [d for d in kept if d.category in CROSS_CHECKED_CATEGORIES]
    elif category and category != ALL_CATEGORIES:
        kept = [d for d in kept if d.category == category]

    return kept


# -----------------------------------------------------------
# Comparison + ranking
# -----------------------------------------------------------


def _compare_chunk(query: Sequence[int], chunk: Sequence[CorpusDocument]) -> List[ComparisonResult]:
    return [
        ComparisonResult(
            document_id=doc.id,
            similarity=to_percent(compare(query, doc.signature)),
            category=doc.category,
            title=doc.title,
            author=doc.author,
            owner=doc.owner,
        )
        for doc in chunk
    ]


def rank_results(results: Sequence[ComparisonResult], top_k: int) -> List[ComparisonResult]:
    """Sort by similarity descending (stable) and keep the first *top_k*."""
    if top_k < 1:
        raise ValueError(f"top_k must be positive, got {top_k}")
    return sorted(results, key=lambda r: r.similarity, reverse=True)[:top_k]


def scan_corpus(
    query: Sequence[int],
    documents: Sequence[CorpusDocument],
    scope: ScopeParams,
    *,
    top_k: int,
    workers: int = 1,
    parallel_threshold: int = 2048,
) -> ScanOutcome:
    """Compare *query* with every in-scope document and rank the matches.

    With ``workers > 1`` and at least *parallel_threshold* candidates the
    comparisons run in chunks on a thread pool; ``Executor.map`` yields chunk
    results in submission order so the merged list keeps corpus order.
    """
    candidates = filter_candidates(documents, scope)

    if workers > 1 and len(candidates) >= parallel_threshold:
        size = -(-len(candidates) // workers)
        chunks = [candidates[i : i + size] for i in range(0, len(candidates), size)]  # noqa: E203
        results: List[ComparisonResult] = []
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for part in pool.map(lambda c: _compare_chunk(query, c), chunks):
                results.extend(part)
    else:
        results = _compare_chunk(query, candidates)

    return ScanOutcome(ranked=rank_results(results, top_k), scanned=len(candidates))
