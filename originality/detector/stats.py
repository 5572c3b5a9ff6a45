"""Corpus statistics built from recorded originality values."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .store import DEFAULT_CATEGORY, CorpusDocument

UNIQUENESS_BUCKETS: List[Tuple[str, int, int]] = [
    ("0-20%", 0, 20),
    ("21-40%", 21, 40),
    ("41-60%", 41, 60),
    ("61-80%", 61, 80),
    ("81-100%", 81, 100),
]


def bucket_for(percent: float) -> str:
    """Label of the uniqueness bucket *percent* falls into."""
    value = int(round(percent))
    for label, low, high in UNIQUENESS_BUCKETS:
        if low <= value <= high:
            return label
    raise ValueError(f"Uniqueness must lie in [0, 100], got {percent}")


@dataclass
class CorpusStats:
    total_documents: int = 0
    checked_documents: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_status: Dict[str, int] = field(default_factory=dict)
    uniqueness_distribution: Dict[str, int] = field(
        default_factory=lambda: {label: 0 for label, _, _ in UNIQUENESS_BUCKETS}
    )
    average_uniqueness: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_documents": self.total_documents,
            "checked_documents": self.checked_documents,
            "unchecked_documents": self.total_documents - self.checked_documents,
            "by_category": dict(self.by_category),
            "by_status": dict(self.by_status),
            "uniqueness_distribution": dict(self.uniqueness_distribution),
            "average_uniqueness": self.average_uniqueness,
        }


def summarize_corpus(documents: Iterable[CorpusDocument], category: str = "all") -> CorpusStats:
    """Aggregate *documents*, optionally restricted to one *category*.

    Only documents with a recorded ``originality_percent`` feed the
    distribution and the average; the rest count as unchecked.
    """
    stats = CorpusStats()
    total_uniqueness = 0.0

    for doc in documents:
        cat = doc.category or DEFAULT_CATEGORY
        if category != "all" and cat != category:
            continue
        stats.total_documents += 1
        stats.by_category[cat] = stats.by_category.get(cat, 0) + 1
        stats.by_status[doc.status] = stats.by_status.get(doc.status, 0) + 1

        if doc.originality_percent is None:
            continue
        stats.checked_documents += 1
        total_uniqueness += doc.originality_percent
        stats.uniqueness_distribution[bucket_for(doc.originality_percent)] += 1

    if stats.checked_documents:
        stats.average_uniqueness = round(total_uniqueness / stats.checked_documents, 2)
    return stats
