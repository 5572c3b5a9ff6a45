"""Originality check service.

Integrates:
- input validation
- boilerplate stripping
- shingling and MinHash fingerprinting
- corpus scan and ranking against an injected document store
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .config import CheckerConfig
from .errors import RetrievalError, StoreError, ValidationError
from .minhash import Fingerprint, MinHashEngine, Signature
from .normalize import FilterPipeline, create_default_pipeline
from .scanner import ComparisonResult, ScopeParams, scan_corpus
from .shingles import shingle
from .store import DEFAULT_CATEGORY, STATUS_DRAFT, CorpusDocument, DocumentStore

logger = logging.getLogger(__name__)


def _require_text(raw_text: Any) -> None:
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ValidationError("Content is required")


def _fingerprint_text(
    raw_text: str, engine: MinHashEngine, shingle_size: int, normalizer: FilterPipeline
) -> Tuple[Fingerprint, List[str]]:
    text, removed = normalizer.apply(raw_text)
    if removed:
        logger.debug("Stripped boilerplate sections: %s", ", ".join(removed))
    return engine.compute_fingerprint(shingle(text, shingle_size)), removed


@dataclass(frozen=True)
class CheckResult:
    similar_documents: List[ComparisonResult]
    uniqueness_percent: int
    total_documents_checked: int
    processing_time_ms: float = 0.0
    removed_sections: List[str] = field(default_factory=list)
    # Signature of the submitted text, reusable by register_document.
    fingerprint: Optional[Fingerprint] = field(default=None, compare=False, repr=False)

    @property
    def corpus_empty(self) -> bool:
        """True when no candidate survived scoping (not an error)."""
        return self.total_documents_checked == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uniqueness_percent": self.uniqueness_percent,
            "total_documents_checked": self.total_documents_checked,
            "processing_time_ms": round(self.processing_time_ms, 2),
            "similar_documents": [r.to_dict() for r in self.similar_documents],
            "removed_sections": list(self.removed_sections),
        }


class OriginalityChecker:
    """Check texts against a corpus of stored signatures."""

    def __init__(self, store: DocumentStore, config: Optional[CheckerConfig] = None):
        self.store = store
        self.config = config or CheckerConfig()
        self.engine = MinHashEngine(num_perm=self.config.num_perm, seed=self.config.seed)
        self._normalizer = create_default_pipeline()

    # --------------------------------------------------
    # Fingerprinting
    # --------------------------------------------------

    def _fingerprint(self, raw_text: str) -> Tuple[Fingerprint, List[str]]:
        return _fingerprint_text(raw_text, self.engine, self.config.shingle_size, self._normalizer)

    def fingerprint(self, raw_text: str) -> Fingerprint:
        """Signature plus shingle count for *raw_text*."""
        _require_text(raw_text)
        fp, _ = self._fingerprint(raw_text)
        return fp

    def ingest_signature(self, raw_text: str) -> Signature:
        """Signature to persist when *raw_text* joins the corpus."""
        return self.fingerprint(raw_text).signature

    def register_document(
        self,
        raw_text: str,
        *,
        title: str = "",
        author: Optional[str] = None,
        category: str = DEFAULT_CATEGORY,
        owner: Optional[str] = None,
        institution: Optional[str] = None,
        status: str = STATUS_DRAFT,
        created_at: Optional[datetime] = None,
        originality_percent: Optional[float] = None,
        fingerprint: Optional[Fingerprint] = None,
    ) -> CorpusDocument:
        """Fingerprint *raw_text* and append it to the store.

        A *fingerprint* already computed for the same text (e.g.
        ``CheckResult.fingerprint``) is stored as is.
        """
        if fingerprint is None:
            fp = self.fingerprint(raw_text)
        else:
            _require_text(raw_text)
            fp = fingerprint
        doc = CorpusDocument(
            id=None,
            signature=fp.signature,
            category=category or DEFAULT_CATEGORY,
            owner=owner,
            institution=institution,
            status=status,
            title=title,
            author=author,
            shingle_count=fp.shingle_count,
            originality_percent=originality_percent,
        )
        if created_at is not None:
            doc = replace(doc, created_at=created_at)
        stored = self.store.append(doc)
        logger.info("Registered document %s (%d shingles)", stored.id, fp.shingle_count)
        return stored

    # --------------------------------------------------
    # Checking
    # --------------------------------------------------

    def _validate(self, raw_text: Any) -> None:
        _require_text(raw_text)
        if len(raw_text) < self.config.min_length:
            raise ValidationError(
                f"Content must be at least {self.config.min_length} characters "
                f"(got {len(raw_text)})"
            )

    def check_document(self, raw_text: str, scope: Optional[ScopeParams] = None) -> CheckResult:
        """Estimate how original *raw_text* is with respect to the corpus.

        Raises:
            ValidationError: text missing or shorter than ``min_length``
            RetrievalError: the store could not be read
        """
        scope = scope or ScopeParams()
        self._validate(raw_text)
        top_k = scope.top_k if scope.top_k is not None else self.config.top_k
        if top_k < 1:
            raise ValidationError(f"top_k must be positive, got {top_k}")

        start = time.perf_counter()
        fp, removed = self._fingerprint(raw_text)

        try:
            documents = self.store.fetch_candidates(
                exclude_owner=scope.owner, institution=scope.institution
            )
        except (StoreError, OSError) as exc:
            logger.error("Corpus retrieval failed: %s", exc)
            raise RetrievalError(f"Failed to fetch corpus candidates: {exc}") from exc

        outcome = scan_corpus(
            fp.signature,
            documents,
            scope,
            top_k=top_k,
            workers=self.config.workers,
            parallel_threshold=self.config.parallel_threshold,
        )

        top = outcome.ranked[0].similarity if outcome.ranked else 0
        result = CheckResult(
            similar_documents=outcome.ranked,
            uniqueness_percent=100 - top,
            total_documents_checked=outcome.scanned,
            processing_time_ms=(time.perf_counter() - start) * 1000,
            removed_sections=removed,
            fingerprint=fp,
        )

        logger.info(
            "Check finished: uniqueness=%d%% scanned=%d matches=%d in %.1f ms",
            result.uniqueness_percent,
            result.total_documents_checked,
            len(result.similar_documents),
            result.processing_time_ms,
        )
        if fp.is_empty:
            logger.warning("Submitted text produced no shingles; it cannot match anything")
        return result


def check_document(
    raw_text: str,
    store: DocumentStore,
    scope: Optional[ScopeParams] = None,
    config: Optional[CheckerConfig] = None,
) -> CheckResult:
    """Convenience wrapper around :meth:`OriginalityChecker.check_document`."""
    return OriginalityChecker(store, config).check_document(raw_text, scope)


def ingest_signature(raw_text: str, config: Optional[CheckerConfig] = None) -> Signature:
    """Signature of *raw_text* under *config* (no store involved)."""
    _require_text(raw_text)
    cfg = config or CheckerConfig()
    engine = MinHashEngine(num_perm=cfg.num_perm, seed=cfg.seed)
    fp, _ = _fingerprint_text(raw_text, engine, cfg.shingle_size, create_default_pipeline())
    return fp.signature
