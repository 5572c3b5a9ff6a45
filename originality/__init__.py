"""Originality - near-duplicate detection for student papers.

Estimates how similar a submitted text is to every document already in a
corpus and reports a uniqueness score plus the closest matches:
- boilerplate stripping (title page, contents, appendices)
- 5-word shingles
- 128-slot MinHash signatures with a fixed, seeded coefficient table
- scoped corpus scan with stable top-K ranking

Quick Start:
    # CLI usage
    originality ingest papers/ --store corpus.json --category diploma
    originality check draft.txt --store corpus.json --category coursework

    # Python API
    from originality import OriginalityChecker, JsonDocumentStore, ScopeParams
    checker = OriginalityChecker(JsonDocumentStore("corpus.json"))
    result = checker.check_document(text, ScopeParams(owner="u1"))
"""

from .detector import __version__

# Re-export main API
from .detector import (
    CheckResult,
    CheckerConfig,
    CorpusDocument,
    DocumentStore,
    InMemoryDocumentStore,
    JsonDocumentStore,
    OriginalityChecker,
    OriginalityError,
    RetrievalError,
    ScopeParams,
    ValidationError,
    check_document,
    ingest_signature,
    load_config,
)

__all__ = [
    "__version__",
    "OriginalityChecker",
    "CheckResult",
    "ScopeParams",
    "check_document",
    "ingest_signature",
    "CorpusDocument",
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonDocumentStore",
    "CheckerConfig",
    "load_config",
    "OriginalityError",
    "ValidationError",
    "RetrievalError",
]
