"""Originality detector package.

Core public API lives here so callers can::

    from originality.detector import OriginalityChecker, InMemoryDocumentStore
    checker = OriginalityChecker(InMemoryDocumentStore())
    result = checker.check_document(text, ScopeParams(category="diploma"))

Lower-level pieces:
    from originality.detector.normalize import normalize_content_for_check
    from originality.detector.shingles import shingle
    from originality.detector.minhash import MinHashEngine
    from originality.detector.compare import compare
    from originality.detector.scanner import scan_corpus
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

# Semantic version of the installed package
try:
    __version__: str = _pkg_version("originality")
except PackageNotFoundError:  # pragma: no cover – local dev path
    __version__ = "0.1.0"

from .checker import CheckResult, OriginalityChecker, check_document, ingest_signature
from .compare import compare, to_percent
from .config import CheckerConfig, load_config
from .errors import (
    ConfigError,
    LengthMismatchError,
    MalformedSignatureError,
    OriginalityError,
    RetrievalError,
    SignatureError,
    StoreError,
    StoreUnavailableError,
    ValidationError,
)
from .minhash import EMPTY_SLOT, Fingerprint, MinHashEngine, Signature
from .normalize import normalize_content_for_check
from .scanner import ComparisonResult, ScopeParams, scan_corpus
from .shingles import shingle, tokenize
from .stats import CorpusStats, summarize_corpus
from .store import CorpusDocument, DocumentStore, InMemoryDocumentStore, JsonDocumentStore

__all__ = [
    "__version__",
    # Service
    "OriginalityChecker",
    "CheckResult",
    "check_document",
    "ingest_signature",
    # Algorithms
    "normalize_content_for_check",
    "tokenize",
    "shingle",
    "MinHashEngine",
    "Fingerprint",
    "Signature",
    "EMPTY_SLOT",
    "compare",
    "to_percent",
    "scan_corpus",
    "ScopeParams",
    "ComparisonResult",
    # Storage + stats
    "CorpusDocument",
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonDocumentStore",
    "CorpusStats",
    "summarize_corpus",
    # Config + errors
    "CheckerConfig",
    "load_config",
    "OriginalityError",
    "ValidationError",
    "ConfigError",
    "SignatureError",
    "LengthMismatchError",
    "MalformedSignatureError",
    "StoreError",
    "StoreUnavailableError",
    "RetrievalError",
]
