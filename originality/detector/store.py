"""Document stores consulted by the checker.

The core never touches disk itself: it receives a :class:`DocumentStore` and
asks it for candidates. Two implementations ship here:

- :class:`InMemoryDocumentStore`: list backed, for tests and embedding.
- :class:`JsonDocumentStore`: a single JSON file ``{"next_id", "documents"}``
  with draft expiry, suitable for local single-host use.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import StoreUnavailableError
from .minhash import Signature

logger = logging.getLogger(__name__)

STATUS_DRAFT = "draft"
STATUS_FINAL = "final"
DEFAULT_CATEGORY = "uncategorized"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CorpusDocument:
    """A stored document as seen by the checker (read-only)."""

    id: Optional[int]
    signature: Signature
    category: str = DEFAULT_CATEGORY
    owner: Optional[str] = None
    institution: Optional[str] = None
    status: str = STATUS_DRAFT
    created_at: datetime = field(default_factory=_utcnow)
    title: str = ""
    author: Optional[str] = None
    shingle_count: int = 0
    originality_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "category": self.category,
            "status": self.status,
            "owner": self.owner,
            "institution": self.institution,
            "created_at": self.created_at.isoformat(),
            "shingle_count": self.shingle_count,
            "originality_percent": self.originality_percent,
            "signature": list(self.signature),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CorpusDocument":
        created = datetime.fromisoformat(data["created_at"])
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return cls(
            id=int(data["id"]),
            signature=tuple(int(v) for v in data["signature"]),
            category=data.get("category") or DEFAULT_CATEGORY,
            owner=data.get("owner"),
            institution=data.get("institution"),
            status=data.get("status", STATUS_DRAFT),
            created_at=created,
            title=data.get("title", ""),
            author=data.get("author"),
            shingle_count=int(data.get("shingle_count", 0)),
            originality_percent=data.get("originality_percent"),
        )


class DocumentStore(ABC):
    """Interface the checker depends on."""

    @abstractmethod
    def fetch_candidates(
        self, exclude_owner: Optional[str] = None, institution: Optional[str] = None
    ) -> List[CorpusDocument]:
        """Return documents eligible for comparison.

        Implementations apply their own lifecycle policy (e.g. draft expiry)
        and may pre-filter by owner and institution.
        """

    @abstractmethod
    def append(self, document: CorpusDocument) -> CorpusDocument:
        """Store *document* and return it with its assigned id."""

    @abstractmethod
    def remove(self, doc_id: int) -> bool:
        """Delete a document; ``False`` when it did not exist."""

    @abstractmethod
    def get(self, doc_id: int) -> Optional[CorpusDocument]:
        ...

    @abstractmethod
    def all_documents(self) -> List[CorpusDocument]:
        ...

    @abstractmethod
    def update_originality(self, doc_id: int, percent: float) -> bool:
        """Record the originality found when the document was checked."""


def _prefilter(
    documents: List[CorpusDocument], exclude_owner: Optional[str], institution: Optional[str]
) -> List[CorpusDocument]:
    if exclude_owner:
        documents = [d for d in documents if d.owner != exclude_owner]
    if institution:
        documents = [d for d in documents if d.institution == institution]
    return documents


class InMemoryDocumentStore(DocumentStore):
    """List-backed store; candidates come back in insertion order."""

    def __init__(self, documents: Optional[List[CorpusDocument]] = None):
        self._lock = threading.Lock()
        self._documents: List[CorpusDocument] = []
        self._next_id = 1
        for doc in documents or []:
            self.append(doc)

    def fetch_candidates(
        self, exclude_owner: Optional[str] = None, institution: Optional[str] = None
    ) -> List[CorpusDocument]:
        with self._lock:
            snapshot = list(self._documents)
        return _prefilter(snapshot, exclude_owner, institution)

    def append(self, document: CorpusDocument) -> CorpusDocument:
        with self._lock:
            if document.id is None:
                document = replace(document, id=self._next_id)
            self._next_id = max(self._next_id, document.id) + 1
            self._documents.append(document)
        return document

    def remove(self, doc_id: int) -> bool:
        with self._lock:
            for idx, doc in enumerate(self._documents):
                if doc.id == doc_id:
                    del self._documents[idx]
                    return True
        return False

    def get(self, doc_id: int) -> Optional[CorpusDocument]:
        with self._lock:
            return next((d for d in self._documents if d.id == doc_id), None)

    def all_documents(self) -> List[CorpusDocument]:
        with self._lock:
            return list(self._documents)

    def update_originality(self, doc_id: int, percent: float) -> bool:
        with self._lock:
            for idx, doc in enumerate(self._documents):
                if doc.id == doc_id:
                    self._documents[idx] = replace(doc, originality_percent=round(percent, 2))
                    return True
        return False


class JsonDocumentStore(DocumentStore):
    """Single-file JSON store with draft expiry.

    Drafts older than *draft_retention* are purged the next time candidates are
    fetched. Candidates are returned newest first.
    """

    def __init__(
        self,
        path: Union[str, Path],
        draft_retention: Optional[timedelta] = timedelta(hours=24),
        num_perm: Optional[int] = None,
    ):
        self.path = Path(path)
        self.draft_retention = draft_retention
        self.num_perm = num_perm
        self._lock = threading.RLock()

    # --------------------------------------------------
    # File access
    # --------------------------------------------------

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"next_id": 1, "documents": []}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                db = json.load(f)
            documents = [CorpusDocument.from_dict(d) for d in db.get("documents", [])]
            next_id = int(db.get("next_id", 1))
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot read {self.path}: {exc}") from exc
        except (ValueError, KeyError, TypeError) as exc:
            raise StoreUnavailableError(f"Corrupt document store {self.path}: {exc}") from exc

        if self.num_perm is not None:
            for doc in documents:
                if len(doc.signature) != self.num_perm:
                    raise StoreUnavailableError(
                        f"Document {doc.id} has a {len(doc.signature)}-entry signature, "
                        f"expected {self.num_perm}"
                    )
        return {"next_id": next_id, "documents": documents}

    def _write(self, db: Dict[str, Any]) -> None:
        payload = {
            "next_id": db["next_id"],
            "documents": [d.to_dict() for d in db["documents"]],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot write {self.path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException as exc:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            if isinstance(exc, OSError):
                raise StoreUnavailableError(f"Cannot write {self.path}: {exc}") from exc
            raise

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def _expired(self, doc: CorpusDocument, now: datetime) -> bool:
        if self.draft_retention is None or doc.status != STATUS_DRAFT:
            return False
        return now - doc.created_at >= self.draft_retention

    def fetch_candidates(
        self, exclude_owner: Optional[str] = None, institution: Optional[str] = None
    ) -> List[CorpusDocument]:
        with self._lock:
            db = self._read()
            now = _utcnow()
            live = [d for d in db["documents"] if not self._expired(d, now)]
            if len(live) != len(db["documents"]):
                logger.info(
                    "Purged %d expired draft(s) from %s",
                    len(db["documents"]) - len(live),
                    self.path,
                )
                db["documents"] = live
                self._write(db)

        candidates = _prefilter(live, exclude_owner, institution)
        return sorted(candidates, key=lambda d: d.created_at, reverse=True)

    def append(self, document: CorpusDocument) -> CorpusDocument:
        with self._lock:
            db = self._read()
            document = replace(document, id=db["next_id"])
            db["next_id"] += 1
            db["documents"].append(document)
            self._write(db)
        return document

    def remove(self, doc_id: int) -> bool:
        with self._lock:
            db = self._read()
            kept = [d for d in db["documents"] if d.id != doc_id]
            if len(kept) == len(db["documents"]):
                return False
            db["documents"] = kept
            self._write(db)
        return True

    def get(self, doc_id: int) -> Optional[CorpusDocument]:
        with self._lock:
            db = self._read()
        return next((d for d in db["documents"] if d.id == doc_id), None)

    def all_documents(self) -> List[CorpusDocument]:
        with self._lock:
            return list(self._read()["documents"])

    def update_originality(self, doc_id: int, percent: float) -> bool:
        with self._lock:
            db = self._read()
            for idx, doc in enumerate(db["documents"]):
                if doc.id == doc_id:
                    db["documents"][idx] = replace(doc, originality_percent=round(percent, 2))
                    self._write(db)
                    return True
        return False
