"""Originality command-line interface.

Usage
-----
$ originality ingest papers/ --store corpus.json --category diploma --status final
$ originality check draft.txt --store corpus.json --owner u1 --category coursework
$ originality stats --store corpus.json
$ originality remove 42 --store corpus.json

The *ingest* command checks each file against the current corpus, records the
uniqueness it scored and appends its signature to the store.

The *check* command prints the uniqueness of a file and its closest matches
without modifying the store.

The *stats* command summarises the store using the recorded uniqueness values.

Every command accepts ``--config config.yml`` (see
:mod:`originality.detector.config`).
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import timedelta
from pathlib import Path
from typing import List

from tqdm import tqdm

from .detector.checker import OriginalityChecker
from .detector.config import CheckerConfig, load_config
from .detector.errors import ConfigError, RetrievalError, StoreError, ValidationError
from .detector.file_ingest import collect_files, read_document
from .detector.scanner import ScopeParams
from .detector.stats import summarize_corpus
from .detector.store import STATUS_DRAFT, STATUS_FINAL, JsonDocumentStore

logger = logging.getLogger("originality")

EXIT_OK = 0
EXIT_VALIDATION = 2
EXIT_RETRIEVAL = 3

CATEGORIES = ["coursework", "diploma", "lab", "practice", "uncategorized"]

# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def _open_store(path: Path, config: CheckerConfig) -> JsonDocumentStore:
    retention = (
        timedelta(hours=config.draft_retention_hours)
        if config.draft_retention_hours is not None
        else None
    )
    return JsonDocumentStore(path, draft_retention=retention, num_perm=config.num_perm)


def _print_result(path: Path, result) -> None:
    print(f"📄 {path}")
    print(f"   Uniqueness: {result.uniqueness_percent}%")
    print(f"   Documents checked: {result.total_documents_checked:,}")
    if result.removed_sections:
        print(f"   Stripped: {', '.join(result.removed_sections)}")
    if result.corpus_empty:
        print("   Corpus is empty for this scope.")
        return
    print("   Closest matches:")
    for rank, match in enumerate(result.similar_documents, 1):
        title = match.title or "(untitled)"
        print(f"   {rank}. #{match.document_id} {title} [{match.category}] – {match.similarity}%")


# -----------------------------------------------------------
# Commands
# -----------------------------------------------------------


def _cmd_ingest(args: argparse.Namespace, config: CheckerConfig) -> int:
    store = _open_store(args.store, config)
    checker = OriginalityChecker(store, config)
    files = collect_files(args.input)
    if not files:
        print("No supported files found", file=sys.stderr)
        return EXIT_VALIDATION

    scope = ScopeParams(owner=args.owner, institution=args.institution, category=args.category)
    added = skipped = 0
    iterator = tqdm(files, desc="Ingesting") if len(files) > 1 and not args.quiet else files
    for file_path in iterator:
        try:
            text = read_document(file_path)
        except (OSError, ValueError) as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            skipped += 1
            continue

        try:
            result = checker.check_document(text, scope)
        except ValidationError as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            skipped += 1
            continue

        doc = checker.register_document(
            text,
            title=args.title or file_path.stem,
            author=args.author,
            category=args.category,
            owner=args.owner,
            institution=args.institution,
            status=args.status,
            originality_percent=result.uniqueness_percent,
            fingerprint=result.fingerprint,
        )
        added += 1
        logger.debug("Added %s as #%s (uniqueness %s%%)", file_path, doc.id, result.uniqueness_percent)

    print(f"✅ Added {added} document(s), skipped {skipped}. Store: {args.store}")
    return EXIT_OK


def _cmd_check(args: argparse.Namespace, config: CheckerConfig) -> int:
    store = _open_store(args.store, config)
    checker = OriginalityChecker(store, config)
    text = read_document(args.input)
    scope = ScopeParams(
        owner=args.owner,
        institution=args.institution,
        category=args.category,
        top_k=args.top_k,
    )
    result = checker.check_document(text, scope)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_result(args.input, result)
    return EXIT_OK


def _cmd_stats(args: argparse.Namespace, config: CheckerConfig) -> int:
    store = _open_store(args.store, config)
    stats = summarize_corpus(store.all_documents(), category=args.category)

    if args.json:
        print(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2))
        return EXIT_OK

    print("\n======= Corpus statistics =======")
    print(f"Documents          : {stats.total_documents:,}")
    print(f"Checked            : {stats.checked_documents:,}")
    if stats.average_uniqueness is not None:
        print(f"Average uniqueness : {stats.average_uniqueness:.2f}%")
    print("By category:")
    for cat, count in sorted(stats.by_category.items(), key=lambda x: x[1], reverse=True):
        print(f"   - {cat}: {count:,}")
    print("Uniqueness distribution:")
    for bucket, count in stats.uniqueness_distribution.items():
        print(f"   - {bucket}: {count:,}")
    return EXIT_OK


def _cmd_remove(args: argparse.Namespace, config: CheckerConfig) -> int:
    store = _open_store(args.store, config)
    if store.remove(args.doc_id):
        print(f"🗑️  Removed document #{args.doc_id}")
        return EXIT_OK
    print(f"Document #{args.doc_id} not found", file=sys.stderr)
    return EXIT_VALIDATION


# -----------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="originality",
        description="Originality - MinHash near-duplicate detection for documents",
    )
    parser.add_argument("--config", type=Path, help="Path to YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(required=True, dest="cmd")

    def _store_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument("--store", type=Path, required=True, help="JSON document store path")

    # ingest
    p_ingest = sub.add_parser("ingest", help="Check files and add them to the corpus")
    p_ingest.add_argument("input", nargs="+", type=Path, help="Input files or directories")
    _store_arg(p_ingest)
    p_ingest.add_argument("--category", choices=CATEGORIES, default="uncategorized")
    p_ingest.add_argument("--status", choices=[STATUS_DRAFT, STATUS_FINAL], default=STATUS_DRAFT)
    p_ingest.add_argument("--owner", help="Owner identity (excluded from its own check)")
    p_ingest.add_argument("--institution", help="Institution tag")
    p_ingest.add_argument("--title", help="Title (defaults to the file name)")
    p_ingest.add_argument("--author", help="Author name")
    p_ingest.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output")
    p_ingest.set_defaults(func=_cmd_ingest)

    # check
    p_check = sub.add_parser("check", help="Check one file against the corpus")
    p_check.add_argument("input", type=Path, help="File to check")
    _store_arg(p_check)
    p_check.add_argument("--owner", help="Exclude this owner's documents")
    p_check.add_argument("--institution", help="Only compare with this institution")
    p_check.add_argument("--category", choices=CATEGORIES + ["all"], help="Category scope")
    p_check.add_argument("--top-k", type=int, help="Number of matches to report")
    p_check.add_argument("--json", action="store_true", help="Print the result as JSON")
    p_check.set_defaults(func=_cmd_check)

    # stats
    p_stats = sub.add_parser("stats", help="Summarise the corpus")
    _store_arg(p_stats)
    p_stats.add_argument("--category", default="all", help="Restrict to one category")
    p_stats.add_argument("--json", action="store_true", help="Print the summary as JSON")
    p_stats.set_defaults(func=_cmd_stats)

    # remove
    p_remove = sub.add_parser("remove", help="Delete a document from the corpus")
    p_remove.add_argument("doc_id", type=int, help="Document id")
    _store_arg(p_remove)
    p_remove.set_defaults(func=_cmd_remove)

    return parser


def main(argv: List[str] | None = None) -> int:  # noqa: D401 – simple
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        return args.func(args, config)
    except ConfigError as exc:
        print(f"❌ Configuration error: {exc}", file=sys.stderr)
        return EXIT_VALIDATION
    except ValidationError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return EXIT_VALIDATION
    except (OSError, ValueError) as exc:
        print(f"❌ Cannot read input: {exc}", file=sys.stderr)
        return EXIT_VALIDATION
    except (RetrievalError, StoreError) as exc:
        print(f"❌ Corpus unavailable: {exc}", file=sys.stderr)
        return EXIT_RETRIEVAL


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
