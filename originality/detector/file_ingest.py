"""Read document text from files for the command-line tool.

Supports:
- .txt / .md files (encoding detected with chardet)
- .html / .htm files (text extracted with BeautifulSoup)
- .gz compressed text
- folder traversal
"""
from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

import chardet
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".txt", ".md", ".html", ".htm", ".gz"}


def detect_encoding(raw: bytes) -> str:
    """Guess the encoding of *raw* bytes, defaulting to UTF-8."""
    result = chardet.detect(raw[:65536])
    return result.get("encoding") or "utf-8"


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        encoding = detect_encoding(raw)
        logger.debug("Falling back to detected encoding %s", encoding)
        try:
            return raw.decode(encoding, errors="replace")
        except LookupError:
            return raw.decode("utf-8", errors="replace")


def html_to_text(content: str) -> str:
    """Visible text of an HTML document, one block per line."""
    soup = BeautifulSoup(content, "html.parser")
    for script in soup(["script", "style"]):
        script.decompose()
    lines = (line.strip() for line in soup.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)


def read_document(path: Union[str, Path]) -> str:
    """Return the text content of *path*.

    Raises:
        ValueError: unsupported extension
        OSError: the file cannot be read
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {path.name}")

    if suffix == ".gz":
        with gzip.open(path, "rb") as f:
            return _decode(f.read())

    text = _decode(path.read_bytes())
    if suffix in {".html", ".htm"}:
        return html_to_text(text)
    return text


def collect_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Expand *paths* (files or directories) into supported files, sorted per directory."""
    files: List[Path] = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            files.extend(
                sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS)
            )
        elif path.is_file():
            files.append(path)
        else:
            logger.warning("Skipping missing path %s", path)
    return files


def iter_documents(paths: Iterable[Union[str, Path]]) -> Iterator[Tuple[Path, str]]:
    """Yield ``(path, text)`` for every readable supported file under *paths*."""
    for file_path in collect_files(paths):
        try:
            yield file_path, read_document(file_path)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read %s: %s", file_path, exc)
