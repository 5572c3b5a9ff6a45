"""Boilerplate stripping applied before fingerprinting.

Student papers carry structural text that every submission shares: a title
page, a table of contents and appendices. Left in, it inflates similarity
between unrelated works. The filters here remove:

- a leading title-page block
- an early table of contents
- trailing appendix sections

Detection is pattern based (Russian and English headings). A filter that does
not recognise its section returns the text untouched; leaving boilerplate in is
acceptable, stripping body text is not.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

# -----------------------------------------------------------
# Patterns
# -----------------------------------------------------------

_TOC_HEADING_RE = re.compile(
    r"^\s*(?:содержание|оглавление|table\s+of\s+contents|contents)\s*:?\s*$",
    re.IGNORECASE,
)

# "Введение ........ 3" (dot leader) or "1.2 Анализ предметной области 12" (numbered section)
_TOC_ENTRY_RE = re.compile(
    r"^\s*(?:\S.*?\s*[.…·_]{2,}\s*|\d+(?:\.\d+)*\.?\s+\S.*?\s+)\d{1,4}\s*$"
)

# Headings that open the actual work; a title page ends right before one.
_ANCHOR_HEADING_RE = re.compile(
    r"^\s*(?:\d+\s*\.?\s*)?(?:содержание|оглавление|введение|аннотация|реферат|"
    r"table\s+of\s+contents|contents|introduction|abstract)\s*:?\s*$",
    re.IGNORECASE,
)

_TITLE_MARKER_RE = re.compile(
    r"министерств\w*|университет\w*|институт\w*|академи\w*|колледж\w*|"
    r"кафедр\w*|факультет\w*|курсов\w+\s+(?:работ|проект)\w*|дипломн\w+\s+работ\w*|"
    r"выпускн\w+\s+квалификационн\w+\s+работ\w*|лабораторн\w+\s+работ\w*|"
    r"отч[её]т\w*\s+(?:о|по)\s+практик\w*|выполнил\w*|проверил\w*|"
    r"научн\w+\s+руководител\w*|руководител\w*|студент\w*\s+групп\w*|"
    r"ministry|university|institute|department|faculty|submitted\s+by|"
    r"supervisor|thesis|dissertation",
    re.IGNORECASE,
)

_APPENDIX_HEADING_RE = re.compile(
    r"^\s*(?:приложени[еяй](?:\s+[а-яa-z0-9]{1,3})?|appendix(?:\s+[a-z0-9]{1,3})?|appendices)"
    r"\s*[.:]?\s*$",
    re.IGNORECASE,
)

TITLE_PAGE_MAX_LINES = 60
TITLE_PAGE_MAX_LINE_LENGTH = 120
TITLE_PAGE_MIN_MARKERS = 2
TOC_SEARCH_LINES = 100
TOC_MIN_ENTRIES = 2


def _offsets(lines: List[str]) -> List[int]:
    """Character offset at which each line starts."""
    out = []
    pos = 0
    for line in lines:
        out.append(pos)
        pos += len(line)
    return out


# -----------------------------------------------------------
# Filters
# -----------------------------------------------------------


class TextFilter:
    """Base class for section strippers.

    Filters are stateless so a single pipeline may be shared between threads.
    """

    name = "base"

    def filter(self, text: str) -> Tuple[str, str]:
        """
        Strip a section from *text*.

        Returns:
            (filtered_text, reason) where *reason* is empty when nothing was removed
        """
        raise NotImplementedError


class TitlePageFilter(TextFilter):
    """Drop the title page that precedes the first anchor heading."""

    name = "title_page"

    def filter(self, text: str) -> Tuple[str, str]:
        lines = text.splitlines(keepends=True)
        anchor = self._find_anchor(lines)
        if not anchor:
            return text, ""

        prefix = lines[:anchor]
        if len(prefix) > TITLE_PAGE_MAX_LINES:
            return text, ""
        if any(len(line.strip()) > TITLE_PAGE_MAX_LINE_LENGTH for line in prefix):
            return text, ""

        markers = set()
        for line in prefix:
            for match in _TITLE_MARKER_RE.finditer(line):
                markers.add(match.group(0).lower()[:6])
        if len(markers) < TITLE_PAGE_MIN_MARKERS:
            return text, ""

        return "".join(lines[anchor:]), "removed_title_page"

    @staticmethod
    def _find_anchor(lines: List[str]) -> Optional[int]:
        for idx, line in enumerate(lines[: TITLE_PAGE_MAX_LINES + 1]):
            if _ANCHOR_HEADING_RE.match(line):
                return idx
        return None


class TableOfContentsFilter(TextFilter):
    """Drop a contents heading and the page-numbered entries under it."""

    name = "table_of_contents"

    def filter(self, text: str) -> Tuple[str, str]:
        lines = text.splitlines(keepends=True)
        offsets = _offsets(lines)
        half = len(text) / 2

        for idx, line in enumerate(lines[:TOC_SEARCH_LINES]):
            if offsets[idx] > half:
                break
            if not _TOC_HEADING_RE.match(line):
                continue
            end, entries = self._consume_entries(lines, idx + 1)
            if entries < TOC_MIN_ENTRIES:
                return text, ""
            return "".join(lines[:idx] + lines[end:]), "removed_table_of_contents"

        return text, ""

    @staticmethod
    def _consume_entries(lines: List[str], start: int) -> Tuple[int, int]:
        """Return (index after the last entry, number of entries).

        Blank lines are skipped until the first entry; afterwards a blank line
        ends the contents block.
        """
        entries = 0
        end = start
        for idx in range(start, len(lines)):
            stripped = lines[idx].strip()
            if not stripped:
                if entries:
                    break
                continue
            if not _TOC_ENTRY_RE.match(stripped):
                break
            entries += 1
            end = idx + 1
        return end, entries


class AppendixFilter(TextFilter):
    """Drop everything from the first appendix heading in the second half."""

    name = "appendix"

    def filter(self, text: str) -> Tuple[str, str]:
        lines = text.splitlines(keepends=True)
        offsets = _offsets(lines)
        half = len(text) / 2

        for idx, line in enumerate(lines):
            if offsets[idx] < half:
                continue
            if _APPENDIX_HEADING_RE.match(line):
                return "".join(lines[:idx]), "removed_appendix"
        return text, ""


class FilterPipeline:
    """Apply several filters in sequence."""

    def __init__(self, filters: List[TextFilter]):
        self.filters = filters

    def apply(self, text: str) -> Tuple[str, List[str]]:
        """
        Apply all filters in order.

        Returns:
            (final_text, list_of_reasons) for the filters that removed something.
            If stripping would leave nothing but whitespace the input is
            returned unchanged with no reasons.
        """
        current = text
        reasons = []
        for filter_obj in self.filters:
            current, reason = filter_obj.filter(current)
            if reason:
                reasons.append(f"{filter_obj.name}:{reason}")

        if not current.strip():
            return text, []
        return current, reasons


def create_default_pipeline() -> FilterPipeline:
    return FilterPipeline([TitlePageFilter(), TableOfContentsFilter(), AppendixFilter()])


_DEFAULT_PIPELINE = create_default_pipeline()


def normalize_content_for_check(text: str) -> str:
    """Return *text* without title page, table of contents and appendices."""
    normalized, _ = _DEFAULT_PIPELINE.apply(text)
    return normalized
