"""Tests for boilerplate stripping."""
from __future__ import annotations

from originality.detector.normalize import (
    AppendixFilter,
    TableOfContentsFilter,
    TitlePageFilter,
    create_default_pipeline,
    normalize_content_for_check,
)

TITLE = (
    "МИНИСТЕРСТВО НАУКИ И ВЫСШЕГО ОБРАЗОВАНИЯ\n"
    "Московский государственный университет\n"
    "Кафедра информатики\n"
    "\n"
    "КУРСОВАЯ РАБОТА\n"
    "Выполнил: студент группы ИС-21 Иванов И.И.\n"
    "Научный руководитель: Петров П.П.\n"
    "Москва\n"
)

TOC = (
    "СОДЕРЖАНИЕ\n"
    "Введение ........ 3\n"
    "1. Анализ предметной области ........ 5\n"
    "2. Проектирование системы ........ 12\n"
    "Заключение ........ 20\n"
)

PARAGRAPH = (
    "В работе рассматривается задача поиска заимствований в текстах студенческих работ "
    "и предлагается подход на основе сигнатур минимальных хешей для оценки сходства.\n"
)

BODY = "ВВЕДЕНИЕ\n" + PARAGRAPH * 8

APPENDIX = "ПРИЛОЖЕНИЕ А\nЛистинг программы\nprint(hello)\n"


def test_full_document_reduces_to_body() -> None:
    text, reasons = create_default_pipeline().apply(TITLE + TOC + BODY + APPENDIX)
    assert text == BODY
    assert reasons == [
        "title_page:removed_title_page",
        "table_of_contents:removed_table_of_contents",
        "appendix:removed_appendix",
    ]


def test_plain_text_is_untouched() -> None:
    text = "Just an essay.\nIt has two lines and no structure at all, nothing to strip.\n"
    assert normalize_content_for_check(text) == text
    assert create_default_pipeline().apply(text) == (text, [])


def test_title_page_needs_markers() -> None:
    text = "Some heading\nAnother line\nIntroduction\n" + PARAGRAPH
    assert TitlePageFilter().filter(text) == (text, "")


def test_title_page_with_long_lines_is_kept() -> None:
    prose = "университет и кафедра упоминаются в длинном абзаце " * 5
    text = prose + "\nВведение\n" + PARAGRAPH
    assert TitlePageFilter().filter(text) == (text, "")


def test_title_page_english() -> None:
    text = "State University\nDepartment of Physics\nThesis\n\nAbstract\n" + PARAGRAPH
    stripped, reason = TitlePageFilter().filter(text)
    assert reason == "removed_title_page"
    assert stripped == "Abstract\n" + PARAGRAPH


def test_toc_needs_entries() -> None:
    text = "Contents\nIntroduction ..... 1\n" + PARAGRAPH * 3
    assert TableOfContentsFilter().filter(text) == (text, "")


def test_toc_english() -> None:
    toc = "Table of Contents\nIntroduction ..... 1\nMethods ..... 4\n3.1 Results 9\n\n"
    stripped, reason = TableOfContentsFilter().filter(toc + BODY)
    assert reason == "removed_table_of_contents"
    assert stripped == "\n" + BODY


def test_appendix_mention_in_body_is_kept() -> None:
    text = BODY + "Подробности приведены в приложении А к настоящей работе.\n"
    assert AppendixFilter().filter(text) == (text, "")


def test_appendix_heading_early_is_kept() -> None:
    text = "Appendix A\n" + PARAGRAPH * 5
    assert AppendixFilter().filter(text) == (text, "")


def test_appendix_english() -> None:
    stripped, reason = AppendixFilter().filter(BODY + "Appendix B:\nraw data\n")
    assert reason == "removed_appendix"
    assert stripped == BODY


def test_nothing_left_returns_original() -> None:
    text = "Contents\nIntro .... 1\nEnd .... 2\n"
    assert create_default_pipeline().apply(text) == (text, [])


def test_crlf_line_endings_preserved() -> None:
    text = BODY.replace("\n", "\r\n")
    assert normalize_content_for_check(text) == text


def test_body_line_ending_in_number_is_kept() -> None:
    body = (
        "The survey covered every district school opened before 1995\n"
        "and the results are summarised below in plain prose form.\n"
    )
    text = "Contents\nIntroduction ........ 3\nMethods ........ 5\n" + body
    assert normalize_content_for_check(text) == body


def test_blank_line_ends_contents() -> None:
    body = "2 schools opened in 1995\n" + PARAGRAPH * 3
    text = "Contents\nIntroduction ........ 3\nMethods ........ 5\n\n" + body
    stripped, reason = TableOfContentsFilter().filter(text)
    assert reason == "removed_table_of_contents"
    assert stripped == "\n" + body
