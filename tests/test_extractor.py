"""Unit tests for deriving section navigation from documents."""

from __future__ import annotations

import typing as typ

import studycamp_pages.navigation.extractor as extractor_module
from studycamp_pages.content import ContentDocument, DocumentKind, decode_document
from studycamp_pages.navigation import (
    NavigationExtractor,
    NavigationSection,
    extract_navigation,
    truncate_label,
)

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _essay(*sections: dict[str, object]) -> ContentDocument:
    return decode_document(
        {"sections": list(sections)}, default_kind=DocumentKind.HEADING_DERIVED
    )


def _section(section_id: str, *blocks: dict[str, object]) -> dict[str, object]:
    return {"id": section_id, "content": list(blocks)}


def _h(text: str, level: int = 2) -> dict[str, object]:
    return {"type": "heading", "level": level, "content": text}


def test_explicit_labels_are_extracted_in_order(
    letter_document: ContentDocument,
) -> None:
    entries = extract_navigation(letter_document)
    assert entries == [
        NavigationSection(id="intro", nav_label="Intro"),
        NavigationSection(id="details", nav_label="Details"),
    ], f"unexpected entries {entries!r}"


def test_explicit_sections_without_labels_are_skipped() -> None:
    document = decode_document(
        {
            "sections": [
                {"id": "a", "navLabel": "A"},
                {"id": "b"},
                {"id": "c", "navLabel": "C"},
            ]
        },
        default_kind=DocumentKind.EXPLICIT_LABELED,
    )
    ids = [entry.id for entry in extract_navigation(document)]
    assert ids == ["a", "c"], f"expected unlabeled section dropped, got {ids!r}"


def test_heading_scan_uses_level_two_headings_in_document_order() -> None:
    document = _essay(
        _section("main-content", {"type": "paragraph", "content": "intro"}),
        _section("one", _h("First"), _h("Detail", 3)),
        _section("two", {"type": "paragraph", "content": "lead"}, _h("Second")),
        _section("three", _h("Only level three", 3)),
        _section("four", _h("Fourth"), _h("Ignored second heading")),
    )
    entries = extract_navigation(document)
    assert entries == [
        NavigationSection(id="one", nav_label="First"),
        NavigationSection(id="two", nav_label="Second"),
        NavigationSection(id="four", nav_label="Fourth"),
    ], f"unexpected heading-derived entries {entries!r}"


def test_heading_scan_ignores_explicit_labels() -> None:
    """Heading-derived documents never fall back to navLabel."""
    document = _essay({"id": "a", "navLabel": "Label", "content": []})
    assert extract_navigation(document) == [], "expected no entries without headings"


def test_document_without_level_two_headings_yields_empty_navigation() -> None:
    document = _essay(_section("a", _h("Minor", 3)), _section("b"))
    assert extract_navigation(document) == [], "expected empty navigation list"
    assert extract_navigation(_essay()) == [], "expected empty list for no sections"


def test_extraction_is_deterministic(letter_document: ContentDocument) -> None:
    first = extract_navigation(letter_document)
    second = extract_navigation(letter_document)
    assert first == second, "expected identical results on repeated extraction"


def test_extractor_memoises_on_identity(
    letter_document: ContentDocument, mocker: MockerFixture
) -> None:
    spy = mocker.spy(extractor_module, "extract_navigation")
    extractor = NavigationExtractor()
    extractor.extract(letter_document)
    extractor.extract(letter_document)
    assert spy.call_count == 1, "expected cached result for the same document object"

    equal_copy = decode_document(
        {
            "sections": [
                {"id": "intro", "navLabel": "Intro"},
                {"id": "details", "navLabel": "Details"},
            ]
        },
        default_kind=DocumentKind.EXPLICIT_LABELED,
    )
    extractor.extract(equal_copy)
    assert spy.call_count == 2, "expected a new document object to re-extract"


def test_truncate_label_adds_ellipsis_past_limit() -> None:
    assert truncate_label("Short") == "Short", "expected short labels unchanged"
    assert truncate_label("x" * 26) == "x" * 25 + "...", "expected 25 chars + '...'"
    assert truncate_label("abcdef", 3) == "abc...", "expected custom limit honoured"
