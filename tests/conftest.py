"""Shared fixtures for content, navigation and page generation tests."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from studycamp_pages.content import ContentDocument, DocumentKind, decode_document

if typ.TYPE_CHECKING:
    from pathlib import Path


def _heading(text: str) -> dict[str, object]:
    return {"type": "heading", "level": 2, "content": text}


@pytest.fixture
def intro_details_payload() -> dict[str, object]:
    """Return the two-section letter used across navigation tests."""
    return {
        "sections": [
            {"id": "intro", "navLabel": "Intro", "content": [_heading("Intro")]},
            {"id": "details", "navLabel": "Details", "content": [_heading("Details")]},
        ]
    }


@pytest.fixture
def letter_document(intro_details_payload: dict[str, object]) -> ContentDocument:
    return decode_document(
        intro_details_payload, default_kind=DocumentKind.EXPLICIT_LABELED
    )


@pytest.fixture
def three_section_document() -> ContentDocument:
    """Return an explicit-labeled document with three navigable sections."""
    return decode_document(
        {
            "greeting": "Dear builder,",
            "sections": [
                {
                    "id": "opening",
                    "navLabel": "Opening",
                    "content": [{"type": "paragraph", "content": "Hello there."}],
                },
                {
                    "id": "why-now",
                    "navLabel": "Why Now",
                    "dividerStyle": "dots",
                    "content": [_heading("Why now")],
                },
                {
                    "id": "sign-off",
                    "navLabel": "Sign-off",
                    "dividerStyle": "asterisk",
                    "content": [{"type": "signature", "name": "Jane"}],
                },
            ],
        },
        default_kind=DocumentKind.EXPLICIT_LABELED,
    )


@pytest.fixture
def unlabelled_essay_document() -> ContentDocument:
    """Return a heading-derived document whose sections carry no ``navLabel``."""
    return decode_document(
        {
            "sections": [
                {
                    "id": "a",
                    "content": [
                        _heading("A"),
                        {"type": "paragraph", "content": "First."},
                    ],
                },
                {"id": "b", "content": [{"type": "paragraph", "content": "Aside."}]},
            ]
        },
        default_kind=DocumentKind.HEADING_DERIVED,
    )


@pytest.fixture
def write_site_config(tmp_path: Path) -> typ.Callable[[str], Path]:
    """Return a helper that writes ``site.yaml`` under ``tmp_path``."""

    def _write(text: str) -> Path:
        path = tmp_path / "site.yaml"
        path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
        return path

    return _write
