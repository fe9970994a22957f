"""Unit tests for the InstantDB admin API content store."""

from __future__ import annotations

import datetime as dt
import json
import typing as typ

import pytest
import requests

from studycamp_pages.content import ContentDocument, DocumentKind
from studycamp_pages.navigation import extract_navigation
from studycamp_pages.store import (
    ContentStoreError,
    InstantContentStore,
    resolve_essay_document,
)

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _response(mocker: MockerFixture, payload: object, status: int = 200) -> object:
    response = mocker.Mock()
    response.status_code = status
    response.text = json.dumps(payload)
    response.json.return_value = payload
    return response


@pytest.fixture
def session(mocker: MockerFixture) -> typ.Any:
    return mocker.Mock(spec=requests.Session)


@pytest.fixture
def store(session: typ.Any) -> InstantContentStore:
    return InstantContentStore(
        app_id="app-123",
        token="admin-secret",
        api_base="https://instant.invalid/",
        session=session,
    )


COURSE_RECORD = {
    "id": "rec-1",
    "pageId": "vibe-coding",
    "heroTitle": "Vibe Coding",
    "isActive": True,
    "letterContent": {
        "greeting": "Dear builder,",
        "sections": [
            {"id": "opening", "navLabel": "Opening", "content": []},
            {"id": "why-now", "navLabel": "Why Now", "content": []},
        ],
    },
}


def test_course_query_filters_active_page_and_sends_credentials(
    mocker: MockerFixture, session: typ.Any, store: InstantContentStore
) -> None:
    session.post.return_value = _response(
        mocker, {"coursePageContent": [COURSE_RECORD]}
    )
    page = store.get_course_page("vibe-coding")

    assert page is not None, "expected the stored course page"
    assert page.record_id == "rec-1", "expected record id retained for writes"
    assert page.letter_content is not None, "expected decoded letter content"
    assert page.letter_content.kind is DocumentKind.EXPLICIT_LABELED, (
        "expected course letters to use explicit labels"
    )
    url = session.post.call_args.args[0]
    assert url == "https://instant.invalid/admin/query", f"unexpected url {url!r}"
    kwargs = session.post.call_args.kwargs
    assert kwargs["json"] == {
        "query": {
            "coursePageContent": {
                "$": {"where": {"pageId": "vibe-coding", "isActive": True}}
            }
        }
    }, f"unexpected query body {kwargs['json']!r}"
    assert kwargs["headers"]["Authorization"] == "Bearer admin-secret", (
        "expected bearer token header"
    )
    assert kwargs["headers"]["App-Id"] == "app-123", "expected App-Id header"


def test_missing_course_page_returns_none(
    mocker: MockerFixture, session: typ.Any, store: InstantContentStore
) -> None:
    session.post.return_value = _response(mocker, {"coursePageContent": []})
    assert store.get_course_page("ghost") is None, "expected None for no records"


def test_essays_are_sorted_newest_first(
    mocker: MockerFixture, session: typ.Any, store: InstantContentStore
) -> None:
    session.post.return_value = _response(
        mocker,
        {
            "essays": [
                {
                    "slug": "old",
                    "title": "Old",
                    "published": True,
                    "publishedAt": 1_700_000_000_000,
                },
                {"slug": "draft", "title": "Draft", "published": False},
                {
                    "slug": "new",
                    "title": "New",
                    "published": True,
                    "publishedAt": "2025-09-28T09:00:00Z",
                },
                {
                    "slug": "undated",
                    "title": "Undated",
                    "published": True,
                    "createdAt": 1_600_000_000_000,
                },
            ]
        },
    )
    essays = store.list_essays()
    assert [essay.slug for essay in essays] == ["new", "old", "undated"], (
        f"unexpected essay order {[essay.slug for essay in essays]!r}"
    )
    assert essays[0].published_at == dt.datetime(2025, 9, 28, 9, tzinfo=dt.UTC), (
        "expected ISO timestamps parsed as UTC"
    )


def test_replace_course_sections_updates_whole_letter(
    mocker: MockerFixture,
    session: typ.Any,
    store: InstantContentStore,
    letter_document: ContentDocument,
) -> None:
    session.post.side_effect = [
        _response(mocker, {"coursePageContent": [COURSE_RECORD]}),
        _response(mocker, {"tx-id": 42}),
    ]
    store.replace_course_sections("vibe-coding", letter_document)

    url = session.post.call_args.args[0]
    assert url == "https://instant.invalid/admin/transact", f"unexpected url {url!r}"
    (step,) = session.post.call_args.kwargs["json"]["steps"]
    action, collection, record_id, attrs = step
    assert (action, collection, record_id) == (
        "update",
        "coursePageContent",
        "rec-1",
    ), f"unexpected transaction step {step!r}"
    sections = attrs["letterContent"]["sections"]
    assert [section["id"] for section in sections] == ["intro", "details"], (
        "expected the full sections array to be written"
    )
    assert isinstance(attrs["updatedAt"], int), "expected updatedAt in epoch ms"


def test_replace_essay_sections_requires_existing_essay(
    mocker: MockerFixture,
    session: typ.Any,
    store: InstantContentStore,
    letter_document: ContentDocument,
) -> None:
    session.post.return_value = _response(mocker, {"essays": []})
    with pytest.raises(ContentStoreError, match="does not exist"):
        store.replace_essay_sections("ghost", letter_document)


def test_writes_require_admin_token(session: typ.Any) -> None:
    store = InstantContentStore(app_id="app-123", session=session)
    with pytest.raises(ContentStoreError, match="admin token"):
        store.transact("essays", "rec-1", {"sections": []})
    session.post.assert_not_called()


def test_http_errors_become_store_errors(
    mocker: MockerFixture, session: typ.Any, store: InstantContentStore
) -> None:
    session.post.return_value = _response(mocker, {"message": "denied"}, status=403)
    with pytest.raises(ContentStoreError, match="status 403"):
        store.list_essays()


def test_transport_errors_are_chained(
    session: typ.Any, store: InstantContentStore
) -> None:
    session.post.side_effect = requests.ConnectionError("offline")
    with pytest.raises(ContentStoreError, match="Failed to reach") as excinfo:
        store.get_essay("any")
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError), (
        "expected the transport error to be chained"
    )


def test_invalid_letter_content_is_reported(
    mocker: MockerFixture, session: typ.Any, store: InstantContentStore
) -> None:
    record = {
        **COURSE_RECORD,
        "letterContent": {"sections": [{"id": "a"}, {"id": "a"}]},
    }
    session.post.return_value = _response(mocker, {"coursePageContent": [record]})
    with pytest.raises(ContentStoreError, match="invalid letter content"):
        store.get_course_page("vibe-coding")


def test_heading_derived_essay_sections_keep_navigation(
    mocker: MockerFixture,
    session: typ.Any,
    store: InstantContentStore,
    unlabelled_essay_document: ContentDocument,
) -> None:
    session.post.side_effect = [
        _response(mocker, {"essays": [{"id": "rec-9", "slug": "notes"}]}),
        _response(mocker, {"tx-id": 7}),
    ]
    store.replace_essay_sections("notes", unlabelled_essay_document)
    (step,) = session.post.call_args.kwargs["json"]["steps"]
    written = step[3]["sections"]
    assert [section.get("navLabel") for section in written] == ["A", None], (
        f"expected labels taken from level-two headings, got {written!r}"
    )

    session.post.side_effect = [
        _response(
            mocker,
            {
                "essays": [
                    {
                        "id": "rec-9",
                        "slug": "notes",
                        "title": "Notes",
                        "published": True,
                        "sections": written,
                    }
                ]
            },
        )
    ]
    essay = store.get_essay("notes")
    assert essay is not None, "expected the essay to load back"
    entries = extract_navigation(resolve_essay_document(essay))
    assert entries == extract_navigation(unlabelled_essay_document), (
        f"expected navigation to survive the write, got {entries!r}"
    )
