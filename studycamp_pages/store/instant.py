"""InstantDB admin API client for course pages and essays.

The hosted store is queried with InstaQL over ``POST /admin/query`` and
updated with ``POST /admin/transact``. Section writes replace the whole
``sections`` array of the stored document; there is no per-section patch.

Example
-------
>>> from studycamp_pages.store import InstantContentStore
>>> store = InstantContentStore(app_id="app-123", token="secret")  # doctest: +SKIP
>>> page = store.get_course_page("vibe-coding")  # doctest: +SKIP
>>> [section.id for section in page.letter_content.sections]  # doctest: +SKIP
['opening', 'why-now']
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import json
import logging
import typing as typ
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from studycamp_pages._constants import COURSE_PAGE_COLLECTION, ESSAY_COLLECTION
from studycamp_pages.content import document_to_builtins

from .base import (
    ContentStoreError,
    CoursePage,
    Essay,
    course_page_from_record,
    essay_from_record,
    sort_essays,
    stored_essay_sections,
)

if typ.TYPE_CHECKING:
    from studycamp_pages.content import ContentDocument

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.instantdb.com"


def _build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD", "POST"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class InstantContentStore:
    """Thin wrapper around the InstantDB admin HTTP endpoints."""

    def __init__(
        self,
        *,
        app_id: str,
        token: str | None = None,
        api_base: str = DEFAULT_API_BASE,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialise the client with credentials and transport.

        Parameters
        ----------
        app_id : str
            InstantDB application id, sent as the ``App-Id`` header.
        token : str | None, optional
            Admin token; required for writes and for apps whose permissions
            hide content from anonymous readers.
        api_base : str, optional
            Base URL of the admin API. Defaults to ``DEFAULT_API_BASE``.
        session : requests.Session, optional
            Preconfigured session. Defaults to one that retries transient
            5xx responses with backoff.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``30.0``.
        """
        if not app_id:
            msg = "InstantDB app id cannot be empty"
            raise ValueError(msg)
        self._api_base = api_base.rstrip("/") or DEFAULT_API_BASE
        self._session = session or _build_session()
        self._token = token
        self.timeout = timeout
        self._headers = {
            "Content-Type": "application/json",
            "App-Id": app_id,
            "User-Agent": "studycamp-pages/0.1",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def close(self) -> None:
        self._session.close()

    def get_course_page(self, page_id: str) -> CoursePage | None:
        """Return the active course page for ``page_id`` or ``None``."""
        query = {
            COURSE_PAGE_COLLECTION: {
                "$": {"where": {"pageId": page_id, "isActive": True}}
            }
        }
        records = self._records(self.query(query), COURSE_PAGE_COLLECTION)
        if not records:
            logger.info("No active course page '%s' in store", page_id)
            return None
        return course_page_from_record(records[0])

    def list_essays(self) -> list[Essay]:
        """Return published essays, newest first."""
        query = {
            ESSAY_COLLECTION: {
                "$": {"where": {"published": True}, "order": {"publishedAt": "desc"}}
            }
        }
        records = self._records(self.query(query), ESSAY_COLLECTION)
        return sort_essays(essay_from_record(record) for record in records)

    def get_essay(self, slug: str) -> Essay | None:
        """Return the published essay stored under ``slug`` or ``None``."""
        query = {
            ESSAY_COLLECTION: {"$": {"where": {"slug": slug, "published": True}}}
        }
        records = self._records(self.query(query), ESSAY_COLLECTION)
        return essay_from_record(records[0]) if records else None

    def replace_course_sections(
        self, page_id: str, document: ContentDocument
    ) -> None:
        """Overwrite the letter content of the active ``page_id`` record."""
        query = {COURSE_PAGE_COLLECTION: {"$": {"where": {"pageId": page_id}}}}
        records = self._records(self.query(query), COURSE_PAGE_COLLECTION)
        if not records:
            msg = f"Course page '{page_id}' does not exist in the store."
            raise ContentStoreError(msg)
        record_id = self._record_id(records[0], page_id)
        self.transact(
            COURSE_PAGE_COLLECTION,
            record_id,
            {"letterContent": document_to_builtins(document)},
        )

    def replace_essay_sections(self, slug: str, document: ContentDocument) -> None:
        """Overwrite the essay's ``sections`` array with ``document``'s."""
        query = {ESSAY_COLLECTION: {"$": {"where": {"slug": slug}}}}
        records = self._records(self.query(query), ESSAY_COLLECTION)
        if not records:
            msg = f"Essay '{slug}' does not exist in the store."
            raise ContentStoreError(msg)
        record_id = self._record_id(records[0], slug)
        self.transact(
            ESSAY_COLLECTION,
            record_id,
            {"sections": stored_essay_sections(document)},
        )

    def query(self, query: cabc.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
        """Run an InstaQL ``query`` and return the decoded response body."""
        return self._post("admin/query", {"query": query})

    def transact(
        self,
        collection: str,
        record_id: str,
        attrs: cabc.Mapping[str, typ.Any],
    ) -> dict[str, typ.Any]:
        """Apply a single ``update`` step, stamping ``updatedAt``."""
        if not self._token:
            msg = "Writing to InstantDB requires an admin token."
            raise ContentStoreError(msg)
        now_ms = int(dt.datetime.now(dt.UTC).timestamp() * 1000)
        step = ["update", collection, record_id, {**attrs, "updatedAt": now_ms}]
        logger.info("Updating %s/%s", collection, record_id)
        return self._post("admin/transact", {"steps": [step]})

    def _post(self, path: str, body: cabc.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
        url = f"{self._api_base}/{path}"
        try:
            response = self._session.post(
                url, json=body, headers=self._headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach InstantDB at '{url}': {exc}"
            raise ContentStoreError(msg) from exc

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            msg = (
                f"InstantDB request to '{path}' failed with "
                f"status {response.status_code}: {snippet}"
            )
            raise ContentStoreError(msg)
        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            msg = f"InstantDB response from '{path}' was not valid JSON"
            raise ContentStoreError(msg) from exc
        if not isinstance(payload, dict):
            msg = f"InstantDB response from '{path}' was not a JSON object"
            raise ContentStoreError(msg)
        return payload

    @staticmethod
    def _records(
        payload: cabc.Mapping[str, typ.Any], collection: str
    ) -> list[dict[str, typ.Any]]:
        records = payload.get(collection) or []
        if not isinstance(records, list):
            msg = f"InstantDB returned a malformed '{collection}' result."
            raise ContentStoreError(msg)
        return [record for record in records if isinstance(record, dict)]

    @staticmethod
    def _record_id(record: cabc.Mapping[str, typ.Any], key: str) -> str:
        record_id = record.get("id")
        if not record_id:
            msg = f"Stored record for '{key}' has no 'id'."
            raise ContentStoreError(msg)
        return str(record_id)


__all__ = ["DEFAULT_API_BASE", "InstantContentStore"]
