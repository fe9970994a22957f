"""Content store backed by a local directory of YAML, JSON and markdown.

Layout::

    content/
      courses/<page-id>.yaml      # heroTitle, heroSubtitle, isActive, letterContent
      essays/<slug>.md            # YAML front matter + markdown body
      essays/<slug>.yaml|.json    # full essay record

Records use the same camelCase keys as the hosted store so both backends
share one decoding path. Files missing ``isActive`` or ``published`` count
as active and published.
"""

from __future__ import annotations

import io
import json
import logging
import re
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from studycamp_pages.content import (
    ContentDocument,
    ContentDocumentError,
    DocumentKind,
    decode_document,
    document_to_builtins,
    parse_markdown,
)

from .base import (
    ContentStoreError,
    CoursePage,
    Essay,
    course_page_from_record,
    essay_from_record,
    sort_essays,
    stored_essay_sections,
)

logger = logging.getLogger(__name__)

COURSES_DIR = "courses"
ESSAYS_DIR = "essays"
RECORD_SUFFIXES = (".yaml", ".yml", ".json")
FRONT_MATTER_PATTERN = re.compile(r"\A---\s*\n(.*?\n)---\s*(?:\n|\Z)", re.DOTALL)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = (1, 2)
    return yaml


def _dumper() -> YAML:
    # No version here: a set version emits a %YAML directive on dump.
    yaml = YAML(typ="safe")
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    return yaml


def _read_record(path: Path) -> dict[str, typ.Any]:
    text = path.read_text(encoding="utf-8")
    try:
        loaded = json.loads(text) if path.suffix == ".json" else _yaml().load(text)
    except (json.JSONDecodeError, YAMLError) as exc:
        msg = f"Could not parse content file '{path}': {exc}"
        raise ContentStoreError(msg) from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = f"Content file '{path}' must contain a mapping."
        raise ContentStoreError(msg)
    return dict(loaded)


def split_front_matter(
    text: str, *, source: Path
) -> tuple[dict[str, typ.Any], str]:
    """Split a leading YAML front matter block off markdown ``text``.

    Returns the parsed front matter (empty when there is none) and the
    markdown body that follows it. ``source`` names the file in errors.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return {}, text
    try:
        loaded = _yaml().load(match.group(1)) or {}
    except YAMLError as exc:
        msg = f"Could not parse front matter in '{source}': {exc}"
        raise ContentStoreError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Front matter in '{source}' must be a mapping."
        raise ContentStoreError(msg)
    return dict(loaded), text[match.end() :]


def _optional_text(value: object) -> str | None:
    text = str(value).strip() if value is not None else ""
    return text or None


def _read_markdown(path: Path) -> tuple[dict[str, typ.Any], str]:
    return split_front_matter(path.read_text(encoding="utf-8"), source=path)


class FileContentStore:
    """Read and write content documents under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def get_course_page(self, page_id: str) -> CoursePage | None:
        path = self._find(self.root / COURSES_DIR, page_id, RECORD_SUFFIXES)
        if path is None:
            return None
        record = _read_record(path)
        if not record.get("isActive", True):
            logger.info("Course page '%s' is inactive; skipping", page_id)
            return None
        record.setdefault("pageId", page_id)
        return course_page_from_record(record)

    def list_essays(self) -> list[Essay]:
        """Return published essays, newest first."""
        directory = self.root / ESSAYS_DIR
        if not directory.is_dir():
            return []
        slugs = sorted(
            {
                path.stem
                for path in directory.iterdir()
                if path.suffix in (*RECORD_SUFFIXES, ".md")
            }
        )
        essays = [self._load_essay(slug) for slug in slugs]
        return sort_essays(essay for essay in essays if essay is not None)

    def get_essay(self, slug: str) -> Essay | None:
        essay = self._load_essay(slug)
        if essay is None or not essay.published:
            return None
        return essay

    def replace_course_sections(
        self, page_id: str, document: ContentDocument
    ) -> None:
        path = self._find(self.root / COURSES_DIR, page_id, RECORD_SUFFIXES)
        if path is None:
            path = self.root / COURSES_DIR / f"{page_id}.yaml"
            record: dict[str, typ.Any] = {"pageId": page_id, "isActive": True}
        else:
            record = _read_record(path)
        record["letterContent"] = document_to_builtins(document)
        self._write_record(path, record)

    def replace_essay_sections(self, slug: str, document: ContentDocument) -> None:
        path = self._find(self.root / ESSAYS_DIR, slug, (*RECORD_SUFFIXES, ".md"))
        if path is None:
            msg = f"Essay '{slug}' does not exist under '{self.root / ESSAYS_DIR}'."
            raise ContentStoreError(msg)
        sections = stored_essay_sections(document)
        if path.suffix == ".md":
            front_matter, body = _read_markdown(path)
            front_matter["sections"] = sections
            self._write_markdown(path, front_matter, body)
            return
        record = _read_record(path)
        record["sections"] = sections
        self._write_record(path, record)

    def _load_essay(self, slug: str) -> Essay | None:
        directory = self.root / ESSAYS_DIR
        path = self._find(directory, slug, (*RECORD_SUFFIXES, ".md"))
        if path is None:
            return None
        if path.suffix == ".md":
            record, body = _read_markdown(path)
            record.setdefault("content", body)
        else:
            record = _read_record(path)
        record.setdefault("slug", slug)
        record.setdefault("published", True)
        return essay_from_record(record)

    @staticmethod
    def _find(
        directory: Path, stem: str, suffixes: tuple[str, ...]
    ) -> Path | None:
        for suffix in suffixes:
            candidate = directory / f"{stem}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def _write_record(path: Path, record: dict[str, typ.Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".json":
            path.write_text(
                json.dumps(record, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
            return
        with path.open("w", encoding="utf-8") as handle:
            _dumper().dump(record, handle)

    @staticmethod
    def _write_markdown(
        path: Path, front_matter: dict[str, typ.Any], body: str
    ) -> None:
        buffer = io.StringIO()
        _dumper().dump(front_matter, buffer)
        path.write_text(f"---\n{buffer.getvalue()}---\n{body}", encoding="utf-8")


def read_document(path: Path, *, default_kind: DocumentKind) -> ContentDocument:
    """Load a content document from a markdown, JSON or YAML file.

    Markdown files are parsed into a heading-derived document regardless of
    ``default_kind``. Their front matter is stripped first and only supplies
    a missing ``title`` or ``subtitle``. JSON and YAML files hold the stored
    document shape.
    """
    if path.suffix == ".md":
        front_matter, body = _read_markdown(path)
        document = parse_markdown(body).document
        return msgspec.structs.replace(
            document,
            title=document.title or _optional_text(front_matter.get("title")),
            subtitle=document.subtitle
            or _optional_text(front_matter.get("subtitle")),
        )
    record = _read_record(path)
    try:
        return decode_document(record, default_kind=default_kind)
    except ContentDocumentError as exc:
        msg = f"Content file '{path}' is not a valid document: {exc}"
        raise ContentStoreError(msg) from exc


__all__ = [
    "COURSES_DIR",
    "ESSAYS_DIR",
    "FileContentStore",
    "read_document",
    "split_front_matter",
]
