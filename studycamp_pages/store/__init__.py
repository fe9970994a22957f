"""Content store backends for course pages and essays.

:func:`open_store` builds the backend named by a :class:`StoreConfig`:
``instant`` talks to the hosted InstantDB admin API, ``files`` reads a local
content directory with the same record shapes.
"""

from __future__ import annotations

import os
import typing as typ

from .base import (
    ContentStore,
    ContentStoreError,
    CoursePage,
    Essay,
    parse_timestamp,
    resolve_essay_document,
)
from .files import FileContentStore, read_document, split_front_matter
from .instant import InstantContentStore

if typ.TYPE_CHECKING:
    from studycamp_pages.config import StoreConfig


def open_store(config: StoreConfig) -> ContentStore:
    """Return the content store described by ``config``."""
    match config.backend:
        case "instant":
            if not config.app_id:
                msg = "The 'instant' store backend requires an app id."
                raise ContentStoreError(msg)
            return InstantContentStore(
                app_id=config.app_id,
                token=os.environ.get(config.token_env) or None,
                api_base=config.api_base,
                timeout=config.timeout,
            )
        case "files":
            return FileContentStore(config.content_dir)
        case other:
            msg = f"Unknown content store backend '{other}'."
            raise ContentStoreError(msg)


__all__ = [
    "ContentStore",
    "ContentStoreError",
    "CoursePage",
    "Essay",
    "FileContentStore",
    "InstantContentStore",
    "open_store",
    "parse_timestamp",
    "read_document",
    "resolve_essay_document",
    "split_front_matter",
]
