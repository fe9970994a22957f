"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_navigation_settings,
    _build_store_config,
    _build_theme_config,
    _mapping,
    _optional_str,
)
from .models import CoursePageConfig, EssaysConfig, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the site's pages and store.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with course pages, essay outputs, the content
        store, and navigation tunables.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required sections or fields are missing or invalid (for example,
        no course pages and no essays are configured).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from studycamp_pages.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> sorted(config.courses)[:1]  # doctest: +SKIP
    ['vibe-coding']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    site = _mapping(raw.get("site"), "site")
    output_dir = Path(site.get("output_dir", "public"))
    theme = _build_theme_config(site)
    store = _build_store_config(_mapping(raw.get("store"), "store"))
    navigation = _build_navigation_settings(
        _mapping(raw.get("navigation"), "navigation")
    )

    courses: dict[str, CoursePageConfig] = {}
    for key, payload in _mapping(raw.get("courses"), "courses").items():
        match payload:
            case dict():
                courses[key] = _build_course_config(key, payload, output_dir)
            case None:
                courses[key] = _build_course_config(key, {}, output_dir)
            case _:
                msg = f"Course page '{key}' must be a mapping."
                raise SiteConfigError(msg)

    essays_raw = raw.get("essays")
    essays = (
        _build_essays_config(_mapping(essays_raw, "essays"), output_dir)
        if essays_raw is not None
        else None
    )
    if not courses and essays is None:
        msg = "No course pages or essays defined in site configuration."
        raise SiteConfigError(msg)

    return SiteConfig(
        courses=courses,
        theme=theme,
        store=store,
        navigation=navigation,
        essays=essays,
        pygments_style=str(site.get("pygments_style", "monokai")),
    )


def _build_course_config(
    key: str,
    payload: typ.Mapping[str, typ.Any],
    output_dir: Path,
) -> CoursePageConfig:
    """Build a CoursePageConfig, defaulting the output to ``<key>.html``."""
    page_id = _optional_str(payload.get("page_id")) or key
    label = payload.get("label") or key.replace("-", " ").title()
    output = Path(payload.get("output", output_dir / f"{key}.html"))
    return CoursePageConfig(
        page_id=page_id,
        label=label,
        output=output,
        hero_title=_optional_str(payload.get("hero_title")),
        hero_subtitle=_optional_str(payload.get("hero_subtitle")),
    )


def _build_essays_config(
    payload: typ.Mapping[str, typ.Any],
    output_dir: Path,
) -> EssaysConfig:
    """Build the essays section, resolving outputs under ``output_dir``."""
    base = EssaysConfig()
    return EssaysConfig(
        output_dir=Path(payload.get("output_dir", output_dir / "essays")),
        index_output=Path(payload.get("index_output", output_dir / "essays.html")),
        index_title=payload.get("index_title", base.index_title),
        index_description=payload.get("index_description", base.index_description),
    )


__all__ = ["load_site_config"]
