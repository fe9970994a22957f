"""Utility helpers shared by the site configuration loader."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from studycamp_pages.navigation import NavigationSettings

from .models import SiteConfigError, StoreConfig, ThemeConfig

STORE_BACKENDS = frozenset({"instant", "files"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _mapping(value: object, section: str) -> typ.Mapping[str, typ.Any]:
    """Return ``value`` as a mapping, treating ``None`` as empty."""
    match value:
        case None:
            return {}
        case dict():
            return value
        case _:
            msg = f"'{section}' configuration must be a mapping."
            raise SiteConfigError(msg)


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    return ThemeConfig(
        site_name=payload.get("name", base.site_name),
        title_suffix=payload.get("title_suffix", base.title_suffix),
        tagline=payload.get("tagline", base.tagline),
    )


def _build_store_config(payload: typ.Mapping[str, typ.Any]) -> StoreConfig:
    """Build and validate the content store configuration."""
    base = StoreConfig()
    backend = str(payload.get("backend", base.backend)).lower()
    if backend not in STORE_BACKENDS:
        known = ", ".join(sorted(STORE_BACKENDS))
        msg = f"Unknown store backend '{backend}'. Expected one of: {known}"
        raise SiteConfigError(msg)
    app_id = _optional_str(payload.get("app_id"))
    if backend == "instant" and not app_id:
        msg = "The 'instant' store backend requires 'app_id'."
        raise SiteConfigError(msg)
    return StoreConfig(
        backend=backend,
        app_id=app_id,
        api_base=str(payload.get("api_base", base.api_base)).rstrip("/"),
        token_env=str(payload.get("token_env", base.token_env)),
        content_dir=Path(payload.get("content_dir", base.content_dir)),
        timeout=float(payload.get("timeout", base.timeout)),
    )


def _build_navigation_settings(
    payload: typ.Mapping[str, typ.Any],
) -> NavigationSettings:
    """Override navigation defaults with numeric values from ``payload``."""
    overrides: dict[str, typ.Any] = {}
    for field in dc.fields(NavigationSettings):
        if field.name not in payload:
            continue
        raw = payload[field.name]
        try:
            overrides[field.name] = int(raw) if field.type == "int" else float(raw)
        except (TypeError, ValueError) as exc:
            msg = f"Navigation setting '{field.name}' must be numeric, got {raw!r}."
            raise SiteConfigError(msg) from exc
    settings = NavigationSettings(**overrides)
    if not 0.0 <= settings.target_fraction <= 1.0:
        msg = "Navigation 'target_fraction' must be between 0 and 1."
        raise SiteConfigError(msg)
    if settings.debounce_seconds < 0 or settings.initial_delay_seconds < 0:
        msg = "Navigation delays cannot be negative."
        raise SiteConfigError(msg)
    return settings


__all__ = [
    "STORE_BACKENDS",
    "_build_navigation_settings",
    "_build_store_config",
    "_build_theme_config",
    "_mapping",
    "_optional_str",
]
