"""Typed dataclasses describing site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from studycamp_pages.navigation import NavigationSettings


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ThemeConfig:
    """Branding applied to every generated page."""

    site_name: str = "AI Study Camp"
    title_suffix: str = "Diary of a Vibe Coder"
    tagline: str = "Learn to build with AI"


@dc.dataclass(slots=True)
class StoreConfig:
    """Where content documents are read from and written to.

    Attributes
    ----------
    backend : str
        ``"instant"`` for the hosted InstantDB store or ``"files"`` for a
        local content directory.
    app_id : str | None
        InstantDB application id; required for the ``instant`` backend.
    api_base : str
        Base URL of the InstantDB admin API.
    token_env : str
        Environment variable holding the admin token.
    content_dir : Path
        Root of the local content tree for the ``files`` backend.
    timeout : float
        Per-request timeout in seconds.
    """

    backend: str = "files"
    app_id: str | None = None
    api_base: str = "https://api.instantdb.com"
    token_env: str = "INSTANT_APP_ADMIN_TOKEN"
    content_dir: Path = Path("content")
    timeout: float = 30.0


@dc.dataclass(slots=True)
class CoursePageConfig:
    """A course landing page rendered from its letter content."""

    page_id: str
    label: str
    output: Path
    hero_title: str | None = None
    hero_subtitle: str | None = None


@dc.dataclass(slots=True)
class EssaysConfig:
    """Output locations for essay pages and the essay index."""

    output_dir: Path = Path("public/essays")
    index_output: Path = Path("public/essays.html")
    index_title: str = "Essays"
    index_description: str = (
        "Thoughts and reflections on coding, creativity, and technology."
    )


@dc.dataclass(slots=True)
class SiteConfig:
    """Collection of page configs alongside shared defaults."""

    courses: dict[str, CoursePageConfig]
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    store: StoreConfig = dc.field(default_factory=StoreConfig)
    navigation: NavigationSettings = dc.field(default_factory=NavigationSettings)
    essays: EssaysConfig | None = None
    pygments_style: str = "monokai"

    def get_course(self, page_id: str | None) -> CoursePageConfig:
        """Return the requested course page or the first configured one."""
        if page_id is None:
            if not self.courses:  # pragma: no cover - configuration error
                msg = "No course pages configured."
                raise SiteConfigError(msg)
            return next(iter(self.courses.values()))
        try:
            return self.courses[page_id]
        except KeyError as exc:
            available = ", ".join(sorted(self.courses))
            msg = f"Unknown course page '{page_id}'. Known pages: {available}"
            raise KeyError(msg) from exc


__all__ = [
    "CoursePageConfig",
    "EssaysConfig",
    "SiteConfig",
    "SiteConfigError",
    "StoreConfig",
    "ThemeConfig",
]
