"""Load and validate the site configuration YAML.

This subpackage parses ``config/site.yaml``, applies defaults for the content
store and navigation tunables, and produces slotted dataclasses
(:class:`SiteConfig`, :class:`CoursePageConfig`, :class:`EssaysConfig`, etc.)
that the page builders consume. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from studycamp_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.get_course("vibe-coding").output  # doctest: +SKIP
PosixPath('public/vibe-coding.html')
"""

from .loader import load_site_config
from .models import (
    CoursePageConfig,
    EssaysConfig,
    SiteConfig,
    SiteConfigError,
    StoreConfig,
    ThemeConfig,
)

__all__ = [
    "CoursePageConfig",
    "EssaysConfig",
    "SiteConfig",
    "SiteConfigError",
    "StoreConfig",
    "ThemeConfig",
    "load_site_config",
]
