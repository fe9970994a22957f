"""Shared dataclasses passed from the page builders to templates."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class SectionModel:
    """Structured data passed to the section template.

    Attributes
    ----------
    id : str
        Section id from the content document.
    anchor : str
        DOM id of the section wrapper (``section-<id>``).
    nav_label : str
        Label used by the section navigation; empty for unlabeled sections.
    divider_html : str
        Separator drawn before the section; empty for the first section.
    html : str
        Rendered blocks of the section.
    """

    id: str
    anchor: str
    nav_label: str
    divider_html: str
    html: str


@dc.dataclass(slots=True)
class NavItemModel:
    """One entry of the section navigation."""

    id: str
    anchor: str
    label: str
    short_label: str
    current: bool = False


@dc.dataclass(slots=True)
class EssaySummaryModel:
    """Card data for the essay index."""

    slug: str
    href: str
    title: str
    summary: str | None
    date_label: str | None
    tags: list[str]
    read_time: int | None


__all__ = ["EssaySummaryModel", "NavItemModel", "SectionModel"]
