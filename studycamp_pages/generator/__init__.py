"""Render content documents into static HTML pages."""

from .models import EssaySummaryModel, NavItemModel, SectionModel
from .page_generator import (
    EssayIndexBuilder,
    EssayPageBuilder,
    LetterPageBuilder,
    SiteGenerator,
    format_date,
)
from .renderer import BlockRenderer, HtmlContentRenderer

__all__ = [
    "BlockRenderer",
    "EssayIndexBuilder",
    "EssayPageBuilder",
    "EssaySummaryModel",
    "HtmlContentRenderer",
    "LetterPageBuilder",
    "NavItemModel",
    "SectionModel",
    "SiteGenerator",
    "format_date",
]
