"""Render course letters, essays and the essay index to static HTML.

Each builder owns a Jinja2 environment over the package templates, turns a
:class:`~studycamp_pages.content.ContentDocument` into section and
navigation models, and writes one UTF-8 HTML file per page. Every section is
wrapped in an element whose id is ``section-<id>``; the section navigation is
only emitted when the document yields at least one entry, with the first
entry marked current because the active section resets on page load.

Example
-------
>>> from pathlib import Path
>>> from studycamp_pages.config import load_site_config
>>> from studycamp_pages.generator import SiteGenerator
>>> from studycamp_pages.store import open_store
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> SiteGenerator(site, open_store(site.store)).run()  # doctest: +SKIP
[PosixPath('public/vibe-coding.html'), ...]
"""

from __future__ import annotations

import datetime as dt
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from studycamp_pages._constants import section_anchor
from studycamp_pages.content import Divider
from studycamp_pages.navigation import NavigationExtractor, truncate_label
from studycamp_pages.store import resolve_essay_document

from .models import EssaySummaryModel, NavItemModel, SectionModel
from .renderer import BlockRenderer, HtmlContentRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from studycamp_pages.config import CoursePageConfig, SiteConfig
    from studycamp_pages.content import ContentDocument
    from studycamp_pages.store import ContentStore, CoursePage, Essay

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


class _PageBuilder:
    """Shared Jinja environment, section rendering and file output."""

    template_name: typ.ClassVar[str]

    def __init__(
        self,
        site: SiteConfig,
        *,
        templates_dir: Path | None = None,
        extractor: NavigationExtractor | None = None,
    ) -> None:
        """Initialize the builder and its Jinja environment.

        Parameters
        ----------
        site : SiteConfig
            Parsed site configuration; provides branding, the Pygments style
            and the navigation tunables emitted for the client runtime.
        templates_dir : Path, optional
            Directory containing Jinja templates. Defaults to
            ``studycamp_pages/templates``.
        extractor : NavigationExtractor, optional
            Memoising extractor shared between builders.
        """
        self.site = site
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.content_renderer = HtmlContentRenderer(site.pygments_style)
        self.blocks = BlockRenderer(self.content_renderer)
        self.extractor = extractor or NavigationExtractor()
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template(self.template_name)

    def section_models(self, document: ContentDocument) -> list[SectionModel]:
        """Render every section of ``document`` in reading order.

        A separator is drawn before every section but the first. A divider
        block opening a section is folded into that separator when the
        section declares no ``divider_style`` of its own.
        """
        models: list[SectionModel] = []
        for index, section in enumerate(document.sections):
            style = section.divider_style
            lead = section.content[0] if section.content else None
            if style is None and isinstance(lead, Divider):
                style = lead.style
            divider_html = self.blocks.divider(style) if index > 0 else ""
            models.append(
                SectionModel(
                    id=section.id,
                    anchor=section_anchor(section.id),
                    nav_label=section.nav_label,
                    divider_html=divider_html,
                    html=self.blocks.render_blocks(
                        section.content, drop_leading_divider=True
                    ),
                )
            )
        return models

    def nav_models(self, document: ContentDocument) -> list[NavItemModel]:
        """Return navigation entries; the first one is marked current."""
        limit = self.site.navigation.label_max_length
        return [
            NavItemModel(
                id=entry.id,
                anchor=section_anchor(entry.id),
                label=entry.nav_label,
                short_label=truncate_label(entry.nav_label, limit),
                current=index == 0,
            )
            for index, entry in enumerate(self.extractor.extract(document))
        ]

    def nav_attributes(self) -> dict[str, str]:
        """Return ``data-*`` attributes carrying the navigation tunables."""
        settings = self.site.navigation
        return {
            "data-target-fraction": f"{settings.target_fraction:g}",
            "data-forward-buffer": f"{settings.forward_buffer:g}",
            "data-debounce-ms": f"{settings.debounce_seconds * 1000:g}",
            "data-initial-delay-ms": f"{settings.initial_delay_seconds * 1000:g}",
            "data-header-offset-mobile": f"{settings.header_offset_mobile:g}",
            "data-header-offset-desktop": f"{settings.header_offset_desktop:g}",
            "data-desktop-min-width": f"{settings.desktop_min_width:g}",
        }

    def base_context(self) -> dict[str, typ.Any]:
        return {
            "theme": self.site.theme,
            "pygments_css": self.content_renderer.stylesheet,
            "nav_attributes": self.nav_attributes(),
            "generated_at": dt.datetime.now(dt.UTC),
        }

    def render_page(self, **context: typ.Any) -> str:
        html = self.template.render(**self.base_context(), **context)
        if not html.endswith("\n"):
            html += "\n"
        return html

    @staticmethod
    def write(output_path: Path, html: str) -> Path:
        """Write ``html`` to ``output_path``, creating parent directories."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        return output_path


class LetterPageBuilder(_PageBuilder):
    """Render a course landing page from its letter content."""

    template_name = "letter_page.jinja"

    def render(self, page_config: CoursePageConfig, page: CoursePage) -> str:
        """Return the course page HTML for ``page``.

        Parameters
        ----------
        page_config : CoursePageConfig
            Output location and optional hero overrides.
        page : CoursePage
            Active course record from the content store.
        """
        document = page.letter_content
        hero_title = page_config.hero_title or page.hero_title or page_config.label
        hero_subtitle = page_config.hero_subtitle or page.hero_subtitle
        return self.render_page(
            page_title=f"{hero_title} | {self.site.theme.site_name}",
            hero_title=hero_title,
            hero_subtitle=hero_subtitle,
            greeting=document.greeting if document else None,
            sections=self.section_models(document) if document else [],
            nav_items=self.nav_models(document) if document else [],
        )

    def run(self, page_config: CoursePageConfig, page: CoursePage) -> Path:
        """Render and write the course page, returning the output path."""
        return self.write(page_config.output, self.render(page_config, page))


class EssayPageBuilder(_PageBuilder):
    """Render a single essay page."""

    template_name = "essay_page.jinja"

    def render(self, essay: Essay) -> str:
        document = resolve_essay_document(essay)
        return self.render_page(
            page_title=f"{essay.title} | {self.site.theme.site_name}",
            essay=essay,
            date_label=format_date(essay.published_at),
            title=document.title or essay.title,
            subtitle=document.subtitle,
            greeting=document.greeting,
            sections=self.section_models(document),
            nav_items=self.nav_models(document),
        )

    def output_path(self, essay: Essay) -> Path:
        essays = self.site.essays
        output_dir = essays.output_dir if essays else Path("public/essays")
        return output_dir / f"{essay.slug}.html"

    def run(self, essay: Essay) -> Path:
        """Render and write ``essay``, returning the output path."""
        return self.write(self.output_path(essay), self.render(essay))


class EssayIndexBuilder(_PageBuilder):
    """Render the list of published essays."""

    template_name = "essay_index.jinja"

    def summaries(self, essays: cabc.Iterable[Essay]) -> list[EssaySummaryModel]:
        """Return card models in the order given, showing at most three tags."""
        essays_config = self.site.essays
        index_dir = essays_config.index_output.parent if essays_config else Path()
        output_dir = essays_config.output_dir if essays_config else Path("essays")
        prefix = _relative_prefix(index_dir, output_dir)
        return [
            EssaySummaryModel(
                slug=essay.slug,
                href=f"{prefix}{essay.slug}.html",
                title=essay.title,
                summary=essay.summary,
                date_label=format_date(essay.published_at),
                tags=list(essay.tags[:3]),
                read_time=essay.read_time,
            )
            for essay in essays
        ]

    def render(self, essays: cabc.Iterable[Essay]) -> str:
        essays_config = self.site.essays
        return self.render_page(
            page_title=(
                f"{essays_config.index_title if essays_config else 'Essays'}"
                f" | {self.site.theme.site_name}"
            ),
            index_title=essays_config.index_title if essays_config else "Essays",
            index_description=(
                essays_config.index_description if essays_config else None
            ),
            essays=self.summaries(essays),
        )

    def run(self, essays: cabc.Iterable[Essay]) -> Path:
        essays_config = self.site.essays
        output = (
            essays_config.index_output if essays_config else Path("public/essays.html")
        )
        return self.write(output, self.render(essays))


class SiteGenerator:
    """Build every configured course page plus the essays."""

    def __init__(
        self,
        site: SiteConfig,
        store: ContentStore,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        self.site = site
        self.store = store
        extractor = NavigationExtractor()
        self.letters = LetterPageBuilder(
            site, templates_dir=templates_dir, extractor=extractor
        )
        self.essays = EssayPageBuilder(
            site, templates_dir=templates_dir, extractor=extractor
        )
        self.essay_index = EssayIndexBuilder(
            site, templates_dir=templates_dir, extractor=extractor
        )

    def run(self, *, course: str | None = None, essays: bool = True) -> list[Path]:
        """Write pages and return their paths.

        Parameters
        ----------
        course : str, optional
            Only build this course page key. All course pages are built
            otherwise.
        essays : bool, optional
            Also build the essay pages and the essay index when the site
            configures essays. Defaults to ``True``.
        """
        outputs: list[Path] = []
        keys = [course] if course else list(self.site.courses)
        for key in keys:
            page_config = self.site.get_course(key)
            page = self.store.get_course_page(page_config.page_id)
            if page is None:
                logger.warning(
                    "Course page '%s' not found in store; skipping", page_config.page_id
                )
                continue
            outputs.append(self.letters.run(page_config, page))
        if essays and self.site.essays is not None:
            published = self.store.list_essays()
            outputs.extend(self.essays.run(essay) for essay in published)
            outputs.append(self.essay_index.run(published))
        return outputs


def format_date(value: dt.datetime | None) -> str | None:
    """Format ``value`` like ``SEP 28, 2025``."""
    if value is None:
        return None
    return f"{value:%b} {value.day}, {value.year}".upper()


def _relative_prefix(index_dir: Path, output_dir: Path) -> str:
    """Return the link prefix from the index page to the essay pages."""
    try:
        relative = output_dir.relative_to(index_dir)
    except ValueError:
        return f"/{output_dir.name}/"
    text = relative.as_posix()
    return "" if text == "." else f"{text}/"


__all__ = [
    "EssayIndexBuilder",
    "EssayPageBuilder",
    "LetterPageBuilder",
    "SiteGenerator",
    "format_date",
]
