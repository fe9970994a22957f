"""Cyclopts CLI entrypoint for building the study camp content pages.

The ``pages`` console script renders course letters and essays from the
content store, converts markdown drafts into stored document JSON, previews
section navigation against a headless layout, and pushes edited sections
back to the store. Run ``pages generate`` locally or in CI to rebuild the
static site.

Examples
--------
Generate every configured page:

>>> from studycamp_pages.cli import main
>>> main()  # doctest: +SKIP

Preview which section is active 900px down an essay draft:

>>> from studycamp_pages.cli import app
>>> app(
...     ["nav", "drafts/essay.md", "--layout", "layout.yaml", "--scroll-y", "900"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml import YAML

from ._constants import section_anchor
from .config import load_site_config
from .content import DocumentKind, encode_document, parse_markdown
from .generator import SiteGenerator
from .navigation import ManualScheduler, SectionNavigator, StaticViewport
from .store import open_store, read_document, split_front_matter

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="pages", config=cyclopts.config.Env("PAGES_", command=False))  # type: ignore[unknown-argument]

Verbose = typ.Annotated[bool, Parameter(help="Log debug output to stderr")]


def _configure_logging(verbose: bool) -> None:  # noqa: FBT001
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _kind(essay: bool) -> DocumentKind:  # noqa: FBT001
    return DocumentKind.HEADING_DERIVED if essay else DocumentKind.EXPLICIT_LABELED


@app.command(help="Render course pages, essays and the essay index to HTML.")
def generate(
    *,
    course: typ.Annotated[
        str | None, Parameter(help="Course page key", env_var="PAGES_COURSE")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="PAGES_CONFIG")
    ] = DEFAULT_CONFIG,
    essays: typ.Annotated[
        bool, Parameter(help="Also render essays and the essay index")
    ] = True,
    verbose: Verbose = False,
) -> None:
    """Generate pages for the requested site configuration.

    Parameters
    ----------
    course : str or None, optional
        Specific course page key to render; when ``None`` (default) all
        course pages are rendered.
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``PAGES_CONFIG``).
    essays : bool, optional
        Render essays alongside course pages. Pass ``--no-essays`` to skip.
    verbose : bool, optional
        Enable debug logging.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)
    if course:
        site_config.get_course(course)
    store = open_store(site_config.store)
    written = SiteGenerator(site_config, store).run(course=course, essays=essays)
    for path in written:
        print(f"wrote {_format_path(path)}")


@app.command(help="Convert a markdown draft into stored document JSON.")
def convert(
    source: Path,
    /,
    *,
    output: typ.Annotated[
        Path | None, Parameter(help="Write JSON here instead of stdout")
    ] = None,
    verbose: Verbose = False,
) -> None:
    """Parse ``source`` markdown and emit the heading-derived document.

    Parameters
    ----------
    source : Path
        Markdown file to convert.
    output : Path or None, optional
        Destination JSON file. The document is printed when omitted.
    verbose : bool, optional
        Enable debug logging.
    """
    _configure_logging(verbose)
    _front_matter, body = split_front_matter(
        source.read_text(encoding="utf-8"), source=source
    )
    parsed = parse_markdown(body)
    payload = encode_document(parsed.document).decode("utf-8")
    if output is None:
        print(payload)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
        print(f"wrote {_format_path(output)}")
    metadata = parsed.metadata
    logging.getLogger(__name__).info(
        "%d words, %d headings, images: %s",
        metadata.word_count,
        len(metadata.headings),
        metadata.has_images,
    )


@app.command(help="Preview section navigation against a headless layout.")
def nav(
    source: Path,
    /,
    *,
    layout: typ.Annotated[
        Path | None,
        Parameter(help="YAML file with width, height and section offsets"),
    ] = None,
    scroll_y: typ.Annotated[
        float, Parameter(help="Scroll position to evaluate")
    ] = 0.0,
    goto: typ.Annotated[
        str | None, Parameter(help="Section id to navigate to")
    ] = None,
    essay: typ.Annotated[
        bool, Parameter(help="Treat JSON/YAML input as an essay document")
    ] = False,
    config: typ.Annotated[
        Path | None, Parameter(help="Site config supplying navigation settings")
    ] = None,
    verbose: Verbose = False,
) -> None:
    """Print the navigation entries and the section active at ``scroll_y``.

    Parameters
    ----------
    source : Path
        Content document (``.md``, ``.json`` or ``.yaml``).
    layout : Path or None, optional
        YAML mapping with optional ``width`` and ``height`` plus ``sections``,
        a mapping of section id to document offset in pixels. Sections
        missing from the layout are treated as not rendered.
    scroll_y : float, optional
        Simulated scroll position.
    goto : str or None, optional
        Navigate to this section after scrolling and report the target.
    essay : bool, optional
        Decode JSON/YAML sources as heading-derived documents.
    config : Path or None, optional
        Site config whose ``navigation`` section overrides the defaults.
    verbose : bool, optional
        Enable debug logging.
    """
    _configure_logging(verbose)
    settings = load_site_config(config).navigation if config else None
    document = read_document(source, default_kind=_kind(essay))
    viewport = _load_viewport(layout)
    scheduler = ManualScheduler()
    navigator = SectionNavigator(
        document, viewport, scheduler=scheduler, settings=settings
    )
    if not navigator.sections:
        print("no navigable sections")
        return
    navigator.attach()
    scheduler.advance(navigator.settings.initial_delay_seconds)
    if scroll_y:
        viewport.scroll(scroll_y)
        scheduler.advance(navigator.settings.debounce_seconds)
    if goto is not None:
        if navigator.navigate_to(goto):
            target = viewport.scroll_requests[-1].top
            print(f"scroll to {target:g}")
            viewport.settle()
            scheduler.advance(navigator.settings.debounce_seconds)
        else:
            print(f"no anchor for section '{goto}'")
    for section in navigator.sections:
        marker = "*" if section.id == navigator.current_section_id else " "
        print(f"{marker} {section.id}: {section.nav_label}")
    navigator.detach()


@app.command(help="Replace the stored sections of a course page or essay.")
def push(
    source: Path,
    /,
    *,
    course: typ.Annotated[
        str | None, Parameter(help="Course page id to update")
    ] = None,
    essay: typ.Annotated[str | None, Parameter(help="Essay slug to update")] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="PAGES_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: Verbose = False,
) -> None:
    """Write the sections of ``source`` to the configured content store.

    Parameters
    ----------
    source : Path
        Content document (``.md``, ``.json`` or ``.yaml``).
    course : str or None, optional
        Course page id whose letter content is replaced.
    essay : str or None, optional
        Essay slug whose ``sections`` array is replaced.
    config : Path, optional
        Path to the site configuration file.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    ValueError
        Unless exactly one of ``course`` and ``essay`` is given.
    """
    _configure_logging(verbose)
    if (course is None) == (essay is None):
        msg = "Pass exactly one of --course or --essay."
        raise ValueError(msg)
    site_config = load_site_config(config)
    store = open_store(site_config.store)
    document = read_document(source, default_kind=_kind(essay is not None))
    if course is not None:
        store.replace_course_sections(course, document)
        print(f"updated course page {course} ({len(document.sections)} sections)")
    else:
        store.replace_essay_sections(typ.cast("str", essay), document)
        print(f"updated essay {essay} ({len(document.sections)} sections)")


def _load_viewport(layout: Path | None) -> StaticViewport:
    """Build a :class:`StaticViewport` from a layout YAML file."""
    if layout is None:
        return StaticViewport({})
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with layout.open("r", encoding="utf-8") as handle:
        raw = loader.load(handle) or {}
    if not isinstance(raw, dict):
        msg = f"Layout file '{layout}' must contain a mapping."
        raise TypeError(msg)
    sections = raw.get("sections") or {}
    anchors = {
        section_anchor(str(section_id)): float(offset)
        for section_id, offset in sections.items()
    }
    return StaticViewport(
        anchors,
        width=float(raw.get("width", 1280)),
        height=float(raw.get("height", 800)),
    )


def main() -> None:
    """Invoke the Cyclopts application that powers the `pages` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
