"""State holder tying extraction, tracking, and navigation together.

:class:`SectionNavigator` is what a rendering layer binds to: it exposes the
navigation entries, the active section id, and ``navigate_to``. Its
``attach``/``detach`` lifecycle registers and removes the scroll listener and
clears pending timers so nothing leaks across page navigations.

Example
-------
>>> from studycamp_pages.content import DocumentKind, decode_document
>>> from studycamp_pages.navigation import ManualScheduler, StaticViewport
>>> document = decode_document(
...     {"sections": [
...         {"id": "intro", "navLabel": "Intro", "content": []},
...         {"id": "details", "navLabel": "Details", "content": []},
...     ]},
...     default_kind=DocumentKind.EXPLICIT_LABELED,
... )
>>> viewport = StaticViewport({"section-intro": 0, "section-details": 1600})
>>> navigator = SectionNavigator(document, viewport, scheduler=ManualScheduler())
>>> navigator.attach()
>>> navigator.current_section_id
'intro'
>>> navigator.navigate_to("details")
True
>>> navigator.current_section_id
'details'
"""

from __future__ import annotations

import asyncio
import typing as typ

from .controller import NavigationController
from .extractor import NavigationExtractor, NavigationSection
from .settings import NavigationSettings
from .state import ActiveSectionState
from .tracker import ScrollTracker

if typ.TYPE_CHECKING:
    from studycamp_pages.content import ContentDocument

    from .debounce import Scheduler
    from .viewport import Viewport


class SectionNavigator:
    """Expose ``sections``, ``current_section_id`` and ``navigate_to``."""

    def __init__(
        self,
        document: ContentDocument,
        viewport: Viewport,
        *,
        scheduler: Scheduler | None = None,
        settings: NavigationSettings | None = None,
        extractor: NavigationExtractor | None = None,
    ) -> None:
        """Build the navigator for ``document`` rendered in ``viewport``.

        Parameters
        ----------
        document : ContentDocument
            Document whose sections are rendered with ``section-<id>`` anchors.
        viewport : Viewport
            Layout source and scroll target.
        scheduler : Scheduler, optional
            Timer source for debouncing. Defaults to the running ``asyncio``
            event loop, which must exist when omitted.
        settings : NavigationSettings, optional
            Reading-line, debounce, and header-offset tunables.
        extractor : NavigationExtractor, optional
            Shared memoising extractor; a private one is created by default.

        Raises
        ------
        TypeError
            If ``scheduler`` is omitted outside a running event loop.
        """
        if scheduler is None:
            try:
                scheduler = asyncio.get_running_loop()
            except RuntimeError as exc:
                msg = (
                    "SectionNavigator needs an explicit scheduler when no "
                    "asyncio event loop is running."
                )
                raise TypeError(msg) from exc
        self.settings = settings or NavigationSettings()
        self.state = ActiveSectionState()
        self._extractor = extractor or NavigationExtractor()
        self._tracker = ScrollTracker(
            viewport,
            self.state,
            scheduler,
            self.settings,
        )
        self._controller = NavigationController(viewport, self.state, self.settings)
        self._document = document
        self._tracker.sections = self._extractor.extract(document)

    @property
    def sections(self) -> list[NavigationSection]:
        """Navigation entries in document order; empty means hide the nav."""
        return list(self._tracker.sections)

    @property
    def current_section_id(self) -> str | None:
        return self.state.current

    @property
    def attached(self) -> bool:
        return self._tracker.attached

    def attach(self) -> None:
        """Reset to the first section and begin tracking scroll events."""
        self.state.set(self._first_section_id())
        self._tracker.attach()

    def detach(self) -> None:
        """Stop tracking and cancel pending recomputations."""
        self._tracker.detach()

    def navigate_to(self, section_id: str) -> bool:
        """Jump to ``section_id``; a missing anchor leaves state untouched."""
        return self._controller.navigate_to(section_id)

    def recompute(self) -> str | None:
        """Force an immediate tracker pass, bypassing the debounce."""
        return self._tracker.recompute()

    def set_document(self, document: ContentDocument) -> None:
        """Swap in a newly fetched document and re-derive navigation."""
        self._document = document
        self._tracker.sections = self._extractor.extract(document)
        current = self.state.current
        if current not in {section.id for section in self._tracker.sections}:
            self.state.set(self._first_section_id())

    def _first_section_id(self) -> str | None:
        sections = self._tracker.sections
        return sections[0].id if sections else None


__all__ = ["SectionNavigator"]
