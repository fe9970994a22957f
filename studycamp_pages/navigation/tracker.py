"""Map the viewport scroll position to the active section.

The reading line sits a fixed fraction down the viewport (25% by default),
plus a small forward buffer, so a section becomes current slightly before its
heading reaches the very top. Among the sections whose anchors have reached
that line, the last one in document order wins; when none has, the first
section is active. Scroll events are debounced, so recomputation happens at
most once per quiet period.
"""

from __future__ import annotations

import collections.abc as cabc
import logging

from studycamp_pages._constants import section_anchor

from .debounce import Debouncer, Scheduler, TimerHandle
from .extractor import NavigationSection
from .settings import NavigationSettings
from .state import ActiveSectionState
from .viewport import Viewport

logger = logging.getLogger(__name__)


def select_active_section(
    sections: cabc.Sequence[NavigationSection],
    tops: cabc.Mapping[str, float | None],
    viewport_height: float,
    settings: NavigationSettings,
) -> str | None:
    """Return the id of the section the reader is currently in.

    Parameters
    ----------
    sections : Sequence[NavigationSection]
        Navigable sections in document order.
    tops : Mapping[str, float | None]
        Anchor top offsets relative to the viewport, keyed by section id.
        Missing or ``None`` entries are skipped.
    viewport_height : float
        Current viewport height in pixels.
    settings : NavigationSettings
        Reading-line fraction and forward buffer.

    Returns
    -------
    str | None
        The last section at or above the reading line, the first section when
        none has reached it, or ``None`` when there are no sections.
    """
    if not sections:
        return None
    threshold = settings.threshold(viewport_height)
    active: str | None = None
    for section in sections:
        top = tops.get(section.id)
        if top is None:
            continue
        if top <= threshold:
            active = section.id
    return active if active is not None else sections[0].id


class ScrollTracker:
    """Keep :class:`ActiveSectionState` in step with the viewport."""

    def __init__(
        self,
        viewport: Viewport,
        state: ActiveSectionState,
        scheduler: Scheduler,
        settings: NavigationSettings | None = None,
    ) -> None:
        self.viewport = viewport
        self.state = state
        self.settings = settings or NavigationSettings()
        self.sections: list[NavigationSection] = []
        self._scheduler = scheduler
        self._debouncer = Debouncer(
            self.settings.debounce_seconds, self.recompute, scheduler
        )
        self._initial: TimerHandle | None = None
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        """Start listening for scroll events and schedule the first pass."""
        if self._attached:
            return
        self.viewport.add_scroll_listener(self._on_scroll)
        self._initial = self._scheduler.call_later(
            self.settings.initial_delay_seconds, self._initial_pass
        )
        self._attached = True

    def detach(self) -> None:
        """Stop listening and cancel every pending recomputation."""
        if not self._attached:
            return
        self.viewport.remove_scroll_listener(self._on_scroll)
        self._debouncer.cancel()
        if self._initial is not None:
            self._initial.cancel()
            self._initial = None
        self._attached = False

    def measure(self) -> dict[str, float | None]:
        """Read the current viewport-relative top of every section anchor."""
        tops: dict[str, float | None] = {}
        for section in self.sections:
            top = self.viewport.anchor_top(section_anchor(section.id))
            if top is None:
                logger.debug("Anchor for section %r not found; skipping", section.id)
            tops[section.id] = top
        return tops

    def recompute(self) -> str | None:
        """Derive the active section now and store it."""
        active = select_active_section(
            self.sections, self.measure(), self.viewport.height, self.settings
        )
        if active is not None:
            self.state.set(active)
        return active

    def _initial_pass(self) -> None:
        self._initial = None
        self.recompute()

    def _on_scroll(self) -> None:
        self._debouncer.trigger()


__all__ = ["ScrollTracker", "select_active_section"]
