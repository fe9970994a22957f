"""Jump to a section with an optimistic active-section update."""

from __future__ import annotations

import logging

from studycamp_pages._constants import section_anchor

from .settings import NavigationSettings
from .state import ActiveSectionState
from .viewport import Viewport

logger = logging.getLogger(__name__)


class NavigationController:
    """Scroll the viewport to a section anchor on request.

    The active section is updated before the scroll is requested, so the
    navigation highlights the target immediately. Scroll completion is never
    awaited; the tracker confirms the same id once scrolling settles.
    """

    def __init__(
        self,
        viewport: Viewport,
        state: ActiveSectionState,
        settings: NavigationSettings | None = None,
    ) -> None:
        self.viewport = viewport
        self.state = state
        self.settings = settings or NavigationSettings()

    def scroll_target(self, section_id: str) -> float | None:
        """Return the document offset to scroll to, or ``None`` without anchor."""
        top = self.viewport.anchor_top(section_anchor(section_id))
        if top is None:
            return None
        offset = self.settings.header_offset(self.viewport.width)
        return max(top + self.viewport.scroll_y - offset, 0.0)

    def navigate_to(self, section_id: str) -> bool:
        """Mark ``section_id`` active and request a smooth scroll to it.

        Returns ``False`` without touching state when the section has no
        rendered anchor.
        """
        target = self.scroll_target(section_id)
        if target is None:
            logger.debug("No anchor for section %r; navigation ignored", section_id)
            return False
        self.state.set(section_id)
        self.viewport.scroll_to(target, smooth=True)
        return True


__all__ = ["NavigationController"]
