"""Viewport abstraction measured by the tracker and driven by the controller.

A real browser binding implements :class:`Viewport` against the DOM. The
package ships :class:`StaticViewport`, an in-memory layout of anchor offsets
used by the ``pages nav`` preview command and by the test suite.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

logger = logging.getLogger(__name__)

ScrollListener = cabc.Callable[[], object]


class Viewport(typ.Protocol):
    """Layout reads and scroll requests needed by the navigation layer."""

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    @property
    def scroll_y(self) -> float: ...

    def anchor_top(self, anchor_id: str) -> float | None:
        """Return the anchor's top relative to the viewport, or ``None``."""
        ...

    def scroll_to(self, top: float, *, smooth: bool = True) -> None:
        """Request a scroll to document offset ``top``."""
        ...

    def add_scroll_listener(self, listener: ScrollListener) -> None: ...

    def remove_scroll_listener(self, listener: ScrollListener) -> None: ...


@dc.dataclass(slots=True)
class ScrollRequest:
    """A programmatic scroll requested through :meth:`StaticViewport.scroll_to`."""

    top: float
    smooth: bool


class StaticViewport:
    """Viewport over a fixed map of anchor ids to document offsets.

    ``scroll`` simulates the user moving the page and notifies listeners.
    ``scroll_to`` mimics an animated browser scroll: the request is recorded
    but the position only changes when :meth:`settle` runs, and each request
    settles at most once.
    """

    def __init__(
        self,
        anchors: cabc.Mapping[str, float],
        *,
        width: float = 1280.0,
        height: float = 800.0,
        scroll_y: float = 0.0,
    ) -> None:
        self.anchors = dict(anchors)
        self.width = width
        self.height = height
        self.scroll_y = scroll_y
        self.scroll_requests: list[ScrollRequest] = []
        self._pending: ScrollRequest | None = None
        self._listeners: list[ScrollListener] = []

    @property
    def listener_count(self) -> int:
        """Number of registered scroll listeners."""
        return len(self._listeners)

    def anchor_top(self, anchor_id: str) -> float | None:
        offset = self.anchors.get(anchor_id)
        if offset is None:
            return None
        return offset - self.scroll_y

    def scroll_to(self, top: float, *, smooth: bool = True) -> None:
        request = ScrollRequest(top=top, smooth=smooth)
        self.scroll_requests.append(request)
        self._pending = request

    def add_scroll_listener(self, listener: ScrollListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_scroll_listener(self, listener: ScrollListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def scroll(self, scroll_y: float) -> None:
        """Move to ``scroll_y`` as a user would and emit a scroll event."""
        self.scroll_y = max(scroll_y, 0.0)
        for listener in list(self._listeners):
            listener()

    def settle(self) -> None:
        """Finish the latest requested scroll animation, if one is pending."""
        request, self._pending = self._pending, None
        if request is None:
            logger.debug("No pending scroll request to settle")
            return
        self.scroll(request.top)


__all__ = ["ScrollListener", "ScrollRequest", "StaticViewport", "Viewport"]
