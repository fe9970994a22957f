"""Tunable constants for scroll tracking and section navigation."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True, frozen=True)
class NavigationSettings:
    """Values tuned for visual feel rather than derived from invariants.

    Attributes
    ----------
    target_fraction : float
        Reading line as a fraction of viewport height from the top.
    forward_buffer : float
        Pixels below the reading line that still count as "reached".
    debounce_seconds : float
        Quiet period after the last scroll event before recomputing.
    initial_delay_seconds : float
        Delay of the first recomputation after attaching.
    header_offset_mobile : float
        Fixed-header clearance used below ``desktop_min_width``.
    header_offset_desktop : float
        Fixed-header clearance used at or above ``desktop_min_width``.
    desktop_min_width : float
        Narrowest viewport width treated as desktop.
    label_max_length : int
        Navigation labels longer than this are truncated for display.
    """

    target_fraction: float = 0.25
    forward_buffer: float = 50.0
    debounce_seconds: float = 0.1
    initial_delay_seconds: float = 0.1
    header_offset_mobile: float = 130.0
    header_offset_desktop: float = 110.0
    desktop_min_width: float = 1024.0
    label_max_length: int = 25

    def threshold(self, viewport_height: float) -> float:
        """Return the top offset at or above which a section counts as reached."""
        return viewport_height * self.target_fraction + self.forward_buffer

    def header_offset(self, viewport_width: float) -> float:
        """Return the header clearance for a viewport of ``viewport_width``."""
        if viewport_width < self.desktop_min_width:
            return self.header_offset_mobile
        return self.header_offset_desktop


__all__ = ["NavigationSettings"]
