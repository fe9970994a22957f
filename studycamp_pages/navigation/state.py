"""Holder for the currently active section id."""

from __future__ import annotations

import collections.abc as cabc

ChangeListener = cabc.Callable[[str | None], object]


class ActiveSectionState:
    """Single mutable value written by the tracker and the controller.

    Writes are last-write-wins. Listeners run only when the value changes.
    """

    def __init__(self, initial: str | None = None) -> None:
        self._current = initial
        self._listeners: list[ChangeListener] = []

    @property
    def current(self) -> str | None:
        return self._current

    def set(self, section_id: str | None) -> bool:
        """Store ``section_id`` and return whether the value changed."""
        if section_id == self._current:
            return False
        self._current = section_id
        for listener in list(self._listeners):
            listener(section_id)
        return True

    def subscribe(self, listener: ChangeListener) -> cabc.Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


__all__ = ["ActiveSectionState", "ChangeListener"]
