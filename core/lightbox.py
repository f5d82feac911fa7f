"""
Resources the lightbox holds while it is open.

- ScrollLock: suppresses background scrolling. Acquired with hold(), which
  is a context manager, so release happens on every exit path.
- KeyboardEvents: a key event source. subscribe() returns the matching
  unsubscribe callable.
- SwipeTracker: turns a touch start/move/end sequence into a navigation
  direction.

GalleryState enters hold() and subscribe() when the lightbox opens and
unwinds both when it closes or the gallery is torn down.
"""

from contextlib import contextmanager
from typing import Callable

from core.config import SWIPE_MIN_DISTANCE

KeyHandler = Callable[[str], None]


class ScrollLock:
    """Reference-counted page scroll lock."""

    def __init__(self):
        self._holders = 0

    @property
    def locked(self) -> bool:
        return self._holders > 0

    @property
    def overflow(self) -> str:
        """CSS overflow value for the page body."""
        return "hidden" if self.locked else "auto"

    @contextmanager
    def hold(self):
        self._holders += 1
        try:
            yield self
        finally:
            self._holders -= 1


class KeyboardEvents:
    """Key event source with explicit subscriptions."""

    def __init__(self):
        self._handlers: list[KeyHandler] = []

    @property
    def listener_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: KeyHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def dispatch(self, key: str) -> None:
        # Handlers may unsubscribe themselves (Escape closes the lightbox)
        for handler in list(self._handlers):
            handler(key)


class SwipeTracker:
    """
    Horizontal swipe detection.

    Leftward travel beyond the threshold means "next", rightward means
    "prev". A tap (no move) or a short drag yields nothing.
    """

    def __init__(self, min_distance: int = SWIPE_MIN_DISTANCE):
        self.min_distance = min_distance
        self._start_x: float | None = None
        self._end_x: float | None = None

    def start(self, x: float) -> None:
        self._start_x = x
        self._end_x = None

    def move(self, x: float) -> None:
        self._end_x = x

    def end(self) -> str | None:
        start, end = self._start_x, self._end_x
        self._start_x = self._end_x = None
        if start is None or end is None:
            return None

        distance = start - end
        if distance > self.min_distance:
            return "next"
        if distance < -self.min_distance:
            return "prev"
        return None
