"""
Fade between pages.

When the route changes the current page fades out, the new content is
swapped in after PAGE_TRANSITION_MS, and the page fades back in. A newer
navigation replaces the pending swap; teardown() cancels it outright so the
timer never fires against a disposed page.
"""

import asyncio
import logging
from typing import Any

from core.config import PAGE_TRANSITION_MS

logger = logging.getLogger(__name__)


class PageTransition:
    def __init__(self, path: str = "/", content: Any = None, duration_ms: int = PAGE_TRANSITION_MS):
        self.path = path
        self.content = content
        self.duration_ms = duration_ms
        self.transitioning = False
        self._timer: asyncio.TimerHandle | None = None

    def navigate(self, path: str, content: Any) -> None:
        """Start fading towards new content. Must be called from the event loop."""
        self._cancel_timer()
        self.transitioning = True
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.duration_ms / 1000, self._swap, path, content)

    def _swap(self, path: str, content: Any) -> None:
        self._timer = None
        self.path = path
        self.content = content
        self.transitioning = False
        logger.debug(f"Transitioned to {path}")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def teardown(self) -> None:
        self._cancel_timer()
        self.transitioning = False
