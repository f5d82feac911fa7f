"""
Gallery view state.

GalleryState holds the fetched image list and the user's choices (category,
search term, page, view mode, lightbox selection). Everything the page shows
is derived from those on demand; nothing derived is stored.

Rules:
- categories = "all" followed by distinct categories in first-seen order
- changing the category or search term returns to page 1
- the page is always clamped to [1, total_pages]
- lightbox navigation wraps around in both directions
- only the most recent load() may touch state, and nothing may after
  teardown()

Error semantics for load():
- timeout          = the fetch did not settle within the timeout
- bucket-not-found = the storage bucket is missing
- generic          = anything else
"""

import asyncio
import logging
import math
from contextlib import ExitStack
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Sequence

from core import config
from core.images import ImageRecord
from core.lightbox import KeyboardEvents, ScrollLock, SwipeTracker

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
VIEW_MODES = ("grid", "masonry")
DIRECTIONS = ("next", "prev")

FetchImages = Callable[[], Awaitable[Sequence[ImageRecord]]]


class GalleryErrorKind(Enum):
    """Load failure categories shown to the visitor."""
    TIMEOUT = "timeout"
    BUCKET_NOT_FOUND = "bucket-not-found"
    GENERIC = "generic"


ERROR_MESSAGES = {
    GalleryErrorKind.TIMEOUT: (
        "Connection timeout. Please check your internet connection "
        "and Supabase configuration."
    ),
    GalleryErrorKind.BUCKET_NOT_FOUND: (
        'Gallery bucket not found. Please create the "gallery" bucket '
        "in Supabase Storage."
    ),
    GalleryErrorKind.GENERIC: (
        "Failed to load gallery images. Please check your Supabase "
        "configuration or try again later."
    ),
}

BUCKET_REMEDIATION = (
    "Go to Supabase Dashboard → Storage",
    'Create a new bucket named "gallery"',
    "Set it to Public",
    "Set up storage policies for public read access",
)


class GalleryTimeoutError(Exception):
    """Raised inside load() when the fetch loses the race against the timer."""

    def __init__(self, message: str = "Request timeout. Please check your Supabase configuration."):
        super().__init__(message)


@dataclass(frozen=True)
class GalleryError:
    kind: GalleryErrorKind
    message: str
    remediation: tuple[str, ...] = field(default_factory=tuple)


def classify_error(exc: BaseException) -> GalleryError:
    """Map a fetch failure onto the visitor-facing error categories."""
    text = str(exc)
    if isinstance(exc, (GalleryTimeoutError, asyncio.TimeoutError)) or "timeout" in text:
        kind = GalleryErrorKind.TIMEOUT
    elif "not found" in text or "Bucket" in text:
        kind = GalleryErrorKind.BUCKET_NOT_FOUND
    else:
        kind = GalleryErrorKind.GENERIC

    remediation = BUCKET_REMEDIATION if kind is GalleryErrorKind.BUCKET_NOT_FOUND else ()
    return GalleryError(kind=kind, message=ERROR_MESSAGES[kind], remediation=remediation)


def _discard_result(task: asyncio.Future) -> None:
    # A fetch that lost the race is left to finish; read its outcome so
    # asyncio does not report an unretrieved exception.
    if not task.cancelled():
        task.exception()


class GalleryState:
    """
    State manager behind the gallery page.

    Args:
        fetch_images: async callable returning ImageRecords
            (normally core.storage.fetch_gallery_images)
        timeout: seconds before load() gives up (default GALLERY_FETCH_TIMEOUT)
        page_size: images per grid page (default IMAGES_PER_PAGE)
        scroll_lock: shared page scroll lock
        keyboard: key event source the lightbox listens to while open
    """

    def __init__(
        self,
        fetch_images: FetchImages,
        timeout: float | None = None,
        page_size: int | None = None,
        scroll_lock: ScrollLock | None = None,
        keyboard: KeyboardEvents | None = None,
    ):
        self._fetch_images = fetch_images
        self.timeout = config.GALLERY_FETCH_TIMEOUT if timeout is None else timeout
        self.page_size = page_size or config.IMAGES_PER_PAGE
        self.scroll_lock = scroll_lock or ScrollLock()
        self.keyboard = keyboard or KeyboardEvents()

        self.images: list[ImageRecord] = []
        self.loading = True
        self.error: GalleryError | None = None
        self.selected_category = ALL_CATEGORIES
        self.search_term = ""
        self.page = 1
        self.view_mode = "grid"
        self.selected_image: ImageRecord | None = None

        self._swipe = SwipeTracker()
        self._lightbox: ExitStack | None = None
        self._generation = 0
        self._torn_down = False

    # --- Loading ---

    async def load(self) -> None:
        """
        Fetch the image list, racing the fetch against the timeout.

        Never raises for fetch failures; they end up in self.error. The
        losing side of the race is not cancelled, its result is dropped.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        fetch = None
        try:
            fetch = asyncio.ensure_future(self._fetch_images())
            done, _ = await asyncio.wait({fetch}, timeout=self.timeout)
            if not done:
                raise GalleryTimeoutError()
            images = fetch.result()
        except Exception as e:
            if self._is_current(generation):
                logger.error(f"Error fetching gallery images: {e}")
                self.error = classify_error(e)
        else:
            if self._is_current(generation):
                self.images = list(images)
                self.page = self._clamp(self.page)
                logger.info(f"Gallery loaded {len(self.images)} images")
        finally:
            if fetch is not None and not fetch.done():
                fetch.add_done_callback(_discard_result)
            if self._is_current(generation):
                self.loading = False

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self._torn_down

    # --- Derived views ---

    @property
    def categories(self) -> list[str]:
        seen = [ALL_CATEGORIES]
        for image in self.images:
            if image.category and image.category not in seen:
                seen.append(image.category)
        return seen

    @property
    def featured_images(self) -> list[ImageRecord]:
        return [img for img in self.images if img.is_featured][:config.FEATURED_LIMIT]

    @property
    def filtered_images(self) -> list[ImageRecord]:
        category = self.selected_category
        return [
            img for img in self.images
            if (category == ALL_CATEGORIES or img.category == category)
            and img.matches_search(self.search_term)
        ]

    @property
    def total_pages(self) -> int:
        """Number of grid pages; an empty result still counts as one page."""
        return max(1, math.ceil(len(self.filtered_images) / self.page_size))

    @property
    def paginated_images(self) -> list[ImageRecord]:
        start = (self.page - 1) * self.page_size
        return self.filtered_images[start:start + self.page_size]

    @property
    def lightbox_position(self) -> tuple[int, int] | None:
        """(1-based index, total) of the selected image within the filtered list."""
        if self.selected_image is None:
            return None
        filtered = self.filtered_images
        index = self._index_of(self.selected_image, filtered)
        if index < 0:
            return None
        return index + 1, len(filtered)

    # --- User actions ---

    def set_category(self, category: str) -> None:
        self.selected_category = category or ALL_CATEGORIES
        self.page = 1

    def set_search(self, term: str) -> None:
        self.search_term = term or ""
        self.page = 1

    def set_page(self, page: int) -> None:
        self.page = self._clamp(page)

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode!r}")
        self.view_mode = mode

    def _clamp(self, page: int) -> int:
        return max(1, min(int(page), self.total_pages))

    # --- Lightbox ---

    @property
    def lightbox_open(self) -> bool:
        return self.selected_image is not None

    def open_lightbox(self, image: ImageRecord) -> None:
        """Select an image; scroll lock and key listener are held until close."""
        if self._lightbox is None:
            stack = ExitStack()
            stack.enter_context(self.scroll_lock.hold())
            stack.callback(self.keyboard.subscribe(self.handle_key))
            self._lightbox = stack
        self.selected_image = image

    def close_lightbox(self) -> None:
        self.selected_image = None
        if self._lightbox is not None:
            stack, self._lightbox = self._lightbox, None
            stack.close()

    def navigate(self, direction: str) -> None:
        """Move the lightbox to the next/previous filtered image, wrapping around."""
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction!r}")
        if self.selected_image is None:
            return
        filtered = self.filtered_images
        if not filtered:
            return

        count = len(filtered)
        index = self._index_of(self.selected_image, filtered)
        if index < 0:
            # Opened from outside the current filter (e.g. the featured strip)
            new_index = 0 if direction == "next" else count - 1
        elif direction == "next":
            new_index = (index + 1) % count
        else:
            new_index = (index - 1) % count
        self.selected_image = filtered[new_index]

    @staticmethod
    def _index_of(image: ImageRecord, images: list[ImageRecord]) -> int:
        for i, candidate in enumerate(images):
            if candidate.key == image.key:
                return i
        return -1

    def handle_key(self, key: str) -> None:
        """Keyboard bindings while the lightbox is open."""
        if self.selected_image is None:
            return
        if key == "Escape":
            self.close_lightbox()
        elif key == "ArrowRight":
            self.navigate("next")
        elif key == "ArrowLeft":
            self.navigate("prev")

    def touch_start(self, x: float) -> None:
        self._swipe.start(x)

    def touch_move(self, x: float) -> None:
        self._swipe.move(x)

    def touch_end(self) -> None:
        direction = self._swipe.end()
        if direction and self.selected_image is not None:
            self.navigate(direction)

    # --- Lifecycle ---

    def teardown(self) -> None:
        """Release lightbox resources and make any pending load() inert."""
        self._torn_down = True
        self.close_lightbox()
