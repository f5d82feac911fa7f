"""Shared test fixtures for gallery state, storage and admin tests."""

import pytest
from unittest.mock import patch

from core.images import ImageRecord


def make_image(n: int, category: str | None = None, **kwargs) -> ImageRecord:
    """Build a numbered ImageRecord with predictable fields."""
    fields = {
        "id": f"img-{n}",
        "url": f"https://example.supabase.co/storage/v1/object/public/gallery/photo-{n}.jpg",
        "name": f"photo-{n}.jpg",
        "category": category,
    }
    fields.update(kwargs)
    return ImageRecord(**fields)


# ---------------------------------------------------------------------------
# Image fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def image_factory():
    """The make_image helper, for tests that build their own lists."""
    return make_image


@pytest.fixture
def mixed_images():
    """Seven images over three categories, two featured, one uncategorized."""
    return [
        make_image(1, "marches", caption="Nairobi march", is_featured=True),
        make_image(2, "workshops", tags=("Training", "youth")),
        make_image(3, "marches", caption="Kisumu rally"),
        make_image(4, None, caption="Team photo"),
        make_image(5, "community", is_featured=True, tags=("Mombasa",)),
        make_image(6, "workshops"),
        make_image(7, "marches"),
    ]


@pytest.fixture
def gallery(mixed_images):
    """A GalleryState already holding mixed_images, as if load() had succeeded."""
    from core.gallery import GalleryState

    async def never_called():
        raise AssertionError("fetch should not run in this test")

    state = GalleryState(never_called)
    state.images = list(mixed_images)
    state.loading = False
    yield state
    state.teardown()


# ---------------------------------------------------------------------------
# Backend configuration fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def supabase_configured():
    """Point core.config at a fake Supabase project."""
    with patch("core.config.SUPABASE_URL", "https://example.supabase.co"), \
         patch("core.config.SUPABASE_ANON_KEY", "anon-key"), \
         patch("core.config.GALLERY_BUCKET", "gallery"), \
         patch("core.config.GALLERY_METADATA_TABLE", "gallery_images"):
        yield


@pytest.fixture
def supabase_unconfigured():
    """No Supabase project configured."""
    with patch("core.config.SUPABASE_URL", ""), \
         patch("core.config.SUPABASE_ANON_KEY", ""):
        yield
