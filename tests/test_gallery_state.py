"""Tests for gallery derived views: categories, featured, filtering, pagination.

Tests cover:
1. Categories start with "all", then first-seen order, no duplicates
2. Featured strip is capped at six images
3. Category and search filters (case-insensitive, caption/name/tags)
4. Page clamping and page reset on filter changes
5. View mode validation
"""

import pytest

from core.gallery import ALL_CATEGORIES, GalleryState


def _state_with(images):
    async def fetch():
        return images

    state = GalleryState(fetch)
    state.images = list(images)
    state.loading = False
    return state


class TestCategories:
    """Category list derived from the loaded images."""

    def test_all_comes_first(self, gallery):
        """'all' is always the first category."""
        assert gallery.categories[0] == ALL_CATEGORIES

    def test_first_seen_order_without_duplicates(self, gallery):
        """Distinct categories follow in the order they first appear."""
        assert gallery.categories == ["all", "marches", "workshops", "community"]

    def test_uncategorized_images_add_nothing(self, image_factory):
        """Images without a category do not add an empty entry."""
        state = _state_with([image_factory(1), image_factory(2, "events")])
        assert state.categories == ["all", "events"]

    def test_empty_gallery_has_only_all(self):
        """No images -> just 'all'."""
        assert _state_with([]).categories == ["all"]


class TestFeatured:
    """Featured strip selection."""

    def test_only_featured_images(self, gallery):
        """Only is_featured images appear, in list order."""
        assert [img.id for img in gallery.featured_images] == ["img-1", "img-5"]

    def test_capped_at_six(self, image_factory):
        """More than six featured images are cut to six."""
        images = [image_factory(i, is_featured=True) for i in range(9)]
        featured = _state_with(images).featured_images
        assert len(featured) == 6
        assert featured[0].id == "img-0"


class TestFiltering:
    """Category + search predicate."""

    def test_all_category_shows_everything(self, gallery):
        """The default 'all' category applies no category filter."""
        assert len(gallery.filtered_images) == 7

    def test_category_filter(self, gallery):
        """Selecting a category keeps only its images."""
        gallery.set_category("marches")
        assert [img.id for img in gallery.filtered_images] == ["img-1", "img-3", "img-7"]

    def test_search_matches_caption_case_insensitive(self, gallery):
        """Search is a case-insensitive substring match on caption."""
        gallery.set_search("NAIROBI")
        assert [img.id for img in gallery.filtered_images] == ["img-1"]

    def test_search_matches_tags(self, gallery):
        """Search matches any tag."""
        gallery.set_search("youth")
        assert [img.id for img in gallery.filtered_images] == ["img-2"]

    def test_search_matches_name(self, gallery):
        """Search matches the file name."""
        gallery.set_search("photo-6")
        assert [img.id for img in gallery.filtered_images] == ["img-6"]

    def test_blank_search_matches_everything(self, gallery):
        """Whitespace-only search applies no filter."""
        gallery.set_search("   ")
        assert len(gallery.filtered_images) == 7

    def test_category_and_search_combine(self, gallery):
        """Both predicates must hold."""
        gallery.set_category("marches")
        gallery.set_search("kisumu")
        assert [img.id for img in gallery.filtered_images] == ["img-3"]

    def test_filtered_is_subset_of_images(self, gallery):
        """Every filtered image is one of the loaded images."""
        for category in gallery.categories:
            gallery.set_category(category)
            assert all(img in gallery.images for img in gallery.filtered_images)

    def test_unknown_category_yields_nothing(self, gallery):
        """A category no image has filters everything out."""
        gallery.set_category("nonexistent")
        assert gallery.filtered_images == []


class TestPagination:
    """Fixed-size pages of twelve."""

    @pytest.fixture
    def big_gallery(self, image_factory):
        return _state_with([image_factory(i) for i in range(25)])

    def test_25_images_make_3_pages(self, big_gallery):
        """25 images / 12 per page -> 3 pages."""
        assert big_gallery.total_pages == 3

    def test_last_page_has_one_image(self, big_gallery):
        """Page 3 holds the single leftover image."""
        big_gallery.set_page(3)
        assert [img.id for img in big_gallery.paginated_images] == ["img-24"]

    def test_first_page_has_twelve(self, big_gallery):
        """Page 1 is full."""
        assert len(big_gallery.paginated_images) == 12

    def test_page_clamped_high(self, big_gallery):
        """Pages past the end clamp to the last page."""
        big_gallery.set_page(10)
        assert big_gallery.page == 3

    def test_page_clamped_low(self, big_gallery):
        """Zero and negative pages clamp to 1."""
        big_gallery.set_page(0)
        assert big_gallery.page == 1
        big_gallery.set_page(-4)
        assert big_gallery.page == 1

    def test_empty_result_is_one_page(self):
        """No images still counts as a single (empty) page."""
        state = _state_with([])
        assert state.total_pages == 1
        state.set_page(5)
        assert state.page == 1
        assert state.paginated_images == []

    def test_category_change_resets_page(self, big_gallery):
        """Changing category returns to page 1."""
        big_gallery.set_page(3)
        big_gallery.set_category("all")
        assert big_gallery.page == 1

    def test_search_change_resets_page(self, big_gallery):
        """Changing the search term returns to page 1."""
        big_gallery.set_page(2)
        big_gallery.set_search("photo")
        assert big_gallery.page == 1


class TestViewMode:
    """Grid / masonry toggle."""

    def test_default_is_grid(self, gallery):
        """The first toggle (grid) is active on first load."""
        assert gallery.view_mode == "grid"

    def test_switch_to_masonry(self, gallery):
        """Masonry is accepted."""
        gallery.set_view_mode("masonry")
        assert gallery.view_mode == "masonry"

    def test_unknown_mode_rejected(self, gallery):
        """Anything else raises ValueError and leaves the mode unchanged."""
        with pytest.raises(ValueError):
            gallery.set_view_mode("carousel")
        assert gallery.view_mode == "grid"
