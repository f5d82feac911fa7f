"""
Presentational components for the gallery site.

Plain functions returning FastHTML FT trees; they read state, never change
it. Interactive elements carry data-action attributes so one delegated
listener on the page can dispatch them.
"""

from fasthtml.common import *

from core import config
from core.gallery import GalleryError, GalleryErrorKind, GalleryState

SKELETON_BASE = "animate-pulse bg-gray-200 rounded"

DEFAULT_DESCRIPTION = (
    "Empowering women through advocacy, education, and grassroots mobilization "
    "for gender equality and social justice in Kenya."
)
DEFAULT_KEYWORDS = (
    "women's rights, gender equality, Kenya, women empowerment, social justice, "
    "grassroots mobilization, feminist movement, women's advocacy, community development, "
    "women's education"
)
DEFAULT_IMAGE = "/WMW-New Logo.jpg"
TWITTER_HANDLE = "@Wmwkenya"


# =============================================================================
# Loading skeletons
# =============================================================================

def _bar(extra: str) -> Div:
    return Div(cls=f"{extra} {SKELETON_BASE}")


def _card_skeleton(cls: str) -> Div:
    return Div(
        _bar("h-6 mb-4 w-3/4"),
        _bar("h-4 mb-2"),
        _bar("h-4 mb-2 w-5/6"),
        _bar("h-4 w-4/6"),
        cls=f"p-6 bg-white rounded-lg shadow {cls}".strip(),
    )


def loading_skeleton(kind: str = "card", lines: int = 3, cls: str = "") -> Div:
    """
    Placeholder shown while content loads.

    Args:
        kind: card, text, image, avatar, button, list or grid.
            Anything else falls back to card.
        lines: number of rows for the text and list kinds
        cls: extra classes for the outer element
    """
    if kind == "text":
        return Div(
            *[_bar(f"h-4 {'w-3/4' if i == lines - 1 else 'w-full'}") for i in range(lines)],
            cls=f"space-y-2 {cls}".strip(),
        )
    if kind == "image":
        return Div(cls=f"aspect-video {SKELETON_BASE} {cls}".strip())
    if kind == "avatar":
        return Div(cls=f"w-12 h-12 {SKELETON_BASE} rounded-full {cls}".strip())
    if kind == "button":
        return Div(cls=f"h-10 w-24 {SKELETON_BASE} rounded {cls}".strip())
    if kind == "list":
        return Div(
            *[
                Div(
                    _bar("w-8 h-8 rounded-full"),
                    Div(_bar("h-4 w-3/4"), _bar("h-3 w-1/2"), cls="flex-1 space-y-2"),
                    cls="flex items-center space-x-3",
                )
                for _ in range(lines)
            ],
            cls=f"space-y-3 {cls}".strip(),
        )
    if kind == "grid":
        return Div(
            *[
                Div(
                    _bar("h-48 mb-4"),
                    _bar("h-6 mb-2 w-3/4"),
                    _bar("h-4 mb-2"),
                    _bar("h-4 w-5/6"),
                    cls="p-4 bg-white rounded-lg shadow",
                )
                for _ in range(6)
            ],
            cls=f"grid grid-cols-1 md:grid-cols-2 lg:grid-cols-3 gap-6 {cls}".strip(),
        )
    return _card_skeleton(cls)


# =============================================================================
# Page transition wrapper
# =============================================================================

def page_transition(content, transitioning: bool = False) -> Div:
    """Opacity wrapper driven by core.transition.PageTransition."""
    return Div(
        content,
        cls=f"transition-opacity duration-150 {'opacity-0' if transitioning else 'opacity-100'}",
    )


# =============================================================================
# SEO head
# =============================================================================

def seo_head(
    title: str | None = None,
    description: str = DEFAULT_DESCRIPTION,
    keywords: str = DEFAULT_KEYWORDS,
    image: str = DEFAULT_IMAGE,
    url: str | None = None,
    type_: str = "website",
    author: str | None = None,
) -> tuple:
    """
    Title, meta, Open Graph, Twitter card and canonical tags for a page.

    Page titles get the site name appended; the site name alone is left as is.
    Relative image paths are resolved against the page URL.
    """
    site = config.SITE_NAME
    title = title or site
    url = url or config.SITE_URL
    author = author or site
    full_title = title if title == site else f"{title} - {site}"
    image_url = image if image.startswith("http") else f"{url}{image}"

    return (
        Title(full_title),
        Meta(name="title", content=full_title),
        Meta(name="description", content=description),
        Meta(name="keywords", content=keywords),
        Meta(name="author", content=author),
        # Open Graph
        Meta(property="og:type", content=type_),
        Meta(property="og:url", content=url),
        Meta(property="og:title", content=full_title),
        Meta(property="og:description", content=description),
        Meta(property="og:image", content=image_url),
        Meta(property="og:image:width", content="1200"),
        Meta(property="og:image:height", content="630"),
        Meta(property="og:site_name", content=site),
        Meta(property="og:locale", content="en_US"),
        # Twitter
        Meta(property="twitter:card", content="summary_large_image"),
        Meta(property="twitter:url", content=url),
        Meta(property="twitter:title", content=full_title),
        Meta(property="twitter:description", content=description),
        Meta(property="twitter:image", content=image_url),
        Meta(name="twitter:creator", content=TWITTER_HANDLE),
        Link(rel="canonical", href=url),
    )


# =============================================================================
# Gallery fragments
# =============================================================================

def gallery_error_panel(error: GalleryError) -> Div:
    """Load failure message, fix-it steps for a missing bucket, and a retry button."""
    remediation = None
    if error.kind is GalleryErrorKind.BUCKET_NOT_FOUND and error.remediation:
        remediation = Div(
            P("To fix this:", cls="font-semibold mb-2"),
            Ol(*[Li(step) for step in error.remediation], cls="list-decimal list-inside space-y-1"),
            cls="bg-white rounded-lg p-4 mb-4 text-left text-sm text-red-700",
        )

    return Div(
        Div(
            P("Error Loading Gallery", cls="text-red-700 text-lg font-semibold mb-2"),
            P(error.message, cls="text-red-600 mb-4"),
            remediation,
            Button(
                "Try Again",
                type="button",
                data_action="gallery-retry",
                cls="px-6 py-3 bg-primary text-white rounded-full font-semibold "
                    "hover:bg-purple-700 transition-colors duration-300",
            ),
            cls="bg-red-50 border border-red-200 rounded-2xl p-8 max-w-md mx-auto",
        ),
        cls="text-center py-20",
        data_error_kind=error.kind.value,
    )


def lightbox_counter(state: GalleryState) -> "Div | None":
    """'3 / 17' badge; hidden when the filtered list has a single image."""
    position = state.lightbox_position
    if position is None or position[1] <= 1:
        return None
    index, total = position
    return Div(
        P(f"{index} / {total}", cls="text-white text-sm font-medium"),
        cls="absolute bottom-4 md:bottom-8 left-1/2 -translate-x-1/2 z-10 "
            "bg-white/10 backdrop-blur-md rounded-full px-4 py-2",
    )
