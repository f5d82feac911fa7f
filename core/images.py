"""
Gallery image records.

An ImageRecord is the unit the gallery works with: one photo's public URL
plus the editorial metadata (caption, category, tags, alt text, featured
flag) kept alongside it. Records are immutable once fetched.

Identity is the backend id when there is one, otherwise the file name.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif"}


@dataclass(frozen=True)
class ImageRecord:
    id: str | None
    url: str
    name: str
    category: str | None = None
    caption: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    alt_text: str | None = None
    is_featured: bool = False
    display_order: int = 0

    @property
    def key(self) -> str:
        """Identity used for lightbox navigation and de-duplication."""
        return self.id or self.name

    @property
    def display_alt(self) -> str:
        """Alt text for the <img>, falling back to the file name."""
        return self.alt_text or self.name

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match over caption, name and tags.

        A blank term matches every image.
        """
        if not term or not term.strip():
            return True
        needle = term.lower()
        if self.caption and needle in self.caption.lower():
            return True
        if self.name and needle in self.name.lower():
            return True
        return any(needle in tag.lower() for tag in self.tags)

    @classmethod
    def from_dict(cls, data: dict) -> "ImageRecord":
        """Build a record from a flat dict (metadata row merged with storage info)."""
        return cls(
            id=optional_str(data.get("id")),
            url=data.get("url", ""),
            name=data.get("name", ""),
            category=optional_str(data.get("category")),
            caption=optional_str(data.get("caption")),
            tags=parse_tags(data.get("tags")),
            alt_text=optional_str(data.get("alt_text")),
            is_featured=parse_flag(data.get("is_featured")),
            display_order=int_or_zero(data.get("display_order")),
        )


def is_image_name(name: str) -> bool:
    """True for visible files with an image extension (skips '.emptyFolderPlaceholder')."""
    if not name or name.startswith("."):
        return False
    return PurePosixPath(name).suffix.lower() in IMAGE_EXTENSIONS


def parse_tags(raw) -> tuple[str, ...]:
    """
    Normalize tags into a tuple of non-empty strings.

    The admin editor stores a text[] column, but hand-edited rows sometimes
    hold a comma-separated string instead.
    """
    if not raw:
        return ()
    if isinstance(raw, str):
        raw = raw.split(",")
    return tuple(str(t).strip() for t in raw if t is not None and str(t).strip())


FALSE_STRINGS = {"", "false", "0", "no", "off", "f", "n"}


def parse_flag(raw) -> bool:
    """
    Read a boolean column.

    Hand-edited rows sometimes hold "false" or "0" as text, which bool()
    would treat as true.
    """
    if isinstance(raw, str):
        return raw.strip().lower() not in FALSE_STRINGS
    return bool(raw)


def optional_str(value) -> str | None:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def int_or_zero(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
