"""
Storage access for gallery images.

Gallery files live in a public Supabase Storage bucket; their editorial
metadata (caption, category, tags, alt text, ordering, featured flag) lives
in a table keyed by file name. fetch_gallery_images() joins the two into
ImageRecords; update_image_metadata() writes one row back from the admin
editor.

Environment variables (see core/config.py):
- SUPABASE_URL: project URL (e.g., "https://xyz.supabase.co")
- SUPABASE_ANON_KEY: public anon key, enough for a public bucket
- GALLERY_BUCKET: bucket name (default "gallery")
- GALLERY_METADATA_TABLE: metadata table (default "gallery_images")
- SUPABASE_SERVICE_ROLE_KEY: used for metadata writes when set
"""

import logging
from urllib.parse import quote

import httpx

from core import config
from core.images import (
    ImageRecord,
    int_or_zero,
    is_image_name,
    optional_str,
    parse_flag,
    parse_tags,
)

logger = logging.getLogger(__name__)

# Supabase storage lists at most this many objects per call
LIST_LIMIT = 1000


class StorageError(Exception):
    """Raised when the gallery listing cannot be fetched."""


def is_configured() -> bool:
    """Check if the backend URL and key are set."""
    return bool(config.SUPABASE_URL and config.SUPABASE_ANON_KEY)


def _headers(key: str | None = None) -> dict:
    key = key or config.SUPABASE_ANON_KEY
    return {
        "apikey": key,
        "Authorization": f"Bearer {key}",
    }


def get_public_url(name: str, bucket: str | None = None) -> str:
    """
    Get the public URL for an object in a public bucket.

    Args:
        name: Object name inside the bucket, e.g. "march-2024.jpg"
        bucket: Bucket name (defaults to GALLERY_BUCKET)

    Returns:
        Public URL served by Supabase Storage
    """
    bucket = bucket or config.GALLERY_BUCKET
    return f"{config.SUPABASE_URL}/storage/v1/object/public/{bucket}/{quote(name)}"


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"{fallback} (HTTP {response.status_code})"
    if not isinstance(data, dict):
        return f"{fallback} (HTTP {response.status_code})"
    return data.get("message") or data.get("error") or f"{fallback} (HTTP {response.status_code})"


async def list_bucket_objects(client: httpx.AsyncClient, bucket: str) -> list[dict]:
    """
    List objects at the root of a bucket.

    Raises:
        StorageError: the request failed; the message carries the backend's
            own text, e.g. "Bucket not found".
    """
    response = await client.post(
        f"{config.SUPABASE_URL}/storage/v1/object/list/{bucket}",
        json={
            "prefix": "",
            "limit": LIST_LIMIT,
            "offset": 0,
            "sortBy": {"column": "name", "order": "asc"},
        },
        headers=_headers(),
    )
    if response.status_code != 200:
        raise StorageError(_error_message(response, "Failed to list gallery bucket"))
    try:
        objects = response.json()
    except ValueError as e:
        raise StorageError(f"Invalid bucket listing: {e}") from e
    if not isinstance(objects, list):
        raise StorageError("Invalid bucket listing: expected a list of objects")
    return [obj for obj in objects if isinstance(obj, dict)]


async def fetch_metadata_rows(client: httpx.AsyncClient, table: str) -> dict[str, dict]:
    """
    Fetch metadata rows keyed by file name.

    Metadata is optional: any failure is logged and an empty mapping is
    returned so the gallery still shows the bare files.
    """
    try:
        response = await client.get(
            f"{config.SUPABASE_URL}/rest/v1/{table}",
            params={"select": "*"},
            headers=_headers(),
        )
    except httpx.HTTPError as e:
        logger.warning(f"Gallery metadata unavailable: {e}")
        return {}

    if response.status_code != 200:
        logger.warning(f"Gallery metadata unavailable: {_error_message(response, 'metadata request failed')}")
        return {}

    try:
        payload = response.json()
    except ValueError as e:
        logger.warning(f"Gallery metadata unavailable: invalid JSON ({e})")
        return {}
    if not isinstance(payload, list):
        logger.warning(f"Gallery metadata unavailable: expected a list of rows, got {type(payload).__name__}")
        return {}

    rows = {}
    for row in payload:
        if not isinstance(row, dict):
            continue
        name = row.get("name") or row.get("file_name")
        if name:
            rows[name] = row
    return rows


async def fetch_gallery_images(client: httpx.AsyncClient | None = None) -> list[ImageRecord]:
    """
    Resolve the gallery's image records.

    Args:
        client: Optional httpx client (tests pass one backed by MockTransport)

    Returns:
        ImageRecords ordered by display_order, then name

    Raises:
        StorageError: backend not configured or bucket listing failed
    """
    if not is_configured():
        raise StorageError("Supabase storage is not configured")

    if client is None:
        async with httpx.AsyncClient() as owned:
            return await fetch_gallery_images(owned)

    bucket = config.GALLERY_BUCKET
    try:
        objects = await list_bucket_objects(client, bucket)
    except httpx.HTTPError as e:
        raise StorageError(f"Failed to reach storage: {e}") from e

    metadata = await fetch_metadata_rows(client, config.GALLERY_METADATA_TABLE)

    records = []
    for obj in objects:
        name = obj.get("name", "")
        if not is_image_name(name):
            continue
        row = metadata.get(name, {})
        records.append(ImageRecord.from_dict({
            **row,
            "id": row.get("id") or obj.get("id"),
            "name": name,
            "url": get_public_url(name, bucket),
        }))

    records.sort(key=lambda r: (r.display_order, r.name))
    logger.info(f"Fetched {len(records)} gallery images from bucket '{bucket}'")
    return records


def metadata_row(name: str, fields: dict) -> dict:
    """
    Normalize admin editor values into a full metadata row.

    Blank text becomes null, tags may be a list or a comma-separated string,
    display_order falls back to 0, is_featured accepts "true"/"false" text.
    """
    return {
        "name": name,
        "caption": optional_str(fields.get("caption")),
        "alt_text": optional_str(fields.get("alt_text")),
        "category": optional_str(fields.get("category")),
        "tags": list(parse_tags(fields.get("tags"))),
        "display_order": int_or_zero(fields.get("display_order")),
        "is_featured": parse_flag(fields.get("is_featured")),
    }


async def update_image_metadata(
    name: str,
    fields: dict,
    client: httpx.AsyncClient | None = None,
) -> tuple[dict | None, str | None]:
    """
    Insert or replace the metadata row for one gallery file.

    Rows are keyed by file name, so a file with no row yet gets one.
    Writes use the service-role key when it is configured, otherwise the
    anon key (which then needs an insert/update policy on the table).

    Returns:
        (stored_row, None) on success, (None, error_message) on failure
    """
    if not is_configured():
        return None, "Supabase storage is not configured"
    if not name:
        return None, "Image name is required"

    if client is None:
        async with httpx.AsyncClient() as owned:
            return await update_image_metadata(name, fields, owned)

    row = metadata_row(name, fields)
    headers = {
        **_headers(config.SUPABASE_SERVICE_ROLE_KEY),
        "Prefer": "resolution=merge-duplicates,return=representation",
    }
    try:
        response = await client.post(
            f"{config.SUPABASE_URL}/rest/v1/{config.GALLERY_METADATA_TABLE}",
            params={"on_conflict": "name"},
            json=row,
            headers=headers,
        )
    except httpx.HTTPError as e:
        return None, f"Connection error: {e}"

    if response.status_code not in (200, 201):
        return None, _error_message(response, "Failed to update image metadata")

    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, list) and data and isinstance(data[0], dict):
        stored = data[0]
    elif isinstance(data, dict):
        stored = data
    else:
        stored = row

    logger.info(f"Updated gallery metadata for {name}")
    return stored, None
