"""
Configuration for the gallery site toolkit.

Contains:
- Backend configuration (Supabase project URL and keys)
- Gallery behaviour constants (page size, featured cap, fetch timeout)
- Site identity used by the SEO head

Everything is read from environment variables with sensible defaults.
Keys are never logged.
"""

import os

# =============================================================================
# Backend Configuration (from environment variables)
# =============================================================================

SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# Only the admin CLI needs this one. Never ship it to a browser.
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

# Storage bucket holding the gallery files, and the table with their metadata
GALLERY_BUCKET = os.getenv("GALLERY_BUCKET", "gallery")
GALLERY_METADATA_TABLE = os.getenv("GALLERY_METADATA_TABLE", "gallery_images")

# Verbosity for scripts (the library modules only create loggers)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# =============================================================================
# Gallery Behaviour
# =============================================================================

# Seconds before a pending gallery fetch is reported as a timeout
GALLERY_FETCH_TIMEOUT = float(os.getenv("GALLERY_FETCH_TIMEOUT", "15"))

# Grid page size and the cap on the featured strip
IMAGES_PER_PAGE = 12
FEATURED_LIMIT = 6

# Horizontal travel (px) a touch must exceed to count as a swipe
SWIPE_MIN_DISTANCE = 50

# Fade duration between routes
PAGE_TRANSITION_MS = 150

# =============================================================================
# Site Identity (SEO head defaults)
# =============================================================================

SITE_NAME = os.getenv("SITE_NAME", "World March of Women Kenya")
SITE_URL = os.getenv("SITE_URL", "https://worldmarchofwomenkenya.org").rstrip("/")
