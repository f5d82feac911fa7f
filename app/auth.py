"""
User roles and the Supabase user-admin API.

Roles:
- admin: full access to the site's admin area
- writer: can author posts and publications

A user's role lives in user_metadata.role. Changing it requires the
service-role key, so these helpers are only used from trusted scripts
(see scripts/set_user_role.py), never from a browser-facing process.

All network helpers follow the same convention: they return
(result, error) and never raise on HTTP failures.
"""

import logging
from dataclasses import dataclass, field

import httpx

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ("admin", "writer")

# The admin API has no lookup by email; callers scan one page of this size.
USERS_PAGE_SIZE = 200


def is_valid_role(role: str) -> bool:
    return role in ALLOWED_ROLES


@dataclass
class User:
    id: str
    email: str
    user_metadata: dict = field(default_factory=dict)

    @property
    def role(self) -> str | None:
        return self.user_metadata.get("role")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_api(cls, data: dict) -> "User":
        return cls(
            id=data.get("id", ""),
            email=data.get("email") or "",
            user_metadata=dict(data.get("user_metadata") or {}),
        )


def _admin_headers(service_key: str) -> dict:
    return {
        "apikey": service_key,
        "Authorization": f"Bearer {service_key}",
        "Content-Type": "application/json",
    }


def _error_text(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return fallback
    if not isinstance(data, dict):
        return fallback
    return data.get("msg") or data.get("message") or data.get("error_description") or data.get("error") or fallback


async def list_users(
    client: httpx.AsyncClient,
    supabase_url: str,
    service_key: str,
    per_page: int = USERS_PAGE_SIZE,
) -> tuple[list[User] | None, str | None]:
    """Fetch the first page of users from the admin API."""
    try:
        response = await client.get(
            f"{supabase_url}/auth/v1/admin/users",
            params={"page": 1, "per_page": per_page},
            headers=_admin_headers(service_key),
        )
    except httpx.HTTPError as e:
        return None, f"Connection error: {e}"

    if response.status_code != 200:
        return None, _error_text(response, f"HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        return None, f"Invalid response from admin API: {e}"
    users = data.get("users", []) if isinstance(data, dict) else data
    if not isinstance(users, list):
        return None, "Invalid response from admin API: expected a list of users"
    return [User.from_api(u) for u in users if isinstance(u, dict)], None


def find_user_by_email(users: list[User], email: str) -> User | None:
    """Case-insensitive email match."""
    target = email.lower()
    for user in users:
        if user.email and user.email.lower() == target:
            return user
    return None


def merge_role(user_metadata: dict | None, role: str) -> dict:
    """Existing metadata with role set; other keys are preserved."""
    return {**(user_metadata or {}), "role": role}


async def update_user_metadata(
    client: httpx.AsyncClient,
    supabase_url: str,
    service_key: str,
    user_id: str,
    user_metadata: dict,
) -> tuple[User | None, str | None]:
    """Replace a user's user_metadata via the admin API."""
    try:
        response = await client.put(
            f"{supabase_url}/auth/v1/admin/users/{user_id}",
            json={"user_metadata": user_metadata},
            headers=_admin_headers(service_key),
        )
    except httpx.HTTPError as e:
        return None, f"Connection error: {e}"

    if response.status_code != 200:
        return None, _error_text(response, f"HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        return None, f"Invalid response from admin API: {e}"
    if not isinstance(data, dict):
        return None, "Invalid response from admin API: expected a user object"
    user = data["user"] if isinstance(data.get("user"), dict) else data
    return User.from_api(user), None


async def set_user_role(
    client: httpx.AsyncClient,
    supabase_url: str,
    service_key: str,
    email: str,
    role: str,
) -> tuple[User | None, str | None]:
    """
    Set user_metadata.role for the user with this email.

    Only the first page of users is searched (USERS_PAGE_SIZE). A user
    beyond it is reported as not found.
    """
    if not is_valid_role(role):
        return None, f"Invalid role. Allowed roles: {', '.join(repr(r) for r in ALLOWED_ROLES)}"

    users, error = await list_users(client, supabase_url, service_key)
    if error:
        return None, f"Failed to list users: {error}"

    user = find_user_by_email(users, email)
    if user is None:
        return None, f"User not found for email: {email}"

    _, error = await update_user_metadata(
        client, supabase_url, service_key, user.id, merge_role(user.user_metadata, role)
    )
    if error:
        return None, f"Failed to update user: {error}"

    logger.info(f"Set role '{role}' for user {user.id}")
    return user, None
