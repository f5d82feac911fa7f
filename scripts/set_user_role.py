#!/usr/bin/env python3
"""
Set a Supabase user's role (stored in user_metadata.role) by email.

Requires:
    SUPABASE_URL=<your-supabase-project-url>
    SUPABASE_SERVICE_ROLE_KEY=<your-service-role-key>
(either exported or in a .env file in the project root)

Usage:
    python scripts/set_user_role.py <email> <role>
    python scripts/set_user_role.py writer@example.com writer

Roles: 'admin', 'writer'

Only the first 200 users are searched; a user beyond that page is reported
as not found.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

import httpx

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from app.auth import ALLOWED_ROLES, is_valid_role, set_user_role
from core.config import LOG_LEVEL

USAGE = "Usage: python scripts/set_user_role.py <email> <role>"


def load_env_file(env_path: Path) -> None:
    """Load KEY=value lines from .env without overriding the real environment."""
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key not in os.environ:
                os.environ[key] = value


def exit_with(message: str, code: int = 1):
    print(message, file=sys.stderr)
    sys.exit(code)


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=30)


async def run(email: str, role: str, supabase_url: str, service_key: str):
    async with make_client() as client:
        return await set_user_role(client, supabase_url, service_key, email, role)


def main(argv: list[str] | None = None):
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2 or not all(args):
        exit_with(USAGE)
    email, role = args

    if not is_valid_role(role):
        exit_with(f"Invalid role. Allowed roles: {', '.join(repr(r) for r in ALLOWED_ROLES)}")

    load_env_file(project_root / ".env")
    supabase_url = os.environ.get("SUPABASE_URL", "").rstrip("/")
    service_key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
    if not supabase_url or not service_key:
        exit_with("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY env vars.")

    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format="%(levelname)s: %(message)s")
    try:
        user, error = asyncio.run(run(email, role, supabase_url, service_key))
    except Exception as e:
        exit_with(f"Unexpected error: {e}")
    if error:
        exit_with(error)

    print(f"Success: Set role='{role}' for {email} (id: {user.id})")


if __name__ == "__main__":
    main()
