"""Roblox public API endpoints.

These helpers live in adapters because they are pure I/O knowledge: where each
metric lives and how its payload is shaped. Services only see request keys and
parsed values.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from core.config import AppSettings
from core.domain.errors import UpstreamError
from core.domain.models import RequestKey, Subject

_DATETIME = TypeAdapter(datetime)


def username_lookup_url(settings: AppSettings) -> str:
    # Batch-capable endpoint; exact match only (no fuzzy search).
    return f"{settings.users_api_url.rstrip('/')}/v1/usernames/users"


def user_details_key(settings: AppSettings, user_id: int) -> RequestKey:
    return RequestKey(url=f"{settings.users_api_url.rstrip('/')}/v1/users/{user_id}")


def friends_key(settings: AppSettings, user_id: int) -> RequestKey:
    return RequestKey(url=f"{settings.friends_api_url.rstrip('/')}/v1/users/{user_id}/friends")


def groups_key(settings: AppSettings, user_id: int) -> RequestKey:
    return RequestKey(url=f"{settings.groups_api_url.rstrip('/')}/v1/users/{user_id}/groups/roles")


def parse_user_details(key: RequestKey, payload: Any) -> tuple[Subject, datetime]:
    """Extract the subject and its creation timestamp from `/v1/users/{id}`."""

    if not isinstance(payload, dict):
        raise UpstreamError(key, detail="user details payload is not an object")

    user_id = payload.get("id")
    name = payload.get("name")
    created = payload.get("created")
    if not isinstance(user_id, int) or not isinstance(name, str) or not name:
        raise UpstreamError(key, detail="user details payload lacks id/name")
    if not isinstance(created, str):
        raise UpstreamError(key, detail="user details payload lacks a creation date")

    try:
        # Fraction precision varies (".3Z", ".503Z"); pydantic parses all of them.
        created_at = _DATETIME.validate_python(created)
    except ValidationError as exc:
        raise UpstreamError(key, detail=f"unparseable creation date {created!r}") from exc
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    display_name = payload.get("displayName")
    if not isinstance(display_name, str) or not display_name:
        display_name = name

    return Subject(id=user_id, name=name, display_name=display_name), created_at


def count_entries(key: RequestKey, payload: Any) -> int:
    """Length of the `data` array of a list endpoint (friends, group roles)."""

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise UpstreamError(key, detail="payload lacks a 'data' list")
    return len(data)
