"""
User identity persistence.

Two identity shapes exist:

1. GoogleUser (table google_users) - the active path. Upserted on every
   OAuth login: the first login inserts the row with created_at/updated_at;
   later logins refresh the token fields and updated_at while the provider
   subject id stays the primary key.

2. LegacyUser - numeric id / username / password records kept only for
   interface compatibility. They live in a process-scoped LegacyUserStore
   that starts empty and is never persisted; nothing in the OAuth flow
   reads or writes it.
"""

import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional, cast

from supabase import Client

from backend.config import settings
from backend.schemas.auth import GoogleUser, LegacyUser, LegacyUserCreate

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# --- Google OAuth identities ---

async def get_google_user_by_id(
    supabase_client: Client,
    user_id: str,
) -> Optional[GoogleUser]:
    """Fetch a Google identity by provider subject id."""
    result = (
        supabase_client.table(settings.GOOGLE_USERS_TABLE)
        .select("*")
        .eq("id", user_id)
        .limit(1)
        .execute()
    )

    if not result.data:
        return None

    return GoogleUser.model_validate(cast(Dict[str, Any], result.data[0]))


async def get_google_user_by_email(
    supabase_client: Client,
    email: str,
) -> Optional[GoogleUser]:
    """Fetch a Google identity by email address."""
    result = (
        supabase_client.table(settings.GOOGLE_USERS_TABLE)
        .select("*")
        .eq("email", email)
        .limit(1)
        .execute()
    )

    if not result.data:
        return None

    return GoogleUser.model_validate(cast(Dict[str, Any], result.data[0]))


async def update_google_user(
    supabase_client: Client,
    user_id: str,
    changes: Dict[str, Any],
) -> Optional[GoogleUser]:
    """
    Update fields of an existing Google identity.

    updated_at is always refreshed. The id is never changed.

    Returns:
        The updated identity, or None if no row has this id
    """
    update_data = {k: v for k, v in changes.items() if k != "id"}
    update_data["updated_at"] = _utc_now()

    result = (
        supabase_client.table(settings.GOOGLE_USERS_TABLE)
        .update(update_data)
        .eq("id", user_id)
        .execute()
    )

    if not result.data:
        return None

    return GoogleUser.model_validate(cast(Dict[str, Any], result.data[0]))


async def upsert_google_user(
    supabase_client: Client,
    user: GoogleUser,
) -> GoogleUser:
    """
    Record a successful OAuth login.

    - New user: insert with created_at and updated_at set to now
    - Existing user: refresh access_token, token_expiry and profile fields;
      keep the stored refresh_token when the provider did not send one

    Args:
        supabase_client: Supabase client
        user: Identity built from the provider's profile and tokens

    Returns:
        The stored identity
    """
    existing = await get_google_user_by_id(supabase_client, user.id)

    if existing is None:
        now = _utc_now()
        new_user = user.model_copy(update={"created_at": now, "updated_at": now})

        logger.info(f"Creating Google user {user.id}")

        result = (
            supabase_client.table(settings.GOOGLE_USERS_TABLE)
            .insert(new_user.model_dump())
            .execute()
        )

        if not result.data:
            raise Exception("Failed to create Google user: no data returned")

        return GoogleUser.model_validate(cast(Dict[str, Any], result.data[0]))

    logger.info(f"Refreshing tokens for Google user {user.id}")

    changes = {
        "email": user.email or existing.email,
        "display_name": user.display_name or existing.display_name,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
        "access_token": user.access_token,
        "refresh_token": user.refresh_token or existing.refresh_token,
        "token_expiry": user.token_expiry,
    }

    updated = await update_google_user(supabase_client, user.id, changes)

    if updated is None:
        # Row vanished between read and write; report what we tried to store
        return existing.model_copy(update=changes)

    return updated


# --- Legacy identities ---

class LegacyUserStore:
    """
    In-memory numeric-id user registry.

    Process-scoped: created empty at import, lost on restart, not shared
    between worker processes.
    """

    def __init__(self) -> None:
        self._users: Dict[int, LegacyUser] = {}
        self._next_id = 1
        self._lock = Lock()

    def get_user(self, user_id: int) -> Optional[LegacyUser]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[LegacyUser]:
        return next(
            (user for user in self._users.values() if user.username == username),
            None,
        )

    def create_user(self, data: LegacyUserCreate) -> LegacyUser:
        with self._lock:
            user = LegacyUser(id=self._next_id, **data.model_dump())
            self._users[user.id] = user
            self._next_id += 1
        return user

    def clear(self) -> None:
        with self._lock:
            self._users.clear()
            self._next_id = 1


legacy_users = LegacyUserStore()
