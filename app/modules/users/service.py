import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from supabase import Client

from app.core.exceptions import NotFoundError, StorageError, ValidationError, is_unique_violation
from app.modules.users.schemas import UserProfile, UserResponse

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user by local ID"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch user: {e}") from e
        if not result.data:
            raise NotFoundError("User not found")
        return UserResponse(**result.data[0])

    def find_by_farcaster_id(self, farcaster_id: str) -> Optional[UserResponse]:
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("farcaster_id", farcaster_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StorageError(f"Error checking for existing user: {e}") from e
        if not result.data:
            return None
        return UserResponse(**result.data[0])

    def get_user_by_farcaster_id(self, farcaster_id: str) -> UserResponse:
        user = self.find_by_farcaster_id(str(farcaster_id))
        if user is None:
            raise NotFoundError("User not found")
        return user

    def reconcile(self, external_id: str, profile: Optional[UserProfile] = None) -> UserResponse:
        """
        Map a verified Farcaster FID to exactly one local user.

        Existing users get their profile fields refreshed; unknown FIDs get a new
        row with a generated id. Calling this twice with the same FID never
        creates a second user.

        Without a profile (no profile source available) an existing user is
        returned untouched instead of having its profile blanked.
        """
        external_id = str(external_id).strip() if external_id is not None else ""
        if not external_id:
            raise ValidationError("Missing required field: farcaster_id")
        refresh = profile is not None
        profile = profile or UserProfile()
        fields = {
            "farcaster_username": profile.handle or "",
            "farcaster_display_name": profile.display_name or "",
            "farcaster_pfp_url": profile.avatar_url or "",
        }

        existing = self.find_by_farcaster_id(external_id)
        if existing is not None:
            return self._update_profile(existing.id, fields) if refresh else existing

        now = _now()
        row = {
            "id": str(uuid.uuid4()),
            "farcaster_id": external_id,
            **fields,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table("users").insert(row).execute()
        except Exception as e:
            if is_unique_violation(e):
                # Lost a race with a concurrent first sign-in for the same FID
                logger.warning("Concurrent registration for farcaster_id=%s, updating instead", external_id)
                existing = self.find_by_farcaster_id(external_id)
                if existing is not None:
                    return self._update_profile(existing.id, fields) if refresh else existing
            raise StorageError(f"Failed to create user: {e}") from e
        if not result.data:
            raise StorageError("Failed to create user")
        logger.info("Created user %s for farcaster_id=%s", row["id"], external_id)
        return UserResponse(**result.data[0])

    def _update_profile(self, user_id: str, fields: dict) -> UserResponse:
        try:
            result = self.supabase.table("users")\
                .update({**fields, "updated_at": _now()})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to update user: {e}") from e
        if not result.data:
            raise StorageError("Failed to update user")
        return UserResponse(**result.data[0])
