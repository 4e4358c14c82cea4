import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from supabase import Client

from app.core.exceptions import NotFoundError, StorageError, ValidationError
from app.modules.list_places.service import ListPlaceService
from app.modules.lists.schemas import (
    ListCreate, ListUpdate, ListResponse, ListPlaceEntry, ListWithPlacesResponse
)
from app.modules.places.service import place_from_row
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)

PUBLIC_COMMUNITY = "public-community"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ListService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.memberships = ListPlaceService(supabase)

    def create_list(self, list_data: ListCreate, owner_id: Optional[str]) -> ListResponse:
        """Create a new list for an existing user"""
        title = (list_data.title or "").strip()
        if not title or not owner_id:
            raise ValidationError("Title and ownerId are required")
        # Best-effort: the owner could still be deleted before the insert lands
        try:
            UserService(self.supabase).get_user_by_id(owner_id)
        except NotFoundError:
            raise NotFoundError("Owner not found")

        now = _now()
        try:
            result = self.supabase.table("lists").insert({
                "id": str(uuid.uuid4()),
                "title": title,
                "description": list_data.description,
                "visibility": list_data.visibility.value,
                "owner_id": owner_id,
                "cover_image_url": list_data.cover_image_url,
                "created_at": now,
                "updated_at": now,
            }).execute()
        except Exception as e:
            raise StorageError(f"Failed to create list: {e}") from e
        if not result.data:
            raise StorageError("Failed to create list")
        return ListResponse(**result.data[0])

    def get_list(self, list_id: str) -> ListResponse:
        try:
            result = self.supabase.table("lists")\
                .select("*")\
                .eq("id", list_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch list: {e}") from e
        if not result.data:
            raise NotFoundError("List not found")
        return ListResponse(**result.data[0])

    def get_list_with_places(self, list_id: str) -> ListWithPlacesResponse:
        """Get a list together with its places and per-membership notes"""
        list_ = self.get_list(list_id)
        memberships = self.memberships.memberships_for_list(list_id)
        places_by_id = {}
        if memberships:
            place_ids = list({m.place_id for m in memberships})
            try:
                result = self.supabase.table("places")\
                    .select("*")\
                    .in_("id", place_ids)\
                    .execute()
            except Exception as e:
                raise StorageError(f"Failed to fetch list places: {e}") from e
            places_by_id = {str(row["id"]): row for row in result.data or []}

        entries = []
        for membership in memberships:
            row = places_by_id.get(membership.place_id)
            if row is None:
                logger.warning("List %s references missing place %s", list_id, membership.place_id)
                continue
            entries.append(ListPlaceEntry(
                **place_from_row(row).model_dump(),
                list_place_id=membership.id,
                note=membership.note,
                photo_url=membership.photo_url,
                added_by=membership.added_by,
                added_at=membership.added_at,
            ))
        return ListWithPlacesResponse(**list_.model_dump(), places=entries)

    def list_lists(
        self,
        owner_id: Optional[str] = None,
        fid: Optional[str] = None,
        visibility: Optional[str] = None,
    ) -> List[ListResponse]:
        """List lists by owner (user id or FID) and visibility ('public-community' matches both)"""
        if fid and not owner_id:
            user = UserService(self.supabase).find_by_farcaster_id(str(fid))
            if user is None:
                return []
            owner_id = user.id

        query = self.supabase.table("lists").select("*")
        if owner_id:
            query = query.eq("owner_id", owner_id)
        if visibility:
            if visibility == PUBLIC_COMMUNITY:
                query = query.in_("visibility", ["public", "community"])
            elif visibility in ("private", "public", "community"):
                query = query.eq("visibility", visibility)
            else:
                raise ValidationError(f"Unknown visibility: {visibility}")
        try:
            result = query.order("created_at", desc=True).execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch lists: {e}") from e
        return [ListResponse(**row) for row in result.data or []]

    def update_list(self, list_id: str, list_data: ListUpdate) -> ListResponse:
        update_data = list_data.model_dump(exclude_unset=True)
        if not update_data:
            raise ValidationError("No update data provided")
        if "title" in update_data:
            if not (update_data["title"] or "").strip():
                raise ValidationError("Title cannot be empty")
            update_data["title"] = update_data["title"].strip()
        if "visibility" in update_data:
            if update_data["visibility"] is None:
                raise ValidationError("Visibility cannot be empty")
            update_data["visibility"] = update_data["visibility"].value
        update_data["updated_at"] = _now()

        try:
            result = self.supabase.table("lists")\
                .update(update_data)\
                .eq("id", list_id)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to update list: {e}") from e
        if not result.data:
            raise NotFoundError("List not found")
        return ListResponse(**result.data[0])

    def delete_list(self, list_id: str) -> bool:
        """Delete a list and its memberships. Not atomic: memberships go first."""
        try:
            self.supabase.table("list_places")\
                .delete()\
                .eq("list_id", list_id)\
                .execute()
            result = self.supabase.table("lists")\
                .delete()\
                .eq("id", list_id)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to delete list: {e}") from e
        return len(result.data or []) > 0
