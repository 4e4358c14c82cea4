import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from supabase import Client

from app.core.exceptions import NotFoundError, StorageError, ValidationError
from app.modules.list_places.schemas import ListPlaceResponse, ListPlaceUpdate
from app.modules.lists.schemas import ListResponse

logger = logging.getLogger(__name__)


class ListPlaceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def add_place_to_list(
        self,
        list_id: Optional[str],
        place_id: Optional[str],
        added_by: Optional[str] = None,
        note: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> ListPlaceResponse:
        """Attach a place to a list. Duplicate memberships are not checked for."""
        if not list_id or not place_id:
            raise ValidationError("List ID and Place ID are required")
        try:
            result = self.supabase.table("list_places").insert({
                "id": str(uuid.uuid4()),
                "list_id": list_id,
                "place_id": place_id,
                "added_by": added_by,
                "note": note,
                "photo_url": photo_url,
                "added_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except Exception as e:
            raise StorageError(f"Failed to add place to list: {e}") from e
        if not result.data:
            raise StorageError("Failed to add place to list")
        return ListPlaceResponse(**result.data[0])

    def remove_place_from_list(
        self,
        list_id: Optional[str] = None,
        place_id: Optional[str] = None,
        membership_id: Optional[str] = None,
    ) -> int:
        """
        Remove a membership by its id, or every membership of place_id in list_id.
        Removing something that is not there is not an error; returns rows removed.
        """
        if not membership_id and not (list_id and place_id):
            raise ValidationError("Either id, or listId and placeId, are required")
        query = self.supabase.table("list_places").delete()
        if membership_id:
            query = query.eq("id", membership_id)
        else:
            query = query.eq("list_id", list_id).eq("place_id", place_id)
        try:
            result = query.execute()
        except Exception as e:
            raise StorageError(f"Failed to remove place from list: {e}") from e
        removed = len(result.data or [])
        if not removed:
            logger.info("No membership matched list_id=%s place_id=%s id=%s", list_id, place_id, membership_id)
        return removed

    def find_memberships(
        self,
        list_id: Optional[str] = None,
        place_id: Optional[str] = None,
        membership_id: Optional[str] = None,
    ) -> List[ListPlaceResponse]:
        """Memberships matching the same selector remove_place_from_list takes"""
        query = self.supabase.table("list_places").select("*")
        if membership_id:
            query = query.eq("id", membership_id)
        elif list_id and place_id:
            query = query.eq("list_id", list_id).eq("place_id", place_id)
        else:
            raise ValidationError("Either id, or listId and placeId, are required")
        try:
            result = query.execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch list places: {e}") from e
        return [ListPlaceResponse(**row) for row in result.data or []]

    def update_membership(self, membership_id: str, data: ListPlaceUpdate) -> ListPlaceResponse:
        """Update the note and/or photo of a membership"""
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise ValidationError("No update data provided")
        try:
            result = self.supabase.table("list_places")\
                .update(update_data)\
                .eq("id", membership_id)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to update list place: {e}") from e
        if not result.data:
            raise NotFoundError("Place not found in this list")
        return ListPlaceResponse(**result.data[0])

    def memberships_for_list(self, list_id: str) -> List[ListPlaceResponse]:
        try:
            result = self.supabase.table("list_places")\
                .select("*")\
                .eq("list_id", list_id)\
                .order("added_at")\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch list places: {e}") from e
        return [ListPlaceResponse(**row) for row in result.data or []]

    def lists_containing_place(self, place_id: str) -> List[ListResponse]:
        """Get all lists that contain a place"""
        if not place_id:
            raise ValidationError("Place ID is required")
        try:
            memberships = self.supabase.table("list_places")\
                .select("list_id")\
                .eq("place_id", place_id)\
                .execute()
            if not memberships.data:
                return []
            # A place may be in the same list more than once
            list_ids = list(dict.fromkeys(m["list_id"] for m in memberships.data))
            result = self.supabase.table("lists")\
                .select("*")\
                .in_("id", list_ids)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch lists for place: {e}") from e
        return [ListResponse(**row) for row in result.data or []]
