import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from supabase import Client

from app.core.exceptions import AppError, NotFoundError, StorageError, ValidationError
from app.modules.list_places.service import ListPlaceService
from app.modules.places.geo import bounding_box, coerce_coordinates
from app.modules.places.schemas import Coordinates, PlaceCreate, PlaceFilters, PlaceResponse, PlaceUpdate

logger = logging.getLogger(__name__)

# Columns that may not be cleared through a partial update
_NOT_NULL_FIELDS = {"name", "lat", "lng"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally"""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def place_from_row(row: Dict[str, Any]) -> PlaceResponse:
    """Build the API shape of a place row; unusable coordinates become None."""
    coords = coerce_coordinates(row.get("lat"), row.get("lng"))
    return PlaceResponse(
        id=str(row["id"]),
        name=row.get("name") or "",
        address=row.get("address"),
        coordinates=Coordinates(lat=coords[0], lng=coords[1]) if coords else None,
        type=row.get("type"),
        description=row.get("description"),
        website_url=row.get("website_url"),
        image_url=row.get("image_url"),
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class PlaceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_place(self, place_data: PlaceCreate) -> PlaceResponse:
        """Create a new place, optionally attaching it to a list"""
        name = (place_data.name or "").strip()
        if not name:
            raise ValidationError("Name, lat, and lng are required")
        now = _now()
        row = {
            "id": place_data.id or str(uuid.uuid4()),
            "name": name,
            "address": place_data.address,
            "lat": place_data.lat,
            "lng": place_data.lng,
            "type": place_data.type,
            "description": place_data.description,
            "website_url": place_data.website_url,
            "image_url": place_data.image_url,
            "created_by": place_data.created_by,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table("places").insert(row).execute()
        except Exception as e:
            raise StorageError(f"Failed to create place: {e}") from e
        if not result.data:
            raise StorageError("Failed to create place")
        place = place_from_row(result.data[0])

        if place_data.list_id:
            try:
                ListPlaceService(self.supabase).add_place_to_list(
                    place_data.list_id, place.id, added_by=place_data.created_by
                )
            except AppError as e:
                # The place itself was created, so this is not fatal
                logger.error("Error adding place %s to list %s: %s", place.id, place_data.list_id, e.message)
        return place

    def get_place(self, place_id: str) -> PlaceResponse:
        """Get place by ID"""
        try:
            result = self.supabase.table("places")\
                .select("*")\
                .eq("id", place_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch place: {e}") from e
        if not result.data:
            raise NotFoundError("Place not found")
        return place_from_row(result.data[0])

    def update_place(self, place_id: str, place_data: PlaceUpdate) -> PlaceResponse:
        """Update only the supplied fields of a place"""
        update_data = {
            key: value
            for key, value in place_data.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NOT_NULL_FIELDS
        }
        if not update_data:
            raise ValidationError("No update data provided")
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
            if not update_data["name"]:
                raise ValidationError("Name cannot be empty")
        update_data["updated_at"] = _now()

        try:
            result = self.supabase.table("places")\
                .update(update_data)\
                .eq("id", place_id)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to update place: {e}") from e
        if not result.data:
            raise NotFoundError("Place not found")
        return place_from_row(result.data[0])

    def delete_place(self, place_id: str) -> bool:
        """Delete a place. Memberships pointing at it are left for the repair job."""
        try:
            result = self.supabase.table("places")\
                .delete()\
                .eq("id", place_id)\
                .execute()
        except Exception as e:
            raise StorageError(f"Failed to delete place: {e}") from e
        if not result.data:
            raise NotFoundError("Place not found")
        return True

    def list_places(self, filters: PlaceFilters) -> List[PlaceResponse]:
        """
        List places, optionally filtered by creator, name substring and a
        bounding box around (lat, lng).

        The box filter runs in the store and again here after numeric
        coercion; rows whose coordinates are not usable numbers are dropped.
        """
        query = self.supabase.table("places").select("*")
        if filters.owner_id:
            query = query.eq("created_by", filters.owner_id)
        if filters.name_contains:
            query = query.ilike("name", f"%{escape_like(filters.name_contains)}%")

        box = None
        if filters.has_bounding_box:
            if filters.radius_km < 0:
                raise ValidationError("radius must not be negative")
            if coerce_coordinates(filters.lat, filters.lng) is None:
                raise ValidationError("lat must be in [-90, 90] and lng in [-180, 180]")
            box = bounding_box(filters.lat, filters.lng, filters.radius_km)
            query = query\
                .gte("lat", box.min_lat)\
                .lte("lat", box.max_lat)\
                .gte("lng", box.min_lng)\
                .lte("lng", box.max_lng)

        try:
            result = query.order("created_at", desc=True).execute()
        except Exception as e:
            raise StorageError(f"Failed to fetch places: {e}") from e

        places = []
        for row in result.data or []:
            coords = coerce_coordinates(row.get("lat"), row.get("lng"))
            if coords is None:
                logger.warning("Dropping place %s with unusable coordinates (%r, %r)",
                               row.get("id"), row.get("lat"), row.get("lng"))
                continue
            if box is not None and not box.contains(*coords):
                continue
            places.append(place_from_row(row))
        return places
