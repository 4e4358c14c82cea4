from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.places.schemas import PlaceCreate, PlaceUpdate, PlaceFilters, PlaceResponse
from app.modules.places.service import PlaceService
from app.modules.list_places.service import ListPlaceService
from app.modules.lists.schemas import ListResponse
from app.modules.lists.permissions import can_add_to, can_view
from app.modules.lists.service import ListService
from app.modules.users.schemas import UserResponse
from app.core.dependencies import get_optional_current_user
from app.core.exceptions import AuthError, PermissionDeniedError
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/places", tags=["places"])


def get_place_service(supabase: Client = Depends(get_supabase)) -> PlaceService:
    return PlaceService(supabase)


@router.post("", response_model=PlaceResponse, status_code=201)
async def create_place(
    place_data: PlaceCreate,
    current_user: Optional[UserResponse] = Depends(get_optional_current_user),
    service: PlaceService = Depends(get_place_service)
):
    """Create a new place; signed-in callers are recorded as the creator by default"""
    if place_data.created_by is None and current_user is not None:
        place_data.created_by = current_user.id
    if place_data.list_id:
        if current_user is None:
            raise AuthError("Authentication required to add a place to a list")
        if not can_add_to(current_user, ListService(service.supabase).get_list(place_data.list_id)):
            raise PermissionDeniedError("You don't have permission to modify this list")
    return service.create_place(place_data)


@router.get("", response_model=List[PlaceResponse])
async def list_places(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    query: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius: Optional[float] = Query(default=None, description="Search radius in kilometers"),
    service: PlaceService = Depends(get_place_service)
):
    """List places filtered by creator, name and/or distance from (lat, lng)"""
    return service.list_places(PlaceFilters(
        owner_id=user_id,
        name_contains=query,
        lat=lat,
        lng=lng,
        radius_km=radius,
    ))


@router.get("/{place_id}", response_model=PlaceResponse)
async def get_place(
    place_id: str,
    service: PlaceService = Depends(get_place_service)
):
    """Get place by ID"""
    return service.get_place(place_id)


@router.get("/{place_id}/lists", response_model=List[ListResponse])
async def get_lists_for_place(
    place_id: str,
    current_user: Optional[UserResponse] = Depends(get_optional_current_user),
    supabase: Client = Depends(get_supabase)
):
    """Get the lists that contain a place"""
    lists = ListPlaceService(supabase).lists_containing_place(place_id)
    return [list_ for list_ in lists if can_view(current_user, list_)]


@router.patch("/{place_id}", response_model=PlaceResponse)
async def update_place(
    place_id: str,
    place_data: PlaceUpdate,
    service: PlaceService = Depends(get_place_service)
):
    """Partially update a place"""
    return service.update_place(place_id, place_data)


@router.delete("/{place_id}")
async def delete_place(
    place_id: str,
    service: PlaceService = Depends(get_place_service)
):
    """Delete a place"""
    service.delete_place(place_id)
    return {"success": True, "message": "Place deleted successfully"}
