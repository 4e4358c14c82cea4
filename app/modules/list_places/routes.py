import logging
from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.list_places.schemas import ListPlaceCreate, ListPlaceUpdate, ListPlaceResponse
from app.modules.list_places.service import ListPlaceService
from app.modules.lists.permissions import can_add_to, can_change_membership
from app.modules.lists.service import ListService
from app.modules.users.schemas import UserResponse
from app.core.dependencies import get_current_user
from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from supabase import Client
from typing import Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/list-places", tags=["list-places"])


def get_list_place_service(supabase: Client = Depends(get_supabase)) -> ListPlaceService:
    return ListPlaceService(supabase)


@router.post("", response_model=ListPlaceResponse)
async def add_place_to_list(
    data: ListPlaceCreate,
    current_user: UserResponse = Depends(get_current_user),
    service: ListPlaceService = Depends(get_list_place_service),
    supabase: Client = Depends(get_supabase)
):
    """Add a place to a list owned by the caller or open to the community"""
    if not data.list_id or not data.place_id:
        raise ValidationError("List ID and Place ID are required")
    if data.user_id and data.user_id != current_user.id:
        raise PermissionDeniedError("userId does not match the signed-in user")
    list_ = ListService(supabase).get_list(data.list_id)
    if not can_add_to(current_user, list_):
        raise PermissionDeniedError("You don't have permission to modify this list")
    return service.add_place_to_list(
        data.list_id, data.place_id, added_by=current_user.id, note=data.note, photo_url=data.photo_url
    )


@router.patch("/{membership_id}", response_model=ListPlaceResponse)
async def update_list_place(
    membership_id: str,
    data: ListPlaceUpdate,
    current_user: UserResponse = Depends(get_current_user),
    service: ListPlaceService = Depends(get_list_place_service),
    supabase: Client = Depends(get_supabase)
):
    """Update the note or photo attached to a place in a list"""
    memberships = service.find_memberships(membership_id=membership_id)
    if not memberships:
        raise NotFoundError("Place not found in this list")
    list_ = ListService(supabase).get_list(memberships[0].list_id)
    if not can_change_membership(current_user, list_, memberships[0]):
        raise PermissionDeniedError("You can only update places that you added to this list")
    return service.update_membership(membership_id, data)


@router.delete("")
async def remove_place_from_list(
    list_id: Optional[str] = Query(default=None, alias="listId"),
    place_id: Optional[str] = Query(default=None, alias="placeId"),
    membership_id: Optional[str] = Query(default=None, alias="id"),
    current_user: UserResponse = Depends(get_current_user),
    service: ListPlaceService = Depends(get_list_place_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove a place from a list by membership id or by (listId, placeId)"""
    memberships = service.find_memberships(list_id=list_id, place_id=place_id, membership_id=membership_id)
    if not memberships:
        return {"success": True}

    lists = ListService(supabase)
    for membership in memberships:
        try:
            list_ = lists.get_list(membership.list_id)
        except NotFoundError:
            # Orphaned by a deleted list; the prune job owns these rows
            logger.info("Skipping membership %s of missing list %s", membership.id, membership.list_id)
            return {"success": True}
        if not can_change_membership(current_user, list_, membership):
            raise PermissionDeniedError("You can only remove places that you added to this list")

    service.remove_place_from_list(list_id=list_id, place_id=place_id, membership_id=membership_id)
    return {"success": True}
