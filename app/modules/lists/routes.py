from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.lists.schemas import ListCreate, ListUpdate, ListResponse, ListWithPlacesResponse
from app.modules.lists.service import ListService
from app.modules.lists.permissions import can_edit, can_view
from app.modules.users.schemas import UserResponse
from app.core.dependencies import get_current_user, get_optional_current_user
from app.core.exceptions import NotFoundError, PermissionDeniedError
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/lists", tags=["lists"])


def get_list_service(supabase: Client = Depends(get_supabase)) -> ListService:
    return ListService(supabase)


@router.post("", response_model=ListResponse, status_code=201)
async def create_list(
    list_data: ListCreate,
    current_user: Optional[UserResponse] = Depends(get_optional_current_user),
    service: ListService = Depends(get_list_service)
):
    """Create a new list (owner defaults to the signed-in user)"""
    owner_id = list_data.owner_id or (current_user.id if current_user else None)
    return service.create_list(list_data, owner_id)


@router.get("", response_model=List[ListResponse])
async def list_lists(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    fid: Optional[str] = None,
    visibility: Optional[str] = None,
    current_user: Optional[UserResponse] = Depends(get_optional_current_user),
    service: ListService = Depends(get_list_service)
):
    """List lists visible to the caller, filtered by owner and visibility"""
    lists = service.list_lists(owner_id=user_id, fid=fid, visibility=visibility)
    return [list_ for list_ in lists if can_view(current_user, list_)]


@router.get("/{list_id}", response_model=ListWithPlacesResponse)
async def get_list(
    list_id: str,
    current_user: Optional[UserResponse] = Depends(get_optional_current_user),
    service: ListService = Depends(get_list_service)
):
    """Get a list with its places"""
    list_ = service.get_list_with_places(list_id)
    if not can_view(current_user, list_):
        raise NotFoundError("List not found")
    return list_


@router.patch("/{list_id}", response_model=ListResponse)
async def update_list(
    list_id: str,
    list_data: ListUpdate,
    current_user: UserResponse = Depends(get_current_user),
    service: ListService = Depends(get_list_service)
):
    """Update a list (owner only)"""
    if not can_edit(current_user, service.get_list(list_id)):
        raise PermissionDeniedError("You don't have permission to modify this list")
    return service.update_list(list_id, list_data)


@router.delete("/{list_id}")
async def delete_list(
    list_id: str,
    current_user: UserResponse = Depends(get_current_user),
    service: ListService = Depends(get_list_service)
):
    """Delete a list and its memberships (owner only)"""
    if not can_edit(current_user, service.get_list(list_id)):
        raise PermissionDeniedError("You don't have permission to delete this list")
    service.delete_list(list_id)
    return {"success": True, "message": "List deleted successfully"}
