from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserService
from supabase import Client

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=UserResponse)
async def get_user_by_fid(
    fid: str,
    service: UserService = Depends(get_user_service)
):
    """Look up a user by Farcaster FID"""
    return service.get_user_by_farcaster_id(fid)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service)
):
    """Get user by ID"""
    return service.get_user_by_id(user_id)
