from fastapi import APIRouter, Depends
from app.modules.auth.schemas import (
    RegisterRequest, TokenRequest, NeynarVerifyRequest,
    SessionResponse, VerifyTokenResponse
)
from app.modules.auth.service import AuthService
from app.modules.users.schemas import UserResponse
from app.core.dependencies import get_auth_service, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create or update the user for a Farcaster FID"""
    return service.register(register_data)


@router.post("/verify-token", response_model=VerifyTokenResponse)
async def verify_token(
    request: TokenRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Check a session token and return its user"""
    return VerifyTokenResponse(user=service.get_current_user(request.token))


@router.post("/farcaster-miniapp", response_model=SessionResponse)
async def farcaster_miniapp(
    request: TokenRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in with a Farcaster Quick Auth token"""
    return service.sign_in_with_quick_auth(request.token)


@router.post("/neynar/verify", response_model=SessionResponse)
async def neynar_verify(
    request: NeynarVerifyRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in with a Neynar authorization code"""
    return service.sign_in_with_neynar(request.code)


@router.get("/me", response_model=UserResponse)
async def me(current_user: UserResponse = Depends(get_current_user)):
    """Get the signed-in user"""
    return current_user
