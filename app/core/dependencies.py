"""
Core dependencies for route protection and collaborator wiring
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from app.config import settings
from app.core.exceptions import PermissionDeniedError
from app.database.supabase_client import get_service_supabase
from app.modules.auth.neynar_client import NeynarClient
from app.modules.auth.quick_auth import QuickAuthVerifier
from app.modules.auth.service import AuthService
from app.modules.users.schemas import UserResponse

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_neynar_client() -> NeynarClient:
    return NeynarClient(
        api_key=settings.neynar_api_key,
        client_id=settings.neynar_client_id,
        client_secret=settings.neynar_client_secret,
        redirect_uri=settings.neynar_redirect_uri,
        base_url=settings.neynar_api_url,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache
def get_quick_auth_verifier() -> QuickAuthVerifier:
    """Process-wide verifier so the JWKS is fetched once."""
    return QuickAuthVerifier(
        domain=settings.quick_auth_domain,
        issuer=settings.quick_auth_issuer,
        jwks_url=settings.quick_auth_jwks_url,
    )


def get_auth_service(
    supabase: Client = Depends(get_service_supabase),
    neynar: NeynarClient = Depends(get_neynar_client),
    quick_auth: QuickAuthVerifier = Depends(get_quick_auth_verifier),
) -> AuthService:
    return AuthService(supabase, neynar=neynar, quick_auth=quick_auth)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> UserResponse:
    """Resolve the bearer session token to the signed-in user"""
    return auth_service.get_current_user(credentials.credentials)


def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[UserResponse]:
    """Same as get_current_user, but anonymous requests resolve to None"""
    if credentials is None:
        return None
    return auth_service.get_current_user(credentials.credentials)


def require_admin_key(x_admin_key: Optional[str] = Header(default=None)) -> None:
    """Admin endpoints are enabled only when ADMIN_API_KEY is configured"""
    if not settings.admin_api_key:
        raise PermissionDeniedError("Admin endpoints are disabled")
    if x_admin_key != settings.admin_api_key:
        raise PermissionDeniedError("Invalid admin key")
