import logging
from typing import Optional

from supabase import Client

from app.config.settings import settings
from app.core.exceptions import AuthError, NotFoundError, UpstreamError
from app.modules.auth.neynar_client import NeynarClient
from app.modules.auth.quick_auth import QuickAuthVerifier
from app.modules.auth.schemas import FarcasterIdentity, RegisterRequest, SessionResponse
from app.modules.auth.tokens import decode_session_token, issue_session_token
from app.modules.users.schemas import UserProfile, UserResponse
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        supabase: Client,
        neynar: Optional[NeynarClient] = None,
        quick_auth: Optional[QuickAuthVerifier] = None,
    ):
        self.supabase = supabase
        self.users = UserService(supabase)
        self.neynar = neynar
        self.quick_auth = quick_auth

    def register(self, register_data: RegisterRequest) -> UserResponse:
        """Create or refresh the local user for a Farcaster FID"""
        return self.users.reconcile(
            register_data.farcaster_id,
            UserProfile(
                handle=register_data.farcaster_username,
                display_name=register_data.farcaster_display_name,
                avatar_url=register_data.farcaster_pfp_url,
            ),
        )

    def _reconcile_identity(self, identity: FarcasterIdentity) -> SessionResponse:
        user = self.users.reconcile(
            identity.fid,
            UserProfile(
                handle=identity.username,
                display_name=identity.display_name,
                avatar_url=identity.pfp_url,
            ),
        )
        logger.info("User %s signed in with farcaster_id=%s", user.id, user.farcaster_id)
        return self.issue_session(user)

    def issue_session(self, user: UserResponse) -> SessionResponse:
        token = issue_session_token(
            user.id, user.farcaster_id, settings.session_secret, settings.session_ttl_seconds
        )
        return SessionResponse(user=user, session_token=token)

    def sign_in_with_quick_auth(self, token: str) -> SessionResponse:
        """Verify a Quick Auth JWT from a Farcaster mini app, then register the user"""
        if self.quick_auth is None:
            raise AuthError("Quick Auth is not configured")
        fid = self.quick_auth.verify(token)
        if self.neynar is None or not self.neynar.configured:
            # No profile source; existing profiles are left as they are
            user = self.users.reconcile(fid)
            logger.info("User %s signed in with farcaster_id=%s (no profile refresh)", user.id, user.farcaster_id)
            return self.issue_session(user)
        identity = self.neynar.fetch_user(fid)
        if identity is None:
            raise NotFoundError("User not found on Farcaster")
        return self._reconcile_identity(identity)

    def sign_in_with_neynar(self, code: str) -> SessionResponse:
        """Exchange a Neynar authorization code, then register the user"""
        if self.neynar is None:
            raise AuthError("Neynar sign-in is not configured")
        token_data = self.neynar.exchange_code(code)
        access_token = token_data.get("access_token")
        if not access_token:
            raise UpstreamError("Neynar did not return an access token")
        identity = self.neynar.fetch_me(access_token)
        return self._reconcile_identity(identity)

    def get_current_user(self, token: str) -> UserResponse:
        """Resolve a session token to its user; the user must still exist with the same FID"""
        claims = decode_session_token(token, settings.session_secret)
        try:
            user = self.users.get_user_by_id(claims["sub"])
        except NotFoundError:
            raise AuthError("Invalid token or user not found")
        if user.farcaster_id != str(claims["fid"]):
            raise AuthError("Invalid token or user not found")
        return user
