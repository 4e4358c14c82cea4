import logging
from typing import Any, Dict, Optional

import httpx

from app.core.exceptions import AppError, UpstreamError
from app.modules.auth.schemas import FarcasterIdentity

logger = logging.getLogger(__name__)


class NeynarClient:
    """Thin client for the Neynar endpoints used during sign-in."""

    def __init__(
        self,
        api_key: Optional[str],
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        base_url: str = "https://api.neynar.com",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.Client:
        if not self.api_key:
            raise AppError("NEYNAR_API_KEY is not configured")
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={"x-api-key": self.api_key},
        )

    def _request(self, method: str, path: str, what: str, **kwargs) -> Dict[str, Any]:
        with self._client() as client:
            try:
                response = client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                logger.error("Neynar %s request failed: %s", what, e)
                raise UpstreamError(f"Failed to {what}: {e}")
        if response.status_code >= 400:
            logger.error("Neynar %s error: %s %s", what, response.status_code, response.text)
            raise UpstreamError(f"Failed to {what}: {response.status_code}", response.status_code)
        return response.json()

    def exchange_code(self, code: str) -> Dict[str, Any]:
        """Exchange an OAuth authorization code for an access token"""
        if not self.client_id or not self.client_secret:
            raise AppError("NEYNAR_CLIENT_ID and NEYNAR_CLIENT_SECRET must be configured")
        return self._request(
            "POST",
            "/v2/farcaster/login/token",
            "exchange code for token",
            json={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
            },
        )

    def fetch_me(self, access_token: str) -> FarcasterIdentity:
        data = self._request(
            "GET",
            "/v2/farcaster/user/me",
            "fetch user data",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return self.to_identity(data.get("user") or data)

    def fetch_user(self, fid: str) -> Optional[FarcasterIdentity]:
        data = self._request(
            "GET",
            "/v2/farcaster/user/bulk",
            "fetch user profile",
            params={"fids": str(fid)},
        )
        users = data.get("users") or []
        if not users:
            return None
        return self.to_identity(users[0])

    @staticmethod
    def to_identity(user: Dict[str, Any]) -> FarcasterIdentity:
        if user.get("fid") is None:
            raise UpstreamError("Neynar response did not include a FID")
        return FarcasterIdentity(
            fid=str(user["fid"]),
            username=user.get("username"),
            display_name=user.get("display_name"),
            pfp_url=user.get("pfp_url"),
        )
