import logging
from typing import Any, Callable, Optional, Sequence

import jwt
from jwt.exceptions import PyJWKClientConnectionError, PyJWKClientError

from app.core.exceptions import AuthError, TokenExpired, TokenMalformed, UpstreamError

logger = logging.getLogger(__name__)

KeyResolver = Callable[[str], Any]


class QuickAuthVerifier:
    """Verifies Farcaster Quick Auth JWTs and extracts the FID (the `sub` claim)."""

    def __init__(
        self,
        domain: str,
        issuer: str,
        jwks_url: str,
        key_resolver: Optional[KeyResolver] = None,
        algorithms: Sequence[str] = ("EdDSA", "ES256", "RS256"),
    ):
        self.domain = domain
        self.issuer = issuer
        self.jwks_url = jwks_url
        self.algorithms = list(algorithms)
        self._key_resolver = key_resolver
        self._jwks_client = None

    def _signing_key(self, token: str) -> Any:
        if self._key_resolver is not None:
            return self._key_resolver(token)
        if self._jwks_client is None:
            self._jwks_client = jwt.PyJWKClient(self.jwks_url)
        return self._jwks_client.get_signing_key_from_jwt(token).key

    def verify(self, token: str) -> str:
        if not token:
            raise TokenMalformed("Token is required")
        try:
            key = self._signing_key(token)
            payload = jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.domain,
                issuer=self.issuer,
                # Quick Auth puts the numeric FID in `sub`
                options={"require": ["sub", "exp"], "verify_sub": False},
            )
        except PyJWKClientConnectionError as e:
            logger.error("Could not fetch Quick Auth JWKS: %s", e)
            raise UpstreamError("Failed to fetch Farcaster signing keys")
        except PyJWKClientError as e:
            raise TokenMalformed(f"Invalid token: {e}")
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Invalid or expired token")
        except jwt.InvalidSignatureError:
            raise AuthError("Invalid token signature")
        except (jwt.InvalidAudienceError, jwt.InvalidIssuerError) as e:
            raise AuthError(f"Token not issued for this app: {e}")
        except jwt.InvalidTokenError as e:
            logger.info("Rejected Quick Auth token: %s", e)
            raise TokenMalformed(f"Invalid token: {e}")

        fid = str(payload.get("sub", "")).strip()
        if not fid:
            raise TokenMalformed("Invalid token: missing FID")
        return fid
