from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for relationship repair (bypasses RLS)

    # Neynar
    neynar_api_key: Optional[str] = None
    neynar_client_id: Optional[str] = None
    neynar_client_secret: Optional[str] = None
    neynar_api_url: str = "https://api.neynar.com"

    # Farcaster Quick Auth
    quick_auth_domain: str = "localhost"
    quick_auth_issuer: str = "https://auth.farcaster.xyz"
    quick_auth_jwks_url: str = "https://auth.farcaster.xyz/.well-known/jwks.json"

    # Sessions
    session_secret: str = "dev-session-secret-change-me-0123456789"
    session_ttl_seconds: int = 24 * 60 * 60

    # Admin endpoints are disabled while this is unset
    admin_api_key: Optional[str] = None

    # App
    app_name: str = "places-backend"
    app_url: str = "http://localhost:3000"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True
    http_timeout_seconds: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def neynar_redirect_uri(self) -> str:
        return f"{self.app_url.rstrip('/')}/auth/neynar/callback"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
