from pydantic import BaseModel, field_validator
from typing import Optional, Union
from app.modules.users.schemas import UserResponse


class RegisterRequest(BaseModel):
    farcaster_id: Union[str, int]
    farcaster_username: Optional[str] = None
    farcaster_display_name: Optional[str] = None
    farcaster_pfp_url: Optional[str] = None

    @field_validator("farcaster_id", mode="before")
    @classmethod
    def fid_as_text(cls, v):
        return str(v) if isinstance(v, int) else v


class TokenRequest(BaseModel):
    token: str


class NeynarVerifyRequest(BaseModel):
    code: str
    state: Optional[str] = None


class SessionResponse(BaseModel):
    user: UserResponse
    session_token: str
    token_type: str = "bearer"


class VerifyTokenResponse(BaseModel):
    success: bool = True
    user: UserResponse


class FarcasterIdentity(BaseModel):
    """Identity claim extracted from a verified credential."""
    fid: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    pfp_url: Optional[str] = None
