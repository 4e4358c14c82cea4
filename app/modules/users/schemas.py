from pydantic import BaseModel, field_validator
from typing import Optional, Union
from datetime import datetime


class UserProfile(BaseModel):
    """Profile fields supplied by the identity provider."""
    handle: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    farcaster_id: str
    farcaster_username: Optional[str] = ""
    farcaster_display_name: Optional[str] = ""
    farcaster_pfp_url: Optional[str] = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("farcaster_id", mode="before")
    @classmethod
    def fid_as_text(cls, v: Union[int, str]) -> str:
        return str(v)

    class Config:
        from_attributes = True
