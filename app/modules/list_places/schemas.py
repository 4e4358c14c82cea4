from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ListPlaceCreate(BaseModel):
    list_id: Optional[str] = Field(default=None, alias="listId")
    place_id: Optional[str] = Field(default=None, alias="placeId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    note: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")

    class Config:
        populate_by_name = True


class ListPlaceUpdate(BaseModel):
    note: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")

    class Config:
        populate_by_name = True


class ListPlaceResponse(BaseModel):
    id: str
    list_id: str
    place_id: str
    added_by: Optional[str] = None
    note: Optional[str] = None
    photo_url: Optional[str] = None
    added_at: Optional[datetime] = None

    class Config:
        from_attributes = True
