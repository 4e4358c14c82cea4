from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum
from app.modules.places.schemas import PlaceResponse


class Visibility(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"
    COMMUNITY = "community"


class ListCreate(BaseModel):
    title: str
    description: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    cover_image_url: Optional[str] = Field(default=None, alias="coverImageUrl")

    class Config:
        populate_by_name = True


class ListUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    visibility: Optional[Visibility] = None
    cover_image_url: Optional[str] = Field(default=None, alias="coverImageUrl")

    class Config:
        populate_by_name = True


class ListResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE
    owner_id: str
    cover_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ListPlaceEntry(PlaceResponse):
    """A place as it appears inside a list, with the membership's attribution."""
    list_place_id: str
    note: Optional[str] = None
    photo_url: Optional[str] = None
    added_by: Optional[str] = None
    added_at: Optional[datetime] = None


class ListWithPlacesResponse(ListResponse):
    places: List[ListPlaceEntry] = []
