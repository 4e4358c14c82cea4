from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class Coordinates(BaseModel):
    lat: float
    lng: float


class PlaceCreate(BaseModel):
    id: Optional[str] = None
    name: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    address: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = None
    image_url: Optional[str] = None
    created_by: Optional[str] = None
    list_id: Optional[str] = None  # also add the new place to this list


class PlaceUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    type: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = None
    image_url: Optional[str] = None


class PlaceFilters(BaseModel):
    owner_id: Optional[str] = None
    name_contains: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius_km: Optional[float] = None

    @property
    def has_bounding_box(self) -> bool:
        return self.lat is not None and self.lng is not None and self.radius_km is not None


class PlaceResponse(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    type: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = None
    image_url: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
