"""
Asset Pydantic schemas.

Defines request and response models for asset tracking.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from asset_tracking.app.domain.tracking.filters import MIN_EPOCH_SECONDS, MAX_EPOCH_SECONDS


class Coordinates(BaseModel):
    """A latitude/longitude pair."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationDataIn(BaseModel):
    """Schema for reporting a GPS location."""
    location: Coordinates
    timestamp: int = Field(..., ge=MIN_EPOCH_SECONDS, le=MAX_EPOCH_SECONDS, description="Time the location was recorded, in epoch seconds")


class AssetCreate(BaseModel):
    """Schema for creating a new asset with its initial location."""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=1024)
    asset_type: str = Field(..., min_length=1, max_length=50, description="Asset type (e.g., TRUCK, SALESPERSON)")
    location_data: LocationDataIn


class AssetCreatedResponse(BaseModel):
    """Response after creating an asset."""
    id: int


class AssetResponse(BaseModel):
    """Schema for asset response."""
    id: int
    asset_type: str
    title: Optional[str]
    description: Optional[str]
    latitude: float
    longitude: float
    last_reported_at: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LocationDataResponse(BaseModel):
    """GPS history entry response."""
    id: int
    asset_id: int
    latitude: float
    longitude: float
    timestamp: datetime
    reported_at: datetime

    class Config:
        from_attributes = True


class AssetHistoryResponse(BaseModel):
    """An asset with its recent history and the centroid of that history."""
    asset: AssetResponse
    history: List[LocationDataResponse]
    centroid: Coordinates


class AssetDataResponse(BaseModel):
    """Filtered assets and the centroid of their positions."""
    centroid: Coordinates
    assets: List[AssetResponse]


class ExportRecord(BaseModel):
    """Flat asset and location row for bulk export. All fields empty by default."""
    asset_id: Optional[int] = None
    asset_type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timestamp: Optional[datetime] = None
