"""
Asset Tracking API Endpoints.

Asset lookup, history, filtering, export and location reporting.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from asset_tracking.app.db.session import get_db
from asset_tracking.app.core.config import settings
from asset_tracking.app.domain.tracking.filters import MIN_EPOCH_SECONDS, MAX_EPOCH_SECONDS
from asset_tracking.app.schemas.asset import (
    AssetCreate, AssetCreatedResponse, AssetResponse, AssetHistoryResponse,
    AssetDataResponse, LocationDataIn, ExportRecord
)
from asset_tracking.app.services.asset_retrieval import AssetRetrievalService
from asset_tracking.app.services.asset_creation import AssetCreationService
from asset_tracking.app.services.export import export_records_csv

router = APIRouter(prefix="/assets", tags=["Assets"])


@router.get("", response_model=AssetDataResponse)
async def get_assets(
    asset_type: Optional[str] = Query(None, alias="type", description="Asset type, e.g. TRUCK"),
    start_time: Optional[int] = Query(None, ge=MIN_EPOCH_SECONDS, le=MAX_EPOCH_SECONDS, description="Window start in epoch seconds"),
    end_time: Optional[int] = Query(None, ge=MIN_EPOCH_SECONDS, le=MAX_EPOCH_SECONDS, description="Window end in epoch seconds"),
    limit: int = Query(settings.default_result_limit, le=settings.max_result_limit),
    db: AsyncSession = Depends(get_db)
):
    """
    List assets with the centroid of their positions.
    
    The time window only applies when both start_time and end_time are given.
    """
    return await AssetRetrievalService.get_assets_filtered_by(db, asset_type, start_time, end_time, limit)


@router.post("", response_model=AssetCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset_data: AssetCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a new asset with its initial location."""
    asset = await AssetCreationService.create_asset(db, asset_data)
    return AssetCreatedResponse(id=asset.id)


@router.get("/export", response_model=List[ExportRecord])
async def export_assets(db: AsyncSession = Depends(get_db)):
    """Export every location record flattened with its asset."""
    return await AssetRetrievalService.export_data(db)


@router.get("/export/csv", response_class=PlainTextResponse)
async def export_assets_csv(db: AsyncSession = Depends(get_db)):
    """Export every location record flattened with its asset, as CSV."""
    records = await AssetRetrievalService.export_data(db)
    return PlainTextResponse(
        export_records_csv(records),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=assets.csv"}
    )


@router.get("/{asset_id}", response_model=AssetResponse)
async def get_asset(
    asset_id: int = Path(..., description="Asset ID"),
    db: AsyncSession = Depends(get_db)
):
    """Get a single asset by ID."""
    return await AssetRetrievalService.get_asset_for_id(db, asset_id)


@router.get("/{asset_id}/history", response_model=AssetHistoryResponse)
async def get_asset_history(
    asset_id: int = Path(..., description="Asset ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get an asset's location history for the trailing window (24h by default).
    
    Returns the asset, its history (most recent first) and the centroid of
    the history. Without recent history the centroid is the asset's
    current position.
    """
    return await AssetRetrievalService.get_history_for_asset(db, asset_id)


@router.patch("/{asset_id}/location", response_model=AssetResponse)
async def update_asset_location(
    update: LocationDataIn,
    asset_id: int = Path(..., description="Asset ID"),
    db: AsyncSession = Depends(get_db)
):
    """Report a new location for an asset."""
    return await AssetCreationService.record_location(db, asset_id, update)
