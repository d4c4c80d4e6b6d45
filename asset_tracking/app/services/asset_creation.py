"""
Asset Creation Service.

Creates assets and appends location updates to their history.
"""

import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracking.app.models.asset import Asset
from asset_tracking.app.models.location_data import LocationData
from asset_tracking.app.domain.tracking.filters import to_datetime
from asset_tracking.app.schemas.asset import AssetCreate, LocationDataIn
from asset_tracking.app.services.asset_retrieval import AssetRetrievalService

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AssetCreationService:

    @staticmethod
    async def create_asset(db: AsyncSession, request: AssetCreate) -> Asset:
        """
        Create an asset and record its initial location.

        The initial location becomes both the asset's last reported
        position and the first entry of its history.
        """
        reported = request.location_data
        recorded_at = to_datetime(reported.timestamp)

        asset = Asset(
            asset_type=request.asset_type,
            title=request.title,
            description=request.description,
            latitude=reported.location.latitude,
            longitude=reported.location.longitude,
            last_reported_at=recorded_at
        )
        db.add(asset)
        await db.flush()

        db.add(LocationData(
            asset_id=asset.id,
            latitude=reported.location.latitude,
            longitude=reported.location.longitude,
            timestamp=recorded_at
        ))
        await db.commit()
        await db.refresh(asset)

        logger.info("Created asset %s of type %s", asset.id, asset.asset_type)
        return asset

    @staticmethod
    async def record_location(db: AsyncSession, asset_id: int, update: LocationDataIn) -> Asset:
        """
        Append a location to an asset's history.

        The asset's last reported position only moves when the update is
        not older than the current one; late updates are kept as history.

        Raises:
            AssetNotFoundError: If no asset has that ID
        """
        asset = await AssetRetrievalService.get_asset_for_id(db, asset_id)
        recorded_at = to_datetime(update.timestamp)

        db.add(LocationData(
            asset_id=asset.id,
            latitude=update.location.latitude,
            longitude=update.location.longitude,
            timestamp=recorded_at
        ))

        if recorded_at >= _as_utc(asset.last_reported_at):
            asset.latitude = update.location.latitude
            asset.longitude = update.location.longitude
            asset.last_reported_at = recorded_at
        else:
            logger.info("Out-of-order location for asset %s stored as history only", asset_id)

        await db.commit()
        await db.refresh(asset)
        return asset
