"""
Asset Retrieval Service.

Read-only operations behind the asset query endpoints: single asset
lookup, recent history with centroid, filtered listing with centroid
and the bulk export.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracking.app.core.config import settings
from asset_tracking.app.core.exceptions import AssetNotFoundError
from asset_tracking.app.models.asset import Asset
from asset_tracking.app.domain.tracking.filters import classify_filter
from asset_tracking.app.domain.tracking.geometry import ORIGIN, Position, centroid, positions_of
from asset_tracking.app.services import asset_queries
from asset_tracking.app.schemas.asset import (
    AssetResponse, AssetHistoryResponse, AssetDataResponse,
    LocationDataResponse, Coordinates, ExportRecord
)

logger = logging.getLogger(__name__)


def _coordinates(position: Position) -> Coordinates:
    return Coordinates(latitude=position.latitude, longitude=position.longitude)


class AssetRetrievalService:

    @staticmethod
    async def get_asset_for_id(db: AsyncSession, asset_id: int) -> Asset:
        """
        Get an asset by ID.

        Raises:
            AssetNotFoundError: If no asset has that ID
        """
        asset = await asset_queries.find_asset(db, asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        return asset

    @staticmethod
    async def get_history_for_asset(
        db: AsyncSession,
        asset_id: int,
        now: Optional[datetime] = None
    ) -> AssetHistoryResponse:
        """
        Get an asset with its location history over the trailing window.

        The centroid is the mean of the history positions. With no history
        in the window, the asset's last reported position is the centroid.

        Args:
            db: Database session
            asset_id: Asset to look up
            now: End of the window, defaults to the current UTC time

        Raises:
            AssetNotFoundError: If no asset has that ID
        """
        asset = await AssetRetrievalService.get_asset_for_id(db, asset_id)

        window_end = now or datetime.now(timezone.utc)
        window_start = window_end - timedelta(hours=settings.history_window_hours)
        history = await asset_queries.find_history(db, asset_id, window_start, window_end)
        logger.info("History for asset %s: %d records", asset_id, len(history))

        if history:
            center = centroid(positions_of(history))
        else:
            logger.info("No recent history for asset %s, using its coordinates as centroid", asset_id)
            center = Position(asset.latitude, asset.longitude)

        return AssetHistoryResponse(
            asset=AssetResponse.model_validate(asset),
            history=[LocationDataResponse.model_validate(location) for location in history],
            centroid=_coordinates(center)
        )

    @staticmethod
    async def get_assets_filtered_by(
        db: AsyncSession,
        asset_type: Optional[str],
        start_time: Optional[int],
        end_time: Optional[int],
        limit: int
    ) -> AssetDataResponse:
        """
        List assets matching the optional type and time filters.

        Raises:
            InvalidFilterError: If both time bounds are given and start is after end
            InvalidLimitError: If limit is below 1
        """
        mode = classify_filter(asset_type, start_time, end_time)
        assets = await asset_queries.dispatch_filter(db, mode, limit)
        logger.info("Filtered assets: %d", len(assets))

        center = centroid(positions_of(assets)) if assets else ORIGIN

        return AssetDataResponse(
            centroid=_coordinates(center),
            assets=[AssetResponse.model_validate(asset) for asset in assets]
        )

    @staticmethod
    async def export_data(db: AsyncSession) -> List[ExportRecord]:
        """
        Get every location record flattened with its asset.

        Never empty: with no data a single record with empty fields is returned.
        """
        rows = await asset_queries.export_rows(db)
        logger.info("Export rows: %d", len(rows))

        if not rows:
            logger.info("Exporting with empty data")
            return [ExportRecord()]

        return [ExportRecord(**row._mapping) for row in rows]
