"""
Asset and location queries.

Read-only lookups against the asset store, one per filter mode, plus
the history and export queries.
"""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from asset_tracking.app.models.asset import Asset
from asset_tracking.app.models.location_data import LocationData
from asset_tracking.app.core.exceptions import InvalidLimitError
from asset_tracking.app.domain.tracking.filters import (
    FilterMode, NoFilter, ByType, ByTime, ByTypeAndTime
)

logger = logging.getLogger(__name__)


async def find_asset(db: AsyncSession, asset_id: int) -> Optional[Asset]:
    """
    Look up an asset by ID.

    Returns:
        The asset, or None if no asset has that ID
    """
    result = await db.execute(
        select(Asset).where(Asset.id == asset_id)
    )
    return result.scalar_one_or_none()


async def find_history(
    db: AsyncSession,
    asset_id: int,
    window_start: datetime,
    window_end: datetime
) -> list[LocationData]:
    """
    Get the location history of an asset within a time window.

    Args:
        db: Database session
        asset_id: Asset whose history to fetch
        window_start: Earliest timestamp (inclusive)
        window_end: Latest timestamp (inclusive)

    Returns:
        Location records, most recent first
    """
    result = await db.execute(
        select(LocationData).where(
            LocationData.asset_id == asset_id,
            LocationData.timestamp.between(window_start, window_end)
        ).order_by(LocationData.timestamp.desc(), LocationData.id.desc())
    )
    return list(result.scalars().all())


async def find_assets(db: AsyncSession, limit: int) -> list[Asset]:
    """Get the first `limit` assets."""
    result = await db.execute(
        select(Asset).order_by(Asset.id).limit(limit)
    )
    return list(result.scalars().all())


async def filter_assets_by_type(db: AsyncSession, asset_type: str, limit: int) -> list[Asset]:
    """Get the first `limit` assets of the given type."""
    result = await db.execute(
        select(Asset).where(
            Asset.asset_type == asset_type
        ).order_by(Asset.id).limit(limit)
    )
    return list(result.scalars().all())


async def filter_assets_by_time(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    limit: int
) -> list[Asset]:
    """Get the first `limit` assets last reported within [start, end]."""
    result = await db.execute(
        select(Asset).where(
            Asset.last_reported_at.between(start, end)
        ).order_by(Asset.id).limit(limit)
    )
    return list(result.scalars().all())


async def filter_assets_by_type_and_time(
    db: AsyncSession,
    asset_type: str,
    start: datetime,
    end: datetime,
    limit: int
) -> list[Asset]:
    """Get the first `limit` assets of the given type last reported within [start, end]."""
    result = await db.execute(
        select(Asset).where(
            Asset.asset_type == asset_type,
            Asset.last_reported_at.between(start, end)
        ).order_by(Asset.id).limit(limit)
    )
    return list(result.scalars().all())


async def dispatch_filter(db: AsyncSession, mode: FilterMode, limit: int) -> list[Asset]:
    """
    Run the asset listing that matches a filter mode.

    Args:
        db: Database session
        mode: Classified filter mode
        limit: Maximum number of assets to return

    Returns:
        At most `limit` assets, in ID order

    Raises:
        InvalidLimitError: If limit is below 1
    """
    if limit < 1:
        raise InvalidLimitError(limit)

    if isinstance(mode, NoFilter):
        logger.info("No filters defined. Getting all assets.")
        return await find_assets(db, limit)

    if isinstance(mode, ByType):
        logger.info("Type filter defined: %s", mode.asset_type)
        return await filter_assets_by_type(db, mode.asset_type, limit)

    if isinstance(mode, ByTime):
        logger.info("Time filter defined: [%s, %s]", mode.start_time, mode.end_time)
        start, end = mode.window
        return await filter_assets_by_time(db, start, end, limit)

    if isinstance(mode, ByTypeAndTime):
        logger.info("Both type and time filter defined: %s [%s, %s]", mode.asset_type, mode.start_time, mode.end_time)
        start, end = mode.window
        return await filter_assets_by_type_and_time(db, mode.asset_type, start, end, limit)

    raise TypeError(f"Unknown filter mode: {mode!r}")


async def export_rows(db: AsyncSession) -> list:
    """
    Run the export query.

    Returns:
        One row per location record joined with its asset,
        ordered by asset ID then timestamp
    """
    result = await db.execute(
        select(
            Asset.id.label("asset_id"),
            Asset.asset_type,
            Asset.title,
            Asset.description,
            LocationData.latitude,
            LocationData.longitude,
            LocationData.timestamp
        ).join(LocationData, LocationData.asset_id == Asset.id)
         .order_by(Asset.id, LocationData.timestamp)
    )
    return list(result.all())
