"""
Service tests for asset retrieval.

Tests history aggregation, filter dispatch, centroids and export.
"""

import pytest
from datetime import datetime, timedelta, timezone

from asset_tracking.app.core.exceptions import AssetNotFoundError, InvalidFilterError, InvalidLimitError
from asset_tracking.app.models.asset import Asset
from asset_tracking.app.models.location_data import LocationData
from asset_tracking.app.schemas.asset import ExportRecord
from asset_tracking.app.services import asset_queries
from asset_tracking.app.services.asset_retrieval import AssetRetrievalService

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def epoch(value: datetime) -> int:
    return int(value.timestamp())


@pytest.fixture
async def add_asset(db_session):
    """Factory inserting an asset at a given position."""
    async def _add(asset_type="TRUCK", latitude=12.9, longitude=77.6, last_reported_at=NOW):
        asset = Asset(
            asset_type=asset_type,
            title=f"{asset_type} asset",
            description="test asset",
            latitude=latitude,
            longitude=longitude,
            last_reported_at=last_reported_at
        )
        db_session.add(asset)
        await db_session.commit()
        await db_session.refresh(asset)
        return asset
    return _add


@pytest.fixture
async def add_location(db_session):
    """Factory appending a history entry for an asset."""
    async def _add(asset_id, latitude, longitude, timestamp):
        location = LocationData(
            asset_id=asset_id,
            latitude=latitude,
            longitude=longitude,
            timestamp=timestamp
        )
        db_session.add(location)
        await db_session.commit()
        return location
    return _add


# --- Asset lookup ---

@pytest.mark.asyncio
async def test_get_asset_for_id(db_session, add_asset):
    asset = await add_asset()

    found = await AssetRetrievalService.get_asset_for_id(db_session, asset.id)

    assert found.id == asset.id
    assert found.asset_type == "TRUCK"


@pytest.mark.asyncio
async def test_get_asset_for_missing_id_raises(db_session):
    with pytest.raises(AssetNotFoundError) as exc_info:
        await AssetRetrievalService.get_asset_for_id(db_session, 9999)

    assert exc_info.value.status_code == 404
    assert exc_info.value.details["id"] == 9999


# --- History ---

@pytest.mark.asyncio
async def test_history_for_missing_asset_raises(db_session):
    with pytest.raises(AssetNotFoundError):
        await AssetRetrievalService.get_history_for_asset(db_session, 404, now=NOW)


@pytest.mark.asyncio
async def test_history_without_recent_records_falls_back_to_last_position(db_session, add_asset, add_location, mocker):
    """No history in the window: empty list, centroid is the asset's position."""
    asset = await add_asset(latitude=28.61, longitude=77.20)
    await add_location(asset.id, 10.0, 10.0, NOW - timedelta(hours=30))
    centroid_spy = mocker.patch("asset_tracking.app.services.asset_retrieval.centroid")

    response = await AssetRetrievalService.get_history_for_asset(db_session, asset.id, now=NOW)

    assert response.history == []
    assert response.centroid.latitude == 28.61
    assert response.centroid.longitude == 77.20
    centroid_spy.assert_not_called()


@pytest.mark.asyncio
async def test_history_is_windowed_and_newest_first(db_session, add_asset, add_location):
    asset = await add_asset()
    old = await add_location(asset.id, 50.0, 50.0, NOW - timedelta(hours=25))
    first = await add_location(asset.id, 10.0, 20.0, NOW - timedelta(hours=5))
    second = await add_location(asset.id, 30.0, 40.0, NOW - timedelta(hours=1))
    future = await add_location(asset.id, 60.0, 60.0, NOW + timedelta(hours=1))

    response = await AssetRetrievalService.get_history_for_asset(db_session, asset.id, now=NOW)

    ids = [location.id for location in response.history]
    assert ids == [second.id, first.id]
    assert old.id not in ids
    assert future.id not in ids
    assert response.asset.id == asset.id
    assert response.centroid.latitude == pytest.approx(20.0)
    assert response.centroid.longitude == pytest.approx(30.0)


@pytest.mark.asyncio
async def test_history_only_contains_requested_asset(db_session, add_asset, add_location):
    asset = await add_asset()
    other = await add_asset(asset_type="SALESPERSON")
    mine = await add_location(asset.id, 1.0, 1.0, NOW - timedelta(hours=2))
    await add_location(other.id, 2.0, 2.0, NOW - timedelta(hours=2))

    response = await AssetRetrievalService.get_history_for_asset(db_session, asset.id, now=NOW)

    assert [location.id for location in response.history] == [mine.id]
    assert response.centroid.latitude == 1.0


# --- Filtering ---

@pytest.mark.asyncio
async def test_no_filters_returns_up_to_limit_in_id_order(db_session, add_asset):
    assets = [await add_asset(latitude=float(i), longitude=float(i)) for i in range(12)]

    response = await AssetRetrievalService.get_assets_filtered_by(db_session, "", None, None, 10)

    assert [a.id for a in response.assets] == [a.id for a in assets[:10]]
    assert response.centroid.latitude == pytest.approx(4.5)
    assert response.centroid.longitude == pytest.approx(4.5)


@pytest.mark.asyncio
async def test_no_assets_gives_origin_centroid(db_session):
    response = await AssetRetrievalService.get_assets_filtered_by(db_session, "", None, None, 10)

    assert response.assets == []
    assert response.centroid.latitude == 0.0
    assert response.centroid.longitude == 0.0


@pytest.mark.asyncio
async def test_type_filter(db_session, add_asset):
    truck = await add_asset(asset_type="TRUCK", latitude=10.0, longitude=10.0)
    await add_asset(asset_type="SALESPERSON", latitude=50.0, longitude=50.0)

    response = await AssetRetrievalService.get_assets_filtered_by(db_session, "TRUCK", None, None, 10)

    assert [a.id for a in response.assets] == [truck.id]
    assert response.centroid.latitude == 10.0


@pytest.mark.asyncio
async def test_partial_time_range_is_ignored(db_session, add_asset):
    await add_asset(asset_type="TRUCK", last_reported_at=NOW - timedelta(days=10))
    await add_asset(asset_type="TRUCK", last_reported_at=NOW)

    response = await AssetRetrievalService.get_assets_filtered_by(
        db_session, "TRUCK", epoch(NOW - timedelta(hours=1)), None, 10
    )

    assert len(response.assets) == 2


@pytest.mark.asyncio
async def test_time_filter(db_session, add_asset):
    await add_asset(asset_type="TRUCK", last_reported_at=NOW - timedelta(days=2))
    recent_truck = await add_asset(asset_type="TRUCK", last_reported_at=NOW - timedelta(hours=1))
    recent_person = await add_asset(asset_type="SALESPERSON", last_reported_at=NOW - timedelta(hours=2))

    response = await AssetRetrievalService.get_assets_filtered_by(
        db_session, None, epoch(NOW - timedelta(hours=3)), epoch(NOW), 10
    )

    assert [a.id for a in response.assets] == [recent_truck.id, recent_person.id]


@pytest.mark.asyncio
async def test_type_and_time_filter(db_session, add_asset):
    await add_asset(asset_type="TRUCK", last_reported_at=NOW - timedelta(days=2))
    recent_truck = await add_asset(asset_type="TRUCK", last_reported_at=NOW - timedelta(hours=1))
    await add_asset(asset_type="SALESPERSON", last_reported_at=NOW - timedelta(hours=2))

    response = await AssetRetrievalService.get_assets_filtered_by(
        db_session, "TRUCK", epoch(NOW - timedelta(hours=3)), epoch(NOW), 10
    )

    assert [a.id for a in response.assets] == [recent_truck.id]


@pytest.mark.asyncio
async def test_limit_bounds_every_mode(db_session, add_asset):
    for _ in range(5):
        await add_asset(asset_type="TRUCK", last_reported_at=NOW - timedelta(hours=1))
    window = (epoch(NOW - timedelta(hours=2)), epoch(NOW))

    for asset_type, start, end in [("", None, None), ("TRUCK", None, None), ("", *window), ("TRUCK", *window)]:
        response = await AssetRetrievalService.get_assets_filtered_by(db_session, asset_type, start, end, 3)
        assert len(response.assets) == 3


@pytest.mark.asyncio
async def test_invalid_time_filter_fails_before_store_access(db_session, mocker):
    dispatch = mocker.patch.object(asset_queries, "dispatch_filter")

    with pytest.raises(InvalidFilterError):
        await AssetRetrievalService.get_assets_filtered_by(db_session, "TRUCK", 1000, 500, 10)

    dispatch.assert_not_called()


@pytest.mark.asyncio
async def test_limit_below_one_is_rejected(db_session):
    with pytest.raises(InvalidLimitError):
        await AssetRetrievalService.get_assets_filtered_by(db_session, "", None, None, 0)


# --- Export ---

@pytest.mark.asyncio
async def test_export_without_data_returns_single_empty_record(db_session):
    records = await AssetRetrievalService.export_data(db_session)

    assert records == [ExportRecord()]


@pytest.mark.asyncio
async def test_export_returns_one_record_per_location(db_session, add_asset, add_location):
    truck = await add_asset(asset_type="TRUCK")
    person = await add_asset(asset_type="SALESPERSON")
    await add_location(truck.id, 1.0, 2.0, NOW - timedelta(hours=2))
    await add_location(truck.id, 3.0, 4.0, NOW - timedelta(hours=1))
    await add_location(person.id, 5.0, 6.0, NOW)

    records = await AssetRetrievalService.export_data(db_session)

    assert len(records) == 3
    assert [r.asset_id for r in records] == [truck.id, truck.id, person.id]
    assert [r.latitude for r in records] == [1.0, 3.0, 5.0]
    assert records[2].asset_type == "SALESPERSON"
    assert records[0].title == "TRUCK asset"
