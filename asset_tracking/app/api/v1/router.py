"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from asset_tracking.app.api.v1.endpoints import assets

router = APIRouter()

router.include_router(assets.router)
