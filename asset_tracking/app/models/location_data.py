"""
Location Data database model.

Stores the append-only GPS history of each asset.
"""

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime
from sqlalchemy.sql import func
from asset_tracking.app.db.session import Base


class LocationData(Base):
    """
    Location Data model.
    
    One historical position of an asset. Rows are never updated.
    """
    __tablename__ = "location_data"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # References
    asset_id = Column(Integer, ForeignKey('assets.id'), nullable=False, index=True)
    
    # GPS coordinates
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    
    # Timing
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)  # When GPS was recorded
    reported_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)  # When inserted to DB
    
    def __repr__(self):
        return f"<LocationData(asset_id={self.asset_id}, lat={self.latitude}, lng={self.longitude}, at={self.timestamp})>"
