"""
Asset database model.

A tracked entity (vehicle or field personnel) with its last reported position.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
from asset_tracking.app.db.session import Base


class Asset(Base):
    """
    Asset model.
    
    The last reported position always mirrors the newest LocationData
    entry for the asset. It is set directly on creation.
    """
    __tablename__ = "assets"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Identification
    asset_type = Column(String(50), nullable=False, index=True)  # e.g., "TRUCK", "SALESPERSON"
    title = Column(String(255), nullable=True)
    description = Column(String(1024), nullable=True)
    
    # Last reported position
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    last_reported_at = Column(DateTime(timezone=True), nullable=False, index=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Asset(id={self.id}, type='{self.asset_type}', lat={self.latitude}, lng={self.longitude})>"
