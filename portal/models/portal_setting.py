from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from portal.database import Base

class PortalSetting(Base):
    """Row in the persistent key-value area (bearer token, gist id)."""
    __tablename__ = "portal_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
