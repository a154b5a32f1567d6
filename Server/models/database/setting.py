"""
OilDesk Server - Setting Database Model

Runtime configuration stored as key-value rows. Defaults are written on
first start; see managers.database_manager.DEFAULT_SETTINGS.
"""

from sqlalchemy import Column, String, DateTime

from models.database.base import Base, UtcNow


class Setting(Base):
    """
    Settings table - one row per configuration key
    """
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
    description = Column(String, nullable=True)  # Shown next to the value when editing
    last_updated = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
