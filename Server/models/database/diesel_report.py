"""
OilDesk Server - Diesel Report Database Model
"""

from sqlalchemy import Column, String, DateTime, Integer, Float, Text

from models.database.base import Base, NewDocumentId, UtcNow


class DieselReport(Base):
    """
    Diesel reports table - one row per diesel dispense shipment
    """
    __tablename__ = "diesel_reports"

    report_id = Column(String, primary_key=True, default=NewDocumentId)
    barrels_count = Column(Integer, nullable=True)
    client_name = Column(String, nullable=True)
    cycle_number = Column(String, nullable=True)
    quantity_dispense_date = Column(DateTime(timezone=True), nullable=True)
    receipt_image_url = Column(String, nullable=True)
    receipt_number = Column(String, nullable=True)
    shipment_exit_time = Column(DateTime(timezone=True), nullable=True)
    shipment_manager = Column(String, nullable=True)
    submission_date = Column(DateTime(timezone=True), nullable=True)
    total_quantity_liters = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    user_id = Column(String, nullable=True)
    user_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
