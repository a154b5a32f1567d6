"""
OilDesk Server - Waste Report Database Model
"""

from sqlalchemy import Column, String, DateTime, Integer, Float, Text

from models.database.base import Base, NewDocumentId, UtcNow


class WasteReport(Base):
    """
    Waste reports table - one row per waste oil delivery received
    """
    __tablename__ = "waste_reports"

    report_id = Column(String, primary_key=True, default=NewDocumentId)
    barrels_delivered = Column(Integer, nullable=True)
    delivery_doc_number = Column(String, nullable=True)
    flow_status = Column(String, nullable=True)
    quantity_receipt_date = Column(DateTime(timezone=True), nullable=True)
    receiver_name = Column(String, nullable=True)
    submission_date = Column(DateTime(timezone=True), nullable=True)
    supplier_name = Column(String, nullable=True)
    supply_type = Column(String, nullable=True)
    total_quantity_liters = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    user_id = Column(String, nullable=True)
    user_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
