"""
OilDesk Server - Oil Report Database Model
"""

from sqlalchemy import Column, String, DateTime, Integer, Float, Text

from models.database.base import Base, NewDocumentId, UtcNow


class OilReport(Base):
    """
    Oil reports table - one row per production cycle report
    """
    __tablename__ = "oil_reports"

    report_id = Column(String, primary_key=True, default=NewDocumentId)
    barrels_count = Column(Integer, nullable=True)
    collection_tank = Column(String, nullable=True)
    cycle_number = Column(String, nullable=True)
    entry_date = Column(DateTime(timezone=True), nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    flow_status = Column(String, nullable=True)
    operation_chosen = Column(String, nullable=True)
    operator_name = Column(String, nullable=True)
    quantity_source = Column(String, nullable=True)
    tank_source = Column(String, nullable=True)
    total_net_production = Column(Float, nullable=True)
    total_quantity_liters = Column(Float, nullable=True)
    totals = Column(Float, nullable=True)
    water_output_liters = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    user_id = Column(String, nullable=True)
    user_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
