"""
OilDesk Server - Shipment Report API Models

Pydantic models for creating and editing oil, diesel and waste reports.
All fields are optional so the same models serve partial updates.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class OilReportFields(BaseModel):
    """Oil production cycle report fields"""
    barrels_count: Optional[int] = None
    collection_tank: Optional[str] = None
    cycle_number: Optional[str] = None
    entry_date: Optional[datetime] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    flow_status: Optional[str] = None
    operation_chosen: Optional[str] = None
    operator_name: Optional[str] = None
    quantity_source: Optional[str] = None
    tank_source: Optional[str] = None
    total_net_production: Optional[float] = None
    total_quantity_liters: Optional[float] = None
    totals: Optional[float] = None
    water_output_liters: Optional[float] = None
    notes: Optional[str] = None


class DieselReportFields(BaseModel):
    """Diesel dispense shipment report fields"""
    barrels_count: Optional[int] = None
    client_name: Optional[str] = None
    cycle_number: Optional[str] = None
    quantity_dispense_date: Optional[datetime] = None
    receipt_image_url: Optional[str] = None
    receipt_number: Optional[str] = None
    shipment_exit_time: Optional[datetime] = None
    shipment_manager: Optional[str] = None
    submission_date: Optional[datetime] = None
    total_quantity_liters: Optional[float] = None
    notes: Optional[str] = None


class WasteReportFields(BaseModel):
    """Waste oil delivery report fields"""
    barrels_delivered: Optional[int] = None
    delivery_doc_number: Optional[str] = None
    flow_status: Optional[str] = None
    quantity_receipt_date: Optional[datetime] = None
    receiver_name: Optional[str] = None
    submission_date: Optional[datetime] = None
    supplier_name: Optional[str] = None
    supply_type: Optional[str] = None
    total_quantity_liters: Optional[float] = None
    notes: Optional[str] = None
