"""
OilDesk Server - Database Models Package

This package contains all SQLAlchemy database model definitions.
All models share a common declarative base for proper table relationships.
"""

# Import Base first
from models.database.base import Base

# Import all models
from models.database.record_status import RecordStatus, TERMINAL_STATUSES
from models.database.user import User
from models.database.access_request import AccessRequest
from models.database.credential import Credential
from models.database.setting import Setting
from models.database.oil_report import OilReport
from models.database.diesel_report import DieselReport
from models.database.waste_report import WasteReport

# Export all models and Base
__all__ = [
    'Base',
    'RecordStatus',
    'TERMINAL_STATUSES',
    'User',
    'AccessRequest',
    'Credential',
    'Setting',
    'OilReport',
    'DieselReport',
    'WasteReport',
]
