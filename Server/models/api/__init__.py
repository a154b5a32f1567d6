"""
OilDesk Server - API Models Package

This package contains Pydantic models for all API endpoints.
"""

from models.api.user_management import UpdateUserRolesRequest, ToggleRoleRequest
from models.api.request_management import ApproveRequestBody
from models.api.reports import OilReportFields, DieselReportFields, WasteReportFields

__all__ = [
    'UpdateUserRolesRequest',
    'ToggleRoleRequest',
    'ApproveRequestBody',
    'OilReportFields',
    'DieselReportFields',
    'WasteReportFields',
]
