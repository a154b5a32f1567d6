"""
OilDesk Server - User Management API Models

Pydantic models for user management admin endpoints.
"""

from typing import List, Optional
from pydantic import BaseModel


class UpdateUserRolesRequest(BaseModel):
    """Request model for saving a user's roles"""
    roles: List[str]


class ToggleRoleRequest(BaseModel):
    """Request model for toggling one role on a draft selection"""
    roles: Optional[List[str]] = None  # Current draft, in selection order
    role: str
