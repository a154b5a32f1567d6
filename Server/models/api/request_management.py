"""
OilDesk Server - Access Request API Models

Pydantic models for access request admin endpoints.
"""

from typing import List, Optional
from pydantic import BaseModel


class ApproveRequestBody(BaseModel):
    """Request model for approving an access request"""
    roles: List[str]
    user_id: Optional[str] = None  # Defaults to the request's identity reference
