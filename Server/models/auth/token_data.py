"""
OilDesk Server - Token Data Model

Pydantic model for data stored in JWT tokens.
"""

from pydantic import BaseModel


class TokenData(BaseModel):
    """Data stored in JWT token"""
    session_id: str
    identity_ref: str
