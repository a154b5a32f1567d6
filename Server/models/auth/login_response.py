"""
OilDesk Server - Login Response Model

Pydantic model for the API sign-in response.
"""

from typing import List
from pydantic import BaseModel


class LoginResponse(BaseModel):
    """Bearer token plus the signed-in user's name and roles"""
    token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until token expiration
    name: str
    roles: List[str]
