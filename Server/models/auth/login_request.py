"""
OilDesk Server - Login Request Model

Pydantic model for the API sign-in request.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request model for login endpoint; email is matched case-insensitively"""
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)
