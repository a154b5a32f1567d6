"""
OilDesk Server - Credential Database Model

Sign-in credentials owned by the identity provider. Kept apart from the
users table: a credential proves who someone is, the user record decides
what they may do.
"""

from sqlalchemy import Column, String, DateTime, Boolean

from models.database.base import Base, NewDocumentId, UtcNow


class Credential(Base):
    """
    Credentials table - stores bcrypt password hashes per identity
    """
    __tablename__ = "credentials"

    identity_ref = Column(String, primary_key=True, default=NewDocumentId)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    is_disabled = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
    last_login = Column(DateTime(timezone=True), nullable=True)
