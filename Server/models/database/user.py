"""
OilDesk Server - User Database Model

Application user records, keyed by the identity reference issued by the
identity provider. Roles are stored comma-joined; use roles.ParseRoleSet to
work with them.
"""

from sqlalchemy import Column, String, DateTime

from models.database.base import Base, UtcNow
from models.database.record_status import RecordStatus


class User(Base):
    """
    Users table - one row per application user
    """
    __tablename__ = "users"

    user_id = Column(String, primary_key=True)  # Identity reference
    name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    roles = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default=RecordStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
