"""
OilDesk Server - Access Request Database Model

Requests for access to the system, created by the registration flow and
approved or rejected by an administrator.
"""

from sqlalchemy import Column, String, DateTime, Text

from models.database.base import Base, NewDocumentId, UtcNow
from models.database.record_status import RecordStatus


class AccessRequest(Base):
    """
    User requests table - stores pending and decided access requests
    """
    __tablename__ = "user_requests"

    request_id = Column(String, primary_key=True, default=NewDocumentId)
    name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    message = Column(Text, nullable=True)
    roles = Column(String, nullable=True)  # NULL when the requester proposed no roles
    status = Column(String, nullable=False, default=RecordStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=UtcNow)
    user_id = Column(String, nullable=True)  # Existing identity reference, if any
