"""
OilDesk Server - Database Base

Shared declarative base for all SQLAlchemy models.
This ensures all models share the same metadata and can reference each other.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

# Create the shared declarative base
Base = declarative_base()


def NewDocumentId() -> str:
    """Generate a document id for collections keyed by opaque strings"""
    return uuid.uuid4().hex


def UtcNow() -> datetime:
    return datetime.now(timezone.utc)
