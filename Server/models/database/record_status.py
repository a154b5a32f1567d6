"""
OilDesk Server - Record Status

Status values shared by the users and user_requests collections.
"""

from enum import Enum


class RecordStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Requests leave PENDING exactly once and never come back
TERMINAL_STATUSES = frozenset({RecordStatus.APPROVED, RecordStatus.REJECTED})
