"""
OilDesk Server - Response Serializers

Convert database records and sessions into JSON-ready dictionaries.
"""

from datetime import datetime
from typing import List, Optional

from models.database import User, AccessRequest
from models.infrastructure import SessionUser
from roles import ParseRoleSet, RoleSet


def _Iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def RolesToList(stored: Optional[str]) -> Optional[List[str]]:
    """Stored roles string as a list of canonical identifiers, in stored order"""
    if stored is None:
        return None
    try:
        return [role.value for role in ParseRoleSet(stored)]
    except ValueError:
        # Show unknown identifiers as stored rather than hiding the record
        return [part for part in stored.split(",") if part]


def RoleSetToList(role_set: RoleSet) -> List[str]:
    return [role.value for role in role_set]


def UserToDict(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "roles": RolesToList(user.roles) or [],
        "status": user.status,
        "created_at": _Iso(user.created_at),
        "last_updated": _Iso(user.last_updated),
    }


def SessionUserToDict(user: Optional[SessionUser]) -> Optional[dict]:
    if user is None:
        return None
    return {
        "user_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "roles": RoleSetToList(user.roles),
        "status": user.status,
        "created_at": _Iso(user.created_at),
        "last_updated": _Iso(user.last_updated),
    }


def RequestToDict(request: AccessRequest) -> dict:
    return {
        "request_id": request.request_id,
        "name": request.name,
        "email": request.email,
        "phone": request.phone,
        "message": request.message,
        "roles": RolesToList(request.roles),
        "status": request.status,
        "user_id": request.user_id,
        "created_at": _Iso(request.created_at),
        "last_updated": _Iso(request.last_updated),
    }


def ReportToDict(report) -> dict:
    """Any report model as a dictionary of its columns"""
    data = {}
    for column in report.__table__.columns.keys():
        value = getattr(report, column)
        data[column] = _Iso(value) if isinstance(value, datetime) else value
    return data
