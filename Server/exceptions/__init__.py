"""
OilDesk Server - Exceptions Package

Contains all exception classes for the OilDesk server.
"""

from .oildesk_error import OilDeskError
from .store_unavailable_error import StoreUnavailableError
from .auth_error import AuthError, INVALID_CREDENTIALS, ACCOUNT_DISABLED

__all__ = [
    'OilDeskError',
    'StoreUnavailableError',
    'AuthError',
    'INVALID_CREDENTIALS',
    'ACCOUNT_DISABLED',
]
