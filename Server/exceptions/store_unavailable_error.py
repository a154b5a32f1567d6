"""
OilDesk Server - Store Unavailable Exception

Raised when the database cannot be reached or a statement fails. Callers
treat it as retryable, never as an access denial.
"""

from .oildesk_error import OilDeskError


class StoreUnavailableError(OilDeskError):
    """The backing store could not complete the operation."""
    pass
