"""
OilDesk Server - Base Exception

Base exception class for all OilDesk server errors.
"""


class OilDeskError(Exception):
    """Base exception for OilDesk errors."""
    pass
