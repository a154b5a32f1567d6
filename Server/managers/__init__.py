"""
OilDesk Server - Managers Package

This package contains manager classes for database access.
"""

from managers.database_manager import DatabaseManager
from managers.document_store import DocumentStore

__all__ = ['DatabaseManager', 'DocumentStore']
