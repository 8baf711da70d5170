"""Database persistence infrastructure.

This module provides database-related functionality including:
- Base model for all database entities
- Database connection, session and transaction management
- Repository implementations of the domain repository protocols
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
