"""
Repository layer for database access.

This module contains all database access operations, encapsulating SQL and data persistence logic.
"""
from repositories.base import Database
from repositories.query import Condition, Field, Query
from repositories.repository import Repository
from repositories.unit_of_work import UnitOfWork

__all__ = [
    "Condition",
    "Database",
    "Field",
    "Query",
    "Repository",
    "UnitOfWork",
]
