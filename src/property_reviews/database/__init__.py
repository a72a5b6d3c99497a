"""
Database module for Property Reviews
Provides DuckDB-based storage for review records and listings
"""
from .manager import DatabaseManager
from .models import SCHEMA_SQL

__all__ = [
    "DatabaseManager",
    "SCHEMA_SQL",
]
