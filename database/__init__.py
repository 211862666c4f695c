"""
Database Package
Provides database models, connections, and query utilities for TantalusBot
"""

from .models import Database
from .queries import DatabaseQueries

__all__ = ['Database', 'DatabaseQueries']
