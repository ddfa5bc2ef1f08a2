"""
Database configuration and models.
"""

from resim.db.database import engine, SessionLocal, get_db
from resim.db.models import Base

__all__ = ["engine", "SessionLocal", "get_db", "Base"]
