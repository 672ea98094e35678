"""
Database package
"""
from finance_categories.db.base import Base, TimestampMixin
from finance_categories.db.session import engine, SessionLocal, get_db, init_db

__all__ = [
    "Base",
    "TimestampMixin",
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
]
