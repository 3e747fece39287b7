"""Database package: engine handle, session dependency, base."""

from app.db.session import Database, get_db

__all__ = ["Database", "get_db"]
