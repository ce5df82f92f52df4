"""Database package: engine, session, store."""

from gymlog.db.session import async_session_maker, get_db, get_store
from gymlog.db.store import DataStore

__all__ = ["DataStore", "async_session_maker", "get_db", "get_store"]
