"""Database utilities - engine and sessions."""

from src.searchmatic.core.db.engine import dispose_engine, get_engine
from src.searchmatic.core.db.session import OWNER_SETTING, get_session

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Session
    "OWNER_SETTING",
    "get_session",
]
