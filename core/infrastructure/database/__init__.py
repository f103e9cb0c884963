"""Database engine and session management."""

from .config import close_database, create_engine_from_settings, get_engine, get_session_factory, init_database

__all__ = [
    "close_database",
    "create_engine_from_settings",
    "get_engine",
    "get_session_factory",
    "init_database",
]
