"""Database package for the lead intake pipeline."""
from db.connection import (
    build_engine,
    build_session_factory,
    dispose_engine,
    get_db,
    get_engine,
    session_scope,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "get_engine",
    "get_db",
    "dispose_engine",
    "session_scope",
]
