"""Database package for the read-only catalog mappings."""

from .base import Base, get_engine, get_session_factory, read_session

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "read_session",
]
