"""
SQLite implementations of repository interfaces.
"""
from .meta_repository import SQLiteMetaRepository
from .demo_repository import SQLiteDemoRepository, demo_path
from .steamid_repository import SQLiteSteamIdRepository

__all__ = [
    "SQLiteMetaRepository",
    "SQLiteDemoRepository",
    "SQLiteSteamIdRepository",
    "demo_path",
]
