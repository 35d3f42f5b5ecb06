"""
Repository factory for dependency injection.
"""
from typing import Optional

from hsbox.config import get_db_path
from .database import DatabaseContext
from .schema_manager import SchemaManager
from .protocols import (
    MetaRepositoryProtocol,
    DemoRepositoryProtocol,
    SteamIdRepositoryProtocol,
)


class RepositoryFactory:
    """Factory for creating repository instances with shared database context."""

    def __init__(self, db_path: str, ensure_schema: bool = True):
        """
        Initialize the factory with a database path.

        Args:
            db_path: Path to the SQLite database file, or ":memory:".
            ensure_schema: If True, create the database if absent and run
                pending migrations.
        """
        self._db = DatabaseContext(db_path)
        self._db_path = db_path
        self._schema = SchemaManager(self._db)

        if ensure_schema:
            self._schema.ensure_schema()

        # Cache repository instances
        self._meta_repo: Optional[MetaRepositoryProtocol] = None
        self._demo_repo: Optional[DemoRepositoryProtocol] = None
        self._steamid_repo: Optional[SteamIdRepositoryProtocol] = None

    @property
    def db(self) -> DatabaseContext:
        """Get the database context."""
        return self._db

    @property
    def db_path(self) -> str:
        """Get the database path."""
        return self._db_path

    @property
    def schema(self) -> SchemaManager:
        """Get the schema manager."""
        return self._schema

    @property
    def meta(self) -> MetaRepositoryProtocol:
        """Get the meta repository."""
        if self._meta_repo is None:
            from .sqlite.meta_repository import SQLiteMetaRepository
            self._meta_repo = SQLiteMetaRepository(self._db)
        return self._meta_repo

    @property
    def demos(self) -> DemoRepositoryProtocol:
        """Get the demo repository."""
        if self._demo_repo is None:
            from .sqlite.demo_repository import SQLiteDemoRepository
            self._demo_repo = SQLiteDemoRepository(self._db)
        return self._demo_repo

    @property
    def steamids(self) -> SteamIdRepositoryProtocol:
        """Get the steam profile cache repository."""
        if self._steamid_repo is None:
            from .sqlite.steamid_repository import SQLiteSteamIdRepository
            self._steamid_repo = SQLiteSteamIdRepository(self._db)
        return self._steamid_repo

    def demo_path(self, demoid: str) -> str:
        """Location of a demo file in the configured demo directory."""
        from .sqlite.demo_repository import demo_path
        return demo_path(demoid, self.meta.get_demo_directory() or '')

    def close(self) -> None:
        """Close the shared connection."""
        self._db.close()


def create_repos(db_path: Optional[str] = None) -> RepositoryFactory:
    """Open the application database, creating and upgrading it as needed.

    Defaults to headshotbox.sqlite in the application config directory.
    """
    return RepositoryFactory(db_path or get_db_path())
