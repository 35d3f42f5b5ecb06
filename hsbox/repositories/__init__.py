"""Repository pattern implementations for HeadshotBox persistence."""

from .protocols import (
    DemoEntity,
    SteamIdEntity,
    MetaRepositoryProtocol,
    DemoRepositoryProtocol,
    SteamIdRepositoryProtocol,
)

from .database import DatabaseContext
from .schema_manager import SchemaManager, Migration, MIGRATIONS, compute_plan

from .sqlite import (
    SQLiteMetaRepository,
    SQLiteDemoRepository,
    SQLiteSteamIdRepository,
)

from .factory import RepositoryFactory, create_repos

__all__ = [
    # Domain models
    'DemoEntity',
    'SteamIdEntity',

    # Interfaces
    'MetaRepositoryProtocol',
    'DemoRepositoryProtocol',
    'SteamIdRepositoryProtocol',

    # Schema
    'DatabaseContext',
    'SchemaManager',
    'Migration',
    'MIGRATIONS',
    'compute_plan',

    # SQLite implementations
    'SQLiteMetaRepository',
    'SQLiteDemoRepository',
    'SQLiteSteamIdRepository',

    # Wiring
    'RepositoryFactory',
    'create_repos',
]
