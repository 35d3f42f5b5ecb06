"""
SQLite implementation of the meta repository.
Handles the meta table: one JSON-encoded value per key.
"""
import json
from typing import Any, Dict, Optional

from hsbox.exceptions import MissingMetaKeyError
from ..database import DatabaseContext

SCHEMA_VERSION_KEY = 'schema_version'
CONFIG_KEY = 'config'


class SQLiteMetaRepository:
    """SQLite implementation of MetaRepositoryProtocol."""

    def __init__(self, db: DatabaseContext):
        self._db = db

    def get(self, key: str) -> Any:
        """Get a decoded meta value.

        Raises MissingMetaKeyError if the key was never written or holds
        NULL, and json.JSONDecodeError if the stored value is malformed.
        """
        row = self._db.fetch_one(
            "SELECT value FROM meta WHERE key = ?",
            (key,),
        )
        if row is None or row["value"] is None:
            raise MissingMetaKeyError(key)
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        """Set a meta value."""
        with self._db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO meta (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, json.dumps(value)),
            )

    def get_schema_version(self) -> int:
        return self.get(SCHEMA_VERSION_KEY)

    def set_schema_version(self, version: int) -> None:
        self.set(SCHEMA_VERSION_KEY, version)

    def get_config(self) -> Dict[str, Any]:
        return self.get(CONFIG_KEY)

    def set_config(self, config: Dict[str, Any]) -> None:
        self.set(CONFIG_KEY, config)

    def update_config(self, partial: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `partial` into the stored config and return the result.

        Keys in `partial` replace stored ones; other stored keys are kept.
        """
        with self._db.transaction():
            config = {**self.get_config(), **partial}
            self.set_config(config)
        return config

    def get_steam_api_key(self) -> Optional[str]:
        return self.get_config().get('steam_api_key')

    def get_demo_directory(self) -> Optional[str]:
        return self.get_config().get('demo_directory')
