"""
SQLite implementation of the Steam profile cache.
"""
import json
from typing import Any, Dict, Iterable, List

from hsbox.utils import chunked, current_timestamp
from ..database import DatabaseContext
from ..protocols import SteamIdEntity
from ..repository_utils import MAX_SQL_VARIABLES, placeholders


class SQLiteSteamIdRepository:
    """SQLite implementation of SteamIdRepositoryProtocol."""

    def __init__(self, db: DatabaseContext):
        self._db = db

    def get(self, steamids: Iterable[int]) -> List[SteamIdEntity]:
        """Get cached profiles for the given steam ids."""
        entities = []
        for chunk in chunked(sorted(set(steamids)), MAX_SQL_VARIABLES):
            rows = self._db.fetch_all(
                f"""
                SELECT steamid, timestamp, data FROM steamids
                WHERE steamid IN ({placeholders(len(chunk))})
                """,
                tuple(chunk),
            )
            entities.extend(
                SteamIdEntity(
                    steamid=row["steamid"],
                    timestamp=row["timestamp"],
                    data=json.loads(row["data"]),
                )
                for row in rows
            )
        return entities

    def refresh(self, profiles: Dict[int, Dict[str, Any]]) -> Dict[int, Dict[str, Any]]:
        """Replace the cached profiles for exactly the ids in `profiles`.

        Returns `profiles` unchanged.
        """
        timestamp = current_timestamp()
        with self._db.transaction() as conn:
            for chunk in chunked(list(profiles), MAX_SQL_VARIABLES):
                conn.execute(
                    f"DELETE FROM steamids WHERE steamid IN ({placeholders(len(chunk))})",
                    chunk,
                )
            conn.executemany(
                "INSERT INTO steamids (steamid, timestamp, data) VALUES (?, ?, ?)",
                [(steamid, timestamp, json.dumps(data)) for steamid, data in profiles.items()],
            )
        return profiles
