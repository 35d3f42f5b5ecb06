"""
SQLite implementation of demo repository.
"""
import logging
import os
from typing import Any, Dict, Iterable, List, Optional

from hsbox.config import LATEST_DATA_VERSION
from hsbox.payload import decode_payload, encode_payload
from hsbox.utils import chunked
from ..database import DatabaseContext
from ..protocols import DemoEntity
from ..repository_utils import MAX_SQL_VARIABLES, placeholders

logger = logging.getLogger(__name__)


def demo_path(demoid: str, demo_directory: str) -> str:
    """Location of a demo file inside the configured demo directory."""
    return os.path.join(demo_directory, demoid)


class SQLiteDemoRepository:
    """SQLite implementation of DemoRepositoryProtocol."""

    def __init__(self, db: DatabaseContext):
        self._db = db

    def get_all(self) -> List[DemoEntity]:
        """Load every demo with its payload decoded."""
        rows = self._db.fetch_all("SELECT * FROM demos")
        return [self._row_to_entity(row) for row in rows]

    def get(self, demoid: str) -> Optional[DemoEntity]:
        row = self._db.fetch_one(
            "SELECT * FROM demos WHERE demoid = ?",
            (demoid,),
        )
        if not row:
            return None
        return self._row_to_entity(row)

    def get_data_version(self, demoid: str) -> Optional[int]:
        row = self._db.fetch_one(
            "SELECT data_version FROM demos WHERE demoid = ?",
            (demoid,),
        )
        return row["data_version"] if row else None

    def get_mtime(self, demoid: str) -> Optional[int]:
        row = self._db.fetch_one(
            "SELECT mtime FROM demos WHERE demoid = ?",
            (demoid,),
        )
        return row["mtime"] if row else None

    def is_fresh(self, demoid: str, mtime: int) -> bool:
        """Check if the demo was parsed by the latest data version at/after mtime.

        A demo that is not stored is never fresh.
        """
        row = self._db.fetch_one(
            "SELECT data_version, mtime FROM demos WHERE demoid = ?",
            (demoid,),
        )
        if row is None or row["mtime"] is None:
            return False
        return row["data_version"] == LATEST_DATA_VERSION and mtime <= row["mtime"]

    def upsert(self, demoid: str, timestamp: int, mtime: int,
               map_name: str, data: Dict[str, Any]) -> bool:
        """Store freshly parsed demo data unless the stored copy is current.

        Returns True if a row was inserted or updated.
        """
        with self._db.transaction() as conn:
            exists = conn.execute(
                "SELECT 1 FROM demos WHERE demoid = ?", (demoid,)
            ).fetchone()
            if exists is None:
                logger.debug(f"Adding demo data for {demoid}")
                conn.execute(
                    """
                    INSERT INTO demos (demoid, timestamp, mtime, map, data_version, data)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (demoid, timestamp, mtime, map_name, LATEST_DATA_VERSION,
                     encode_payload(data)),
                )
                return True

            if self.is_fresh(demoid, mtime):
                return False

            logger.debug(f"Updating data for demo {demoid}")
            conn.execute(
                """
                UPDATE demos
                SET data = ?, data_version = ?, timestamp = ?, mtime = ?, map = ?
                WHERE demoid = ?
                """,
                (encode_payload(data), LATEST_DATA_VERSION, timestamp, mtime,
                 map_name, demoid),
            )
            return True

    def delete(self, demoid: str) -> bool:
        """Delete a demo. Returns True if deleted."""
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM demos WHERE demoid = ?",
                (demoid,),
            )
            return cursor.rowcount > 0

    def keep_only(self, demoids: Iterable[str]) -> int:
        """Delete every demo whose id is not in `demoids`.

        An empty selection deletes nothing. Returns the number of rows removed.
        """
        keep = set(demoids or ())
        if not keep:
            return 0

        with self._db.transaction() as conn:
            stored = [row["demoid"] for row in conn.execute("SELECT demoid FROM demos")]
            stale = [demoid for demoid in stored if demoid not in keep]
            for chunk in chunked(stale, MAX_SQL_VARIABLES):
                conn.execute(
                    f"DELETE FROM demos WHERE demoid IN ({placeholders(len(chunk))})",
                    chunk,
                )
        if stale:
            logger.info(f"Removed {len(stale)} demos no longer on disk")
        return len(stale)

    def wipe(self) -> int:
        """Delete all demos. Returns the number of rows removed."""
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM demos")
            return cursor.rowcount

    def get_notes(self, demoid: str) -> Optional[str]:
        row = self._db.fetch_one(
            "SELECT notes FROM demos WHERE demoid = ?",
            (demoid,),
        )
        return row["notes"] if row else None

    def set_notes(self, demoid: str, notes: Optional[str]) -> None:
        with self._db.transaction() as conn:
            conn.execute(
                "UPDATE demos SET notes = ? WHERE demoid = ?",
                (notes, demoid),
            )

    def _row_to_entity(self, row) -> DemoEntity:
        """Convert a database row to a DemoEntity."""
        return DemoEntity(
            demoid=row["demoid"],
            timestamp=row["timestamp"],
            mtime=row["mtime"],
            map=row["map"],
            data_version=row["data_version"],
            data=decode_payload(row["data"], row["data_version"]),
            notes=row["notes"],
        )
