"""Schema management for the HeadshotBox database.

Handles table creation and schema migrations.

A fresh database is created directly at SCHEMA_VERSION from create.sql.
Existing databases are walked up the MIGRATIONS chain one step at a time;
each step commits its own version bump so an interrupted upgrade resumes
from the last completed step on the next startup.
"""
import os
import sqlite3
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from hsbox.config import SCHEMA_VERSION
from hsbox.exceptions import MigrationError, MigrationPathError, SchemaInitError
from hsbox.payload import decode_payload, is_half_parsed
from hsbox.utils import chunked
from .database import DatabaseContext
from .migrations import CREATE_SCRIPT, load_script
from .repository_utils import MAX_SQL_VARIABLES, placeholders
from .sqlite.meta_repository import SQLiteMetaRepository

logger = logging.getLogger(__name__)

# v1: meta and demos tables
# v2: steamids cache, demos.notes; half-parsed demos flagged for reparse
# v3: demos.mtime normalized to integers


@dataclass(frozen=True)
class Migration:
    """One step of the schema ladder.

    `script` names a bundled SQL file run before the step's transaction,
    statement by statement; it must be safe to run again. `procedure` runs
    inside the transaction that also records `to_version`.
    """
    from_version: int
    to_version: int
    procedure: Callable[[sqlite3.Connection], None]
    description: str
    script: Optional[str] = None


def normalize_mtime(value: Any) -> int:
    """Coerce a stored mtime to an integer.

    Older rows may hold the mtime as text, sometimes with a fractional part.
    NULL counts as never parsed.
    """
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return int(float(text))


def _migrate_v2_flag_half_parsed_demos(conn: sqlite3.Connection) -> None:
    """Migration v2: Add demos.notes and mark half-parsed demos as stale.

    Setting mtime to 0 makes the next directory scan treat these demos as
    out of date and parse them again.
    """
    columns = [row[1] for row in conn.execute("PRAGMA table_info(demos)").fetchall()]
    if 'notes' not in columns:
        conn.execute("ALTER TABLE demos ADD COLUMN notes TEXT")

    rows = conn.execute("SELECT demoid, data FROM demos").fetchall()
    demoids = [row['demoid'] for row in rows if is_half_parsed(decode_payload(row['data']))]

    for chunk in chunked(demoids, MAX_SQL_VARIABLES):
        conn.execute(
            f"UPDATE demos SET mtime = 0 WHERE demoid IN ({placeholders(len(chunk))})",
            chunk,
        )
    if demoids:
        logger.info(f"Flagged {len(demoids)} half-parsed demos for reparsing")


def _migrate_v3_normalize_mtime(conn: sqlite3.Connection) -> None:
    """Migration v3: Rewrite every demos.mtime as an integer."""
    rows = conn.execute("SELECT demoid, mtime FROM demos").fetchall()
    conn.executemany(
        "UPDATE demos SET mtime = ? WHERE demoid = ?",
        [(normalize_mtime(row['mtime']), row['demoid']) for row in rows],
    )


MIGRATIONS: List[Migration] = [
    Migration(1, 2, _migrate_v2_flag_half_parsed_demos,
              "Add steamids cache and demo notes, flag half-parsed demos",
              script='migrate_1_to_2.sql'),
    Migration(2, 3, _migrate_v3_normalize_mtime,
              "Normalize demo mtimes to integers"),
]


def compute_plan(current: int, target: int,
                 migrations: Sequence[Migration] = MIGRATIONS) -> List[Migration]:
    """Chain migrations from `current` up to `target`.

    Raises MigrationPathError when some version on the way has no outgoing
    step, or when the table loops back on itself.
    """
    steps = {m.from_version: m for m in migrations}
    plan: List[Migration] = []
    version = current
    while version != target:
        step = steps.get(version)
        if step is None or len(plan) >= len(steps):
            raise MigrationPathError(current, target, version)
        plan.append(step)
        version = step.to_version
    return plan


class SchemaManager:
    """Manages database schema creation and migrations.

    Call ensure_schema() at startup to create a missing database and bring
    an existing one up to the target version.
    """

    def __init__(self, db: DatabaseContext,
                 migrations: Sequence[Migration] = MIGRATIONS,
                 target_version: int = SCHEMA_VERSION):
        self._db = db
        self._meta = SQLiteMetaRepository(db)
        self.migrations = list(migrations)
        self.target_version = target_version

    def ensure_schema(self) -> List[Migration]:
        """Create the database if absent, then run pending migrations."""
        self.initialize_if_absent()
        return self.upgrade()

    def initialize_if_absent(self) -> bool:
        """Create the current schema when the database does not exist yet.

        Returns True if the schema was created.
        """
        if self._db.exists():
            return False

        logger.info(f"Initializing fresh database at {self._db.db_path}")
        try:
            self._db.execute_script(load_script(CREATE_SCRIPT))
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Could not create database schema: {e}")
            self._discard_partial_database()
            raise SchemaInitError(f"Could not create database schema: {e}") from e
        return True

    def _discard_partial_database(self) -> None:
        self._db.close()
        if not self._db.is_memory and os.path.exists(self._db.db_path):
            os.remove(self._db.db_path)

    def get_current_schema_version(self) -> int:
        """Get the schema version recorded in the meta table."""
        return self._meta.get_schema_version()

    def get_migration_plan(self) -> List[Migration]:
        return compute_plan(self.get_current_schema_version(), self.target_version,
                            self.migrations)

    def apply_plan(self, plan: Sequence[Migration]) -> None:
        """Apply migration steps in order, committing after each one.

        A failed step is rolled back and stops the upgrade; the recorded
        version stays at the last step that committed.
        """
        for step in plan:
            logger.warning(
                f"Migrating from schema version {step.from_version} to {step.to_version}"
            )
            try:
                if step.script:
                    self._db.execute_script(load_script(step.script), transaction=False)
                with self._db.transaction() as conn:
                    step.procedure(conn)
                    self._meta.set_schema_version(step.to_version)
            except Exception as e:
                logger.error(f"Migration v{step.to_version} failed: {e}")
                raise MigrationError(step.from_version, step.to_version, str(e)) from e
            logger.info(f"Applied migration v{step.to_version}: {step.description}")

    def upgrade(self) -> List[Migration]:
        """Run any pending schema migrations. Returns the applied steps."""
        plan = self.get_migration_plan()
        if plan:
            logger.info(
                f"Running database migrations from version {plan[0].from_version} "
                f"to {self.target_version}"
            )
            self.apply_plan(plan)
        return plan
