"""
DatabaseContext - Connection management for SQLite repositories.
"""
import os
import re
import sqlite3
import logging
import threading
from contextlib import contextmanager
from typing import Generator, List, Optional

logger = logging.getLogger(__name__)

MEMORY_DB = ':memory:'

# Statement separator used by the bundled .sql scripts
_STATEMENT_SPLIT = re.compile(r';\r?\n')


def split_sql_script(script: str) -> List[str]:
    """Split a SQL script into individual statements, dropping blanks."""
    statements = []
    for statement in _STATEMENT_SPLIT.split(script):
        statement = statement.strip().rstrip(';').strip()
        if statement:
            statements.append(statement)
    return statements


class DatabaseContext:
    """Owns the single SQLite connection shared by all repositories.

    The connection is opened lazily, so constructing a context never creates
    the database file. It runs in autocommit mode; transaction() issues
    BEGIN/COMMIT/ROLLBACK explicitly so DDL and DML share one boundary.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def is_memory(self) -> bool:
        return self.db_path == MEMORY_DB

    def exists(self) -> bool:
        """Check whether the database has already been created.

        A zero-length file is an empty SQLite database and counts as absent.
        """
        if self.is_memory:
            return self._conn is not None and self.table_exists('meta')
        return os.path.exists(self.db_path) and os.path.getsize(self.db_path) > 0

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.db_path,
            timeout=5.0,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        self._enable_wal_mode(conn)
        return conn

    def _enable_wal_mode(self, conn: sqlite3.Connection) -> None:
        """Enable WAL mode for file databases.

        The 5-second busy timeout prevents immediate failures on brief lock
        contention with another process holding the file.
        """
        if self.is_memory:
            return
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")  # 5 second timeout
            conn.execute("PRAGMA synchronous=NORMAL")
        except sqlite3.Error as e:
            logger.warning(f"Could not enable WAL mode: {e}")

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Get the shared connection, opening it on first use."""
        with self._lock:
            if self._conn is None:
                self._conn = self._open()
            yield self._conn

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Run the block inside one transaction.

        A transaction() opened while another is active on the same context
        joins the outer one; only the outermost block commits or rolls back.
        """
        with self.connect() as conn:
            if conn.in_transaction:
                yield conn
                return
            conn.execute("BEGIN")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                # SQLite may already have rolled back on some errors
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    def execute_script(self, script: str, transaction: bool = True) -> None:
        """Execute every statement of a SQL script in order.

        With transaction=False each statement commits on its own, which is
        what scripts containing transaction-incompatible statements need.
        """
        statements = split_sql_script(script)
        if transaction:
            with self.transaction() as conn:
                for statement in statements:
                    conn.execute(statement)
        else:
            with self.connect() as conn:
                for statement in statements:
                    conn.execute(statement)

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a single SQL statement in its own transaction."""
        with self.transaction() as conn:
            return conn.execute(sql, params)

    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute a query and fetch one row."""
        with self.connect() as conn:
            return conn.execute(sql, params).fetchone()

    def fetch_all(self, sql: str, params: tuple = ()) -> list:
        """Execute a query and fetch all rows."""
        with self.connect() as conn:
            return conn.execute(sql, params).fetchall()

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists in the database."""
        row = self.fetch_one(
            "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,)
        )
        return row is not None

    def column_names(self, table_name: str) -> List[str]:
        """List the columns of a table."""
        rows = self.fetch_all(f"PRAGMA table_info({table_name})")
        return [row[1] for row in rows]

    def close(self) -> None:
        """Close the connection if open. Safe to call repeatedly."""
        with self._lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                except sqlite3.Error as e:
                    logger.debug(f"Error closing connection for {self.db_path}: {e}")
                self._conn = None
