"""Tests for DatabaseContext connection and transaction handling."""
import os
import sqlite3
import threading
import unittest

from hsbox.repositories.database import DatabaseContext, split_sql_script


class TestDatabaseContext(unittest.TestCase):
    """Test DatabaseContext connection management and WAL mode."""

    def setUp(self):
        self.db = DatabaseContext(":memory:")
        with self.db.connect() as conn:
            conn.execute("CREATE TABLE t (val TEXT)")

    def tearDown(self):
        self.db.close()

    def count(self):
        return self.db.fetch_one("SELECT COUNT(*) FROM t")[0]

    def test_connection_reused(self):
        with self.db.connect() as conn1:
            id1 = id(conn1)
        with self.db.connect() as conn2:
            id2 = id(conn2)
        self.assertEqual(id1, id2)

    def test_connection_has_row_factory(self):
        self.db.execute("INSERT INTO t VALUES ('alice')")
        row = self.db.fetch_one("SELECT * FROM t")
        self.assertEqual(row['val'], 'alice')

    def test_commit_on_success(self):
        with self.db.transaction() as conn:
            conn.execute("INSERT INTO t VALUES ('hello')")
        self.assertEqual(self.count(), 1)

    def test_rollback_on_exception(self):
        self.db.execute("INSERT INTO t VALUES ('keep')")

        with self.assertRaises(ValueError):
            with self.db.transaction() as conn:
                conn.execute("INSERT INTO t VALUES ('discard')")
                raise ValueError("force rollback")

        self.assertEqual(self.count(), 1)

    def test_ddl_rolls_back_with_transaction(self):
        with self.assertRaises(ValueError):
            with self.db.transaction() as conn:
                conn.execute("ALTER TABLE t ADD COLUMN extra TEXT")
                raise ValueError("force rollback")

        self.assertNotIn('extra', self.db.column_names('t'))

    def test_nested_transaction_joins_outer(self):
        with self.assertRaises(ValueError):
            with self.db.transaction() as conn:
                with self.db.transaction() as inner:
                    inner.execute("INSERT INTO t VALUES ('inner')")
                conn.execute("INSERT INTO t VALUES ('outer')")
                raise ValueError("force rollback")

        self.assertEqual(self.count(), 0)

    def test_execute_script_in_transaction_is_all_or_nothing(self):
        script = "INSERT INTO t VALUES ('a');\nINSERT INTO missing VALUES ('b');\n"
        with self.assertRaises(sqlite3.OperationalError):
            self.db.execute_script(script)
        self.assertEqual(self.count(), 0)

    def test_execute_script_without_transaction_keeps_earlier_statements(self):
        script = "INSERT INTO t VALUES ('a');\nINSERT INTO missing VALUES ('b');\n"
        with self.assertRaises(sqlite3.OperationalError):
            self.db.execute_script(script, transaction=False)
        self.assertEqual(self.count(), 1)

    def test_close_idempotent(self):
        self.db.close()
        self.db.close()

    def test_close_then_reopen(self):
        self.db.close()
        with self.db.connect() as conn:
            self.assertEqual(conn.execute("SELECT 1").fetchone()[0], 1)


def test_split_sql_script_drops_blank_statements():
    script = "CREATE TABLE a (x);\n\nCREATE TABLE b (y);\r\nINSERT INTO a VALUES (1);\n"
    assert split_sql_script(script) == [
        "CREATE TABLE a (x)",
        "CREATE TABLE b (y)",
        "INSERT INTO a VALUES (1)",
    ]


def test_constructing_context_does_not_create_file(tmp_path):
    path = str(tmp_path / "lazy.sqlite")
    db = DatabaseContext(path)
    assert not db.exists()
    assert not os.path.exists(path)
    db.close()


def test_wal_mode_enabled_for_files(tmp_path):
    db = DatabaseContext(str(tmp_path / "wal.sqlite"))
    try:
        mode = db.fetch_one("PRAGMA journal_mode")[0]
        assert mode == 'wal'
    finally:
        db.close()


def test_empty_file_counts_as_absent(tmp_path):
    path = tmp_path / "empty.sqlite"
    path.touch()
    assert not DatabaseContext(str(path)).exists()


def test_shared_connection_usable_from_other_threads():
    db = DatabaseContext(":memory:")
    db.execute("CREATE TABLE t (val INTEGER)")
    errors = []

    def worker(n):
        try:
            for i in range(20):
                db.execute("INSERT INTO t VALUES (?)", (n * 100 + i,))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert db.fetch_one("SELECT COUNT(*) FROM t")[0] == 80
    db.close()
