"""Builders for demo payloads and legacy databases used across tests."""
import json
import sqlite3

ALICE = 76561197960265728
BOB = 76561197960265729


def make_demo_data(players=None, score=(16, 10), surrendered=False, rounds=None):
    """Build a demo payload shaped like the parser's output."""
    if players is None:
        players = {
            str(ALICE): {"name": "alice", "team": 2},
            str(BOB): {"name": "bob", "team": 3},
        }
    if rounds is None:
        rounds = [{"number": 1, "tick_start": 100, "tick_end": 2000},
                  {"number": 2, "tick_start": 2100, "tick_end": 4000}]
    return {
        "players": players,
        "score": {"score": list(score), "surrendered": surrendered},
        "rounds": rounds,
    }


def make_v1_database(path, demos):
    """Create a schema version 1 database by hand.

    `demos` is a list of (demoid, timestamp, mtime, map, data) tuples; mtime
    is stored as given (the v1 column has no type affinity), so strings
    reproduce what old releases wrote.
    """
    conn = sqlite3.connect(str(path))
    conn.executescript("""
        CREATE TABLE meta (key TEXT PRIMARY KEY, value TEXT);
        CREATE TABLE demos (
            demoid TEXT PRIMARY KEY,
            timestamp INTEGER,
            mtime,
            map TEXT,
            data_version INTEGER,
            data TEXT
        );
        INSERT INTO meta (key, value) VALUES ('schema_version', '1');
        INSERT INTO meta (key, value) VALUES ('config', '{"demo_directory": "/demos"}');
    """)
    conn.executemany(
        "INSERT INTO demos (demoid, timestamp, mtime, map, data_version, data) "
        "VALUES (?, ?, ?, ?, 1, ?)",
        [(demoid, timestamp, mtime, map_name, json.dumps(data))
         for demoid, timestamp, mtime, map_name, data in demos],
    )
    conn.commit()
    conn.close()
