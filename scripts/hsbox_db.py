#!/usr/bin/env python3
"""
Maintenance utility for the HeadshotBox database.

Usage:
    # Show schema version, pending migrations and demo count
    python3 scripts/hsbox_db.py status

    # List the migration steps that would run, without applying them
    python3 scripts/hsbox_db.py plan

    # Create the database if needed and apply pending migrations
    python3 scripts/hsbox_db.py migrate

    # Delete every stored demo so the next scan parses everything again
    python3 scripts/hsbox_db.py wipe-demos

    # Any command against a specific file
    python3 scripts/hsbox_db.py --db /tmp/copy.sqlite status
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to path when run as script
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from hsbox.config import SCHEMA_VERSION, get_db_path
from hsbox.exceptions import HeadshotBoxDBError
from hsbox.repositories import DatabaseContext, RepositoryFactory, SchemaManager

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def show_status(db_path: str) -> int:
    db = DatabaseContext(db_path)
    if not db.exists():
        logger.info(f"No database at {db_path}")
        return 0
    try:
        schema = SchemaManager(db)
        version = schema.get_current_schema_version()
        logger.info(f"Database:       {db_path}")
        logger.info(f"Schema version: {version} (target {SCHEMA_VERSION})")
        logger.info(f"Pending steps:  {len(schema.get_migration_plan())}")
        row = db.fetch_one("SELECT COUNT(*) AS n FROM demos")
        logger.info(f"Demos:          {row['n']}")
    finally:
        db.close()
    return 0


def show_plan(db_path: str) -> int:
    db = DatabaseContext(db_path)
    if not db.exists():
        logger.info(f"No database at {db_path}; it would be created at version {SCHEMA_VERSION}")
        return 0
    try:
        plan = SchemaManager(db).get_migration_plan()
    finally:
        db.close()
    if not plan:
        logger.info("Schema is up to date")
    for step in plan:
        logger.info(f"  v{step.from_version} -> v{step.to_version}  {step.description}")
    return 0


def migrate(db_path: str) -> int:
    repos = RepositoryFactory(db_path, ensure_schema=False)
    try:
        applied = repos.schema.ensure_schema()
        logger.info(f"Applied {len(applied)} migration(s); schema version "
                    f"{repos.schema.get_current_schema_version()}")
    finally:
        repos.close()
    return 0


def wipe_demos(db_path: str) -> int:
    repos = RepositoryFactory(db_path)
    try:
        removed = repos.demos.wipe()
        logger.info(f"Removed {removed} demo(s)")
    finally:
        repos.close()
    return 0


COMMANDS = {
    'status': show_status,
    'plan': show_plan,
    'migrate': migrate,
    'wipe-demos': wipe_demos,
}


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="HeadshotBox database maintenance")
    parser.add_argument('--db', help="Database file (default: headshotbox.sqlite in the config dir)")
    parser.add_argument('command', choices=sorted(COMMANDS))
    args = parser.parse_args(argv)

    db_path = args.db or get_db_path()
    try:
        return COMMANDS[args.command](db_path)
    except HeadshotBoxDBError as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
