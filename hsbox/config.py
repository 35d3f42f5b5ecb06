"""
Configuration for the HeadshotBox database location.
Resolves the application config directory from the environment.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_DIR_NAME = 'headshotbox'
DB_FILENAME = 'headshotbox.sqlite'

# Data format version produced by the current demo parser
LATEST_DATA_VERSION = 1

# Schema version created by migrations/create.sql
SCHEMA_VERSION = 3


def get_config_home() -> Path:
    """Base config location: $XDG_CONFIG_HOME, or ~/.config."""
    xdg = os.environ.get('XDG_CONFIG_HOME')
    if xdg:
        return Path(xdg)
    return Path.home() / '.config'


def get_app_config_dir() -> Path:
    """Get the application config directory, creating it if missing.

    HEADSHOTBOX_CONFIG_DIR overrides the whole directory; otherwise it is
    the `headshotbox` subdirectory of the base config location.
    """
    override = os.environ.get('HEADSHOTBOX_CONFIG_DIR')
    app_dir = Path(override) if override else get_config_home() / APP_DIR_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_db_path() -> str:
    """Get the database path inside the application config directory."""
    return str(get_app_config_dir() / DB_FILENAME)
