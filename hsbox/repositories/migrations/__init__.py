"""
SQL scripts bundled with the repository layer.
"""
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent

CREATE_SCRIPT = 'create.sql'


def load_script(name: str) -> str:
    """Read a bundled SQL script by file name."""
    return (SCRIPT_DIR / name).read_text()
