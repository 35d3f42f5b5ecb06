"""
Shared pytest fixtures for the HeadshotBox test suite.

Every test gets its own config directory under tmp_path; nothing touches
the real ~/.config/headshotbox.

Payload and legacy-database builders live in tests/helpers.py so both
pytest functions and unittest.TestCase classes can use them::

    from tests.helpers import make_demo_data
"""
import pytest


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Point the application config directory at a temporary location."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("HEADSHOTBOX_CONFIG_DIR", str(config_dir))
    return config_dir
