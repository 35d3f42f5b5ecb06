"""Tests for config directory resolution."""
from pathlib import Path

from hsbox import config


def test_override_dir_is_created(isolated_config_dir):
    assert not isolated_config_dir.exists()

    app_dir = config.get_app_config_dir()

    assert app_dir == isolated_config_dir
    assert app_dir.is_dir()


def test_db_path_uses_fixed_filename(isolated_config_dir):
    assert config.get_db_path() == str(isolated_config_dir / "headshotbox.sqlite")


def test_xdg_config_home_gets_app_subdirectory(tmp_path, monkeypatch):
    monkeypatch.delenv("HEADSHOTBOX_CONFIG_DIR")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    app_dir = config.get_app_config_dir()

    assert app_dir == tmp_path / "xdg" / "headshotbox"
    assert app_dir.is_dir()


def test_falls_back_to_dot_config_in_home(tmp_path, monkeypatch):
    monkeypatch.delenv("HEADSHOTBOX_CONFIG_DIR")
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

    assert config.get_config_home() == tmp_path / ".config"
    assert config.get_app_config_dir() == tmp_path / ".config" / "headshotbox"
