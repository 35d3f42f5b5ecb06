"""Shared fixtures for repository tests."""
import pytest

from hsbox.repositories import RepositoryFactory

pytestmark = pytest.mark.integration


@pytest.fixture
def db_path(tmp_path):
    """Path for a database that does not exist yet."""
    return str(tmp_path / "headshotbox.sqlite")


@pytest.fixture
def repos(db_path):
    r = RepositoryFactory(db_path)
    yield r
    r.close()
