"""Shared fixtures for the tennis_players test suite."""

import pytest
from fastapi.testclient import TestClient

from tennis_players.api import app, get_repository
from tennis_players.repository import TennisPlayerRepository


@pytest.fixture
def repository(tmp_path):
    """Repository backed by a fresh SQLite file."""
    repo = TennisPlayerRepository(str(tmp_path / "players.db"))
    repo.initialize_schema()
    return repo


@pytest.fixture
def client(repository):
    """TestClient wired to the temporary repository."""
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()
