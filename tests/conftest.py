"""Shared fixtures: a fresh SQLite database per test."""

import pytest
from fastapi.testclient import TestClient

from knight_service.config import get_settings
from knight_service.main import create_app


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'knights.sqlite'}"
    monkeypatch.setenv("KNIGHTS_DATABASE_URL", url)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


@pytest.fixture
def client(database_url):
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def knight_body():
    return {
        "name": "Lancelot",
        "nickname": "K_lancelot",
        "birthday": "1990-01-01T00:00:00.000Z",
        "weapons": [
            {"name": "Sword", "mod": 3, "attr": "strength", "equipped": True}
        ],
        "attributes": {
            "strength": 10,
            "dexterity": 10,
            "constitution": 10,
            "intelligence": 10,
            "wisdom": 10,
            "charisma": 10,
        },
        "keyAttribute": "strength",
    }
