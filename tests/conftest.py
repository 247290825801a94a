import os

# Pas de Redis en tests: le lifespan désactive le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from storefront.app import app as fastapi_app

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Aucun accès réel à Supabase pendant les tests
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    supabase = MagicMock(name="supabase")
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", lambda: supabase)
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: supabase)
    return supabase

@pytest.fixture()
def bearer_user(monkeypatch):
    """Token Bearer accepté: get_user_from_token renvoie un utilisateur fixe."""
    user = {"id": "user-1", "email": "creator@example.com"}
    monkeypatch.setattr("storefront.utils.security.get_user_from_token", lambda token: user if token == "good-token" else {})
    return user
