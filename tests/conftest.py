"""
Fixtures compartilhadas dos testes.

Fornece:
- Banco SQLite temporário por teste
- Master Key Fernet gerada por teste
- App Flask (TestingConfig) e test client
- Headers autenticados (Bearer JWT)
"""
import os
import tempfile

# Logs dos testes fora da árvore do projeto (antes de importar os módulos)
os.environ.setdefault("DISCOVERY_LOG_DIR", tempfile.mkdtemp(prefix="netdiscovery-logs-"))

import pytest
from cryptography.fernet import Fernet

from api import create_app
from api.config import TestingConfig
from core import db
from utils.vault import ENV_MASTER_KEY


# ============================================================================
# Ambiente
# ============================================================================

@pytest.fixture(autouse=True)
def master_key(monkeypatch):
    """Master Key nova a cada teste."""
    key = Fernet.generate_key().decode("utf-8")
    monkeypatch.setenv(ENV_MASTER_KEY, key)
    return key


@pytest.fixture(autouse=True)
def db_path(tmp_path, monkeypatch):
    """Banco SQLite isolado; o caminho anterior é restaurado ao final."""
    previous = db.get_db_path()
    path = tmp_path / "discovery_test.db"
    monkeypatch.setenv("DISCOVERY_DB_PATH", str(path))
    db.set_db_path(path)
    db.ensure_schema()
    yield path
    db.set_db_path(previous)


# ============================================================================
# Flask
# ============================================================================

@pytest.fixture
def app(db_path):
    class _Config(TestingConfig):
        DATABASE_PATH = str(db_path)
        DISCOVERY_REPLY_TIMEOUT = 10.0

    application = create_app(_Config)
    yield application
    application.extensions["discovery_bus"].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    """Registra um usuário e devolve o header Authorization com o token."""
    creds = {"username": "operator", "password": "operator-pass"}
    client.post("/users/register", json=creds)
    response = client.post("/users/login", json=creds)
    token = response.get_json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}
