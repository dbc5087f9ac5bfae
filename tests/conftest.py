import pytest
from fastapi.testclient import TestClient

from ejes.core.config import get_settings
from ejes.main import create_app
from ejes.services.storage import MemStorage


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """
    DATA_DIR temporaire (isolé) + quelques variables d'env forcées pour les tests.
    """
    data = tmp_path / "ejes"
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("APP_NAME", "Ejes Study Tracker (tests)")
    monkeypatch.setenv("DATA_DIR", str(data))
    monkeypatch.setenv("API_KEY", "change_me")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost")
    for name in ("VERCEL", "STATIC_DIR", "IMPROVEMENTS_FILE"):
        monkeypatch.delenv(name, raising=False)

    # IMPORTANT: vider le cache des settings pour prendre en compte les env
    get_settings.cache_clear()
    yield data
    get_settings.cache_clear()


@pytest.fixture
def test_client(data_dir):
    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def mem_storage():
    return MemStorage()
