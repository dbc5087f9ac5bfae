import pytest
from fastapi.testclient import TestClient

from ejes.core.config import get_settings
from ejes.main import create_app
from ejes.services.storage import MemStorage


def test_injected_storage_is_used(data_dir, mem_storage):
    client = TestClient(create_app(storage=mem_storage))
    r = client.post(
        "/api/exercises",
        json={"sectionId": 1, "tema": "t", "enunciado": "e", "ejercicio": "x", "order": 1},
    )
    assert r.status_code == 201
    assert mem_storage.get_exercise(1).tema == "t"
    assert not data_dir.exists()


def test_fallback_to_memory_when_data_dir_unusable(tmp_path, monkeypatch, data_dir):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setenv("DATA_DIR", str(blocker / "ejes"))
    get_settings.cache_clear()

    app = create_app()
    assert isinstance(app.state.storage, MemStorage)
    r = TestClient(app).get("/api/materials")
    assert r.status_code == 200
    assert len(r.json()) == 1
    assert TestClient(app).get("/health").json()["storage"] == "memory"


def test_serves_built_client(tmp_path, monkeypatch, data_dir):
    dist = tmp_path / "public"
    dist.mkdir()
    (dist / "index.html").write_text("<html>ejes</html>", encoding="utf-8")
    monkeypatch.setenv("STATIC_DIR", str(dist))
    get_settings.cache_clear()

    client = TestClient(create_app())
    assert "ejes" in client.get("/").text
    assert "ejes" in client.get("/materials").text
    assert client.get("/api/materials").status_code == 200


def test_missing_client_build_fails(tmp_path, monkeypatch, data_dir):
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "nope"))
    get_settings.cache_clear()

    with pytest.raises(RuntimeError, match="Could not find the build directory"):
        create_app()
