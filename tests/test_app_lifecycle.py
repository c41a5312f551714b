import json
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

import task_api.__main__ as entry
from task_api.generate_openapi import generate_openapi
from task_api.main import create_app
from task_api.repositories import InMemoryRepository, StorageError, get_repository

from .fakes import BrokenRepository


class TestLifespan:
    def test_repository_closed_on_shutdown(self, settings):
        repo = BrokenRepository()
        with TestClient(create_app(settings, repository=repo)) as client:
            assert client.get("/health").status_code == 200
            assert repo.closed is False
        assert repo.closed is True

    def test_memory_backend_opened_from_settings(self, settings):
        with TestClient(create_app(settings)) as client:
            assert isinstance(client.app.state.repository, InMemoryRepository)
            assert client.post("/api/tasks", json={"title": "x"}).status_code == 201

    def test_startup_fails_when_storage_unreachable(self, settings):
        bad = replace(settings, persistence_backend="mongo", mongodb_uri="http://not-a-mongodb-uri", mongodb_timeout_ms=50)
        with pytest.raises(StorageError):
            with TestClient(create_app(bad)):
                pass

    def test_get_repository_memory(self, settings):
        assert isinstance(get_repository(settings), InMemoryRepository)


class TestEntryPoint:
    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(entry, "setup_logging", lambda level: None)

    def test_exits_nonzero_when_storage_unreachable(self, monkeypatch):
        def fail(settings):
            raise StorageError("unreachable")

        monkeypatch.setattr(entry, "get_repository", fail)
        ran = []
        monkeypatch.setattr(entry.uvicorn, "run", lambda *a, **kw: ran.append(True))

        with pytest.raises(SystemExit) as excinfo:
            entry.main()
        assert excinfo.value.code == 1
        assert ran == []

    def test_runs_server_on_configured_port(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "memory")
        monkeypatch.setenv("BACKEND_PORT", "5055")
        monkeypatch.delenv("BACKEND_HOST", raising=False)
        calls = []
        monkeypatch.setattr(entry.uvicorn, "run", lambda app, **kw: calls.append((app, kw)))

        entry.main()

        assert len(calls) == 1
        app, kw = calls[0]
        assert kw["port"] == 5055
        assert kw["host"] == "0.0.0.0"
        assert "/api/tasks" in app.openapi()["paths"]


class TestOpenAPIExport:
    def test_writes_schema_with_tags(self, tmp_path):
        path = generate_openapi(tmp_path / "out" / "openapi.json")
        schema = json.loads(path.read_text(encoding="utf-8"))
        assert "/api/tasks" in schema["paths"]
        assert "/api/tasks/{task_id}" in schema["paths"]
        assert "/health" in schema["paths"]
        assert {t["name"] for t in schema["tags"]} >= {"health", "tasks"}
