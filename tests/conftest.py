from __future__ import annotations

from dataclasses import replace
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from task_api.main import create_app
from task_api.repositories import InMemoryRepository
from task_api.settings import Settings, get_settings

from .fakes import BrokenRepository


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    for name in ("BACKEND_PORT", "PORT", "MONGODB_URI", "DATABASE_URL", "CORS_ALLOW_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return replace(get_settings(), persistence_backend="memory")


@pytest.fixture()
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture()
def client(settings: Settings, repository: InMemoryRepository) -> Iterator[TestClient]:
    # Entering the context runs the app lifespan (repository attach/close)
    with TestClient(create_app(settings, repository=repository)) as c:
        yield c


@pytest.fixture()
def broken_repository() -> BrokenRepository:
    return BrokenRepository()


@pytest.fixture()
def broken_client(settings: Settings, broken_repository: BrokenRepository) -> Iterator[TestClient]:
    with TestClient(create_app(settings, repository=broken_repository)) as c:
        yield c
