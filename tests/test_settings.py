import pytest

from task_api.settings import DEFAULT_MONGODB_URI, DEFAULT_PORT, get_settings

_ENV = (
    "BACKEND_PORT",
    "PORT",
    "BACKEND_HOST",
    "MONGODB_URI",
    "DATABASE_URL",
    "MONGODB_TIMEOUT_MS",
    "PERSISTENCE_BACKEND",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        s = get_settings()
        assert s.port == DEFAULT_PORT == 3000
        assert s.host == "0.0.0.0"
        assert s.mongodb_uri == DEFAULT_MONGODB_URI
        assert s.mongodb_timeout_ms == 5000
        assert s.persistence_backend == "mongo"
        assert s.cors_allow_origins == ["*"]
        assert s.log_level == "INFO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BACKEND_PORT", "8080")
        monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017/tasks")
        monkeypatch.setenv("PERSISTENCE_BACKEND", "Memory")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = get_settings()
        assert s.port == 8080
        assert s.mongodb_uri == "mongodb://db:27017/tasks"
        assert s.persistence_backend == "memory"
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert s.log_level == "DEBUG"

    def test_fallback_variables(self, monkeypatch):
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("DATABASE_URL", "mongodb://other:27017/x")
        s = get_settings()
        assert s.port == 9000
        assert s.mongodb_uri == "mongodb://other:27017/x"

    def test_primary_variables_win(self, monkeypatch):
        monkeypatch.setenv("BACKEND_PORT", "4000")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("MONGODB_URI", "mongodb://primary/db")
        monkeypatch.setenv("DATABASE_URL", "mongodb://secondary/db")
        s = get_settings()
        assert s.port == 4000
        assert s.mongodb_uri == "mongodb://primary/db"

    @pytest.mark.parametrize("raw", ["abc", "0", "70000", ""])
    def test_invalid_port_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("BACKEND_PORT", raw)
        assert get_settings().port == DEFAULT_PORT

    def test_unknown_backend_and_level_fall_back(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "cassandra")
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        s = get_settings()
        assert s.persistence_backend == "mongo"
        assert s.log_level == "INFO"
