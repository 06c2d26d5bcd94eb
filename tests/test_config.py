"""Tests for settings loading."""

from todo_client.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("API_BASE_URL", "HTTP_TIMEOUT_SEC", "TOKEN_SLOT"):
            monkeypatch.delenv(var, raising=False)
        s = Settings(_env_file=None)
        assert s.API_BASE_URL == "http://localhost:8000"
        assert s.HTTP_TIMEOUT_SEC is None
        assert s.TOKEN_SLOT == "auth-token"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://todo.example.com")
        monkeypatch.setenv("HTTP_TIMEOUT_SEC", "2.5")
        s = Settings(_env_file=None)
        assert s.API_BASE_URL == "https://todo.example.com"
        assert s.HTTP_TIMEOUT_SEC == 2.5
