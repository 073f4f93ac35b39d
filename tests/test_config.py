"""Unit tests for configuration, logging and the /health endpoint."""

from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient


class TestSettings:
    """Settings loading via pydantic-settings."""

    def test_settings_loads_env(self) -> None:
        env_overrides = {
            "LEDGER_BACKEND": "memory",
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_KEY": "test-key-123",
            "ENFORCE_OWNERSHIP": "false",
        }
        with patch.dict("os.environ", env_overrides, clear=False):
            from app.core.config import Settings

            s = Settings()
            assert s.LEDGER_BACKEND == "memory"
            assert s.SUPABASE_URL == "https://test.supabase.co"
            assert s.SUPABASE_KEY == "test-key-123"
            assert s.ENFORCE_OWNERSHIP is False

    def test_settings_defaults(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            from app.core.config import Settings

            s = Settings(_env_file=None)
            assert s.LEDGER_BACKEND == "supabase"
            assert s.LEDGER_TABLE == "ledger_entries"
            assert s.ENFORCE_OWNERSHIP is True
            assert s.ALLOWED_ORIGINS == "*"
            assert s.LOG_LEVEL == "INFO"


class TestHealthEndpoint:
    """GET /health reflects the ledger probe."""

    def test_health_connected(self) -> None:
        ledger = MagicMock()
        ledger.is_available = AsyncMock(return_value=True)

        with patch("app.routers.health.get_ledger", return_value=ledger):
            from app.main import app

            with TestClient(app) as client:
                response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["ledger"] == "connected"

    def test_health_probe_false(self) -> None:
        ledger = MagicMock()
        ledger.is_available = AsyncMock(return_value=False)

        with patch("app.routers.health.get_ledger", return_value=ledger):
            from app.main import app

            with TestClient(app) as client:
                response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["ledger"] == "disconnected"

    def test_health_probe_raises(self) -> None:
        with patch(
            "app.routers.health.get_ledger",
            side_effect=ValueError("Unknown LEDGER_BACKEND"),
        ):
            from app.main import app

            with TestClient(app) as client:
                response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"


class TestLogging:
    """Structured logging configuration."""

    def test_setup_logging_configures_root_logger(self) -> None:
        import logging

        from app.core.logging import setup_logging

        setup_logging()
        root = logging.getLogger()
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert handler.formatter is not None
        fmt = handler.formatter._fmt
        assert "%(levelname)" in fmt
        assert "%(asctime)" in fmt
        assert "%(name)" in fmt

    def test_setup_logging_is_idempotent(self) -> None:
        import logging

        from app.core.logging import setup_logging

        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1
