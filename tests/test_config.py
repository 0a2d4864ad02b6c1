from app.core.config import Config


def test_no_cors_origins_by_default(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    assert Config().cors_origins == []


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://hr.acme.com, https://admin.acme.com,")
    assert Config().cors_origins == ["https://hr.acme.com", "https://admin.acme.com"]


def test_testing_environment_is_loaded():
    cfg = Config()
    assert cfg.environment == "testing"
    assert cfg.rate_limit_enabled is False
