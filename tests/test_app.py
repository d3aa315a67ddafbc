# tests/test_app.py
import pytest

from bank_service.config import Settings
from bank_service.main import create_app


def test_health(client):
    r = client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "bank_service"}


def test_metrics_count_requests(client):
    client.get("/health")
    r = client.get("/metrics")

    assert r.status_code == 200
    assert "bank_requests_total" in r.text
    assert 'endpoint="/health"' in r.text


def test_unknown_route_uses_message_shape(client):
    r = client.get("/nope")

    assert r.status_code == 404
    assert "message" in r.json()


def test_cors_allows_any_origin_by_default(client):
    r = client.get("/health", headers={"Origin": "http://example.com"})

    assert r.headers.get("access-control-allow-origin") == "*"


# --- Configuración ---

def test_settings_from_env(monkeypatch):
    monkeypatch.setattr("bank_service.config.load_dotenv", lambda: False)
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "s3cret")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "0")
    monkeypatch.setenv("ALLOW_BANKER_SELF_REGISTRATION", "true")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost, http://localhost:3001")

    settings = Settings.from_env()

    assert settings.access_token_secret == "s3cret"
    assert settings.access_token_expire_minutes == 0
    assert settings.allow_banker_self_registration is True
    assert settings.cors_origins == ["http://localhost", "http://localhost:3001"]
    assert settings.bcrypt_rounds == 10
    assert "s3cret" not in repr(settings)


def test_missing_secret_fails_at_startup(monkeypatch):
    monkeypatch.delenv("ACCESS_TOKEN_SECRET", raising=False)
    monkeypatch.setattr("bank_service.config.load_dotenv", lambda: False)

    with pytest.raises(EnvironmentError):
        create_app()
