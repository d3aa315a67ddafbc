# tests/conftest.py
import uuid

import pytest
from fastapi.testclient import TestClient

from bank_service.config import Settings
from bank_service.main import create_app

TEST_SECRET = "test-secret-no-usar-en-produccion"
TEST_PASSWORD = "password123"


@pytest.fixture
def settings(tmp_path):
    """Configuración aislada por prueba: base de datos SQLite temporal y bcrypt barato."""
    return Settings(
        access_token_secret=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'Bank.db'}",
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # El context manager ejecuta el lifespan (creación de tablas)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def test_email():
    # Email único por prueba para evitar conflictos
    return f"testuser_{uuid.uuid4().hex[:8]}@example.com"


@pytest.fixture
def test_user_token(client, test_email):
    """
    1. Registra un nuevo usuario único.
    2. Inicia sesión para obtener un token.
    3. Devuelve el email, el id y el token.
    """
    # --- Registro ---
    r_register = client.post("/register", json={"email": test_email, "password": TEST_PASSWORD, "isBanker": False})
    assert r_register.status_code == 200, r_register.text

    # --- Login ---
    r_login = client.post("/login", json={"email": test_email, "password": TEST_PASSWORD})
    assert r_login.status_code == 200, r_login.text
    token = r_login.json()["accessToken"]

    claims = client.app.state.token_service.verify(token)
    return {"email": test_email, "user_id": claims.user_id, "token": token}


# Fixture de utilidad para las cabeceras de autorización
@pytest.fixture
def auth_headers(test_user_token):
    return {"Authorization": f"Bearer {test_user_token['token']}"}


@pytest.fixture
def create_account(client):
    """Crea una cuenta directamente en el almacén (no hay endpoint HTTP para ello)."""
    def _create(user_id: int, amount: float = 0.0, transaction_type: str = "open") -> int:
        return client.portal.call(client.app.state.store.create_account, user_id, amount, transaction_type)
    return _create
