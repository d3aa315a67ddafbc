"""Dependencias de FastAPI: servicios inyectados y guardia de autenticación (Auth Gate)."""

import logging
from typing import Optional

from fastapi import Header, Request

from bank_service.errors import MissingToken
from bank_service.schemas import TokenClaims
from bank_service.services import BalanceReader, LoginService, RegistrationService
from bank_service.utils import TokenService

logger = logging.getLogger(__name__)


# --- Servicios (construidos una vez en create_app y guardados en app.state) ---

def get_registration_service(request: Request) -> RegistrationService:
    return request.app.state.registration_service


def get_login_service(request: Request) -> LoginService:
    return request.app.state.login_service


def get_balance_reader(request: Request) -> BalanceReader:
    return request.app.state.balance_reader


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


# --- Auth Gate ---

def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Devuelve el token de una cabecera 'Bearer <token>', o None si no lo hay."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def require_user(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> TokenClaims:
    """
    Valida el token Bearer antes de permitir el acceso a una ruta protegida.
    Cabecera ausente o sin token -> 401; token inválido o expirado -> 403.
    Los claims decodificados quedan en request.state.user.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        logger.warning(f"Acceso sin token a {request.url.path}")
        raise MissingToken()

    # TokenService.verify lanza InvalidToken (403)
    claims = get_token_service(request).verify(token)
    request.state.user = claims
    return claims
