"""Funciones de utilidad del Bank Service: hash de contraseñas (bcrypt) y manejo de JWT."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

from bank_service.errors import HashingError, InvalidToken
from bank_service.schemas import TokenClaims

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class PasswordHasher:
    """Hash bcrypt con sal aleatoria por llamada y factor de coste fijo."""

    def __init__(self, rounds: int = 10):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Genera el hash de una contraseña plana. Dos llamadas con la misma entrada dan hashes distintos."""
        try:
            return self.pwd_context.hash(password)
        except (ValueError, TypeError) as e:
            logger.error(f"Fallo al generar el hash de la contraseña: {e}", exc_info=True)
            raise HashingError() from e

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verifica una contraseña plana contra un hash almacenado. Un hash inválido nunca coincide."""
        try:
            return self.pwd_context.verify(password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Hash almacenado con formato no reconocido.")
            return False


class TokenService:
    """
    Emite y valida tokens de acceso JWT firmados con HS256.

    Args:
        secret: Secreto de firma compartido por todo el proceso. Nunca se registra en logs.
        expire_minutes: Vida del token; 0 emite tokens sin 'exp'.
    """

    def __init__(self, secret: str, expire_minutes: int = 60 * 24):
        if not secret:
            raise ValueError("TokenService requires a non-empty secret")
        self._secret = secret
        self.expire_minutes = expire_minutes

    def __repr__(self) -> str:
        return f"TokenService(expire_minutes={self.expire_minutes})"

    def issue(self, claims: TokenClaims) -> str:
        """
        Genera un token de acceso con los claims del usuario.

        Returns:
            String del JWT codificado.
        """
        to_encode: Dict[str, Any] = claims.model_dump(by_alias=True)
        if self.expire_minutes > 0:
            expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
            to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """
        Decodifica y valida un token JWT.

        Raises:
            InvalidToken: token mal formado, firma inválida, expirado o sin los claims esperados.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError as e:
            # python-jose valida 'exp' y lanza ExpiredSignatureError (subclase de JWTError)
            logger.warning(f"Fallo en decodificación de token: {e}")
            raise InvalidToken() from e

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            logger.warning("Token con claims incompletos o inválidos.")
            raise InvalidToken() from e
