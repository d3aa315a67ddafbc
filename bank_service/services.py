"""Servicios de dominio: registro, login y lectura de saldo."""

import logging

from starlette.concurrency import run_in_threadpool

from bank_service.errors import AccountNotFound, InvalidCredentials
from bank_service.models import Account
from bank_service.schemas import LoginRequest, TokenClaims, UserCreate
from bank_service.store import CredentialStore
from bank_service.utils import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


class RegistrationService:
    def __init__(self, store: CredentialStore, hasher: PasswordHasher, allow_banker_self_registration: bool = False):
        self.store = store
        self.hasher = hasher
        self.allow_banker_self_registration = allow_banker_self_registration

    async def register(self, user: UserCreate) -> int:
        """
        Hashes the password and stores the new user.
        Raises EmailAlreadyRegistered on a duplicate email and
        StorageError/HashingError for internal failures.
        """
        logger.info(f"Registration attempt for email: {user.email}")

        is_banker = user.is_banker
        if is_banker and not self.allow_banker_self_registration:
            logger.warning(f"Rol de banquero solicitado por {user.email} sin autorización; se registra como cliente.")
            is_banker = False

        hashed_password = await run_in_threadpool(self.hasher.hash, user.password)
        return await self.store.create_user(user.email, hashed_password, is_banker=is_banker)


class LoginService:
    def __init__(self, store: CredentialStore, hasher: PasswordHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        # Hash de referencia para que un email inexistente cueste lo mismo que una contraseña errónea
        self._dummy_hash = hasher.hash("not-a-real-password")

    async def login(self, credentials: LoginRequest) -> str:
        """Returns a signed access token, or raises InvalidCredentials."""
        logger.info(f"Login attempt for user: {credentials.email}")
        user = await self.store.find_user_by_email(credentials.email)

        stored_hash = user.hashed_password if user else self._dummy_hash
        match = await run_in_threadpool(self.hasher.verify, credentials.password, stored_hash)

        if user is None or not match:
            logger.warning(f"Login failed for user: {credentials.email}")
            raise InvalidCredentials()

        access_token = self.tokens.issue(TokenClaims(user_id=user.id, email=user.email))
        logger.info(f"Login successful for user_id: {user.id}")
        return access_token


class BalanceReader:
    def __init__(self, store: CredentialStore):
        self.store = store

    async def get_account(self, claims: TokenClaims) -> Account:
        account = await self.store.find_account_by_user_id(claims.user_id)
        if account is None:
            logger.warning(f"Cuenta no encontrada para user_id: {claims.user_id}")
            raise AccountNotFound()
        return account
