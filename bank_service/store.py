"""Almacén de credenciales: acceso asíncrono a las tablas 'users' y 'accounts'."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from bank_service.db import init_schema, session_scope
from bank_service.errors import EmailAlreadyRegistered, StorageError
from bank_service.models import Account, User

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Único propietario de las filas de usuarios y cuentas.
    Cada operación abre su propia sesión y toca como máximo una fila.
    """

    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker):
        self.engine = engine
        self.session_factory = session_factory

    async def init_schema(self) -> None:
        await init_schema(self.engine)

    async def create_user(self, email: str, hashed_password: str, is_banker: bool = False) -> int:
        """
        Inserta un usuario y devuelve su id.

        Raises:
            EmailAlreadyRegistered: el email ya existe (no se crea ninguna fila).
            StorageError: cualquier otro fallo de la base de datos.
        """
        new_user = User(email=email, hashed_password=hashed_password, is_banker=is_banker)
        try:
            async with session_scope(self.session_factory) as session:
                session.add(new_user)
                await session.flush()
                user_id = new_user.id
        except IntegrityError as e:
            logger.warning(f"Registro rechazado: el email {email} ya existe.")
            raise EmailAlreadyRegistered() from e
        except SQLAlchemyError as e:
            logger.error(f"Database error during user creation for email {email}: {e}", exc_info=True)
            raise StorageError() from e

        logger.info(f"User created with ID: {user_id} for email: {email}")
        return user_id

    async def find_user_by_email(self, email: str) -> Optional[User]:
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(select(User).where(User.email == email))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error looking up user {email}: {e}", exc_info=True)
            raise StorageError() from e

    async def find_account_by_user_id(self, user_id: int) -> Optional[Account]:
        """Devuelve la primera cuenta (menor id) del usuario, o None si no tiene."""
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(
                    select(Account).where(Account.user_id == user_id).order_by(Account.id).limit(1)
                )
                return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Database error reading account for user_id {user_id}: {e}", exc_info=True)
            raise StorageError() from e

    async def create_account(self, user_id: int, amount: float = 0.0, transaction_type: str = "open") -> int:
        """
        Crea una cuenta para un usuario existente. No hay endpoint HTTP para esto;
        se usa para cargar cuentas desde fuera del servicio.
        """
        account = Account(user_id=user_id, amount=amount, transaction_type=transaction_type)
        try:
            async with session_scope(self.session_factory) as session:
                session.add(account)
                await session.flush()
                account_id = account.id
        except SQLAlchemyError as e:
            # Incluye IntegrityError por clave foránea (usuario inexistente)
            logger.error(f"No se pudo crear la cuenta para user_id {user_id}: {e}", exc_info=True)
            raise StorageError() from e

        logger.info(f"Account {account_id} created for user_id: {user_id}")
        return account_id
