"""Configuración de la conexión asíncrona a la base de datos SQLite (archivo local) usando SQLAlchemy."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Tuple

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Clase base para los modelos declarativos (User, Account).
class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite no aplica las claves foráneas a menos que se active en cada conexión.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database(database_url: str) -> Tuple[AsyncEngine, async_sessionmaker]:
    """
    Crea el motor asíncrono y la fábrica de sesiones.
    Se llama una sola vez desde la fábrica de la aplicación; ambos objetos se inyectan
    en el almacén de credenciales en lugar de vivir como variables globales.
    """
    engine = create_async_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    logger.info(f"Motor de base de datos creado ({engine.dialect.name}).")
    return engine, session_factory


async def init_schema(engine: AsyncEngine) -> None:
    """Crea las tablas si no existen. Es idempotente: se ejecuta en cada arranque."""
    # Importa los modelos para registrarlos en Base.metadata
    from bank_service import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified/created.")


@asynccontextmanager
async def session_scope(session_factory: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    """
    Abre una sesión, hace commit al salir y rollback si ocurre cualquier error.
    La sesión siempre se cierra al finalizar.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
