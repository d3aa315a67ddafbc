# tests/test_store.py
"""Pruebas del almacén de credenciales contra un archivo SQLite temporal."""

import asyncio

import pytest

from bank_service.db import create_database
from bank_service.errors import EmailAlreadyRegistered, StorageError
from bank_service.store import CredentialStore


def run_with_store(tmp_path, scenario):
    """Crea un almacén nuevo, ejecuta el escenario y libera el motor."""
    async def _main():
        engine, session_factory = create_database(f"sqlite+aiosqlite:///{tmp_path / 'Bank.db'}")
        store = CredentialStore(engine, session_factory)
        try:
            await store.init_schema()
            return await scenario(store)
        finally:
            await engine.dispose()

    return asyncio.run(_main())


def test_init_schema_is_idempotent(tmp_path):
    async def scenario(store):
        await store.init_schema()
        await store.init_schema()
        return await store.create_user("a@x.com", "hash")

    assert run_with_store(tmp_path, scenario) == 1


def test_create_and_find_user(tmp_path):
    async def scenario(store):
        user_id = await store.create_user("a@x.com", "hash")
        return user_id, await store.find_user_by_email("a@x.com")

    user_id, user = run_with_store(tmp_path, scenario)

    assert user.id == user_id
    assert user.email == "a@x.com"
    assert user.hashed_password == "hash"
    assert user.is_banker is False


def test_duplicate_email_creates_no_second_row(tmp_path):
    async def scenario(store):
        first = await store.create_user("a@x.com", "hash-1")
        with pytest.raises(EmailAlreadyRegistered):
            await store.create_user("a@x.com", "hash-2")
        second = await store.create_user("b@x.com", "hash-3")
        return first, second, await store.find_user_by_email("a@x.com")

    first, second, user = run_with_store(tmp_path, scenario)

    assert user.hashed_password == "hash-1"
    assert second == first + 1


def test_unknown_email_is_none(tmp_path):
    async def scenario(store):
        return await store.find_user_by_email("ghost@x.com")

    assert run_with_store(tmp_path, scenario) is None


def test_account_lookup(tmp_path):
    async def scenario(store):
        user_id = await store.create_user("a@x.com", "hash")
        missing = await store.find_account_by_user_id(user_id)
        await store.create_account(user_id, 50)
        return missing, await store.find_account_by_user_id(user_id)

    missing, account = run_with_store(tmp_path, scenario)

    assert missing is None
    assert account.amount == 50
    assert account.transaction_type == "open"


def test_account_requires_existing_user(tmp_path):
    async def scenario(store):
        with pytest.raises(StorageError):
            await store.create_account(404, 10)

    run_with_store(tmp_path, scenario)
