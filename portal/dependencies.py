"""
Service providers for the routers.

Tests replace these through ``app.dependency_overrides`` to swap in an
in-memory credential store and a mocked HTTP transport.
"""
from datetime import datetime
from typing import AsyncIterator, Callable

from fastapi import Depends

from portal.database import SessionLocal
from portal.services.alerts import local_now
from portal.services.credential_store import CredentialStore, SqlKeyValueStore
from portal.services.document_client import DocumentClient


def get_credential_store() -> CredentialStore:
    return CredentialStore(SqlKeyValueStore(SessionLocal))


async def get_document_client(
    credentials: CredentialStore = Depends(get_credential_store),
) -> AsyncIterator[DocumentClient]:
    """One client per request; the underlying httpx client is closed afterwards."""
    async with DocumentClient(credentials) as client:
        yield client


def get_clock() -> Callable[[], datetime]:
    return local_now


__all__ = [
    "get_credential_store",
    "get_document_client",
    "get_clock",
]
