"""
Credential Store

Holds the GitHub bearer token and the id of the gist that stores the portal
snapshot. Values live in an injected key-value area so the service can use a
persistent SQL table while tests substitute an in-memory dict.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

import requests
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.models.portal_setting import PortalSetting

logger = logging.getLogger(__name__)

TOKEN_KEY = "github_token"
DOCUMENT_ID_KEY = "gist_id"


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore(KeyValueStore):
    """Key-value area backed by the ``portal_settings`` table; survives restarts."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            row = db.get(PortalSetting, key)
            return row.value if row else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db = self.session_factory()
        try:
            row = db.get(PortalSetting, key)
            if row:
                row.value = value
            else:
                db.add(PortalSetting(key=key, value=value))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def remove(self, key: str) -> None:
        db = self.session_factory()
        try:
            db.query(PortalSetting).filter(PortalSetting.key == key).delete(synchronize_session=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class CredentialStore:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def get_token(self) -> Optional[str]:
        return self.kv.get(TOKEN_KEY)

    def set_token(self, token: str) -> None:
        self.kv.set(TOKEN_KEY, token)

    def get_document_id(self) -> Optional[str]:
        return self.kv.get(DOCUMENT_ID_KEY)

    def set_document_id(self, document_id: str) -> None:
        self.kv.set(DOCUMENT_ID_KEY, document_id)

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def clear(self) -> None:
        self.kv.remove(TOKEN_KEY)
        self.kv.remove(DOCUMENT_ID_KEY)
        logger.info("Cleared stored credentials")


def verify_token(token: str, timeout: float = 10) -> bool:
    """
    Ask GitHub whether the token is valid.

    Args:
        token: Personal access token to check.
        timeout: Request timeout in seconds.

    Returns:
        bool: True only for a 2xx response from ``GET /user``; any other
        status or a transport failure counts as invalid.
    """
    headers = {
        "Authorization": f"token {token}",
        "Accept": settings.remote.accept_header,
    }
    try:
        response = requests.get(f"{settings.remote.api_url}/user", headers=headers, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.warning(f"Token verification request failed: {e}")
        return False
    if not response.ok:
        logger.info(f"Token verification rejected with status {response.status_code}")
    return response.ok
