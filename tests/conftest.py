import json
import os
from datetime import datetime, timezone

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing portal components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from portal.database import Base
from portal.services.credential_store import CredentialStore, InMemoryKeyValueStore
from portal.services.defaults import get_default_snapshot
from portal.services.document_client import DocumentClient

GOOD_TOKEN = "ghp_good_token"
GIST_FILENAME = "leadership-portal-data.json"

# Friday in Q4
FRIDAY = datetime(2026, 10, 16, 9, 30, tzinfo=timezone.utc)
# Saturday in Q4
SATURDAY = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)


def fixed_clock(moment: datetime):
    return lambda: moment


class FakeGistService:
    """In-memory stand-in for the GitHub gists endpoints, served through httpx.MockTransport."""

    def __init__(self, token: str = GOOD_TOKEN):
        self.token = token
        self.gists = {}
        self.requests = []
        self.forced_status = {}
        self.broken = False
        self._next_id = 1

    def add_gist(self, files, gist_id=None):
        gist_id = gist_id or f"existing{self._next_id}"
        self._next_id += 1
        self.gists[gist_id] = {
            "id": gist_id,
            "description": "",
            "public": False,
            "files": {name: {"filename": name, "content": content} for name, content in files.items()},
        }
        return gist_id

    def _json(self, status, body):
        return httpx.Response(status, json=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if self.broken:
            raise httpx.ConnectError("connection refused", request=request)
        forced = self.forced_status.get((request.method, path)) or self.forced_status.get(request.method)
        if forced:
            return self._json(forced, {"message": "forced failure"})
        if request.headers.get("Authorization") != f"token {self.token}":
            return self._json(401, {"message": "Bad credentials"})

        if path == "/user" and request.method == "GET":
            return self._json(200, {"login": "manager"})

        if path == "/gists" and request.method == "GET":
            return self._json(200, list(self.gists.values()))

        if path == "/gists" and request.method == "POST":
            body = json.loads(request.content)
            gist_id = f"gist{self._next_id}"
            self._next_id += 1
            self.gists[gist_id] = {
                "id": gist_id,
                "description": body["description"],
                "public": body["public"],
                "files": {
                    name: {"filename": name, "content": f["content"]}
                    for name, f in body["files"].items()
                },
            }
            return self._json(201, self.gists[gist_id])

        if path.startswith("/gists/"):
            gist_id = path.rsplit("/", 1)[-1]
            gist = self.gists.get(gist_id)
            if gist is None:
                return self._json(404, {"message": "Not Found"})
            if request.method == "GET":
                return self._json(200, gist)
            if request.method == "PATCH":
                body = json.loads(request.content)
                for name, f in body["files"].items():
                    gist["files"][name] = {"filename": name, "content": f["content"]}
                return self._json(200, gist)

        return self._json(404, {"message": "Not Found"})


@pytest.fixture(scope="function")
def gist_service():
    return FakeGistService()


@pytest.fixture(scope="function")
def http_client(gist_service):
    return httpx.AsyncClient(transport=httpx.MockTransport(gist_service.handler))


@pytest.fixture(scope="function")
def credentials():
    """Credential store holding a valid token and no cached gist id."""
    store = CredentialStore(InMemoryKeyValueStore())
    store.set_token(GOOD_TOKEN)
    return store


@pytest.fixture(scope="function")
def doc_client(credentials, http_client):
    return DocumentClient(credentials, http_client=http_client)


@pytest.fixture(scope="function")
def make_client(http_client):
    """Build a fresh client (new key-value area) sharing the same fake service."""
    def _make(token=GOOD_TOKEN, document_id=None):
        store = CredentialStore(InMemoryKeyValueStore())
        if token:
            store.set_token(token)
        if document_id:
            store.set_document_id(document_id)
        return DocumentClient(store, http_client=http_client)
    return _make


@pytest.fixture(scope="function")
def snapshot():
    return get_default_snapshot(fixed_clock(SATURDAY))


@pytest.fixture(scope="function")
def session_factory():
    """Session factory over a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    from portal.models import portal_setting  # noqa: F401
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def api_credentials():
    return CredentialStore(InMemoryKeyValueStore())


@pytest.fixture(scope="function")
def client(api_credentials, http_client):
    """TestClient wired to in-memory credentials, the fake gist service and a Friday clock."""
    from fastapi.testclient import TestClient
    from portal.dependencies import get_clock, get_credential_store, get_document_client
    from portal.main import app

    app.dependency_overrides[get_credential_store] = lambda: api_credentials
    app.dependency_overrides[get_document_client] = lambda: DocumentClient(api_credentials, http_client=http_client)
    app.dependency_overrides[get_clock] = lambda: fixed_clock(FRIDAY)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
