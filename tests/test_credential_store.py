import pytest
import requests

from portal.services import credential_store as credential_module
from portal.services.credential_store import (
    CredentialStore,
    InMemoryKeyValueStore,
    SqlKeyValueStore,
    verify_token,
)


class _FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code

    @property
    def ok(self):
        return 200 <= self.status_code < 400


def test_fresh_store_is_not_authenticated():
    store = CredentialStore(InMemoryKeyValueStore())
    assert store.get_token() is None
    assert store.get_document_id() is None
    assert not store.is_authenticated()


def test_set_and_clear_credentials():
    store = CredentialStore(InMemoryKeyValueStore())
    store.set_token("abc")
    store.set_document_id("gist42")
    assert store.is_authenticated()
    assert store.get_document_id() == "gist42"

    store.clear()
    assert store.get_token() is None
    assert store.get_document_id() is None
    assert not store.is_authenticated()


def test_empty_token_does_not_authenticate():
    store = CredentialStore(InMemoryKeyValueStore({"github_token": ""}))
    assert not store.is_authenticated()


def test_sql_store_survives_new_instances(session_factory):
    """Values written through one store are visible to a store created later."""
    first = CredentialStore(SqlKeyValueStore(session_factory))
    first.set_token("persisted-token")
    first.set_document_id("gist1")
    first.set_document_id("gist2")

    second = CredentialStore(SqlKeyValueStore(session_factory))
    assert second.get_token() == "persisted-token"
    assert second.get_document_id() == "gist2"

    second.clear()
    assert CredentialStore(SqlKeyValueStore(session_factory)).is_authenticated() is False


def test_sql_store_remove_missing_key_is_noop(session_factory):
    kv = SqlKeyValueStore(session_factory)
    kv.remove("never-set")
    assert kv.get("never-set") is None


def test_verify_token_accepts_success(monkeypatch):
    captured = {}

    def fake_get(url, headers, timeout):
        captured["url"] = url
        captured["headers"] = headers
        return _FakeResponse(200)

    monkeypatch.setattr(credential_module.requests, "get", fake_get)
    assert verify_token("abc") is True
    assert captured["url"].endswith("/user")
    assert captured["headers"]["Authorization"] == "token abc"
    assert captured["headers"]["Accept"] == "application/vnd.github.v3+json"


@pytest.mark.parametrize("status_code", [401, 403, 500])
def test_verify_token_rejects_non_success(monkeypatch, status_code):
    monkeypatch.setattr(credential_module.requests, "get", lambda *a, **kw: _FakeResponse(status_code))
    assert verify_token("abc") is False


def test_verify_token_treats_transport_failure_as_invalid(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(credential_module.requests, "get", boom)
    assert verify_token("abc") is False
