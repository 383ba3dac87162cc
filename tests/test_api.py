import pytest
from fastapi import status

from conftest import FRIDAY, GIST_FILENAME, GOOD_TOKEN
from portal.routers import auth as auth_router
from portal.services.defaults import get_default_snapshot


@pytest.fixture
def logged_in(api_credentials):
    api_credentials.set_token(GOOD_TOKEN)
    return api_credentials


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "up"
    assert "timestamp" in data


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Leadership Portal" in response.json()["message"]
    assert "X-Request-ID" in response.headers


def test_login_stores_verified_token(client, api_credentials, monkeypatch):
    monkeypatch.setattr(auth_router, "verify_token", lambda token: token == GOOD_TOKEN)

    response = client.post("/api/auth/login", json={"token": GOOD_TOKEN})

    assert response.status_code == 200
    assert response.json()["data"] == {"authenticated": True}
    assert api_credentials.get_token() == GOOD_TOKEN


def test_login_rejects_invalid_token(client, api_credentials, monkeypatch):
    monkeypatch.setattr(auth_router, "verify_token", lambda token: False)

    response = client.post("/api/auth/login", json={"token": "ghp_bad"})

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "AUTH_FAILED"
    assert api_credentials.get_token() is None


def test_status_and_logout(client, logged_in):
    logged_in.set_document_id("gist9")
    status_body = client.get("/api/auth/status").json()["data"]
    assert status_body == {"authenticated": True, "has_document": True}

    client.post("/api/auth/logout")
    status_body = client.get("/api/auth/status").json()["data"]
    assert status_body == {"authenticated": False, "has_document": False}


def test_load_requires_token(client):
    response = client.get("/api/portal/data")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_FAILED"


def test_load_falls_back_to_defaults(client, logged_in):
    response = client.get("/api/portal/data")

    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["source"] == "default"
    assert body["data"]["lastUpdated"] == FRIDAY.isoformat()
    assert "Terry" in body["data"]["performanceReview"]["teamMembers"]


def test_save_then_load(client, logged_in, gist_service):
    payload = get_default_snapshot().to_payload()
    payload["delegation"]["impulseCounter"] = {"caught": 8, "redirected": 6}

    saved = client.put("/api/portal/data", json=payload)
    assert saved.status_code == 200
    document_id = saved.json()["data"]["documentId"]
    assert document_id in gist_service.gists
    assert logged_in.get_document_id() == document_id

    again = client.put("/api/portal/data", json=payload)
    assert again.json()["data"]["documentId"] == document_id
    assert len(gist_service.gists) == 1

    loaded = client.get("/api/portal/data").json()
    assert loaded["metadata"]["source"] == "remote"
    assert loaded["data"]["delegation"]["impulseCounter"] == {"caught": 8, "redirected": 6}
    assert loaded["data"]["lastUpdated"] == FRIDAY.isoformat()


def test_load_discovers_existing_gist(client, logged_in, gist_service):
    stored = get_default_snapshot()
    stored.performance_review.review_year = 2026
    gist_id = gist_service.add_gist({GIST_FILENAME: stored.to_json()})

    body = client.get("/api/portal/data").json()

    assert body["metadata"]["source"] == "remote"
    assert body["metadata"]["document_id"] == gist_id
    assert body["data"]["performanceReview"]["reviewYear"] == 2026


def test_remote_failure_is_reported(client, logged_in, gist_service):
    gist_service.forced_status["POST"] = 500
    response = client.put("/api/portal/data", json=get_default_snapshot().to_payload())
    assert response.status_code == 502
    body = response.json()
    assert body["error"]["code"] == "REMOTE_SERVICE_ERROR"
    assert body["error"]["details"] == {"upstream_status": 500}


def test_alerts_endpoint(client):
    response = client.post("/api/portal/alerts", json=get_default_snapshot().to_payload())
    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["count"] == 4
    assert body["data"][0]["title"] == "Weekly Reflection Due"


def test_scores_endpoint(client):
    payload = get_default_snapshot().to_payload()
    payload["performanceReview"]["teamMembers"]["Terry"]["goals"] = [{"id": 1, "self": 5, "manager": 4}]

    body = client.post("/api/portal/scores", json=payload).json()

    ncs = {card["name"]: card for card in body["data"]["teams"]["NCS"]}
    assert ncs["Terry"]["goals"] == {"self": 5.0, "manager": 4.0}
    assert ncs["Terry"]["overall"] == 2.0
    assert ncs["Terry"]["label"] == "Needs Improvement"


def test_defaults_endpoint(client):
    body = client.get("/api/portal/defaults").json()
    assert body["success"] is True
    assert sorted(body["data"]["delegation"]["quarterlyChecklist"]) == ["Q1", "Q2", "Q3", "Q4"]


def test_alerts_endpoint_accepts_null_fields(client):
    payload = get_default_snapshot().to_payload()
    payload["delegation"]["delegationTeamMembers"][0]["stretchProject"] = None
    payload["performanceReview"]["teamMembers"]["Terry"]["summary"] = None

    response = client.post("/api/portal/alerts", json=payload)

    assert response.status_code == 200
    titles = [alert["title"] for alert in response.json()["data"]]
    assert "Missing Review Summaries" in titles
    assert "Stretch Projects Needed" in titles
