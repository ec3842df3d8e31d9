import uuid

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from api.main import app
from core.settings import SETTINGS
from infra.resources import DatabaseResource

from conftest import FakeGateway


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(SETTINGS.DATABASE, "DB_AUTO_CREATE_TABLES", True)
    infrastructure = app.container.infrastructure
    infrastructure.database.override(
        providers.Object(DatabaseResource(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"))
    )
    infrastructure.model_gateway.override(providers.Object(FakeGateway()))
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        infrastructure.database.reset_override()
        infrastructure.model_gateway.reset_override()


def create_user(client, email, name=None):
    return client.post("/users", json={"email": email, "name": name})


def create_conversation(client, email, text="Hello"):
    return client.post(
        "/conversations", json={"user_email": email, "first_message": text}
    )


def test_root_and_health(client):
    assert client.get("/").json() == {"ok": True, "service": "bot-gpt"}
    assert client.get("/health").status_code == 200


def test_conversation_lifecycle(client):
    resp = create_user(client, "Alice@Example.com", "Alice")
    assert resp.status_code == 201
    assert resp.json()["message"] == "User created successfully"
    assert resp.json()["user"]["email"] == "alice@example.com"

    resp = create_conversation(client, "alice@example.com", "Hello")
    assert resp.status_code == 201
    body = resp.json()
    conversation_id = body["conversation"]["id"]
    assert body["conversation"]["title"] == "Hello"
    assert [m["role"] for m in body["messages"]] == ["user", "assistant"]
    assert body["messages"][1]["text"] == "echo: Hello"

    resp = client.post(
        f"/conversations/{conversation_id}/messages",
        json={"user_email": "alice@example.com", "text": "And then?"},
    )
    assert resp.status_code == 201
    assert [m["text"] for m in resp.json()["messages"]] == ["And then?", "echo: And then?"]

    resp = client.get(
        f"/conversations/{conversation_id}", params={"user_email": "alice@example.com"}
    )
    assert resp.status_code == 200
    assert len(resp.json()["messages"]) == 4
    assert resp.json()["messages"][0]["conversationId"] == conversation_id

    resp = client.get("/conversations/user/alice@example.com")
    assert resp.status_code == 200
    assert resp.json()["total"] == 1

    resp = client.request(
        "DELETE",
        f"/conversations/{conversation_id}",
        json={"user_email": "alice@example.com"},
    )
    assert resp.status_code == 204
    assert resp.content == b""

    resp = client.get(
        f"/conversations/{conversation_id}", params={"user_email": "alice@example.com"}
    )
    assert resp.status_code == 404
    assert "error" in resp.json()

    page = client.get("/conversations").json()
    assert page["total"] == 0
    assert page["hasMore"] is False


def test_duplicate_user_returns_existing_record(client):
    first = create_user(client, "bob@example.com", "Bob").json()["user"]

    resp = create_user(client, "BOB@example.com", "Robert")

    assert resp.status_code == 409
    assert resp.json()["error"] == "user already exists"
    assert resp.json()["user"]["id"] == first["id"]
    assert resp.json()["user"]["name"] == "Bob"


def test_get_user(client):
    create_user(client, "carol@example.com")

    assert client.get("/users/carol@example.com").json()["user"]["email"] == "carol@example.com"
    assert client.get("/users/nobody@example.com").status_code == 404


def test_other_user_is_forbidden(client):
    create_user(client, "owner@example.com")
    create_user(client, "intruder@example.com")
    conversation_id = create_conversation(client, "owner@example.com").json()["conversation"]["id"]

    resp = client.get(
        f"/conversations/{conversation_id}", params={"user_email": "intruder@example.com"}
    )

    assert resp.status_code == 403
    assert resp.json() == {"error": "forbidden: user does not own this conversation"}


@pytest.mark.parametrize(
    "method,path,kwargs",
    [
        ("GET", "/conversations/not-a-uuid", {"params": {"user_email": "a@example.com"}}),
        ("POST", "/conversations/123/messages", {"json": {"user_email": "a@example.com", "text": "hi"}}),
        ("DELETE", "/conversations/xyz", {"json": {"user_email": "a@example.com"}}),
    ],
)
def test_malformed_conversation_id(client, method, path, kwargs):
    resp = client.request(method, path, **kwargs)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid conversation ID"


def test_unknown_conversation_is_not_found(client):
    create_user(client, "dan@example.com")

    resp = client.get(
        f"/conversations/{uuid.uuid4()}", params={"user_email": "dan@example.com"}
    )

    assert resp.status_code == 404


@pytest.mark.parametrize(
    "payload",
    [
        {"first_message": "hi"},
        {"user_email": "erin@example.com", "first_message": ""},
        {"user_email": "erin@example.com", "first_message": "hi", "mode": "other"},
        {"user_email": "nobody@example.com", "first_message": "hi"},
    ],
)
def test_create_conversation_bad_request(client, payload):
    create_user(client, "erin@example.com")

    resp = client.post("/conversations", json=payload)

    assert resp.status_code == 400
    assert resp.json()["error"]


def test_missing_email_on_user_create(client):
    resp = client.post("/users", json={"name": "No Email"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "email is required"}


def test_list_conversations_clamps_query(client):
    create_user(client, "fay@example.com")
    create_conversation(client, "fay@example.com")

    page = client.get("/conversations", params={"page": "0", "limit": "500"}).json()

    assert (page["page"], page["limit"], page["total"]) == (1, 100, 1)
    assert page["items"][0]["documentRefs"] == []
