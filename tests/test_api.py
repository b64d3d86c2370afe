from fastapi.testclient import TestClient


def register(client: TestClient, username: str, password: str, **profile):
    payload = {
        "username": username,
        "password": password,
        "first_name": profile.get("first_name", username.title()),
        "last_name": profile.get("last_name", "Test"),
        "phone": profile.get("phone", "555-0000"),
    }
    return client.post("/auth/register", json=payload)


def login(client: TestClient, username: str, password: str) -> dict:
    res = client.post("/auth/login", data={"username": username, "password": password})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


def setup_users(client: TestClient):
    for name in ("alice", "bob", "carol"):
        assert register(client, name, f"{name}-pw").status_code == 201
    return {name: login(client, name, f"{name}-pw") for name in ("alice", "bob", "carol")}


def test_register_returns_profile_without_password(client):
    res = register(client, "alice", "alice-pw", phone="555-0100")
    assert res.status_code == 201
    user = res.json()["user"]
    assert user["username"] == "alice"
    assert user["phone"] == "555-0100"
    assert "password" not in user
    assert user["join_at"]


def test_register_duplicate(client):
    register(client, "alice", "alice-pw")
    res = register(client, "alice", "another")
    assert res.status_code == 400
    assert "error" in res.json()


def test_register_missing_field(client):
    res = client.post("/auth/register", json={"username": "alice", "password": "pw"})
    assert res.status_code == 400
    assert "error" in res.json()


def test_login_failures_look_the_same(client):
    register(client, "alice", "alice-pw")
    wrong_password = client.post("/auth/login", data={"username": "alice", "password": "nope"})
    unknown_user = client.post("/auth/login", data={"username": "nobody", "password": "nope"})
    assert wrong_password.status_code == unknown_user.status_code == 400
    assert wrong_password.json() == unknown_user.json()


def test_requires_token(client):
    res = client.get("/messages/1")
    assert res.status_code == 401
    assert res.json() == {"error": "Not authenticated"}

    res = client.get("/users", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_user_routes(client):
    headers = setup_users(client)

    res = client.get("/users", headers=headers["alice"])
    assert res.status_code == 200
    assert [u["username"] for u in res.json()["users"]] == ["alice", "bob", "carol"]
    assert set(res.json()["users"][0]) == {"username", "first_name", "last_name", "phone"}

    res = client.get("/users/alice", headers=headers["alice"])
    assert res.status_code == 200
    assert res.json()["user"]["last_login_at"]

    res = client.get("/users/alice", headers=headers["bob"])
    assert res.status_code == 403


def test_user_message_listings(client):
    headers = setup_users(client)
    client.post("/messages", json={"to_username": "bob", "body": "hi bob"}, headers=headers["alice"])

    sent = client.get("/users/alice/from", headers=headers["alice"]).json()["messages"]
    assert len(sent) == 1
    assert sent[0]["to_user"]["username"] == "bob"
    assert sent[0]["read_at"] is None

    received = client.get("/users/bob/to", headers=headers["bob"]).json()["messages"]
    assert received[0]["from_user"]["username"] == "alice"
    assert received[0]["body"] == "hi bob"

    assert client.get("/users/bob/to", headers=headers["alice"]).status_code == 403


def test_send_message(client):
    headers = setup_users(client)
    res = client.post("/messages", json={"to_username": "bob", "body": "hello"}, headers=headers["alice"])
    assert res.status_code == 201
    message = res.json()["message"]
    assert set(message) == {"id", "from_username", "to_username", "body", "sent_at"}
    assert message["from_username"] == "alice"
    assert message["to_username"] == "bob"
    assert message["body"] == "hello"


def test_send_message_missing_fields(client):
    headers = setup_users(client)
    for payload in ({"to_username": "bob"}, {"body": "hello"}, {"to_username": "", "body": "hello"}):
        res = client.post("/messages", json=payload, headers=headers["alice"])
        assert res.status_code == 400
        assert res.json() == {"error": "Missing required fields"}
    assert client.get("/users/alice/from", headers=headers["alice"]).json()["messages"] == []


def test_send_message_unknown_recipient(client):
    headers = setup_users(client)
    res = client.post("/messages", json={"to_username": "nobody", "body": "hello"}, headers=headers["alice"])
    assert res.status_code == 404


def test_get_message(client):
    headers = setup_users(client)
    sent = client.post("/messages", json={"to_username": "bob", "body": "hi"}, headers=headers["alice"]).json()
    message_id = sent["message"]["id"]

    res = client.get(f"/messages/{message_id}", headers=headers["alice"])
    assert res.status_code == 200
    message = res.json()["message"]
    assert message["body"] == "hi"
    assert message["read_at"] is None
    assert message["to_user"]["username"] == "bob"
    assert message["from_user"] == {"username": "alice", "first_name": "Alice", "last_name": "Test", "phone": "555-0000"}

    assert client.get(f"/messages/{message_id}", headers=headers["bob"]).status_code == 200

    res = client.get(f"/messages/{message_id}", headers=headers["carol"])
    assert res.status_code == 403
    assert res.json() == {"error": "Unauthorized"}

    res = client.get("/messages/9999", headers=headers["alice"])
    assert res.status_code == 404
    assert res.json() == {"error": "Message not found"}


def test_mark_read_flow(client):
    headers = setup_users(client)
    sent = client.post("/messages", json={"to_username": "bob", "body": "hello"}, headers=headers["alice"]).json()
    message_id = sent["message"]["id"]

    assert client.post(f"/messages/{message_id}/read", headers=headers["alice"]).status_code == 403
    assert client.post(f"/messages/{message_id}/read", headers=headers["carol"]).status_code == 403
    assert client.post("/messages/9999/read", headers=headers["bob"]).status_code == 404

    res = client.post(f"/messages/{message_id}/read", headers=headers["bob"])
    assert res.status_code == 200
    read = res.json()["message"]
    assert read["id"] == message_id
    assert read["read_at"] is not None

    detail = client.get(f"/messages/{message_id}", headers=headers["alice"]).json()["message"]
    assert detail["read_at"] == read["read_at"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_message_id_beyond_integer_range(client):
    headers = setup_users(client)
    res = client.get("/messages/99999999999999999999", headers=headers["alice"])
    assert res.status_code == 404
    assert res.json() == {"error": "Message not found"}

    res = client.post("/messages/99999999999999999999/read", headers=headers["bob"])
    assert res.status_code == 404
    assert res.json() == {"error": "Message not found"}
