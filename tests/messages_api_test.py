from bson import ObjectId

from dependencies.db import get_db
from utils.exceptions import StoreUnavailableError

BASE = "/api/messages"


def _send(client, auth_headers, sender, receiver, content="hi", **extra):
    return client.post(
        f"{BASE}/send",
        json={"receiverId": receiver, "content": content, **extra},
        headers=auth_headers(sender),
    )


def test_send_returns_created_message(client, auth_headers, users):
    response = _send(client, auth_headers, users["alice"], users["bob"], "  hi  ")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Message sent successfully"
    assert body["data"]["content"] == "hi"
    assert body["data"]["senderId"] == users["alice"]
    assert body["data"]["receiverId"] == users["bob"]
    assert body["data"]["read"] is False
    assert body["data"]["messageType"] == "text"
    assert ObjectId.is_valid(body["data"]["id"])


def test_requests_without_identity_are_401(client, users):
    response = client.get(f"{BASE}/conversations")
    assert response.status_code == 401
    assert response.json()["success"] is False

    response = client.get(f"{BASE}/conversations", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid token"}


def test_send_to_self_is_400(client, auth_headers, users):
    response = _send(client, auth_headers, users["alice"], users["alice"])

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Cannot send message to yourself"}


def test_send_with_missing_fields_is_400(client, auth_headers, users):
    response = client.post(f"{BASE}/send", json={"content": "hi"}, headers=auth_headers(users["alice"]))

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert body["errors"]


def test_send_blank_content_is_400(client, auth_headers, users):
    response = _send(client, auth_headers, users["alice"], users["bob"], "   ")
    assert response.status_code == 400


def test_send_to_unknown_user_is_404(client, auth_headers, users):
    response = _send(client, auth_headers, users["alice"], str(ObjectId()))

    assert response.status_code == 404
    assert response.json()["message"] == "Receiver not found"


def test_unread_count_flow(client, auth_headers, users):
    alice, bob, carol = users["alice"], users["bob"], users["carol"]
    _send(client, auth_headers, bob, alice, "one")
    _send(client, auth_headers, bob, alice, "two")
    _send(client, auth_headers, carol, alice, "three")

    response = client.get(f"{BASE}/unread-count/{alice}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["unreadCount"] == 3
    assert response.json()["count"] == 3

    response = client.put(f"{BASE}/mark-read/{alice}/{bob}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["modifiedCount"] == 2

    response = client.put(f"{BASE}/mark-read/{alice}/{bob}", headers=auth_headers(alice))
    assert response.json()["modifiedCount"] == 0

    response = client.get(f"{BASE}/unread-count/{alice}", headers=auth_headers(alice))
    assert response.json()["unreadCount"] == 1


def test_unread_count_of_another_user_is_forbidden_and_not_leaked(client, auth_headers, users):
    _send(client, auth_headers, users["alice"], users["bob"])

    response = client.get(f"{BASE}/unread-count/{users['bob']}", headers=auth_headers(users["carol"]))

    assert response.status_code == 403
    body = response.json()
    assert body["success"] is False
    assert "count" not in body
    assert "unreadCount" not in body


def test_mark_read_of_another_user_is_forbidden(client, auth_headers, users):
    response = client.put(f"{BASE}/mark-read/{users['bob']}/{users['alice']}", headers=auth_headers(users["alice"]))
    assert response.status_code == 403


def test_history_is_ascending_and_guarded(client, auth_headers, users):
    alice, bob = users["alice"], users["bob"]
    _send(client, auth_headers, alice, bob, "first")
    _send(client, auth_headers, bob, alice, "second")

    response = client.get(f"{BASE}/conversation/{alice}/{bob}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert [m["content"] for m in response.json()["data"]] == ["first", "second"]

    response = client.get(f"{BASE}/conversation/{alice}/{bob}", headers=auth_headers(bob))
    assert response.status_code == 403


def test_history_of_empty_pair_is_empty_list(client, auth_headers, users):
    response = client.get(f"{BASE}/conversation/{users['alice']}/{users['bob']}", headers=auth_headers(users["alice"]))

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_conversations_listing(client, auth_headers, users):
    alice, bob, carol = users["alice"], users["bob"], users["carol"]
    _send(client, auth_headers, bob, alice, "hello from bob")
    _send(client, auth_headers, alice, carol, "hello carol")

    response = client.get(f"{BASE}/conversations", headers=auth_headers(alice))
    assert response.status_code == 200
    data = response.json()["data"]

    assert [c["otherUser"]["id"] for c in data] == [carol, bob]
    assert data[0]["lastMessage"]["content"] == "hello carol"
    assert data[0]["unreadCount"] == 0
    assert data[1]["unreadCount"] == 1
    assert data[1]["otherUser"]["name"] == "Bob"
    assert data[1]["id"] == "_".join(sorted([alice, bob]))


def test_delete_conversation(client, auth_headers, users):
    alice, bob = users["alice"], users["bob"]
    _send(client, auth_headers, alice, bob, "a")
    _send(client, auth_headers, bob, alice, "b")

    response = client.delete(f"{BASE}/conversation/{users['carol']}_{bob}", headers=auth_headers(alice))
    assert response.status_code == 403

    response = client.delete(f"{BASE}/conversation/not-a-pair", headers=auth_headers(alice))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid conversation ID format"

    response = client.delete(f"{BASE}/conversation/{bob}_{alice}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["deletedCount"] == 2

    response = client.get(f"{BASE}/conversation/{alice}/{bob}", headers=auth_headers(alice))
    assert response.json()["data"] == []


def test_unknown_api_route_is_structured_404(client, auth_headers, users):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_health_endpoints(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "alive"

    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["database"] == "disconnected"
    assert response.json()["status"] == "degraded"


def test_outsiders_are_forbidden_even_while_the_store_is_down(app, client, auth_headers, users):
    async def store_down():
        raise StoreUnavailableError()

    app.dependency_overrides[get_db] = store_down
    alice, bob, carol = users["alice"], users["bob"], users["carol"]
    headers = auth_headers(alice)

    assert client.get(f"{BASE}/unread-count/{bob}", headers=headers).status_code == 403
    assert client.get(f"{BASE}/conversation/{bob}/{alice}", headers=headers).status_code == 403
    assert client.put(f"{BASE}/mark-read/{bob}/{alice}", headers=headers).status_code == 403
    assert client.delete(f"{BASE}/conversation/{bob}_{carol}", headers=headers).status_code == 403

    # the caller's own resources report the outage as a retryable failure
    response = client.get(f"{BASE}/unread-count/{alice}", headers=headers)
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Message store unavailable, please retry"}
