from models import User
from sqlmodel import select


def h(uid):
    return {"X-User-UID": uid}


def test_me_requires_header(client, users):
    r = client.get("/api/me")
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Authentication required"}


def test_me_unknown_and_inactive(client, users):
    assert client.get("/api/me", headers=h("nobody")).status_code == 401
    r = client.get("/api/me", headers=h("gone-uid"))
    assert r.status_code == 403
    assert r.json()["success"] is False


def test_me_accepts_bearer_token(client, users):
    r = client.get("/api/me", headers={"Authorization": "Bearer user-uid"})
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Uma"


def test_me_returns_user(client, users):
    body = client.get("/api/me", headers=h("admin-uid")).json()
    assert body["success"] is True
    assert body["user"]["role"] == "admin"
    assert body["user"]["is_active"] == 1


def test_login_creates_then_updates(client, session):
    r = client.post("/api/auth/login", json={"uid": "new-uid", "name": "Nia"})
    assert r.json()["user"]["role"] == "user"
    client.post("/api/auth/login", json={"uid": "new-uid", "email": "nia@example.com"})
    users = session.exec(select(User).where(User.uid == "new-uid")).all()
    assert len(users) == 1
    session.refresh(users[0])
    assert (users[0].name, users[0].email) == ("Nia", "nia@example.com")


def test_login_promotes_configured_owner(client, session):
    r = client.post("/api/auth/login", json={"uid": "owner-uid"})
    assert r.json()["user"]["role"] == "owner"


def test_login_rejects_empty_uid(client):
    r = client.post("/api/auth/login", json={"uid": ""})
    assert r.status_code == 422
    assert r.json()["success"] is False


def test_login_rejects_blank_uid(client, session):
    r = client.post("/api/auth/login", json={"uid": "   "})
    assert r.status_code == 422
    assert r.json()["success"] is False
    assert session.exec(select(User)).all() == []


def test_login_strips_uid_so_header_matches(client):
    r = client.post("/api/auth/login", json={"uid": " bob ", "name": "Bob"})
    assert r.status_code == 200
    assert r.json()["user"]["uid"] == "bob"

    me = client.get("/api/me", headers=h(" bob "))
    assert me.status_code == 200
    assert me.json()["user"]["name"] == "Bob"


def test_favorites_roundtrip(client, users, catalog):
    jazz, food, rock = catalog["events"][:3]
    assert client.get("/api/favorites", headers=h("user-uid")).json()["favorites"] == []

    r = client.post("/api/favorites", json={"event_id": jazz.id}, headers=h("user-uid"))
    assert r.json() == {"success": True, "event_id": jazz.id, "created": True}
    client.post("/api/favorites", json={"event_id": rock.id}, headers=h("user-uid"))

    favs = client.get("/api/favorites", headers=h("user-uid")).json()["favorites"]
    assert {f["id"] for f in favs} == {jazz.id, rock.id}

    # other users do not see them
    assert client.get("/api/favorites", headers=h("admin-uid")).json()["favorites"] == []

    r = client.delete("/api/favorites", params={"event_id": jazz.id}, headers=h("user-uid"))
    assert r.json()["removed"] is True
    favs = client.get("/api/favorites", headers=h("user-uid")).json()["favorites"]
    assert [f["id"] for f in favs] == [rock.id]


def test_favorites_are_idempotent(client, users, catalog):
    jazz = catalog["events"][0]
    client.post("/api/favorites", json={"event_id": jazz.id}, headers=h("user-uid"))
    again = client.post("/api/favorites", json={"event_id": jazz.id}, headers=h("user-uid"))
    assert again.json()["success"] is True
    assert again.json()["created"] is False

    client.delete("/api/favorites", params={"event_id": jazz.id}, headers=h("user-uid"))
    gone = client.delete("/api/favorites", params={"event_id": jazz.id}, headers=h("user-uid"))
    assert gone.json() == {"success": True, "event_id": jazz.id, "removed": False}


def test_favorite_unknown_event(client, users):
    r = client.post("/api/favorites", json={"event_id": 4242}, headers=h("user-uid"))
    assert r.status_code == 404
    assert r.json()["error"] == "Event not found"


def test_favorites_need_login(client, catalog):
    assert client.get("/api/favorites").status_code == 401


def test_timestamps_default_to_aware_utc(client, session):
    assert User(uid="fresh").joined_at.tzinfo is not None

    r = client.post("/api/auth/login", json={"uid": "stamp-uid"})
    assert r.status_code == 200
    assert r.json()["user"]["joined_at"]
