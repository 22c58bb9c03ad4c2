from datetime import datetime

from src.api.models import Note
from src.api.services.notes_service import PALETTE


def test_notes_require_auth_header(client):
    for method, path in [("GET", "/api/notes"), ("POST", "/api/notes"), ("PUT", "/api/notes/1"), ("DELETE", "/api/notes/1")]:
        resp = client.request(method, path, json={})
        assert resp.status_code == 401, (method, path)
        assert resp.json() == {"error": "Unauthorized", "detail": "No auth token"}


def test_create_assigns_defaults_and_palette_color(client, auth_headers):
    headers = auth_headers()
    for _ in range(20):
        resp = client.post("/api/notes", json={}, headers=headers)
        assert resp.status_code == 200
        note = resp.json()
        assert note["title"] == "Untitled Note"
        assert note["content"] == ""
        assert note["pinned"] is False
        assert note["color"] in PALETTE


def test_create_keeps_supplied_color(client, auth_headers):
    headers = auth_headers()
    resp = client.post("/api/notes", json={"title": "T", "content": "body", "color": "#123abc"}, headers=headers)
    assert resp.json()["color"] == "#123abc"

    resp = client.post("/api/notes", json={"color": "red"}, headers=headers)
    assert resp.status_code == 422


def test_create_with_empty_color_picks_palette_color(client, auth_headers):
    headers = auth_headers()
    resp = client.post("/api/notes", json={"title": "T", "color": ""}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["color"] in PALETTE


def test_list_returns_only_own_notes_in_creation_order(client, auth_headers):
    alice = auth_headers("alice@x.com")
    bob = auth_headers("bob@x.com")
    client.post("/api/notes", json={"title": "first"}, headers=alice)
    client.post("/api/notes", json={"title": "bob's"}, headers=bob)
    client.post("/api/notes", json={"title": "second"}, headers=alice)

    titles = [n["title"] for n in client.get("/api/notes", headers=alice).json()]
    assert titles == ["first", "second"]
    assert [n["title"] for n in client.get("/api/notes", headers=bob).json()] == ["bob's"]


def test_list_search_matches_title_or_content(client, auth_headers):
    headers = auth_headers()
    client.post("/api/notes", json={"title": "Groceries", "content": "milk"}, headers=headers)
    client.post("/api/notes", json={"title": "Work", "content": "Call the GROCER"}, headers=headers)
    client.post("/api/notes", json={"title": "Ideas", "content": "none"}, headers=headers)

    titles = [n["title"] for n in client.get("/api/notes", params={"q": "grocer"}, headers=headers).json()]
    assert titles == ["Groceries", "Work"]


def test_list_search_treats_wildcards_literally(client, auth_headers):
    headers = auth_headers()
    client.post("/api/notes", json={"title": "abc"}, headers=headers)
    client.post("/api/notes", json={"title": "100% done"}, headers=headers)
    client.post("/api/notes", json={"title": "snake_case", "content": "back\\slash"}, headers=headers)

    def search(q):
        return [n["title"] for n in client.get("/api/notes", params={"q": q}, headers=headers).json()]

    assert search("a_c") == []
    assert search("%") == ["100% done"]
    assert search("_") == ["snake_case"]
    assert search("k\\s") == ["snake_case"]


def test_update_replaces_fields(client, auth_headers):
    headers = auth_headers()
    note = client.post("/api/notes", json={"title": "T"}, headers=headers).json()

    payload = {"title": "New", "content": "text", "color": "#42e695", "pinned": True}
    resp = client.put(f"/api/notes/{note['id']}", json=payload, headers=headers)
    assert resp.status_code == 200
    updated = resp.json()
    assert {k: updated[k] for k in payload} == payload
    assert updated["created_at"] == note["created_at"]
    assert updated["updated_at"] >= note["updated_at"]

    assert client.get(f"/api/notes/{note['id']}", headers=headers).json()["pinned"] is True


def test_unchanged_save_still_refreshes_updated_at(client, auth_headers, db):
    headers = auth_headers()
    note = client.post("/api/notes", json={"title": "T", "color": "#f6d365"}, headers=headers).json()
    stale = datetime(2000, 1, 1)
    stored = db.get(Note, note["id"])
    stored.updated_at = stale
    db.commit()

    payload = {"title": "T", "content": "", "color": "#f6d365", "pinned": False}
    assert client.put(f"/api/notes/{note['id']}", json=payload, headers=headers).status_code == 200

    db.expire_all()
    assert db.get(Note, note["id"]).updated_at > stale


def test_update_requires_full_body(client, auth_headers):
    headers = auth_headers()
    note = client.post("/api/notes", json={"title": "T"}, headers=headers).json()
    resp = client.put(f"/api/notes/{note['id']}", json={"title": "only title"}, headers=headers)
    assert resp.status_code == 422


def test_other_users_note_is_untouchable(client, auth_headers, db):
    alice = auth_headers("alice@x.com")
    bob = auth_headers("bob@x.com")
    note = client.post("/api/notes", json={"title": "mine", "content": "secret", "color": "#f6d365"}, headers=alice).json()

    assert client.get(f"/api/notes/{note['id']}", headers=bob).status_code == 404

    payload = {"title": "hacked", "content": "", "color": "#000000", "pinned": True}
    resp = client.put(f"/api/notes/{note['id']}", json=payload, headers=bob)
    assert resp.status_code == 404
    assert resp.json()["error"] == "NotFound"

    resp = client.delete(f"/api/notes/{note['id']}", headers=bob)
    assert resp.status_code == 404

    stored = db.get(Note, note["id"])
    assert (stored.title, stored.content, stored.color, stored.pinned) == ("mine", "secret", "#f6d365", False)


def test_missing_note(client, auth_headers):
    headers = auth_headers()
    payload = {"title": "x", "content": "", "color": "#f6d365", "pinned": False}
    assert client.put("/api/notes/999", json=payload, headers=headers).status_code == 404
    assert client.delete("/api/notes/999", headers=headers).status_code == 404


def test_delete_own_note(client, auth_headers):
    headers = auth_headers()
    note = client.post("/api/notes", json={"title": "T"}, headers=headers).json()
    resp = client.delete(f"/api/notes/{note['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Note deleted"}
    assert client.get(f"/api/notes/{note['id']}", headers=headers).status_code == 404


def test_signup_to_empty_list_end_to_end(client, outbox):
    assert client.post("/api/auth/signup", json={"email": "a@x.com", "password": "pw1234"}).status_code == 200
    assert client.get("/api/auth/verify-email", params={"token": outbox.last_token()}).status_code == 200
    token = client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw1234"}).json()["token"]
    headers = {"x-auth-token": token}

    created = client.post("/api/notes", json={"title": "T"}, headers=headers).json()
    notes = client.get("/api/notes", headers=headers).json()
    assert len(notes) == 1
    assert notes[0]["title"] == "T"
    assert notes[0]["color"] in PALETTE

    assert client.delete(f"/api/notes/{created['id']}", headers=headers).status_code == 200
    assert client.get("/api/notes", headers=headers).json() == []


def test_health(client):
    assert client.get("/").json() == {"message": "Healthy"}
