"""HTTP tests for the family album API."""

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.config import settings

from conftest import StoreError


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_PATH", str(tmp_path / "album.db"))
    monkeypatch.setattr(settings, "FAMILY_CREDENTIALS", {"Dad": "dad-secret", "Mom": "mom-secret"})
    monkeypatch.setattr(settings, "NOTE_MUTATION_RETRY_SECONDS", 0.0)
    with TestClient(create_app()) as client:
        yield client


def login(client, username="Mom", password="mom-secret") -> dict:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def make_folder(client, headers, name="Birthday") -> str:
    response = client.post("/api/folders/", json={"name": name, "date": "2024-06-01"}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


class FailingStore:
    """Wraps a store and rejects every write."""

    def __init__(self, inner):
        self.inner = inner
        self.attempts = 0

    async def insert(self, note, note_id=None):
        self.attempts += 1
        raise StoreError("insert rejected")

    async def update(self, note_id, fields):
        self.attempts += 1
        raise StoreError("update rejected")

    async def delete(self, note_id):
        self.attempts += 1
        raise StoreError("delete rejected")

    async def list_by_folder(self, folder_id):
        return await self.inner.list_by_folder(folder_id)


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_login_rejects_bad_password(client):
    response = client.post("/api/auth/login", json={"username": "Mom", "password": "nope"})
    assert response.status_code == 401


def test_routes_require_session(client):
    assert client.get("/api/folders/").status_code == 401
    assert client.get("/api/activity/", headers={"Authorization": "Bearer bogus"}).status_code == 401


def test_me_and_logout(client):
    headers = login(client, "Dad", "dad-secret")
    assert client.get("/api/auth/me", headers=headers).json() == {"id": "dad", "username": "Dad"}

    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_note_lifecycle(client):
    headers = login(client)
    folder_id = make_folder(client, headers)

    created = client.post(f"/api/folders/{folder_id}/notes", json={"content": "  Cake!  "}, headers=headers)
    assert created.status_code == 201
    note = created.json()["note"]
    assert note["content"] == "Cake!"
    assert note["updated_by"] == "Mom"
    assert not note["id"].startswith("temp-")

    updated = client.put(
        f"/api/folders/{folder_id}/notes/{note['id']}", json={"content": "Chocolate cake"}, headers=headers
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "committed"

    listed = client.get(f"/api/folders/{folder_id}/notes", params={"refresh": True}, headers=headers).json()
    assert [(n["id"], n["content"]) for n in listed] == [(note["id"], "Chocolate cake")]

    cancelled = client.delete(f"/api/folders/{folder_id}/notes/{note['id']}", headers=headers)
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert len(client.get(f"/api/folders/{folder_id}/notes", headers=headers).json()) == 1

    deleted = client.delete(
        f"/api/folders/{folder_id}/notes/{note['id']}", params={"confirm": True}, headers=headers
    )
    assert deleted.json()["status"] == "committed"
    assert client.get(f"/api/folders/{folder_id}/notes", params={"refresh": True}, headers=headers).json() == []

    actions = [e["action"] for e in client.get("/api/activity/", headers=headers).json()]
    assert sorted(actions) == sorted(["created folder", "created note", "edited notes", "deleted note"])


def test_note_validation_and_missing(client):
    headers = login(client)
    folder_id = make_folder(client, headers)

    assert client.post(f"/api/folders/{folder_id}/notes", json={"content": "   "}, headers=headers).status_code == 400
    assert client.post(
        f"/api/folders/{folder_id}/notes", json={"content": "x" * 10_001}, headers=headers
    ).status_code == 400
    assert client.put(
        f"/api/folders/{folder_id}/notes/missing", json={"content": "hi"}, headers=headers
    ).status_code == 404
    assert client.get("/api/folders/unknown/notes", headers=headers).status_code == 404


def test_update_rolls_back_when_store_keeps_failing(client):
    headers = login(client)
    folder_id = make_folder(client, headers)
    note = client.post(f"/api/folders/{folder_id}/notes", json={"content": "A"}, headers=headers).json()["note"]

    registry = client.app.state.note_registry
    token = headers["Authorization"].split(" ", 1)[1]
    coordinator = registry._coordinators[(token, folder_id)]
    failing = FailingStore(coordinator.store)
    coordinator.store = failing

    response = client.put(f"/api/folders/{folder_id}/notes/{note['id']}", json={"content": "B"}, headers=headers)

    assert response.status_code == 503
    assert failing.attempts == 3
    listed = client.get(f"/api/folders/{folder_id}/notes", headers=headers).json()
    assert [(n["id"], n["content"]) for n in listed] == [(note["id"], "A")]


def test_folder_delete_requires_confirmation(client):
    headers = login(client)
    folder_id = make_folder(client, headers, name="Zoo")

    assert client.delete(f"/api/folders/{folder_id}", headers=headers).json()["status"] == "cancelled"
    assert client.get(f"/api/folders/{folder_id}", headers=headers).status_code == 200

    response = client.delete(f"/api/folders/{folder_id}", params={"confirm": True}, headers=headers)
    assert response.json()["status"] == "deleted"
    assert client.get(f"/api/folders/{folder_id}", headers=headers).status_code == 404
    assert [f["name"] for f in client.get("/api/folders/", headers=headers).json()] == []


def test_plain_list_shows_notes_from_other_family_member(client):
    mom = login(client)
    dad = login(client, "Dad", "dad-secret")
    folder_id = make_folder(client, mom)
    assert client.get(f"/api/folders/{folder_id}/notes", headers=dad).json() == []

    client.post(f"/api/folders/{folder_id}/notes", json={"content": "From Mom"}, headers=mom)

    listed = client.get(f"/api/folders/{folder_id}/notes", headers=dad).json()
    assert [n["content"] for n in listed] == ["From Mom"]


def test_blank_folder_name_rejected(client):
    headers = login(client)
    response = client.post("/api/folders/", json={"name": "   ", "date": "2024-06-01"}, headers=headers)
    assert response.status_code == 422

    created = client.post("/api/folders/", json={"name": "  Lake  ", "date": "2024-06-01"}, headers=headers)
    assert created.json()["name"] == "Lake"


def test_photo_lifecycle(client):
    headers = login(client, "Dad", "dad-secret")
    folder_id = make_folder(client, headers, name="Garden")
    photo = {"url": "https://cdn.example/garden-1.jpg", "content_type": "image/jpeg", "size_bytes": 2048}

    created = client.post(f"/api/folders/{folder_id}/photos", json=photo, headers=headers)
    assert created.status_code == 201
    photo_id = created.json()["id"]
    assert created.json()["uploaded_by"] == "Dad"

    second = client.post(
        f"/api/folders/{folder_id}/photos", json={**photo, "url": "https://cdn.example/garden-2.jpg"}, headers=headers
    ).json()
    listed = client.get(f"/api/folders/{folder_id}/photos", headers=headers).json()
    assert [p["id"] for p in listed] == [photo_id, second["id"]]

    cancelled = client.delete(f"/api/folders/{folder_id}/photos/{photo_id}", headers=headers)
    assert cancelled.json()["status"] == "cancelled"

    deleted = client.delete(f"/api/folders/{folder_id}/photos/{photo_id}", params={"confirm": True}, headers=headers)
    assert deleted.json()["status"] == "deleted"
    assert client.delete(
        f"/api/folders/{folder_id}/photos/{photo_id}", params={"confirm": True}, headers=headers
    ).status_code == 404

    feed = client.get("/api/activity/", headers=headers).json()
    assert sorted(e["action"] for e in feed) == sorted(
        ["created folder", "uploaded photo", "uploaded photo", "deleted photo"]
    )
    assert 'Deleted a photo from folder "Garden"' in [e["details"] for e in feed]


def test_photo_upload_validation(client):
    headers = login(client)
    folder_id = make_folder(client, headers)

    not_image = {"url": "https://cdn.example/doc.pdf", "content_type": "application/pdf", "size_bytes": 10}
    too_big = {"url": "https://cdn.example/big.jpg", "content_type": "image/jpeg", "size_bytes": 10 * 1024 * 1024 + 1}

    assert client.post(f"/api/folders/{folder_id}/photos", json=not_image, headers=headers).status_code == 400
    assert client.post(f"/api/folders/{folder_id}/photos", json=too_big, headers=headers).status_code == 400
    assert client.get(f"/api/folders/{folder_id}/photos", headers=headers).json() == []
