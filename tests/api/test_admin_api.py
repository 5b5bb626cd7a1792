"""HTTP tests for the admin gallery, video and inbox endpoints."""

import asyncio

import pytest

from src.api.dependencies import get_storage_client
from src.infrastructure.storage.client import MockStorageClient, StorageError


@pytest.fixture
def seeded(storage_client):
    for path in ("photos/wedding/.placeholder", "photos/wedding/1_a.jpg", "photos/wedding/2_b.jpg"):
        asyncio.run(storage_client.upload(path, b"x"))
    return storage_client


# ---------------------------------------------------------------------------
# Galleries
# ---------------------------------------------------------------------------

class TestGalleries:

    def test_create_then_list(self, admin):
        response = admin.post("/api/admin/galleries", json={"name": "Wedding 2024"})

        assert response.status_code == 201
        assert response.json()["id"] == "wedding_2024"

        [gallery] = admin.get("/api/admin/galleries").json()
        assert gallery["id"] == "wedding_2024"
        assert gallery["name"] == "wedding 2024"
        assert "createdAt" in gallery

    @pytest.mark.parametrize("name", ["   ", ".", "..", "a/b"])
    def test_create_with_unusable_name(self, admin, name):
        assert admin.post("/api/admin/galleries", json={"name": name}).status_code == 400
        assert admin.get("/api/admin/galleries").json() == []

    def test_upload_and_list_photos(self, admin):
        admin.post("/api/admin/galleries", json={"name": "wedding"})

        response = admin.post(
            "/api/admin/galleries/wedding/photos",
            files=[
                ("files", ("a.jpg", b"1", "image/jpeg")),
                ("files", ("b.jpg", b"2", "image/jpeg")),
            ],
        )

        assert response.status_code == 201
        assert len(response.json()) == 2

        photos = admin.get("/api/admin/galleries/wedding/photos").json()
        assert sorted(p["name"].split("_", 1)[1] for p in photos) == ["a.jpg", "b.jpg"]

    def test_display_name(self, admin, seeded):
        response = admin.put(
            "/api/admin/galleries/wedding/display-name",
            json={"displayName": "The Big Day"},
        )

        assert response.status_code == 200
        assert response.json()["key"] == "gallery_wedding"
        [gallery] = admin.get("/api/admin/galleries").json()
        assert gallery["name"] == "The Big Day"
        assert gallery["id"] == "wedding"

    def test_rename_moves_folder(self, admin, seeded):
        response = admin.post("/api/admin/galleries/wedding/rename", json={"newName": "Summer Wedding"})

        assert response.status_code == 200
        body = response.json()
        assert body["renamed"] is True
        assert body["galleryId"] == "summer_wedding"
        assert body["rename"]["status"] == "completed"
        assert body["rename"]["total"] == 3
        assert all(p.startswith("photos/summer_wedding/") for p in seeded.paths())
        assert admin.get("/api/admin/galleries/renames").json() == []

    def test_rename_to_same_slug(self, admin, seeded):
        response = admin.post("/api/admin/galleries/wedding/rename", json={"newName": "Wedding"})

        assert response.json() == {"renamed": False, "galleryId": "wedding"}

    def test_rename_errors(self, admin, seeded):
        asyncio.run(seeded.upload("photos/portraits/1_a.jpg", b"x"))

        assert admin.post(
            "/api/admin/galleries/wedding/rename", json={"newName": "portraits"},
        ).status_code == 409
        assert admin.post(
            "/api/admin/galleries/missing/rename", json={"newName": "new"},
        ).status_code == 404
        assert admin.post(
            "/api/admin/galleries/wedding/rename", json={"newName": "a/b"},
        ).status_code == 400

    def test_unknown_rename_intent(self, admin):
        assert admin.post("/api/admin/galleries/renames/nope/resume").status_code == 404
        assert admin.post("/api/admin/galleries/renames/nope/rollback").status_code == 404


# ---------------------------------------------------------------------------
# Videos
# ---------------------------------------------------------------------------

class TestVideos:

    def test_upload_rename_delete(self, admin, storage_client):
        response = admin.post(
            "/api/admin/videos",
            files={"file": ("raw.mp4", b"data", "video/mp4")},
            data={"title": "Summer Reel"},
        )

        assert response.status_code == 201
        path = response.json()["path"]
        assert path.startswith("videos/Summer_Reel_")

        renamed = admin.put(
            "/api/admin/videos/display-name",
            json={"path": path, "newName": "Showreel"},
        )
        assert renamed.status_code == 200
        assert renamed.json()["displayName"] == "Showreel"
        [video] = admin.get("/api/admin/videos").json()
        assert video["name"] == "Showreel"
        assert video["path"] == path

        assert admin.delete("/api/admin/videos", params={"path": path}).status_code == 204
        assert admin.get("/api/admin/videos").json() == []
        assert storage_client.paths() == []

    def test_missing_video(self, admin):
        assert admin.put(
            "/api/admin/videos/display-name",
            json={"path": "videos/ghost.mp4", "newName": "Ghost"},
        ).status_code == 404
        assert admin.delete("/api/admin/videos", params={"path": "videos/ghost.mp4"}).status_code == 404


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------

class TestMessages:

    def receive(self, client, subject):
        response = client.post("/api/emails/inbound", json={
            "from": "client@example.org",
            "to": "hello@example.com",
            "subject": subject,
            "text": "body",
        })
        assert response.status_code == 200

    def test_toggle_and_unread_count(self, admin):
        self.receive(admin, "first")
        self.receive(admin, "second")
        [message, _] = admin.get("/api/admin/messages").json()["messages"]

        toggled = admin.post(f"/api/admin/messages/{message['id']}/toggle")

        assert toggled.json() == {"id": message["id"], "status": "read"}
        assert admin.get("/api/admin/messages/unread-count").json() == {"unreadCount": 1}
        read = admin.get("/api/admin/messages", params={"status": "read"}).json()["messages"]
        assert [m["id"] for m in read] == [message["id"]]

    def test_set_status_search_and_delete(self, admin):
        self.receive(admin, "Wedding inquiry")
        self.receive(admin, "Invoice")
        [wedding] = admin.get("/api/admin/messages", params={"q": "wedding"}).json()["messages"]

        response = admin.put(f"/api/admin/messages/{wedding['id']}/status", json={"status": "read"})
        assert response.json()["status"] == "read"

        assert admin.delete(f"/api/admin/messages/{wedding['id']}").status_code == 204
        remaining = admin.get("/api/admin/messages").json()["messages"]
        assert [m["subject"] for m in remaining] == ["Invoice"]

    def test_unknown_message(self, admin):
        assert admin.post("/api/admin/messages/nope/toggle").status_code == 404
        assert admin.put("/api/admin/messages/nope/status", json={"status": "read"}).status_code == 404
        assert admin.delete("/api/admin/messages/nope").status_code == 404

    def test_invalid_status_filter(self, admin):
        assert admin.get("/api/admin/messages", params={"status": "archived"}).status_code == 422


# ---------------------------------------------------------------------------
# Storage outages
# ---------------------------------------------------------------------------

class UnreachableStorage(MockStorageClient):
    async def list_folder(self, prefix):
        raise StorageError("List failed: endpoint unreachable")

    async def exists(self, path):
        raise StorageError("Head failed: endpoint unreachable")


class TestStorageOutage:

    @pytest.fixture(autouse=True)
    def unreachable(self, app):
        app.dependency_overrides[get_storage_client] = lambda: UnreachableStorage()

    def test_rename_reports_failure(self, admin):
        response = admin.post("/api/admin/galleries/wedding/rename", json={"newName": "new"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to rename gallery"}
        assert admin.get("/api/admin/galleries/renames").json() == []

    def test_video_delete_reports_failure(self, admin):
        response = admin.delete("/api/admin/videos", params={"path": "videos/a.mp4"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to delete video"}
