"""Tests for project_importer/main.py – FastAPI routes and error mapping."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import patch

from conftest import DEMO_SOURCE_DIR, OWNER_ID
from fastapi.testclient import TestClient

from project_importer.draft import ProjectDraft
from project_importer.errors import StorageError
from project_importer.memory_storage import MemoryStorage

MANIFEST = "youngandroidproject/project.properties"

# ── Helpers ──────────────────────────────────────────────────────────────────


def _upload(data: bytes, name: str = "upload.aia") -> dict:
    return {"file": (name, data, "application/octet-stream")}


# ── Project names ────────────────────────────────────────────────────────────


class TestProjectNames:
    def test_sorted(self, client: TestClient, storage: MemoryStorage) -> None:
        storage.create_project(OWNER_ID, ProjectDraft(name="Zed"), "{}")
        storage.create_project(OWNER_ID, ProjectDraft(name="Alpha"), "{}")

        resp = client.get("/api/projects/names")

        assert resp.status_code == 200
        assert resp.json() == ["Alpha", "Zed"]

    def test_missing_owner_header_is_422(self, client: TestClient) -> None:
        resp = client.get("/api/projects/names", headers={"X-Owner-Id": ""})
        assert resp.status_code == 422

    def test_new_owner_is_learned(self, client: TestClient, storage: MemoryStorage) -> None:
        resp = client.get("/api/projects/names", headers={"X-Owner-Id": "fresh"})
        assert resp.status_code == 200
        assert storage.user_email("fresh") == "bob.smith@example.com"


# ── Project import ───────────────────────────────────────────────────────────


class TestImportProjectRoute:
    def test_success(
        self,
        client: TestClient,
        storage: MemoryStorage,
        make_zip: Callable[..., bytes],
        project_archive_files: dict,
    ) -> None:
        resp = client.post(
            "/api/projects/import",
            files=_upload(make_zip(project_archive_files)),
            data={"project_name": "Demo"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Demo"
        assert f"{DEMO_SOURCE_DIR}/Screen1.scm" in storage.list_source_files(
            OWNER_ID, body["project_id"]
        )

    def test_not_a_zip_is_400(self, client: TestClient) -> None:
        resp = client.post(
            "/api/projects/import",
            files=_upload(b"hello"),
            data={"project_name": "Demo"},
        )

        assert resp.status_code == 400
        assert resp.json()["detail"]["status"] == "NOT_PROJECT_ARCHIVE"

    def test_missing_manifest_is_400(
        self, client: TestClient, make_zip: Callable[..., bytes]
    ) -> None:
        resp = client.post(
            "/api/projects/import",
            files=_upload(make_zip({"assets/a.png": b"\x00"})),
            data={"project_name": "Demo"},
        )
        assert resp.status_code == 400

    def test_invalid_name_is_422(self, client: TestClient, make_zip: Callable[..., bytes]) -> None:
        resp = client.post(
            "/api/projects/import",
            files=_upload(make_zip({MANIFEST: "x"})),
            data={"project_name": "9lives"},
        )
        assert resp.status_code == 422

    def test_duplicate_name_is_409(
        self, client: TestClient, storage: MemoryStorage, make_zip: Callable[..., bytes]
    ) -> None:
        storage.create_project(OWNER_ID, ProjectDraft(name="Demo"), "{}")
        resp = client.post(
            "/api/projects/import",
            files=_upload(make_zip({MANIFEST: "x"})),
            data={"project_name": "Demo"},
        )
        assert resp.status_code == 409

    def test_storage_error_is_502(
        self, client: TestClient, storage: MemoryStorage, make_zip: Callable[..., bytes]
    ) -> None:
        with patch.object(storage, "create_project", side_effect=StorageError("backend down")):
            resp = client.post(
                "/api/projects/import",
                files=_upload(make_zip({MANIFEST: "x"})),
                data={"project_name": "Demo"},
            )

        assert resp.status_code == 502
        assert "backend down" in resp.json()["detail"]


# ── Screen import ────────────────────────────────────────────────────────────


class TestImportScreenRoute:
    def test_success(
        self, client: TestClient, storage: MemoryStorage, make_zip: Callable[..., bytes]
    ) -> None:
        pid = storage.create_project(OWNER_ID, ProjectDraft(name="Demo"), "{}")
        resp = client.post(
            f"/api/projects/{pid}/screens/import",
            files=_upload(make_zip({"src/x/Screen1.scm": "Screen1"})),
        )

        assert resp.status_code == 200
        assert resp.json()["project_id"] == pid
        screens = [
            p for p in storage.list_source_files(OWNER_ID, pid) if p.endswith(".scm")
        ]
        assert len(screens) == 1
        assert screens[0].startswith(DEMO_SOURCE_DIR.rsplit("/", 1)[0] + "/Screen")

    def test_unknown_project_is_502(
        self, client: TestClient, make_zip: Callable[..., bytes]
    ) -> None:
        resp = client.post(
            "/api/projects/42/screens/import",
            files=_upload(make_zip({"src/x/Screen1.scm": "x"})),
        )
        assert resp.status_code == 502

    def test_not_a_zip_is_400(self, client: TestClient, storage: MemoryStorage) -> None:
        pid = storage.create_project(OWNER_ID, ProjectDraft(name="Demo"), "{}")
        resp = client.post(f"/api/projects/{pid}/screens/import", files=_upload(b"nope"))
        assert resp.status_code == 400


# ── Single files ─────────────────────────────────────────────────────────────


class TestFileRoutes:
    def test_project_file(self, client: TestClient, storage: MemoryStorage) -> None:
        pid = storage.create_project(OWNER_ID, ProjectDraft(name="Demo"), "{}")
        resp = client.post(
            f"/api/projects/{pid}/files",
            files=_upload(b"\x89PNG", "kitty.png"),
            data={"file_name": "assets/kitty.png"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "SUCCESS"
        assert body["file_name"] == "assets/kitty.png"
        assert body["size"] == 4
        assert body["version"] == storage.get_project(OWNER_ID, pid).date_modified

    def test_project_file_too_large_is_413(
        self, client: TestClient, storage: MemoryStorage
    ) -> None:
        pid = storage.create_project(OWNER_ID, ProjectDraft(name="Demo"), "{}")
        too_big = b"x" * (storage.max_job_size_bytes() + 1)
        resp = client.post(
            f"/api/projects/{pid}/files",
            files=_upload(too_big),
            data={"file_name": "assets/big.bin"},
        )

        assert resp.status_code == 413
        assert resp.json()["detail"]["status"] == "FILE_TOO_LARGE"
        assert "assets/big.bin" not in storage.list_source_files(OWNER_ID, pid)

    def test_user_file(self, client: TestClient, storage: MemoryStorage) -> None:
        resp = client.post(
            "/api/user-files",
            files=_upload(b"secret"),
            data={"file_name": "android.keystore"},
        )

        assert resp.status_code == 200
        assert resp.json()["version"] is None
        assert storage.read_user_file(OWNER_ID, "android.keystore") == b"secret"

    def test_temp_file(self, client: TestClient, storage: MemoryStorage) -> None:
        resp = client.post("/api/temp-files", files=_upload(b"tmp"))

        assert resp.status_code == 200
        assert storage.read_temp_file(resp.json()["file_name"]) == b"tmp"
