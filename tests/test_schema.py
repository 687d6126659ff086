"""Tests for project_importer/schema.py – Pydantic v2 models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from project_importer.errors import ImportStatus
from project_importer.schema import (
    FileUploadResponse,
    ImportErrorDetail,
    ProjectIdentity,
    ProjectNameField,
)


class TestProjectNameField:
    @pytest.mark.parametrize("name", ["Demo", "a", "My_App2", "  Padded  "])
    def test_valid_names(self, name: str) -> None:
        assert ProjectNameField(project_name=name).project_name == name.strip()

    @pytest.mark.parametrize("name", ["", "   ", "2fast", "_hidden", "has space", "dash-ed", "ü"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(ValidationError):
            ProjectNameField(project_name=name)

    def test_too_long(self) -> None:
        with pytest.raises(ValidationError):
            ProjectNameField(project_name="a" * 201)


class TestResponses:
    def test_upload_response_defaults(self) -> None:
        resp = FileUploadResponse(file_name="assets/a.png", size=3)
        assert resp.status is ImportStatus.SUCCESS
        assert resp.version is None

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FileUploadResponse(file_name="a", size=-1)

    def test_error_detail_dumps_status_string(self) -> None:
        detail = ImportErrorDetail(status=ImportStatus.FILE_TOO_LARGE, message="big")
        assert detail.model_dump(mode="json") == {"status": "FILE_TOO_LARGE", "message": "big"}

    def test_identity_fields(self) -> None:
        identity = ProjectIdentity(
            owner_id="o",
            project_id=1,
            name="Demo",
            project_type="YoungAndroid",
            date_created=1,
            date_modified=2,
        )
        assert identity.model_dump()["project_id"] == 1
