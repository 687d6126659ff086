"""
project_importer/schema.py
-----------------------------------------------------------------------------
Pydantic v2 models for the importer's storage identities and HTTP API.

Design principles
-----------------
• Keep models thin – no business logic here.
• Every field has a `description` so FastAPI's auto-generated OpenAPI UI is
  immediately useful.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from project_importer.errors import ImportStatus

_PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# -----------------------------------------------------------------------------
# Storage identities
# -----------------------------------------------------------------------------


class ProjectIdentity(BaseModel):
    """
    A persisted project as seen by its owner.

    Returned by the storage backend after a project is created or changed,
    and by every import route that targets a project.
    """

    owner_id: str = Field(..., description="Identifier of the project's owner.")
    project_id: int = Field(..., description="Backend-assigned project identifier.")
    name: str = Field(..., description="Project name, unique per owner.")
    project_type: str = Field(
        ...,
        description="Project type tag (e.g. 'YoungAndroid').",
        examples=["YoungAndroid"],
    )
    date_created: int = Field(
        ...,
        description="Creation time in milliseconds since the Unix epoch.",
    )
    date_modified: int = Field(
        ...,
        description="Last modification time in milliseconds since the Unix epoch.",
    )


# -----------------------------------------------------------------------------
# Upload responses
# -----------------------------------------------------------------------------


class FileUploadResponse(BaseModel):
    """
    Response body for single-file uploads (project assets and user files).

    Fields
    ------
    status    – Always ``SUCCESS``; failures are reported as HTTP errors.
    file_name – Destination path the content was written to.
    size      – Number of bytes stored.
    version   – Storage version stamp for project assets; None for user
                files, which are not versioned.
    """

    status: ImportStatus = Field(default=ImportStatus.SUCCESS)
    file_name: str = Field(..., description="Destination path of the stored file.")
    size: int = Field(..., ge=0, description="Number of bytes stored.")
    version: int | None = Field(
        default=None,
        description="Modification stamp returned by storage, when available.",
    )


class TempFileResponse(BaseModel):
    """Response body for ``POST /api/temp-files``."""

    file_name: str = Field(..., description="Backend name of the stored temp file.")


class ImportErrorDetail(BaseModel):
    """
    The ``detail`` payload of a rejected import.

    Carried inside FastAPI's standard ``{"detail": ...}`` error envelope so a
    client can branch on ``status`` rather than parse the message.
    """

    status: ImportStatus = Field(..., description="Classified failure status.")
    message: str = Field(..., description="Human-readable explanation.")


class ProjectNameField(BaseModel):
    """Validation helper for project names supplied by form fields."""

    project_name: str = Field(..., min_length=1, max_length=200)

    @field_validator("project_name")
    @classmethod
    def name_is_identifier(cls, v: str) -> str:
        """Project names become package segments, so must be identifiers."""
        v = v.strip()
        if not _PROJECT_NAME_PATTERN.match(v):
            raise ValueError(
                "project_name must start with a letter and contain only letters, "
                "digits and underscores"
            )
        return v
