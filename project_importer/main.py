"""
project_importer/main.py
-----------------------------------------------------------------------------
FastAPI application entrypoint for the Project Archive Importer.

This module is a **thin routing layer** – each route handler builds a
:class:`~project_importer.importer.FileImporter` for the configured storage
backend, calls one import operation, and translates the result.  All import
logic lives in dedicated modules:

Domain modules
~~~~~~~~~~~~~~
- ``project_importer.archive_reader`` – zip streaming and entry classification.
- ``project_importer.path_rewriter``  – archive path → destination path.
- ``project_importer.draft``          – in-memory new-project drafts.
- ``project_importer.screen_import``  – single-screen rename and rewrite.
- ``project_importer.size_limit``     – byte-bounded single-file reads.
- ``project_importer.name_token``     – random screen rename tokens.
- ``project_importer.commit``         – storage call sequencing.
- ``project_importer.importer``       – per-mode pipelines, tagged results.
- ``project_importer.naming``         – qualified names and source directories.
- ``project_importer.memory_storage`` – in-memory storage backend.
- ``project_importer.schema``         – Pydantic v2 request / response models.

Run with:
    uvicorn project_importer.main:app --reload --host 127.0.0.1 --port 8243

Endpoints
---------
GET  /api/projects/names                      → sorted project names of the owner
POST /api/projects/import                     → create a project from a project archive
POST /api/projects/{project_id}/screens/import → merge one screen into a project
POST /api/projects/{project_id}/files         → upload / overwrite a project asset
POST /api/user-files                          → upload / overwrite a user file
POST /api/temp-files                          → store a temp file

Every route identifies the owner with the ``X-Owner-Id`` header.
Authentication happens upstream of this service.

Error mapping
-------------
- ``NOT_PROJECT_ARCHIVE`` → 400
- ``FILE_TOO_LARGE``      → 413
- invalid / duplicate project name → 422 / 409
- ``StorageError``        → 502

Rejected imports carry ``{"detail": {"status": ..., "message": ...}}``.

Architecture notes
------------------
- All import routes are plain ``def`` handlers.  The engine does blocking
  stream reads and storage calls; FastAPI runs such handlers in its
  threadpool so the event loop is never blocked.
- The storage backend lives on ``app.state.storage`` and is handed to each
  request's importer explicitly.  Tests swap in a fresh backend per test.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.requests import Request

from project_importer.errors import ImportResult, ImportStatus, StorageError
from project_importer.importer import FileImporter
from project_importer.memory_storage import MemoryStorage
from project_importer.schema import (
    FileUploadResponse,
    ImportErrorDetail,
    ProjectIdentity,
    ProjectNameField,
    TempFileResponse,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Bootstrap
# -----------------------------------------------------------------------------

_HERE = Path(__file__).parent

# Read version from pyproject.toml (single source of truth).
_PYPROJECT = _HERE.parent / "pyproject.toml"
with open(_PYPROJECT, "rb") as _f:
    _APP_VERSION: str = tomllib.load(_f)["project"]["version"]

# -----------------------------------------------------------------------------
# FastAPI app
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Project Archive Importer",
    description=(
        "Imports project archives, single screens, assets and user files into "
        "a project storage backend."
    ),
    version=_APP_VERSION,
)

app.state.storage = MemoryStorage()


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Surface backend failures as 502 without classifying them."""
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": f"Storage error: {exc}"})


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_importer(request: Request) -> FileImporter:
    """Build an importer bound to the app's storage backend."""
    return FileImporter(request.app.state.storage)


def get_owner_id(
    request: Request,
    x_owner_id: str = Header(..., min_length=1),
    x_owner_email: str | None = Header(default=None),
) -> str:
    """
    Resolve the calling owner from request headers.

    The in-memory backend learns owners on first sight; ``X-Owner-Email``
    supplies the address used to derive package names (defaulting to
    ``<owner id>@localhost``).
    """
    add_user = getattr(request.app.state.storage, "add_user", None)
    if add_user is not None:
        add_user(x_owner_id, x_owner_email or f"{x_owner_id}@localhost")
    return x_owner_id


def _raise_for_failure(result: ImportResult) -> None:
    if result.ok:
        return
    status_code = 413 if result.status is ImportStatus.FILE_TOO_LARGE else 400
    detail = ImportErrorDetail(status=result.status, message=result.detail or "")
    raise HTTPException(status_code=status_code, detail=detail.model_dump(mode="json"))


def _validated_project_name(project_name: str) -> str:
    try:
        return ProjectNameField(project_name=project_name).project_name
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors()[0]["msg"]) from exc


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


@app.get("/api/projects/names", summary="List the owner's project names")
def list_project_names(
    owner_id: str = Depends(get_owner_id),
    importer: FileImporter = Depends(get_importer),
) -> list[str]:
    """Return the owner's project names in alphabetical order."""
    return sorted(importer.get_project_names(owner_id))


@app.post(
    "/api/projects/import",
    response_model=ProjectIdentity,
    summary="Create a new project from a project archive",
)
def import_project(
    file: UploadFile = File(...),
    project_name: str = Form(...),
    history: str | None = Form(default=None),
    owner_id: str = Depends(get_owner_id),
    importer: FileImporter = Depends(get_importer),
) -> ProjectIdentity:
    """
    Create a project named ``project_name`` from an uploaded archive.

    The archive must contain ``youngandroidproject/project.properties``;
    its content is regenerated for the new project.  Source files are moved
    into the owner's package directory.

    Raises
    ------
    HTTPException(400) : Not a zip, or no project properties file.
    HTTPException(409) : The owner already has a project with this name.
    HTTPException(422) : ``project_name`` is not a valid identifier.
    """
    name = _validated_project_name(project_name)
    if name in importer.get_project_names(owner_id):
        raise HTTPException(status_code=409, detail=f"Project '{name}' already exists.")

    result = importer.import_project(owner_id, name, file.file, history=history)
    _raise_for_failure(result)
    return result.unwrap()


@app.post(
    "/api/projects/{project_id}/screens/import",
    response_model=ProjectIdentity,
    summary="Merge a single screen from an archive into a project",
)
def import_project_screen(
    project_id: int,
    file: UploadFile = File(...),
    owner_id: str = Depends(get_owner_id),
    importer: FileImporter = Depends(get_importer),
) -> ProjectIdentity:
    """
    Import the screen files (``.scm``, ``.bky``, ``.yail``) from an archive
    under a freshly generated ``Screen<token>`` name.

    Files are written one at a time.  A 400 response after a corrupt entry
    may still leave earlier screen files in the project.
    """
    project_name = importer.project_name(owner_id, project_id)
    result = importer.import_project_screen(owner_id, project_id, project_name, file.file)
    _raise_for_failure(result)
    return result.unwrap()


@app.post(
    "/api/projects/{project_id}/files",
    response_model=FileUploadResponse,
    summary="Upload or overwrite a project asset",
)
def import_file(
    project_id: int,
    file: UploadFile = File(...),
    file_name: str = Form(..., min_length=1),
    owner_id: str = Depends(get_owner_id),
    importer: FileImporter = Depends(get_importer),
) -> FileUploadResponse:
    """
    Store ``file`` at ``file_name`` in the project, replacing existing
    content at that path.

    Raises
    ------
    HTTPException(413) : The upload is larger than the asset size limit.
    """
    result = importer.import_file(owner_id, project_id, file_name, file.file)
    _raise_for_failure(result)
    stored = result.unwrap()
    return FileUploadResponse(file_name=stored.path, size=stored.size, version=stored.version)


@app.post(
    "/api/user-files",
    response_model=FileUploadResponse,
    summary="Upload or overwrite a user file",
)
def import_user_file(
    file: UploadFile = File(...),
    file_name: str = Form(..., min_length=1),
    owner_id: str = Depends(get_owner_id),
    importer: FileImporter = Depends(get_importer),
) -> FileUploadResponse:
    """Store ``file`` in the owner's user space under ``file_name``."""
    result = importer.import_user_file(owner_id, file_name, file.file)
    _raise_for_failure(result)
    stored = result.unwrap()
    return FileUploadResponse(file_name=stored.path, size=stored.size)


@app.post(
    "/api/temp-files",
    response_model=TempFileResponse,
    summary="Store an upload as a temp file",
)
def import_temp_file(
    file: UploadFile = File(...),
    importer: FileImporter = Depends(get_importer),
) -> TempFileResponse:
    """Store the upload unchanged and return the backend's name for it."""
    return TempFileResponse(file_name=importer.import_temp_file(file.file))
