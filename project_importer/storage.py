"""
project_importer/storage.py
-----------------------------------------------------------------------------
The storage contract the importer commits through.

The importer never persists anything itself.  Every write goes through an
object satisfying :class:`Storage`, which is passed in explicitly (there is
no process-wide storage handle).  Implementations raise
:class:`~project_importer.errors.StorageError` when a call fails; the
importer lets those propagate unchanged.

Write semantics
---------------
``register_*`` calls are idempotent: registering a path that is already
registered is a no-op.  ``write_*`` calls overwrite whatever content is
stored at the path.
"""

from __future__ import annotations

from typing import Protocol

from project_importer.draft import ProjectDraft
from project_importer.schema import ProjectIdentity


class Storage(Protocol):
    # -- owners ------------------------------------------------------------- #

    def user_email(self, owner_id: str) -> str: ...

    # -- projects ----------------------------------------------------------- #

    def create_project(self, owner_id: str, draft: ProjectDraft, settings: str) -> int: ...

    def get_project(self, owner_id: str, project_id: int) -> ProjectIdentity: ...

    def list_projects(self, owner_id: str) -> list[int]: ...

    def project_name(self, owner_id: str, project_id: int) -> str: ...

    # -- project source files ----------------------------------------------- #

    def list_source_files(self, owner_id: str, project_id: int) -> set[str]: ...

    def register_source_file(
        self, owner_id: str, project_id: int, is_external: bool, path: str
    ) -> None: ...

    def write_file(
        self, project_id: int, path: str, owner_id: str, content: str, charset: str
    ) -> int: ...

    def write_raw_file(self, project_id: int, path: str, owner_id: str, content: bytes) -> int: ...

    def max_job_size_bytes(self) -> int: ...

    # -- user files --------------------------------------------------------- #

    def list_user_files(self, owner_id: str) -> set[str]: ...

    def register_user_file(self, owner_id: str, path: str) -> None: ...

    def write_user_file(self, owner_id: str, path: str, content: bytes) -> None: ...

    # -- temp files --------------------------------------------------------- #

    def upload_temp_file(self, content: bytes) -> str: ...
