"""
project_importer/memory_storage.py
-----------------------------------------------------------------------------
A process-local, in-memory implementation of the :class:`Storage` contract.

This backend keeps everything in dictionaries guarded by a single lock.  It
is what the HTTP app runs against by default and what the test suite uses to
observe commits; it is not meant to survive a restart.

Versions
--------
``write_file`` / ``write_raw_file`` return the project's new modification
stamp in milliseconds since the Unix epoch.  Stamps are strictly increasing
per project, even for writes that land within the same millisecond.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from project_importer.config import MAX_JOB_SIZE_BYTES
from project_importer.draft import ProjectDraft
from project_importer.errors import StorageError
from project_importer.schema import ProjectIdentity

TEMP_FILE_PREFIX: str = "__TEMP__/"


def _now_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass
class _StoredProject:
    owner_id: str
    name: str
    project_type: str
    settings: str
    date_created: int
    date_modified: int
    history: str | None = None
    source_files: set[str] = field(default_factory=set)
    files: dict[str, bytes] = field(default_factory=dict)


@dataclass
class _StoredUser:
    email: str
    file_names: set[str] = field(default_factory=set)
    files: dict[str, bytes] = field(default_factory=dict)


class MemoryStorage:
    """
    Dictionary-backed storage.

    Parameters
    ----------
    max_job_size_bytes : Value reported by :meth:`max_job_size_bytes`.
    """

    def __init__(self, max_job_size_bytes: int = MAX_JOB_SIZE_BYTES) -> None:
        self._max_job_size_bytes = max_job_size_bytes
        self._lock = threading.Lock()
        self._users: dict[str, _StoredUser] = {}
        self._projects: dict[int, _StoredProject] = {}
        self._temp_files: dict[str, bytes] = {}
        self._next_project_id = 1

    # -- owners ------------------------------------------------------------- #

    def add_user(self, owner_id: str, email: str) -> None:
        with self._lock:
            self._users.setdefault(owner_id, _StoredUser(email=email))

    def user_email(self, owner_id: str) -> str:
        with self._lock:
            return self._user(owner_id).email

    # -- projects ----------------------------------------------------------- #

    def create_project(self, owner_id: str, draft: ProjectDraft, settings: str) -> int:
        with self._lock:
            self._user(owner_id)
            for project in self._projects.values():
                if project.owner_id == owner_id and project.name == draft.name:
                    raise StorageError(
                        f"Owner '{owner_id}' already has a project named '{draft.name}'."
                    )

            now = _now_millis()
            project = _StoredProject(
                owner_id=owner_id,
                name=draft.name,
                project_type=draft.project_type,
                settings=settings,
                date_created=now,
                date_modified=now,
                history=draft.history,
            )
            for text_file in draft.text_files:
                project.files[text_file.path] = text_file.content.encode("utf-8")
                project.source_files.add(text_file.path)
            for raw_file in draft.raw_files:
                project.files[raw_file.path] = raw_file.content
                project.source_files.add(raw_file.path)

            project_id = self._next_project_id
            self._next_project_id += 1
            self._projects[project_id] = project
            return project_id

    def get_project(self, owner_id: str, project_id: int) -> ProjectIdentity:
        with self._lock:
            project = self._project(owner_id, project_id)
            return ProjectIdentity(
                owner_id=owner_id,
                project_id=project_id,
                name=project.name,
                project_type=project.project_type,
                date_created=project.date_created,
                date_modified=project.date_modified,
            )

    def list_projects(self, owner_id: str) -> list[int]:
        with self._lock:
            return sorted(pid for pid, p in self._projects.items() if p.owner_id == owner_id)

    def project_name(self, owner_id: str, project_id: int) -> str:
        with self._lock:
            return self._project(owner_id, project_id).name

    def project_settings(self, owner_id: str, project_id: int) -> str:
        with self._lock:
            return self._project(owner_id, project_id).settings

    def project_history(self, owner_id: str, project_id: int) -> str | None:
        with self._lock:
            return self._project(owner_id, project_id).history

    # -- project source files ----------------------------------------------- #

    def list_source_files(self, owner_id: str, project_id: int) -> set[str]:
        with self._lock:
            return set(self._project(owner_id, project_id).source_files)

    def register_source_file(
        self, owner_id: str, project_id: int, is_external: bool, path: str
    ) -> None:
        # is_external marks files shared from another project; this backend
        # has no sharing, so it is accepted and ignored.
        with self._lock:
            self._project(owner_id, project_id).source_files.add(path)

    def write_file(
        self, project_id: int, path: str, owner_id: str, content: str, charset: str
    ) -> int:
        return self.write_raw_file(project_id, path, owner_id, content.encode(charset))

    def write_raw_file(self, project_id: int, path: str, owner_id: str, content: bytes) -> int:
        with self._lock:
            project = self._project(owner_id, project_id)
            if path not in project.source_files:
                raise StorageError(f"File '{path}' is not registered in project {project_id}.")
            project.files[path] = bytes(content)
            project.date_modified = max(_now_millis(), project.date_modified + 1)
            return project.date_modified

    def read_file(self, owner_id: str, project_id: int, path: str) -> bytes:
        with self._lock:
            project = self._project(owner_id, project_id)
            try:
                return project.files[path]
            except KeyError:
                raise StorageError(f"No file '{path}' in project {project_id}.") from None

    def max_job_size_bytes(self) -> int:
        return self._max_job_size_bytes

    # -- user files --------------------------------------------------------- #

    def list_user_files(self, owner_id: str) -> set[str]:
        with self._lock:
            return set(self._user(owner_id).file_names)

    def register_user_file(self, owner_id: str, path: str) -> None:
        with self._lock:
            self._user(owner_id).file_names.add(path)

    def write_user_file(self, owner_id: str, path: str, content: bytes) -> None:
        with self._lock:
            user = self._user(owner_id)
            if path not in user.file_names:
                raise StorageError(f"User file '{path}' is not registered for '{owner_id}'.")
            user.files[path] = bytes(content)

    def read_user_file(self, owner_id: str, path: str) -> bytes:
        with self._lock:
            try:
                return self._user(owner_id).files[path]
            except KeyError:
                raise StorageError(f"No user file '{path}' for '{owner_id}'.") from None

    # -- temp files --------------------------------------------------------- #

    def upload_temp_file(self, content: bytes) -> str:
        name = f"{TEMP_FILE_PREFIX}{uuid.uuid4().hex}"
        with self._lock:
            self._temp_files[name] = bytes(content)
        return name

    def read_temp_file(self, name: str) -> bytes:
        with self._lock:
            try:
                return self._temp_files[name]
            except KeyError:
                raise StorageError(f"No temp file '{name}'.") from None

    # -- lookups (caller holds the lock) ------------------------------------ #

    def _user(self, owner_id: str) -> _StoredUser:
        try:
            return self._users[owner_id]
        except KeyError:
            raise StorageError(f"Unknown owner '{owner_id}'.") from None

    def _project(self, owner_id: str, project_id: int) -> _StoredProject:
        project = self._projects.get(project_id)
        if project is None or project.owner_id != owner_id:
            raise StorageError(f"Owner '{owner_id}' has no project {project_id}.")
        return project
