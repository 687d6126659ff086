"""
project_importer/commit.py
-----------------------------------------------------------------------------
Sequencing of storage calls that turn imported content into persisted state.

Atomicity differs by mode:

- **New project** – one ``create_project`` call takes the whole draft, so
  the project either exists with every file or does not exist at all.
- **Per-file commits** (screen files, project assets, user files) – each
  file is registered and written on its own.  There is no transaction
  spanning files: if the third of three files fails, the first two stay
  written.
"""

from __future__ import annotations

import logging

from project_importer.config import DEFAULT_CHARSET
from project_importer.draft import ProjectDraft
from project_importer.schema import ProjectIdentity
from project_importer.storage import Storage

logger = logging.getLogger(__name__)


class CommitCoordinator:
    """Issue the storage calls for each import mode."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def create_project(self, owner_id: str, draft: ProjectDraft, settings: str) -> ProjectIdentity:
        project_id = self._storage.create_project(owner_id, draft, settings)
        logger.info(
            "Created project %s (%d) for %s with %d files",
            draft.name,
            project_id,
            owner_id,
            len(draft.text_files) + len(draft.raw_files),
        )
        return self._storage.get_project(owner_id, project_id)

    def commit_source_text(
        self,
        owner_id: str,
        project_id: int,
        path: str,
        content: str,
        charset: str = DEFAULT_CHARSET,
    ) -> int:
        """Register ``path`` unless already present, then overwrite it with ``content``."""
        if path not in self._storage.list_source_files(owner_id, project_id):
            self._storage.register_source_file(owner_id, project_id, False, path)
        version = self._storage.write_file(project_id, path, owner_id, content, charset)
        logger.info("Wrote %s to project %d", path, project_id)
        return version

    def commit_source_raw(self, owner_id: str, project_id: int, path: str, content: bytes) -> int:
        """Register ``path`` unless already present, then overwrite it."""
        if path not in self._storage.list_source_files(owner_id, project_id):
            self._storage.register_source_file(owner_id, project_id, False, path)
        version = self._storage.write_raw_file(project_id, path, owner_id, content)
        logger.info("Wrote %d bytes to %s in project %d", len(content), path, project_id)
        return version

    def commit_user_file(self, owner_id: str, path: str, content: bytes) -> None:
        if path not in self._storage.list_user_files(owner_id):
            self._storage.register_user_file(owner_id, path)
        self._storage.write_user_file(owner_id, path, content)
        logger.info("Wrote %d bytes to user file %s for %s", len(content), path, owner_id)
