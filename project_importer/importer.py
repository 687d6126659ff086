"""
project_importer/importer.py
-----------------------------------------------------------------------------
Entry points for every import mode.

:class:`FileImporter` wires the pieces together for one storage backend:

==========================  ===============================================
Operation                   Pipeline
==========================  ===============================================
``import_project``          ArchiveReader → build_draft → create_project
``import_project_screen``   ArchiveReader → import_screen (per-file commit)
``import_file``             read_bounded → register + force-write asset
``import_user_file``        read_bounded → register + force-write user file
``import_temp_file``        read → upload_temp_file
==========================  ===============================================

Classified failures (``NOT_PROJECT_ARCHIVE``, ``FILE_TOO_LARGE``) come back
as a failed :class:`~project_importer.errors.ImportResult`; storage errors are
raised.  The upload stream passed to any operation is closed before it
returns, whatever the outcome.
"""

from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass
from typing import BinaryIO

from project_importer.archive_reader import ArchiveReader
from project_importer.commit import CommitCoordinator
from project_importer.config import MAX_ASSET_SIZE_BYTES, READ_CHUNK_SIZE
from project_importer.draft import build_draft
from project_importer.errors import FileImporterError, ImportResult
from project_importer.name_token import NameTokenGenerator
from project_importer.naming import (
    NamingContext,
    NamingConvention,
    YoungAndroidNaming,
    naming_context,
)
from project_importer.schema import ProjectIdentity
from project_importer.screen_import import IdentifierReplacer, import_screen, replace_identifier
from project_importer.size_limit import effective_limit, read_bounded
from project_importer.storage import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    """A single file written by ``import_file`` or ``import_user_file``."""

    path: str
    size: int
    version: int | None = None


class FileImporter:
    """
    Import archives and single files into one storage backend.

    Parameters
    ----------
    storage         : Backend every commit goes through.
    naming          : Naming convention for destination paths.
    token_generator : Source of screen rename tokens.
    max_asset_bytes : Configured single-file ceiling; the backend's job size
                      limit applies on top.
    replace         : Identifier replacement used when renaming screens.
    """

    def __init__(
        self,
        storage: Storage,
        naming: NamingConvention | None = None,
        token_generator: NameTokenGenerator | None = None,
        *,
        max_asset_bytes: int = MAX_ASSET_SIZE_BYTES,
        replace: IdentifierReplacer = replace_identifier,
        chunk_size: int = READ_CHUNK_SIZE,
    ) -> None:
        self._storage = storage
        self._naming = naming if naming is not None else YoungAndroidNaming()
        self._tokens = token_generator if token_generator is not None else NameTokenGenerator()
        self._max_asset_bytes = max_asset_bytes
        self._replace = replace
        self._chunk_size = chunk_size
        self._committer = CommitCoordinator(storage)

    # -- archives ----------------------------------------------------------- #

    def import_project(
        self,
        owner_id: str,
        project_name: str,
        stream: BinaryIO,
        history: str | None = None,
    ) -> ImportResult[ProjectIdentity]:
        """
        Create a new project from a project archive.

        ``project_name`` must already be validated and free for the owner.
        Nothing is written unless the whole archive reads cleanly and holds
        a manifest.
        """
        try:
            with ArchiveReader(stream) as reader:
                naming = self._naming_for(owner_id, project_name)
                draft = build_draft(
                    reader,
                    naming,
                    project_name,
                    self._naming.synthesize_manifest,
                    history=history,
                )
        except FileImporterError as exc:
            logger.error("Rejected project archive for %s: %s", project_name, exc)
            return ImportResult.failure(exc)

        identity = self._committer.create_project(owner_id, draft, self._naming.project_settings())
        return ImportResult.success(identity)

    def import_project_screen(
        self,
        owner_id: str,
        project_id: int,
        project_name: str,
        stream: BinaryIO,
    ) -> ImportResult[ProjectIdentity]:
        """
        Merge the screen held in an archive into an existing project.

        No manifest is required.  Files are committed as they are read, so a
        failed result can still leave some screen files written.
        """
        token = self._tokens.next()
        try:
            with ArchiveReader(stream, require_manifest=False) as reader:
                naming = self._naming_for(owner_id, project_name)
                import_screen(
                    reader,
                    owner_id,
                    project_id,
                    naming,
                    self._committer,
                    token,
                    replace=self._replace,
                )
        except FileImporterError as exc:
            logger.error("Rejected screen archive for project %d: %s", project_id, exc)
            return ImportResult.failure(exc)

        return ImportResult.success(self._storage.get_project(owner_id, project_id))

    # -- single files ------------------------------------------------------- #

    def import_file(
        self,
        owner_id: str,
        project_id: int,
        file_name: str,
        stream: BinaryIO,
    ) -> ImportResult[StoredFile]:
        """
        Store one asset in a project, overwriting any file at ``file_name``.

        The stored record carries the storage version stamp.
        """
        try:
            with closing(stream):
                content = read_bounded(stream, self.max_upload_bytes(), self._chunk_size)
        except FileImporterError as exc:
            return ImportResult.failure(exc)

        version = self._committer.commit_source_raw(owner_id, project_id, file_name, content)
        return ImportResult.success(StoredFile(file_name, len(content), version))

    def import_user_file(
        self, owner_id: str, file_name: str, stream: BinaryIO
    ) -> ImportResult[StoredFile]:
        """
        Store one file in the owner's user space, overwriting any existing
        file of the same name.  User files are not versioned.
        """
        try:
            with closing(stream):
                content = read_bounded(stream, self.max_upload_bytes(), self._chunk_size)
        except FileImporterError as exc:
            return ImportResult.failure(exc)

        self._committer.commit_user_file(owner_id, file_name, content)
        return ImportResult.success(StoredFile(file_name, len(content)))

    def import_temp_file(self, stream: BinaryIO) -> str:
        """Store the stream's bytes as a temp file and return its name."""
        with closing(stream):
            content = stream.read()
        return self._storage.upload_temp_file(content)

    # -- queries ------------------------------------------------------------ #

    def get_project_names(self, owner_id: str) -> set[str]:
        return {
            self._storage.project_name(owner_id, project_id)
            for project_id in self._storage.list_projects(owner_id)
        }

    def project_name(self, owner_id: str, project_id: int) -> str:
        return self._storage.project_name(owner_id, project_id)

    def max_upload_bytes(self) -> int:
        return effective_limit(self._storage, self._max_asset_bytes)

    # -- helpers ------------------------------------------------------------ #

    def _naming_for(self, owner_id: str, project_name: str) -> NamingContext:
        return naming_context(self._naming, self._storage.user_email(owner_id), project_name)
