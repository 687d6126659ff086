"""
project_importer/errors.py
-----------------------------------------------------------------------------
Failure taxonomy for archive and file imports.

Classified failures
-------------------
Every failure the importer can explain to a user derives from
:class:`FileImporterError` and carries an :class:`ImportStatus`:

==========================  =========================
Exception                   Status
==========================  =========================
``ArchiveFormatError``      ``NOT_PROJECT_ARCHIVE``
``MissingManifestError``    ``NOT_PROJECT_ARCHIVE``
``SizeLimitExceeded``       ``FILE_TOO_LARGE``
==========================  =========================

Anything raised by the storage backend is a :class:`StorageError` and is
deliberately *not* a ``FileImporterError``: it is propagated to the caller
unclassified.

Tagged results
--------------
The public import operations in ``project_importer.importer`` do not raise
classified failures.  They return an :class:`ImportResult`, which holds
either a value or the status and message of the failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ImportStatus(str, Enum):
    """Status codes surfaced to callers of the import operations."""

    SUCCESS = "SUCCESS"
    NOT_PROJECT_ARCHIVE = "NOT_PROJECT_ARCHIVE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"


class FileImporterError(Exception):
    """Base class for classified import failures."""

    status: ImportStatus = ImportStatus.NOT_PROJECT_ARCHIVE


class ArchiveFormatError(FileImporterError):
    """The uploaded bytes are not a readable zip container."""

    status = ImportStatus.NOT_PROJECT_ARCHIVE


class MissingManifestError(FileImporterError):
    """The container is valid but holds no project properties file."""

    status = ImportStatus.NOT_PROJECT_ARCHIVE


class SizeLimitExceeded(FileImporterError):
    """A single-file upload is larger than the permitted ceiling."""

    status = ImportStatus.FILE_TOO_LARGE

    def __init__(self, limit_bytes: int, read_bytes: int) -> None:
        super().__init__(
            f"Upload exceeds the {limit_bytes:,}-byte limit "
            f"(read {read_bytes:,} bytes before stopping)."
        )
        self.limit_bytes = limit_bytes
        self.read_bytes = read_bytes


class StorageError(Exception):
    """A storage backend call failed."""


@dataclass(frozen=True)
class ImportResult(Generic[T]):
    """
    Outcome of one import call: a value on success, a status otherwise.

    Use :meth:`success` / :meth:`failure` rather than the constructor so the
    two shapes can't be mixed.
    """

    status: ImportStatus
    value: T | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ImportStatus.SUCCESS

    @classmethod
    def success(cls, value: T) -> ImportResult[T]:
        return cls(status=ImportStatus.SUCCESS, value=value)

    @classmethod
    def failure(cls, exc: FileImporterError) -> ImportResult[T]:
        return cls(status=exc.status, detail=str(exc) or exc.status.value)

    def unwrap(self) -> T:
        """Return the value, or raise ``ValueError`` for a failed result."""
        if not self.ok:
            raise ValueError(f"Import failed with status {self.status.value}: {self.detail}")
        return self.value  # type: ignore[return-value]
