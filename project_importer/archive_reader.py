"""
project_importer/archive_reader.py
-----------------------------------------------------------------------------
Stream entries out of an uploaded zip archive and classify each one.

The container itself is decoded by the standard-library ``zipfile`` codec.
This module only decides what each entry *is*:

- **manifest** – the project properties file that marks the archive as a
  project package (``youngandroidproject/project.properties``).
- **ignored**  – entries that exported archives carry but imports never
  keep (remix history, the Android keystore).
- **regular**  – everything else.

Directory entries are dropped before classification.

Usage
-----
::

    with ArchiveReader(upload_stream) as reader:
        for entry in reader:
            ...

The reader owns the stream it was given: it is closed when the ``with``
block exits, when iteration finishes, or when iteration fails, whichever
comes first.

Errors
------
``ArchiveFormatError``   – the bytes are not a zip archive, or an entry
                           fails to decompress / verify its CRC.
``MissingManifestError`` – iteration completed without a manifest entry
                           (only when ``require_manifest`` is set).
"""

from __future__ import annotations

import io
import logging
import lzma
import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from project_importer.config import IGNORED_PATHS, PROJECT_PROPERTIES_FILE_NAME
from project_importer.errors import ArchiveFormatError, MissingManifestError

logger = logging.getLogger(__name__)

# Exceptions ``zipfile`` raises for corrupt or unsupported entries.  The
# RuntimeError case is an encrypted entry with no password supplied; bz2
# reports a corrupt stream as OSError.
_CONTAINER_ERRORS: tuple[type[BaseException], ...] = (
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    OSError,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


class EntryKind(str, Enum):
    MANIFEST = "manifest"
    IGNORED = "ignored"
    REGULAR = "regular"


@dataclass(frozen=True)
class ArchiveEntry:
    """One non-directory file read out of the archive."""

    path: str
    is_directory: bool
    content: bytes
    kind: EntryKind = EntryKind.REGULAR


class ArchiveReader:
    """
    Iterate the classified file entries of a zip byte stream.

    Parameters
    ----------
    stream           : Binary file-like object holding the archive.  Non-
                       seekable streams are buffered into memory first,
                       since the zip central directory sits at the end.
    ignored_paths    : Entry paths classified as ``IGNORED``.
    manifest_path    : Entry path classified as ``MANIFEST``.
    require_manifest : Raise ``MissingManifestError`` when iteration ends
                       without a manifest entry.
    """

    def __init__(
        self,
        stream: BinaryIO,
        ignored_paths: frozenset[str] = IGNORED_PATHS,
        *,
        manifest_path: str = PROJECT_PROPERTIES_FILE_NAME,
        require_manifest: bool = True,
    ) -> None:
        self._stream = stream
        self._ignored_paths = ignored_paths
        self._manifest_path = manifest_path
        self._require_manifest = require_manifest
        self._zip: zipfile.ZipFile | None = None
        self._closed = False
        self.manifest_seen = False

    # -- context management ------------------------------------------------ #

    def __enter__(self) -> ArchiveReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the zip handle and the underlying stream.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._zip is not None:
                self._zip.close()
        finally:
            self._stream.close()

    # -- classification ---------------------------------------------------- #

    def classify(self, path: str) -> EntryKind:
        if path == self._manifest_path:
            return EntryKind.MANIFEST
        if path in self._ignored_paths:
            return EntryKind.IGNORED
        return EntryKind.REGULAR

    # -- iteration --------------------------------------------------------- #

    def __iter__(self) -> Iterator[ArchiveEntry]:
        try:
            zf = self._open()
            for info in zf.infolist():
                if info.is_dir():
                    continue

                kind = self.classify(info.filename)
                content = self._read(zf, info)
                if kind is EntryKind.MANIFEST:
                    self.manifest_seen = True

                logger.debug("Archive entry %s classified as %s", info.filename, kind.value)
                yield ArchiveEntry(
                    path=info.filename,
                    is_directory=False,
                    content=content,
                    kind=kind,
                )

            if self._require_manifest and not self.manifest_seen:
                raise MissingManifestError(
                    f"Archive contains no {self._manifest_path} file."
                )
        finally:
            self.close()

    def _open(self) -> zipfile.ZipFile:
        if self._closed:
            raise ValueError("ArchiveReader is closed.")

        source: BinaryIO = self._stream
        if not _is_seekable(source):
            source = io.BytesIO(source.read())

        try:
            self._zip = zipfile.ZipFile(source, mode="r")
        except _CONTAINER_ERRORS as exc:
            logger.error("Invalid project archive format: %s", exc)
            raise ArchiveFormatError("Uploaded file is not a valid zip archive.") from exc
        return self._zip

    @staticmethod
    def _read(zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
        try:
            return zf.read(info)
        except _CONTAINER_ERRORS as exc:
            logger.error("Invalid project archive format in entry %s: %s", info.filename, exc)
            raise ArchiveFormatError(
                f"Zip entry '{info.filename}' could not be read: {exc}"
            ) from exc


def _is_seekable(stream: BinaryIO) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable and seekable())
