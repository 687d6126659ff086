"""
project_importer/draft.py
-----------------------------------------------------------------------------
In-memory accumulation of a new project before it is committed.

A :class:`ProjectDraft` is built from the classified entries of one archive
and handed, complete, to a single ``create_project`` storage call.  Nothing
reaches storage while the draft is being built, so a failure part-way
through an archive leaves no partial project behind.

Entry handling
--------------
- **manifest** – the archive's bytes are discarded; fresh properties text
  is synthesised for the destination project name and qualified form name.
  A draft holds exactly one manifest, even if the archive repeats it.
- **ignored**  – skipped.
- **regular**  – path rewritten into the destination namespace, bytes kept
  verbatim as a raw file.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from project_importer.archive_reader import ArchiveEntry, EntryKind
from project_importer.config import PROJECT_PROPERTIES_FILE_NAME, YOUNG_ANDROID_PROJECT_TYPE
from project_importer.errors import MissingManifestError
from project_importer.naming import NamingContext
from project_importer.path_rewriter import rewrite_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextFile:
    path: str
    content: str


@dataclass(frozen=True)
class RawFile:
    path: str
    content: bytes


@dataclass
class ProjectDraft:
    """A project assembled in memory, ready for one ``create_project`` call."""

    name: str
    project_type: str = YOUNG_ANDROID_PROJECT_TYPE
    text_files: list[TextFile] = field(default_factory=list)
    raw_files: list[RawFile] = field(default_factory=list)
    history: str | None = None

    @property
    def manifest(self) -> TextFile | None:
        for text_file in self.text_files:
            if text_file.path == PROJECT_PROPERTIES_FILE_NAME:
                return text_file
        return None

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.text_files] + [f.path for f in self.raw_files]


def build_draft(
    entries: Iterable[ArchiveEntry],
    naming: NamingContext,
    project_name: str,
    synthesize_manifest: Callable[[str, str], str],
    *,
    history: str | None = None,
) -> ProjectDraft:
    """
    Fold classified archive entries into a :class:`ProjectDraft`.

    Parameters
    ----------
    entries             : Classified entries, in archive order.
    naming              : Destination naming for this import.
    project_name        : Name of the project being created.
    synthesize_manifest : ``(project_name, qualified_form_name) -> text``.
    history             : Optional project history to attach.

    Returns
    -------
    ProjectDraft : The assembled draft.

    Raises
    ------
    MissingManifestError
        If no manifest entry was seen, however many other files the archive
        held.
    ArchiveFormatError
        Propagated from ``entries`` when the container is corrupt.
    """
    draft = ProjectDraft(name=project_name)
    manifest_seen = False

    for entry in entries:
        if entry.kind is EntryKind.MANIFEST:
            if manifest_seen:
                continue
            content = synthesize_manifest(project_name, naming.qualified_form_name)
            draft.text_files.append(TextFile(entry.path, content))
            manifest_seen = True
        elif entry.kind is EntryKind.IGNORED:
            continue
        else:
            destination = rewrite_path(entry.path, naming.source_directory)
            draft.raw_files.append(RawFile(destination, entry.content))

    if not manifest_seen:
        raise MissingManifestError(
            f"Archive contains no {PROJECT_PROPERTIES_FILE_NAME} file."
        )

    if history is not None:
        draft.history = history

    logger.debug(
        "Built draft for %s with %d text and %d raw files",
        project_name,
        len(draft.text_files),
        len(draft.raw_files),
    )
    return draft
