"""
project_importer/screen_import.py
-----------------------------------------------------------------------------
Import a single screen from an archive into an existing project.

A screen is a set of source files sharing one logical name, one file per
extension: ``Screen1.scm`` (designer), ``Screen1.bky`` (blocks) and
``Screen1.yail`` (compiled).  To merge it into a project that may already
have a ``Screen1``, the screen is renamed to ``"Screen" + token`` where
``token`` is drawn once per import, so all of its files keep a common name.

For every qualifying entry:

1. The destination is ``<parent source dir>/Screen<token><ext>``, where the
   parent is the destination source directory minus its last segment.
2. The content is decoded as UTF-8 and every occurrence of the old logical
   name is replaced with the new one.
3. The file is registered and force-written immediately.

Files are committed one by one as they are read; an archive that fails
half-way leaves the already committed files in the project.

Identifier replacement
----------------------
:func:`replace_identifier` is a plain, case-sensitive substring replace.  It
also rewrites unrelated text that merely *contains* the old name (renaming
``Screen1`` turns ``Screen10`` into ``ScreenAB12C310``).  Existing consumers
rely on that exact output, so it stays the default.
:func:`replace_identifier_strict` only replaces whole identifiers and can
be passed as ``replace=`` instead.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from project_importer.archive_reader import ArchiveEntry, EntryKind
from project_importer.commit import CommitCoordinator
from project_importer.config import DEFAULT_CHARSET, SCREEN_FILE_EXTENSIONS
from project_importer.naming import NamingContext
from project_importer.path_rewriter import basename, is_source_path, parent_directory

logger = logging.getLogger(__name__)

SCREEN_NAME_PREFIX: str = "Screen"

IdentifierReplacer = Callable[[str, str, str], str]


def replace_identifier(text: str, old: str, new: str) -> str:
    """Replace every occurrence of ``old`` in ``text`` with ``new``."""
    return text.replace(old, new)


def replace_identifier_strict(text: str, old: str, new: str) -> str:
    """
    Replace ``old`` only where it stands as a whole identifier.

    An occurrence counts when it is not directly preceded or followed by a
    letter, digit or underscore.
    """
    pattern = re.compile(rf"(?<![A-Za-z0-9_]){re.escape(old)}(?![A-Za-z0-9_])")
    return pattern.sub(lambda _m: new, text)


def screen_extension(file_name: str) -> str | None:
    """Return the screen-file extension of ``file_name``, or None."""
    for extension in SCREEN_FILE_EXTENSIONS:
        if file_name.endswith(extension):
            return extension
    return None


@dataclass(frozen=True)
class CommittedScreenFile:
    source_path: str
    path: str
    old_name: str
    new_name: str
    version: int


def import_screen(
    entries: Iterable[ArchiveEntry],
    owner_id: str,
    project_id: int,
    naming: NamingContext,
    committer: CommitCoordinator,
    token: str,
    *,
    replace: IdentifierReplacer = replace_identifier,
) -> list[CommittedScreenFile]:
    """
    Rename and commit the screen files found in ``entries``.

    Parameters
    ----------
    entries    : Classified archive entries, in archive order.
    owner_id   : Owner of the destination project.
    project_id : Destination project.
    naming     : Destination naming for the project.
    committer  : Issues the per-file register / write calls.
    token      : Rename token shared by every file of this screen.
    replace    : Identifier replacement applied to file content.

    Returns
    -------
    list[CommittedScreenFile] : One record per file written, in archive
                                order.  Entries outside the source folder
                                or with other extensions are skipped.
    """
    parent = parent_directory(naming.source_directory)
    new_name = SCREEN_NAME_PREFIX + token
    committed: list[CommittedScreenFile] = []

    for entry in entries:
        if entry.kind is not EntryKind.REGULAR or not is_source_path(entry.path):
            continue

        file_name = basename(entry.path)
        extension = screen_extension(file_name)
        if extension is None:
            continue

        old_name = file_name.split(".", 1)[0]
        destination = f"{parent}/{new_name}{extension}"

        content = entry.content.decode(DEFAULT_CHARSET, errors="replace")
        # An empty name would match between every character.
        if old_name:
            content = replace(content, old_name, new_name)

        version = committer.commit_source_text(owner_id, project_id, destination, content)
        committed.append(
            CommittedScreenFile(
                source_path=entry.path,
                path=destination,
                old_name=old_name,
                new_name=new_name,
                version=version,
            )
        )

    logger.info(
        "Imported screen %s into project %d (%d files)", new_name, project_id, len(committed)
    )
    return committed
