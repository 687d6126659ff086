"""
project_importer/path_rewriter.py
-----------------------------------------------------------------------------
Map archive-internal paths onto the destination project's layout.

Archive paths always use ``/`` separators regardless of the platform the
archive was built on, so this module works on plain strings rather than
``pathlib`` objects.

Flattening
----------
Files under the source folder are moved into the destination source
directory by *leaf name only*.  ``src/a/b/c/Screen1.scm`` and
``src/x/Screen1.scm`` both land at ``<source_directory>/Screen1.scm``; any
sub-package structure inside the archive is discarded.  The destination
layout has a single package directory per project, so this is the intended
mapping, but it does mean two same-named files in different sub-folders
collide (the later one wins).
"""

from __future__ import annotations

from project_importer.config import SRC_FOLDER


def basename(path: str) -> str:
    """Return the final ``/``-separated segment of ``path``."""
    return path.rsplit("/", 1)[-1]


def parent_directory(path: str) -> str:
    """
    Drop the last ``/``-separated segment of ``path``.

    ``"src/com/example/app"`` → ``"src/com/example"``.  A path with no
    separator has no parent and yields ``""``.
    """
    if "/" not in path:
        return ""
    return path.rsplit("/", 1)[0]


def is_source_path(path: str) -> bool:
    """True when ``path`` lies under the archive's source folder."""
    return path.startswith(SRC_FOLDER + "/")


def rewrite_path(original_path: str, source_directory: str) -> str:
    """
    Compute the destination path for an archive entry.

    Parameters
    ----------
    original_path    : Path of the entry inside the archive.
    source_directory : Destination source directory for the project,
                       without a trailing slash.

    Returns
    -------
    str : ``source_directory + "/" + basename(original_path)`` for entries
          under the source folder; ``original_path`` unchanged otherwise
          (assets and other top-level resources).
    """
    if is_source_path(original_path):
        return f"{source_directory}/{basename(original_path)}"
    return original_path
