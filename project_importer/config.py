"""
project_importer/config.py
-----------------------------------------------------------------------------
Runtime configuration and fixed project-layout names for the importer.

Environment variables
---------------------
MAX_ASSET_SIZE_MEGS – Largest single asset / user file accepted, in
                      megabytes (default: 9).  The effective ceiling is the
                      smaller of this and the storage backend's job limit.
MAX_JOB_SIZE_BYTES  – Job size limit reported by the in-memory storage
                      backend (default: 10 MiB).
READ_CHUNK_SIZE     – Bytes read per call while buffering an upload
                      (default: 64 KiB).

All values are read once at import time so they stay consistent for the
lifetime of the process.  A ``.env`` file in the working directory is loaded
first when present.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env if present (no-op if the file doesn't exist)
load_dotenv()

# -----------------------------------------------------------------------------
# Size limits
# -----------------------------------------------------------------------------

MAX_ASSET_SIZE_MEGS: float = float(os.getenv("MAX_ASSET_SIZE_MEGS", "9"))
MAX_ASSET_SIZE_BYTES: int = int(MAX_ASSET_SIZE_MEGS * 1024 * 1024)

MAX_JOB_SIZE_BYTES: int = int(os.getenv("MAX_JOB_SIZE_BYTES", str(10 * 1024 * 1024)))

READ_CHUNK_SIZE: int = int(os.getenv("READ_CHUNK_SIZE", str(64 * 1024)))

# -----------------------------------------------------------------------------
# Project layout
# -----------------------------------------------------------------------------

# The manifest entry that marks an archive as a project package.  Its content
# is always regenerated on import.
PROJECT_PROPERTIES_FILE_NAME: str = "youngandroidproject/project.properties"

# Entries that are present in exported archives but never imported.
REMIX_INFORMATION_FILE_PATH: str = "youngandroidproject/remix_history"
ANDROID_KEYSTORE_FILENAME: str = "android.keystore"

IGNORED_PATHS: frozenset[str] = frozenset(
    {REMIX_INFORMATION_FILE_PATH, ANDROID_KEYSTORE_FILENAME}
)

SRC_FOLDER: str = "src"

# Extensions that make up a single screen (designer, blocks, compiled yail).
SCREEN_FILE_EXTENSIONS: tuple[str, ...] = (".scm", ".bky", ".yail")

DEFAULT_CHARSET: str = "utf-8"

YOUNG_ANDROID_PROJECT_TYPE: str = "YoungAndroid"
