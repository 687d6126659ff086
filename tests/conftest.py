"""Shared fixtures for the Project Archive Importer test suite."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from project_importer.main import app
from project_importer.memory_storage import MemoryStorage

OWNER_ID = "owner-1"
OWNER_EMAIL = "bob.smith@example.com"

# Where YoungAndroidNaming puts sources for OWNER_EMAIL's project "Demo".
DEMO_SOURCE_DIR = "src/appinventor/ai_bob_smith/Demo"
DEMO_QUALIFIED_NAME = "appinventor.ai_bob_smith.Demo.Screen1"


class NonSeekableStream(io.RawIOBase):
    """A read-only stream that can't seek, like a raw socket upload."""

    def __init__(self, data: bytes) -> None:
        self._inner = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def readinto(self, b) -> int:  # type: ignore[no-untyped-def]
        chunk = self._inner.read(len(b))
        b[: len(chunk)] = chunk
        return len(chunk)


class FixedTokens:
    """Token generator stand-in that always returns the same token."""

    def __init__(self, token: str) -> None:
        self.token = token
        self.calls = 0

    def next(self) -> str:
        self.calls += 1
        return self.token


@pytest.fixture()
def make_zip() -> Callable[..., bytes]:
    """
    Factory fixture: build zip bytes from a ``{path: content}`` mapping.

    String content is UTF-8 encoded.  ``dirs`` adds explicit directory
    entries; ``compression`` defaults to stored so tests can find and
    corrupt entry bytes in the output.
    """

    def _make(
        files: dict[str, bytes | str],
        *,
        dirs: tuple[str, ...] = (),
        compression: int = zipfile.ZIP_STORED,
    ) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, mode="w", compression=compression) as zf:
            for directory in dirs:
                zf.writestr(zipfile.ZipInfo(directory.rstrip("/") + "/"), b"")
            for path, content in files.items():
                data = content.encode("utf-8") if isinstance(content, str) else content
                zf.writestr(path, data)
        return buffer.getvalue()

    return _make


@pytest.fixture()
def project_archive_files() -> dict[str, bytes | str]:
    """A typical exported project, including entries an import must drop."""
    return {
        "youngandroidproject/project.properties": (
            "main=appinventor.ai_alice.Old.Screen1\nname=Old\n"
        ),
        "src/appinventor/ai_alice/Old/Screen1.scm": '#|\n$JSON\n{"Properties":{"$Name":"Screen1"}}\n|#',
        "src/appinventor/ai_alice/Old/Screen1.bky": "<xml><block>Screen1</block></xml>",
        "assets/kitty.png": b"\x89PNG\r\n\x1a\n\x00\x00\xff\xfe",
        "youngandroidproject/remix_history": "remixed from someone else",
        "android.keystore": b"\x00keystore\x00",
    }


@pytest.fixture()
def storage() -> MemoryStorage:
    """An empty in-memory backend that knows one owner."""
    backend = MemoryStorage(max_job_size_bytes=1024 * 1024)
    backend.add_user(OWNER_ID, OWNER_EMAIL)
    return backend


@pytest.fixture()
def client(storage: MemoryStorage) -> Iterator[TestClient]:
    """FastAPI test client backed by the ``storage`` fixture."""
    previous = app.state.storage
    app.state.storage = storage
    try:
        yield TestClient(app, headers={"X-Owner-Id": OWNER_ID, "X-Owner-Email": OWNER_EMAIL})
    finally:
        app.state.storage = previous
