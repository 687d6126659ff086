"""Tests for project_importer/size_limit.py – bounded single-file reads."""

from __future__ import annotations

import io
from unittest.mock import MagicMock

import pytest

from project_importer.errors import ImportStatus, SizeLimitExceeded
from project_importer.size_limit import effective_limit, read_bounded


class _CountingStream(io.RawIOBase):
    """Endless stream of ``x`` bytes that records how much was requested."""

    def __init__(self) -> None:
        self.bytes_served = 0

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:  # type: ignore[no-untyped-def]
        n = len(b)
        b[:n] = b"x" * n
        self.bytes_served += n
        return n


class TestReadBounded:
    def test_exact_limit_is_accepted(self) -> None:
        data = b"a" * 100
        assert read_bounded(io.BytesIO(data), 100, chunk_size=7) == data

    def test_one_byte_over_is_rejected(self) -> None:
        with pytest.raises(SizeLimitExceeded) as exc_info:
            read_bounded(io.BytesIO(b"a" * 101), 100, chunk_size=7)

        assert exc_info.value.status is ImportStatus.FILE_TOO_LARGE
        assert exc_info.value.limit_bytes == 100
        assert exc_info.value.read_bytes > 100

    def test_empty_stream(self) -> None:
        assert read_bounded(io.BytesIO(b""), 10) == b""

    def test_zero_limit_rejects_any_content(self) -> None:
        with pytest.raises(SizeLimitExceeded):
            read_bounded(io.BytesIO(b"a"), 0)

    def test_oversized_stream_is_abandoned_early(self) -> None:
        stream = _CountingStream()
        with pytest.raises(SizeLimitExceeded):
            read_bounded(stream, 1000, chunk_size=256)

        # Stops on the first chunk past the limit rather than draining the stream.
        assert stream.bytes_served <= 1000 + 256

    def test_stream_is_left_open(self) -> None:
        stream = io.BytesIO(b"abc")
        read_bounded(stream, 10)
        assert not stream.closed

    def test_message_names_the_limit(self) -> None:
        with pytest.raises(SizeLimitExceeded, match="2,048-byte limit"):
            read_bounded(io.BytesIO(b"z" * 5000), 2048)


class TestEffectiveLimit:
    @pytest.mark.parametrize(
        ("configured", "job_limit", "expected"),
        [(9 * 1024 * 1024, 1024, 1024), (500, 1024, 500), (1024, 1024, 1024)],
    )
    def test_smaller_limit_wins(self, configured: int, job_limit: int, expected: int) -> None:
        storage = MagicMock()
        storage.max_job_size_bytes.return_value = job_limit
        assert effective_limit(storage, configured) == expected
