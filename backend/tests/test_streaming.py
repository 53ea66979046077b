"""Tests for Range header parsing and the streaming response."""

import asyncio
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from coursehub.errors import RangeNotSatisfiableError
from coursehub.services import streaming
from coursehub.services.streaming import ByteRange, build_stream_response, iter_file, parse_range


class TestParseRange:
    """Byte window computation."""

    def test_first_hundred_bytes(self):
        assert parse_range("bytes=0-99", 1000) == ByteRange(0, 99)

    def test_open_ended_range_runs_to_eof(self):
        r = parse_range("bytes=500-", 1000)
        assert r == ByteRange(500, 999)
        assert r.length == 500

    def test_end_clamped_to_size(self):
        assert parse_range("bytes=900-5000", 1000) == ByteRange(900, 999)

    def test_suffix_range(self):
        assert parse_range("bytes=-100", 1000) == ByteRange(900, 999)

    def test_suffix_longer_than_file(self):
        assert parse_range("bytes=-5000", 1000) == ByteRange(0, 999)

    def test_missing_header(self):
        assert parse_range(None, 1000) is None
        assert parse_range("", 1000) is None

    @pytest.mark.parametrize("header", ["items=0-10", "bytes=a-b", "bytes=0-1,5-6", "bytes=-", "0-99"])
    def test_malformed_headers_are_ignored(self, header):
        assert parse_range(header, 1000) is None

    def test_start_beyond_size(self):
        with pytest.raises(RangeNotSatisfiableError) as exc:
            parse_range("bytes=1000-", 1000)
        assert exc.value.size == 1000

    def test_start_after_end(self):
        with pytest.raises(RangeNotSatisfiableError):
            parse_range("bytes=50-10", 1000)

    def test_empty_file(self):
        with pytest.raises(RangeNotSatisfiableError):
            parse_range("bytes=0-0", 0)


async def _collect(gen):
    return b"".join([chunk async for chunk in gen])


class TestIterFile:
    """Chunked reads of a file window."""

    def test_reads_exact_window(self, tmp_path):
        path = tmp_path / "v.mp4"
        path.write_bytes(bytes(range(256)) * 4)
        data = asyncio.run(_collect(iter_file(path, 10, 20, chunk_size=7)))
        assert data == (bytes(range(256)) * 4)[10:30]

    def test_early_close_releases_file(self, tmp_path, monkeypatch):
        """Closing the generator mid-stream (client gone) closes the file handle."""
        path = tmp_path / "v.mp4"
        path.write_bytes(b"x" * 1000)
        opened = []
        real_open = streaming.aiofiles.open

        class TrackingOpen:
            def __init__(self, *args, **kwargs):
                self.cm = real_open(*args, **kwargs)

            async def __aenter__(self):
                f = await self.cm.__aenter__()
                opened.append(f)
                return f

            async def __aexit__(self, *exc):
                return await self.cm.__aexit__(*exc)

        monkeypatch.setattr(streaming.aiofiles, "open", TrackingOpen)

        async def consume_one_then_close():
            gen = iter_file(path, 0, 1000, chunk_size=10)
            first = await gen.__anext__()
            assert opened[0].closed is False
            await gen.aclose()
            return first

        assert asyncio.run(consume_one_then_close()) == b"x" * 10
        assert opened[0].closed is True


class TestBuildStreamResponse:
    """Status codes and headers."""

    def test_partial_content_headers(self, tmp_path):
        path = tmp_path / "v.mp4"
        path.write_bytes(b"a" * 1000)
        response = build_stream_response(path, "bytes=0-99")
        assert response.status_code == 206
        assert response.headers["content-range"] == "bytes 0-99/1000"
        assert response.headers["content-length"] == "100"
        assert response.headers["accept-ranges"] == "bytes"
        assert response.media_type == "video/mp4"

    def test_full_content_without_range(self, tmp_path):
        path = tmp_path / "v.webm"
        path.write_bytes(b"a" * 1000)
        response = build_stream_response(path, None)
        assert response.status_code == 200
        assert response.headers["content-length"] == "1000"
        assert response.headers["accept-ranges"] == "bytes"
        assert "content-range" not in response.headers
        assert response.media_type == "video/webm"
