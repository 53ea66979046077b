"""Range-request responder for video files.

Only single `bytes=` ranges are honoured. Anything else that does not parse is
ignored and the whole file is sent; a range that parses but cannot be served
raises RangeNotSatisfiableError (416).
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional

import aiofiles
from fastapi.responses import StreamingResponse

from coursehub.config import settings
from coursehub.errors import RangeNotSatisfiableError

_RANGE_RE = re.compile(r"^bytes=(\d*)-(\d*)$")

VIDEO_MIME_TYPES = {
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
}


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int  # inclusive

    @property
    def length(self) -> int:
        return self.end - self.start + 1


def parse_range(header: Optional[str], size: int) -> Optional[ByteRange]:
    """Turn a Range header into an inclusive window over a file of `size` bytes.

    Returns None when there is no usable header (missing or malformed), which
    means "send everything".
    """
    if not header:
        return None
    match = _RANGE_RE.match(header.strip().replace(" ", ""))
    if not match:
        return None
    first, last = match.groups()
    if not first and not last:
        return None

    if not first:
        # bytes=-N: the final N bytes
        suffix = int(last)
        if suffix == 0 or size == 0:
            raise RangeNotSatisfiableError(size)
        return ByteRange(max(size - suffix, 0), size - 1)

    start = int(first)
    end = int(last) if last else size - 1
    if start >= size or start > end:
        raise RangeNotSatisfiableError(size)
    return ByteRange(start, min(end, size - 1))


def content_type_for(path: Path) -> str:
    return VIDEO_MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")


async def iter_file(path: Path, start: int, length: int, chunk_size: Optional[int] = None) -> AsyncIterator[bytes]:
    """Yield `length` bytes of `path` starting at `start`.

    The file is closed when the generator finishes, fails, or is closed early
    because the client went away.
    """
    chunk_size = chunk_size or settings.STREAM_CHUNK_SIZE
    async with aiofiles.open(path, "rb") as f:
        await f.seek(start)
        remaining = length
        while remaining > 0:
            data = await f.read(min(chunk_size, remaining))
            if not data:
                break
            remaining -= len(data)
            yield data


def build_stream_response(path: Path, range_header: Optional[str]) -> StreamingResponse:
    size = path.stat().st_size
    content_type = content_type_for(path)
    byte_range = parse_range(range_header, size)

    headers = {
        "Accept-Ranges": "bytes",
        "Cache-Control": "no-cache",
    }
    if byte_range is None:
        headers["Content-Length"] = str(size)
        return StreamingResponse(iter_file(path, 0, size), status_code=200, media_type=content_type, headers=headers)

    headers["Content-Range"] = f"bytes {byte_range.start}-{byte_range.end}/{size}"
    headers["Content-Length"] = str(byte_range.length)
    return StreamingResponse(
        iter_file(path, byte_range.start, byte_range.length),
        status_code=206,
        media_type=content_type,
        headers=headers,
    )
