"""Upload validation: extension, declared MIME type, size, then magic bytes.

Checks run in that order and stop at the first failure, so a renamed file is
caught by its signature before anything touches the upload directory.
"""

import os
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Optional

from fastapi import UploadFile

from coursehub.config import settings
from coursehub.errors import FileValidationError

STAGE_EXTENSION = "extension"
STAGE_MIME = "mime"
STAGE_SIZE = "size"
STAGE_SIGNATURE = "signature"

HEADER_BYTES = 16


def _is_iso_bmff(head: bytes) -> bool:
    # MP4 and QuickTime both start with a box whose type at offset 4 is "ftyp"
    return len(head) >= 8 and head[4:8] == b"ftyp"


def _is_ebml(head: bytes) -> bool:
    return head.startswith(b"\x1a\x45\xdf\xa3")


def _is_riff(kind: bytes) -> Callable[[bytes], bool]:
    def check(head: bytes) -> bool:
        return len(head) >= 12 and head[:4] == b"RIFF" and head[8:12] == kind
    return check


def _is_jpeg(head: bytes) -> bool:
    return head.startswith(b"\xff\xd8\xff")


def _is_png(head: bytes) -> bool:
    return head.startswith(b"\x89PNG")


@dataclass(frozen=True)
class FileProfile:
    name: str
    extensions: frozenset
    mime_types: frozenset
    signatures: tuple
    size_setting: str  # attribute on settings holding the byte limit
    mime_aliases: dict = field(default_factory=dict)

    @property
    def max_size(self) -> int:
        return getattr(settings, self.size_setting)

    def normalize_mime(self, mime: str) -> str:
        mime = (mime or "").split(";")[0].strip().lower()
        return self.mime_aliases.get(mime, mime)


VIDEO = FileProfile(
    name="video",
    extensions=frozenset({".mp4", ".webm", ".mov", ".avi"}),
    mime_types=frozenset({"video/mp4", "video/webm", "video/quicktime", "video/x-msvideo"}),
    signatures=(_is_iso_bmff, _is_ebml, _is_riff(b"AVI ")),
    size_setting="MAX_VIDEO_SIZE",
)

IMAGE = FileProfile(
    name="image",
    extensions=frozenset({".jpg", ".jpeg", ".png", ".webp"}),
    mime_types=frozenset({"image/jpeg", "image/png", "image/webp"}),
    signatures=(_is_jpeg, _is_png, _is_riff(b"WEBP")),
    size_setting="MAX_IMAGE_SIZE",
    mime_aliases={"image/jpg": "image/jpeg"},
)


def _format_size(num_bytes: int) -> str:
    return f"{num_bytes // (1024 * 1024)}MB"


def validate_upload(profile: FileProfile, filename: str, content_type: Optional[str], size: int, head: bytes) -> None:
    """Raise FileValidationError naming the first check that fails."""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in profile.extensions:
        allowed = ", ".join(sorted(profile.extensions))
        raise FileValidationError(STAGE_EXTENSION, f"Unsupported {profile.name} extension '{ext or filename}'. Allowed: {allowed}")

    if profile.normalize_mime(content_type or "") not in profile.mime_types:
        raise FileValidationError(STAGE_MIME, f"Unsupported {profile.name} content type '{content_type}'")

    if size <= 0:
        raise FileValidationError(STAGE_SIZE, "File is empty")
    if size > profile.max_size:
        raise FileValidationError(STAGE_SIZE, f"File too large. Max size: {_format_size(profile.max_size)}")

    if not any(check(head) for check in profile.signatures):
        raise FileValidationError(STAGE_SIGNATURE, f"File content does not match a supported {profile.name} format")


def _stream_size(stream: BinaryIO) -> int:
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


async def validate_upload_file(profile: FileProfile, upload: UploadFile) -> int:
    """Validate a multipart upload in place and return its size in bytes.

    The upload is rewound afterwards so it can be copied to storage.
    """
    size = upload.size if upload.size is not None else _stream_size(upload.file)
    await upload.seek(0)
    head = await upload.read(HEADER_BYTES)
    await upload.seek(0)
    validate_upload(profile, upload.filename or "", upload.content_type, size, head)
    return size
