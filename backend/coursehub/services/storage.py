"""Upload directory layout and file housekeeping.

    UPLOAD_DIR/videos/<timestamp>-<sanitized name>
    UPLOAD_DIR/thumbnails/thumbnail_<timestamp>.<ext>

Courses store thumbnails as "/api/uploads/thumbnails/<name>"; only the last path
segment identifies the file on disk.
"""

import logging
import os
import re
import shutil
import time
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

from coursehub.config import settings
from coursehub.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

VIDEOS = "videos"
THUMBNAILS = "thumbnails"
THUMBNAIL_URL_PREFIX = "/api/uploads/thumbnails/"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def upload_root() -> Path:
    return Path(settings.UPLOAD_DIR)


def media_dir(kind: str) -> Path:
    if kind not in (VIDEOS, THUMBNAILS):
        raise ValidationError(f"Unknown file type '{kind}'")
    directory = upload_root() / kind
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def safe_path(kind: str, filename: str) -> Path:
    """Resolve `filename` inside the media directory, refusing path tricks."""
    if not filename or filename in (".", "..") or Path(filename).name != filename or "\\" in filename:
        raise ValidationError("Invalid filename")
    return media_dir(kind) / filename


def _timestamp() -> int:
    return int(time.time() * 1000)


def video_filename(original_name: str) -> str:
    return f"{_timestamp()}-{_UNSAFE_CHARS.sub('_', os.path.basename(original_name))}"


def thumbnail_filename(original_name: str) -> str:
    ext = os.path.splitext(original_name)[1].lower().lstrip(".") or "jpg"
    return f"thumbnail_{_timestamp()}.{ext}"


def thumbnail_ref_name(ref: Optional[str]) -> Optional[str]:
    if not ref:
        return None
    return ref.rsplit("/", 1)[-1] or None


def save_stream(source: BinaryIO, kind: str, filename: str) -> Path:
    target = safe_path(kind, filename)
    with open(target, "wb") as out:
        shutil.copyfileobj(source, out)
    return target


def remove_file(kind: str, filename: str) -> bool:
    """Delete one stored file. Returns False when it was already gone."""
    path = safe_path(kind, filename)
    if not path.is_file():
        return False
    path.unlink()
    logger.info("Deleted %s file %s", kind, filename)
    return True


def remove_unused_file(kind: str, filename: str) -> None:
    if not remove_file(kind, filename):
        raise NotFoundError("File")


def _listing(kind: str) -> list[Path]:
    directory = upload_root() / kind
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file())


def orphan_stats(kind: str, used: Iterable[str]) -> dict:
    used_names = set(used)
    files = _listing(kind)
    unused = [p for p in files if p.name not in used_names]
    return {
        "total": len(files),
        "unused": len(unused),
        "size": sum(p.stat().st_size for p in unused),
    }


def cleanup_orphans(kind: str, used: Iterable[str]) -> dict:
    used_names = set(used)
    result = {"deleted": 0, "failed": 0, "details": []}
    for path in _listing(kind):
        if path.name in used_names:
            continue
        try:
            size = path.stat().st_size
            path.unlink()
        except OSError as exc:
            result["failed"] += 1
            logger.error("Failed to delete orphan %s: %s", path, exc)
            continue
        result["deleted"] += 1
        if kind == VIDEOS:
            result["details"].append(f"{path.name} ({round(size / 1024 / 1024)}MB)")
        else:
            result["details"].append(f"{path.name} ({round(size / 1024)}KB)")
    return result


def directory_size(kind: str) -> int:
    return sum(p.stat().st_size for p in _listing(kind))


def disk_info() -> dict:
    root = upload_root()
    root.mkdir(parents=True, exist_ok=True)
    usage = shutil.disk_usage(root)
    return {
        "total": usage.total,
        "used": usage.used,
        "available": usage.free,
        "use_percentage": round(usage.used / usage.total * 100, 1) if usage.total else 0.0,
    }
