"""Health router — liveness ping and dependency checks."""

import logging
import platform
import sys
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coursehub import __version__
from coursehub.database import get_db
from coursehub.middleware.auth import require_admin
from coursehub.models.course import Course
from coursehub.models.course_request import CourseRequest
from coursehub.models.user import User
from coursehub.models.video import Video
from coursehub.services import storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])

STARTED_AT = time.monotonic()
NO_CACHE = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def _uptime() -> float:
    return round(time.monotonic() - STARTED_AT, 1)


def _check_database(db: Session) -> dict:
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        return {"status": "unhealthy", "error": "Database connection failed"}
    return {"status": "healthy", "response_time_ms": round((time.perf_counter() - started) * 1000, 2)}


def _check_disk() -> dict:
    try:
        info = storage.disk_info()
    except OSError as exc:
        return {"status": "unhealthy", "error": str(exc)}
    return {"status": "healthy", "available": info["available"], "use_percentage": info["use_percentage"]}


def _check_uploads() -> dict:
    root = storage.upload_root()
    videos = (root / storage.VIDEOS).is_dir()
    thumbnails = (root / storage.THUMBNAILS).is_dir()
    check = {
        "status": "healthy" if videos and thumbnails else "unhealthy",
        "videos_dir": videos,
        "thumbnails_dir": thumbnails,
    }
    if check["status"] == "unhealthy":
        check["error"] = "Upload directories missing"
    return check


def _overall(checks: dict) -> str:
    return "healthy" if all(c["status"] == "healthy" for c in checks.values()) else "unhealthy"


@router.get("/ping")
def ping():
    return JSONResponse(
        {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat(), "uptime": _uptime()},
        headers=NO_CACHE,
    )


@router.get("/health")
def health(db: Session = Depends(get_db)):
    """Database, disk and upload directory checks. 503 when anything is unhealthy."""
    checks = {
        "database": _check_database(db),
        "disk_space": _check_disk(),
        "uploads": _check_uploads(),
    }
    status = _overall(checks)
    body = {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
        "uptime": _uptime(),
        "version": __version__,
    }
    return JSONResponse(body, status_code=200 if status == "healthy" else 503, headers=NO_CACHE)


@router.get("/health/detailed")
def health_detailed(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    checks = {
        "database": _check_database(db),
        "disk_space": _check_disk(),
        "uploads": _check_uploads(),
    }
    if checks["database"]["status"] == "healthy":
        checks["database"]["counts"] = {
            "users": db.query(User).count(),
            "courses": db.query(Course).count(),
            "active_courses": db.query(Course).filter(Course.is_active.is_(True)).count(),
            "videos": db.query(Video).count(),
            "pending_requests": db.query(CourseRequest).filter(CourseRequest.status == "new").count(),
        }
    if checks["uploads"]["status"] == "healthy":
        checks["uploads"]["videos_size"] = storage.directory_size(storage.VIDEOS)
        checks["uploads"]["thumbnails_size"] = storage.directory_size(storage.THUMBNAILS)

    status = _overall(checks)
    body = {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "server": {
            "uptime": _uptime(),
            "python_version": sys.version.split()[0],
            "platform": platform.platform(),
            "version": __version__,
        },
        "checks": checks,
    }
    return JSONResponse(body, status_code=200 if status == "healthy" else 503, headers=NO_CACHE)
