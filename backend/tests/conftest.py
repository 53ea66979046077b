"""Shared fixtures: in-memory database, temp upload dir, API client and factories."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before coursehub.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MAIL_SUPPRESS_SEND"] = "true"
os.environ["ADMIN_EMAILS"] = "boss@example.com"

import pytest
from fastapi.testclient import TestClient

from coursehub.config import settings
from coursehub.database import Base, SessionLocal, engine
from coursehub.main import app
from coursehub.middleware.auth import create_access_token
from coursehub.models import Course, CourseAccess, User, Video
from coursehub.services.cache import api_cache

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 60
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 60
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 100


@pytest.fixture(autouse=True)
def fresh_state(tmp_path, monkeypatch):
    """Every test gets empty tables, an empty cache and its own upload dir."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    api_cache.clear()
    yield
    api_cache.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: str = "user", email: str = None, **fields) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            name=fields.pop("name", f"User {counter['n']}"),
            role=role,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_course(db):
    def _make(title: str = "Course", is_free: bool = False, price: float = 99.0, **fields) -> Course:
        course = Course(
            title=title,
            short_description=fields.pop("short_description", f"{title} in short"),
            is_free=is_free,
            price=None if is_free else price,
            **fields,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture
def make_video(db):
    def _make(course: Course, filename: str = "lesson.mp4", is_free: bool = False, **fields) -> Video:
        name = fields.pop("display_name", filename)
        video = Video(
            course_id=course.id,
            title=name,
            display_name=name,
            filename=filename,
            is_free=is_free,
            **fields,
        )
        db.add(video)
        db.commit()
        db.refresh(video)
        return video

    return _make


@pytest.fixture
def grant(db):
    def _grant(user: User, course: Course) -> CourseAccess:
        access = CourseAccess(user_id=user.id, course_id=course.id)
        db.add(access)
        db.commit()
        return access

    return _grant


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


def write_upload(kind: str, filename: str, content: bytes) -> str:
    directory = os.path.join(settings.UPLOAD_DIR, kind)
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, filename), "wb") as f:
        f.write(content)
    return os.path.join(directory, filename)
