"""coursehub — FastAPI Application Entry Point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from coursehub import __version__
from coursehub.config import settings
from coursehub.database import SessionLocal, init_db
from coursehub.errors import register_exception_handlers
from coursehub.logging_config import setup_logging
from coursehub.middleware.rate_limit import limiter
from coursehub.routers import (
    admin_courses,
    admin_logs,
    admin_news,
    admin_requests,
    admin_reviews,
    admin_settings,
    admin_uploads,
    admin_users,
    admin_videos,
    auth,
    contact,
    course_requests,
    courses,
    health,
    news,
    profile,
    reviews,
    uploads,
    videos,
)
from coursehub.services import storage

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="coursehub",
    description="Video course platform with paid-course access requests.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter

# Errors -> {"success": false, "error": ..., "code": ...}
register_exception_handlers(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# OAuth state lives in the session cookie during the Google redirect
app.add_middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET, same_site="lax")

# Routers
app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(videos.router)
app.include_router(uploads.router)
app.include_router(course_requests.router)
app.include_router(reviews.router)
app.include_router(news.router)
app.include_router(profile.router)
app.include_router(contact.router)
app.include_router(health.router)
app.include_router(admin_courses.router)
app.include_router(admin_videos.router)
app.include_router(admin_requests.router)
app.include_router(admin_reviews.router)
app.include_router(admin_news.router)
app.include_router(admin_users.router)
app.include_router(admin_logs.router)
app.include_router(admin_settings.router)
app.include_router(admin_uploads.router)


@app.on_event("startup")
def on_startup():
    """Create tables and upload directories, and seed the bootstrap admin."""
    init_db()
    for kind in (storage.VIDEOS, storage.THUMBNAILS):
        storage.media_dir(kind)

    db = SessionLocal()
    try:
        auth.ensure_bootstrap_admin(db)
    finally:
        db.close()
    logger.info("coursehub %s started, uploads in %s", __version__, storage.upload_root().resolve())


@app.get("/")
def root():
    return {
        "name": "coursehub API",
        "version": __version__,
        "docs": "/docs",
    }
