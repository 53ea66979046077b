"""Rate limiting via slowapi.

Counters live in RATE_LIMIT_STORAGE_URI; the default memory:// store is
per-process, so limits apply per worker.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from coursehub.config import settings

AUTH_LIMIT = "5/15minutes"
API_LIMIT = "60/minute"
UPLOAD_LIMIT = "10/minute"
CONTACT_LIMIT = "5/minute"

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)
