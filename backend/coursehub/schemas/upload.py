"""Upload and storage maintenance schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    filename: str
    original_name: str
    size: int
    content_type: str
    url: str
    uploaded_at: str


class DiskInfo(BaseModel):
    total: int
    used: int
    available: int
    use_percentage: float


class CleanupResult(BaseModel):
    deleted: int = 0
    failed: int = 0
    details: list[str] = []


class CleanupReport(BaseModel):
    videos: CleanupResult
    thumbnails: CleanupResult


class OrphanStats(BaseModel):
    total: int = 0
    unused: int = 0
    size: int = 0


class OrphanReport(BaseModel):
    videos: OrphanStats
    thumbnails: OrphanStats
