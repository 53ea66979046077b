"""Public thumbnail serving."""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from coursehub.errors import NotFoundError
from coursehub.services import storage

router = APIRouter(prefix="/api/uploads", tags=["uploads"])

IMAGE_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
}


@router.get("/thumbnails/{filename}")
def get_thumbnail(filename: str):
    path = storage.safe_path(storage.THUMBNAILS, filename)
    if not path.is_file():
        raise NotFoundError("File")
    return FileResponse(
        path,
        media_type=IMAGE_TYPES.get(path.suffix.lower(), "application/octet-stream"),
        headers={"Cache-Control": "public, max-age=31536000"},
    )
