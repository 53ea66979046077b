"""Response envelope shared by every JSON endpoint."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from coursehub.errors import ValidationError

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


def update_changes(req: BaseModel, required: tuple[str, ...] = ()) -> dict:
    """Fields the client sent. An explicit null for a `required` field is refused."""
    changes = req.model_dump(exclude_unset=True)
    for name in required:
        if name in changes and changes[name] is None:
            raise ValidationError(f"{name}: may not be null")
    return changes


def stripped(value: str, name: str) -> str:
    value = value.strip()
    if not value:
        raise ValidationError(f"{name}: may not be blank")
    return value
