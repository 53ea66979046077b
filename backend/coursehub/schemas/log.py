"""Audit log schemas."""

from typing import Optional

from pydantic import BaseModel

from coursehub.schemas.common import Pagination


class LogResponse(BaseModel):
    id: str
    action: str
    details: Optional[str]
    entity_type: Optional[str]
    entity_id: Optional[str]
    actor_id: Optional[str]
    created_at: str


class LogListResponse(BaseModel):
    logs: list[LogResponse]
    pagination: Pagination
    actions: list[str]
