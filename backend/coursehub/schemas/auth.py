"""Auth request/response schemas."""

from typing import Optional

from pydantic import BaseModel


class AdminLoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str]
    display_name: Optional[str]
    image: Optional[str]
    role: str
    created_at: str

    class Config:
        from_attributes = True
