"""Contact form and site settings schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

ContactSubject = Literal["general", "courses", "enrollment", "technical", "partnership", "other"]


class ContactForm(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    subject: Optional[ContactSubject] = None
    message: str = Field(min_length=1, max_length=2000)


class ContactInfo(BaseModel):
    telegram: str


class SettingsResponse(BaseModel):
    support_email: Optional[str]


class SettingsUpdate(BaseModel):
    support_email: Optional[EmailStr] = None
