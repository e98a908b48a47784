"""Request schema for the contact form relay."""

from pydantic import BaseModel, EmailStr, Field


class ContactRequest(BaseModel):
    """Contact form submission; relayed by email to the site administrator."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    message: str = Field(..., min_length=1, max_length=10_000)
    phone: str | None = Field(default=None, max_length=64)
    postal_code: str | None = Field(default=None, max_length=32)
    objectif: str | None = Field(default=None, max_length=255)
