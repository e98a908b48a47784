"""Response schemas for service listing endpoints."""

from datetime import datetime

from pydantic import BaseModel


class ServiceListingOut(BaseModel):
    id: int
    title: str
    description: str
    image: str
    link: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ServiceListingsResponse(BaseModel):
    services: list[ServiceListingOut]
