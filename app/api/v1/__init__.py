"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth, contact, health, images, listings

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(images.router, prefix="/images", tags=["images"])
router.include_router(listings.router, prefix="/services", tags=["services"])
router.include_router(contact.router, prefix="/contact", tags=["contact"])
