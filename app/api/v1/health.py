"""Health check endpoint with database and upload-directory checks."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.asset_store import check_upload_dir_writable

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """
    Return service health status, database connectivity and upload-dir writability.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    storage_status = "writable" if check_upload_dir_writable(settings.UPLOAD_DIR) else "unavailable"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        storage=storage_status,
    )
