"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import APP_VERSION, settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """Service status and database connectivity, for load balancers."""
    return HealthResponse(
        status="ok",
        version=APP_VERSION,
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
