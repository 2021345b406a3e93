# =============================================================================
# photoshelf/routes/health.py - Health Check Endpoints
# =============================================================================
# Unauthenticated liveness probe with a database connectivity check.
# =============================================================================

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..database import Connection, check_database
from ..dependencies import get_db

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
@router.get("/api/health", response_model=HealthResponse, include_in_schema=False)
def health_check(db: Connection = Depends(get_db)):
    """
    Health check endpoint.

    Reports ``DEGRADED`` when the database does not answer.
    """
    database_up = check_database(db)
    return HealthResponse(
        status="UP" if database_up else "DEGRADED",
        database="UP" if database_up else "DOWN",
    )
