"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from catalog_api.db.database import get_db
from catalog_api.schemas.common import HealthResponse


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, db: Session, request: Request):
        self._db = db
        self._request = request

    def check_database(self) -> str:
        """Check database connectivity."""
        try:
            self._db.execute(text("SELECT 1"))
            return "healthy"
        except Exception:
            return "unhealthy"

    def check_exchange_rates(self) -> str:
        """Check the exchange-rate cache was wired at startup."""
        if getattr(self._request.app.state, "exchange_rates", None) is None:
            return "not_initialized"
        return "healthy"

    def get_health(self) -> HealthResponse:
        """Get full health status."""
        db_status = self.check_database()
        rates_status = self.check_exchange_rates()

        healthy = db_status == "healthy" and rates_status == "healthy"

        return HealthResponse(
            status="healthy" if healthy else "degraded",
            components={
                "api": "healthy",
                "database": db_status,
                "exchange_rates": rates_status,
            },
        )


@router.get("", response_model=HealthResponse)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns API, database and exchange-rate cache status.
    """
    controller = HealthController(db, request)
    return controller.get_health()


@router.get("/ready")
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """
    Readiness check for container orchestration.

    Ready only when the database answers; 503 otherwise.
    """
    db_status = HealthController(db, request).check_database()
    ready = db_status == "healthy"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"ready": ready, "database": db_status},
    )


@router.get("/live")
async def liveness_check():
    """Liveness check for container orchestration."""
    return {"alive": True}
