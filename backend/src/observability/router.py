"""Observability API endpoints: Prometheus metrics and health check."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.orm import Session

from database import get_db
from .health import HealthStatus, check_database_health, get_overall_health

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    """Expose Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/health", summary="Health check endpoint")
def health_check(db: Session = Depends(get_db)):
    """Check health of the database backing the governance data port.

    Returns 200 OK when healthy, 503 otherwise.
    """
    components = {"database": check_database_health(db)}
    overall_status = get_overall_health(components)

    return JSONResponse(
        content={
            "status": overall_status.value,
            "components": {
                name: {
                    "status": comp.status.value,
                    "message": comp.message,
                    "latency_ms": comp.latency_ms,
                }
                for name, comp in components.items()
            },
        },
        status_code=200 if overall_status == HealthStatus.HEALTHY else 503,
    )
