from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
import time

from ...core.config import settings
from ...core.database import check_db_connection, get_db
from ...core.responses import send_response

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request, db: Session = Depends(get_db)):
    """Report server and database status."""
    database_ok = check_db_connection(db)
    started_at = getattr(request.app.state, "started_at", time.monotonic())

    health_data = {
        "status": "healthy" if database_ok else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started_at, 3),
        "environment": settings.ENVIRONMENT,
        "version": settings.VERSION,
        "services": {
            "database": "healthy" if database_ok else "unhealthy",
            "server": "healthy",
        },
    }

    if not database_ok:
        return send_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Health check failed",
            health_data,
            success=False,
        )

    return send_response(status.HTTP_200_OK, "Health check successful", health_data)
