"""Health checks for the booking API and its SMS pipeline"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from salonbook.config.database import get_db
from salonbook.config.redis import get_redis
from salonbook.config.settings import get_settings

SERVICE_NAME = "salonbook-api"

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME}


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Database and notification broker status.

    The broker only matters while booking SMS are enabled; with them off
    it is reported as skipped and does not degrade the overall status.
    """
    settings = get_settings()
    checks = {
        "service": SERVICE_NAME,
        "database": "unknown",
        "notifications": "enabled" if settings.BOOKING_NOTIFICATIONS_ENABLED else "disabled",
        "broker": "skipped",
        "overall": "unknown"
    }

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {str(e)}"

    if settings.BOOKING_NOTIFICATIONS_ENABLED:
        try:
            redis_client = await get_redis()
            await redis_client.ping()
            checks["broker"] = "healthy"
            await redis_client.aclose()
        except Exception as e:
            checks["broker"] = f"unhealthy: {str(e)}"

    healthy = checks["database"] == "healthy" and checks["broker"] in ("healthy", "skipped")
    checks["overall"] = "healthy" if healthy else "degraded"

    return checks
