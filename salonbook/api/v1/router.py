"""
API v1 router setup
Organized into: public (online booking) and dashboard (salon staff) routes
"""
from fastapi import APIRouter

from salonbook.api.v1.public import booking
from salonbook.api.v1.dashboard import appointments

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (online booking page)
# ============================================================================
api_v1_router.include_router(
    booking.router,
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES
# ============================================================================
api_v1_router.include_router(
    appointments.router,
    tags=["Dashboard"]
)


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoint groups.
    """
    return {
        "version": "1.0",
        "endpoints": {
            "public": "/api/v1/public/{business_id}/...",
            "dashboard": "/api/v1/dashboard/{business_id}/..."
        }
    }
