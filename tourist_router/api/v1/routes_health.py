# tourist_router/api/v1/routes_health.py
from fastapi import APIRouter, Depends

from tourist_router.api.v1.routes_routing import get_routing_service
from tourist_router.core.config import settings
from tourist_router.services.routing_service import RoutingService

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("/", summary="Health check")
async def health_check(service: RoutingService = Depends(get_routing_service)):
    """
    Simple health check endpoint to verify that the API is running.
    """
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "graph_loaded": service.graph_manager.is_loaded,
    }
