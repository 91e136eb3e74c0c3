# tourist_router/api/v1/routes_routing.py
from fastapi import APIRouter, Depends

from tourist_router.models.routing import (
    MultiStopRequest,
    MultiStopResponse,
    PoiRouteRequest,
    PoiRouteResponse,
    RouteRequest,
    RouteResponse,
)
from tourist_router.services.graph_manager import GraphManager
from tourist_router.services.routing_service import RoutingService

router = APIRouter(
    prefix="/route",
    tags=["routing"],
)

# Single shared instances
graph_manager = GraphManager.from_settings()
routing_service = RoutingService(graph_manager=graph_manager)


def get_routing_service() -> RoutingService:
    return routing_service


# Plain `def` handlers: route searches are CPU-bound and run in the threadpool.

@router.post(
    "/",
    response_model=RouteResponse,
    summary="Compute a route between origin and destination",
)
def compute_route(
    request: RouteRequest,
    service: RoutingService = Depends(get_routing_service),
) -> RouteResponse:
    """
    Compute a route between origin and destination with A*.

    - Snaps origin/destination to the nearest nodes with outgoing edges.
    - `reachable` is false (and `distance_m` null) when no path exists.
    """
    return service.compute_route(request)


@router.post(
    "/multi-stop",
    response_model=MultiStopResponse,
    summary="Compute a route through intermediate stops",
)
def compute_multi_stop(
    request: MultiStopRequest,
    service: RoutingService = Depends(get_routing_service),
) -> MultiStopResponse:
    """
    Route start -> stops -> end. One unreachable leg makes the whole trip
    unreachable, but the legs that were found are still returned in `path`.
    """
    return service.compute_multi_stop(request)


@router.post(
    "/poi",
    response_model=PoiRouteResponse,
    summary="Compute a route and list matching POIs along it",
)
def compute_route_with_pois(
    request: PoiRouteRequest,
    service: RoutingService = Depends(get_routing_service),
) -> PoiRouteResponse:
    return service.compute_route_with_pois(request)
