# tourist_router/api/v1/routes_nodes.py
from fastapi import APIRouter, Depends, HTTPException, Query

from tourist_router.api.v1.routes_routing import get_routing_service
from tourist_router.models.routing import Coordinate, NearestNodeResponse
from tourist_router.services.routing_service import RoutingService

router = APIRouter(
    prefix="/nodes",
    tags=["nodes"],
)


@router.get(
    "/nearest",
    response_model=NearestNodeResponse,
    summary="Find the graph node nearest to a coordinate",
)
def nearest_node(
    lat: float = Query(ge=-90.0, le=90.0),
    lon: float = Query(ge=-180.0, le=180.0),
    connected: bool = True,
    service: RoutingService = Depends(get_routing_service),
) -> NearestNodeResponse:
    result = service.nearest_node(Coordinate(lat=lat, lon=lon), connected=connected)
    if result is None:
        raise HTTPException(status_code=404, detail="Graph has no eligible nodes")
    return result
