# tourist_router/models/routing.py

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """
    Simple latitude/longitude coordinate.
    """
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class RouteRequest(BaseModel):
    """
    Request body for the /route endpoint.
    """
    origin: Coordinate
    destination: Coordinate


class MultiStopRequest(BaseModel):
    """
    Request body for /route/multi-stop: start, intermediate stops (in visiting
    order) and end.
    """
    start: Coordinate
    stops: List[Coordinate] = []
    end: Coordinate


class PoiRouteRequest(RouteRequest):
    """
    Request body for /route/poi.

    `interests` maps a POI category to its weight; higher weights are listed
    first. The weights are owned by whoever calls the API.
    """
    interests: Dict[str, int] = Field(min_length=1)


class RouteResponse(BaseModel):
    """
    Response for the /route endpoint.

    When no path exists `reachable` is false, `distance_m` is null and `path`
    is empty.
    """
    distance_m: Optional[float]
    reachable: bool
    path: List[Coordinate]
    node_ids: List[int] = []


class MultiStopResponse(RouteResponse):
    stops_count: int


class Poi(BaseModel):
    id: int
    name: str
    category: str
    lat: float
    lon: float


class PoiRouteResponse(RouteResponse):
    user_interests: Dict[str, int]
    pois: List[Poi]


class NearestNodeResponse(BaseModel):
    node_id: int
    lat: float
    lon: float
    distance_m: float
    connected: bool
