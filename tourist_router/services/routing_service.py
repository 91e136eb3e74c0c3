# tourist_router/services/routing_service.py

from time import perf_counter
from typing import List, Optional, Sequence

from tourist_router.core.config import settings
from tourist_router.core.logger import logger
from tourist_router.models.routing import (
    Coordinate,
    MultiStopRequest,
    MultiStopResponse,
    NearestNodeResponse,
    Poi,
    PoiRouteRequest,
    PoiRouteResponse,
    RouteRequest,
    RouteResponse,
)
from tourist_router.routing.geo import haversine_m
from tourist_router.routing.poi_augmenter import PoiAugmenter, PoiSource
from tourist_router.routing.poi_store import SqlitePoiStore, StaticPoiSource
from tourist_router.routing.route_composer import ComposedRoute
from tourist_router.routing.types import LatLon
from tourist_router.services.graph_manager import GraphManager


class RoutingService:
    """
    High-level routing service:
    - makes sure the shared graph is loaded
    - snaps request coordinates onto routable graph nodes
    - computes single-leg and multi-stop shortest paths
    - optionally lists POIs along the route, ranked by interest weight
    """

    def __init__(
        self,
        graph_manager: GraphManager | None = None,
        poi_source: PoiSource | None = None,
        poi_radius_m: float | None = None,
    ) -> None:
        self.graph_manager = graph_manager or GraphManager.from_settings()
        if poi_source is None:
            poi_source = SqlitePoiStore(settings.POI_DB_PATH) if settings.POI_DB_PATH else StaticPoiSource()
        radius = settings.POI_RADIUS_M if poi_radius_m is None else poi_radius_m
        self.poi_augmenter = PoiAugmenter(poi_source, radius_m=radius)
        logger.info("RoutingService initialised (graph will be built on demand).")

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def compute_route(self, request: RouteRequest) -> RouteResponse:
        """
        Main entry point for the /route endpoint.
        """
        origin, destination = request.origin, request.destination
        logger.info(
            f"Received routing request from ({origin.lat:.6f}, {origin.lon:.6f}) -> "
            f"({destination.lat:.6f}, {destination.lon:.6f})"
        )
        route = self._compose([request.origin, request.destination])
        return RouteResponse(**self._route_fields(route))

    def compute_multi_stop(self, request: MultiStopRequest) -> MultiStopResponse:
        """
        Route start -> stops... -> end, in the given order.
        """
        waypoints = [request.start, *request.stops, request.end]
        logger.info(f"Received multi-stop request with {len(request.stops)} stops")
        route = self._compose(waypoints)
        return MultiStopResponse(**self._route_fields(route), stops_count=len(request.stops))

    def compute_route_with_pois(self, request: PoiRouteRequest) -> PoiRouteResponse:
        """
        Route origin -> destination and list the POIs of the requested
        categories within the proximity band of the path.
        """
        route = self._compose([request.origin, request.destination])

        t0 = perf_counter()
        pois = self.poi_augmenter.nearby_by_category(
            route.path,
            categories=request.interests.keys(),
            weights=request.interests,
        )
        logger.info(
            f"Found {len(pois)} POIs near a {len(route.path)}-point path "
            f"in {(perf_counter() - t0) * 1000.0:.2f} ms"
        )

        return PoiRouteResponse(
            **self._route_fields(route),
            user_interests=dict(request.interests),
            pois=[
                Poi(id=p.id, name=p.name, category=p.category, lat=p.lat, lon=p.lon)
                for p in pois
            ],
        )

    def nearest_node(self, coord: Coordinate, connected: bool = True) -> Optional[NearestNodeResponse]:
        """
        Nearest graph node to a coordinate; None only when the graph is empty
        (or, with `connected`, has no node with outgoing edges).
        """
        routing = self.graph_manager.get()
        if connected:
            node_id = routing.index.nearest_connected(coord.lat, coord.lon)
        else:
            node_id = routing.index.nearest(coord.lat, coord.lon)
        if node_id is None:
            return None

        node = routing.graph.get_node(node_id)
        return NearestNodeResponse(
            node_id=node.id,
            lat=node.lat,
            lon=node.lon,
            distance_m=haversine_m(coord.lat, coord.lon, node.lat, node.lon),
            connected=routing.graph.has_outgoing(node.id),
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _compose(self, waypoints: Sequence[Coordinate]) -> ComposedRoute:
        t0 = perf_counter()
        routing = self.graph_manager.get()
        t_graph = perf_counter()

        route = routing.composer.route([LatLon(c.lat, c.lon) for c in waypoints])
        t1 = perf_counter()

        logger.info(
            f"Route over nodes {route.waypoint_node_ids}: distance={route.distance_meters:.1f} m, "
            f"{len(route.path)} points, graph={(t_graph - t0) * 1000.0:.2f} ms, "
            f"search={(t1 - t_graph) * 1000.0:.2f} ms"
        )
        return route

    @staticmethod
    def _route_fields(route: ComposedRoute) -> dict:
        path: List[Coordinate] = [Coordinate(lat=lat, lon=lon) for lat, lon in route.path]
        return {
            "distance_m": route.distance_meters if route.reachable else None,
            "reachable": route.reachable,
            "path": path,
            "node_ids": route.node_ids,
        }
