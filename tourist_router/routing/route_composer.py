# tourist_router/routing/route_composer.py
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

from tourist_router.core.errors import UnresolvableWaypointError
from tourist_router.core.logger import logger
from tourist_router.routing.path_finder import PathFinder
from tourist_router.routing.spatial_index import SpatialIndex
from tourist_router.routing.types import LatLon, PathResult

WaypointLike = Union[LatLon, Tuple[float, float]]


@dataclass(frozen=True)
class ComposedRoute:
    distance_meters: float
    path: List[LatLon] = field(default_factory=list)
    node_ids: List[int] = field(default_factory=list)
    waypoint_node_ids: List[int] = field(default_factory=list)
    segments: List[PathResult] = field(default_factory=list)

    @property
    def reachable(self) -> bool:
        return math.isfinite(self.distance_meters)


class RouteComposer:
    """
    Chains shortest-path segments through an ordered list of waypoints.

    Waypoints are snapped to the nearest node with outgoing edges. Segment
    paths are concatenated without repeating the junction node, so the
    polyline and the summed distance describe the same trip.
    """

    def __init__(self, index: SpatialIndex, path_finder: PathFinder) -> None:
        self.index = index
        self.path_finder = path_finder

    def resolve(self, waypoints: Sequence[WaypointLike]) -> List[int]:
        resolved: List[int] = []
        for i, (lat, lon) in enumerate(waypoints):
            node_id = self.index.nearest_connected(lat, lon)
            if node_id is None:
                raise UnresolvableWaypointError(i, lat, lon)
            logger.debug(f"Waypoint {i} ({lat:.6f}, {lon:.6f}) -> node {node_id}")
            resolved.append(node_id)
        return resolved

    def route(self, waypoints: Sequence[WaypointLike]) -> ComposedRoute:
        if len(waypoints) < 2:
            raise ValueError(f"A route needs at least 2 waypoints, got {len(waypoints)}")

        node_sequence = self.resolve(waypoints)
        return self.route_nodes(node_sequence)

    def route_nodes(self, node_sequence: Sequence[int]) -> ComposedRoute:
        total = 0.0
        path: List[LatLon] = []
        node_ids: List[int] = []
        segments: List[PathResult] = []

        for from_id, to_id in zip(node_sequence[:-1], node_sequence[1:]):
            segment = self.path_finder.shortest_path(from_id, to_id)
            segments.append(segment)

            if not segment.found:
                hint = "" if self.index.graph.same_component(from_id, to_id) else " (different components)"
                logger.warning(f"Segment {from_id} -> {to_id} unreachable{hint}")
                total = math.inf
                continue

            total += segment.distance_meters
            # Junction node is already the last point of the previous segment
            skip = 1 if path else 0
            path.extend(segment.path[skip:])
            node_ids.extend(segment.node_ids[skip:])

        return ComposedRoute(
            distance_meters=total,
            path=path,
            node_ids=node_ids,
            waypoint_node_ids=list(node_sequence),
            segments=segments,
        )
