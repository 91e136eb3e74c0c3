# tests/test_route_composer.py
import math

import pytest

from conftest import DISJOINT_NODES, LINE_NODES, STEP_100M
from tourist_router.core.errors import UnresolvableWaypointError
from tourist_router.routing.graph_cache import GraphCache
from tourist_router.routing.path_finder import PathFinder
from tourist_router.routing.route_composer import RouteComposer
from tourist_router.routing.spatial_index import SpatialIndex
from tourist_router.routing.types import LatLon


def _composer(graph: GraphCache) -> RouteComposer:
    return RouteComposer(SpatialIndex.build(graph), PathFinder(graph))


def _coord(nodes, node_id):
    _, lat, lon = next(n for n in nodes if n[0] == node_id)
    return LatLon(lat, lon)


def test_single_leg(line_graph):
    route = _composer(line_graph).route([_coord(LINE_NODES, 1), _coord(LINE_NODES, 4)])

    assert route.reachable
    assert route.distance_meters == pytest.approx(300.0, abs=1e-6)
    assert route.node_ids == [1, 2, 3, 4]
    assert route.waypoint_node_ids == [1, 4]


def test_multi_stop_drops_shared_junction(line_graph):
    composer = _composer(line_graph)
    finder = composer.path_finder
    ab = finder.shortest_path(1, 3)
    bc = finder.shortest_path(3, 4)

    route = composer.route([_coord(LINE_NODES, 1), _coord(LINE_NODES, 3), _coord(LINE_NODES, 4)])

    assert len(route.path) == len(ab.path) + len(bc.path) - 1
    assert route.distance_meters == pytest.approx(ab.distance_meters + bc.distance_meters)
    assert route.node_ids == [1, 2, 3, 4]
    assert len(route.segments) == 2


def test_going_back_and_forth(line_graph):
    waypoints = [_coord(LINE_NODES, 1), _coord(LINE_NODES, 3), _coord(LINE_NODES, 2)]
    route = _composer(line_graph).route(waypoints)

    assert route.node_ids == [1, 2, 3, 2]
    assert route.distance_meters == pytest.approx(300.0, abs=1e-6)


def test_repeated_waypoint(line_graph):
    route = _composer(line_graph).route([_coord(LINE_NODES, 2), _coord(LINE_NODES, 2)])

    assert route.distance_meters == 0.0
    assert route.path == [_coord(LINE_NODES, 2)]


def test_waypoints_snap_to_connected_nodes():
    nodes = [(1, 0.0, 0.0), (2, STEP_100M, 0.0), (3, 2 * STEP_100M, 0.0)]
    # node 3 is an orphan
    graph = GraphCache.from_records(nodes, [(1, 2), (2, 1)])

    route = _composer(graph).route([LatLon(0.0, 0.0), LatLon(2 * STEP_100M, 0.0)])
    assert route.waypoint_node_ids == [1, 2]
    assert route.reachable


def test_unreachable_leg_gives_infinite_total(disjoint_graph):
    waypoints = [
        _coord(DISJOINT_NODES, 1),
        _coord(DISJOINT_NODES, 2),
        _coord(DISJOINT_NODES, 3),
    ]
    route = _composer(disjoint_graph).route(waypoints)

    assert not route.reachable
    assert math.isinf(route.distance_meters)
    # the reachable first leg is kept, the gap contributes nothing
    assert route.node_ids == [1, 2]
    assert len(route.path) == 2
    assert route.segments[0].found and not route.segments[1].found


def test_unreachable_first_leg_keeps_following_leg(disjoint_graph):
    waypoints = [
        _coord(DISJOINT_NODES, 1),
        _coord(DISJOINT_NODES, 3),
        _coord(DISJOINT_NODES, 4),
    ]
    route = _composer(disjoint_graph).route(waypoints)

    assert math.isinf(route.distance_meters)
    assert route.node_ids == [3, 4]


def test_unresolvable_waypoint():
    graph = GraphCache.from_records([(1, 0.0, 0.0), (2, 0.001, 0.0)], [])

    with pytest.raises(UnresolvableWaypointError) as excinfo:
        _composer(graph).route([LatLon(0.0, 0.0), LatLon(0.001, 0.0)])
    assert excinfo.value.index == 0


def test_needs_two_waypoints(line_graph):
    with pytest.raises(ValueError):
        _composer(line_graph).route([_coord(LINE_NODES, 1)])
