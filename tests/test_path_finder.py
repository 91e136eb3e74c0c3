# tests/test_path_finder.py
import math
import random

import networkx as nx
import pytest

from conftest import LINE_NODES
from tourist_router.core.errors import InvalidNodeError
from tourist_router.routing.graph_cache import GraphCache
from tourist_router.routing.path_finder import PathFinder
from tourist_router.routing.types import LatLon


def _random_graph(seed: int, n: int = 80, extra_edges: int = 160) -> GraphCache:
    rng = random.Random(seed)
    nodes = [(i, rng.uniform(0.0, 0.02), rng.uniform(0.0, 0.02)) for i in range(n)]
    edges = []
    for _ in range(extra_edges):
        u, v = rng.randrange(n), rng.randrange(n)
        if u == v:
            continue
        edges.append((u, v))
        if rng.random() < 0.6:
            edges.append((v, u))
    return GraphCache.from_records(nodes, edges)


def _to_networkx(graph: GraphCache) -> nx.DiGraph:
    G = nx.DiGraph()
    for node in graph.nodes():
        G.add_node(node.id)
        for edge in graph.neighbors(node.id):
            G.add_edge(node.id, edge.to, weight=edge.weight_meters)
    return G


def test_line_graph_a_to_d(line_graph):
    result = PathFinder(line_graph).shortest_path(1, 4)

    assert result.found
    assert result.distance_meters == pytest.approx(300.0, abs=1e-6)
    assert result.node_ids == [1, 2, 3, 4]
    assert result.path == [LatLon(lat, lon) for _, lat, lon in LINE_NODES]


def test_path_to_self_is_zero(line_graph):
    finder = PathFinder(line_graph)
    for node in line_graph.nodes():
        result = finder.shortest_path(node.id, node.id)
        assert result.distance_meters == 0.0
        assert result.node_ids == [node.id]
        assert result.path == [LatLon(node.lat, node.lon)]


def test_disjoint_components_have_no_path(disjoint_graph):
    result = PathFinder(disjoint_graph).shortest_path(1, 4)

    assert not result.found
    assert math.isinf(result.distance_meters)
    assert result.path == []
    assert result.node_ids == []


def test_one_way_edge_is_asymmetric():
    graph = GraphCache.from_records([(1, 0.0, 0.0), (2, 0.001, 0.0)], [(1, 2)])
    finder = PathFinder(graph)

    assert finder.shortest_path(1, 2).found
    assert not finder.shortest_path(2, 1).found


def test_symmetric_fixture_gives_symmetric_distances(line_graph):
    finder = PathFinder(line_graph)
    for s in range(1, 5):
        for t in range(1, 5):
            assert finder.shortest_path(s, t).distance_meters == pytest.approx(
                finder.shortest_path(t, s).distance_meters
            )


def test_unknown_node_raises(line_graph):
    finder = PathFinder(line_graph)
    with pytest.raises(InvalidNodeError):
        finder.shortest_path(1, 99)
    with pytest.raises(InvalidNodeError):
        finder.shortest_path(99, 1)


def test_prefers_shorter_detour():
    # 1 -> 2 -> 4 is shorter than 1 -> 3 -> 4 because 3 sits far off the line.
    nodes = [(1, 0.0, 0.0), (2, 0.001, 0.0001), (3, 0.001, 0.005), (4, 0.002, 0.0)]
    graph = GraphCache.from_records(nodes, [(1, 2), (2, 4), (1, 3), (3, 4)])

    result = PathFinder(graph).shortest_path(1, 4)
    assert result.node_ids == [1, 2, 4]


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_matches_networkx_dijkstra(seed):
    graph = _random_graph(seed)
    G = _to_networkx(graph)
    finder = PathFinder(graph)
    rng = random.Random(seed * 100)

    for _ in range(40):
        s, t = rng.randrange(80), rng.randrange(80)
        result = finder.shortest_path(s, t)
        if nx.has_path(G, s, t):
            expected = nx.shortest_path_length(G, s, t, weight="weight")
            assert result.distance_meters == pytest.approx(expected)
            assert result.node_ids[0] == s and result.node_ids[-1] == t
            hops = sum(
                next(e.weight_meters for e in graph.neighbors(u) if e.to == v)
                for u, v in zip(result.node_ids[:-1], result.node_ids[1:])
            )
            assert hops == pytest.approx(result.distance_meters)
        else:
            assert not result.found


def test_triangle_inequality():
    graph = _random_graph(11)
    finder = PathFinder(graph)
    rng = random.Random(5)

    checked = 0
    while checked < 30:
        s, m, t = rng.randrange(80), rng.randrange(80), rng.randrange(80)
        via_s = finder.shortest_path(s, m)
        via_t = finder.shortest_path(m, t)
        if not (via_s.found and via_t.found):
            continue
        direct = finder.shortest_path(s, t)
        assert direct.distance_meters <= via_s.distance_meters + via_t.distance_meters + 1e-6
        checked += 1


def test_expansion_cap_returns_no_path(line_graph):
    capped = PathFinder(line_graph, max_expansions=1)
    result = capped.shortest_path(1, 4)

    assert not result.found
    assert result.path == []
    assert PathFinder(line_graph, max_expansions=0).shortest_path(1, 4).found
