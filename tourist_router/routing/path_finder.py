# tourist_router/routing/path_finder.py
import heapq
import itertools
from typing import Dict, List, Optional, Set, Tuple

from tourist_router.core.logger import logger
from tourist_router.routing.geo import haversine_m
from tourist_router.routing.graph_cache import GraphCache
from tourist_router.routing.types import LatLon, PathResult


class PathFinder:
    """
    A* shortest paths over a GraphCache.

    The heuristic is the Haversine distance to the target. Edge weights are
    Haversine distances as well, so the heuristic never overestimates and the
    returned paths are optimal.

    Each call keeps its own open/closed sets; one instance can be shared
    between threads.
    """

    def __init__(self, graph: GraphCache, max_expansions: Optional[int] = None) -> None:
        self.graph = graph
        # None or 0: unbounded
        self.max_expansions = max_expansions or None

    def shortest_path(self, source: int, target: int) -> PathResult:
        src = self.graph.require_node(source)
        dst = self.graph.require_node(target)

        if source == target:
            return PathResult(distance_meters=0.0, path=[src.latlon], node_ids=[source])

        def h(node_id: int) -> float:
            node = self.graph.get_node(node_id)
            return haversine_m(node.lat, node.lon, dst.lat, dst.lon)

        # Counter breaks f ties in insertion order, so ids are never compared.
        tie = itertools.count()
        open_heap: List[Tuple[float, int, int]] = [(h(source), next(tie), source)]
        g_score: Dict[int, float] = {source: 0.0}
        came_from: Dict[int, int] = {}
        closed: Set[int] = set()
        expansions = 0

        while open_heap:
            _, _, current = heapq.heappop(open_heap)
            if current in closed:
                continue  # stale entry
            if current == target:
                return self._reconstruct(source, target, came_from, g_score[target])
            closed.add(current)

            expansions += 1
            if self.max_expansions is not None and expansions > self.max_expansions:
                logger.warning(
                    f"A* from {source} to {target} gave up after {self.max_expansions} expansions"
                )
                return PathResult.no_path()

            g_current = g_score[current]
            for edge in self.graph.neighbors(current):
                if edge.to in closed:
                    continue
                tentative = g_current + edge.weight_meters
                if tentative < g_score.get(edge.to, float("inf")):
                    g_score[edge.to] = tentative
                    came_from[edge.to] = current
                    heapq.heappush(open_heap, (tentative + h(edge.to), next(tie), edge.to))

        logger.debug(f"A* exhausted open set: no path from {source} to {target}")
        return PathResult.no_path()

    def _reconstruct(
        self,
        source: int,
        target: int,
        came_from: Dict[int, int],
        distance: float,
    ) -> PathResult:
        node_ids = [target]
        current = target
        while current != source:
            prev = came_from.get(current)
            if prev is None:
                logger.error(f"Broken predecessor chain at node {current} ({source} -> {target})")
                return PathResult.no_path()
            node_ids.append(prev)
            current = prev
        node_ids.reverse()

        path: List[LatLon] = [self.graph.get_node(node_id).latlon for node_id in node_ids]
        return PathResult(distance_meters=distance, path=path, node_ids=node_ids)
