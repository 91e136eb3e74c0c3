# tourist_router/routing/graph_cache.py
import math
from collections import deque
from time import perf_counter
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from tourist_router.core.errors import InvalidNodeError
from tourist_router.core.logger import logger
from tourist_router.routing.dataset import SqliteDataset
from tourist_router.routing.geo import haversine_m
from tourist_router.routing.types import Edge, Node

_NO_EDGES: Tuple[Edge, ...] = ()


def _parse_node(row: Any) -> Optional[Node]:
    """
    Turn a raw `(id, lat, lon)` row into a Node, or None if the row is unusable.
    """
    try:
        raw_id, raw_lat, raw_lon = row
        node_id = int(raw_id)
        if isinstance(raw_id, float) and raw_id != node_id:
            return None  # REAL id with a fractional part
        lat = float(raw_lat)
        lon = float(raw_lon)
    except (TypeError, ValueError):
        return None

    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return Node(id=node_id, lat=lat, lon=lon)


def _parse_edge(row: Any) -> Optional[Tuple[int, int]]:
    try:
        raw_from, raw_to = row
        return int(raw_from), int(raw_to)
    except (TypeError, ValueError):
        return None


def _compute_components(
    nodes: Dict[int, Node],
    adjacency: Dict[int, Tuple[Edge, ...]],
) -> Tuple[Dict[int, int], Dict[int, int]]:
    """
    Stamp every node with a component id.

    A BFS is started from each node not yet stamped and walks outgoing edges
    only, so a node reachable from two runs keeps the id of the first one.
    """
    component_by_node: Dict[int, int] = {}
    component_sizes: Dict[int, int] = {}
    component_idx = 0

    for node_id in nodes:
        if node_id in component_by_node:
            continue
        component_idx += 1
        component_by_node[node_id] = component_idx
        size = 1
        q: deque = deque([node_id])
        while q:
            current = q.popleft()
            for edge in adjacency.get(current, _NO_EDGES):
                if edge.to not in component_by_node:
                    component_by_node[edge.to] = component_idx
                    size += 1
                    q.append(edge.to)
        component_sizes[component_idx] = size

    return component_by_node, component_sizes


class GraphCache:
    """
    In-memory routing graph: nodes by id, outgoing edges by source id and a
    precomputed component id per node.

    Built once and never mutated afterwards, so any number of threads may
    read it concurrently.
    """

    def __init__(
        self,
        nodes: Dict[int, Node],
        adjacency: Dict[int, Tuple[Edge, ...]],
        source: str = "<memory>",
    ) -> None:
        self.source = source
        self._nodes = nodes
        self._adjacency = adjacency
        self._edge_count = sum(len(edges) for edges in adjacency.values())
        self._component_by_node, self._component_sizes = _compute_components(nodes, adjacency)

        # Only components holding a node with outgoing edges can supply endpoints
        routable = {self._component_by_node[u] for u, edges in adjacency.items() if edges}
        largest = max(
            ((c, size) for c, size in self._component_sizes.items() if c in routable),
            key=lambda kv: kv[1],
            default=None,
        )
        self._largest_component: Optional[int] = largest[0] if largest else None

        logger.info(
            f"Graph ready from {source}: {self.node_count} nodes, {self.edge_count} edges, "
            f"{self.component_count} components "
            f"(largest has {self._component_sizes.get(self._largest_component, 0)} nodes)"
        )

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, dataset: SqliteDataset) -> "GraphCache":
        """
        Read every node and edge from the dataset.

        Raises DataSourceError if the dataset cannot be opened. Malformed
        rows and edges pointing at unknown nodes are skipped.
        """
        t0 = perf_counter()
        nodes, skipped_nodes = cls._read_nodes(dataset.iter_nodes())
        adjacency, skipped_edges, dangling_edges = cls._read_edges(dataset.iter_edges(), nodes)

        logger.info(
            f"Loaded {dataset.path} in {(perf_counter() - t0) * 1000.0:.2f} ms; "
            f"skipped {skipped_nodes} malformed nodes, {skipped_edges} malformed edges, "
            f"{dangling_edges} edges referencing unknown nodes"
        )
        return cls(nodes, adjacency, source=dataset.path)

    @classmethod
    def from_path(cls, path: str) -> "GraphCache":
        return cls.load(SqliteDataset(path))

    @classmethod
    def from_records(
        cls,
        nodes: Iterable[Any],
        edges: Iterable[Any],
        source: str = "<memory>",
    ) -> "GraphCache":
        """
        Build a graph from in-memory `(id, lat, lon)` and `(from, to)` rows,
        applying the same validation as a dataset load.
        """
        node_map, _ = cls._read_nodes(nodes)
        adjacency, _, _ = cls._read_edges(edges, node_map)
        return cls(node_map, adjacency, source=source)

    @staticmethod
    def _read_nodes(rows: Iterable[Any]) -> Tuple[Dict[int, Node], int]:
        nodes: Dict[int, Node] = {}
        skipped = 0
        for row in rows:
            node = _parse_node(row)
            if node is None:
                skipped += 1
                continue
            nodes[node.id] = node
        return nodes, skipped

    @staticmethod
    def _read_edges(
        rows: Iterable[Any],
        nodes: Dict[int, Node],
    ) -> Tuple[Dict[int, Tuple[Edge, ...]], int, int]:
        building: Dict[int, List[Edge]] = {}
        skipped = 0
        dangling = 0
        for row in rows:
            parsed = _parse_edge(row)
            if parsed is None:
                skipped += 1
                continue
            u, v = parsed
            nu = nodes.get(u)
            nv = nodes.get(v)
            if nu is None or nv is None:
                dangling += 1
                continue
            weight = haversine_m(nu.lat, nu.lon, nv.lat, nv.lon)
            building.setdefault(u, []).append(Edge(to=v, weight_meters=weight))

        adjacency = {u: tuple(edges) for u, edges in building.items()}
        return adjacency, skipped, dangling

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    def get_node(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def require_node(self, node_id: int) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise InvalidNodeError(node_id)
        return node

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def nodes(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def neighbors(self, node_id: int) -> Tuple[Edge, ...]:
        return self._adjacency.get(node_id, _NO_EDGES)

    def has_outgoing(self, node_id: int) -> bool:
        return bool(self._adjacency.get(node_id))

    def distance_m(self, a: int, b: int) -> float:
        na = self.require_node(a)
        nb = self.require_node(b)
        return haversine_m(na.lat, na.lon, nb.lat, nb.lon)

    # ------------------------------------------------------------------ #
    # Connectivity
    # ------------------------------------------------------------------ #

    def component_of(self, node_id: int) -> Optional[int]:
        return self._component_by_node.get(node_id)

    def same_component(self, a: int, b: int) -> bool:
        ca = self._component_by_node.get(a)
        return ca is not None and ca == self._component_by_node.get(b)

    @property
    def component_sizes(self) -> Dict[int, int]:
        return dict(self._component_sizes)

    @property
    def component_count(self) -> int:
        return len(self._component_sizes)

    @property
    def largest_component(self) -> Optional[int]:
        """Largest component containing at least one node with outgoing edges."""
        return self._largest_component

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return self._edge_count
