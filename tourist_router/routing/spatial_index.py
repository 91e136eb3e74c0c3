# tourist_router/routing/spatial_index.py
import math
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from tourist_router.core.logger import logger
from tourist_router.routing.geo import haversine_m
from tourist_router.routing.graph_cache import GraphCache
from tourist_router.routing.types import Node

Cell = Tuple[int, int]
NodeFilter = Callable[[int], bool]

DEFAULT_CELL_SIZE_DEG = 0.005
DEFAULT_MAX_RING = 8


class SpatialIndex:
    """
    Uniform lat/lon grid over the graph nodes for nearest-node queries.

    Cells are keyed by (floor(lon / cell), floor(lat / cell)). A query looks at
    square rings of cells around the query cell, radius 0, 1, 2, ... up to
    `max_ring`, and stops at the first ring that produced any candidate. When
    nothing is found within the bound it falls back to scanning every node.
    """

    def __init__(
        self,
        graph: GraphCache,
        cells: Dict[Cell, Tuple[int, ...]],
        cell_size_deg: float,
        max_ring: int,
        largest_component_only: bool = False,
    ) -> None:
        self.graph = graph
        self.cell_size_deg = cell_size_deg
        self.max_ring = max_ring
        self.largest_component_only = largest_component_only
        self._cells = cells

    @classmethod
    def build(
        cls,
        graph: GraphCache,
        cell_size_deg: float = DEFAULT_CELL_SIZE_DEG,
        max_ring: int = DEFAULT_MAX_RING,
        largest_component_only: bool = False,
    ) -> "SpatialIndex":
        if cell_size_deg <= 0:
            raise ValueError(f"cell_size_deg must be positive, got {cell_size_deg}")
        if max_ring < 0:
            raise ValueError(f"max_ring must be >= 0, got {max_ring}")

        building: Dict[Cell, List[int]] = {}
        for node in graph.nodes():
            key = (cls._quantize(node.lon, cell_size_deg), cls._quantize(node.lat, cell_size_deg))
            building.setdefault(key, []).append(node.id)

        cells = {key: tuple(ids) for key, ids in building.items()}
        logger.info(f"Spatial index built: {len(cells)} cells of {cell_size_deg} deg")
        return cls(graph, cells, cell_size_deg, max_ring, largest_component_only)

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def nearest(self, lat: float, lon: float) -> Optional[int]:
        """
        Id of the node closest to (lat, lon), or None for an empty graph.
        """
        return self._search(lat, lon, accept=None)

    def nearest_connected(self, lat: float, lon: float) -> Optional[int]:
        """
        Like `nearest`, but only nodes with at least one outgoing edge qualify,
        so the result can always start a path.
        """
        return self._search(lat, lon, accept=self._is_routable)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _quantize(value: float, cell_size_deg: float) -> int:
        return int(math.floor(value / cell_size_deg))

    def _is_routable(self, node_id: int) -> bool:
        if not self.graph.has_outgoing(node_id):
            return False
        if self.largest_component_only:
            return self.graph.component_of(node_id) == self.graph.largest_component
        return True

    def _ring(self, cx: int, cy: int, r: int) -> Iterator[Cell]:
        if r == 0:
            yield cx, cy
            return
        for dx in range(-r, r + 1):
            yield cx + dx, cy - r
            yield cx + dx, cy + r
        for dy in range(-r + 1, r):
            yield cx - r, cy + dy
            yield cx + r, cy + dy

    def _closest(
        self,
        lat: float,
        lon: float,
        candidates: Iterable[Node],
        accept: Optional[NodeFilter],
        best_id: Optional[int],
        best_d: float,
    ) -> Tuple[Optional[int], float]:
        for node in candidates:
            if accept is not None and not accept(node.id):
                continue
            d = haversine_m(lat, lon, node.lat, node.lon)
            if d < best_d:
                best_d = d
                best_id = node.id
        return best_id, best_d

    def _search(self, lat: float, lon: float, accept: Optional[NodeFilter]) -> Optional[int]:
        if len(self.graph) == 0:
            return None

        cx = self._quantize(lon, self.cell_size_deg)
        cy = self._quantize(lat, self.cell_size_deg)
        best_id: Optional[int] = None
        best_d = math.inf

        for r in range(self.max_ring + 1):
            for key in self._ring(cx, cy, r):
                ids = self._cells.get(key)
                if not ids:
                    continue
                nodes = (self.graph.get_node(node_id) for node_id in ids)
                best_id, best_d = self._closest(lat, lon, nodes, accept, best_id, best_d)
            if best_id is not None:
                return best_id

        logger.debug(
            f"No candidate within {self.max_ring} rings of ({lat:.6f}, {lon:.6f}); "
            f"falling back to a full scan of {len(self.graph)} nodes"
        )
        best_id, _ = self._closest(lat, lon, self.graph.nodes(), accept, None, math.inf)
        return best_id
