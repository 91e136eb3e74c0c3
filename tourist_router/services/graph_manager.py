# tourist_router/services/graph_manager.py
import threading
from dataclasses import dataclass
from time import perf_counter
from typing import Optional

from tourist_router.core.config import settings
from tourist_router.core.logger import logger
from tourist_router.routing.graph_cache import GraphCache
from tourist_router.routing.path_finder import PathFinder
from tourist_router.routing.route_composer import RouteComposer
from tourist_router.routing.spatial_index import SpatialIndex


@dataclass(frozen=True)
class RoutingGraph:
    """
    Everything built from one dataset. Read-only once constructed.
    """
    graph: GraphCache
    index: SpatialIndex
    path_finder: PathFinder
    composer: RouteComposer


class GraphManager:
    # Owns the single shared routing graph for one dataset path.
    #
    # The graph is built on first use. Concurrent first callers are
    # serialised by a lock and only one of them loads the dataset; everyone
    # else gets the same instance. A failed build is not remembered, so the
    # next call retries and raises again.

    def __init__(
        self,
        db_path: str,
        cell_size_deg: float = 0.005,
        max_ring: int = 8,
        max_expansions: Optional[int] = None,
        largest_component_only: bool = False,
    ) -> None:
        self.db_path = db_path
        self.cell_size_deg = cell_size_deg
        self.max_ring = max_ring
        self.max_expansions = max_expansions
        self.largest_component_only = largest_component_only
        self._lock = threading.Lock()
        self._routing: Optional[RoutingGraph] = None
        logger.info(f"GraphManager initialised for {db_path} (graph will be built on demand).")

    @classmethod
    def from_settings(cls) -> "GraphManager":
        return cls(
            db_path=settings.GRAPH_DB_PATH,
            cell_size_deg=settings.GRID_CELL_SIZE_DEG,
            max_ring=settings.GRID_MAX_RING,
            max_expansions=settings.ASTAR_MAX_EXPANSIONS,
            largest_component_only=settings.ENDPOINTS_LARGEST_COMPONENT_ONLY,
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    @property
    def is_loaded(self) -> bool:
        return self._routing is not None

    def get(self) -> RoutingGraph:
        """
        Return the shared routing graph, building it if needed.

        Raises DataSourceError when the dataset cannot be read.
        """
        routing = self._routing
        if routing is not None:
            return routing

        with self._lock:
            if self._routing is None:
                self._routing = self._build()
            return self._routing

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _build(self) -> RoutingGraph:
        t0 = perf_counter()
        logger.info(f"Building routing graph from {self.db_path}")

        graph = GraphCache.from_path(self.db_path)
        index = SpatialIndex.build(
            graph,
            cell_size_deg=self.cell_size_deg,
            max_ring=self.max_ring,
            largest_component_only=self.largest_component_only,
        )
        path_finder = PathFinder(graph, max_expansions=self.max_expansions)
        composer = RouteComposer(index, path_finder)

        logger.info(f"Routing graph ready in {(perf_counter() - t0) * 1000.0:.2f} ms")
        return RoutingGraph(graph=graph, index=index, path_finder=path_finder, composer=composer)
