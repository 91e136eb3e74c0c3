# tourist_router/core/errors.py
from typing import Optional


class RoutingError(Exception):
    """
    Base class for every error raised by the routing core.
    """


class DataSourceError(RoutingError):
    """
    The node/edge (or POI) dataset could not be opened or read.

    Raised while building the graph; the routing subsystem cannot serve
    queries until the dataset is fixed.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read dataset {path!r}: {reason}")


class InvalidNodeError(RoutingError):
    """
    A node id that does not exist in the graph was passed to the core.
    """

    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"Node {node_id} is not part of the graph")


class UnresolvableWaypointError(RoutingError):
    """
    No routable node could be found for a supplied coordinate.
    """

    def __init__(self, index: int, lat: float, lon: float, reason: Optional[str] = None) -> None:
        self.index = index
        self.lat = lat
        self.lon = lon
        message = f"Waypoint {index} at ({lat:.6f}, {lon:.6f}) has no connected node nearby"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
