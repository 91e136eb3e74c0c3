# tourist_router/routing/types.py
import math
from dataclasses import dataclass, field
from typing import List, NamedTuple


class LatLon(NamedTuple):
    lat: float
    lon: float


@dataclass(frozen=True)
class Node:
    id: int
    lat: float
    lon: float

    @property
    def latlon(self) -> LatLon:
        return LatLon(self.lat, self.lon)


@dataclass(frozen=True)
class Edge:
    # Directed edge; the source node is the adjacency key.
    to: int
    weight_meters: float


@dataclass(frozen=True)
class PoiRecord:
    id: int
    name: str
    category: str
    lat: float
    lon: float


@dataclass(frozen=True)
class PathResult:
    """
    Outcome of a shortest-path query.

    `distance_meters == inf` together with an empty path means "no path".
    """
    distance_meters: float
    path: List[LatLon] = field(default_factory=list)
    node_ids: List[int] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return math.isfinite(self.distance_meters)

    @classmethod
    def no_path(cls) -> "PathResult":
        return cls(distance_meters=math.inf)
