# tourist_router/routing/poi_augmenter.py
from typing import Collection, List, Mapping, Optional, Protocol, Sequence

from tourist_router.routing.geo import haversine_m
from tourist_router.routing.types import LatLon, PoiRecord

DEFAULT_RADIUS_M = 500.0
DEFAULT_WEIGHT = 1


class PoiSource(Protocol):
    def find_by_categories(self, categories: Collection[str]) -> List[PoiRecord]:
        ...


class PoiAugmenter:
    """
    Picks POIs of the requested categories lying close to a route.

    The proximity test compares each candidate against every path vertex
    (O(POIs x vertices)). Both sides are small next to the graph itself.
    """

    def __init__(self, source: PoiSource, radius_m: float = DEFAULT_RADIUS_M) -> None:
        self.source = source
        self.radius_m = radius_m

    def nearby_by_category(
        self,
        path: Sequence[LatLon],
        categories: Collection[str],
        weights: Optional[Mapping[str, int]] = None,
    ) -> List[PoiRecord]:
        """
        POIs in `categories` strictly closer than `radius_m` to at least one
        path point, ordered by descending category weight (default 1).
        Equal weights keep the source order.
        """
        if not path or not categories:
            return []

        wanted = set(categories)
        near = [
            poi
            for poi in self.source.find_by_categories(wanted)
            if poi.category in wanted and self._is_near(poi, path)
        ]

        weights = weights or {}
        return sorted(near, key=lambda poi: weights.get(poi.category, DEFAULT_WEIGHT), reverse=True)

    def _is_near(self, poi: PoiRecord, path: Sequence[LatLon]) -> bool:
        return any(haversine_m(lat, lon, poi.lat, poi.lon) < self.radius_m for lat, lon in path)
