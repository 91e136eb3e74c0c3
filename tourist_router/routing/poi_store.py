# tourist_router/routing/poi_store.py
import sqlite3
from pathlib import Path
from typing import Collection, Iterable, List

from tourist_router.core.errors import DataSourceError
from tourist_router.core.logger import logger
from tourist_router.routing.types import PoiRecord


class StaticPoiSource:
    """
    POI source over a fixed in-memory list, kept in insertion order.
    """

    def __init__(self, records: Iterable[PoiRecord] = ()) -> None:
        self._records = list(records)

    def find_by_categories(self, categories: Collection[str]) -> List[PoiRecord]:
        wanted = set(categories)
        return [poi for poi in self._records if poi.category in wanted]


class SqlitePoiStore:
    """
    POI source backed by a SQLite `pois(id, name, category, lat, lon)` table.

    Rows come back in table order; rows with unusable coordinates are skipped.
    """

    def __init__(self, path: str) -> None:
        self.path = str(path)

    def find_by_categories(self, categories: Collection[str]) -> List[PoiRecord]:
        wanted = sorted(set(categories))
        if not wanted:
            return []

        db_file = Path(self.path)
        if not db_file.is_file():
            raise DataSourceError(self.path, "file does not exist")

        placeholders = ",".join("?" for _ in wanted)
        sql = (
            "SELECT id, name, category, lat, lon FROM pois "
            f"WHERE category IN ({placeholders}) ORDER BY rowid"
        )

        records: List[PoiRecord] = []
        skipped = 0
        try:
            conn = sqlite3.connect(f"{db_file.resolve().as_uri()}?mode=ro", uri=True)
            try:
                for poi_id, name, category, lat, lon in conn.execute(sql, wanted):
                    try:
                        records.append(
                            PoiRecord(
                                id=int(poi_id),
                                name=str(name or ""),
                                category=str(category),
                                lat=float(lat),
                                lon=float(lon),
                            )
                        )
                    except (TypeError, ValueError):
                        skipped += 1
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise DataSourceError(self.path, f"POI query failed: {exc}") from exc

        logger.debug(f"Fetched {len(records)} POIs for {wanted} ({skipped} malformed rows skipped)")
        return records
