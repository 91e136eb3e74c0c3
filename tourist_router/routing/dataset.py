# tourist_router/routing/dataset.py
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Tuple

from tourist_router.core.errors import DataSourceError

NODES_QUERY = "SELECT id, lat, lon FROM nodes"
EDGES_QUERY = "SELECT from_node, to_node FROM edges"


class SqliteDataset:
    """
    Read-only view over a SQLite routing extract.

    Expected schema:
        nodes(id INTEGER, lat REAL, lon REAL)
        edges(from_node INTEGER, to_node INTEGER)

    Rows are yielded raw; validation is left to the graph loader so that a
    single malformed row never aborts a load.
    """

    def __init__(self, path: str) -> None:
        self.path = str(path)

    def __repr__(self) -> str:
        return f"SqliteDataset({self.path!r})"

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        db_file = Path(self.path)
        if not db_file.is_file():
            raise DataSourceError(self.path, "file does not exist")

        # mode=ro: never create an empty database by accident
        uri = f"{db_file.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as exc:
            raise DataSourceError(self.path, str(exc)) from exc

        try:
            yield conn
        finally:
            conn.close()

    def iter_nodes(self) -> Iterator[Tuple[Any, Any, Any]]:
        yield from self._iter_rows(NODES_QUERY)

    def iter_edges(self) -> Iterator[Tuple[Any, Any]]:
        yield from self._iter_rows(EDGES_QUERY)

    def _iter_rows(self, query: str) -> Iterator[Tuple[Any, ...]]:
        with self.connect() as conn:
            try:
                cursor = conn.execute(query)
                for row in cursor:
                    yield row
            except sqlite3.Error as exc:
                raise DataSourceError(self.path, f"{query!r} failed: {exc}") from exc
