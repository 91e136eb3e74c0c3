# tests/conftest.py
import math
import os
import sqlite3
import sys

import pytest

# Add the project root directory to sys.path so that "import tourist_router" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tourist_router.routing.geo import EARTH_RADIUS_M  # noqa: E402
from tourist_router.routing.graph_cache import GraphCache  # noqa: E402

# Latitude step that is exactly 100 m along a meridian
STEP_100M = math.degrees(100.0 / EARTH_RADIUS_M)

# A - B - C - D on a meridian near the equator, 100 m apart, two-way edges
LINE_NODES = [
    (1, 0.0, 0.0),
    (2, STEP_100M, 0.0),
    (3, 2 * STEP_100M, 0.0),
    (4, 3 * STEP_100M, 0.0),
]
LINE_EDGES = [(1, 2), (2, 1), (2, 3), (3, 2), (3, 4), (4, 3)]

# {A, B} and {C, D} with no edge between them, ~1.1 km apart
DISJOINT_NODES = [
    (1, 0.0, 0.0),
    (2, STEP_100M, 0.0),
    (3, 0.0, 0.01),
    (4, STEP_100M, 0.01),
]
DISJOINT_EDGES = [(1, 2), (2, 1), (3, 4), (4, 3)]


def write_dataset(path, nodes, edges) -> str:
    conn = sqlite3.connect(path)
    try:
        with conn:
            conn.execute("CREATE TABLE nodes (id INTEGER, lat REAL, lon REAL)")
            conn.execute("CREATE TABLE edges (from_node INTEGER, to_node INTEGER)")
            conn.executemany("INSERT INTO nodes VALUES (?, ?, ?)", nodes)
            conn.executemany("INSERT INTO edges VALUES (?, ?)", edges)
    finally:
        conn.close()
    return str(path)


@pytest.fixture
def make_dataset(tmp_path):
    counter = {"n": 0}

    def _make(nodes, edges) -> str:
        counter["n"] += 1
        return write_dataset(tmp_path / f"graph_{counter['n']}.db", nodes, edges)

    return _make


@pytest.fixture
def line_db(make_dataset) -> str:
    return make_dataset(LINE_NODES, LINE_EDGES)


@pytest.fixture
def line_graph() -> GraphCache:
    return GraphCache.from_records(LINE_NODES, LINE_EDGES, source="line")


@pytest.fixture
def disjoint_graph() -> GraphCache:
    return GraphCache.from_records(DISJOINT_NODES, DISJOINT_EDGES, source="disjoint")
