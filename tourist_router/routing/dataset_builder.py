# tourist_router/routing/dataset_builder.py
import os
import sqlite3
from pathlib import Path
from time import perf_counter
from typing import Tuple

import networkx as nx
import osmnx as ox

from tourist_router.core.logger import logger

SCHEMA = (
    "CREATE TABLE nodes (id INTEGER PRIMARY KEY, lat REAL NOT NULL, lon REAL NOT NULL)",
    "CREATE TABLE edges (from_node INTEGER NOT NULL, to_node INTEGER NOT NULL)",
    "CREATE INDEX idx_edges_from ON edges (from_node)",
)


def write_graph(G: nx.MultiDiGraph, db_path: str) -> Tuple[int, int]:
    """
    Write an OSMnx-style graph (node attributes x=lon, y=lat) to a SQLite
    routing extract, replacing any existing file at `db_path`.

    Parallel edges collapse into one row; edge lengths are not stored since
    the loader recomputes them from coordinates. Returns (nodes, edges) written.
    """
    target = Path(db_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".tmp")
    if tmp.exists():
        tmp.unlink()

    node_rows = []
    num_missing = 0
    for node_id, data in G.nodes(data=True):
        x = data.get("x")
        y = data.get("y")
        if x is None or y is None:
            num_missing += 1
            continue
        node_rows.append((int(node_id), float(y), float(x)))

    # dict keeps first-seen order while dropping parallel edges
    edge_rows = list(dict.fromkeys((int(u), int(v)) for u, v in G.edges()))

    conn = sqlite3.connect(tmp)
    try:
        with conn:
            for statement in SCHEMA:
                conn.execute(statement)
            conn.executemany("INSERT INTO nodes (id, lat, lon) VALUES (?, ?, ?)", node_rows)
            conn.executemany("INSERT INTO edges (from_node, to_node) VALUES (?, ?)", edge_rows)
    finally:
        conn.close()
    os.replace(tmp, target)

    logger.info(
        f"Wrote {len(node_rows)} nodes and {len(edge_rows)} edges to {target} "
        f"({num_missing} nodes without coordinates skipped)"
    )
    return len(node_rows), len(edge_rows)


def build_from_place(place: str, db_path: str, network_type: str = "walk") -> Tuple[int, int]:
    """
    Download the OSM street network for `place` and store it as a routing extract.
    """
    t0 = perf_counter()
    logger.info(f"Downloading '{network_type}' network for {place!r} via OSMnx")
    G: nx.MultiDiGraph = ox.graph_from_place(place, network_type=network_type, simplify=True)
    logger.info(
        f"Downloaded {G.number_of_nodes()} nodes, {G.number_of_edges()} edges "
        f"in {(perf_counter() - t0):.1f} s"
    )
    return write_graph(G, db_path)
