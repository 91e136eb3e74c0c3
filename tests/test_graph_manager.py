# tests/test_graph_manager.py
import threading
import time

import pytest

from tourist_router.core.errors import DataSourceError
from tourist_router.routing.graph_cache import GraphCache
from tourist_router.services import graph_manager as graph_manager_module
from tourist_router.services.graph_manager import GraphManager


def test_graph_is_built_lazily(line_db):
    manager = GraphManager(line_db)
    assert not manager.is_loaded

    routing = manager.get()
    assert manager.is_loaded
    assert routing.graph.node_count == 4
    assert manager.get() is routing


def test_concurrent_first_use_builds_once(line_db, monkeypatch):
    calls = []
    original = GraphCache.from_path

    def slow_from_path(path):
        calls.append(path)
        time.sleep(0.05)
        return original(path)

    monkeypatch.setattr(graph_manager_module.GraphCache, "from_path", staticmethod(slow_from_path))

    manager = GraphManager(line_db)
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(manager.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_failed_build_is_not_cached(tmp_path):
    manager = GraphManager(str(tmp_path / "missing.db"))

    with pytest.raises(DataSourceError):
        manager.get()
    with pytest.raises(DataSourceError):
        manager.get()
    assert not manager.is_loaded


def test_settings_are_applied(line_db):
    manager = GraphManager(line_db, cell_size_deg=0.01, max_ring=2, max_expansions=5)
    routing = manager.get()

    assert routing.index.cell_size_deg == 0.01
    assert routing.index.max_ring == 2
    assert routing.path_finder.max_expansions == 5
