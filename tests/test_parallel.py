"""Tests for the per-workspace fan-out."""
import threading
import time

import pytest

from monopack.workspace.models import Workspace
from monopack.workspace.parallel import for_each_workspace


def _workspaces(*names):
    return {name: Workspace(name=name, location=f"packages/{name}") for name in names}


def test_sequential_keeps_order():
    calls = []

    results = for_each_workspace(_workspaces("c", "a", "b"),
                                 lambda ws: calls.append(ws.name) or ws.name.upper())

    assert calls == ["c", "a", "b"]
    assert list(results.items()) == [("c", "C"), ("a", "A"), ("b", "B")]


def test_sequential_stops_at_first_error():
    calls = []

    def fn(ws):
        calls.append(ws.name)
        if ws.name == "a":
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        for_each_workspace(_workspaces("a", "b"), fn, max_jobs=1)

    assert calls == ["a"]


def test_parallel_results_follow_input_order():
    delays = {"a": 0.05, "b": 0.0, "c": 0.02}

    def fn(ws):
        time.sleep(delays[ws.name])
        return ws.location

    results = for_each_workspace(_workspaces("a", "b", "c"), fn, max_jobs=3)

    assert list(results) == ["a", "b", "c"]
    assert results["a"] == "packages/a"


def test_parallel_uses_worker_threads():
    threads = set()
    barrier = threading.Barrier(2, timeout=5)

    def fn(ws):
        threads.add(threading.current_thread().name)
        barrier.wait()

    for_each_workspace(_workspaces("a", "b"), fn, max_jobs=2)

    assert len(threads) == 2


def test_parallel_error_raised_after_all_calls_finish():
    finished = []

    def fn(ws):
        if ws.name == "a":
            raise ValueError("bad workspace a")
        time.sleep(0.02)
        finished.append(ws.name)

    with pytest.raises(ValueError, match="bad workspace a"):
        for_each_workspace(_workspaces("a", "b", "c", "d"), fn, max_jobs=2)

    assert sorted(finished) == ["b", "c", "d"]


def test_empty_mapping():
    assert for_each_workspace({}, lambda ws: ws, max_jobs=4) == {}
