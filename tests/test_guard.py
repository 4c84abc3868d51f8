import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from monitoring_demo.core.errors import BackendBusyError
from monitoring_demo.services.guard import RunGuard


def test_acquire_and_release():
    guard = RunGuard()

    assert guard.try_acquire("mysql") is True
    assert guard.is_busy("mysql") is True
    assert guard.busy() == ["mysql"]

    guard.release("mysql")

    assert guard.is_busy("mysql") is False
    assert guard.busy() == []


def test_second_acquire_is_rejected():
    guard = RunGuard()
    guard.acquire("mysql")

    with pytest.raises(BackendBusyError) as exc_info:
        guard.acquire("mysql")

    assert "mysql" in str(exc_info.value)
    assert "busy" in str(exc_info.value)
    # The in-flight run keeps its entry
    assert guard.is_busy("mysql") is True


def test_backends_are_independent():
    guard = RunGuard()
    guard.acquire("mysql")

    with pytest.raises(BackendBusyError):
        guard.acquire("mysql")

    assert guard.try_acquire("redis") is True
    assert guard.busy() == ["mysql", "redis"]


def test_release_of_idle_backend_is_noop():
    guard = RunGuard()
    guard.release("mongodb")
    assert guard.busy() == []


def test_only_one_concurrent_acquire_wins():
    guard = RunGuard()
    barrier = threading.Barrier(16)

    def attempt(_):
        barrier.wait()
        return guard.try_acquire("cassandra")

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(attempt, range(16)))

    assert results.count(True) == 1
    assert guard.busy() == ["cassandra"]
