"""
Unit tests for the worker thread pool.
"""

import threading

import pytest

from fileserver.core import ThreadPool


@pytest.fixture
def pool():
    pool = ThreadPool(min_workers=2, max_workers=4, queue_size=10)
    pool.start()
    yield pool
    pool.shutdown(wait=True, timeout=5.0)


def test_runs_submitted_tasks(pool):
    results = []
    lock = threading.Lock()

    def work(n):
        with lock:
            results.append(n)

    for i in range(20):
        pool.submit(work, i)
    pool.shutdown(wait=True, timeout=5.0)

    assert sorted(results) == list(range(20))


def test_failing_task_does_not_kill_worker(pool):
    done = threading.Event()

    def boom():
        raise ValueError("boom")

    pool.submit(boom)
    pool.submit(done.set)

    assert done.wait(timeout=5.0)
    assert pool.stats["workers"]["total"] >= 2


def test_never_exceeds_max_workers(pool):
    release = threading.Event()

    def block():
        release.wait(timeout=5.0)

    for _ in range(6):
        pool.submit(block)

    try:
        assert pool.stats["workers"]["total"] <= 4
    finally:
        release.set()


def test_submit_requires_start():
    pool = ThreadPool(min_workers=1, max_workers=1)

    with pytest.raises(RuntimeError):
        pool.submit(print)


def test_submit_after_shutdown_fails():
    pool = ThreadPool(min_workers=1, max_workers=1)
    pool.start()
    pool.shutdown()

    with pytest.raises(RuntimeError):
        pool.submit(print)
