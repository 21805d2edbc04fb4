"""
=============================================================================
THREAD POOL
=============================================================================

Worker threads that run one connection handler invocation per accepted
connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept loop ──submit()──► [ task queue (bounded) ]                │
    │                                   │        │        │                │
    │                                Worker-0 Worker-1 ... Worker-N        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

- min_workers threads are started up front.
- When every worker is busy and work is queued, one more worker is added,
  up to max_workers.
- When the queue is full, submit() blocks. The accept loop slows down
  instead of turning clients away.
- An exception inside a task is logged; the worker keeps running.

The pool knows nothing about HTTP. Its only contract with the server is
"call this function once with these arguments".

=============================================================================
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """A deferred call: func(*args)."""

    func: Callable[..., Any]
    args: tuple = ()


class Worker(threading.Thread):
    """Pulls tasks from the shared queue until it receives None."""

    def __init__(self, task_queue: "queue.Queue[Optional[Task]]", worker_id: int):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id
        self.state = WorkerState.IDLE
        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            task = self.task_queue.get()
            try:
                if task is None:  # Poison pill
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            task.func(*task.args)
            self.tasks_completed += 1
            logger.debug(
                f"Worker {self.worker_id} completed task in {time.time() - start_time:.3f}s"
            )
        except Exception as e:
            self.tasks_failed += 1
            logger.exception(
                f"Worker {self.worker_id} task failed after {time.time() - start_time:.3f}s: {e}"
            )
        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Bounded, elastic pool of worker threads.

    Usage:
        pool = ThreadPool(min_workers=4, max_workers=16)
        pool.start()
        pool.submit(handler, conn)
        pool.shutdown(wait=True, timeout=30.0)
    """

    def __init__(self, min_workers: int = 4, max_workers: int = 16, queue_size: int = 100):
        """
        Args:
            min_workers: Threads started by start().
            max_workers: Upper bound when scaling up.
            queue_size: Tasks that may wait for a worker before submit() blocks.
        """
        self.min_workers = min_workers
        self.max_workers = max_workers
        self.queue_size = queue_size

        self._task_queue: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)
        self._workers: List[Worker] = []
        self._lock = threading.Lock()  # Protects _workers
        self._started = False
        self._shutdown = False
        self._next_worker_id = 0

    def start(self):
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")
        self._shutdown = False
        with self._lock:
            for _ in range(self.min_workers):
                self._add_worker()
        self._started = True

    def _add_worker(self) -> Worker:
        """Start one more worker. Caller must hold _lock."""
        worker = Worker(self._task_queue, self._next_worker_id)
        self._next_worker_id += 1
        self._workers.append(worker)
        worker.start()
        return worker

    def submit(self, func: Callable[..., Any], *args: Any) -> None:
        """
        Queue ``func(*args)`` for execution.

        Blocks while the queue is full.

        Raises:
            RuntimeError: The pool is not running.
        """
        if not self._started or self._shutdown:
            raise RuntimeError("Thread pool is not running")

        self._task_queue.put(Task(func=func, args=args))
        self._maybe_scale_up()

    def _maybe_scale_up(self):
        with self._lock:
            if len(self._workers) >= self.max_workers:
                return
            busy = sum(1 for w in self._workers if w.state == WorkerState.BUSY)
            if busy == len(self._workers) and self._task_queue.qsize() > 0:
                logger.debug(
                    f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers"
                )
                self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop the pool.

        Args:
            wait: Let queued tasks finish before stopping workers.
            timeout: Upper bound for that wait, in seconds.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if wait:
            deadline = time.time() + timeout if timeout else None
            while self._task_queue.unfinished_tasks:
                if deadline and time.time() > deadline:
                    logger.warning("Shutdown timeout, forcing stop")
                    break
                time.sleep(0.05)

        with self._lock:
            workers = list(self._workers)
            self._workers.clear()

        for _ in workers:
            try:
                self._task_queue.put(None, timeout=1.0)
            except queue.Full:
                pass  # Daemon workers die with the process

        for worker in workers:
            worker.join(timeout=2.0)

        self._started = False
        logger.info("Thread pool shutdown complete")

    @property
    def stats(self) -> dict:
        """Worker and task counts for debugging."""
        with self._lock:
            workers = list(self._workers)
        return {
            "workers": {
                "total": len(workers),
                "busy": sum(1 for w in workers if w.state == WorkerState.BUSY),
                "idle": sum(1 for w in workers if w.state == WorkerState.IDLE),
            },
            "tasks": {
                "queued": self._task_queue.qsize(),
                "completed": sum(w.tasks_completed for w in workers),
                "failed": sum(w.tasks_failed for w in workers),
            },
        }
