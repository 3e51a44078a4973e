"""
Fixed-size pool of worker threads fed from a shared FIFO queue.
"""
import logging
import queue
import threading
import traceback

from rfsee.common.errors import RfseeRuntimeError

logger = logging.getLogger(__name__)

_STOP = object()


class Worker:
    """A long-lived thread running jobs until it sees the stop marker."""
    def __init__(self, worker_id, jobs):
        self.worker_id = worker_id
        self.jobs = jobs
        self.thread = threading.Thread(
            target=self._run, name=f"rfsee-worker-{worker_id}"
        )
        self.thread.daemon = True
        self.thread.start()

    def _run(self):
        while True:
            job = self.jobs.get()
            try:
                if job is _STOP:
                    break
                func, args, kwargs = job
                try:
                    func(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Job failed on worker {self.worker_id}: {e}")
                    logger.error(traceback.format_exc())
                except BaseException as e:
                    # a dead worker would strand the jobs and stop marker it never takes
                    logger.critical(f"Job aborted on worker {self.worker_id}: {e!r}")
                    logger.critical(traceback.format_exc())
            finally:
                self.jobs.task_done()

    def join(self):
        self.thread.join()


class ThreadPool:
    """
    Runs submitted jobs on ``size`` worker threads.

    Jobs run in parallel with no ordering guarantee; each runs exactly
    once. A job raising anything, SystemExit included, is logged and the
    worker moves on.
    ``shutdown()`` (or leaving a ``with`` block) stops accepting work and
    blocks until every job already queued has completed.
    """
    def __init__(self, size):
        if size <= 0:
            raise ValueError("Thread pool size must be positive")
        self.size = size
        self._jobs = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self.workers = [Worker(worker_id, self._jobs) for worker_id in range(size)]
        logger.debug(f"Started thread pool with {size} workers")

    def execute(self, func, *args, **kwargs):
        """Queue ``func(*args, **kwargs)`` for execution."""
        with self._lock:
            if self._closed:
                raise RfseeRuntimeError("Thread pool is shut down")
            self._jobs.put((func, args, kwargs))

    def shutdown(self):
        """Stop accepting jobs and wait for queued work to drain."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            # stop markers queue behind all pending jobs
            for _ in self.workers:
                self._jobs.put(_STOP)

        for worker in self.workers:
            worker.join()
        logger.debug(f"Thread pool with {self.size} workers stopped")

    @property
    def closed(self):
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.shutdown()
        return False
