"""
Progress and resource monitoring for index builds.
Tracks fetch progress across workers and reports process resource usage.
"""
import logging
import threading
import time
from typing import Any, Dict

import psutil

from rfsee.common.config import MEMORY_WARNING_PERCENT
from rfsee.common.utils import get_memory_usage

logger = logging.getLogger(__name__)


class ProgressMonitor:
    """Counts completed records during a crawl."""
    def __init__(self, total: int):
        self.total = total
        self.succeeded = 0
        self.failed = 0
        self.start_time = time.time()
        self.lock = threading.Lock()

    def record_success(self):
        with self.lock:
            self.succeeded += 1

    def record_failure(self):
        with self.lock:
            self.failed += 1

    @property
    def completed(self) -> int:
        return self.succeeded + self.failed

    @property
    def remaining(self) -> int:
        return self.total - self.completed

    @property
    def elapsed(self) -> float:
        return time.time() - self.start_time

    @property
    def rate(self) -> float:
        """Records completed per second."""
        elapsed = self.elapsed
        return self.completed / elapsed if elapsed > 0 else 0.0

    @property
    def percent_complete(self) -> float:
        if self.total == 0:
            return 100.0
        return self.completed * 100.0 / self.total

    def snapshot(self) -> Dict[str, Any]:
        with self.lock:
            return {
                'total': self.total,
                'completed': self.completed,
                'succeeded': self.succeeded,
                'failed': self.failed,
                'remaining': self.remaining,
                'elapsed': self.elapsed,
                'rate': self.rate,
            }

    def format_report(self) -> str:
        stats = self.snapshot()
        return (
            f"Fetched {stats['completed']}/{stats['total']} RFCs "
            f"({self.percent_complete:.1f}%, {stats['failed']} failed, "
            f"{stats['rate']:.1f}/sec, memory {get_memory_usage():.0f} MB)"
        )


class ResourceMonitor:
    """Monitor system resources."""
    def __init__(self, memory_threshold=MEMORY_WARNING_PERCENT):
        self.memory_threshold = memory_threshold

    def check_resources(self) -> Dict[str, Any]:
        """Check system resources and return metrics."""
        return {
            'cpu': psutil.cpu_percent(),
            'memory': psutil.virtual_memory().percent,
            'process_memory_mb': get_memory_usage(),
        }

    def is_memory_usage_high(self) -> bool:
        metrics = self.check_resources()
        if metrics['memory'] > self.memory_threshold:
            logger.warning(f"High memory usage: {metrics['memory']}%")
            return True
        return False
