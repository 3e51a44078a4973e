"""
Master Node for the RFC search index.
Drives the crawl: fetches the RFC index, distributes one fetch task per
RFC to the worker pool, collects the results and feeds them to the
indexer.
"""
import logging
import queue
import time

from rfsee.common.config import PROGRESS_INTERVAL, WORKER_COUNT
from rfsee.common.errors import RfseeError, RfseeRuntimeError
from rfsee.crawler.fetcher import fetch_rfc, fetch_rfc_index
from rfsee.crawler.rfc_index import parse_rfc_index
from rfsee.crawler.thread_pool import ThreadPool
from rfsee.indexer.indexer_node import TfIdfIndex
from rfsee.monitoring.monitoring import ProgressMonitor, ResourceMonitor

logger = logging.getLogger(__name__)


class MasterNode:
    def __init__(self, worker_count=WORKER_COUNT, progress_interval=PROGRESS_INTERVAL):
        if worker_count <= 0:
            raise ValueError("worker_count must be positive")
        self.worker_count = worker_count
        self.progress_interval = progress_interval
        self.resource_monitor = ResourceMonitor()
        self.monitor = None

    def _fetch_raw_rfcs(self):
        """Fetch and split the RFC index. Failures here abort the crawl."""
        raw_index = fetch_rfc_index()
        raw_rfcs = parse_rfc_index(raw_index)
        logger.info(f"RFC index lists {len(raw_rfcs)} records")
        return raw_rfcs

    @staticmethod
    def _fetch_task(raw_rfc, results):
        """Worker job: fetch one RFC and publish exactly one outcome."""
        outcome = (raw_rfc, None, RfseeRuntimeError("Fetch was interrupted"))
        try:
            outcome = (raw_rfc, fetch_rfc(raw_rfc), None)
        except RfseeError as e:
            outcome = (raw_rfc, None, e)
        except Exception as e:
            outcome = (raw_rfc, None, RfseeRuntimeError(f"Unexpected fetch failure: {e!r}"))
            raise
        finally:
            # the driver waits for one outcome per record
            results.put(outcome)

    def _record_outcome(self, raw_rfc, entry, error, builder, progress_callback):
        if entry is not None:
            self.monitor.record_success()
            builder.add_rfc_entry(entry)
            message = f"Fetched RFC {entry.number}: {entry.title}"
        else:
            self.monitor.record_failure()
            label = raw_rfc.split(' ', 1)[0] or '<empty record>'
            logger.warning(f"Skipping RFC record {label}: {error}")
            message = f"Skipped RFC record {label}: {error}"

        if progress_callback is not None:
            progress_callback(message)

    def load_rfcs(self, builder, progress_callback=None):
        """
        Fetch every RFC listed in the index in parallel and add the
        successfully fetched ones to ``builder``.

        One outcome is published per record on a completion queue, so
        the driver knows the crawl is over once it has consumed as many
        outcomes as there are records. Records whose fetch fails are
        dropped.
        """
        raw_rfcs = self._fetch_raw_rfcs()
        self.monitor = ProgressMonitor(len(raw_rfcs))
        results = queue.Queue()

        logger.info(f"Starting crawl with {self.worker_count} workers")
        with ThreadPool(self.worker_count) as pool:
            for raw_rfc in raw_rfcs:
                pool.execute(self._fetch_task, raw_rfc, results)

            last_report = time.time()
            while self.monitor.remaining > 0:
                try:
                    raw_rfc, entry, error = results.get(timeout=self.progress_interval)
                except queue.Empty:
                    pass
                else:
                    self._record_outcome(raw_rfc, entry, error, builder, progress_callback)

                if time.time() - last_report >= self.progress_interval:
                    logger.info(self.monitor.format_report())
                    self.resource_monitor.is_memory_usage_high()
                    last_report = time.time()

        logger.info(f"Crawl complete: {self.monitor.format_report()}")
        return self.monitor.succeeded

    def load_rfcs_sequential(self, builder, progress_callback=None):
        """Same as ``load_rfcs`` but fetches one RFC at a time on this thread."""
        raw_rfcs = self._fetch_raw_rfcs()
        self.monitor = ProgressMonitor(len(raw_rfcs))

        for raw_rfc in raw_rfcs:
            try:
                entry, error = fetch_rfc(raw_rfc), None
            except RfseeError as e:
                entry, error = None, e
            self._record_outcome(raw_rfc, entry, error, builder, progress_callback)

        logger.info(f"Crawl complete: {self.monitor.format_report()}")
        return self.monitor.succeeded

    def build_index(self, path, progress_callback=None, finish_callback=None, parallel=True):
        """Crawl all RFCs, compute the term scores and save the index to ``path``."""
        builder = TfIdfIndex()
        if parallel:
            self.load_rfcs(builder, progress_callback)
        else:
            self.load_rfcs_sequential(builder, progress_callback)

        index = builder.finish(finish_callback)
        builder.save(path)
        return index

    def get_crawl_stats(self):
        """Statistics of the last crawl, or None before any crawl."""
        if self.monitor is None:
            return None
        return self.monitor.snapshot()
