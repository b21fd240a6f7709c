"""Background ingest loop with reconnection."""

import logging
import threading
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any

from navstate import IngestPipeline

__all__ = ["IngestWorker"]

logger = logging.getLogger(__name__)

SourceFactory = Callable[[], AbstractContextManager[Any]]


class IngestWorker:
    """Keeps a pipeline fed from a freshly opened source until stopped.

    Every time the source ends or fails, the pipeline's partial line is
    discarded and the source is reopened after ``reconnect_delay`` seconds.
    The snapshot itself survives reconnects: its field-group ages show how
    long the feed was gone.

    Args:
        pipeline: The pipeline that owns the store.
        source_factory: Returns an unopened source (a context manager whose
            ``__enter__`` returns an iterable of byte chunks with ``cancel()``).
        reconnect_delay: Seconds to wait between attempts.
    """

    def __init__(
        self,
        pipeline: IngestPipeline,
        source_factory: SourceFactory,
        reconnect_delay: float,
    ) -> None:
        self._pipeline = pipeline
        self._source_factory = source_factory
        self._reconnect_delay = reconnect_delay
        self._stopping = threading.Event()
        self._lock = threading.Lock()
        self._source: Any = None

    @property
    def stopping(self) -> bool:
        return self._stopping.is_set()

    def _run_once(self) -> None:
        with self._source_factory() as source:
            with self._lock:
                if self._stopping.is_set():
                    return
                self._source = source
            try:
                self._pipeline.run(source)
            finally:
                with self._lock:
                    self._source = None

    def run(self) -> None:
        """Ingest until ``stop()`` is called. Meant for a worker thread."""
        while not self._stopping.is_set():
            try:
                self._run_once()
            except OSError as e:
                logger.error("Byte source failed: %s", e)
            self._pipeline.reset()
            if not self._stopping.is_set():
                logger.info("Reconnecting in %.1f s", self._reconnect_delay)
            self._stopping.wait(self._reconnect_delay)
        logger.info("Ingest worker stopped")

    def stop(self) -> None:
        """Stop the loop and unblock a read in progress."""
        self._stopping.set()
        self._pipeline.stop()
        with self._lock:
            if self._source is not None:
                self._source.cancel()
