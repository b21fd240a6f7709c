"""Ingest pipeline: byte chunks -> lines -> records -> published snapshots.

One pipeline is the only writer of its ``SnapshotStore``. It runs the framer,
parser and aggregator in sequence on the caller's thread; nothing in it blocks
except the byte source it is given.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable

from navstate.aggregator import apply_record
from navstate.nmea.errors import FrameTooLong, IngestError, UnrecognizedSentenceKind
from navstate.nmea.framer import DEFAULT_MAX_LINE_LENGTH, LineFramer
from navstate.nmea.parser import parse_sentence, record_kind
from navstate.nmea.types import SentenceRecord, UnrecognizedSentence
from navstate.snapshot import NavigationSnapshot
from navstate.store import SnapshotStore

__all__ = ["IngestPipeline"]

logger = logging.getLogger(__name__)


class IngestPipeline:
    """Drives framing, parsing and aggregation into a ``SnapshotStore``.

    Rejected lines are counted in the store and skipped; they are never
    retried. ``stop()`` takes effect between two lines, and whatever partial
    line is buffered at that point is discarded.

    Example::

        store = SnapshotStore()
        pipeline = IngestPipeline(store)
        with TCPSource("localhost", 10110) as source:
            pipeline.run(source)

    Args:
        store: Destination of snapshots and counters.
        max_line_length: Longest accepted sentence, excluding terminator.
        clock: Wall-clock time source used to stamp field groups.
    """

    def __init__(
        self,
        store: SnapshotStore,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._framer = LineFramer(max_line_length)
        self._clock = clock
        self._snapshot = store.read()
        self._stop_requested = threading.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    def stop(self) -> None:
        """Ask a running ``run()`` to return before the next line."""
        self._stop_requested.set()

    def reset(self, clear_state: bool = False) -> None:
        """Discard the partial line buffer, e.g. before reconnecting.

        Args:
            clear_state: Also replace the published snapshot with an empty one.
        """
        self._framer.reset()
        if clear_state:
            self._store.reset()
        self._snapshot = self._store.read()

    def _reject(self, error: IngestError, line: bytes | None = None) -> None:
        logger.debug("Rejected line %r: %s", line, error)
        self._store.record_error(error)

    def process_line(self, line: bytes) -> SentenceRecord | None:
        """Parse one framed line and fold it into the published snapshot.

        Returns:
            The decoded record, or None if the line was rejected.
        """
        self._store.record_line(line.decode("ascii", errors="replace"))
        try:
            record = parse_sentence(line)
        except IngestError as e:
            self._reject(e, line)
            return None

        if isinstance(record, UnrecognizedSentence):
            # Counted but never published.
            self._store.record_error(UnrecognizedSentenceKind(record.tag))
            self._store.record_accepted(record_kind(record))
            return record

        self._snapshot = apply_record(self._snapshot, record, self._clock())
        self._store.commit(self._snapshot, record_kind(record))
        return record

    def feed(self, chunk: bytes) -> int:
        """Process every line completed by ``chunk``.

        Returns:
            The number of lines handled, rejected ones included. Lines left
            when a stop is requested are dropped.
        """
        handled = 0
        for item in self._framer.feed(chunk):
            if self._stop_requested.is_set():
                break
            if isinstance(item, FrameTooLong):
                self._reject(item)
            else:
                self.process_line(item)
            handled += 1
        return handled

    def run(self, source: Iterable[bytes]) -> int:
        """Consume ``source`` until it ends or ``stop()`` is called.

        A source signals end-of-stream by finishing its iteration or by
        raising ``EOFError`` (as the bundled sources do when cancelled).
        Other errors, such as ``OSError`` from a failed read, propagate.

        Returns:
            The number of lines handled.
        """
        self._stop_requested.clear()
        handled = 0
        logger.info("Ingest started")
        try:
            for chunk in source:
                handled += self.feed(chunk)
                if self._stop_requested.is_set():
                    logger.info("Ingest stopped on request")
                    break
        except EOFError as e:
            logger.info("Byte source ended: %s", e)
        finally:
            self._framer.reset()
        return handled

    @property
    def snapshot(self) -> NavigationSnapshot:
        """The latest snapshot this pipeline published."""
        return self._snapshot
