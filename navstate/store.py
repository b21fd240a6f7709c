"""Snapshot store: the single shared surface between ingestion and display.

The ingest pipeline is the only writer; any number of presentation-layer
readers poll it. Snapshots are immutable, so publishing is a reference swap
and reading hands out the current reference. The lock only guards that swap
and the counters, so neither side can hold up the other for longer than a
few assignments.
"""

import threading
from collections import Counter, deque
from collections.abc import Mapping
from dataclasses import dataclass, field

from navstate.nmea.errors import IngestError
from navstate.snapshot import NavigationSnapshot, frozen_mapping

__all__ = ["HealthReport", "SnapshotStore"]

DEFAULT_RECENT_LINES = 100


@dataclass(frozen=True)
class HealthReport:
    """Cumulative ingest counters at one point in time.

    Attributes:
        accepted_count: Sentences that passed framing and checksum validation
            and decoded cleanly (unrecognized kinds included).
        error_counts: Rejections per ``IngestError.kind``. The informational
            ``UnrecognizedSentenceKind`` is counted here as well.
        accepted_by_kind: Accepted sentences per sentence kind.
        version: Number of snapshots published so far.
    """

    accepted_count: int = 0
    error_counts: Mapping[str, int] = field(default_factory=frozen_mapping)
    accepted_by_kind: Mapping[str, int] = field(default_factory=frozen_mapping)
    version: int = 0

    @property
    def error_total(self) -> int:
        return sum(self.error_counts.values())


class SnapshotStore:
    """Holds the current ``NavigationSnapshot`` and the health counters.

    Pass one instance to both the ingest pipeline and the presentation layer.

    Args:
        recent_lines: How many raw sentences to keep for display.
    """

    def __init__(self, recent_lines: int = DEFAULT_RECENT_LINES) -> None:
        self._condition = threading.Condition()
        self._snapshot = NavigationSnapshot()
        self._version = 0
        self._accepted = 0
        self._accepted_by_kind: Counter[str] = Counter()
        self._errors: Counter[str] = Counter()
        self._recent_lines: deque[str] = deque(maxlen=recent_lines)

    # --- writer side ----------------------------------------------------------

    def publish(self, snapshot: NavigationSnapshot) -> int:
        """Replace the current snapshot and wake any waiting readers.

        Returns:
            The new version number.
        """
        with self._condition:
            self._snapshot = snapshot
            self._version += 1
            self._condition.notify_all()
            return self._version

    def commit(self, snapshot: NavigationSnapshot, kind: str) -> int:
        """Count an accepted sentence and publish its snapshot in one step."""
        # The condition's lock is reentrant; publish() runs inside this section.
        with self._condition:
            self._accepted += 1
            self._accepted_by_kind[kind] += 1
            return self.publish(snapshot)

    def record_accepted(self, kind: str) -> None:
        with self._condition:
            self._accepted += 1
            self._accepted_by_kind[kind] += 1

    def record_error(self, error: IngestError) -> None:
        with self._condition:
            self._errors[error.kind] += 1

    def record_line(self, line: str) -> None:
        with self._condition:
            self._recent_lines.append(line)

    def reset(self) -> None:
        """Return to an empty snapshot; counters and recent lines are kept.

        The version still advances so waiting readers see the change.
        """
        self.publish(NavigationSnapshot())

    # --- reader side ----------------------------------------------------------

    def read(self) -> NavigationSnapshot:
        """Return the current snapshot (immutable, safe to keep)."""
        with self._condition:
            return self._snapshot

    current_snapshot = read

    def read_versioned(self) -> tuple[int, NavigationSnapshot]:
        with self._condition:
            return self._version, self._snapshot

    @property
    def version(self) -> int:
        with self._condition:
            return self._version

    def health(self) -> HealthReport:
        with self._condition:
            return HealthReport(
                accepted_count=self._accepted,
                error_counts=frozen_mapping(self._errors),
                accepted_by_kind=frozen_mapping(self._accepted_by_kind),
                version=self._version,
            )

    def recent_lines(self) -> tuple[str, ...]:
        """Most recent raw sentences, oldest first."""
        with self._condition:
            return tuple(self._recent_lines)

    def wait_for_update(
        self, last_version: int, timeout: float
    ) -> tuple[int, NavigationSnapshot] | None:
        """Block until a snapshot newer than ``last_version`` is published.

        Args:
            last_version: The version the caller already has.
            timeout: Maximum seconds to wait.

        Returns:
            ``(version, snapshot)``, or None if nothing new arrived in time.
        """
        with self._condition:
            if not self._condition.wait_for(
                lambda: self._version != last_version, timeout
            ):
                return None
            return self._version, self._snapshot
