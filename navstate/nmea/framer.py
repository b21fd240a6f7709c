"""Line framer: turns arbitrary byte chunks into candidate sentence lines.

Chunks from a serial port or socket split sentences at arbitrary points. The
framer carries the unterminated tail of each chunk forward and emits a line
only once its '\\n' arrives, so the output does not depend on how the stream
was chunked.

Over-long candidates are dropped and reported once as ``FrameTooLong``; the
framer then discards bytes until the next delimiter and resumes. A noisy line
therefore costs at most one line, never the rest of the stream.
"""

from navstate.nmea.errors import FrameTooLong

__all__ = ["DEFAULT_MAX_LINE_LENGTH", "LineFramer"]

# NMEA 0183 allows 82 characters; proprietary sentences and NMEA 4.x
# extensions run longer in practice.
DEFAULT_MAX_LINE_LENGTH = 102

_DELIMITER = b"\n"
_CARRIAGE_RETURN = b"\r"


class LineFramer:
    """Incremental splitter of a byte stream into ``\\n``-terminated lines.

    Example:
        >>> framer = LineFramer()
        >>> framer.feed(b"$GPGGA,1235")
        []
        >>> framer.feed(b"19*47\\r\\n$GP")
        [b'$GPGGA,123519*47']

    Args:
        max_line_length: Longest accepted line, excluding the terminator.
    """

    def __init__(self, max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> None:
        if max_line_length < 1:
            raise ValueError("max_line_length must be positive")
        self._max_line_length = max_line_length
        self._buffer = bytearray()
        self._discarding = False

    @property
    def max_line_length(self) -> int:
        return self._max_line_length

    @property
    def pending(self) -> int:
        """Number of buffered bytes still waiting for a delimiter."""
        return len(self._buffer)

    def reset(self) -> None:
        """Discard any partial line, e.g. after a transport disconnect."""
        self._buffer.clear()
        self._discarding = False

    def _complete(self, segment: bytes) -> bytes | FrameTooLong | None:
        if self._discarding:
            # Tail of a line that was already reported as too long.
            self._discarding = False
            return None

        self._buffer += segment
        line = bytes(self._buffer)
        self._buffer.clear()

        if line.endswith(_CARRIAGE_RETURN):
            line = line[:-1]
        if len(line) > self._max_line_length:
            return FrameTooLong(len(line), self._max_line_length)
        if not line:
            return None
        return line

    def _hold(self, tail: bytes) -> FrameTooLong | None:
        if self._discarding:
            return None

        self._buffer += tail
        # One extra byte of slack: a trailing '\r' is not part of the line.
        if len(self._buffer) > self._max_line_length + 1:
            error = FrameTooLong(len(self._buffer), self._max_line_length)
            self._buffer.clear()
            self._discarding = True
            return error
        return None

    def feed(self, chunk: bytes) -> list[bytes | FrameTooLong]:
        """Consume a chunk and return the lines it completes.

        Args:
            chunk: Any number of bytes, possibly empty, possibly splitting
                a sentence or its terminator.

        Returns:
            Complete lines (without terminator) in stream order, with a
            ``FrameTooLong`` in place of each dropped over-long line.
        """
        results: list[bytes | FrameTooLong] = []
        *segments, tail = bytes(chunk).split(_DELIMITER)

        for segment in segments:
            item = self._complete(segment)
            if item is not None:
                results.append(item)

        error = self._hold(tail)
        if error is not None:
            results.append(error)

        return results
