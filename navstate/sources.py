"""Byte sources: serial ports and TCP sockets as iterables of chunks.

The ingest pipeline only needs an iterable of ``bytes``. The sources here wrap
the two transports a receiver is usually reached through and share one
contract:

* Use as a context manager; the transport is opened in ``__enter__``.
* Iterating yields raw chunks as they arrive, with no framing of its own.
* ``EOFError`` is raised when the stream ends or ``cancel()`` is called.
* ``cancel()`` may be called from another thread and unblocks a pending read.
"""

import contextlib
import logging
import socket
from collections.abc import Iterator
from types import TracebackType

import serial

from navstate.config import Settings

__all__ = ["SerialSource", "TCPSource", "open_source"]

logger = logging.getLogger(__name__)

_TIMEOUT = 2.0  # read timeout; determines maximum cancel() latency
_CHUNK_SIZE = 4096


class TCPSource:
    """Context manager reading an NMEA-over-TCP stream.

    Args:
        host: Server host name or address.
        port: Server TCP port.
        timeout: Socket read timeout in seconds.
    """

    def __init__(self, host: str, port: int, timeout: float = _TIMEOUT) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: socket.socket | None = None
        self._cancelled: bool = False

    def __enter__(self) -> "TCPSource":
        """Open the connection and reset the cancellation flag."""
        self._sock = socket.create_connection((self._host, self._port))
        self._sock.settimeout(self._timeout)
        self._cancelled = False
        logger.info("Connected to %s:%d", self._host, self._port)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the connection."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
            logger.info("Connection to %s:%d closed", self._host, self._port)

    def cancel(self) -> None:
        """Cancel pending blocking reads gracefully.

        Sets the cancellation flag and shuts down the socket so that any
        in-progress ``recv()`` returns immediately and ``read()`` raises
        ``EOFError``.
        """
        self._cancelled = True
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.shutdown(socket.SHUT_RDWR)

    def _recv_raw(self, sock: socket.socket) -> bytes | None:
        """Read one chunk; returns ``None`` on timeout retry.

        Raises:
            EOFError: If the stream ended or the connection was closed.
        """
        try:
            data = sock.recv(_CHUNK_SIZE)
        except TimeoutError:
            return None
        except OSError as e:
            raise EOFError("connection closed.") from e
        if not data:
            raise EOFError("stream ended.")
        return data

    def read(self) -> bytes:
        """Block until the next chunk arrives.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If cancelled, or the stream ended or was closed.
        """
        if self._sock is None:
            raise RuntimeError("TCPSource must be used as a context manager.")
        while True:
            if self._cancelled:
                raise EOFError("read cancelled.")
            data = self._recv_raw(self._sock)
            if data is not None:
                return data

    def __iter__(self) -> Iterator[bytes]:
        """Yield chunks until ``EOFError`` propagates out."""
        while True:
            yield self.read()


class SerialSource:
    """Context manager reading from a serial device.

    Args:
        port: Device path, e.g. ``"/dev/ttyUSB0"``.
        baudrate: Line speed; most receivers default to 9600.
        timeout: Read timeout in seconds.
    """

    def __init__(
        self, port: str, baudrate: int = 9600, timeout: float = _TIMEOUT
    ) -> None:
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._serial: serial.Serial | None = None
        self._cancelled: bool = False

    def __enter__(self) -> "SerialSource":
        """Open the port.

        Raises:
            OSError: If the device cannot be opened (``SerialException`` is
                a subclass).
        """
        self._serial = serial.Serial(
            self._port, baudrate=self._baudrate, timeout=self._timeout
        )
        self._cancelled = False
        logger.info("Opened serial port %s at %d baud", self._port, self._baudrate)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._serial is not None:
            self._serial.close()
            self._serial = None
            logger.info("Serial port %s closed", self._port)

    def cancel(self) -> None:
        """Set the cancellation flag and interrupt a blocking ``read()``."""
        self._cancelled = True
        if self._serial is not None:
            with contextlib.suppress(OSError):
                self._serial.cancel_read()

    def read(self) -> bytes:
        """Block until bytes are available.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If cancelled or the device went away.
        """
        if self._serial is None:
            raise RuntimeError("SerialSource must be used as a context manager.")
        while True:
            if self._cancelled:
                raise EOFError("read cancelled.")
            try:
                data = self._serial.read(self._serial.in_waiting or 1)
            except serial.SerialException as e:
                raise EOFError("serial device closed.") from e
            if data:
                return data

    def __iter__(self) -> Iterator[bytes]:
        while True:
            yield self.read()


def open_source(settings: Settings) -> TCPSource | SerialSource:
    """Pick the transport configured in ``settings`` (serial wins over TCP)."""
    if settings.serial_port:
        return SerialSource(settings.serial_port, settings.baudrate)
    return TCPSource(settings.host, settings.port)
