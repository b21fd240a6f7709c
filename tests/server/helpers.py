"""Helper sources and sentences for server tests."""

import queue
from collections.abc import Iterator

GGA = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47\r\n"
VTG = b"$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B\r\n"
GGA_BAD_CHECKSUM = GGA.replace(b"*47", b"*00")


class ControlledSource:
    """Byte source fed by the test through ``chunk_queue``.

    Putting ``None`` ends the stream, as does ``cancel()``.
    """

    def __init__(self) -> None:
        self.chunk_queue: queue.Queue[bytes | None] = queue.Queue()
        self.opened = 0

    def __enter__(self) -> "ControlledSource":
        self.opened += 1
        return self

    def __exit__(self, *_: object) -> None:
        pass

    def cancel(self) -> None:
        self.chunk_queue.put(None)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.chunk_queue.get()
            if chunk is None:
                break
            yield chunk
