"""Runtime settings, read from the environment.

    NMEACLI_ADDR              host:port of an NMEA-over-TCP feed
    NAVSTATE_SERIAL_PORT      serial device; takes precedence over TCP when set
    NAVSTATE_BAUDRATE         serial baud rate
    NAVSTATE_MAX_LINE_LENGTH  longest accepted sentence
    NAVSTATE_RECENT_LINES     raw sentences kept for display
    NAVSTATE_RECONNECT_DELAY  seconds to wait before reopening a failed source
    NAVSTATE_LOG_LEVEL        logging level name
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from navstate.nmea.framer import DEFAULT_MAX_LINE_LENGTH
from navstate.store import DEFAULT_RECENT_LINES

__all__ = ["Settings", "parse_address"]

# IANA-registered port for NMEA 0183 over TCP.
_DEFAULT_HOST = "localhost"
_DEFAULT_PORT = 10110
_DEFAULT_BAUDRATE = 9600
_DEFAULT_RECONNECT_DELAY = 2.0


def parse_address(value: str) -> tuple[str, int]:
    """Split "host:port" into its parts.

    Raises:
        ValueError: If the port is missing or not a valid TCP port.
    """
    host, separator, port_text = value.rpartition(":")
    if not separator or not host or not port_text.isdigit():
        raise ValueError(f"expected host:port, got {value!r}")
    port = int(port_text)
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in {value!r}")
    return host, port


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    serial_port: str | None = None
    baudrate: int = _DEFAULT_BAUDRATE
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    recent_lines: int = DEFAULT_RECENT_LINES
    reconnect_delay: float = _DEFAULT_RECONNECT_DELAY
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables, falling back to defaults.

        Raises:
            ValueError: If a variable is set to an invalid value.
        """
        if environ is None:
            environ = os.environ

        host, port = _DEFAULT_HOST, _DEFAULT_PORT
        address = environ.get("NMEACLI_ADDR")
        if address:
            host, port = parse_address(address)

        log_level = environ.get("NAVSTATE_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"unknown log level {log_level!r}")

        raw_delay = environ.get("NAVSTATE_RECONNECT_DELAY")
        try:
            reconnect_delay = (
                float(raw_delay) if raw_delay is not None else _DEFAULT_RECONNECT_DELAY
            )
        except ValueError:
            raise ValueError(
                f"NAVSTATE_RECONNECT_DELAY must be a number, got {raw_delay!r}"
            ) from None
        if reconnect_delay < 0:
            raise ValueError("NAVSTATE_RECONNECT_DELAY must not be negative")

        return cls(
            host=host,
            port=port,
            serial_port=environ.get("NAVSTATE_SERIAL_PORT") or None,
            baudrate=_positive_int(environ, "NAVSTATE_BAUDRATE", _DEFAULT_BAUDRATE),
            max_line_length=_positive_int(
                environ, "NAVSTATE_MAX_LINE_LENGTH", DEFAULT_MAX_LINE_LENGTH
            ),
            recent_lines=_positive_int(
                environ, "NAVSTATE_RECENT_LINES", DEFAULT_RECENT_LINES
            ),
            reconnect_delay=reconnect_delay,
            log_level=log_level,
        )
