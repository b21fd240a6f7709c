"""Live navigation state from NMEA 0183 byte streams."""

from navstate.aggregator import apply_record
from navstate.config import Settings
from navstate.nmea import (
    IngestError,
    LineFramer,
    encode_sentence,
    parse_sentence,
    validate_checksum,
)
from navstate.pipeline import IngestPipeline
from navstate.snapshot import FieldGroup, NavigationSnapshot
from navstate.sources import SerialSource, TCPSource, open_source
from navstate.store import HealthReport, SnapshotStore

__all__ = [
    "FieldGroup",
    "HealthReport",
    "IngestError",
    "IngestPipeline",
    "LineFramer",
    "NavigationSnapshot",
    "SerialSource",
    "Settings",
    "SnapshotStore",
    "TCPSource",
    "apply_record",
    "encode_sentence",
    "open_source",
    "parse_sentence",
    "validate_checksum",
]
