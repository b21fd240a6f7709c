"""NMEA 0183 framing, checksum validation and sentence decoding."""

from navstate.nmea.checksum import compute_checksum, validate_checksum
from navstate.nmea.errors import (
    ChecksumMismatch,
    FieldDecodeError,
    FrameTooLong,
    IngestError,
    MalformedFrame,
    UnrecognizedSentenceKind,
    UnsupportedEncoding,
)
from navstate.nmea.framer import LineFramer
from navstate.nmea.parser import encode_sentence, parse_sentence, record_kind
from navstate.nmea.types import (
    GGAData,
    GLLData,
    GSAData,
    GSVData,
    RMCData,
    SatelliteInfo,
    SentenceKind,
    SentenceRecord,
    TXTData,
    UnrecognizedSentence,
    VTGData,
    ZDAData,
)

__all__ = [
    "ChecksumMismatch",
    "FieldDecodeError",
    "FrameTooLong",
    "GGAData",
    "GLLData",
    "GSAData",
    "GSVData",
    "IngestError",
    "LineFramer",
    "MalformedFrame",
    "RMCData",
    "SatelliteInfo",
    "SentenceKind",
    "SentenceRecord",
    "TXTData",
    "UnrecognizedSentence",
    "UnrecognizedSentenceKind",
    "UnsupportedEncoding",
    "VTGData",
    "ZDAData",
    "compute_checksum",
    "encode_sentence",
    "parse_sentence",
    "record_kind",
    "validate_checksum",
]
