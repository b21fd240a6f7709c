"""Sentence parser: one framed line in, one typed record out.

The parser performs, in order:
1. ASCII decoding and whitespace stripping (handles \\r\\n line endings)
2. Frame validation (start delimiter, single '*', two-character checksum)
3. Checksum validation
4. Tag resolution into talker ID and sentence kind
5. Positional field decoding through the per-kind decoder table

Sentence kinds without a decoder are returned as ``UnrecognizedSentence``
rather than rejected: receivers emit plenty of proprietary and less common
sentences, and those are not stream corruption.
"""

from collections.abc import Callable

from navstate.nmea.checksum import frame_sentence, verify_checksum
from navstate.nmea.errors import MalformedFrame, UnsupportedEncoding
from navstate.nmea.gga import decode_gga, encode_gga
from navstate.nmea.gll import decode_gll, encode_gll
from navstate.nmea.gsa import decode_gsa, encode_gsa
from navstate.nmea.gsv import decode_gsv, encode_gsv
from navstate.nmea.rmc import decode_rmc, encode_rmc
from navstate.nmea.txt import decode_txt, encode_txt
from navstate.nmea.types import (
    GGAData,
    GLLData,
    GSAData,
    GSVData,
    RMCData,
    SentenceKind,
    SentenceRecord,
    TXTData,
    UnrecognizedSentence,
    VTGData,
    ZDAData,
)
from navstate.nmea.vtg import decode_vtg, encode_vtg
from navstate.nmea.zda import decode_zda, encode_zda

__all__ = ["UNRECOGNIZED", "encode_sentence", "parse_sentence", "record_kind"]

UNRECOGNIZED = "UNRECOGNIZED"

_TALKER_LENGTH = 2
_PROPRIETARY_PREFIX = "P"

Decoder = Callable[[str, list[str]], SentenceRecord]

DECODERS: dict[SentenceKind, Decoder] = {
    SentenceKind.GGA: decode_gga,
    SentenceKind.RMC: decode_rmc,
    SentenceKind.VTG: decode_vtg,
    SentenceKind.GSA: decode_gsa,
    SentenceKind.GSV: decode_gsv,
    SentenceKind.GLL: decode_gll,
    SentenceKind.ZDA: decode_zda,
    SentenceKind.TXT: decode_txt,
}

ENCODERS: dict[type, Callable[..., list[str]]] = {
    GGAData: encode_gga,
    RMCData: encode_rmc,
    VTGData: encode_vtg,
    GSAData: encode_gsa,
    GSVData: encode_gsv,
    GLLData: encode_gll,
    ZDAData: encode_zda,
    TXTData: encode_txt,
}

_RECORD_KINDS: dict[type, SentenceKind] = {
    GGAData: SentenceKind.GGA,
    RMCData: SentenceKind.RMC,
    VTGData: SentenceKind.VTG,
    GSAData: SentenceKind.GSA,
    GSVData: SentenceKind.GSV,
    GLLData: SentenceKind.GLL,
    ZDAData: SentenceKind.ZDA,
    TXTData: SentenceKind.TXT,
}

_SENTENCE_TYPES = {kind.value: kind for kind in SentenceKind}


def _decode_text(line: bytes | str) -> str:
    if isinstance(line, bytes):
        try:
            line = line.decode("ascii")
        except UnicodeDecodeError as e:
            raise UnsupportedEncoding(
                f"non-ASCII byte at offset {e.start}"
            ) from None
    elif not line.isascii():
        raise UnsupportedEncoding("non-ASCII character in sentence")
    return line.strip()


def _resolve_tag(tag: str) -> SentenceKind | None:
    """Split an address field into talker and sentence type.

    Returns:
        The sentence kind, or None for proprietary or unsupported sentences.

    Raises:
        MalformedFrame: If the tag is empty or not made of uppercase
            letters and digits.

    Example:
        "GNGGA" -> talker="GN", sentence="GGA" -> SentenceKind.GGA
        "PUBX"  -> proprietary -> None
    """
    if len(tag) <= _TALKER_LENGTH or not tag.isalnum() or not tag.isupper():
        raise MalformedFrame(f"invalid sentence tag {tag!r}")

    if tag.startswith(_PROPRIETARY_PREFIX):
        return None

    return _SENTENCE_TYPES.get(tag[_TALKER_LENGTH:])


def parse_sentence(line: bytes | str) -> SentenceRecord:
    """Parse one framed NMEA line into a sentence record.

    Args:
        line: A single sentence, with or without its line terminator.

    Returns:
        The decoded record, or ``UnrecognizedSentence`` for a valid sentence
        of an unsupported kind.

    Raises:
        UnsupportedEncoding: If the line is not ASCII.
        MalformedFrame: If the delimiters or the tag are invalid.
        ChecksumMismatch: If the checksum does not match.
        FieldDecodeError: If a field is missing or malformed.

    Example:
        >>> record = parse_sentence(
        ...     b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47\\r\\n"
        ... )
        >>> record.fix_quality, record.num_satellites
        (1, 8)
    """
    sentence = _decode_text(line)
    content = verify_checksum(sentence)

    fields = content.split(",")
    tag = fields[0]
    kind = _resolve_tag(tag)
    if kind is None:
        return UnrecognizedSentence(
            tag=tag, fields=tuple(fields[1:]), start=sentence[0]
        )

    return DECODERS[kind](tag[:_TALKER_LENGTH], fields)


def encode_sentence(record: SentenceRecord) -> str:
    """Render a record as a checksummed sentence (without line terminator)."""
    if isinstance(record, UnrecognizedSentence):
        fields = [record.tag, *record.fields]
        return frame_sentence(",".join(fields), record.start)
    fields = ENCODERS[type(record)](record)
    return frame_sentence(",".join(fields))


def record_kind(record: SentenceRecord) -> str:
    """Return the counter key for a record, e.g. "GGA" or "UNRECOGNIZED"."""
    kind = _RECORD_KINDS.get(type(record))
    return UNRECOGNIZED if kind is None else kind.value
