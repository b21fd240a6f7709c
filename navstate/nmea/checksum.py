"""NMEA checksum validation.

NMEA 0183 sentences use a simple XOR checksum for data integrity verification.
The checksum is calculated over all characters between the start delimiter
('$', or '!' for encapsulated sentences) and '*' (exclusive), then represented
as a two-digit hexadecimal number after the '*'.

Example sentence structure:
    $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47
    ^                        checksum content                      ^^
    start                                                    checksum (0x47)
"""

from navstate.nmea.errors import ChecksumMismatch, MalformedFrame

__all__ = [
    "START_DELIMITERS",
    "compute_checksum",
    "frame_sentence",
    "validate_checksum",
    "verify_checksum",
]

START_DELIMITERS = ("$", "!")

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _extract_checksum_parts(sentence: str) -> tuple[str, str]:
    """Extract the payload content and provided checksum from an NMEA sentence.

    NMEA sentences follow the format: $<content>*<checksum>

    Args:
        sentence: Stripped NMEA sentence string (e.g., "$GPGGA,...*47")

    Returns:
        A tuple of (content, checksum_hex).

    Raises:
        MalformedFrame: If the start delimiter is missing, the sentence does
            not contain exactly one '*', or the checksum is not exactly two
            characters long (truncated sentence).

    Example:
        >>> _extract_checksum_parts("$GPGGA,123519*47")
        ('GPGGA,123519', '47')
    """
    if not sentence or sentence[0] not in START_DELIMITERS:
        raise MalformedFrame("sentence must start with '$' or '!'")

    if sentence.count("*") != 1:
        raise MalformedFrame("sentence must contain exactly one '*'")

    end = sentence.index("*")
    content = sentence[1:end]
    provided = sentence[end + 1 :]

    if len(provided) != 2:
        raise MalformedFrame(f"checksum must be two characters, got {provided!r}")

    return content, provided


def compute_checksum(content: str) -> int:
    """Calculate the XOR checksum of a content string.

    The NMEA checksum algorithm XORs the ASCII value of each character
    in the content. Any single-byte change in the content changes the
    result.

    Args:
        content: The string between '$' and '*' (exclusive)

    Returns:
        Integer checksum value (0-255)
    """
    result = 0
    for character in content:
        result ^= ord(character)
    return result


def verify_checksum(sentence: str) -> str:
    """Check the framing and checksum of a stripped sentence.

    Args:
        sentence: Complete NMEA sentence including delimiter, '*' and checksum,
            without surrounding whitespace.

    Returns:
        The checksummed content (between the start delimiter and '*').

    Raises:
        MalformedFrame: If the frame structure is invalid.
        ChecksumMismatch: If the checksum is not hexadecimal or does not
            match the content.
    """
    content, provided = _extract_checksum_parts(sentence)
    calculated = compute_checksum(content)

    # int(..., 16) would accept "+F" or " F"; only two real hex digits count.
    if not _HEX_DIGITS.issuperset(provided) or int(provided, 16) != calculated:
        raise ChecksumMismatch(provided, calculated)

    return content


def validate_checksum(sentence: str) -> bool:
    """Validate the checksum of an NMEA sentence.

    Args:
        sentence: Complete NMEA sentence including '$', '*', and checksum.
                  May include trailing whitespace/newlines (will be stripped).

    Returns:
        True if the checksum is valid, False if the sentence is malformed,
        the checksum is truncated or non-hexadecimal, or the calculated
        checksum doesn't match the provided one.

    Example:
        >>> validate_checksum("$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47")
        True
    """
    try:
        verify_checksum(sentence.strip())
    except (MalformedFrame, ChecksumMismatch):
        return False
    return True


def frame_sentence(content: str, start: str = "$") -> str:
    """Wrap content in a start delimiter and append its checksum.

    Example:
        >>> frame_sentence("GPGLL,4916.45,N,12311.12,W,225444,A")
        '$GPGLL,4916.45,N,12311.12,W,225444,A*31'
    """
    return f"{start}{content}*{compute_checksum(content):02X}"
