"""NMEA field parsing and formatting utilities.

NMEA fields are comma-separated and may be empty (consecutive commas indicate
missing data). Empty fields decode to None so callers can distinguish "no data"
from "zero value". A non-empty field that cannot be decoded is corruption the
checksum did not catch, or a device bug; it raises ``FieldDecodeError`` naming
the field's position (the sentence tag is field 0).

The ``format_*`` helpers are the inverse operations used to render records
back into sentences.
"""

import datetime
import re

from navstate.nmea.errors import FieldDecodeError

# Talker IDs that identify a satellite constellation.
#   GP = GPS (USA)
#   GN = Multi-GNSS (combined solution)
#   GL = GLONASS (Russia)
#   GA = Galileo (Europe)
#   GB / BD = BeiDou (China)
#   GQ = QZSS (Japan)
CONSTELLATIONS = {
    "GP": "GPS",
    "GN": "GNSS",
    "GL": "GLONASS",
    "GA": "Galileo",
    "GB": "BeiDou",
    "BD": "BeiDou",
    "GQ": "QZSS",
}

# Two-digit years above this are 19xx, the rest 20xx.
_CENTURY_THRESHOLD = 80

_TIME_PATTERN = re.compile(r"^(\d{2})(\d{2})(\d{2})(?:\.(\d{1,6}))?$")
_DATE_PATTERN = re.compile(r"^(\d{2})(\d{2})(\d{2})$")
_COORDINATE_PATTERN = re.compile(r"^(\d+)(\d{2}(?:\.\d+)?)$")
_INT_PATTERN = re.compile(r"^-?\d+$")
_FLOAT_PATTERN = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)$")


def require_field_count(fields: list[str], count: int) -> None:
    """Raise ``FieldDecodeError`` at the first missing index if too short."""
    if len(fields) < count:
        raise FieldDecodeError(len(fields))


def _raw(fields: list[str], index: int) -> str:
    # Trailing optional fields (e.g. NMEA 2.3 mode indicators) may be absent
    # altogether; treat them like empty fields.
    if index >= len(fields):
        return ""
    return fields[index]


def parse_float_field(fields: list[str], index: int) -> float | None:
    """Parse a field to float, returning None if empty.

    Example:
        >>> parse_float_field(["GPGGA", "545.4"], 1)
        545.4
        >>> parse_float_field(["GPGGA", ""], 1)  # empty field
        None
    """
    value = _raw(fields, index)
    if not value:
        return None
    if not _FLOAT_PATTERN.match(value):
        raise FieldDecodeError(index, value)
    return float(value)


def parse_int_field(fields: list[str], index: int) -> int | None:
    """Parse a field to int, returning None if empty.

    Used for satellite counts, PRNs and quality indicators. A leading minus
    sign is accepted for signed fields such as local zone hours.
    """
    value = _raw(fields, index)
    if not value:
        return None
    if not _INT_PATTERN.match(value):
        raise FieldDecodeError(index, value)
    return int(value)


def parse_string_field(fields: list[str], index: int) -> str | None:
    """Parse a field as a raw string, returning None if empty."""
    value = _raw(fields, index)
    if not value:
        return None
    return value


def parse_choice_field(
    fields: list[str], index: int, allowed: str
) -> str | None:
    """Parse a single-character indicator field restricted to ``allowed``."""
    value = _raw(fields, index)
    if not value:
        return None
    if len(value) != 1 or value not in allowed:
        raise FieldDecodeError(index, value)
    return value


def _parse_coordinate_parts(value: str) -> tuple[int, float] | None:
    """Parse NMEA coordinate into degrees and minutes components.

    NMEA coordinates use DDDMM.MMMM format where the two digits before the
    decimal point are always minutes.

    Example:
        >>> _parse_coordinate_parts("4807.038")  # 48° 07.038'
        (48, 7.038)
        >>> _parse_coordinate_parts("01131.000")  # 11° 31.000'
        (11, 31.0)
    """
    match = _COORDINATE_PATTERN.match(value)
    if match is None:
        return None
    degrees = int(match.group(1))
    minutes = float(match.group(2))
    if minutes >= 60.0:
        return None
    return degrees, minutes


def parse_coordinate_field(
    fields: list[str], index: int, hemispheres: str
) -> float | None:
    """Convert an NMEA coordinate pair (value, hemisphere) to decimal degrees.

    The value lives at ``index`` and its hemisphere indicator at ``index + 1``.
    South and West are negative:

        decimal_degrees = degrees + (minutes / 60)

    Args:
        fields: Sentence fields
        index: Position of the DDDMM.MMMM value
        hemispheres: "NS" for latitude, "EW" for longitude

    Returns:
        Signed decimal degrees, or None if the value field is empty.

    Example:
        >>> parse_coordinate_field(["", "4807.038", "N"], 1, "NS")
        48.1173
    """
    value = _raw(fields, index)
    direction = parse_choice_field(fields, index + 1, hemispheres)
    if not value:
        return None

    parts = _parse_coordinate_parts(value)
    if parts is None:
        raise FieldDecodeError(index, value)
    if direction is None:
        raise FieldDecodeError(index + 1)

    degrees, minutes = parts
    decimal_degrees = degrees + minutes / 60.0
    limit = 90.0 if hemispheres == "NS" else 180.0
    if decimal_degrees > limit:
        raise FieldDecodeError(index, value)

    if direction in ("S", "W"):
        return -decimal_degrees

    return decimal_degrees


def parse_time_field(fields: list[str], index: int) -> datetime.time | None:
    """Parse a HHMMSS[.sss] UTC time field.

    Example:
        >>> parse_time_field(["GPGGA", "123519.25"], 1)
        datetime.time(12, 35, 19, 250000)
    """
    value = _raw(fields, index)
    if not value:
        return None
    match = _TIME_PATTERN.match(value)
    if match is None:
        raise FieldDecodeError(index, value)
    hours, minutes, seconds, fraction = match.groups()
    microseconds = int(fraction.ljust(6, "0")) if fraction else 0
    try:
        return datetime.time(
            int(hours), int(minutes), int(seconds), microseconds
        )
    except ValueError:
        raise FieldDecodeError(index, value) from None


def parse_date_field(fields: list[str], index: int) -> datetime.date | None:
    """Parse a DDMMYY date field (RMC)."""
    value = _raw(fields, index)
    if not value:
        return None
    match = _DATE_PATTERN.match(value)
    if match is None:
        raise FieldDecodeError(index, value)
    day, month, year = (int(part) for part in match.groups())
    year += 1900 if year > _CENTURY_THRESHOLD else 2000
    try:
        return datetime.date(year, month, day)
    except ValueError:
        raise FieldDecodeError(index, value) from None


# --- formatting ---------------------------------------------------------------


def format_float(value: float | None) -> str:
    if value is None:
        return ""
    text = f"{value:.10f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    return text


def format_int(value: int | None, width: int = 0) -> str:
    if value is None:
        return ""
    return f"{value:0{width}d}"


def format_string(value: str | None) -> str:
    return "" if value is None else value


def format_coordinate(value: float | None, hemispheres: str) -> tuple[str, str]:
    """Render decimal degrees as the (DDDMM.MMMMMMMM, hemisphere) field pair."""
    if value is None:
        return "", ""
    direction = hemispheres[1] if value < 0 else hemispheres[0]
    width = 2 if hemispheres == "NS" else 3
    magnitude = abs(value)
    degrees = int(magnitude)
    minutes = round((magnitude - degrees) * 60.0, 8)
    if minutes >= 60.0:
        degrees += 1
        minutes = 0.0
    return f"{degrees:0{width}d}{minutes:011.8f}", direction


def format_time(value: datetime.time | None) -> str:
    if value is None:
        return ""
    fraction = f"{value.microsecond:06d}".rstrip("0").ljust(2, "0")
    return f"{value.hour:02d}{value.minute:02d}{value.second:02d}.{fraction}"


def format_date(value: datetime.date | None) -> str:
    if value is None:
        return ""
    return f"{value.day:02d}{value.month:02d}{value.year % 100:02d}"
