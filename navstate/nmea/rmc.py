"""RMC sentence decoder.

RMC (Recommended Minimum Specific GNSS Data) carries position, velocity and
the UTC date in a single sentence.

RMC Sentence Format:
    $GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W,A*..
           |      | |        | |         | |     |     |      |     | |
           |      | |        | |         | |     |     |      +-----+ +-- Mode (NMEA 2.3+)
           |      | |        | |         | |     |     |      +-- Magnetic variation + E/W
           |      | |        | |         | |     |     +-- Date (DDMMYY)
           |      | |        | |         | |     +-- Course over ground (true)
           |      | |        | |         | +-- Speed over ground (knots)
           |      | +--------+-+---------+-- Latitude, Longitude
           |      +-- Status (A=valid, V=warning)
           +-- UTC time
"""

from navstate.nmea.fields import (
    format_coordinate,
    format_date,
    format_float,
    format_string,
    format_time,
    parse_choice_field,
    parse_coordinate_field,
    parse_date_field,
    parse_float_field,
    parse_time_field,
    require_field_count,
)
from navstate.nmea.types import RMCData
from navstate.nmea.vtg import FAA_MODES

# NMEA 2.0 receivers stop after the date; magnetic variation is often absent.
_MINIMUM_FIELD_COUNT = 10


def _parse_magnetic_variation(fields: list[str]) -> float | None:
    direction = parse_choice_field(fields, 11, "EW")
    variation = parse_float_field(fields, 10)
    if variation is None:
        return None
    return -variation if direction == "W" else variation


def decode_rmc(talker: str, fields: list[str]) -> RMCData:
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    return RMCData(
        talker=talker,
        utc_time=parse_time_field(fields, 1),
        status=parse_choice_field(fields, 2, "AV"),
        latitude_degrees=parse_coordinate_field(fields, 3, "NS"),
        longitude_degrees=parse_coordinate_field(fields, 5, "EW"),
        speed_knots=parse_float_field(fields, 7),
        course_degrees=parse_float_field(fields, 8),
        date=parse_date_field(fields, 9),
        magnetic_variation_degrees=_parse_magnetic_variation(fields),
        mode=parse_choice_field(fields, 12, FAA_MODES),
    )


def encode_rmc(data: RMCData) -> list[str]:
    latitude, north_south = format_coordinate(data.latitude_degrees, "NS")
    longitude, east_west = format_coordinate(data.longitude_degrees, "EW")
    variation = data.magnetic_variation_degrees
    return [
        f"{data.talker}RMC",
        format_time(data.utc_time),
        format_string(data.status),
        latitude,
        north_south,
        longitude,
        east_west,
        format_float(data.speed_knots),
        format_float(data.course_degrees),
        format_date(data.date),
        format_float(abs(variation) if variation is not None else None),
        "" if variation is None else ("W" if variation < 0 else "E"),
        format_string(data.mode),
    ]
