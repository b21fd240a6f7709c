"""GLL sentence decoder.

GLL (Geographic Position - Latitude/Longitude):
    $GPGLL,4916.45,N,12311.12,W,225444,A,A*5C
           |       | |        | |      | |
           |       | |        | |      | +-- Mode (NMEA 2.3+)
           |       | |        | |      +-- Status (A=valid, V=invalid)
           |       | |        | +-- UTC time
           +-------+-+--------+-- Latitude, Longitude
"""

from navstate.nmea.fields import (
    format_coordinate,
    format_string,
    format_time,
    parse_choice_field,
    parse_coordinate_field,
    parse_time_field,
    require_field_count,
)
from navstate.nmea.types import GLLData
from navstate.nmea.vtg import FAA_MODES

# NMEA 1.5 receivers send only the coordinate pairs.
_MINIMUM_FIELD_COUNT = 5


def decode_gll(talker: str, fields: list[str]) -> GLLData:
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    return GLLData(
        talker=talker,
        latitude_degrees=parse_coordinate_field(fields, 1, "NS"),
        longitude_degrees=parse_coordinate_field(fields, 3, "EW"),
        utc_time=parse_time_field(fields, 5),
        status=parse_choice_field(fields, 6, "AV"),
        mode=parse_choice_field(fields, 7, FAA_MODES),
    )


def encode_gll(data: GLLData) -> list[str]:
    latitude, north_south = format_coordinate(data.latitude_degrees, "NS")
    longitude, east_west = format_coordinate(data.longitude_degrees, "EW")
    return [
        f"{data.talker}GLL",
        latitude,
        north_south,
        longitude,
        east_west,
        format_time(data.utc_time),
        format_string(data.status),
        format_string(data.mode),
    ]
