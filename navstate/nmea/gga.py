"""GGA sentence decoder.

GGA (Global Positioning System Fix Data) is one of the most important NMEA
sentences, providing position fix information including coordinates, altitude,
fix quality, and satellite/accuracy metrics.

GGA Sentence Format:
    $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47
           |      |        | |         | | |  |   |     | |    | |
           |      |        | |         | | |  |   |     | |    | +-- DGPS station ID
           |      |        | |         | | |  |   |     | |    +-- DGPS age (seconds)
           |      |        | |         | | |  |   |     | +-- Geoid separation (M=meters)
           |      |        | |         | | |  |   +-----+-- Altitude above MSL
           |      |        | |         | | |  +-- HDOP (horizontal dilution)
           |      |        | |         | | +-- Number of satellites
           |      |        | |         | +-- Fix quality (0-8)
           |      |        | +---------+-- Longitude + E/W
           |      +--------+-- Latitude + N/S
           +-- UTC time (HHMMSS.ss)

Fix Quality Values:
    0 = Invalid (no fix)
    1 = GPS fix (SPS - Standard Positioning Service)
    2 = DGPS fix (Differential GPS)
    4 = RTK Fixed (Real-Time Kinematic, cm-level accuracy)
    5 = RTK Float (RTK converging, dm-level accuracy)
    6 = Dead reckoning mode
"""

from navstate.nmea.errors import FieldDecodeError
from navstate.nmea.fields import (
    format_coordinate,
    format_float,
    format_int,
    format_string,
    format_time,
    parse_coordinate_field,
    parse_float_field,
    parse_int_field,
    parse_string_field,
    parse_time_field,
    require_field_count,
)
from navstate.nmea.types import GGAData

# GGA sentences have 15 standard fields (indices 0-14); some receivers omit
# the trailing DGPS station ID.
_MINIMUM_FIELD_COUNT = 14

_MAXIMUM_FIX_QUALITY = 8


def decode_gga(talker: str, fields: list[str]) -> GGAData:
    """Construct a GGAData object from checksum-validated fields.

    Maps NMEA field indices to GGAData attributes:
        fields[1]  -> utc_time (HHMMSS.ss format)
        fields[2]  -> latitude (DDMM.MMMM format)
        fields[3]  -> latitude direction (N/S)
        fields[4]  -> longitude (DDDMM.MMMM format)
        fields[5]  -> longitude direction (E/W)
        fields[6]  -> fix_quality (0-8)
        fields[7]  -> num_satellites
        fields[8]  -> HDOP (horizontal dilution of precision)
        fields[9]  -> altitude above MSL (meters)
        fields[11] -> geoid separation (meters)
        fields[13] -> DGPS age
        fields[14] -> DGPS station ID

    Unlike older parsers, an empty fix quality stays None: only an explicit
    0 asserts loss of fix.

    Raises:
        FieldDecodeError: If a field is missing or malformed.
    """
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    fix_quality = parse_int_field(fields, 6)
    if fix_quality is not None and not 0 <= fix_quality <= _MAXIMUM_FIX_QUALITY:
        raise FieldDecodeError(6, fields[6])

    return GGAData(
        talker=talker,
        utc_time=parse_time_field(fields, 1),
        latitude_degrees=parse_coordinate_field(fields, 2, "NS"),
        longitude_degrees=parse_coordinate_field(fields, 4, "EW"),
        fix_quality=fix_quality,
        num_satellites=parse_int_field(fields, 7),
        horizontal_dilution_of_precision=parse_float_field(fields, 8),
        altitude_meters=parse_float_field(fields, 9),
        geoid_separation_meters=parse_float_field(fields, 11),
        dgps_age_seconds=parse_float_field(fields, 13),
        dgps_station_id=parse_string_field(fields, 14),
    )


def encode_gga(data: GGAData) -> list[str]:
    """Render a GGAData back into its field list (tag included)."""
    latitude, north_south = format_coordinate(data.latitude_degrees, "NS")
    longitude, east_west = format_coordinate(data.longitude_degrees, "EW")
    return [
        f"{data.talker}GGA",
        format_time(data.utc_time),
        latitude,
        north_south,
        longitude,
        east_west,
        format_int(data.fix_quality),
        format_int(data.num_satellites, 2),
        format_float(data.horizontal_dilution_of_precision),
        format_float(data.altitude_meters),
        "M" if data.altitude_meters is not None else "",
        format_float(data.geoid_separation_meters),
        "M" if data.geoid_separation_meters is not None else "",
        format_float(data.dgps_age_seconds),
        format_string(data.dgps_station_id),
    ]
