"""GSV sentence decoder.

GSV (GNSS Satellites in View) lists up to four satellites per sentence; a full
sky view is split across several sentences numbered 1..N.

GSV Sentence Format:
    $GPGSV,2,1,08,01,40,083,46,02,17,308,41,12,07,344,39,14,22,228,45*75
           | | |  |  |  |   |
           | | |  +--+--+---+-- PRN, elevation, azimuth, SNR (repeated)
           | | +-- Total satellites in view
           | +-- Message number
           +-- Total number of messages

NMEA 4.1 receivers append a signal ID after the last satellite block.
"""

from navstate.nmea.errors import FieldDecodeError
from navstate.nmea.fields import (
    format_int,
    format_string,
    parse_int_field,
    parse_string_field,
    require_field_count,
)
from navstate.nmea.types import GSVData, SatelliteInfo

_FIRST_SATELLITE_INDEX = 4
_FIELDS_PER_SATELLITE = 4
_MAXIMUM_SATELLITES_PER_MESSAGE = 4
_MINIMUM_FIELD_COUNT = _FIRST_SATELLITE_INDEX


def _parse_required_int(fields: list[str], index: int) -> int:
    value = parse_int_field(fields, index)
    if value is None or value < 1:
        raise FieldDecodeError(index, fields[index])
    return value


def _parse_satellites(fields: list[str], end: int) -> tuple[SatelliteInfo, ...]:
    satellites = []
    for index in range(_FIRST_SATELLITE_INDEX, end, _FIELDS_PER_SATELLITE):
        prn = parse_int_field(fields, index)
        elevation = parse_int_field(fields, index + 1)
        azimuth = parse_int_field(fields, index + 2)
        snr = parse_int_field(fields, index + 3)
        # Receivers pad the last sentence of a cycle with empty blocks.
        if prn is None:
            continue
        satellites.append(SatelliteInfo(prn, elevation, azimuth, snr))
    return tuple(satellites)


def decode_gsv(talker: str, fields: list[str]) -> GSVData:
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    total_messages = _parse_required_int(fields, 1)
    message_number = _parse_required_int(fields, 2)
    if message_number > total_messages:
        raise FieldDecodeError(2, fields[2])

    block_fields = len(fields) - _FIRST_SATELLITE_INDEX
    blocks, remainder = divmod(block_fields, _FIELDS_PER_SATELLITE)
    if remainder > 1 or blocks > _MAXIMUM_SATELLITES_PER_MESSAGE:
        raise FieldDecodeError(len(fields))
    end = _FIRST_SATELLITE_INDEX + blocks * _FIELDS_PER_SATELLITE

    return GSVData(
        talker=talker,
        total_messages=total_messages,
        message_number=message_number,
        satellites_in_view=parse_int_field(fields, 3),
        satellites=_parse_satellites(fields, end),
        signal_id=parse_string_field(fields, end) if remainder else None,
    )


def encode_gsv(data: GSVData) -> list[str]:
    fields = [
        f"{data.talker}GSV",
        format_int(data.total_messages),
        format_int(data.message_number),
        format_int(data.satellites_in_view, 2),
    ]
    for satellite in data.satellites:
        fields += [
            format_int(satellite.prn, 2),
            format_int(satellite.elevation_degrees, 2),
            format_int(satellite.azimuth_degrees, 3),
            format_int(satellite.snr_db, 2),
        ]
    if data.signal_id is not None:
        fields.append(format_string(data.signal_id))
    return fields
