"""GSA sentence decoder.

GSA (GNSS DOP and Active Satellites) reports the fix dimension, the satellites
used in the solution and the three dilution-of-precision values.

GSA Sentence Format:
    $GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1*39
           | | |                     | |   |   |
           | | |                     | |   |   +-- VDOP
           | | |                     | |   +-- HDOP
           | | |                     | +-- PDOP
           | | +---------------------+-- PRNs of satellites used (12 slots)
           | +-- Fix type (1=none, 2=2D, 3=3D)
           +-- Selection mode (M=manual, A=automatic)

NMEA 4.1 receivers append a GNSS system ID after VDOP.
"""

from navstate.nmea.errors import FieldDecodeError
from navstate.nmea.fields import (
    format_float,
    format_int,
    format_string,
    parse_choice_field,
    parse_float_field,
    parse_int_field,
    require_field_count,
)
from navstate.nmea.types import GSAData

_SATELLITE_SLOTS = 12
_FIRST_SATELLITE_INDEX = 3
_PDOP_INDEX = _FIRST_SATELLITE_INDEX + _SATELLITE_SLOTS
_MINIMUM_FIELD_COUNT = _PDOP_INDEX + 3


def _parse_satellite_ids(fields: list[str]) -> tuple[int, ...]:
    satellite_ids = []
    for index in range(_FIRST_SATELLITE_INDEX, _PDOP_INDEX):
        prn = parse_int_field(fields, index)
        if prn is not None:
            satellite_ids.append(prn)
    return tuple(satellite_ids)


def decode_gsa(talker: str, fields: list[str]) -> GSAData:
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    fix_type = parse_int_field(fields, 2)
    if fix_type is not None and fix_type not in (1, 2, 3):
        raise FieldDecodeError(2, fields[2])

    return GSAData(
        talker=talker,
        selection_mode=parse_choice_field(fields, 1, "AM"),
        fix_type=fix_type,
        satellite_ids=_parse_satellite_ids(fields),
        position_dilution_of_precision=parse_float_field(fields, _PDOP_INDEX),
        horizontal_dilution_of_precision=parse_float_field(fields, _PDOP_INDEX + 1),
        vertical_dilution_of_precision=parse_float_field(fields, _PDOP_INDEX + 2),
        system_id=parse_int_field(fields, _PDOP_INDEX + 3),
    )


def encode_gsa(data: GSAData) -> list[str]:
    slots = [format_int(prn, 2) for prn in data.satellite_ids[:_SATELLITE_SLOTS]]
    slots += [""] * (_SATELLITE_SLOTS - len(slots))
    fields = [
        f"{data.talker}GSA",
        format_string(data.selection_mode),
        format_int(data.fix_type),
        *slots,
        format_float(data.position_dilution_of_precision),
        format_float(data.horizontal_dilution_of_precision),
        format_float(data.vertical_dilution_of_precision),
    ]
    if data.system_id is not None:
        fields.append(format_int(data.system_id))
    return fields
