"""VTG sentence decoder.

VTG (Track Made Good and Ground Speed) provides velocity information from GNSS:
ground speed and heading.

VTG Sentence Format:
    $GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B
           |     | |     | |     | |     | |
           |     | |     | |     | |     | +-- Mode indicator (A/D/E/N)
           |     | |     | |     | +-----+-- Speed in km/h
           |     | |     | +-----+-- Speed in knots
           |     | +-----+-- Track (magnetic north, degrees)
           +-----+-- Track (true north, degrees)

Mode Indicators (FAA mode, NMEA 2.3+):
    A = Autonomous (standard GPS positioning)
    D = Differential (DGPS or RTK)
    E = Estimated (dead reckoning)
    N = Not valid (no fix)

Note: When stationary, the track angle may be empty (no heading when not moving).
"""

from navstate.nmea.fields import (
    format_float,
    format_string,
    parse_choice_field,
    parse_float_field,
    require_field_count,
)
from navstate.nmea.types import VTGData

# VTG has 9 fields in basic format, 10 with FAA mode indicator
_MINIMUM_FIELD_COUNT = 9

FAA_MODES = "ADEFMNPRS"


def decode_vtg(talker: str, fields: list[str]) -> VTGData:
    """Construct a VTGData object from checksum-validated fields.

    Maps NMEA field indices to VTGData attributes:
        fields[1] -> track_true_degrees (heading relative to true north)
        fields[3] -> track_magnetic_degrees
        fields[5] -> speed_knots
        fields[7] -> speed_kilometers_per_hour
        fields[9] -> mode (FAA mode indicator, if present)
    """
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    return VTGData(
        talker=talker,
        track_true_degrees=parse_float_field(fields, 1),
        track_magnetic_degrees=parse_float_field(fields, 3),
        speed_knots=parse_float_field(fields, 5),
        speed_kilometers_per_hour=parse_float_field(fields, 7),
        mode=parse_choice_field(fields, 9, FAA_MODES),
    )


def encode_vtg(data: VTGData) -> list[str]:
    def _with_unit(value: float | None, unit: str) -> list[str]:
        return [format_float(value), unit if value is not None else ""]

    return [
        f"{data.talker}VTG",
        *_with_unit(data.track_true_degrees, "T"),
        *_with_unit(data.track_magnetic_degrees, "M"),
        *_with_unit(data.speed_knots, "N"),
        *_with_unit(data.speed_kilometers_per_hour, "K"),
        format_string(data.mode),
    ]
