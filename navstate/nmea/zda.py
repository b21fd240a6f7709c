"""ZDA sentence decoder.

ZDA (Time and Date) is the dedicated UTC time sentence:
    $GPZDA,201530.00,04,07,2002,00,00*60
           |         |  |  |    |  |
           |         |  |  |    |  +-- Local zone minutes
           |         |  |  |    +-- Local zone hours
           |         +--+--+-- Day, month, four-digit year
           +-- UTC time
"""

import datetime

from navstate.nmea.errors import FieldDecodeError
from navstate.nmea.fields import (
    format_int,
    format_time,
    parse_int_field,
    parse_time_field,
    require_field_count,
)
from navstate.nmea.types import ZDAData

_MINIMUM_FIELD_COUNT = 5


def _parse_date(fields: list[str]) -> datetime.date | None:
    day, month, year = (parse_int_field(fields, index) for index in (2, 3, 4))
    if day is None and month is None and year is None:
        return None
    for index, value in ((2, day), (3, month), (4, year)):
        if value is None:
            raise FieldDecodeError(index)
    try:
        return datetime.date(year, month, day)
    except ValueError:
        raise FieldDecodeError(2, fields[2]) from None


def decode_zda(talker: str, fields: list[str]) -> ZDAData:
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    return ZDAData(
        talker=talker,
        utc_time=parse_time_field(fields, 1),
        date=_parse_date(fields),
        local_zone_hours=parse_int_field(fields, 5),
        local_zone_minutes=parse_int_field(fields, 6),
    )


def encode_zda(data: ZDAData) -> list[str]:
    date = data.date
    return [
        f"{data.talker}ZDA",
        format_time(data.utc_time),
        format_int(date.day if date else None, 2),
        format_int(date.month if date else None, 2),
        format_int(date.year if date else None, 4),
        format_int(data.local_zone_hours, 2),
        format_int(data.local_zone_minutes, 2),
    ]
