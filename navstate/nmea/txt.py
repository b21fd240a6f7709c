"""TXT sentence decoder.

TXT (Text Transmission) carries human-readable receiver messages such as boot
banners and antenna status:
    $GPTXT,01,01,02,ANTSTATUS=OK*3B
"""

from navstate.nmea.fields import format_int, parse_int_field, require_field_count
from navstate.nmea.types import TXTData

_MINIMUM_FIELD_COUNT = 5


def decode_txt(talker: str, fields: list[str]) -> TXTData:
    require_field_count(fields, _MINIMUM_FIELD_COUNT)

    return TXTData(
        talker=talker,
        total_messages=parse_int_field(fields, 1),
        message_number=parse_int_field(fields, 2),
        text_id=parse_int_field(fields, 3),
        # Commas are reserved, but some receivers leak them into the text.
        text=",".join(fields[4:]),
    )


def encode_txt(data: TXTData) -> list[str]:
    return [
        f"{data.talker}TXT",
        format_int(data.total_messages, 2),
        format_int(data.message_number, 2),
        format_int(data.text_id, 2),
        data.text,
    ]
