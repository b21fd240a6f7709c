"""Tests for sentence dispatch, rejection reasons and encoding."""

import pytest

from navstate.nmea import (
    ChecksumMismatch,
    FieldDecodeError,
    GGAData,
    GSVData,
    MalformedFrame,
    SentenceKind,
    UnrecognizedSentence,
    UnsupportedEncoding,
    VTGData,
    encode_sentence,
    parse_sentence,
    record_kind,
)
from navstate.nmea.parser import DECODERS, ENCODERS

GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"

ROUND_TRIP_SENTENCES = [
    GGA,
    "$GPGGA,123519,3356.123,S,15112.456,W,2,10,0.8,100.0,M,20.0,M,1.5,0031*63",
    "$GNGGA,123519.00,,,,,0,00,,,,,,,*5B",
    "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A",
    "$GNRMC,123520.00,V,,,,,,,230394,,,N*6B",
    "$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B",
    "$GNVTG,,T,,M,0.0,N,0.0,K,A*3D",
    "$GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1*39",
    "$GNGSA,A,3,01,02,03,,,,,,,,,,1.8,1.0,1.5,1*3D",
    "$GPGSV,2,2,08,15,55,120,38,18,10,045,,21,70,300,44,24,33,190,40*79",
    "$GPGSV,1,1,02,05,30,100,40,07,20,200,*7F",
    "$GPGLL,4916.45,N,12311.12,W,225444,A,A*5C",
    "$GPZDA,235959.50,31,12,2023,-05,00*48",
    "$GPTXT,01,01,02,ANTSTATUS=OK*3B",
    "$PUBX,00,081350.00,4717.113210,N,00833.915187,E*0B",
]


class TestDispatch:
    def test_bytes_with_line_ending(self):
        result = parse_sentence((GGA + "\r\n").encode("ascii"))
        assert isinstance(result, GGAData)

    def test_talker_is_split_from_sentence_type(self):
        result = parse_sentence("$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B")
        assert isinstance(result, VTGData)
        assert result.talker == "GN"

    def test_every_kind_has_a_decoder_and_an_encoder(self):
        assert set(DECODERS) == set(SentenceKind)
        assert len(ENCODERS) == len(SentenceKind)

    def test_record_kind(self):
        assert record_kind(parse_sentence(GGA)) == "GGA"
        assert record_kind(UnrecognizedSentence("GPDTM", ())) == "UNRECOGNIZED"


class TestUnrecognized:
    def test_proprietary_sentence(self):
        result = parse_sentence("$PUBX,00,081350.00,4717.113210,N,00833.915187,E*0B")
        assert result == UnrecognizedSentence(
            tag="PUBX",
            fields=("00", "081350.00", "4717.113210", "N", "00833.915187", "E"),
        )

    def test_unsupported_standard_sentence(self):
        result = parse_sentence("$GPDTM,W84,,0.0,N,0.0,E,0.0,W84*6F")
        assert isinstance(result, UnrecognizedSentence)
        assert result.tag == "GPDTM"

    def test_encapsulated_sentence(self):
        result = parse_sentence("!AIVDM,1,1,,B,15M67FC000G?ufbE`FepT@3n00Sa,0*5C")
        assert isinstance(result, UnrecognizedSentence)
        assert result.tag == "AIVDM"
        assert result.start == "!"


class TestRejections:
    def test_checksum_zero_scenario(self):
        with pytest.raises(ChecksumMismatch):
            parse_sentence(GGA[:-2] + "00")

    @pytest.mark.parametrize("position", range(1, len(GGA)))
    def test_single_character_corruption(self, position):
        original = GGA[position]
        if original == "*":
            pytest.skip("changing the delimiter changes the frame, not the data")
        replacement = "0" if original != "0" else "1"
        corrupted = GGA[:position] + replacement + GGA[position + 1 :]
        with pytest.raises(ChecksumMismatch):
            parse_sentence(corrupted)

    def test_non_ascii_bytes(self):
        with pytest.raises(UnsupportedEncoding):
            parse_sentence(b"$GPGGA,12\xff519*47")

    def test_non_ascii_text(self):
        with pytest.raises(UnsupportedEncoding):
            parse_sentence("$GPTXT,01,01,02,é*3B")

    def test_missing_start_delimiter(self):
        with pytest.raises(MalformedFrame):
            parse_sentence(GGA[1:])

    def test_too_short_tag(self):
        with pytest.raises(MalformedFrame):
            parse_sentence("$GP,123*0B")

    def test_lowercase_tag(self):
        with pytest.raises(MalformedFrame):
            parse_sentence("$gpGGA,1*4B")

    def test_tag_only(self):
        with pytest.raises(FieldDecodeError) as exc_info:
            parse_sentence("$GPGGA*56")
        assert exc_info.value.field_index == 1

    def test_errors_carry_their_counter_key(self):
        with pytest.raises(ChecksumMismatch) as exc_info:
            parse_sentence(GGA[:-2] + "00")
        assert exc_info.value.kind == "ChecksumMismatch"


class TestEncode:
    def test_encoded_sentence_is_checksummed(self):
        assert encode_sentence(parse_sentence(GGA)).startswith("$GPGGA,123519.00,")

    def test_records_survive_encoding(self):
        record = GSVData(
            talker="GL",
            total_messages=1,
            message_number=1,
            satellites_in_view=1,
            satellites=(),
            signal_id="1",
        )
        assert parse_sentence(encode_sentence(record)) == record

    def test_encapsulated_sentence_keeps_its_delimiter(self):
        sentence = "!AIVDM,1,1,,B,15M67FC000G?ufbE`FepT@3n00Sa,0*5C"
        assert encode_sentence(parse_sentence(sentence)) == sentence

    def test_proprietary_sentence_is_reencoded_verbatim(self):
        sentence = "$PUBX,00,081350.00,4717.113210,N,00833.915187,E*0B"
        assert encode_sentence(parse_sentence(sentence)) == sentence

    @pytest.mark.parametrize("sentence", ROUND_TRIP_SENTENCES)
    def test_round_trip(self, sentence):
        record = parse_sentence(sentence)
        assert parse_sentence(encode_sentence(record)) == record
