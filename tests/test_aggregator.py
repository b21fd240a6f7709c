"""Tests for folding sentence records into navigation snapshots."""

import datetime

import pytest

from navstate.aggregator import apply_record
from navstate.nmea import (
    GGAData,
    GSAData,
    GSVData,
    RMCData,
    SatelliteInfo,
    TXTData,
    UnrecognizedSentence,
    VTGData,
    ZDAData,
    parse_sentence,
)
from navstate.snapshot import FieldGroup, NavigationSnapshot

GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47\r\n"


def make_gga(**overrides) -> GGAData:
    values = dict(
        talker="GP",
        utc_time=datetime.time(12, 0, 0),
        latitude_degrees=45.0,
        longitude_degrees=9.0,
        fix_quality=1,
        num_satellites=8,
        horizontal_dilution_of_precision=1.0,
        altitude_meters=100.0,
        geoid_separation_meters=50.0,
    )
    values.update(overrides)
    return GGAData(**values)


def make_gsv(message_number, total_messages, prns, talker="GP") -> GSVData:
    return GSVData(
        talker=talker,
        total_messages=total_messages,
        message_number=message_number,
        satellites_in_view=8,
        satellites=tuple(SatelliteInfo(prn, 10, 100, 30) for prn in prns),
    )


@pytest.fixture
def positioned() -> NavigationSnapshot:
    return apply_record(NavigationSnapshot(), make_gga(), now=100.0)


class TestGGA:
    def test_position_fix_scenario(self):
        snapshot = apply_record(NavigationSnapshot(), parse_sentence(GGA), now=42.0)
        assert snapshot.latitude_degrees == pytest.approx(48 + 7.038 / 60)
        assert snapshot.longitude_degrees == pytest.approx(11 + 31.0 / 60)
        assert snapshot.fix_quality == 1
        assert snapshot.satellites_used == 8
        assert snapshot.altitude_meters == pytest.approx(545.4)
        assert snapshot.updated_at[FieldGroup.POSITION] == 42.0
        assert snapshot.updated_at[FieldGroup.FIX] == 42.0
        assert snapshot.updated_at[FieldGroup.TIME] == 42.0
        assert FieldGroup.VELOCITY not in snapshot.updated_at
        assert FieldGroup.SATELLITES not in snapshot.updated_at

    def test_input_snapshot_is_not_modified(self):
        empty = NavigationSnapshot()
        apply_record(empty, make_gga(), now=1.0)
        assert empty == NavigationSnapshot()

    def test_empty_field_never_overwrites(self, positioned):
        result = apply_record(
            positioned,
            make_gga(altitude_meters=None, horizontal_dilution_of_precision=None),
            now=101.0,
        )
        assert result.altitude_meters == 100.0
        assert result.horizontal_dilution_of_precision == 1.0
        assert result.updated_at[FieldGroup.PRECISION] == 100.0
        assert result.updated_at[FieldGroup.POSITION] == 101.0

    def test_loss_of_fix_clears_position(self, positioned):
        result = apply_record(
            positioned,
            make_gga(latitude_degrees=None, longitude_degrees=None, fix_quality=0),
            now=101.0,
        )
        assert result.has_position is False
        assert result.altitude_meters is None
        assert result.fix_quality == 0
        assert result.updated_at[FieldGroup.POSITION] == 101.0

    def test_empty_fix_quality_is_not_loss_of_fix(self, positioned):
        result = apply_record(
            positioned,
            make_gga(latitude_degrees=None, longitude_degrees=None, fix_quality=None),
            now=101.0,
        )
        assert result.has_position is True
        assert result.fix_quality == 1

    def test_decoded_empty_fix_quality_keeps_position(self, positioned):
        record = parse_sentence("$GNGGA,123519.00,,,,,,,,,,,,,*6B")
        assert record.fix_quality is None
        result = apply_record(positioned, record, now=101.0)
        assert result.has_position is True
        assert result.latitude_degrees == positioned.latitude_degrees


class TestIndependentGroups:
    def test_satellites_only_leave_position_untouched(self, positioned):
        result = apply_record(positioned, make_gsv(1, 1, [1, 2, 3]), now=200.0)
        assert result.latitude_degrees == positioned.latitude_degrees
        assert result.updated_at[FieldGroup.POSITION] == 100.0
        assert result.updated_at[FieldGroup.SATELLITES] == 200.0
        assert result.age(FieldGroup.POSITION, now=200.0) == 100.0

    def test_age_of_never_set_group(self):
        assert NavigationSnapshot().age(FieldGroup.VELOCITY, now=5.0) is None

    def test_last_write_wins_across_kinds(self, positioned):
        rmc = RMCData(
            talker="GP",
            utc_time=datetime.time(12, 0, 1),
            status="A",
            latitude_degrees=46.0,
            longitude_degrees=10.0,
            speed_knots=2.0,
            course_degrees=90.0,
            date=datetime.date(2024, 5, 1),
        )
        result = apply_record(positioned, rmc, now=101.0)
        assert result.latitude_degrees == 46.0
        assert result.altitude_meters == 100.0
        assert result.utc_datetime == datetime.datetime(
            2024, 5, 1, 12, 0, 1, tzinfo=datetime.timezone.utc
        )
        result = apply_record(result, make_gga(latitude_degrees=47.0), now=102.0)
        assert result.latitude_degrees == 47.0


class TestVelocity:
    def test_vtg_sets_speed_and_course(self):
        vtg = VTGData("GN", 54.7, 34.4, 5.5, 10.2, "A")
        result = apply_record(NavigationSnapshot(), vtg, now=1.0)
        assert result.speed_knots == 5.5
        assert result.course_degrees == 54.7
        assert result.speed_meters_per_second == pytest.approx(5.5 * 0.514444)

    def test_vtg_kilometers_only(self):
        vtg = VTGData("GN", None, None, None, 1.852, "A")
        result = apply_record(NavigationSnapshot(), vtg, now=1.0)
        assert result.speed_knots == pytest.approx(1.0)

    def test_vtg_not_valid_clears_velocity(self):
        moving = apply_record(
            NavigationSnapshot(), VTGData("GN", 54.7, None, 5.5, 10.2, "A"), now=1.0
        )
        result = apply_record(moving, VTGData("GN", None, None, None, None, "N"), now=2.0)
        assert result.speed_knots is None
        assert result.course_degrees is None
        assert result.updated_at[FieldGroup.VELOCITY] == 2.0

    def test_vtg_without_mode_keeps_velocity(self):
        record = parse_sentence("$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K*56")
        assert record.mode is None
        result = apply_record(NavigationSnapshot(), record, now=1.0)
        assert result.speed_knots == 5.5

    def test_void_rmc_clears_position_and_velocity(self, positioned):
        rmc = RMCData("GN", datetime.time(12, 35, 20), "V", None, None, None, None,
                      datetime.date(1994, 3, 23))
        result = apply_record(positioned, rmc, now=101.0)
        assert result.has_position is False
        assert result.speed_knots is None
        assert result.utc_date == datetime.date(1994, 3, 23)


class TestGSA:
    def test_sets_fix_type_and_dops(self):
        gsa = GSAData("GP", "A", 3, (4, 5, 9), 2.5, 1.3, 2.1)
        result = apply_record(NavigationSnapshot(), gsa, now=1.0)
        assert result.fix_type == 3
        assert result.satellite_ids == (4, 5, 9)
        assert result.position_dilution_of_precision == 2.5
        assert result.vertical_dilution_of_precision == 2.1

    def test_no_fix_clears_position_and_used_satellites(self, positioned):
        gsa = GSAData("GP", "A", 1, (), None, None, None)
        result = apply_record(positioned, gsa, now=101.0)
        assert result.has_position is False
        assert result.fix_type == 1
        assert result.satellite_ids == ()
        assert result.horizontal_dilution_of_precision == 1.0


class TestSatellites:
    def test_multipart_cycle_commits_on_last_part(self):
        first = apply_record(NavigationSnapshot(), make_gsv(1, 2, [1, 2, 3, 4]), now=1.0)
        assert dict(first.satellites) == {}
        assert FieldGroup.SATELLITES not in first.updated_at

        second = apply_record(first, make_gsv(2, 2, [5, 6]), now=2.0)
        assert [s.prn for s in second.satellites["GP"]] == [1, 2, 3, 4, 5, 6]
        assert second.satellites_in_view["GP"] == 8
        assert second.updated_at[FieldGroup.SATELLITES] == 2.0
        assert dict(second.pending_satellites) == {}

    def test_out_of_sequence_part_drops_cycle(self):
        committed = apply_record(NavigationSnapshot(), make_gsv(1, 1, [7]), now=1.0)
        partial = apply_record(committed, make_gsv(1, 3, [1, 2, 3, 4]), now=2.0)
        skipped = apply_record(partial, make_gsv(3, 3, [9]), now=3.0)
        assert [s.prn for s in skipped.satellites["GP"]] == [7]
        assert dict(skipped.pending_satellites) == {}
        assert skipped.updated_at[FieldGroup.SATELLITES] == 1.0

    def test_constellations_are_kept_apart(self):
        snapshot = apply_record(NavigationSnapshot(), make_gsv(1, 1, [1]), now=1.0)
        snapshot = apply_record(snapshot, make_gsv(1, 1, [65], talker="GL"), now=2.0)
        assert set(snapshot.satellites) == {"GP", "GL"}
        assert snapshot.total_satellites_in_view == 16

    def test_signal_id_gets_its_own_table(self):
        gsv = GSVData("GP", 1, 1, 1, (SatelliteInfo(1, 10, 100, 30),), signal_id="8")
        snapshot = apply_record(NavigationSnapshot(), gsv, now=1.0)
        assert "GP-8" in snapshot.satellites


def test_zda_sets_date_and_time():
    zda = ZDAData("GP", datetime.time(20, 15, 30), datetime.date(2002, 7, 4), 0, 0)
    snapshot = apply_record(NavigationSnapshot(), zda, now=1.0)
    assert snapshot.utc_datetime.isoformat() == "2002-07-04T20:15:30+00:00"


def test_txt_sets_last_text():
    snapshot = apply_record(NavigationSnapshot(), TXTData("GP", 1, 1, 2, "ANTSTATUS=OK"), 1.0)
    assert snapshot.last_text == "ANTSTATUS=OK"


def test_unrecognized_sentence_changes_nothing(positioned):
    record = UnrecognizedSentence("PUBX", ("00",))
    assert apply_record(positioned, record, now=500.0) is positioned


def test_rejects_non_records():
    with pytest.raises(TypeError):
        apply_record(NavigationSnapshot(), "$GPGGA", now=1.0)


def test_snapshot_containers_are_read_only(positioned):
    with pytest.raises(TypeError):
        positioned.updated_at[FieldGroup.TEXT] = 1.0
