"""Tests for the ingest pipeline."""

import itertools

import pytest

from navstate.pipeline import IngestPipeline
from navstate.snapshot import FieldGroup, NavigationSnapshot
from navstate.store import SnapshotStore

GGA = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47\r\n"
GGA_BAD_CHECKSUM = GGA.replace(b"*47", b"*00")
VTG = b"$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B\r\n"
PUBX = b"$PUBX,00,081350.00,4717.113210,N,00833.915187,E*0B\r\n"


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


@pytest.fixture
def pipeline(store: SnapshotStore) -> IngestPipeline:
    return IngestPipeline(store, clock=itertools.count(1000.0).__next__)


class EndingSource:
    """Yields its chunks, then raises EOFError like a closed connection."""

    def __init__(self, *chunks: bytes) -> None:
        self.chunks = chunks

    def __iter__(self):
        yield from self.chunks
        raise EOFError("stream ended.")


def test_valid_line_is_published(pipeline, store):
    assert pipeline.feed(GGA) == 1
    snapshot = store.read()
    assert snapshot.latitude_degrees == pytest.approx(48.1173)
    assert snapshot.updated_at[FieldGroup.POSITION] == 1000.0
    assert store.health().accepted_by_kind == {"GGA": 1}
    assert pipeline.snapshot is snapshot


def test_checksum_mismatch_leaves_snapshot_unchanged(pipeline, store):
    pipeline.feed(GGA)
    before = store.read_versioned()
    pipeline.feed(GGA_BAD_CHECKSUM)
    assert store.read_versioned() == before
    assert store.health().error_counts == {"ChecksumMismatch": 1}


def test_frame_too_long_does_not_cascade(store):
    pipeline = IngestPipeline(store, max_line_length=82)
    pipeline.feed(b"$GPTXT," + b"A" * 200)
    pipeline.feed(b"\r\n" + GGA)
    health = store.health()
    assert health.error_counts == {"FrameTooLong": 1}
    assert health.accepted_count == 1
    assert store.read().fix_quality == 1


def test_unrecognized_sentence_is_accepted_and_reported(pipeline, store):
    record = pipeline.process_line(PUBX.strip())
    assert record.tag == "PUBX"
    health = store.health()
    assert health.accepted_by_kind == {"UNRECOGNIZED": 1}
    assert health.error_counts == {"UnrecognizedSentenceKind": 1}
    assert store.read() == NavigationSnapshot()


def test_unrecognized_sentence_does_not_publish(pipeline, store):
    pipeline.feed(GGA)
    before = store.read_versioned()
    pipeline.feed(PUBX + PUBX)
    assert store.read_versioned() == before
    assert store.health().accepted_count == 3


def test_rejected_line_returns_none(pipeline, store):
    assert pipeline.process_line(b"GPGGA,no,frame") is None
    assert store.health().error_counts == {"MalformedFrame": 1}


def test_raw_lines_are_kept_for_display(pipeline, store):
    pipeline.feed(GGA + GGA_BAD_CHECKSUM)
    assert store.recent_lines() == (
        GGA.strip().decode(),
        GGA_BAD_CHECKSUM.strip().decode(),
    )


def test_run_until_source_ends(pipeline, store):
    stream = GGA + VTG
    source = EndingSource(stream[:30], stream[30:77], stream[77:], b"$GPGGA,1")
    assert pipeline.run(source) == 2
    snapshot = store.read()
    assert snapshot.speed_knots == 5.5
    # The partial trailing sentence is discarded at end of stream.
    assert pipeline.feed(b"23519\r\n") == 1
    assert store.health().error_counts == {"MalformedFrame": 1}


def test_run_with_plain_iterable(pipeline, store):
    assert pipeline.run([GGA, VTG]) == 2
    assert store.health().accepted_count == 2


def test_stop_takes_effect_between_lines(pipeline, store):
    def source():
        yield GGA
        pipeline.stop()
        yield VTG + GGA

    assert pipeline.run(source()) == 1
    assert pipeline.stop_requested is True
    assert store.health().accepted_count == 1


def test_run_clears_previous_stop(pipeline, store):
    pipeline.stop()
    assert pipeline.run([GGA]) == 1


def test_source_errors_propagate(pipeline):
    def failing():
        yield GGA
        raise OSError("device unplugged")

    with pytest.raises(OSError):
        pipeline.run(failing())


def test_reset_with_state_clears_snapshot(pipeline, store):
    pipeline.feed(GGA + b"$GPVTG")
    pipeline.reset(clear_state=True)
    assert store.read() == NavigationSnapshot()
    assert pipeline.snapshot == NavigationSnapshot()
    pipeline.feed(VTG)
    assert store.read().speed_knots == 5.5
    assert store.read().latitude_degrees is None
