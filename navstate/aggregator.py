"""State aggregator: folds sentence records into a navigation snapshot.

``apply_record`` is a pure reducer, ``(snapshot, record, now) -> snapshot``.
It touches no I/O and no shared state, so the merge rules can be tested on
their own.

Merge rules:
    * Each sentence kind updates only the field groups it carries.
    * Within a group, the latest sentence wins, whatever its kind.
    * An empty field (None) never overwrites a known value. If a sentence
      leaves every field of a group empty, the group and its timestamp are
      left alone, so its age keeps growing.
    * A sentence that asserts loss of fix (GGA quality 0, RMC/GLL status
      'V', GSA fix type 1, VTG mode 'N') clears the affected group instead.
    * Unrecognized sentences change nothing.
"""

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from navstate.nmea.types import (
    GGAData,
    GLLData,
    GSAData,
    GSVData,
    RMCData,
    SentenceRecord,
    TXTData,
    UnrecognizedSentence,
    VTGData,
    ZDAData,
)
from navstate.snapshot import (
    GROUP_FIELDS,
    FieldGroup,
    NavigationSnapshot,
    PendingSatelliteView,
    frozen_mapping,
)

__all__ = ["apply_record"]

_KILOMETERS_PER_HOUR_PER_KNOT = 1.852

_NO_FIX_QUALITY = 0
_NO_FIX_TYPE = 1
_VOID_STATUS = "V"
_NOT_VALID_MODE = "N"


def _stamp(snapshot: NavigationSnapshot, group: FieldGroup, now: float) -> Any:
    updated_at = dict(snapshot.updated_at)
    updated_at[group] = now
    return frozen_mapping(updated_at)


def _merge(
    snapshot: NavigationSnapshot,
    group: FieldGroup,
    now: float,
    **values: Any,
) -> NavigationSnapshot:
    changes = {name: value for name, value in values.items() if value is not None}
    if not changes:
        return snapshot
    return replace(snapshot, **changes, updated_at=_stamp(snapshot, group, now))


def _clear(
    snapshot: NavigationSnapshot,
    group: FieldGroup,
    now: float,
    **values: Any,
) -> NavigationSnapshot:
    changes: dict[str, Any] = dict.fromkeys(GROUP_FIELDS[group])
    changes.update(values)
    return replace(snapshot, **changes, updated_at=_stamp(snapshot, group, now))


def _apply_gga(
    snapshot: NavigationSnapshot, record: GGAData, now: float
) -> NavigationSnapshot:
    snapshot = _merge(snapshot, FieldGroup.TIME, now, utc_time=record.utc_time)

    if record.fix_quality == _NO_FIX_QUALITY:
        snapshot = _clear(snapshot, FieldGroup.POSITION, now)
    else:
        snapshot = _merge(
            snapshot,
            FieldGroup.POSITION,
            now,
            latitude_degrees=record.latitude_degrees,
            longitude_degrees=record.longitude_degrees,
            altitude_meters=record.altitude_meters,
            geoid_separation_meters=record.geoid_separation_meters,
        )

    snapshot = _merge(
        snapshot,
        FieldGroup.FIX,
        now,
        fix_quality=record.fix_quality,
        satellites_used=record.num_satellites,
    )
    return _merge(
        snapshot,
        FieldGroup.PRECISION,
        now,
        horizontal_dilution_of_precision=record.horizontal_dilution_of_precision,
    )


def _apply_rmc(
    snapshot: NavigationSnapshot, record: RMCData, now: float
) -> NavigationSnapshot:
    snapshot = _merge(
        snapshot,
        FieldGroup.TIME,
        now,
        utc_time=record.utc_time,
        utc_date=record.date,
    )

    if record.status == _VOID_STATUS:
        snapshot = _clear(snapshot, FieldGroup.POSITION, now)
        return _clear(snapshot, FieldGroup.VELOCITY, now)

    snapshot = _merge(
        snapshot,
        FieldGroup.POSITION,
        now,
        latitude_degrees=record.latitude_degrees,
        longitude_degrees=record.longitude_degrees,
    )
    return _merge(
        snapshot,
        FieldGroup.VELOCITY,
        now,
        speed_knots=record.speed_knots,
        course_degrees=record.course_degrees,
        magnetic_variation_degrees=record.magnetic_variation_degrees,
    )


def _apply_vtg(
    snapshot: NavigationSnapshot, record: VTGData, now: float
) -> NavigationSnapshot:
    if record.mode == _NOT_VALID_MODE:
        return _clear(snapshot, FieldGroup.VELOCITY, now)

    speed_knots = record.speed_knots
    if speed_knots is None and record.speed_kilometers_per_hour is not None:
        speed_knots = record.speed_kilometers_per_hour / _KILOMETERS_PER_HOUR_PER_KNOT

    return _merge(
        snapshot,
        FieldGroup.VELOCITY,
        now,
        speed_knots=speed_knots,
        course_degrees=record.track_true_degrees,
    )


def _apply_gsa(
    snapshot: NavigationSnapshot, record: GSAData, now: float
) -> NavigationSnapshot:
    if record.fix_type == _NO_FIX_TYPE:
        snapshot = _clear(snapshot, FieldGroup.POSITION, now)
        snapshot = _merge(snapshot, FieldGroup.FIX, now, fix_type=record.fix_type)
        # No satellites contribute to a solution that does not exist.
        snapshot = replace(snapshot, satellite_ids=())
    else:
        snapshot = _merge(
            snapshot,
            FieldGroup.FIX,
            now,
            fix_type=record.fix_type,
            satellite_ids=record.satellite_ids or None,
        )

    return _merge(
        snapshot,
        FieldGroup.PRECISION,
        now,
        horizontal_dilution_of_precision=record.horizontal_dilution_of_precision,
        vertical_dilution_of_precision=record.vertical_dilution_of_precision,
        position_dilution_of_precision=record.position_dilution_of_precision,
    )


def _view_key(record: GSVData) -> str:
    if record.signal_id is None:
        return record.talker
    return f"{record.talker}-{record.signal_id}"


def _apply_gsv(
    snapshot: NavigationSnapshot, record: GSVData, now: float
) -> NavigationSnapshot:
    """Collect one part of a GSV cycle; commit the table on the last part.

    A part that does not continue the pending cycle (lost sentence, or a
    restart) drops the partial view; the committed table stays as it was.
    """
    key = _view_key(record)
    pending = dict(snapshot.pending_satellites)
    previous = pending.pop(key, None)

    if record.message_number == 1:
        collected = record.satellites
    elif (
        previous is not None
        and previous.next_message == record.message_number
        and previous.total_messages == record.total_messages
    ):
        collected = previous.satellites + record.satellites
    else:
        return replace(snapshot, pending_satellites=frozen_mapping(pending))

    if record.message_number < record.total_messages:
        pending[key] = PendingSatelliteView(
            total_messages=record.total_messages,
            next_message=record.message_number + 1,
            satellites=collected,
        )
        return replace(snapshot, pending_satellites=frozen_mapping(pending))

    satellites = dict(snapshot.satellites)
    satellites[key] = collected
    in_view = dict(snapshot.satellites_in_view)
    in_view[key] = (
        record.satellites_in_view
        if record.satellites_in_view is not None
        else len(collected)
    )
    return replace(
        snapshot,
        satellites=frozen_mapping(satellites),
        satellites_in_view=frozen_mapping(in_view),
        pending_satellites=frozen_mapping(pending),
        updated_at=_stamp(snapshot, FieldGroup.SATELLITES, now),
    )


def _apply_gll(
    snapshot: NavigationSnapshot, record: GLLData, now: float
) -> NavigationSnapshot:
    snapshot = _merge(snapshot, FieldGroup.TIME, now, utc_time=record.utc_time)

    if record.status == _VOID_STATUS:
        return _clear(snapshot, FieldGroup.POSITION, now)

    return _merge(
        snapshot,
        FieldGroup.POSITION,
        now,
        latitude_degrees=record.latitude_degrees,
        longitude_degrees=record.longitude_degrees,
    )


def _apply_zda(
    snapshot: NavigationSnapshot, record: ZDAData, now: float
) -> NavigationSnapshot:
    return _merge(
        snapshot,
        FieldGroup.TIME,
        now,
        utc_time=record.utc_time,
        utc_date=record.date,
    )


def _apply_txt(
    snapshot: NavigationSnapshot, record: TXTData, now: float
) -> NavigationSnapshot:
    return _merge(snapshot, FieldGroup.TEXT, now, last_text=record.text or None)


def _apply_unrecognized(
    snapshot: NavigationSnapshot, record: UnrecognizedSentence, now: float
) -> NavigationSnapshot:
    return snapshot


_REDUCERS: dict[type, Callable[[NavigationSnapshot, Any, float], NavigationSnapshot]] = {
    GGAData: _apply_gga,
    RMCData: _apply_rmc,
    VTGData: _apply_vtg,
    GSAData: _apply_gsa,
    GSVData: _apply_gsv,
    GLLData: _apply_gll,
    ZDAData: _apply_zda,
    TXTData: _apply_txt,
    UnrecognizedSentence: _apply_unrecognized,
}


def apply_record(
    snapshot: NavigationSnapshot, record: SentenceRecord, now: float
) -> NavigationSnapshot:
    """Return the snapshot that results from applying ``record`` at time ``now``.

    Args:
        snapshot: The current state; never modified.
        record: A decoded sentence.
        now: Wall-clock seconds stamped on every field group that changes.

    Raises:
        TypeError: If ``record`` is not a sentence record.
    """
    try:
        reducer = _REDUCERS[type(record)]
    except KeyError:
        raise TypeError(f"not a sentence record: {record!r}") from None
    return reducer(snapshot, record, now)
