"""JSON formatting utilities for navigation state."""

import json
from typing import Any

from navstate import FieldGroup, HealthReport, NavigationSnapshot
from navstate.nmea.fields import CONSTELLATIONS

__all__ = ["format_health", "format_snapshot", "format_snapshot_message"]


def _isoformat(value: Any) -> str | None:
    return value.isoformat() if value is not None else None


def _constellation(view: str) -> str:
    # Views are keyed by talker, with "-<signal id>" appended for NMEA 4.1.
    talker = view.split("-", 1)[0]
    return CONSTELLATIONS.get(talker, talker)


def format_snapshot(snapshot: NavigationSnapshot, now: float) -> dict[str, Any]:
    """Flatten a snapshot into JSON-compatible values.

    ``ages`` holds the seconds since each field group last changed (None for
    groups never seen), which is what a display needs to grey out stale data.
    """
    utc = snapshot.utc_datetime
    return {
        "has_position": snapshot.has_position,
        "lat": snapshot.latitude_degrees,
        "lon": snapshot.longitude_degrees,
        "alt": snapshot.altitude_meters,
        "geoid_separation": snapshot.geoid_separation_meters,
        "utc_time": _isoformat(snapshot.utc_time),
        "utc_date": _isoformat(snapshot.utc_date),
        "utc_datetime": _isoformat(utc),
        "fix_quality": snapshot.fix_quality,
        "fix_type": snapshot.fix_type,
        "num_satellites": snapshot.satellites_used,
        "satellite_ids": (
            list(snapshot.satellite_ids) if snapshot.satellite_ids is not None else None
        ),
        "speed_knots": snapshot.speed_knots,
        "speed_ms": snapshot.speed_meters_per_second,
        "track_degrees": snapshot.course_degrees,
        "hdop": snapshot.horizontal_dilution_of_precision,
        "vdop": snapshot.vertical_dilution_of_precision,
        "pdop": snapshot.position_dilution_of_precision,
        "satellites_in_view": dict(snapshot.satellites_in_view),
        "total_satellites_in_view": snapshot.total_satellites_in_view,
        "constellations": {view: _constellation(view) for view in snapshot.satellites},
        "satellites": {
            view: [
                {
                    "prn": satellite.prn,
                    "elevation": satellite.elevation_degrees,
                    "azimuth": satellite.azimuth_degrees,
                    "snr": satellite.snr_db,
                }
                for satellite in satellites
            ]
            for view, satellites in snapshot.satellites.items()
        },
        "text": snapshot.last_text,
        "ages": {group.value: snapshot.age(group, now) for group in FieldGroup},
    }


def format_snapshot_message(snapshot: NavigationSnapshot, now: float) -> str:
    """Serialize a snapshot into a JSON string for WebSocket transmission."""
    return json.dumps({"type": "snapshot", **format_snapshot(snapshot, now)})


def format_health(report: HealthReport) -> dict[str, Any]:
    return {
        "accepted_count": report.accepted_count,
        "accepted_by_kind": dict(report.accepted_by_kind),
        "error_counts": dict(report.error_counts),
        "error_total": report.error_total,
        "version": report.version,
    }
