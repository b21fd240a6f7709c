"""Navigation snapshot: the composite state folded from decoded sentences.

Fields are organised in field groups. Each group carries the wall-clock time
of the sentence that last set it, so a slow group (satellites in view arrive
far less often than position fixes) shows its own staleness without holding
back the others.

Snapshots are immutable: the aggregator builds a new one for every record and
readers can keep a reference as long as they like.
"""

import datetime
import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from navstate.nmea.types import SatelliteInfo

__all__ = ["FieldGroup", "NavigationSnapshot", "PendingSatelliteView", "frozen_mapping"]

_KNOTS_TO_METERS_PER_SECOND = 0.514444


class FieldGroup(enum.Enum):
    """Independently timestamped groups of snapshot fields."""

    POSITION = "position"
    TIME = "time"
    FIX = "fix"
    VELOCITY = "velocity"
    PRECISION = "precision"
    SATELLITES = "satellites"
    TEXT = "text"


GROUP_FIELDS: Mapping[FieldGroup, tuple[str, ...]] = MappingProxyType({
    FieldGroup.POSITION: (
        "latitude_degrees",
        "longitude_degrees",
        "altitude_meters",
        "geoid_separation_meters",
    ),
    FieldGroup.TIME: ("utc_time", "utc_date"),
    FieldGroup.FIX: ("fix_quality", "fix_type", "satellites_used", "satellite_ids"),
    FieldGroup.VELOCITY: (
        "speed_knots",
        "course_degrees",
        "magnetic_variation_degrees",
    ),
    FieldGroup.PRECISION: (
        "horizontal_dilution_of_precision",
        "vertical_dilution_of_precision",
        "position_dilution_of_precision",
    ),
    FieldGroup.SATELLITES: ("satellites", "satellites_in_view"),
    FieldGroup.TEXT: ("last_text",),
})


def frozen_mapping(values: Mapping | None = None) -> Mapping:
    """Wrap a copy of ``values`` in a read-only mapping proxy."""
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class PendingSatelliteView:
    """A GSV cycle that has not received its last sentence yet."""

    total_messages: int
    next_message: int
    satellites: tuple[SatelliteInfo, ...]


@dataclass(frozen=True)
class NavigationSnapshot:
    """The user-facing navigation state.

    Latitude and longitude stay None until a fix-bearing sentence has been
    seen, and return to None when the receiver asserts loss of fix. Every
    other field keeps its last known value when a sentence leaves it empty;
    ``updated_at`` shows how old that value is.

    Attributes:
        latitude_degrees: Latitude in decimal degrees, positive=North.
        longitude_degrees: Longitude in decimal degrees, positive=East.
        altitude_meters: Altitude above mean sea level.
        geoid_separation_meters: Geoid height above the WGS84 ellipsoid.

        utc_time: Time of day of the latest fix (GGA, RMC, GLL, ZDA).
        utc_date: UTC date (RMC, ZDA).

        fix_quality: GGA fix quality indicator (0 = no fix).
        fix_type: GSA fix dimension (1 = none, 2 = 2D, 3 = 3D).
        satellites_used: Number of satellites used in the solution.
        satellite_ids: PRNs of the satellites used (GSA).

        speed_knots: Ground speed in knots.
        course_degrees: Heading over ground, relative to true north.
        magnetic_variation_degrees: Signed magnetic variation, East positive.

        horizontal_dilution_of_precision: HDOP.
        vertical_dilution_of_precision: VDOP.
        position_dilution_of_precision: PDOP.

        satellites: Satellites in view, per talker (constellation).
        satellites_in_view: Reported number in view, per talker.

        last_text: Most recent TXT message.

        updated_at: Wall-clock seconds at which each field group last changed.
    """

    latitude_degrees: float | None = None
    longitude_degrees: float | None = None
    altitude_meters: float | None = None
    geoid_separation_meters: float | None = None

    utc_time: datetime.time | None = None
    utc_date: datetime.date | None = None

    fix_quality: int | None = None
    fix_type: int | None = None
    satellites_used: int | None = None
    satellite_ids: tuple[int, ...] | None = None

    speed_knots: float | None = None
    course_degrees: float | None = None
    magnetic_variation_degrees: float | None = None

    horizontal_dilution_of_precision: float | None = None
    vertical_dilution_of_precision: float | None = None
    position_dilution_of_precision: float | None = None

    satellites: Mapping[str, tuple[SatelliteInfo, ...]] = field(
        default_factory=frozen_mapping
    )
    satellites_in_view: Mapping[str, int] = field(default_factory=frozen_mapping)

    last_text: str | None = None

    updated_at: Mapping[FieldGroup, float] = field(default_factory=frozen_mapping)

    # GSV cycles in progress, keyed like ``satellites``.
    pending_satellites: Mapping[str, PendingSatelliteView] = field(
        default_factory=frozen_mapping, repr=False, compare=False
    )

    @property
    def has_position(self) -> bool:
        return self.latitude_degrees is not None and self.longitude_degrees is not None

    @property
    def utc_datetime(self) -> datetime.datetime | None:
        """Date and time combined, once both have been received."""
        if self.utc_date is None or self.utc_time is None:
            return None
        return datetime.datetime.combine(
            self.utc_date, self.utc_time, tzinfo=datetime.timezone.utc
        )

    @property
    def speed_meters_per_second(self) -> float | None:
        if self.speed_knots is None:
            return None
        return self.speed_knots * _KNOTS_TO_METERS_PER_SECOND

    @property
    def total_satellites_in_view(self) -> int | None:
        if not self.satellites_in_view:
            return None
        return sum(self.satellites_in_view.values())

    def age(self, group: FieldGroup, now: float) -> float | None:
        """Seconds since ``group`` last changed, or None if it never did."""
        updated = self.updated_at.get(group)
        if updated is None:
            return None
        return now - updated
