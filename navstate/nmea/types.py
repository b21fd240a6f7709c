"""NMEA data types for parsed sentences.

This module defines the closed set of sentence records the parser produces.

Design Decisions:
    1. Optional fields (float | None): NMEA fields may be empty, indicated by
       consecutive commas. Using None distinguishes "no data received" from
       "measured zero" - the aggregator relies on this to keep the last known
       value instead of overwriting it.

    2. Frozen dataclasses with tuple containers: records are handed from the
       ingest thread to readers, so they must not be mutable after decoding.

    3. Every record carries its talker ID, so a GPGGA and a GNGGA decode to the
       same record type and the constellation stays visible.
"""

import datetime
import enum
from dataclasses import dataclass

__all__ = [
    "GGAData",
    "GLLData",
    "GSAData",
    "GSVData",
    "RMCData",
    "SatelliteInfo",
    "SentenceKind",
    "SentenceRecord",
    "TXTData",
    "UnrecognizedSentence",
    "VTGData",
    "ZDAData",
]


class SentenceKind(enum.Enum):
    """Sentence types with a dedicated decoder (the part of the tag after the talker)."""

    GGA = "GGA"
    RMC = "RMC"
    VTG = "VTG"
    GSA = "GSA"
    GSV = "GSV"
    GLL = "GLL"
    ZDA = "ZDA"
    TXT = "TXT"


@dataclass(frozen=True)
class GGAData:
    """Parsed GGA (Global Positioning System Fix Data) sentence.

    Attributes:
        talker: Two-letter talker ID (e.g. "GP", "GN").

        utc_time: UTC time of the fix. None if field was empty.

        latitude_degrees: Latitude in decimal degrees, positive=North.
            None if no fix or field empty.

        longitude_degrees: Longitude in decimal degrees, positive=East.
            None if no fix or field empty.

        fix_quality: GPS fix quality indicator, None if the field was empty:
            0 = Invalid (no fix)
            1 = GPS fix (SPS)
            2 = DGPS fix
            4 = RTK Fixed
            5 = RTK Float
            6 = Dead reckoning mode

        num_satellites: Number of satellites used in the fix solution.

        horizontal_dilution_of_precision: HDOP value. Lower is better.

        altitude_meters: Altitude above mean sea level (MSL) in meters.

        geoid_separation_meters: Height of geoid (MSL) above WGS84 ellipsoid.

        dgps_age_seconds: Age of differential corrections, if any.

        dgps_station_id: Differential reference station ID, if any.
    """

    talker: str
    utc_time: datetime.time | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    fix_quality: int | None
    num_satellites: int | None
    horizontal_dilution_of_precision: float | None
    altitude_meters: float | None
    geoid_separation_meters: float | None
    dgps_age_seconds: float | None = None
    dgps_station_id: str | None = None


@dataclass(frozen=True)
class RMCData:
    """Parsed RMC (Recommended Minimum Specific GNSS Data) sentence.

    The only common sentence that carries the date, so it is what completes
    the UTC timestamp.

    Attributes:
        status: 'A' = data valid, 'V' = navigation receiver warning (no fix).
        speed_knots: Speed over ground in knots.
        course_degrees: Course over ground relative to true north.
        date: UTC date of the fix.
        magnetic_variation_degrees: Signed magnetic variation, East positive.
        mode: FAA mode indicator (NMEA 2.3+), None on older receivers.
    """

    talker: str
    utc_time: datetime.time | None
    status: str | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    speed_knots: float | None
    course_degrees: float | None
    date: datetime.date | None
    magnetic_variation_degrees: float | None = None
    mode: str | None = None


@dataclass(frozen=True)
class VTGData:
    """Parsed VTG (Track Made Good and Ground Speed) sentence.

    Attributes:
        track_true_degrees: Heading/track relative to true north in degrees.
            None when stationary (GNSS cannot determine heading without movement).

        track_magnetic_degrees: Track relative to magnetic north.

        speed_knots: Ground speed in knots.

        speed_kilometers_per_hour: Ground speed in km/h.

        mode: FAA mode indicator (NMEA 2.3+):
            'A' = Autonomous, 'D' = Differential, 'E' = Estimated,
            'N' = Not valid. None if field was missing (older receivers).
    """

    talker: str
    track_true_degrees: float | None
    track_magnetic_degrees: float | None
    speed_knots: float | None
    speed_kilometers_per_hour: float | None
    mode: str | None = None


@dataclass(frozen=True)
class GSAData:
    """Parsed GSA (GNSS DOP and Active Satellites) sentence.

    Attributes:
        selection_mode: 'M' = manual 2D/3D, 'A' = automatic.
        fix_type: 1 = no fix, 2 = 2D fix, 3 = 3D fix.
        satellite_ids: PRNs of the satellites used in the solution (up to 12).
        system_id: GNSS system ID (NMEA 4.1+), None when absent.
    """

    talker: str
    selection_mode: str | None
    fix_type: int | None
    satellite_ids: tuple[int, ...]
    position_dilution_of_precision: float | None
    horizontal_dilution_of_precision: float | None
    vertical_dilution_of_precision: float | None
    system_id: int | None = None


@dataclass(frozen=True)
class SatelliteInfo:
    """One satellite entry of a GSV sentence.

    Attributes:
        prn: Satellite PRN / slot number.
        elevation_degrees: Elevation above the horizon (0-90).
        azimuth_degrees: Azimuth from true north (0-359).
        snr_db: Signal-to-noise ratio in dB-Hz, None when not tracking.
    """

    prn: int
    elevation_degrees: int | None
    azimuth_degrees: int | None
    snr_db: int | None


@dataclass(frozen=True)
class GSVData:
    """Parsed GSV (GNSS Satellites in View) sentence.

    A full view is spread across ``total_messages`` sentences of up to four
    satellites each.
    """

    talker: str
    total_messages: int
    message_number: int
    satellites_in_view: int | None
    satellites: tuple[SatelliteInfo, ...]
    signal_id: str | None = None


@dataclass(frozen=True)
class GLLData:
    """Parsed GLL (Geographic Position - Latitude/Longitude) sentence."""

    talker: str
    latitude_degrees: float | None
    longitude_degrees: float | None
    utc_time: datetime.time | None
    status: str | None
    mode: str | None = None


@dataclass(frozen=True)
class ZDAData:
    """Parsed ZDA (Time and Date) sentence.

    Attributes:
        date: UTC date, None if any of day, month or year was empty.
        local_zone_hours: Local zone offset hours (-13..13).
        local_zone_minutes: Local zone offset minutes.
    """

    talker: str
    utc_time: datetime.time | None
    date: datetime.date | None
    local_zone_hours: int | None = None
    local_zone_minutes: int | None = None


@dataclass(frozen=True)
class TXTData:
    """Parsed TXT (Text Transmission) sentence, e.g. receiver boot banners."""

    talker: str
    total_messages: int | None
    message_number: int | None
    text_id: int | None
    text: str


@dataclass(frozen=True)
class UnrecognizedSentence:
    """A well-formed sentence whose kind has no decoder.

    Attributes:
        tag: The full address field, e.g. "PUBX" or "GPDTM".
        fields: The remaining raw field strings, undecoded.
        start: The start delimiter, "$" or "!" (encapsulated sentences such
            as AIVDM).
    """

    tag: str
    fields: tuple[str, ...]
    start: str = "$"


SentenceRecord = (
    GGAData
    | RMCData
    | VTGData
    | GSAData
    | GSVData
    | GLLData
    | ZDAData
    | TXTData
    | UnrecognizedSentence
)
