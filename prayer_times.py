"""
Prayer times from astronomical formulas, fully offline.
Fajr/Isha by twilight angle per calculation method, Asr by shadow factor,
Maghrib at sunset, Zawal at the midpoint of sunrise and sunset.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import NamedTuple, Optional, TypedDict

from hijri import is_ramadan
from solar import SUNRISE_ALTITUDE, asr_altitude, julian_date, solar_position, solve_time

logger = logging.getLogger(__name__)


class CalculationMethod(str, Enum):
    MWL = "MWL"
    KARACHI = "Karachi"
    EGYPT = "Egypt"
    UMM_AL_QURA = "UmmAlQura"
    CUSTOM = "Custom"


class AsrSchool(IntEnum):
    STANDARD = 1
    HANAFI = 2


class HighLatitudeRule(str, Enum):
    NONE = "None"
    MIDDLE_OF_NIGHT = "MiddleOfNight"
    ONE_SEVENTH = "OneSeventh"
    ANGLE_BASED = "AngleBased"


class MethodAngles(NamedTuple):
    fajr: float
    isha: float  # 0 means Isha is a fixed interval after sunset


METHOD_ANGLES = MappingProxyType({
    CalculationMethod.MWL: MethodAngles(-18.0, -17.0),
    CalculationMethod.KARACHI: MethodAngles(-18.0, -18.0),
    CalculationMethod.EGYPT: MethodAngles(-19.5, -17.5),
    CalculationMethod.UMM_AL_QURA: MethodAngles(-18.5, 0.0),
    CalculationMethod.CUSTOM: MethodAngles(-18.0, -18.0),
})

# Umm al-Qura Isha, hours after sunset
UMM_AL_QURA_ISHA = 1.5
UMM_AL_QURA_ISHA_RAMADAN = 2.0

PRAYERS = ("fajr", "sunrise", "zawal", "asr", "maghrib", "isha")


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    timezone: float  # hours east of UTC

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"longitude out of range: {self.lng}")
        if not -14.0 <= self.timezone <= 14.0:
            raise ValueError(f"UTC offset out of range: {self.timezone}")


@dataclass(frozen=True)
class PrayerOffsets:
    """Minutes added to each computed time (local safety margins)."""

    fajr: float = 0
    sunrise: float = 0
    zawal: float = 0
    asr: float = 0
    maghrib: float = 0
    isha: float = 0

    @classmethod
    def zero(cls) -> "PrayerOffsets":
        return cls()


DEFAULT_OFFSETS = PrayerOffsets(fajr=2, maghrib=4, isha=2)


class PrayerMinutes(TypedDict):
    fajr: Optional[int]
    sunrise: int
    zawal: int
    asr: int
    maghrib: int
    isha: Optional[int]


class PrayerTimesResult(TypedDict):
    fajr: Optional[str]
    sunrise: str
    zawal: str
    asr: str
    maghrib: str
    isha: Optional[str]
    minutes: PrayerMinutes


def normalize_hours(h: float) -> float:
    """Normalize hour to [0, 24)."""
    h = h % 24.0
    # -1e-20 % 24.0 == 24.0 in floating point
    return h if h < 24.0 else 0.0


def hours_to_minutes(h: float) -> int:
    """Minute of the local day, 0..1439."""
    return int(round(normalize_hours(h) * 60)) % 1440


def format_hm(h: float) -> str:
    """Decimal hours as a 12-hour clock string, e.g. '6:34 AM'."""
    total = hours_to_minutes(h)
    hour, minute = divmod(total, 60)
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {suffix}"


def parse_hm(text: str) -> int:
    """Minute of the day encoded by a format_hm string."""
    clock, suffix = text.strip().split(" ")
    hour, minute = (int(part) for part in clock.split(":"))
    if suffix not in ("AM", "PM") or not 1 <= hour <= 12 or not 0 <= minute < 60:
        raise ValueError(f"not a 12-hour time: {text!r}")
    return (hour % 12 + (12 if suffix == "PM" else 0)) * 60 + minute


def night_portion(rule: HighLatitudeRule, angle: float) -> float:
    """Share of the night used in place of an unreachable twilight angle."""
    if rule is HighLatitudeRule.ANGLE_BASED:
        return abs(angle) / 60.0
    if rule is HighLatitudeRule.ONE_SEVENTH:
        return 1.0 / 7.0
    if rule is HighLatitudeRule.MIDDLE_OF_NIGHT:
        return 1.0 / 2.0
    return 0.0


def _method_angles(method: CalculationMethod, custom_angles) -> MethodAngles:
    if custom_angles is None:
        return METHOD_ANGLES[method]
    if method is not CalculationMethod.CUSTOM:
        raise ValueError(f"custom angles require the Custom method, got {method.value}")
    fajr, isha = custom_angles
    return MethodAngles(-abs(float(fajr)), -abs(float(isha)))


def compute_prayer_times(
    lat: float,
    lng: float,
    timezone: float,
    day: Optional[date] = None,
    method: CalculationMethod = CalculationMethod.KARACHI,
    asr_school: AsrSchool = AsrSchool.HANAFI,
    high_lat_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_NIGHT,
    offsets: PrayerOffsets = DEFAULT_OFFSETS,
    hijri_offset: int = 0,
    custom_angles: Optional[tuple[float, float]] = None,
) -> PrayerTimesResult:
    """
    Get prayer times for one day.
    timezone: hours east of UTC (e.g. 6.5 for Myanmar).
    custom_angles: (fajr, isha) depression angles, only with the Custom method.
    Fajr and Isha are None when the sun never reaches their angle and
    high_lat_rule is NONE.
    Umm al-Qura Isha is fixed at sunset + 90 min (120 in Ramadan) before
    offsets; offsets then apply per field, so with DEFAULT_OFFSETS Isha lands
    88 min after the displayed Maghrib (118 in Ramadan).
    """
    location = Location(lat, lng, timezone)
    method = CalculationMethod(method)
    asr_school = AsrSchool(asr_school)
    high_lat_rule = HighLatitudeRule(high_lat_rule)
    angles = _method_angles(method, custom_angles)
    if day is None:
        day = date.today()
    elif isinstance(day, datetime):
        day = day.date()

    jd = julian_date(day)

    def solve(altitude, before_noon):
        return solve_time(location.lat, location.lng, location.timezone, jd, altitude, before_noon)

    sunrise = solve(SUNRISE_ALTITUDE, True).hours
    sunset = solve(SUNRISE_ALTITUDE, False).hours

    night = sunrise + 24.0 - sunset
    portion = night_portion(high_lat_rule, angles.fajr)
    use_fallback = high_lat_rule is not HighLatitudeRule.NONE

    fajr_solved = solve(angles.fajr, True)
    fajr = fajr_solved.hours
    if not fajr_solved.reachable:
        fajr = sunrise - night * portion if use_fallback else None
        logger.debug("Fajr at %s° unreachable at lat %s, fallback %s", angles.fajr, lat, high_lat_rule.value)

    if method is CalculationMethod.UMM_AL_QURA:
        if is_ramadan(day, hijri_offset):
            logger.debug("Ramadan on %s: Umm al-Qura Isha at sunset + %sh", day, UMM_AL_QURA_ISHA_RAMADAN)
            isha = sunset + UMM_AL_QURA_ISHA_RAMADAN
        else:
            isha = sunset + UMM_AL_QURA_ISHA
    else:
        isha_solved = solve(angles.isha, False)
        isha = isha_solved.hours
        if not isha_solved.reachable:
            isha = sunset + night * portion if use_fallback else None
            logger.debug("Isha at %s° unreachable at lat %s, fallback %s", angles.isha, lat, high_lat_rule.value)

    decl = solar_position(jd).declination
    asr = solve(asr_altitude(location.lat, decl, int(asr_school)), False).hours

    zawal = (sunrise + sunset) / 2.0

    raw = {
        "fajr": fajr,
        "sunrise": sunrise,
        "zawal": zawal,
        "asr": asr,
        "maghrib": sunset,
        "isha": isha,
    }
    adjusted = {
        name: None if value is None else value + getattr(offsets, name) / 60.0
        for name, value in raw.items()
    }

    result = {name: None if value is None else format_hm(value) for name, value in adjusted.items()}
    result["minutes"] = PrayerMinutes(
        **{name: None if value is None else hours_to_minutes(value) for name, value in adjusted.items()}
    )
    return PrayerTimesResult(**result)


# Name kept for callers of the original single-function API
calculate_prayer_times = compute_prayer_times


def prayer_timetable(
    lat: float,
    lng: float,
    timezone: float,
    start: date,
    days: int = 1,
    **options,
) -> "OrderedDict[str, PrayerTimesResult]":
    """Prayer times for `days` consecutive dates keyed by ISO date."""
    if days < 1:
        raise ValueError("days must be at least 1")
    table = OrderedDict()
    for i in range(days):
        current = start + timedelta(days=i)
        table[current.isoformat()] = compute_prayer_times(lat, lng, timezone, current, **options)
    return table


def unreachable_prayers(result: PrayerTimesResult) -> list[str]:
    return [name for name in PRAYERS if result[name] is None]
