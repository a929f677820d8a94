"""
Solar geometry for prayer times: Julian dates, a low-order solar ephemeris,
the hour-angle solver and the 3-pass iterative time solver.
All angles are in degrees, all times in decimal hours.
"""

import math
from datetime import date, datetime, timezone
from typing import NamedTuple

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0

# Altitude of the sun's upper limb at rise/set (refraction + solar radius)
SUNRISE_ALTITUDE = -0.833


class SolarPosition(NamedTuple):
    declination: float  # degrees
    equation_of_time: float  # minutes


class HourAngle(NamedTuple):
    degrees: float
    reachable: bool


class SolvedTime(NamedTuple):
    hours: float
    reachable: bool


def _deg2rad(d: float) -> float:
    return d * math.pi / 180.0


def _rad2deg(r: float) -> float:
    return r * 180.0 / math.pi


def _clamp_unit(x: float) -> float:
    return min(1.0, max(-1.0, x))


def dsin(d: float) -> float:
    return math.sin(_deg2rad(d))


def dcos(d: float) -> float:
    return math.cos(_deg2rad(d))


def dtan(d: float) -> float:
    return math.tan(_deg2rad(d))


def dasin(x: float) -> float:
    return _rad2deg(math.asin(_clamp_unit(x)))


def dacos(x: float) -> float:
    return _rad2deg(math.acos(_clamp_unit(x)))


def datan(x: float) -> float:
    return _rad2deg(math.atan(x))


def julian_date(moment: date | datetime) -> float:
    """
    Julian date of a calendar moment. Naive datetimes and plain dates are read
    as UTC; aware datetimes are converted to UTC first.
    """
    hour = 0.0
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        hour = moment.hour + moment.minute / 60.0 + (moment.second + moment.microsecond / 1e6) / 3600.0

    year, month = moment.year, moment.month
    day = moment.day + hour / 24.0
    if month <= 2:
        year -= 1
        month += 12
    A = math.floor(year / 100)
    B = 2 - A + math.floor(A / 4)
    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + B - 1524.5


def julian_day_number(day: date) -> int:
    """Integer Julian day number of a Gregorian date (noon-based)."""
    return int(math.floor(julian_date(day) + 0.5))


def solar_position(jd: float) -> SolarPosition:
    T = (jd - J2000) / DAYS_PER_CENTURY

    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T * T
    M = 357.52911 + 35999.05029 * T - 0.0001537 * T * T
    e = 0.016708634 - 0.000042037 * T - 0.0000001267 * T * T

    # Equation of centre
    C = (
        (1.914602 - 0.004817 * T) * dsin(M)
        + (0.019993 - 0.000101 * T) * dsin(2 * M)
        + 0.000289 * dsin(3 * M)
    )
    true_longitude = L0 + C
    obliquity = 23.439291 - 0.0130042 * T

    decl = dasin(dsin(obliquity) * dsin(true_longitude))

    y = dtan(obliquity / 2) ** 2
    eot = 4 * _rad2deg(
        y * dsin(2 * L0)
        - 2 * e * dsin(M)
        + 4 * e * y * dsin(M) * dcos(2 * L0)
        - 0.5 * y * y * dsin(4 * L0)
        - 1.25 * e * e * dsin(2 * M)
    )
    return SolarPosition(decl, eot)


def hour_angle(lat: float, decl: float, altitude: float) -> HourAngle:
    """
    Hour angle at which the sun stands at `altitude`.
    The raw cosine is checked before clamping: outside [-1, 1] the sun never
    reaches the altitude that day and the result is marked unreachable.
    """
    num = dsin(altitude) - dsin(lat) * dsin(decl)
    den = dcos(lat) * dcos(decl)
    if den == 0:
        ratio = math.copysign(math.inf, num)
    else:
        ratio = num / den
    return HourAngle(dacos(ratio), -1.0 <= ratio <= 1.0)


def asr_altitude(lat: float, decl: float, factor: int) -> float:
    """Altitude at which a shadow equals `factor` heights plus the noon shadow."""
    denom = factor + dtan(abs(lat - decl))
    if denom == 0:
        return 90.0
    return datan(1.0 / denom)


def solar_noon(lng: float, tz: float, jd: float) -> float:
    """Local time of solar transit for the day whose midnight UTC is `jd`."""
    eot = solar_position(jd + 0.5).equation_of_time
    return 12.0 + tz - lng / 15.0 - eot / 60.0


def solve_time(
    lat: float,
    lng: float,
    tz: float,
    jd: float,
    altitude: float,
    before_noon: bool,
    passes: int = 3,
) -> SolvedTime:
    """
    Local time at which the sun reaches `altitude`, before or after noon.
    Fixed-point iteration seeded at 12:00, refining the solar position at
    each pass; the last pass is used without a convergence test.
    """
    t = 12.0
    reachable = True
    for _ in range(passes):
        decl, eot = solar_position(jd + t / 24.0)
        noon = 12.0 + tz - lng / 15.0 - eot / 60.0
        H = hour_angle(lat, decl, altitude)
        reachable = H.reachable
        t = noon - H.degrees / 15.0 if before_noon else noon + H.degrees / 15.0
    return SolvedTime(t, reachable)
