"""
Tabular (civil) Hijri calendar and the fixed table of Islamic occasions.
The conversion is arithmetic only; it can differ by a day or two from
locally sighted dates, which the day offset is there to correct.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import NamedTuple, Optional

from solar import julian_day_number

ISLAMIC_EPOCH = 1948440
CYCLE_DAYS = 10631  # 30 tabular years

MONTH_NAMES = (
    "Muharram",
    "Safar",
    "Rabi al-Awwal",
    "Rabi al-Thani",
    "Jumada al-Ula",
    "Jumada al-Akhirah",
    "Rajab",
    "Shaban",
    "Ramadan",
    "Shawwal",
    "Dhu al-Qadah",
    "Dhu al-Hijjah",
)

RAMADAN = 9


class HijriDate(NamedTuple):
    day: int
    month: int
    year: int

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    def __str__(self) -> str:
        return f"{self.day} {self.month_name} {self.year}"


@dataclass(frozen=True)
class IslamicEvent:
    month: int
    day: int
    key: str
    range: Optional[int] = None

    def covers(self, day: int, month: int) -> bool:
        if month != self.month:
            return False
        if self.range is None:
            return day == self.day
        return self.day <= day < self.day + self.range


ISLAMIC_EVENTS = (
    IslamicEvent(1, 1, "new_year"),
    IslamicEvent(1, 10, "ashura"),
    IslamicEvent(3, 12, "mawlid"),
    IslamicEvent(7, 27, "isra"),
    IslamicEvent(8, 15, "baraat"),
    IslamicEvent(9, 1, "ramadan_start"),
    IslamicEvent(9, 21, "qadr", range=10),
    IslamicEvent(10, 1, "fitr"),
    IslamicEvent(12, 8, "hajj", range=6),
    IslamicEvent(12, 9, "arafah"),
    IslamicEvent(12, 10, "adha"),
)


def to_hijri(day: date, offset: int = 0) -> HijriDate:
    """
    Convert a Gregorian date to the tabular Hijri calendar (Kuwaiti algorithm).
    `offset` shifts the Gregorian date by whole days before conversion.
    """
    jd = julian_day_number(day + timedelta(days=offset))

    l0 = jd - ISLAMIC_EPOCH + 10632
    n = (l0 - 1) // CYCLE_DAYS
    l = l0 - CYCLE_DAYS * n + 354
    j = ((10985 - l) // 5316) * ((50 * l + 2) // 17719) + (l // 5670) * ((43 * l + 2) // 15238)
    l = l - ((30 - j) // 15) * ((17719 * j + 2) // 50) - (j // 16) * ((15238 * j + 2) // 43) + 29

    month = (24 * l) // 709
    day_of_month = l - (709 * month) // 24
    year = 30 * n + j - 30
    return HijriDate(day_of_month, month, year)


def lookup_islamic_event(hijri_day: int, hijri_month: int) -> Optional[IslamicEvent]:
    """First occasion in table order whose day or range covers the Hijri day."""
    for event in ISLAMIC_EVENTS:
        if event.covers(hijri_day, hijri_month):
            return event
    return None


def event_for_date(day: date, offset: int = 0) -> Optional[IslamicEvent]:
    hijri = to_hijri(day, offset)
    return lookup_islamic_event(hijri.day, hijri.month)


def is_ramadan(day: date, offset: int = 0) -> bool:
    return to_hijri(day, offset).month == RAMADAN
