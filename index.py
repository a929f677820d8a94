import logging
from datetime import date as date_type
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from cities import CITIES, find_city
from hijri import event_for_date, lookup_islamic_event, to_hijri
from prayer_times import (
    AsrSchool,
    CalculationMethod,
    HighLatitudeRule,
    PrayerOffsets,
    format_hm,
    prayer_timetable,
    unreachable_prayers,
)
from settings import get_settings
from solar import julian_date, solar_noon

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Prayer Times API",
    description="Offline Islamic prayer times, Hijri dates and occasions",
    version="2.0.0"
)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning(f"Rejected {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/")
def root():
    return {
        "service": "Prayer Times API",
        "status": "online",
        "endpoints": {
            "/api/timesForGPS": "Get prayer times for GPS coordinates",
            "/api/timesForCity/{slug}": "Get prayer times for a listed city",
            "/api/cities": "List known cities",
            "/api/hijri": "Convert a Gregorian date to the tabular Hijri calendar",
            "/api/event": "Look up the Islamic occasion of a Hijri day",
        }
    }


def parse_date(value: Optional[str]) -> date_type:
    if value is None:
        return date_type.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError("date must be YYYY-MM-DD") from None


class CalculationOptions:
    """Query parameters shared by the timetable endpoints; unset ones come from settings."""

    def __init__(
        self,
        calculationMethod: Optional[CalculationMethod] = None,
        asrSchool: Optional[int] = Query(None, ge=1, le=2),  # 1 standard, 2 Hanafi
        highLatitudeRule: Optional[HighLatitudeRule] = None,
        hijriOffset: Optional[int] = Query(None, ge=-3, le=3),
        fajrOffset: Optional[float] = None,
        sunriseOffset: Optional[float] = None,
        zawalOffset: Optional[float] = None,
        asrOffset: Optional[float] = None,
        maghribOffset: Optional[float] = None,
        ishaOffset: Optional[float] = None,
    ):
        defaults = settings.offsets
        self.method = calculationMethod or settings.calculation_method
        self.asr_school = settings.asr_school if asrSchool is None else AsrSchool(asrSchool)
        self.high_lat_rule = highLatitudeRule or settings.high_latitude_rule
        self.hijri_offset = settings.hijri_offset if hijriOffset is None else hijriOffset
        self.offsets = PrayerOffsets(
            fajr=defaults.fajr if fajrOffset is None else fajrOffset,
            sunrise=defaults.sunrise if sunriseOffset is None else sunriseOffset,
            zawal=defaults.zawal if zawalOffset is None else zawalOffset,
            asr=defaults.asr if asrOffset is None else asrOffset,
            maghrib=defaults.maghrib if maghribOffset is None else maghribOffset,
            isha=defaults.isha if ishaOffset is None else ishaOffset,
        )


def build_timetable(lat: float, lng: float, offset_hours: float, start: date_type, days: int,
                    options: CalculationOptions) -> dict:
    table = prayer_timetable(
        lat, lng, offset_hours, start, days,
        method=options.method,
        asr_school=options.asr_school,
        high_lat_rule=options.high_lat_rule,
        offsets=options.offsets,
        hijri_offset=options.hijri_offset,
    )
    response_times = {}

    for date_key, times in table.items():
        current_day = date_type.fromisoformat(date_key)
        hijri = to_hijri(current_day, options.hijri_offset)
        event = event_for_date(current_day, options.hijri_offset)

        response_times[date_key] = {
            **times,
            "transit": format_hm(solar_noon(lng, offset_hours, julian_date(current_day))),
            "unreachable": unreachable_prayers(times),
            "hijri": {"day": hijri.day, "month": hijri.month, "year": hijri.year,
                      "monthName": hijri.month_name},
            "event": event.key if event else None,
        }

    return response_times


@app.get("/api/timesForGPS")
def get_times_for_gps(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    date: Optional[str] = None,
    days: int = Query(1, ge=1, le=31),
    timezoneOffset: int = Query(0, ge=-840, le=840),  # Minutes east of UTC, e.g. 390 for UTC+6:30
    options: CalculationOptions = Depends(),
):
    # Convert minutes to hours (e.g., 390 -> 6.5)
    offset_hours = timezoneOffset / 60.0
    start_date = parse_date(date)
    return {"times": build_timetable(lat, lng, offset_hours, start_date, days, options)}


@app.get("/api/timesForCity/{slug}")
def get_times_for_city(
    slug: str,
    date: Optional[str] = None,
    days: int = Query(1, ge=1, le=31),
    options: CalculationOptions = Depends(),
):
    city = find_city(slug)
    if city is None:
        raise HTTPException(status_code=404, detail=f"Unknown city: {slug}")
    start_date = parse_date(date)
    return {
        "city": city.name,
        "times": build_timetable(city.lat, city.lng, city.timezone, start_date, days, options),
    }


@app.get("/api/cities")
def list_cities():
    return {"cities": [city._asdict() for city in CITIES]}


@app.get("/api/hijri")
def get_hijri(date: Optional[str] = None, offset: Optional[int] = Query(None, ge=-3, le=3)):
    day = parse_date(date)
    if offset is None:
        offset = settings.hijri_offset
    hijri = to_hijri(day, offset)
    event = lookup_islamic_event(hijri.day, hijri.month)
    return {
        "day": hijri.day,
        "month": hijri.month,
        "year": hijri.year,
        "monthName": hijri.month_name,
        "event": event.key if event else None,
    }


@app.get("/api/event")
def get_event(day: int = Query(..., ge=1, le=30), month: int = Query(..., ge=1, le=12)):
    event = lookup_islamic_event(day, month)
    if event is None:
        return {"event": None}
    return {"event": {"key": event.key, "month": event.month, "day": event.day, "range": event.range}}
