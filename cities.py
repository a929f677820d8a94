"""Named locations served by the city endpoints (Myanmar, UTC+6:30)."""

from typing import NamedTuple, Optional


class City(NamedTuple):
    name: str
    slug: str
    lat: float
    lng: float
    timezone: float


CITIES = (
    City("Yangon", "yangon", 16.8661, 96.1951, 6.5),
    City("Mandalay", "mandalay", 21.9588, 96.0891, 6.5),
    City("Naypyidaw", "naypyidaw", 19.7633, 96.0785, 6.5),
    City("Taunggyi", "taunggyi", 20.7888, 97.0333, 6.5),
    City("Mawlamyine", "mawlamyine", 16.4833, 97.6333, 6.5),
    City("Bago", "bago", 17.3333, 96.4833, 6.5),
    City("Pathein", "pathein", 16.7833, 94.7333, 6.5),
    City("Pyay", "pyay", 18.8167, 95.2167, 6.5),
    City("Monywa", "monywa", 22.1167, 95.1333, 6.5),
    City("Sittwe", "sittwe", 20.15, 92.9, 6.5),
    City("Lashio", "lashio", 22.95, 97.75, 6.5),
    City("Meiktila", "meiktila", 20.8833, 95.85, 6.5),
    City("Magway", "magway", 20.15, 94.9167, 6.5),
    City("Myitkyina", "myitkyina", 25.3833, 97.4, 6.5),
    City("Dawei", "dawei", 14.0833, 98.2, 6.5),
    City("Hpa-An", "hpa-an", 16.8833, 97.6333, 6.5),
    City("Loikaw", "loikaw", 19.6667, 97.2, 6.5),
    City("Hakha", "hakha", 22.65, 93.6, 6.5),
    City("Kalay", "kalay", 23.2, 94.0167, 6.5),
    City("Pakokku", "pakokku", 21.3333, 95.0833, 6.5),
    City("Thaton", "thaton", 16.9167, 97.3667, 6.5),
    City("Pyin Oo Lwin", "pyin-oo-lwin", 22.0315, 96.471, 6.5),
)

_BY_SLUG = {city.slug: city for city in CITIES}


def find_city(slug: str) -> Optional[City]:
    return _BY_SLUG.get(slug.lower())
