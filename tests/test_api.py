from datetime import date

from fastapi.testclient import TestClient

from index import app
from prayer_times import PrayerOffsets, compute_prayer_times

client = TestClient(app)

ZERO_OFFSETS = {
    "fajrOffset": 0,
    "sunriseOffset": 0,
    "zawalOffset": 0,
    "asrOffset": 0,
    "maghribOffset": 0,
    "ishaOffset": 0,
}

YANGON = {"lat": 16.8661, "lng": 96.1951, "timezoneOffset": 390}


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_times_for_gps_yangon():
    response = client.get("/api/timesForGPS", params={**YANGON, "date": "2024-01-01", **ZERO_OFFSETS})
    assert response.status_code == 200
    day = response.json()["times"]["2024-01-01"]
    assert abs(day["minutes"]["sunrise"] - 394) <= 1
    assert abs(day["minutes"]["maghrib"] - 1063) <= 1
    assert day["hijri"] == {"day": 19, "month": 6, "year": 1445, "monthName": "Jumada al-Akhirah"}
    assert day["event"] is None
    assert day["unreachable"] == []
    assert day["transit"].startswith("12:0") and day["transit"].endswith("PM")


def test_default_offsets_come_from_settings():
    plain = client.get("/api/timesForGPS", params={**YANGON, "date": "2024-01-01"}).json()
    zero = client.get("/api/timesForGPS", params={**YANGON, "date": "2024-01-01", **ZERO_OFFSETS}).json()
    shift = plain["times"]["2024-01-01"]["minutes"]["maghrib"] - zero["times"]["2024-01-01"]["minutes"]["maghrib"]
    assert shift == 4


def test_multiple_days():
    response = client.get("/api/timesForGPS", params={**YANGON, "date": "2024-03-10", "days": 3})
    times = response.json()["times"]
    assert list(times) == ["2024-03-10", "2024-03-11", "2024-03-12"]
    assert times["2024-03-11"]["event"] == "ramadan_start"


def test_umm_al_qura_in_ramadan():
    params = {"lat": 21.4225, "lng": 39.8262, "timezoneOffset": 180, "date": "2024-03-20",
              "calculationMethod": "UmmAlQura", **ZERO_OFFSETS}
    minutes = client.get("/api/timesForGPS", params=params).json()["times"]["2024-03-20"]["minutes"]
    assert (minutes["isha"] - minutes["maghrib"]) % 1440 == 120


def test_unreachable_times_are_null():
    params = {"lat": 65.0, "lng": 18.0, "timezoneOffset": 120, "date": "2024-06-21",
              "highLatitudeRule": "None"}
    day = client.get("/api/timesForGPS", params=params).json()["times"]["2024-06-21"]
    assert day["fajr"] is None and day["isha"] is None
    assert day["minutes"]["fajr"] is None
    assert day["unreachable"] == ["fajr", "isha"]


def test_bad_requests():
    assert client.get("/api/timesForGPS", params={**YANGON, "date": "01/01/2024"}).status_code == 400
    assert client.get("/api/timesForGPS", params={**YANGON, "calculationMethod": "Jafari"}).status_code == 422
    assert client.get("/api/timesForGPS", params={**YANGON, "asrSchool": 3}).status_code == 422
    assert client.get("/api/timesForGPS", params={"lat": 100, "lng": 0}).status_code == 422
    assert client.get("/api/timesForGPS", params={**YANGON, "days": 0}).status_code == 422


def test_city_endpoints():
    cities = client.get("/api/cities").json()["cities"]
    assert len(cities) == 22
    assert cities[0]["slug"] == "yangon"

    response = client.get("/api/timesForCity/yangon", params={"date": "2024-01-01", **ZERO_OFFSETS})
    assert response.status_code == 200
    body = response.json()
    assert body["city"] == "Yangon"
    assert abs(body["times"]["2024-01-01"]["minutes"]["sunrise"] - 394) <= 1

    assert client.get("/api/timesForCity/atlantis").status_code == 404


def test_hijri_endpoint():
    body = client.get("/api/hijri", params={"date": "2024-03-10", "offset": 1}).json()
    assert (body["day"], body["month"], body["year"]) == (1, 9, 1445)
    assert body["monthName"] == "Ramadan"
    assert body["event"] == "ramadan_start"


def test_event_endpoint():
    assert client.get("/api/event", params={"day": 25, "month": 9}).json()["event"]["key"] == "qadr"
    assert client.get("/api/event", params={"day": 20, "month": 9}).json() == {"event": None}
    assert client.get("/api/event", params={"day": 31, "month": 9}).status_code == 422


def test_timetable_matches_core_calculation():
    day = client.get("/api/timesForGPS", params={**YANGON, "date": "2024-01-01", **ZERO_OFFSETS}).json()
    expected = compute_prayer_times(16.8661, 96.1951, 6.5, date(2024, 1, 1), offsets=PrayerOffsets.zero())
    body = day["times"]["2024-01-01"]
    assert {name: body[name] for name in expected} == expected
