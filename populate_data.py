import math
import random
import sys
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from weatherboard.config import DB_PATH, LOCAL_TZ, SUPABASE_ANON_KEY, SUPABASE_URL
from weatherboard.logs import log
from weatherboard.store import StoreError, open_store

DAYS = 7
SAMPLE_LOCATIONS = [
    {"name": "Headquarters", "latitude": 40.7128, "longitude": -74.0060, "elevation": 10, "timezone": "America/New_York"},
    {"name": "East Station", "latitude": 40.7589, "longitude": -73.9851, "elevation": 15, "timezone": "America/New_York"},
    {"name": "West Station", "latitude": 40.7831, "longitude": -73.9712, "elevation": 20, "timezone": "America/New_York"},
]


def location_offset(name: str) -> float:
    if "East" in name:
        return 1.0
    if "West" in name:
        return -1.0
    return 0.0


def generate_readings(location: dict, now: datetime, rng: random.Random, days: int = DAYS) -> list[dict]:
    """Hourly readings for the last `days` days with weekly and daily swings."""
    readings = []
    for day in range(days):
        for hour in range(24):
            recorded_at = (now - timedelta(days=days - 1 - day)).replace(
                hour=hour, minute=rng.randrange(60), second=0, microsecond=0
            )
            week_swing = math.sin((day - 3.5) * math.pi / 7) * 5
            hour_swing = math.sin((hour - 14) * math.pi / 24) * 8
            temperature = 20 + week_swing + hour_swing + location_offset(location["name"]) + (rng.random() - 0.5) * 3
            humidity = 60 - hour_swing * 1.5 + (rng.random() - 0.5) * 10
            rainy = 6 <= hour <= 18 and rng.random() > 0.9
            readings.append(
                {
                    "location_id": location["id"],
                    "recorded_at": recorded_at,
                    "temperature_c": round(temperature, 1),
                    "humidity_percent": round(max(30.0, min(90.0, humidity)), 1),
                    "pressure_hpa": round(1013 + (rng.random() - 0.5) * 10 + week_swing, 1),
                    "wind_speed_ms": round(5 + math.sin(hour * math.pi / 12) * 8 + rng.random() * 3, 1),
                    "wind_direction_deg": rng.randrange(360),
                    "precipitation_mm": round(rng.random() * 3, 1) if rainy else 0.0,
                }
            )
    return readings


def populate(store, now: datetime, seed: int | None = None) -> dict:
    rng = random.Random(seed)
    log("Clearing existing data...", name="populate")
    store.clear()

    created = [store.add_location(location) for location in SAMPLE_LOCATIONS]
    log(f"Created {len(created)} locations", name="populate")

    readings = []
    for location in created:
        readings.extend(generate_readings(location, now, rng))
    log(f"Generated {len(readings)} weather readings", name="populate")

    inserted = store.add_readings(readings)
    log(f"Inserted {inserted}/{len(readings)} weather readings", name="populate")
    return {"locations": len(created), "readings": inserted}


def main() -> int:
    store = open_store(DB_PATH, SUPABASE_URL, SUPABASE_ANON_KEY)
    now = datetime.now(ZoneInfo(LOCAL_TZ))
    try:
        summary = populate(store, now)
    except StoreError as exc:
        log(f"ERROR: populate failed ({exc}).", name="populate")
        return 1
    log(
        f"Done: {summary['locations']} locations, {summary['readings']} readings "
        f"({DAYS} days x 24 hours) in {store.name}.",
        name="populate",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
