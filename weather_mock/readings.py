# weather_mock/readings.py

import random
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

CITIES = ("New York", "London", "Paris", "Tokyo", "Sydney", "Lagos", "Dubai", "Rio")
CONDITIONS = ("Sunny", "Partly Cloudy", "Cloudy", "Rainy", "Stormy", "Foggy", "Snowy")

STATUS_CODES_2XX = (200, 201, 202, 204)
STATUS_CODES_4XX = (400, 401, 403, 404, 405)
STATUS_CODES_5XX = (500, 501, 502, 503, 504)

# size query param
DEFAULT_SIZE = 10
MIN_SIZE = 10
MAX_SIZE = 100

# simulated network latency, milliseconds
MIN_DELAY_MS = 0
MAX_DELAY_MS = 5000

MAX_TIMESTAMP_OFFSET_HOURS = 12

_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")


def parse_size(raw):
    """
    Returns (size, defaulted). Anything missing, unparseable or
    outside [MIN_SIZE, MAX_SIZE] becomes DEFAULT_SIZE.
    """
    match = _LEADING_INT.match(raw) if raw is not None else None
    if match is None:
        return DEFAULT_SIZE, True

    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    # anything past three digits is out of range, don't hand it to int()
    if len(digits) > len(str(MAX_SIZE)):
        return DEFAULT_SIZE, True

    size = int(sign + digits)
    if size < MIN_SIZE or size > MAX_SIZE:
        return DEFAULT_SIZE, True
    return size, False


def pick_delay_ms(rng=random) -> int:
    return rng.randint(MIN_DELAY_MS, MAX_DELAY_MS)


def pick_status_code(rng=random) -> int:
    """Weighted 70/15/15 draw over the 2xx/4xx/5xx classes, then uniform within the class."""
    roll = rng.randint(0, 99)
    if roll < 70:
        return rng.choice(STATUS_CODES_2XX)
    elif roll < 85:
        return rng.choice(STATUS_CODES_4XX)
    else:
        return rng.choice(STATUS_CODES_5XX)


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def format_timestamp(moment: datetime) -> str:
    # e.g. 2024-05-01T13:45:00.123Z
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_weather_readings(count: int, rng=random, now: Optional[datetime] = None) -> list:
    """Builds `count` synthetic readings timestamped within +/- 12 hours of `now`."""
    if now is None:
        now = datetime.now(timezone.utc)

    readings = []
    for _ in range(count):
        offset = timedelta(hours=rng.randint(-MAX_TIMESTAMP_OFFSET_HOURS, MAX_TIMESTAMP_OFFSET_HOURS))
        readings.append({
            "city": rng.choice(CITIES),
            "timestamp": format_timestamp(now + offset),
            "temperature": round(rng.uniform(5.0, 40.0), 2),
            "humidity": rng.randint(20, 99),
            "condition": rng.choice(CONDITIONS),
        })
    return readings


def success_message(count: int) -> str:
    return f"Successfully retrieved {count} weather readings."


def error_message(status_code: int) -> str:
    return f"An error occurred with status code {status_code}. This is a dummy error for testing."
