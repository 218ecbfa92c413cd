# traffic_sampler.py

import os
import sys
import time
import requests
import pandas as pd
from concurrent.futures import ThreadPoolExecutor

# config
WEATHER_MOCK_URL = os.getenv("WEATHER_MOCK_URL", "http://localhost:8080")
SAMPLE_COUNT = int(os.getenv("SAMPLE_COUNT", 100))
SAMPLE_WORKERS = int(os.getenv("SAMPLE_WORKERS", 20)) # /weather can take up to 5s, so sample in parallel
SAMPLE_SIZE = int(os.getenv("SAMPLE_SIZE", 10))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", 10))

# retry mechanism for initial connection
MAX_RETRIES = 10
RETRY_DELAY_SECONDS = 5


def status_class(status_code):
    """200 -> '2xx', None (no response) -> None"""
    if status_code is None:
        return None
    return f"{status_code // 100}xx"


def wait_for_service(base_url, max_retries=MAX_RETRIES, retry_delay=RETRY_DELAY_SECONDS):
    """Polls /health until the mock service answers 200."""
    for attempt in range(max_retries):
        try:
            response = requests.get(f"{base_url}/health", timeout=5)
            response.raise_for_status()
            print(f"Mock weather service is healthy at {base_url}.")
            return True
        except requests.exceptions.RequestException as e:
            print(f"Health check failed (Attempt {attempt + 1}/{max_retries}): {e}")
            if attempt < max_retries - 1:
                time.sleep(retry_delay) # wait before retrying
    print(f"Mock weather service at {base_url} did not become healthy after {max_retries} attempts.")
    return False


def sample_once(base_url, size=SAMPLE_SIZE, timeout=REQUEST_TIMEOUT_SECONDS):
    """
    Fires one GET /weather and records what came back.
    Connection errors and timeouts are recorded, not raised.
    """
    started = time.monotonic()
    try:
        response = requests.get(f"{base_url}/weather", params={"size": size}, timeout=timeout)
    except requests.exceptions.RequestException as e:
        return {
            "status_code": None,
            "status_class": None,
            "latency_ms": round((time.monotonic() - started) * 1000, 1),
            "readings": None,
            "error": str(e),
        }

    latency_ms = round((time.monotonic() - started) * 1000, 1)
    readings = None
    if response.content:
        try:
            readings = len(response.json().get("readings", []))
        except ValueError:
            readings = None

    return {
        "status_code": response.status_code,
        "status_class": status_class(response.status_code),
        "latency_ms": latency_ms,
        "readings": readings,
        "error": None,
    }


def collect_samples(base_url, count=SAMPLE_COUNT, workers=SAMPLE_WORKERS, size=SAMPLE_SIZE):
    with ThreadPoolExecutor(max_workers=workers) as pool:
        records = list(pool.map(lambda _: sample_once(base_url, size), range(count)))
    return pd.DataFrame(records, columns=["status_code", "status_class", "latency_ms", "readings", "error"])


def summarize(df):
    """Class fractions, per-code counts and latency stats of a sample frame."""
    answered = df[df["status_code"].notna()]
    summary = {
        "total_requests": len(df),
        "failed_requests": int(df["status_code"].isna().sum()),
        "class_fractions": {},
        "status_counts": {},
        "latency_ms": {"min": None, "mean": None, "max": None},
    }
    if answered.empty:
        return summary

    summary["class_fractions"] = {
        cls: round(float(frac), 4)
        for cls, frac in answered["status_class"].value_counts(normalize=True).sort_index().items()
    }
    summary["status_counts"] = {
        int(code): int(n) for code, n in answered["status_code"].value_counts().sort_index().items()
    }
    summary["latency_ms"] = {
        "min": float(answered["latency_ms"].min()),
        "mean": round(float(answered["latency_ms"].mean()), 1),
        "max": float(answered["latency_ms"].max()),
    }
    return summary


def print_summary(summary):
    print(f"Requests sent: {summary['total_requests']} (no response: {summary['failed_requests']})")
    for cls, frac in summary["class_fractions"].items():
        print(f"  {cls}: {frac:.1%}")
    for code, n in summary["status_counts"].items():
        print(f"  status {code}: {n}")
    latency = summary["latency_ms"]
    print(f"Latency ms: min={latency['min']} mean={latency['mean']} max={latency['max']}")


def main():
    print("Starting mock weather traffic sampler...")
    if not wait_for_service(WEATHER_MOCK_URL):
        return 1

    df = collect_samples(WEATHER_MOCK_URL)
    print_summary(summarize(df))
    return 0


if __name__ == "__main__":
    sys.exit(main())
