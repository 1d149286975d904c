"""
Open-Meteo daily weather fetcher
================================
Source: Open-Meteo forecast/archive API (free, no key)
API   : GET https://api.open-meteo.com/v1/forecast

Usage (from project root):
    python -m orchard_risk.weather_fetcher --lat 34.08 --lon 74.80 \
        --start 2025-05-01 --end 2025-05-07
    python -m orchard_risk.weather_fetcher ... --save

Or call from code:
    from orchard_risk.weather_fetcher import get_climate_inputs
    inputs = get_climate_inputs(34.08, 74.80, "2025-05-01", "2025-05-07")

Output:
    A dict of climate inputs averaged over the period, ready for the risk
    engine: temperature, rainfall (mm/day), relativeHumidity, windSpeed, and
    the derived soilMoisture, canopyHumidity and wetnessHours.

Derived values (rough placeholders until field sensors are available):
    soilMoisture   = min(100, round(10 + rain × 4 + rh / 5))
    canopyHumidity = min(100, round(rh − 3))
    wetnessHours   = round(min(168, rain × 3 + rh / 3))
"""

import argparse
import json
import logging
import math
from pathlib import Path

import pandas as pd
import requests

from orchard_risk.config import (
    CACHE_DIR,
    DAILY_VARIABLES,
    MAX_WETNESS_HOURS,
    OPEN_METEO_URL,
    REQUEST_TIMEOUT,
    WEATHER_CACHE_FNAME,
)

log = logging.getLogger(__name__)

# Open-Meteo daily column → engine input name
COLUMN_MAP = {
    "temperature_2m_mean":       "temperature",
    "precipitation_sum":         "rainfall",
    "relative_humidity_2m_mean": "relativeHumidity",
    "windspeed_10m_max":         "windSpeed",
}

# Summary keys → legacy names used by the climate form
FETCHED_TO_FORM = {
    "temperature":      "temperature",
    "relativeHumidity": "rh",
    "rainfall":         "weeklyRainfall",
    "wetnessHours":     "leafWetness",
    "windSpeed":        "windSpeed",
    "soilMoisture":     "soilMoisture",
    "canopyHumidity":   "canopyHumidity",
}


def _round_half_up(value: float, digits: int = 0) -> float:
    """Round like the browser does (halves go up), not banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _make_request(lat: float, lon: float, start_date: str, end_date: str) -> dict:
    """One GET to Open-Meteo. Returns parsed JSON dict."""
    params = {
        "latitude":   lat,
        "longitude":  lon,
        "start_date": start_date,
        "end_date":   end_date,
        "daily":      ",".join(DAILY_VARIABLES),
        "timezone":   "auto",
    }
    resp = requests.get(OPEN_METEO_URL, params=params, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def fetch_daily_weather(lat: float, lon: float, start_date: str, end_date: str) -> pd.DataFrame:
    """
    Fetch daily weather for a point and date range (YYYY-MM-DD).

    Returns
    -------
    pd.DataFrame with columns: date, temperature, rainfall, relativeHumidity,
    windSpeed (empty when the API returns no days). HTTP errors propagate.
    """
    log.info("Fetching Open-Meteo daily weather for (%.4f, %.4f) %s → %s",
             lat, lon, start_date, end_date)
    data = _make_request(lat, lon, start_date, end_date)
    daily = data.get("daily") or {}
    days = daily.get("time") or []

    if not days:
        log.warning("Open-Meteo returned no daily values for this period.")
        return pd.DataFrame(columns=["date", *COLUMN_MAP.values()])

    df = pd.DataFrame({"date": days})
    for api_col, name in COLUMN_MAP.items():
        values = daily.get(api_col)
        df[name] = pd.to_numeric(pd.Series(values), errors="coerce") if values else float("nan")
    log.info("Fetched %d days of weather.", len(df))
    return df


def summarise_daily(df: pd.DataFrame) -> dict:
    """
    Average a daily frame into engine inputs and add the derived moisture values.
    Keys whose inputs are missing are left out.
    """
    out: dict = {}
    if df is None or df.empty:
        return out

    means = {}
    for name in COLUMN_MAP.values():
        if name in df.columns:
            mean = df[name].mean()
            if pd.notna(mean):
                means[name] = float(mean)

    if "temperature" in means:
        out["temperature"] = _round_half_up(means["temperature"], 1)
    if "rainfall" in means:
        out["rainfall"] = _round_half_up(means["rainfall"], 1)
    if "relativeHumidity" in means:
        out["relativeHumidity"] = _round_half_up(means["relativeHumidity"])
    if "windSpeed" in means:
        out["windSpeed"] = _round_half_up(means["windSpeed"], 1)

    rain = means.get("rainfall")
    rh = means.get("relativeHumidity")
    if rain is not None and rh is not None:
        out["soilMoisture"] = min(100, _round_half_up(10 + rain * 4 + rh / 5))
        out["wetnessHours"] = _round_half_up(min(MAX_WETNESS_HOURS, rain * 3 + rh / 3))
    if rh is not None:
        out["canopyHumidity"] = min(100, _round_half_up(rh - 3))
    return out


def get_climate_inputs(lat: float, lon: float, start_date: str, end_date: str) -> dict:
    """
    Fetch and summarise in one call. Returns {} when the provider fails, so the
    caller can report "no climate data available" instead of scoring.
    """
    try:
        df = fetch_daily_weather(lat, lon, start_date, end_date)
    except (requests.RequestException, ValueError) as exc:
        log.warning("Could not fetch climate data: %s", exc)
        return {}
    return summarise_daily(df)


def save_to_cache(df: pd.DataFrame, output_path: Path | None = None) -> Path:
    """Write a daily frame to CSV (data/cache/daily_weather.csv by default)."""
    out = output_path or (CACHE_DIR / WEATHER_CACHE_FNAME)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)
    log.info("Saved %d rows to %s", len(df), out)
    return out


def load_cached(path: Path | None = None) -> pd.DataFrame | None:
    """Read a cached daily frame; log and return None if absent or unreadable."""
    p = path or (CACHE_DIR / WEATHER_CACHE_FNAME)
    if not p.exists():
        log.debug("Weather cache not found at %s.", p)
        return None
    try:
        df = pd.read_csv(p)
        log.info("Loaded weather cache from %s (%d rows).", p, len(df))
        return df
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        log.warning("Could not read weather cache (%s): %s", p, exc)
        return None


# ---------------------------------------------------------------------------
# CLI entrypoint: python -m orchard_risk.weather_fetcher --lat .. --lon ..
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    parser = argparse.ArgumentParser(
        description="Fetch daily Open-Meteo weather and print averaged climate inputs."
    )
    parser.add_argument("--lat",   type=float, required=True, help="Latitude")
    parser.add_argument("--lon",   type=float, required=True, help="Longitude")
    parser.add_argument("--start", required=True, help="Start date YYYY-MM-DD")
    parser.add_argument("--end",   required=True, help="End date YYYY-MM-DD")
    parser.add_argument("--save",  action="store_true", help="Also write the daily rows to the CSV cache")
    args = parser.parse_args()

    frame = fetch_daily_weather(args.lat, args.lon, args.start, args.end)
    if args.save and not frame.empty:
        save_to_cache(frame)
    print(json.dumps(summarise_daily(frame), indent=2))
