"""
Aggregate risk analyzer: one overall score for an area's averaged climate.

Factor contributions (first matching band wins, bounds inclusive):
    temperature    15-25 °C → +25 (high)    12-28 °C → +15 (medium)
    humidity       ≥85 %    → +25 (high)    ≥70 %    → +15 (medium)
    wetness        ≥12 h    → +25 (high)    ≥8 h     → +15 (medium)
    soil moisture  50-80 %  → +15 (medium)  40-90 %  → +10 (low)
    rainfall       ≥20 mm   → +10 (high)    ≥10 mm   → +5  (medium)

The maxima sum to 100, so the total needs no clamp.

Level thresholds:
    80+   → critical
    60-79 → high
    40-59 → medium
    0-39  → low
"""

from orchard_risk.climate_params import normalize_params
from orchard_risk.config import (
    AGG_HUMIDITY_BANDS,
    AGG_LEVEL_THRESHOLDS,
    AGG_RAINFALL_BANDS,
    AGG_SOIL_BANDS,
    AGG_TEMPERATURE_BANDS,
    AGG_WETNESS_BANDS,
)

RECOMMENDATIONS = {
    "temperature": "⚠️ Temperature is optimal for disease spread - monitor closely",
    "humidity":    "⚠️ High humidity detected - increase air circulation",
    "wetness":     "⚠️ Extended leaf wetness period - apply fungicide if needed",
    "soilMoisture": "💧 Soil moisture favorable for pathogen survival - adjust irrigation",
    "preventive":  "🔴 Consider preventive fungicide application",
    "low":         "✅ Risk level is low - continue normal management",
}


def _band_score(value: float, bands: list) -> tuple[int, str]:
    """Return (points, flag) for the first band containing value, else (0, 'low')."""
    for lo, hi, points, flag in bands:
        if value >= lo and (hi is None or value <= hi):
            return points, flag
    return 0, "low"


def get_aggregate_level(score: float) -> str:
    for threshold, label in AGG_LEVEL_THRESHOLDS:
        if score >= threshold:
            return label
    return "low"


def _recommendations(factors: dict, level: str) -> list[str]:
    recs = []
    if factors["temperature"]["risk"] == "high":
        recs.append(RECOMMENDATIONS["temperature"])
    if factors["humidity"]["risk"] == "high":
        recs.append(RECOMMENDATIONS["humidity"])
    if factors["wetness"]["risk"] == "high":
        recs.append(RECOMMENDATIONS["wetness"])
    if factors["soilMoisture"]["risk"] == "medium":
        recs.append(RECOMMENDATIONS["soilMoisture"])
    if level in ("critical", "high"):
        recs.append(RECOMMENDATIONS["preventive"])
    return recs or [RECOMMENDATIONS["low"]]


def compute_aggregate_risk(params) -> dict:
    """
    Collapse one climate reading into a single advisory.

    Parameters
    ----------
    params : dict or ClimateReading
        Area-level (averaged) climate values under any accepted alias.

    Returns
    -------
    dict with keys:
        riskScore       : int, 0-100
        riskLevel       : 'low' | 'medium' | 'high' | 'critical'
        factors         : {temperature, humidity, wetness, soilMoisture, rainfall}
                          each {"value": float, "risk": flag}
        recommendations : list[str], fixed order, never empty
    """
    reading = normalize_params(params)
    inputs = [
        ("temperature",  reading.temperature,       AGG_TEMPERATURE_BANDS),
        ("humidity",     reading.relative_humidity, AGG_HUMIDITY_BANDS),
        ("wetness",      reading.wetness_hours,     AGG_WETNESS_BANDS),
        ("soilMoisture", reading.soil_moisture,     AGG_SOIL_BANDS),
        ("rainfall",     reading.rainfall,          AGG_RAINFALL_BANDS),
    ]

    score = 0
    factors = {}
    for key, value, bands in inputs:
        points, flag = _band_score(value, bands)
        score += points
        factors[key] = {"value": value, "risk": flag}

    level = get_aggregate_level(score)
    return {
        "riskScore":       int(score),
        "riskLevel":       level,
        "factors":         factors,
        "recommendations": _recommendations(factors, level),
    }
