"""
Aggregate risk analyzer tests: factor bands, level cut-offs, recommendations.
Run from project root: python -m pytest tests/test_aggregate_risk.py -v
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from orchard_risk.aggregate_risk import (
    RECOMMENDATIONS,
    compute_aggregate_risk,
    get_aggregate_level,
)


def test_all_factors_at_maximum():
    """25 + 25 + 25 + 15 + 10 = 100 → critical."""
    result = compute_aggregate_risk({
        "temperature": 20, "relativeHumidity": 90, "wetnessHours": 14,
        "soilMoisture": 65, "rainfall": 25,
    })
    assert result["riskScore"] == 100
    assert result["riskLevel"] == "critical"
    assert result["factors"] == {
        "temperature":  {"value": 20, "risk": "high"},
        "humidity":     {"value": 90, "risk": "high"},
        "wetness":      {"value": 14, "risk": "high"},
        "soilMoisture": {"value": 65, "risk": "medium"},
        "rainfall":     {"value": 25, "risk": "high"},
    }
    recs = result["recommendations"]
    assert recs == [
        RECOMMENDATIONS["temperature"],
        RECOMMENDATIONS["humidity"],
        RECOMMENDATIONS["wetness"],
        RECOMMENDATIONS["soilMoisture"],
        RECOMMENDATIONS["preventive"],
    ]
    humidity_i = recs.index(RECOMMENDATIONS["humidity"])
    wetness_i = recs.index(RECOMMENDATIONS["wetness"])
    preventive_i = recs.index(RECOMMENDATIONS["preventive"])
    assert humidity_i < wetness_i < preventive_i
    assert RECOMMENDATIONS["low"] not in recs


@pytest.mark.parametrize("temperature, points, flag", [
    (15, 25, "high"), (25, 25, "high"), (12, 15, "medium"), (28, 15, "medium"),
    (14.9, 15, "medium"), (11.9, 0, "low"), (28.1, 0, "low"),
])
def test_temperature_bands(temperature, points, flag):
    result = compute_aggregate_risk({"temperature": temperature})
    assert result["riskScore"] == points
    assert result["factors"]["temperature"]["risk"] == flag


@pytest.mark.parametrize("soil, points, flag", [
    (50, 15, "medium"), (80, 15, "medium"), (40, 10, "low"), (90, 10, "low"),
    (39, 0, "low"), (95, 0, "low"),
])
def test_soil_moisture_bands(soil, points, flag):
    result = compute_aggregate_risk({"temperature": 0, "soilMoisture": soil})
    assert result["riskScore"] == points
    assert result["factors"]["soilMoisture"]["risk"] == flag


@pytest.mark.parametrize("params, expected", [
    ({"rh": 85}, 25), ({"rh": 70}, 15), ({"rh": 69}, 0),
    ({"leafWetness": 12}, 25), ({"leafWetness": 8}, 15), ({"leafWetness": 7.9}, 0),
    ({"weeklyRainfall": 20}, 10), ({"weeklyRainfall": 10}, 5), ({"weeklyRainfall": 9}, 0),
])
def test_open_ended_bands(params, expected):
    assert compute_aggregate_risk({"temperature": 0, **params})["riskScore"] == expected


@pytest.mark.parametrize("score, level", [
    (0, "low"), (39, "low"), (40, "medium"), (59, "medium"),
    (60, "high"), (79, "high"), (80, "critical"), (100, "critical"),
])
def test_level_cutoffs(score, level):
    assert get_aggregate_level(score) == level


def test_medium_level_without_preventive_message():
    """25 (temp) + 15 (RH) = 40 → medium; only the temperature message fires."""
    result = compute_aggregate_risk({"temperature": 20, "rh": 75})
    assert result["riskScore"] == 40
    assert result["riskLevel"] == "medium"
    assert result["recommendations"] == [RECOMMENDATIONS["temperature"]]


def test_high_level_adds_preventive_message():
    """25 + 25 + 10 (soil in the wide band) = 60 → high."""
    result = compute_aggregate_risk({"temperature": 20, "rh": 90, "soilMoisture": 45})
    assert result["riskScore"] == 60
    assert result["riskLevel"] == "high"
    assert result["recommendations"][-1] == RECOMMENDATIONS["preventive"]


def test_low_risk_fallback_message():
    result = compute_aggregate_risk({"temperature": 5})
    assert result["riskScore"] == 0
    assert result["riskLevel"] == "low"
    assert result["recommendations"] == [RECOMMENDATIONS["low"]]


def test_soil_message_alone_suppresses_fallback():
    result = compute_aggregate_risk({"temperature": 5, "soilMoisture": 60})
    assert result["riskLevel"] == "low"
    assert result["recommendations"] == [RECOMMENDATIONS["soilMoisture"]]


def test_missing_values_never_raise_and_score_zero():
    result = compute_aggregate_risk({})
    assert result["riskScore"] == 0
    assert all(f["value"] == 0 for f in result["factors"].values())


@pytest.mark.parametrize("temperature", [-10, 0, 13, 20, 27, 40])
@pytest.mark.parametrize("rh", [0, 72, 99])
@pytest.mark.parametrize("wetness", [0, 9, 24])
def test_total_never_exceeds_100(temperature, rh, wetness):
    result = compute_aggregate_risk({
        "temperature": temperature, "rh": rh, "leafWetness": wetness,
        "soilMoisture": 65, "rainfall": 50,
    })
    assert 0 <= result["riskScore"] <= 100
    assert isinstance(result["riskScore"], int)


if __name__ == "__main__":
    import subprocess
    sys.exit(subprocess.call([sys.executable, "-m", "pytest", __file__, "-v", "-s"]))
