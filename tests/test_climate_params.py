"""
Parameter normalizer tests: aliases, defaults, enum/flag/mode coercion.
Run from project root: python -m pytest tests/test_climate_params.py -v
"""

import dataclasses
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from orchard_risk.climate_params import ClimateReading, normalize_params
from orchard_risk.aggregate_risk import compute_aggregate_risk
from orchard_risk.risk_engine import calculate_disease_risks, calculate_pest_risks

EXPLICIT_DEFAULTS = {
    "temperature": 21,
    "relativeHumidity": 0, "rainfall": 0, "wetnessHours": 0, "windSpeed": 0,
    "soilMoisture": 0, "canopyHumidity": 0,
    "dustLevel": "unknown", "drainage": "unknown",
    "hasStandingWater48h": False, "hasTempJump10C": False, "hadDroughtThenHeavyRain": False,
    "mode": "standard",
}


def test_current_names():
    r = normalize_params({
        "temperature": 18, "relativeHumidity": 90, "rainfall": 8, "wetnessHours": 10,
        "windSpeed": 8, "soilMoisture": 55, "canopyHumidity": 75,
    })
    assert (r.temperature, r.relative_humidity, r.rainfall, r.wetness_hours) == (18, 90, 8, 10)
    assert (r.wind_speed, r.soil_moisture, r.canopy_humidity) == (8, 55, 75)


def test_legacy_names():
    r = normalize_params({"temperature": 18, "rh": 80, "weeklyRainfall": 12, "leafWetness": 6})
    assert r.relative_humidity == 80
    assert r.rainfall == 12
    assert r.wetness_hours == 6


def test_legacy_name_wins_when_both_present():
    r = normalize_params({"temperature": 18, "rh": 60, "relativeHumidity": 95,
                          "weeklyRainfall": 3, "rainfall": 30})
    assert r.relative_humidity == 60
    assert r.rainfall == 3


def test_null_legacy_falls_through_to_current_name():
    r = normalize_params({"temperature": 18, "rh": None, "relativeHumidity": 95})
    assert r.relative_humidity == 95


def test_snake_case_names():
    r = normalize_params({"temperature": 18, "relative_humidity": 70, "wetness_hours": 4,
                          "wind_speed": 3, "dust_level": "high", "has_temp_jump_10c": True})
    assert r.relative_humidity == 70
    assert r.wetness_hours == 4
    assert r.wind_speed == 3
    assert r.dust_level == "high"
    assert r.has_temp_jump_10c is True


def test_defaults_when_absent():
    r = normalize_params({"temperature": 12})
    assert r == ClimateReading(temperature=12.0)
    assert r.dust_level == "unknown"
    assert r.drainage == "unknown"
    assert r.mode == "standard"
    assert not (r.has_standing_water_48h or r.has_temp_jump_10c or r.had_drought_then_heavy_rain)


def test_numeric_strings_and_garbage():
    r = normalize_params({"temperature": "19.5", "rh": "n/a", "rainfall": float("nan"),
                          "windSpeed": float("inf"), "soilMoisture": True})
    assert r.temperature == 19.5
    assert r.relative_humidity == 0
    assert r.rainfall == 0
    assert r.wind_speed == 0
    assert r.soil_moisture == 0


def test_missing_temperature_does_not_raise():
    r = normalize_params({})
    assert r.temperature == 0.0
    assert normalize_params(None).temperature == 0.0


@pytest.mark.parametrize("value, expected", [
    ("high", "high"), ("HIGH", "high"), (" low ", "low"), ("extreme", "unknown"), (3, "unknown"),
])
def test_dust_level_coercion(value, expected):
    assert normalize_params({"temperature": 20, "dustLevel": value}).dust_level == expected


def test_drainage_coercion():
    assert normalize_params({"temperature": 20, "drainage": "Poor"}).drainage == "poor"
    assert normalize_params({"temperature": 20, "drainage": "medium"}).drainage == "unknown"


@pytest.mark.parametrize("value, expected", [
    ("meta", "meta"), ("META", "meta"), ("standard", "standard"),
    ("fancy", "standard"), (None, "standard"), (1, "standard"),
])
def test_mode_coercion(value, expected):
    assert normalize_params({"temperature": 20, "mode": value}).mode == expected


def test_flags_use_truthiness():
    r = normalize_params({"temperature": 20, "hasStandingWater48h": 1,
                          "hasTempJump10C": "", "hadDroughtThenHeavyRain": "yes"})
    assert r.has_standing_water_48h is True
    assert r.has_temp_jump_10c is False
    assert r.had_drought_then_heavy_rain is True


def test_reading_passes_through_unchanged():
    r = ClimateReading(temperature=20, relative_humidity=88, mode="meta")
    assert normalize_params(r) is r


def test_dirty_reading_is_cleaned():
    r = normalize_params(ClimateReading(temperature=float("nan"), relative_humidity=None,
                                        soil_moisture="n/a", dust_level="HIGH",
                                        drainage=None, mode="META"))
    assert r == ClimateReading(temperature=0.0, dust_level="high", mode="meta")


def test_dirty_reading_scores_without_raising():
    reading = ClimateReading(temperature=20, relative_humidity=None, wetness_hours=float("nan"))
    for mode in ("standard", "meta"):
        results = calculate_disease_risks(dataclasses.replace(reading, mode=mode))
        assert len(results) == 9
        assert all(0 <= r.score <= 100 for r in results)
    assert len(calculate_pest_risks(reading)) == 8


def test_dirty_reading_in_aggregate():
    result = compute_aggregate_risk(ClimateReading(temperature=float("nan"), soil_moisture=None))
    assert result["riskScore"] == 0
    assert result["factors"]["soilMoisture"]["value"] == 0


def test_mode_case_matches_dict_path():
    from_reading = calculate_disease_risks(ClimateReading(temperature=20, relative_humidity=90, mode="META"))
    from_dict = calculate_disease_risks({"temperature": 20, "rh": 90, "mode": "META"})
    assert from_reading == from_dict


def test_reading_is_immutable():
    r = normalize_params({"temperature": 20})
    with pytest.raises(dataclasses.FrozenInstanceError):
        r.temperature = 30


def test_to_dict_uses_field_names():
    d = normalize_params({"temperature": 20, "rh": 50}).to_dict()
    assert d["relative_humidity"] == 50
    assert d["mode"] == "standard"


@pytest.mark.parametrize("mode", ["standard", "meta"])
def test_omitted_equals_explicit_defaults(mode):
    """Leaving optional fields out must score exactly like passing their defaults."""
    omitted = {"temperature": 21, "mode": mode}
    explicit = {**EXPLICIT_DEFAULTS, "mode": mode}
    assert normalize_params(omitted) == normalize_params(explicit)
    assert calculate_disease_risks(omitted) == calculate_disease_risks(explicit)
    assert calculate_pest_risks(omitted) == calculate_pest_risks(explicit)
    assert compute_aggregate_risk(omitted) == compute_aggregate_risk(explicit)


if __name__ == "__main__":
    import subprocess
    sys.exit(subprocess.call([sys.executable, "-m", "pytest", __file__, "-v", "-s"]))
