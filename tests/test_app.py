"""
Dashboard helper tests (no browser; session state is a plain dict).
Run from project root: python -m pytest tests/test_app.py -v
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app import AUTOFILL_FLAG, apply_fetched_inputs, build_download_df
from orchard_risk.config import DEFAULT_CLIMATE_INPUTS


def test_fetched_values_land_in_form_names():
    state = {}
    apply_fetched_inputs(state, {"temperature": 19.0, "relativeHumidity": 85.0, "wetnessHours": 37.0})
    values = state["climate_inputs"]
    assert values["temperature"] == 19.0
    assert values["rh"] == 85.0
    assert values["leafWetness"] == 37.0
    # untouched keys keep their defaults
    assert values["soilMoisture"] == DEFAULT_CLIMATE_INPUTS["soilMoisture"]


def test_update_notice_survives_one_rerun():
    state = {}
    apply_fetched_inputs(state, {"temperature": 19.0})
    # first run after st.rerun() shows the notice, later runs do not
    assert state.pop(AUTOFILL_FLAG, False) is True
    assert state.pop(AUTOFILL_FLAG, False) is False


def test_existing_form_values_are_kept():
    state = {"climate_inputs": {**DEFAULT_CLIMATE_INPUTS, "windSpeed": 9}}
    apply_fetched_inputs(state, {"rainfall": 3.0})
    assert state["climate_inputs"]["windSpeed"] == 9
    assert state["climate_inputs"]["weeklyRainfall"] == 3.0


def test_download_frame_has_rows():
    rows = [{"rank": 1, "name": "Apple Scab", "category": "Disease", "score": 100.0,
             "level": "High", "matched_factors": ["RH > 85%"]}]
    df = build_download_df(rows)
    assert df.iloc[0]["Rank"] == 1
    assert df.iloc[0]["Matched Factors"] == "RH > 85%"


if __name__ == "__main__":
    import subprocess
    sys.exit(subprocess.call([sys.executable, "-m", "pytest", __file__, "-v", "-s"]))
