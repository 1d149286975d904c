"""
One-command advisory: climate inputs → ranked disease and pest risks → aggregate
advisory → farm health score.
Run from project root:
    python run_advisory.py --temperature 18 --rh 90 --rainfall 8 --wetness 10 --wind 8
    python run_advisory.py --lat 34.08 --lon 74.80 --start 2025-05-01 --end 2025-05-07 --mode meta
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from orchard_risk.config import (
    CATEGORY_DISEASE,
    CATEGORY_PEST,
    DEFAULT_CLIMATE_INPUTS,
    DRAINAGE_LEVELS,
    DUST_LEVELS,
    MODES,
    TOP_N_RESULTS,
)
from orchard_risk.risk_engine import compute_risks, results_to_frame, top_risks
from orchard_risk.aggregate_risk import compute_aggregate_risk
from orchard_risk.farm_health import calculate_farm_health, health_band
from orchard_risk.weather_fetcher import FETCHED_TO_FORM, get_climate_inputs


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Apple orchard climate risk advisory.")
    parser.add_argument("--mode", choices=MODES, default="standard", help="Scoring model")
    parser.add_argument("--top", type=int, default=TOP_N_RESULTS, help="Rows per category")

    loc = parser.add_argument_group("location (auto-fill from Open-Meteo)")
    loc.add_argument("--lat", type=float)
    loc.add_argument("--lon", type=float)
    loc.add_argument("--start", help="YYYY-MM-DD")
    loc.add_argument("--end", help="YYYY-MM-DD")

    man = parser.add_argument_group("manual climate inputs")
    man.add_argument("--temperature", type=float)
    man.add_argument("--rh", type=float, help="Relative humidity %%")
    man.add_argument("--rainfall", type=float, help="mm over the window")
    man.add_argument("--wetness", type=float, help="Leaf wetness hours")
    man.add_argument("--wind", type=float, help="km/h")
    man.add_argument("--soil", type=float, help="Soil moisture %%")
    man.add_argument("--canopy", type=float, help="Canopy humidity %%")
    man.add_argument("--dust", choices=DUST_LEVELS)
    man.add_argument("--drainage", choices=DRAINAGE_LEVELS)
    man.add_argument("--standing-water", action="store_true")
    man.add_argument("--temp-jump", action="store_true")
    man.add_argument("--drought-rain", action="store_true")
    return parser.parse_args(argv)


def build_inputs(args) -> dict | None:
    """Merge defaults, fetched weather (if a location is given) and manual overrides."""
    inputs = dict(DEFAULT_CLIMATE_INPUTS)
    if args.lat is not None and args.lon is not None and args.start and args.end:
        fetched = get_climate_inputs(args.lat, args.lon, args.start, args.end)
        if not fetched:
            return None
        inputs.update({
            form_key: fetched[key] for key, form_key in FETCHED_TO_FORM.items() if key in fetched
        })

    overrides = {
        "temperature":    args.temperature,
        "rh":             args.rh,
        "weeklyRainfall": args.rainfall,
        "leafWetness":    args.wetness,
        "windSpeed":      args.wind,
        "soilMoisture":   args.soil,
        "canopyHumidity": args.canopy,
        "dustLevel":      args.dust,
        "drainage":       args.drainage,
    }
    inputs.update({k: v for k, v in overrides.items() if v is not None})
    inputs["hasStandingWater48h"] = args.standing_water or inputs["hasStandingWater48h"]
    inputs["hasTempJump10C"] = args.temp_jump or inputs["hasTempJump10C"]
    inputs["hadDroughtThenHeavyRain"] = args.drought_rain or inputs["hadDroughtThenHeavyRain"]
    inputs["mode"] = args.mode
    return inputs


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    args = _parse_args(argv)

    inputs = build_inputs(args)
    if inputs is None:
        print("ERROR: No climate data available for this location and period.")
        return 1

    print("Orchard Climate Risk Advisory")
    print("=" * 50)
    print(f"Model: {args.mode}")

    disease_results = top_risks(compute_risks(CATEGORY_DISEASE, inputs), args.top)
    pest_results = top_risks(compute_risks(CATEGORY_PEST, inputs), args.top)

    for title, results in (("Diseases", disease_results), ("Pests", pest_results)):
        print(f"\n{title}:")
        print(results_to_frame(results).to_string(index=False))

    advisory = compute_aggregate_risk(inputs)
    print(f"\nAggregate risk: {advisory['riskScore']}/100 ({advisory['riskLevel']})")
    for rec in advisory["recommendations"]:
        print(f"  - {rec}")

    health = calculate_farm_health(inputs, disease_results)
    print(f"\nFarm health: {health}/100 ({health_band(health)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
