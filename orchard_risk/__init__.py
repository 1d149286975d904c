"""
Orchard Climate Risk Advisory — core package.
"""

from orchard_risk.climate_params import ClimateReading, normalize_params
from orchard_risk.risk_engine import (
    RiskResult,
    compute_risks,
    calculate_disease_risks,
    calculate_pest_risks,
    top_risks,
)
from orchard_risk.aggregate_risk import compute_aggregate_risk
from orchard_risk.farm_health import calculate_farm_health

__all__ = [
    "ClimateReading",
    "normalize_params",
    "RiskResult",
    "compute_risks",
    "calculate_disease_risks",
    "calculate_pest_risks",
    "top_risks",
    "compute_aggregate_risk",
    "calculate_farm_health",
]
