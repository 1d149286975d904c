"""
Risk engine: per-item disease/pest scoring, tie-break weighting and ranking.

Scoring modes (selected by ClimateReading.mode):
  standard — count satisfied catalog checks;      score = min(100, 20 × matches)
  meta     — count favourable ranges that contain
             the reading, +20 each;                score = min(100, 20 × matches)

Tie-break weighting (diseases only):
    weighted = min(100, score × weight[name])     weight defaults to 1.0

Risk level thresholds:
    0-30   → Low
    30-70  → Medium   (30 exclusive, 70 inclusive)
    70+    → High

Results are sorted by weighted score, descending; equal scores keep catalog
order. Truncating to a top-N is left to the caller (see top_risks()).
"""

from dataclasses import dataclass

import pandas as pd

from orchard_risk.climate_params import ClimateReading, normalize_params
from orchard_risk.config import (
    CATEGORY_DISEASE,
    CATEGORY_PEST,
    FLAG_RULE_PREFIX,
    LOW_MAX,
    MAX_SCORE,
    MEDIUM_MAX,
    MODE_META,
    MODE_STANDARD,
    POINTS_PER_MATCH,
    TIPS_PER_ITEM,
    TOP_N_RESULTS,
)
from orchard_risk.risk_catalog import (
    canonical_name,
    get_catalog,
    get_prevention_tips,
    get_weight,
)


@dataclass(frozen=True)
class RiskResult:
    """Score of one catalog entry against one reading."""

    name: str
    category: str
    score: float
    level: str
    matched_factors: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name":            self.name,
            "category":        self.category,
            "score":           self.score,
            "level":           self.level,
            "matched_factors": list(self.matched_factors),
        }


def level_for(score: float) -> str:
    """Convert a 0-100 score to Low / Medium / High."""
    if score <= LOW_MAX:
        return "Low"
    if score <= MEDIUM_MAX:
        return "Medium"
    return "High"


def _score_from_matches(matches: list[str]) -> float:
    return min(MAX_SCORE, len(matches) * POINTS_PER_MATCH)


# ---------------------------------------------------------------------------
# Standard mode
# ---------------------------------------------------------------------------

def score_standard(entry, reading: ClimateReading) -> tuple[float, list[str]]:
    """Evaluate every (label, predicate) check; returns (score, matched labels)."""
    matched = [label for label, check in entry["checks"] if check(reading)]
    return _score_from_matches(matched), matched


# ---------------------------------------------------------------------------
# Meta mode
# ---------------------------------------------------------------------------

def _fmt(x: float) -> str:
    return f"{x:g}"


def _rh_label(lo, hi) -> str:
    return f"RH {_fmt(lo)}{'–' + _fmt(hi) if hi else '+'}%"


# (factor, label builder) in evaluation order
_META_RANGES = [
    ("temperature",       lambda lo, hi: f"Temperature {_fmt(lo)}–{_fmt(hi)}°C"),
    ("relative_humidity", _rh_label),
    ("rainfall",          lambda lo, hi: "Rainfall in favourable range"),
    ("wetness_hours",     lambda lo, hi: "Leaf/fruit wetness in favourable range"),
    ("wind_speed",        lambda lo, hi: "Wind speed in favourable range"),
    ("soil_moisture",     lambda lo, hi: "Soil moisture in favourable range"),
    ("canopy_humidity",   lambda lo, hi: f"High canopy humidity (≥{_fmt(lo)}%)"),
]


def _in_range(value: float, lo: float, hi: float | None) -> bool:
    return value >= lo and (hi is None or value <= hi)


def score_meta(entry, reading: ClimateReading) -> tuple[float, list[str]]:
    """
    Award 20 points per favourable range the reading falls into.

    Temperature needs both bounds; canopy humidity only uses its minimum.
    Entries named "Necrotic Leaf Blotch ..." also score the temperature-jump
    and drought-then-heavy-rain flags. The total is clamped to 100.
    """
    meta = entry["meta"]
    score = 0
    matched: list[str] = []

    for factor, label in _META_RANGES:
        if factor not in meta:
            continue
        lo, hi = meta[factor]
        if factor == "temperature" and hi is None:
            continue
        if factor == "canopy_humidity":
            hi = None
        if _in_range(getattr(reading, factor), lo, hi):
            score += POINTS_PER_MATCH
            matched.append(label(lo, hi))

    if meta.get("dust_level") == "high" and reading.dust_level == "high":
        score += POINTS_PER_MATCH
        matched.append("High dust level")

    if meta.get("drainage") == "poor" and (
        reading.drainage == "poor" or reading.has_standing_water_48h
    ):
        score += POINTS_PER_MATCH
        matched.append("Poor drainage / standing water")

    if canonical_name(entry["name"]).startswith(FLAG_RULE_PREFIX):
        if reading.has_temp_jump_10c:
            score += POINTS_PER_MATCH
            matched.append("Temperature fluctuation >10°C in 24–48 h")
        if reading.had_drought_then_heavy_rain:
            score += POINTS_PER_MATCH
            matched.append("Drought followed by heavy rain")

    return min(MAX_SCORE, score), matched


SCORERS = {
    MODE_STANDARD: score_standard,
    MODE_META:     score_meta,
}


# ---------------------------------------------------------------------------
# Weighting and ranking
# ---------------------------------------------------------------------------

def apply_disease_weight(name: str, raw_score: float) -> float:
    """Multiply by the disease's tie-break weight and re-clamp to 100."""
    weighted = raw_score * get_weight(name)
    return MAX_SCORE if weighted > MAX_SCORE else weighted


def compute_risks(category: str, params) -> list[RiskResult]:
    """
    Score every catalog entry of a category and rank the results.

    Parameters
    ----------
    category : str
        'Disease' or 'Pest'.
    params : dict or ClimateReading
        Raw climate input (any accepted alias) or an already-normalised reading.

    Returns
    -------
    list[RiskResult], weighted score descending, catalog order among ties.
    """
    entries = get_catalog(category)
    reading = normalize_params(params)
    scorer = SCORERS.get(reading.mode, score_standard)

    results = []
    for entry in entries:
        score, matched = scorer(entry, reading)
        if category == CATEGORY_DISEASE:
            score = apply_disease_weight(entry["name"], score)
        results.append(RiskResult(
            name=entry["name"],
            category=category,
            score=score,
            level=level_for(score),
            matched_factors=tuple(matched),
        ))
    return sorted(results, key=lambda r: r.score, reverse=True)


def calculate_disease_risks(params) -> list[RiskResult]:
    return compute_risks(CATEGORY_DISEASE, params)


def calculate_pest_risks(params) -> list[RiskResult]:
    return compute_risks(CATEGORY_PEST, params)


def top_risks(results: list[RiskResult], n: int = TOP_N_RESULTS) -> list[RiskResult]:
    """First n ranked results (caller-side truncation)."""
    return list(results[:max(0, n)])


def count_by_level(results: list[RiskResult]) -> dict[str, int]:
    counts = {"Low": 0, "Medium": 0, "High": 0}
    for r in results:
        counts[r.level] += 1
    return counts


def attach_prevention_tips(results: list[RiskResult], limit: int = TIPS_PER_ITEM) -> list[dict]:
    """
    Result dicts with the first `limit` prevention tips and the number of
    further tips available ('more_tips'). Pests carry no guide entries.
    """
    out = []
    for r in results:
        tips = get_prevention_tips(r.name)
        row = r.to_dict()
        row["tips"] = tips[:limit]
        row["more_tips"] = max(0, len(tips) - limit)
        out.append(row)
    return out


def results_to_frame(results: list[RiskResult]) -> pd.DataFrame:
    """Tabular view of ranked results with a 1-based rank column."""
    rows = [
        {
            "rank":            i,
            "name":            r.name,
            "category":        r.category,
            "score":           round(r.score, 1),
            "level":           r.level,
            "matched_factors": ", ".join(r.matched_factors),
        }
        for i, r in enumerate(results, 1)
    ]
    columns = ["rank", "name", "category", "score", "level", "matched_factors"]
    return pd.DataFrame(rows, columns=columns)
