"""
Farm health score (0-100): half climate stress, half ranked disease pressure.

    climate (0-50) = 50 − penalties for adverse conditions
    disease (0-50) = 50 − 15 per High − 8 per Medium
                        − 3 per Low (only once 9 or more Low results exist)
                        + 10 when at most 2 results and none High
    total = round((climate + disease) / 2), halves rounded up
"""

from orchard_risk.climate_params import normalize_params
from orchard_risk.config import (
    HEALTH_BANDS,
    HEALTH_FEW_BONUS,
    HEALTH_FEW_MAX,
    HEALTH_LOW_MIN_COUNT,
    HEALTH_OPTIMAL_TEMP,
    HEALTH_PENALTY_CALM,
    HEALTH_PENALTY_DROUGHT,
    HEALTH_PENALTY_HUMIDITY,
    HEALTH_PENALTY_RAINFALL,
    HEALTH_PENALTY_STANDING,
    HEALTH_PENALTY_TEMP,
    HEALTH_PENALTY_TEMP_JUMP,
    HEALTH_PENALTY_WETNESS,
    HEALTH_PER_HIGH,
    HEALTH_PER_LOW,
    HEALTH_PER_MEDIUM,
)
from orchard_risk.risk_engine import count_by_level


def climate_health(params) -> int:
    r = normalize_params(params)
    lo, hi = HEALTH_OPTIMAL_TEMP
    score = 50
    if r.temperature < lo or r.temperature > hi:
        score -= HEALTH_PENALTY_TEMP
    if r.relative_humidity > 85:
        score -= HEALTH_PENALTY_HUMIDITY
    if r.rainfall > 30:
        score -= HEALTH_PENALTY_RAINFALL
    if r.wetness_hours > 12:
        score -= HEALTH_PENALTY_WETNESS
    if r.wind_speed < 2:
        score -= HEALTH_PENALTY_CALM
    if r.has_standing_water_48h:
        score -= HEALTH_PENALTY_STANDING
    if r.has_temp_jump_10c:
        score -= HEALTH_PENALTY_TEMP_JUMP
    if r.had_drought_then_heavy_rain:
        score -= HEALTH_PENALTY_DROUGHT
    return max(0, score)


def disease_health(risk_results: list) -> int:
    if not risk_results:
        return 50
    counts = count_by_level(risk_results)
    high, medium, low = counts["High"], counts["Medium"], counts["Low"]

    score = 50 - high * HEALTH_PER_HIGH - medium * HEALTH_PER_MEDIUM
    if low >= HEALTH_LOW_MIN_COUNT:
        score -= low * HEALTH_PER_LOW
    if high + medium + low <= HEALTH_FEW_MAX and high == 0:
        score += HEALTH_FEW_BONUS
    return max(0, min(50, score))


def calculate_farm_health(params, risk_results: list) -> int:
    """
    Combine climate stress and the ranked results into one 0-100 score.
    risk_results is the (already truncated) list the user is shown.
    """
    total = climate_health(params) + disease_health(risk_results)
    return (total + 1) // 2


def health_band(score: int) -> str:
    """'good' (80+), 'fair' (60+), 'poor' (40+) or 'critical'."""
    for threshold, label in HEALTH_BANDS:
        if score >= threshold:
            return label
    return "critical"
