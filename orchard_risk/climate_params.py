"""
Parameter normalizer: loosely-typed climate readings → canonical ClimateReading.

Accepted input names (first non-null alias wins, legacy names first):
    relative_humidity : rh, relativeHumidity, relative_humidity
    rainfall          : weeklyRainfall, rainfall, weekly_rainfall
    wetness_hours     : leafWetness, wetnessHours, leaf_wetness, wetness_hours

Absent or unparseable numbers become 0, unknown enum values become "unknown",
flags default to False. Absence means "condition cannot match", so nothing
here raises.
"""

import logging
import math
from dataclasses import asdict, dataclass

from orchard_risk.config import (
    DRAINAGE_LEVELS,
    DUST_LEVELS,
    MODE_META,
    MODE_STANDARD,
    UNKNOWN,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClimateReading:
    """Canonical climate reading for one evaluation."""

    temperature: float
    relative_humidity: float = 0.0
    rainfall: float = 0.0
    wetness_hours: float = 0.0
    wind_speed: float = 0.0
    soil_moisture: float = 0.0
    canopy_humidity: float = 0.0
    dust_level: str = UNKNOWN
    drainage: str = UNKNOWN
    has_standing_water_48h: bool = False
    has_temp_jump_10c: bool = False
    had_drought_then_heavy_rain: bool = False
    mode: str = MODE_STANDARD

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Field aliases
# ---------------------------------------------------------------------------
NUMERIC_ALIASES: dict[str, tuple[str, ...]] = {
    "relative_humidity": ("rh", "relativeHumidity", "relative_humidity"),
    "rainfall":          ("weeklyRainfall", "rainfall", "weekly_rainfall"),
    "wetness_hours":     ("leafWetness", "wetnessHours", "leaf_wetness", "wetness_hours"),
    "wind_speed":        ("windSpeed", "wind_speed"),
    "soil_moisture":     ("soilMoisture", "soil_moisture"),
    "canopy_humidity":   ("canopyHumidity", "canopy_humidity"),
}

FLAG_ALIASES: dict[str, tuple[str, ...]] = {
    "has_standing_water_48h":      ("hasStandingWater48h", "has_standing_water_48h"),
    "has_temp_jump_10c":           ("hasTempJump10C", "has_temp_jump_10c"),
    "had_drought_then_heavy_rain": ("hadDroughtThenHeavyRain", "had_drought_then_heavy_rain"),
}


def _to_number(value) -> float | None:
    """float(value) if it is a finite number, else None. Booleans are not numbers."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        log.debug("Ignoring non-numeric climate value %r", value)
        return None
    if not math.isfinite(number):
        log.debug("Ignoring non-finite climate value %r", value)
        return None
    return number


def _first_number(raw: dict, aliases: tuple[str, ...]) -> float | None:
    for key in aliases:
        number = _to_number(raw.get(key))
        if number is not None:
            return number
    return None


def _enum_value(raw: dict, aliases: tuple[str, ...], allowed: tuple[str, ...]) -> str:
    for key in aliases:
        value = raw.get(key)
        if value is None:
            continue
        text = str(value).strip().lower()
        return text if text in allowed else UNKNOWN
    return UNKNOWN


def _mode_value(value) -> str:
    if isinstance(value, str) and value.strip().lower() == MODE_META:
        return MODE_META
    return MODE_STANDARD


def normalize_params(raw) -> ClimateReading:
    """
    Build a ClimateReading from a key/value bag, or re-check an existing one.
    A reading that is already clean comes back as the same object.

    Parameters
    ----------
    raw : dict, ClimateReading or None
        Climate readings under current, legacy or snake_case names.

    Returns
    -------
    ClimateReading with every numeric field finite.
    """
    if isinstance(raw, ClimateReading):
        cleaned = normalize_params(raw.to_dict())
        return raw if cleaned == raw else cleaned
    raw = dict(raw or {})

    temperature = _to_number(raw.get("temperature"))
    if temperature is None:
        log.warning("No usable temperature in climate input; treating it as 0 °C.")
        temperature = 0.0

    numbers = {
        field: _first_number(raw, aliases) or 0.0
        for field, aliases in NUMERIC_ALIASES.items()
    }
    flags = {
        field: any(bool(raw.get(key)) for key in aliases)
        for field, aliases in FLAG_ALIASES.items()
    }

    return ClimateReading(
        temperature=temperature,
        dust_level=_enum_value(raw, ("dustLevel", "dust_level"), DUST_LEVELS),
        drainage=_enum_value(raw, ("drainage",), DRAINAGE_LEVELS),
        mode=_mode_value(raw.get("mode")),
        **numbers,
        **flags,
    )
