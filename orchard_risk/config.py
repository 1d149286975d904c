"""
Configuration and constants for the Orchard Climate Risk Advisory.
Centralizes paths, scoring thresholds, aggregate risk bands, UI defaults,
and weather provider settings.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Base paths (project root = parent of 'orchard_risk')
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
CACHE_DIR = DATA_DIR / "cache"

WEATHER_CACHE_FNAME = "daily_weather.csv"

# ---------------------------------------------------------------------------
# Enumerations (allowed string values)
# ---------------------------------------------------------------------------
CATEGORY_DISEASE = "Disease"
CATEGORY_PEST    = "Pest"
CATEGORIES       = (CATEGORY_DISEASE, CATEGORY_PEST)

MODE_STANDARD = "standard"
MODE_META     = "meta"
MODES         = (MODE_STANDARD, MODE_META)

UNKNOWN         = "unknown"
DUST_LEVELS     = (UNKNOWN, "low", "medium", "high")
DRAINAGE_LEVELS = (UNKNOWN, "good", "poor")

RISK_LEVELS      = ("Low", "Medium", "High")
AGGREGATE_LEVELS = ("low", "medium", "high", "critical")

# ---------------------------------------------------------------------------
# Per-item scoring
# Each satisfied condition or favourable range adds a fixed increment;
# five matches saturate the scale.
# ---------------------------------------------------------------------------
POINTS_PER_MATCH = 20
MAX_SCORE        = 100
DEFAULT_WEIGHT   = 1.0

# Risk level thresholds (inclusive upper bounds)
LOW_MAX    = 30
MEDIUM_MAX = 70

# Meta-mode flag rules apply only to entries whose name starts with this
FLAG_RULE_PREFIX = "necrotic leaf blotch"

# ---------------------------------------------------------------------------
# Aggregate (area-level) risk bands
# Each factor: ordered list of (lo, hi, points, flag); first band that
# contains the value wins. hi=None means open-ended.
# Maxima sum to exactly 100.
# ---------------------------------------------------------------------------
AGG_TEMPERATURE_BANDS = [(15, 25, 25, "high"), (12, 28, 15, "medium")]
AGG_HUMIDITY_BANDS    = [(85, None, 25, "high"), (70, None, 15, "medium")]
AGG_WETNESS_BANDS     = [(12, None, 25, "high"), (8, None, 15, "medium")]
AGG_SOIL_BANDS        = [(50, 80, 15, "medium"), (40, 90, 10, "low")]
AGG_RAINFALL_BANDS    = [(20, None, 10, "high"), (10, None, 5, "medium")]

# Overall level cut-offs (score >= threshold), highest first
AGG_LEVEL_THRESHOLDS = [(80, "critical"), (60, "high"), (40, "medium")]

# ---------------------------------------------------------------------------
# Caller policy (the engine itself never truncates)
# ---------------------------------------------------------------------------
TOP_N_RESULTS = 10    # ranked rows kept after prediction
TOP_DISPLAY   = 3     # highlighted cards
TIPS_PER_ITEM = 2     # prevention tips shown per card

# ---------------------------------------------------------------------------
# Climate form defaults (legacy field names, as the form submits them)
# ---------------------------------------------------------------------------
DEFAULT_CLIMATE_INPUTS: dict = {
    "temperature":             20.0,
    "rh":                      75.0,
    "weeklyRainfall":          10.0,
    "leafWetness":             4.0,
    "windSpeed":               5.0,
    "soilMoisture":            50.0,
    "canopyHumidity":          75.0,
    "dustLevel":               UNKNOWN,
    "drainage":                UNKNOWN,
    "hasStandingWater48h":     False,
    "hasTempJump10C":          False,
    "hadDroughtThenHeavyRain": False,
}

# ---------------------------------------------------------------------------
# Farm health score penalties (climate half, 0-50)
# ---------------------------------------------------------------------------
HEALTH_OPTIMAL_TEMP      = (15, 28)
HEALTH_PENALTY_TEMP      = 8
HEALTH_PENALTY_HUMIDITY  = 10    # RH > 85
HEALTH_PENALTY_RAINFALL  = 8     # rainfall > 30
HEALTH_PENALTY_WETNESS   = 7     # wetness > 12 h
HEALTH_PENALTY_CALM      = 5     # wind < 2 km/h
HEALTH_PENALTY_STANDING  = 10
HEALTH_PENALTY_TEMP_JUMP = 8
HEALTH_PENALTY_DROUGHT   = 9

# Disease half (0-50)
HEALTH_PER_HIGH       = 15
HEALTH_PER_MEDIUM     = 8
HEALTH_PER_LOW        = 3
HEALTH_LOW_MIN_COUNT  = 9     # Low results only count from this many upward
HEALTH_FEW_BONUS      = 10
HEALTH_FEW_MAX        = 2

HEALTH_BANDS = [(80, "good"), (60, "fair"), (40, "poor")]

# ---------------------------------------------------------------------------
# Weather provider (Open-Meteo daily API, no key required)
# ---------------------------------------------------------------------------
OPEN_METEO_URL  = "https://api.open-meteo.com/v1/forecast"
DAILY_VARIABLES = [
    "temperature_2m_mean",
    "precipitation_sum",
    "relative_humidity_2m_mean",
    "windspeed_10m_max",
]
REQUEST_TIMEOUT   = 30      # seconds
MAX_WETNESS_HOURS = 168     # one week


def ensure_dirs() -> None:
    """Create data and cache directories if they do not exist."""
    for d in (DATA_DIR, CACHE_DIR):
        d.mkdir(parents=True, exist_ok=True)
