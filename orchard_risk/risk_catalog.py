"""
Risk catalog: static rule tables for apple diseases and pests.

Each entry carries two rule sets:
  checks : ordered (label, predicate) pairs over a ClimateReading, used by the
           standard (rule-count) scorer.
  meta   : favourable range per factor, used by the meta (range-based) scorer.
           Ranges are (min, max); max=None means "min or above".
           Extra enum keys: dust_level="high", drainage="poor".

Thresholds are compiled from orchard advisory practice for temperate apple
growing regions and are indicative, not diagnostic.

Names are the display identifiers. Every name-keyed lookup (weights,
prevention guide) goes through canonical_name() so dash variants in
user-facing text ("Bull's‑eye" vs "Bull's-eye") resolve to the same entry.
"""

import re
from types import MappingProxyType

from orchard_risk.config import (
    CATEGORY_DISEASE,
    CATEGORY_PEST,
    DEFAULT_WEIGHT,
)

# Hyphen, non-breaking hyphen, figure dash, en dash, em dash, minus sign, ...
_DASHES = re.compile("[‐‑‒–—―−﹣－]")
_SPACES = re.compile(r"\s+")


def canonical_name(name: str) -> str:
    """Lookup key for an item name: ASCII dashes, single spaces, case-folded."""
    text = _DASHES.sub("-", name or "")
    text = text.replace("’", "'")
    return _SPACES.sub(" ", text).strip().casefold()


def _entry(name: str, category: str, checks: list, meta: dict) -> MappingProxyType:
    return MappingProxyType({
        "name":     name,
        "category": category,
        "checks":   tuple(checks),
        "meta":     MappingProxyType(meta),
    })


def _canopy_humid(r) -> bool:
    return r.canopy_humidity >= 70


# ---------------------------------------------------------------------------
# Diseases
# ---------------------------------------------------------------------------
DISEASE_CATALOG: tuple = (
    _entry("Apple Scab", CATEGORY_DISEASE, [
        ("Temperature 10–24°C",          lambda r: 10 <= r.temperature <= 24),
        ("RH >85%",                      lambda r: r.relative_humidity > 85),
        ("Rainfall ≥5 mm",               lambda r: r.rainfall >= 5),
        ("Leaf wetness 9–12h",           lambda r: 9 <= r.wetness_hours <= 12),
        ("Wind 5–15 km/h",               lambda r: 5 <= r.wind_speed <= 15),
        ("High canopy humidity (>=70%)", _canopy_humid),
    ], {"wetness_hours": (9, 12), "wind_speed": (5, 15), "soil_moisture": (60, 80)}),

    _entry("Apple Leaf Blotch (Alternaria)", CATEGORY_DISEASE, [
        ("Temperature 24–30°C",          lambda r: 24 <= r.temperature <= 30),
        ("RH 80–95%",                    lambda r: 80 <= r.relative_humidity <= 95),
        ("Rainfall 15–40 mm/week",       lambda r: 15 <= r.rainfall <= 40),
        ("Leaf wetness ≥6h",             lambda r: r.wetness_hours >= 6),
        ("High canopy humidity (>=70%)", _canopy_humid),
    ], {"wetness_hours": (6, 24), "wind_speed": (3, 20), "soil_moisture": (60, 80)}),

    _entry("Powdery Mildew", CATEGORY_DISEASE, [
        ("Temperature 15–25°C", lambda r: 15 <= r.temperature <= 25),
        ("RH 60–85%",           lambda r: 60 <= r.relative_humidity <= 85),
        ("Leaf wetness 0–2h",   lambda r: 0 <= r.wetness_hours <= 2),
        ("Wind <6 km/h",        lambda r: r.wind_speed < 6),
    ], {"wetness_hours": (0, 2), "wind_speed": (0, 6), "soil_moisture": (50, 70)}),

    _entry("Brown Rot", CATEGORY_DISEASE, [
        ("Temperature 20–30°C", lambda r: 20 <= r.temperature <= 30),
        ("RH ≥85%",             lambda r: r.relative_humidity >= 85),
        ("Rainfall ≥10 mm",     lambda r: r.rainfall >= 10),
        ("Wetness ≥5h",         lambda r: r.wetness_hours >= 5),
    ], {"wetness_hours": (5, 24), "wind_speed": (3, 20), "soil_moisture": (60, 80)}),

    _entry("Bull's-eye Rot", CATEGORY_DISEASE, [
        ("Temperature 15–22°C",    lambda r: 15 <= r.temperature <= 22),
        ("RH 85–95%",              lambda r: 85 <= r.relative_humidity <= 95),
        ("Rainfall 20–50 mm",      lambda r: 20 <= r.rainfall <= 50),
        ("Leaf/Fruit wetness ≥8h", lambda r: r.wetness_hours >= 8),
    ], {"wetness_hours": (8, 24), "wind_speed": (0, 12), "soil_moisture": (60, 80)}),

    _entry("Sooty Blotch", CATEGORY_DISEASE, [
        ("Temperature 20–28°C",                      lambda r: 20 <= r.temperature <= 28),
        ("RH ≥90%",                                  lambda r: r.relative_humidity >= 90),
        ("Rainfall ≥30 mm/month (approx week>=7)",   lambda r: r.rainfall >= 7),
        ("Leaf wetness ≥12h",                        lambda r: r.wetness_hours >= 12),
    ], {"wetness_hours": (12, 48), "wind_speed": (0, 15), "soil_moisture": (70, 90)}),

    _entry("Flyspeck", CATEGORY_DISEASE, [
        ("Temperature 18–26°C", lambda r: 18 <= r.temperature <= 26),
        ("RH 90–98%",           lambda r: 90 <= r.relative_humidity <= 98),
        ("Frequent light rains (>=3 days/week) approximated as rain>=3",
                                lambda r: r.rainfall >= 3),
        ("Leaf wetness ≥15h",   lambda r: r.wetness_hours >= 15),
    ], {"wetness_hours": (15, 48), "wind_speed": (0, 15), "soil_moisture": (70, 90)}),

    _entry("Collar / Root Rot", CATEGORY_DISEASE, [
        ("Soil Temp 15–28°C (approx)", lambda r: 15 <= r.temperature <= 28),
        ("Soil moisture ≥85%",         lambda r: r.soil_moisture >= 85),
        ("Rainfall ≥40 mm/week",       lambda r: r.rainfall >= 40),
    ], {"soil_moisture": (85, 100), "rainfall": (40, None), "drainage": "poor",
        "wind_speed": (0, 20)}),

    # Soil moisture swing needs a time series; the check is kept so the
    # label stays visible but never matches on a single reading.
    _entry("Necrotic Leaf Blotch (physiological)", CATEGORY_DISEASE, [
        ("RH <40% OR >90%", lambda r: r.relative_humidity < 40 or r.relative_humidity > 90),
        ("Soil moisture swing <40% then >80% (approx ignored)", lambda r: False),
        ("Hot & dry wind >15 km/h", lambda r: r.wind_speed > 15),
    ], {"soil_moisture": (0, 40), "wind_speed": (15, 100), "rainfall": (20, None),
        "wetness_hours": (2, 24)}),
)

# ---------------------------------------------------------------------------
# Pests
# ---------------------------------------------------------------------------
PEST_CATALOG: tuple = (
    _entry("Fruit Fly", CATEGORY_PEST, [
        ("Temperature 22–35°C",    lambda r: 22 <= r.temperature <= 35),
        ("RH 70–95%",              lambda r: 70 <= r.relative_humidity <= 95),
        ("Rainfall 20–60 mm/week", lambda r: 20 <= r.rainfall <= 60),
        ("Wind <12 km/h",          lambda r: r.wind_speed < 12),
        ("Soil moisture >70%",     lambda r: r.soil_moisture > 70),
    ], {"wind_speed": (0, 12), "soil_moisture": (70, 100), "canopy_humidity": (70, None)}),

    _entry("Tent Caterpillar", CATEGORY_PEST, [
        ("Temperature 18–30°C", lambda r: 18 <= r.temperature <= 30),
        ("RH 45–65%",           lambda r: 45 <= r.relative_humidity <= 65),
        ("Rainfall <20 mm/week", lambda r: r.rainfall < 20),
        ("Wind <10 km/h",       lambda r: r.wind_speed < 10),
    ], {"wind_speed": (0, 10), "wetness_hours": (2, 10), "soil_moisture": (50, 70)}),

    _entry("Fruit Borer", CATEGORY_PEST, [
        ("Temperature 20–32°C",    lambda r: 20 <= r.temperature <= 32),
        ("RH 60–80%",              lambda r: 60 <= r.relative_humidity <= 80),
        ("Rainfall 10–30 mm/week", lambda r: 10 <= r.rainfall <= 30),
        ("Wind <10 km/h",          lambda r: r.wind_speed < 10),
    ], {"wind_speed": (0, 10), "wetness_hours": (4, 12), "soil_moisture": (60, 80)}),

    _entry("European Red Mite", CATEGORY_PEST, [
        ("Temperature 26–38°C",  lambda r: 26 <= r.temperature <= 38),
        ("RH 30–55%",            lambda r: 30 <= r.relative_humidity <= 55),
        ("Rainfall <10 mm/week", lambda r: r.rainfall < 10),
        ("Wind <8 km/h",         lambda r: r.wind_speed < 8),
        ("Dust level high",      lambda r: r.dust_level == "high"),
    ], {"wind_speed": (0, 8), "wetness_hours": (0, 4), "soil_moisture": (40, 70),
        "dust_level": "high"}),

    _entry("San José Scale", CATEGORY_PEST, [
        ("Temperature 22–32°C",  lambda r: 22 <= r.temperature <= 32),
        ("RH 50–70%",            lambda r: 50 <= r.relative_humidity <= 70),
        ("Rainfall <20 mm/week", lambda r: r.rainfall < 20),
        ("Wind <8 km/h",         lambda r: r.wind_speed < 8),
        ("Soil moisture 60–70% AND drainage good",
            lambda r: 60 <= r.soil_moisture <= 70 and r.drainage == "good"),
    ], {"wind_speed": (0, 8), "soil_moisture": (60, 70), "wetness_hours": (0, 6)}),

    _entry("Leaf Miner", CATEGORY_PEST, [
        ("Temperature 20–30°C",  lambda r: 20 <= r.temperature <= 30),
        ("RH 40–65%",            lambda r: 40 <= r.relative_humidity <= 65),
        ("Rainfall <15 mm/week", lambda r: r.rainfall < 15),
        ("Wind <6 km/h",         lambda r: r.wind_speed < 6),
        ("Leaf wetness <4h",     lambda r: r.wetness_hours < 4),
    ], {"wind_speed": (0, 6), "wetness_hours": (0, 4), "soil_moisture": (50, 70)}),

    _entry("Woolly Apple Aphid", CATEGORY_PEST, [
        ("Temperature 15–25°C",          lambda r: 15 <= r.temperature <= 25),
        ("RH 65–85%",                    lambda r: 65 <= r.relative_humidity <= 85),
        ("Rainfall 10–25 mm/week",       lambda r: 10 <= r.rainfall <= 25),
        ("Wind <10 km/h",                lambda r: r.wind_speed < 10),
        ("Soil moisture 65–80%",         lambda r: 65 <= r.soil_moisture <= 80),
        ("High canopy humidity (>=70%)", _canopy_humid),
    ], {"wind_speed": (0, 10), "wetness_hours": (2, 8), "soil_moisture": (65, 80)}),

    _entry("Green Apple Aphid", CATEGORY_PEST, [
        ("Temperature 14–24°C",          lambda r: 14 <= r.temperature <= 24),
        ("RH 55–75%",                    lambda r: 55 <= r.relative_humidity <= 75),
        ("Rainfall >20 mm/week",         lambda r: r.rainfall > 20),
        ("Wind <8 km/h",                 lambda r: r.wind_speed < 8),
        ("High canopy humidity (>=70%)", _canopy_humid),
    ], {"wind_speed": (0, 8), "wetness_hours": (2, 8), "soil_moisture": (60, 80)}),
)

_CATALOGS = MappingProxyType({
    CATEGORY_DISEASE: DISEASE_CATALOG,
    CATEGORY_PEST:    PEST_CATALOG,
})

# ---------------------------------------------------------------------------
# Tie-break weights (diseases only). Unlisted names weigh 1.0.
# ---------------------------------------------------------------------------
DISEASE_WEIGHTS = MappingProxyType({
    canonical_name(name): weight for name, weight in [
        ("Brown Rot",                      1.2),
        ("Bull's-eye Rot",                 1.15),
        ("Apple Scab",                     1.1),
        ("Apple Leaf Blotch (Alternaria)", 1.05),
    ]
})

# ---------------------------------------------------------------------------
# Prevention guide (diseases). Fireblight has guidance but no climate rules.
# ---------------------------------------------------------------------------
_PREVENTION = {
    "Apple Scab": [
        "Apply fungicides before rain during spring and early summer",
        "Remove fallen leaves and debris to reduce spore sources",
        "Ensure good canopy air circulation through pruning",
        "Avoid overhead irrigation that increases leaf wetness",
        "Use resistant apple varieties when possible",
    ],
    "Apple Leaf Blotch (Alternaria)": [
        "Remove infected leaves and fallen debris promptly",
        "Improve air circulation through canopy management",
        "Apply preventive fungicides during warm, humid periods",
        "Sanitize pruning tools to prevent spread",
        "Maintain balanced nitrogen fertilization",
    ],
    "Powdery Mildew": [
        "Apply sulfur or other fungicides during growing season",
        "Ensure adequate air flow by proper pruning",
        "Avoid over-fertilizing with nitrogen",
        "Remove infected leaves and shoots",
        "Plant resistant varieties in new orchards",
    ],
    "Brown Rot": [
        "Remove mummified fruit and dead twigs from trees",
        "Apply fungicides during bloom and fruit development",
        "Thin fruits to allow better air circulation",
        "Harvest carefully to avoid fruit wounds",
        "Control insects to prevent fruit entry points",
    ],
    "Bull's-eye Rot": [
        "Remove fruit with lenticels wounds during storage",
        "Maintain good orchard sanitation",
        "Store fruit at optimal humidity (90-95%) and temperature",
        "Apply fungicides to fruit before storage",
        "Ensure proper harvest technique to minimize skin damage",
    ],
    "Sooty Blotch": [
        "Improve air circulation by pruning lower branches",
        "Apply fungicides mid-summer through fruit development",
        "Reduce humidity through better canopy management",
        "Thin fruit clusters for better exposure",
        "Manage nearby fruit flies to reduce fungal transport",
    ],
    "Flyspeck": [
        "Prune to improve air circulation within canopy",
        "Apply fungicides mid to late summer",
        "Manage humidity levels in the orchard",
        "Remove infected fruit before storage",
        "Sanitize storage facilities",
    ],
    "Collar / Root Rot": [
        "Improve soil drainage through orchard management",
        "Avoid waterlogging by controlling irrigation",
        "Remove affected trees if disease is severe",
        "Use resistant rootstocks when replanting",
        "Maintain proper tree spacing for air flow",
    ],
    "Fireblight": [
        "Prune out infected branches 12 inches below canker",
        "Sterilize tools between cuts to prevent spread",
        "Avoid nitrogen over-fertilization",
        "Apply copper or antibiotic sprays at bloom time",
        "Remove branches with active oozing cankers",
    ],
}
PREVENTION_GUIDE = MappingProxyType({
    canonical_name(name): tuple(tips) for name, tips in _PREVENTION.items()
})


def get_catalog(category: str) -> tuple:
    """Ordered catalog entries for 'Disease' or 'Pest'."""
    if category not in _CATALOGS:
        raise ValueError(f"Unknown risk category {category!r}; expected one of {list(_CATALOGS)}")
    return _CATALOGS[category]


def catalog_names(category: str) -> list[str]:
    return [entry["name"] for entry in get_catalog(category)]


def get_weight(name: str) -> float:
    """Tie-break multiplier for a disease name (1.0 when unlisted)."""
    return DISEASE_WEIGHTS.get(canonical_name(name), DEFAULT_WEIGHT)


def get_prevention_tips(name: str) -> list[str]:
    """Prevention strategies for a disease; empty list when none are recorded."""
    return list(PREVENTION_GUIDE.get(canonical_name(name), ()))
