"""
Streamlit UI — Orchard Climate Risk Predictor.
Climate inputs (manual or auto-filled from Open-Meteo) → ranked apple disease / pest
risks, farm health score and an aggregate advisory. Dark agricultural theme.
Run with: streamlit run app.py
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import pandas as pd
import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from orchard_risk.config import (
    CATEGORY_DISEASE,
    CATEGORY_PEST,
    DEFAULT_CLIMATE_INPUTS,
    DRAINAGE_LEVELS,
    DUST_LEVELS,
    MODE_META,
    MODE_STANDARD,
    TOP_DISPLAY,
    TOP_N_RESULTS,
    ensure_dirs,
)
from orchard_risk.risk_engine import (
    attach_prevention_tips,
    compute_risks,
    count_by_level,
    top_risks,
)
from orchard_risk.aggregate_risk import compute_aggregate_risk
from orchard_risk.farm_health import calculate_farm_health, health_band
from orchard_risk.weather_fetcher import FETCHED_TO_FORM, get_climate_inputs


def _risk_colour(label: str) -> str:
    return {"Low": "green", "Medium": "orange", "High": "red",
            "low": "green", "medium": "orange", "high": "red", "critical": "red"}.get(label, "grey")


def _health_colour(band: str) -> str:
    return {"good": "green", "fair": "orange", "poor": "orange", "critical": "red"}.get(band, "grey")


def build_download_df(rows: list[dict]) -> pd.DataFrame:
    """Ranked risks as shown, with matched factors flattened."""
    return pd.DataFrame([
        {
            "Rank": i,
            "Name": r["name"],
            "Category": r["category"],
            "Score": round(r["score"], 1),
            "Level": r["level"],
            "Matched Factors": "; ".join(r["matched_factors"]),
        }
        for i, r in enumerate(rows, 1)
    ])


# ---------------------------------------------------------------------------
# Dark theme
# ---------------------------------------------------------------------------

def apply_theme():
    st.markdown("""
    <style>
    .stApp { background: linear-gradient(180deg, #0e1117 0%, #1a1d24 50%, #0e1117 100%); }
    [data-testid="stHeader"] { background: rgba(14, 17, 23, 0.9); }
    .main .block-container { padding-top: 1.5rem; }
    h1, h2, h3 { color: #b8d4b8 !important; }
    div[data-testid="stExpander"] { background: #262730; border-radius: 8px; border: 1px solid #3d4a3d; }
    .stButton > button { background: #2d5a2d !important; color: white !important; border-radius: 8px; }
    [data-testid="stSidebar"] { background: #1a1d24; }
    </style>
    """, unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

def _climate_form() -> dict:
    """Climate inputs, seeded from defaults and any auto-filled values."""
    values = st.session_state.setdefault("climate_inputs", dict(DEFAULT_CLIMATE_INPUTS))

    st.subheader("Climate parameters")
    c1, c2, c3, c4 = st.columns(4)
    values["temperature"] = c1.number_input("🌡️ Temp (°C)", value=float(values["temperature"]), step=0.5)
    values["rh"] = c2.number_input("💧 RH (%)", 0.0, 100.0, float(values["rh"]), step=1.0)
    values["weeklyRainfall"] = c3.number_input("🌧️ Rainfall (mm/week)", 0.0, 1000.0,
                                               float(values["weeklyRainfall"]), step=1.0)
    values["leafWetness"] = c4.number_input("🍃 Leaf wetness (h)", 0.0, 168.0,
                                            float(values["leafWetness"]), step=1.0)

    c5, c6, c7 = st.columns(3)
    values["windSpeed"] = c5.number_input("🌬️ Wind (km/h)", 0.0, 200.0, float(values["windSpeed"]), step=1.0)
    values["soilMoisture"] = c6.number_input("🟫 Soil moisture (%)", 0.0, 100.0,
                                             float(values["soilMoisture"]), step=1.0)
    values["canopyHumidity"] = c7.number_input("🌳 Canopy humidity (%)", 0.0, 100.0,
                                               float(values["canopyHumidity"]), step=1.0)

    with st.expander("Advanced options"):
        a1, a2 = st.columns(2)
        values["dustLevel"] = a1.selectbox("Dust level", DUST_LEVELS,
                                           index=DUST_LEVELS.index(values["dustLevel"]))
        values["drainage"] = a2.selectbox("Drainage", DRAINAGE_LEVELS,
                                          index=DRAINAGE_LEVELS.index(values["drainage"]))
        values["hasStandingWater48h"] = st.checkbox("Standing water for 48 h",
                                                    value=values["hasStandingWater48h"])
        values["hasTempJump10C"] = st.checkbox("Temperature jump >10°C in 24–48 h",
                                               value=values["hasTempJump10C"])
        values["hadDroughtThenHeavyRain"] = st.checkbox("Drought followed by heavy rain",
                                                        value=values["hadDroughtThenHeavyRain"])
    return dict(values)


# ---------------------------------------------------------------------------
# Main app
# ---------------------------------------------------------------------------

def main():
    st.set_page_config(
        page_title="Orchard Climate Risk Predictor",
        page_icon="🍎",
        layout="wide",
    )
    apply_theme()
    ensure_dirs()

    st.title("🍎 Orchard Climate Risk Predictor")
    st.caption("Rule-based apple disease & pest risk from climate conditions • Indicative, not diagnostic")

    col1, col2 = st.columns(2)
    view = col1.radio("View", ["🌿 Diseases", "🐛 Pests"], horizontal=True)
    category = CATEGORY_DISEASE if "Diseases" in view else CATEGORY_PEST
    model = col2.selectbox("Risk model", ["📋 Standard (rule-based)", "📊 Meta (range-based)"])
    mode = MODE_META if "Meta" in model else MODE_STANDARD

    inputs = _climate_form()
    inputs["mode"] = mode

    st.divider()
    if st.button("Predict", type="primary", use_container_width=True):
        st.session_state["last_inputs"] = inputs

    _render_sidebar()

    params = st.session_state.get("last_inputs")
    if params is None:
        st.info("Enter climate conditions (or auto-fill from the sidebar), then click **Predict**.")
        return

    results = top_risks(compute_risks(category, params), TOP_N_RESULTS)
    counts = count_by_level(results)
    health = calculate_farm_health(params, results)
    band = health_band(health)

    # -----------------------------------------------------------------------
    # Summary
    # -----------------------------------------------------------------------
    st.subheader("Risk summary")
    m1, m2, m3 = st.columns(3)
    m1.metric("Farm health", f"{health}/100")
    m1.markdown(f":{_health_colour(band)}[{band.upper()}]")
    m2.metric("High-risk items", counts["High"])
    m3.metric("Medium-risk items", counts["Medium"])

    # -----------------------------------------------------------------------
    # Top items with prevention tips
    # -----------------------------------------------------------------------
    st.subheader(f"Top {TOP_DISPLAY} {category.lower()} risks")
    medals = {1: "🥇", 2: "🥈", 3: "🥉"}
    rows = attach_prevention_tips(results)
    for rank, r in enumerate(rows[:TOP_DISPLAY], 1):
        header = f"{medals.get(rank, '#' + str(rank))}  {r['name']}  |  {r['score']:.0f}/100  |  {r['level']}"
        with st.expander(header, expanded=(rank == 1)):
            st.markdown(f"Risk: **{r['score']:.0f}/100** — :{_risk_colour(r['level'])}[{r['level']}]")
            st.progress(min(1.0, r["score"] / 100))
            if r["matched_factors"]:
                st.markdown("**Matched conditions**")
                for f in r["matched_factors"]:
                    st.markdown(f"- {f}")
            if r["tips"]:
                st.markdown("**Prevention**")
                for tip in r["tips"]:
                    st.markdown(f"- {tip}")
                if r["more_tips"]:
                    st.caption(f"+{r['more_tips']} more prevention strategies")

    st.divider()

    # -----------------------------------------------------------------------
    # Aggregate advisory
    # -----------------------------------------------------------------------
    advisory = compute_aggregate_risk(params)
    st.subheader("Overall climate advisory")
    a1, a2 = st.columns([1, 2])
    a1.metric("Aggregate risk", f"{advisory['riskScore']}/100")
    a1.markdown(f":{_risk_colour(advisory['riskLevel'])}[{advisory['riskLevel'].upper()}]")
    with a2:
        for rec in advisory["recommendations"]:
            st.markdown(f"- {rec}")
    factor_df = pd.DataFrame([
        {"Factor": k, "Value": v["value"], "Risk": v["risk"]}
        for k, v in advisory["factors"].items()
    ])
    st.dataframe(factor_df, use_container_width=True, hide_index=True)

    st.divider()
    st.subheader("All ranked results")
    report_df = build_download_df(rows)
    st.dataframe(report_df, use_container_width=True, hide_index=True)
    st.download_button(
        label="Download CSV",
        data=report_df.to_csv(index=False).encode("utf-8"),
        file_name=f"climate_risk_{category.lower()}_{mode}.csv",
        mime="text/csv",
    )


AUTOFILL_FLAG = "autofill_done"


def apply_fetched_inputs(state, fetched: dict) -> None:
    """Copy fetched weather into the form values and flag the notice for the next run."""
    values = state.setdefault("climate_inputs", dict(DEFAULT_CLIMATE_INPUTS))
    for src_key, form_key in FETCHED_TO_FORM.items():
        if src_key in fetched:
            values[form_key] = fetched[src_key]
    state[AUTOFILL_FLAG] = True


def _render_sidebar():
    sb = st.sidebar
    sb.markdown("**Auto-fill from weather data**")
    with sb.expander("Open-Meteo (free, no key)", expanded=False):
        lat = st.number_input("Latitude", -90.0, 90.0, 34.08, step=0.01, format="%.4f")
        lon = st.number_input("Longitude", -180.0, 180.0, 74.80, step=0.01, format="%.4f")
        end = st.date_input("End date", value=date.today())
        start = st.date_input("Start date", value=end - timedelta(days=6))
        if st.button("Load climate data"):
            with st.spinner("Loading live climate data..."):
                fetched = get_climate_inputs(lat, lon, start.isoformat(), end.isoformat())
            if not fetched:
                st.error("No climate data available for this location and period.")
            else:
                apply_fetched_inputs(st.session_state, fetched)
                st.rerun()
        if st.session_state.pop(AUTOFILL_FLAG, False):
            st.success("Climate inputs updated. Click **Predict** to refresh results.")
    sb.divider()
    sb.caption("Orchard Climate Risk Predictor")


if __name__ == "__main__":
    main()
