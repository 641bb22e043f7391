# app.py

import sys
from pathlib import Path

import numpy as np
import pandas as pd

import streamlit as st
import plotly.express as px

# -------------------------------------------------------------------
# Paths and data loading
# -------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from config import PANEL_CSV
from exports_report import build_scatter_figure, fit_actual_on_predicted


@st.cache_data
def load_data():
    return pd.read_csv(PANEL_CSV)


st.set_page_config(
    page_title="Hill-Burton Allotments 1947-1964",
    layout="wide",
)

st.title("Hill-Burton Hospital Construction Allotments, 1947-1964")

if not PANEL_CSV.exists():
    st.error(f"{PANEL_CSV} not found. Run scripts/run_pipeline.py first.")
    st.stop()

panel = load_data()


# Sidebar filters

st.sidebar.header("Filters")

year_min, year_max = int(panel["year"].min()), int(panel["year"].max())
year_range = st.sidebar.slider(
    "Fiscal years",
    min_value=year_min,
    max_value=year_max,
    value=(year_min, year_max),
)

available_states = sorted(panel["state_name"].unique())
state_filter = st.sidebar.multiselect(
    "States",
    available_states,
    default=[],
)

panel_f = panel[panel["year"].between(*year_range)].copy()
if state_filter:
    panel_f = panel_f[panel_f["state_name"].isin(state_filter)]

tab_overview, tab_states, tab_table = st.tabs(
    ["Actual vs Predicted", "State Trends", "Panel"]
)

# 1. Actual vs predicted

with tab_overview:
    c1, c2, c3 = st.columns(3, gap="large")
    total_pred = float(panel_f["predicted"].sum())
    total_actual = float(panel_f["actual"].sum())
    corr = (
        fit_actual_on_predicted(panel_f)["correlation"]
        if len(panel_f) > 2
        else np.nan
    )

    c1.metric("Predicted allotments", f"${total_pred:,.0f}")
    c2.metric("Actual project funding", f"${total_actual:,.0f}")
    c3.metric(
        "Correlation (actual, predicted)",
        f"{corr:0.3f}" if not np.isnan(corr) else "NA",
    )

    if not panel_f.empty:
        st.plotly_chart(build_scatter_figure(panel_f), key="overview_scatter")

# 2. State trends

with tab_states:
    st.subheader("Predicted vs actual over time")

    focus = state_filter or available_states[:5]
    trend = (
        panel_f[panel_f["state_name"].isin(focus)]
        .melt(
            id_vars=["state_name", "year"],
            value_vars=["predicted", "actual"],
            var_name="series",
            value_name="usd",
        )
    )
    fig_trend = px.line(
        trend,
        x="year",
        y="usd",
        color="state_name",
        line_dash="series",
        markers=True,
        labels={
            "year": "Fiscal year",
            "usd": "Dollars (USD)",
            "state_name": "State",
            "series": "Series",
        },
        title="Predicted allotment and actual funding by state",
    )
    fig_trend.update_layout(margin=dict(l=10, r=10, t=40, b=40))
    st.plotly_chart(fig_trend, key="state_trend")

    by_year = (
        panel_f.groupby("year")[["predicted", "actual"]]
            .sum()
            .reset_index()
    )
    fig_year = px.bar(
        by_year.melt(id_vars="year", var_name="series", value_name="usd"),
        x="year",
        y="usd",
        color="series",
        barmode="group",
        labels={"year": "Fiscal year", "usd": "Dollars (USD)", "series": "Series"},
        title="National totals by year",
    )
    fig_year.update_layout(margin=dict(l=10, r=10, t=40, b=40))
    st.plotly_chart(fig_year, key="year_totals")

# 3. Panel table

with tab_table:
    st.subheader("State-year panel")
    st.dataframe(
        panel_f.sort_values(["year", "state_name"]),
        height=500,
    )
