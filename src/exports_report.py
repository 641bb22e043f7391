import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import statsmodels.formula.api as smf

from config import SCATTER_HTML, REPORT_TXT, PANEL_START, PANEL_END, ensure_directories


def fit_actual_on_predicted(panel: pd.DataFrame) -> dict:
    """
    Correlation and OLS fit of actual funding on the predicted allotment.
    A perfect reconstruction would give slope 1, intercept 0.
    """
    data = panel[["actual", "predicted"]].dropna()
    model = smf.ols("actual ~ predicted", data=data).fit()

    return {
        "n": int(model.nobs),
        "correlation": float(data["actual"].corr(data["predicted"])),
        "intercept": float(model.params["Intercept"]),
        "slope": float(model.params["predicted"]),
        "r_squared": float(model.rsquared),
        "model": model,
    }


def format_report(fit: dict) -> str:
    lines = [
        f"Hill-Burton allotments, actual vs predicted ({PANEL_START}-{PANEL_END})",
        "",
        f"Observations: {fit['n']:,}",
        f"Correlation (actual, predicted): {fit['correlation']:.4f}",
        "",
        "OLS: actual ~ predicted",
        f"  intercept: {fit['intercept']:,.2f}",
        f"  slope:     {fit['slope']:.4f}",
        f"  R-squared: {fit['r_squared']:.4f}",
        "",
        fit["model"].summary().as_text(),
        "",
    ]
    return "\n".join(lines)


def export_report(panel: pd.DataFrame, path=None) -> dict:
    if path is None:
        ensure_directories()
        path = REPORT_TXT

    fit = fit_actual_on_predicted(panel)
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_report(fit))
    return fit


def build_scatter_figure(panel: pd.DataFrame) -> go.Figure:
    fig = px.scatter(
        panel,
        x="predicted",
        y="actual",
        color="year",
        hover_name="state_year",
        labels={
            "predicted": "Predicted allotment (USD)",
            "actual": "Actual project funding (USD)",
            "year": "Fiscal year",
        },
        title="Actual vs predicted Hill-Burton allotments by state and year",
    )

    # 45-degree reference across the predicted range
    lo, hi = np.nanmin(panel["predicted"]), np.nanmax(panel["predicted"])
    fig.add_trace(
        go.Scatter(
            x=[lo, hi],
            y=[lo, hi],
            mode="lines",
            name="actual = predicted",
            line=dict(color="black", dash="dash"),
        )
    )
    fig.update_layout(margin=dict(l=10, r=10, t=40, b=40))
    return fig


def export_scatter(panel: pd.DataFrame, path=None) -> go.Figure:
    if path is None:
        ensure_directories()
        path = SCATTER_HTML

    fig = build_scatter_figure(panel)
    fig.write_html(path, include_plotlyjs="cdn")
    return fig
