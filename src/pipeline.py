from pathlib import Path

import pandas as pd

from config import PANEL_CSV, SCATTER_HTML, REPORT_TXT, ensure_directories
from errors import PanelIntegrityError
from base_etl import load_income_raw, load_population_raw, normalize_wide
from income_etl import smooth_income
from population_etl import expand_population
from allocation import build_allocation
from actuals_etl import load_register_raw, aggregate_actuals
from exports_panel import assemble_panel, export_panel
from exports_report import export_report, export_scatter


def _kept_summary(value_name: str, raw: pd.DataFrame, long: pd.DataFrame) -> str:
    return (
        f"{value_name}: kept {long['state_fips'].nunique()} states of {len(raw)} rows "
        f"(years {long['year'].min()}-{long['year'].max()})"
    )


def build_panel(
    income_path: str | None = None,
    population_path: str | None = None,
    register_path: str | None = None,
) -> pd.DataFrame:
    """
    Build the balanced state-year panel from the three raw sources.
    Nothing is written here; any structural problem raises a
    PanelIntegrityError before a panel exists.
    """
    print("Normalizing per-capita income...")
    income_raw = load_income_raw(income_path)
    income = normalize_wide(income_raw, "income")
    print(_kept_summary("income", income_raw, income))
    smoothed = smooth_income(income)
    print(f"Smoothed income rows: {len(smoothed)}")

    print("Normalizing population...")
    pop_raw, pop_labels = load_population_raw(population_path)
    pop_long = normalize_wide(pop_raw, "population", year_labels=pop_labels)
    print(_kept_summary("population", pop_raw, pop_long))
    population = expand_population(pop_long)
    print(f"Population rows: {len(population)}")

    print("Computing predicted allotments...")
    allocation = build_allocation(smoothed, population)

    print("Aggregating project register...")
    actuals = aggregate_actuals(load_register_raw(register_path))
    print(f"Register state-years: {len(actuals)}")

    print("Assembling panel...")
    return assemble_panel(allocation, actuals)


def run_all(
    income_path: str | None = None,
    population_path: str | None = None,
    register_path: str | None = None,
    out_dir: str | None = None,
) -> int:
    """Run the pipeline and write all artifacts. Returns a process exit code."""
    try:
        panel = build_panel(income_path, population_path, register_path)
    except PanelIntegrityError as e:
        print(f"{type(e).__name__}: {e}")
        if e.diagnostics is not None:
            print(e.diagnostics.to_string(index=False))
        return e.exit_code

    if out_dir is None:
        ensure_directories()
        panel_path, scatter_path, report_path = PANEL_CSV, SCATTER_HTML, REPORT_TXT
    else:
        out = Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)
        panel_path = out / PANEL_CSV.name
        scatter_path = out / SCATTER_HTML.name
        report_path = out / REPORT_TXT.name

    export_panel(panel, panel_path)
    print(f"Panel rows: {len(panel)} -> {panel_path}")

    export_scatter(panel, scatter_path)
    fit = export_report(panel, report_path)
    print(f"Correlation (actual, predicted): {fit['correlation']:.4f}")
    print(f"OLS slope: {fit['slope']:.4f}, R-squared: {fit['r_squared']:.4f}")
    print("Done.")
    return 0
