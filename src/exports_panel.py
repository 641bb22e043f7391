import pandas as pd

from config import (
    PANEL_CSV,
    PANEL_START,
    PANEL_END,
    PANEL_YEARS,
    N_STATES,
    EXPECTED_PANEL_ROWS,
    ensure_directories,
)
from errors import BalanceViolationError

PANEL_COLUMNS = [
    "state_name",
    "state_fips",
    "year",
    "state_year",
    "predicted",
    "actual",
    "allotment_pct",
]


def check_balance(panel: pd.DataFrame) -> None:
    """
    Fail unless the panel has exactly one row per (state_fips, year), 48 rows
    in every panel year, 864 rows in total, and no missing allotment.
    """
    problems = []

    dupes = panel[panel.duplicated(subset=["state_fips", "year"], keep=False)]
    if not dupes.empty:
        problems.append(f"{len(dupes)} rows share a (state_fips, year) key")

    if len(panel) != EXPECTED_PANEL_ROWS:
        problems.append(f"panel has {len(panel)} rows, expected {EXPECTED_PANEL_ROWS}")

    by_year = (
        panel.groupby("year").size()
        .reindex(list(PANEL_YEARS), fill_value=0)
        .rename("rows")
        .reset_index()
    )
    by_year["missing_allotment"] = (
        panel.assign(missing=panel["allotment_pct"].isna() | panel["predicted"].isna())
        .groupby("year")["missing"].sum()
        .reindex(list(PANEL_YEARS), fill_value=0)
        .to_numpy()
    )
    bad_years = by_year[by_year["rows"] != N_STATES]
    if not bad_years.empty:
        problems.append(
            f"{len(bad_years)} years do not have {N_STATES} rows: "
            f"{bad_years['year'].tolist()}"
        )

    n_missing = int(by_year["missing_allotment"].sum())
    if n_missing:
        problems.append(f"{n_missing} rows have no allotment percentage or prediction")

    if problems:
        if not dupes.empty:
            diagnostics = dupes.sort_values(["year", "state_fips"]).reset_index(drop=True)
        else:
            diagnostics = by_year[
                (by_year["rows"] != N_STATES) | (by_year["missing_allotment"] > 0)
            ].reset_index(drop=True)
        raise BalanceViolationError(
            "Panel balance check failed: " + "; ".join(problems),
            diagnostics=diagnostics,
        )


def assemble_panel(allocation: pd.DataFrame, actuals: pd.DataFrame) -> pd.DataFrame:
    """
    Left-join the predicted allocation with actual funding by state name and
    year. The allocation side fixes the panel's extent: states or years seen
    only in the register are dropped, and a state-year with no recorded
    projects gets actual = 0.
    """
    panel = allocation.merge(
        actuals[["state_name", "year", "actual"]],
        on=["state_name", "year"],
        how="left",
    )
    panel["actual"] = panel["actual"].fillna(0.0)

    panel = panel[panel["year"].between(PANEL_START, PANEL_END)]
    panel = panel.dropna(subset=["state_fips"]).copy()
    panel["state_fips"] = panel["state_fips"].astype(int)
    panel["state_year"] = panel["state_name"] + " " + panel["year"].astype(str)

    check_balance(panel)

    return (
        panel[PANEL_COLUMNS]
        .sort_values(["year", "state_name"])
        .reset_index(drop=True)
    )


def export_panel(panel: pd.DataFrame, path=None) -> pd.DataFrame:
    if path is None:
        ensure_directories()
        path = PANEL_CSV
    panel[PANEL_COLUMNS].to_csv(path, index=False)
    return panel[PANEL_COLUMNS]
