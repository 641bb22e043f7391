import pandas as pd

from config import (
    PANEL_START,
    PANEL_END,
    INCOME_EXTENSION_YEARS,
    INCOME_LAGS,
    ALLOTMENT_SLOPE,
    ALLOTMENT_MIN,
    ALLOTMENT_MAX,
)


def extend_series(
    income: pd.DataFrame, extra_years: int = INCOME_EXTENSION_YEARS
) -> pd.DataFrame:
    """
    Append ``extra_years`` rows after each state's last observed year.

    The new rows carry the state's name and code only; income stays empty.
    The allocation for year Y looks back to Y-2..Y-4, so the last two panel
    years need rows to exist even though no income was observed for them.
    """
    last = (
        income.sort_values(["state_fips", "year"])
        .groupby("state_fips", as_index=False)
        .agg(state_name=("state_name", "last"), year=("year", "max"))
    )

    extensions = []
    for step in range(1, extra_years + 1):
        ext = last.copy()
        ext["year"] = ext["year"] + step
        extensions.append(ext)

    extended = pd.concat([income, *extensions], ignore_index=True)
    return extended.sort_values(["state_fips", "year"]).reset_index(drop=True)


def add_income_lags(
    income: pd.DataFrame, lags: tuple[int, ...] = INCOME_LAGS
) -> pd.DataFrame:
    # Keyed on (state_fips, year - lag); a missing year gives NaN
    out = income.copy()
    for lag in lags:
        lagged = income[["state_fips", "year", "income"]].copy()
        lagged["year"] = lagged["year"] + lag
        lagged = lagged.rename(columns={"income": f"income_lag{lag}"})
        out = out.merge(lagged, on=["state_fips", "year"], how="left")
    return out


def allotment_percentage(index: pd.Series) -> pd.Series:
    return (1 - ALLOTMENT_SLOPE * index).clip(lower=ALLOTMENT_MIN, upper=ALLOTMENT_MAX)


def smooth_income(income: pd.DataFrame) -> pd.DataFrame:
    """
    Build the smoothed-income table for the panel years.

    income_smoothed = mean(income[Y-2], income[Y-3], income[Y-4]), missing if
    any lag is missing. income_index is the state's smoothed income over the
    national mean for that year, and allotment_pct = 1 - 0.5 * index clamped
    to [0.33, 0.75].
    """
    extended = extend_series(income)
    lagged = add_income_lags(extended)

    lagged = lagged[lagged["year"].between(PANEL_START, PANEL_END)].copy()

    lag_cols = [f"income_lag{lag}" for lag in INCOME_LAGS]
    lagged["income_smoothed"] = lagged[lag_cols].mean(axis=1, skipna=False)
    lagged["income_national"] = (
        lagged.groupby("year")["income_smoothed"].transform("mean")
    )
    lagged["income_index"] = lagged["income_smoothed"] / lagged["income_national"]
    lagged["allotment_pct"] = allotment_percentage(lagged["income_index"])

    out_cols = [
        "state_name",
        "state_fips",
        "year",
        "income_smoothed",
        "income_national",
        "income_index",
        "allotment_pct",
    ]
    return lagged[out_cols].sort_values(["state_fips", "year"]).reset_index(drop=True)
