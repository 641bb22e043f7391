import pandas as pd

from config import (
    REGISTER_TSV,
    REGISTER_STATE_CANDIDATES,
    REGISTER_YEAR_CANDIDATES,
    REGISTER_FUNDS_CANDIDATES,
)
from base_etl import coerce_numeric, resolve_column


def load_register_raw(path: str | None = None) -> pd.DataFrame:
    tsv_path = path if path is not None else REGISTER_TSV
    # Register is tab-delimited; keep every field as text until cleaned
    return pd.read_csv(tsv_path, sep="\t", dtype=str, keep_default_na=False)


def normalize_register_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Lower-case the register headers and pick out the three columns the
    aggregation needs, renamed to state_name / year_raw / funding_raw.
    """
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]

    state_col = resolve_column(df, REGISTER_STATE_CANDIDATES, "register state")
    year_col = resolve_column(df, REGISTER_YEAR_CANDIDATES, "register year")
    funds_col = resolve_column(df, REGISTER_FUNDS_CANDIDATES, "register funding")

    out = df[[state_col, year_col, funds_col]].copy()
    out.columns = ["state_name", "year_raw", "funding_raw"]
    return out


def expand_two_digit_year(series: pd.Series) -> pd.Series:
    # Register covers 1947-1964 only, so "47" is always 1947
    years = pd.to_numeric(series.astype(str).str.strip(), errors="coerce")
    return years.where(years >= 100, years + 1900)


def clean_funding(series: pd.Series) -> pd.Series:
    # Anything left after removing separators, quotes and "$" must parse whole
    return coerce_numeric(series)


def aggregate_actuals(register: pd.DataFrame) -> pd.DataFrame:
    """
    Sum project-level federal funding to one row per (state_name, year).

    Unparseable amounts are left out of the sum; a state-year whose amounts
    are all unparseable sums to NaN rather than 0.
    """
    reg = normalize_register_columns(register)

    reg["state_name"] = reg["state_name"].astype(str).str.strip()
    reg["year"] = expand_two_digit_year(reg["year_raw"])
    reg["actual"] = clean_funding(reg["funding_raw"])

    reg = reg.dropna(subset=["year"])
    reg = reg[reg["state_name"] != ""]
    reg["year"] = reg["year"].astype(int)

    actuals = (
        reg.groupby(["state_name", "year"])["actual"]
        .sum(min_count=1)
        .reset_index()
    )
    return actuals.sort_values(["year", "state_name"]).reset_index(drop=True)
