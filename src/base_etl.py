import re

import pandas as pd

from config import (
    INCOME_CSV,
    POPULATION_CSV,
    FIPS_MIN,
    FIPS_MAX,
    EXCLUDED_FIPS,
    NATIONAL_ROW_NAME,
    STATE_NAME_CANDIDATES,
    STATE_FIPS_CANDIDATES,
)
from errors import ColumnResolutionError

YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d)")


def extract_year(label) -> int | None:
    """
    Pull the 4-digit year out of a column name or label.

    "1947" -> 1947, "Population, July 1, 1947 (thousands)" -> 1947,
    "State" -> None. A label naming two different years is ambiguous and
    raises ColumnResolutionError.
    """
    if label is None or (not isinstance(label, str) and pd.isna(label)):
        return None

    found = {int(m) for m in YEAR_PATTERN.findall(str(label))}
    if not found:
        return None
    if len(found) > 1:
        raise ColumnResolutionError(
            f"Column label {label!r} matches more than one year: {sorted(found)}"
        )
    return found.pop()


def coerce_numeric(series: pd.Series) -> pd.Series:
    # '"1,234"', "$5,000" -> 1234.0, 5000.0
    if pd.api.types.is_numeric_dtype(series):
        return series.astype(float)
    cleaned = (
        series.astype(str)
        .str.replace(r"[,\"'$]", "", regex=True)
        .str.strip()
    )
    return pd.to_numeric(cleaned, errors="coerce")


def resolve_column(df: pd.DataFrame, candidates: list[str], what: str) -> str:
    lookup = {str(c).strip().lower(): c for c in df.columns}
    for candidate in candidates:
        if candidate in lookup:
            return lookup[candidate]
    raise ColumnResolutionError(
        f"No {what} column found (expected one of {candidates}); "
        f"got columns: {list(df.columns[:10])}"
    )


def normalize_wide(
    df: pd.DataFrame,
    value_name: str,
    year_labels: dict | None = None,
) -> pd.DataFrame:
    """
    Turn a wide state-by-year table into long (state_name, state_fips, year,
    <value_name>) records for the 48 contiguous states.

    Year identity comes from ``year_labels`` (raw column -> label) when given,
    otherwise from the column names themselves.
    """
    name_col = resolve_column(df, STATE_NAME_CANDIDATES, "state name")
    fips_col = resolve_column(df, STATE_FIPS_CANDIDATES, "state code")

    year_cols: dict = {}
    for col in df.columns:
        if col in (name_col, fips_col):
            continue
        label = year_labels.get(col) if year_labels is not None else col
        year = extract_year(label)
        if year is None:
            continue
        if year in year_cols.values():
            raise ColumnResolutionError(
                f"Year {year} resolved from more than one {value_name} column"
            )
        year_cols[col] = year

    if not year_cols:
        raise ColumnResolutionError(
            f"No year columns found in {value_name} source; "
            f"got columns: {list(df.columns[:10])}"
        )

    out = df[[name_col, fips_col, *year_cols]].rename(
        columns={name_col: "state_name", fips_col: "state_fips", **year_cols}
    )

    out["state_name"] = out["state_name"].astype(str).str.strip()
    out["state_fips"] = pd.to_numeric(out["state_fips"], errors="coerce")

    # Codes outside [1, 56] are regions and footnotes
    valid = (
        out["state_fips"].between(FIPS_MIN, FIPS_MAX)
        & (out["state_fips"] % 1 == 0)
    )
    out = out[valid].copy()
    out["state_fips"] = out["state_fips"].astype(int)

    out = out[out["state_name"] != NATIONAL_ROW_NAME]
    out = out[~out["state_fips"].isin(EXCLUDED_FIPS)]

    long = out.melt(
        id_vars=["state_name", "state_fips"],
        var_name="year",
        value_name=value_name,
    )
    long["year"] = long["year"].astype(int)
    long[value_name] = coerce_numeric(long[value_name])

    return long.sort_values(["state_fips", "year"]).reset_index(drop=True)


def load_income_raw(path: str | None = None) -> pd.DataFrame:
    csv_path = path if path is not None else INCOME_CSV
    df = pd.read_csv(csv_path, dtype=str)
    df.columns = [c.strip() for c in df.columns]
    return df


def load_population_raw(path: str | None = None) -> tuple[pd.DataFrame, dict]:
    """
    The population extract has raw variable names in the header and the
    descriptive labels (which carry the year) in the first row beneath it.
    """
    csv_path = path if path is not None else POPULATION_CSV
    raw = pd.read_csv(csv_path, dtype=str)
    raw.columns = [c.strip() for c in raw.columns]

    if raw.empty:
        raise ColumnResolutionError(
            f"Population file {csv_path} has no label row beneath the header."
        )

    labels = raw.iloc[0].to_dict()
    data = raw.iloc[1:].reset_index(drop=True)
    return data, labels
