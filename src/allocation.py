import numpy as np
import pandas as pd

from config import APPROPRIATIONS, FLOOR_1948, FLOOR_FROM_1949
from errors import MergeIntegrityError


def _raise_on_unmatched(
    merged: pd.DataFrame,
    keys: list[str],
    left_label: str,
    right_label: str,
) -> None:
    """
    Raise MergeIntegrityError listing the keys an outer join could not pair,
    with per-year counts for each side.
    """
    unmatched = merged[merged["_merge"] != "both"].copy()
    if unmatched.empty:
        return

    unmatched["side"] = unmatched["_merge"].astype(str).map(
        {"left_only": f"{left_label} only", "right_only": f"{right_label} only"}
    )
    diag_cols = [c for c in ["state_fips", "state_name", "year", "side"] if c in unmatched.columns]
    diagnostics = (
        unmatched[diag_cols]
        .sort_values(["year", *[k for k in keys if k != "year"]])
        .reset_index(drop=True)
    )

    by_year = diagnostics.groupby(["year", "side"]).size().unstack(fill_value=0)
    raise MergeIntegrityError(
        f"{left_label} / {right_label} join left {len(diagnostics)} unmatched keys "
        f"on {keys}.\nPer-year mismatches:\n{by_year.to_string()}",
        diagnostics=diagnostics,
    )


def merge_income_population(
    smoothed: pd.DataFrame, population: pd.DataFrame
) -> pd.DataFrame:
    merged = smoothed.merge(
        population,
        on=["state_fips", "year"],
        how="outer",
        suffixes=("", "_population"),
        indicator=True,
    )
    # Population-only rows still need a name in the diagnostics
    merged["state_name"] = merged["state_name"].fillna(merged["state_name_population"])

    _raise_on_unmatched(merged, ["state_fips", "year"], "income", "population")

    return merged.drop(columns=["state_name_population", "_merge"])


def compute_shares(merged: pd.DataFrame) -> pd.DataFrame:
    out = merged.copy()
    out["weighted_population"] = out["allotment_pct"] ** 2 * out["population"]
    out["allocation_share"] = (
        out["weighted_population"]
        / out.groupby("year")["weighted_population"].transform("sum")
    )
    return out


def attach_appropriations(
    shares: pd.DataFrame, appropriations: dict | None = None
) -> pd.DataFrame:
    table = appropriations if appropriations is not None else APPROPRIATIONS
    approp = pd.DataFrame(
        {"year": list(table.keys()), "appropriation": list(table.values())}
    )

    merged = shares.merge(approp, on="year", how="outer", indicator=True)
    _raise_on_unmatched(merged, ["year"], "allocation", "appropriation")

    out = merged.drop(columns=["_merge"])
    out["predicted"] = out["allocation_share"] * out["appropriation"]
    return out


def apply_funding_floors(df: pd.DataFrame) -> pd.DataFrame:
    """
    Raise predicted allotments to the statutory minimum: $100,000 in 1948,
    $200,000 from 1949 on. 1947 has no minimum. Missing predictions stay
    missing.
    """
    out = df.copy()
    floor = pd.Series(
        np.select(
            [out["year"] == 1948, out["year"] >= 1949],
            [FLOOR_1948, FLOOR_FROM_1949],
            default=np.nan,
        ),
        index=out.index,
    )
    out["predicted_formula"] = out["predicted"]
    out["predicted"] = out["predicted"].mask(out["predicted"] < floor, floor)
    return out


def build_allocation(
    smoothed: pd.DataFrame,
    population: pd.DataFrame,
    appropriations: dict | None = None,
) -> pd.DataFrame:
    merged = merge_income_population(smoothed, population)
    shares = compute_shares(merged)
    predicted = attach_appropriations(shares, appropriations)
    allocation = apply_funding_floors(predicted)

    out_cols = [
        "state_name",
        "state_fips",
        "year",
        "allotment_pct",
        "population",
        "weighted_population",
        "allocation_share",
        "appropriation",
        "predicted_formula",
        "predicted",
    ]
    return allocation[out_cols].sort_values(["year", "state_fips"]).reset_index(drop=True)
