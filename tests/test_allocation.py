import numpy as np
import pandas as pd
import pytest

from allocation import (
    merge_income_population,
    compute_shares,
    attach_appropriations,
    apply_funding_floors,
    build_allocation,
)
from base_etl import normalize_wide
from config import APPROPRIATIONS
from errors import MergeIntegrityError
from income_etl import smooth_income
from population_etl import expand_population


@pytest.fixture
def smoothed(income_raw):
    return smooth_income(normalize_wide(income_raw, "income"))


@pytest.fixture
def population(population_raw):
    data, labels = population_raw
    return expand_population(normalize_wide(data, "population", year_labels=labels))


def test_shares_sum_to_one_each_year(smoothed, population):
    allocation = build_allocation(smoothed, population)

    totals = allocation.groupby("year")["allocation_share"].sum()
    assert len(totals) == 18
    assert np.allclose(totals.to_numpy(), 1.0)


def test_weighted_population_uses_squared_allotment(smoothed, population):
    shares = compute_shares(merge_income_population(smoothed, population))

    expected = shares["allotment_pct"] ** 2 * shares["population"]
    assert np.allclose(shares["weighted_population"], expected)


def test_predicted_is_share_of_appropriation(smoothed, population):
    allocation = build_allocation(smoothed, population)

    expected = allocation["allocation_share"] * allocation["year"].map(APPROPRIATIONS)
    assert np.allclose(allocation["predicted_formula"], expected)
    assert (allocation["predicted"] >= allocation["predicted_formula"]).all()


def test_floors_hold_in_built_allocation(smoothed, population):
    allocation = build_allocation(smoothed, population)

    assert (allocation.loc[allocation["year"] == 1948, "predicted"] >= 100_000).all()
    assert (allocation.loc[allocation["year"] >= 1949, "predicted"] >= 200_000).all()
    assert len(allocation) == 48 * 18


def test_funding_floors():
    df = pd.DataFrame(
        {
            "year": [1947, 1948, 1948, 1949, 1950, 1964],
            "predicted": [10.0, 150_000.0, 50_000.0, 150_000.0, 250_000.0, np.nan],
        }
    )

    out = apply_funding_floors(df)

    assert out["predicted"].iloc[:5].tolist() == [10.0, 150_000.0, 100_000.0, 200_000.0, 250_000.0]
    assert np.isnan(out["predicted"].iloc[5])
    # input untouched
    assert df["predicted"].iloc[2] == 50_000.0


def test_missing_population_row_is_fatal(smoothed, population):
    population = population[
        ~((population["state_fips"] == 39) & (population["year"] == 1955))
    ]

    with pytest.raises(MergeIntegrityError) as excinfo:
        merge_income_population(smoothed, population)

    diag = excinfo.value.diagnostics
    assert len(diag) == 1
    assert diag.iloc[0]["state_fips"] == 39
    assert diag.iloc[0]["year"] == 1955
    assert diag.iloc[0]["side"] == "income only"
    assert "1955" in str(excinfo.value)


def test_extra_population_state_is_fatal(smoothed, population):
    extra = population[population["state_fips"] == 39].assign(
        state_name="Puerto Rico", state_fips=43
    )
    population = pd.concat([population, extra], ignore_index=True)

    with pytest.raises(MergeIntegrityError) as excinfo:
        merge_income_population(smoothed, population)

    diag = excinfo.value.diagnostics
    assert len(diag) == 18
    assert set(diag["side"]) == {"population only"}
    assert set(diag["state_name"]) == {"Puerto Rico"}


def test_year_without_appropriation_is_fatal(smoothed, population):
    shares = compute_shares(merge_income_population(smoothed, population))
    partial = {year: amount for year, amount in APPROPRIATIONS.items() if year != 1964}

    with pytest.raises(MergeIntegrityError) as excinfo:
        attach_appropriations(shares, partial)

    assert set(excinfo.value.diagnostics["year"]) == {1964}


def test_appropriation_table_covers_panel_years():
    assert sorted(APPROPRIATIONS) == list(range(1947, 1965))
