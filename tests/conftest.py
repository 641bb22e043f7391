import sys
from pathlib import Path

import pandas as pd
import pytest

# Add src to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

STATES = [
    ("Alabama", 1), ("Arizona", 4), ("Arkansas", 5), ("California", 6),
    ("Colorado", 8), ("Connecticut", 9), ("Delaware", 10), ("Florida", 12),
    ("Georgia", 13), ("Idaho", 16), ("Illinois", 17), ("Indiana", 18),
    ("Iowa", 19), ("Kansas", 20), ("Kentucky", 21), ("Louisiana", 22),
    ("Maine", 23), ("Maryland", 24), ("Massachusetts", 25), ("Michigan", 26),
    ("Minnesota", 27), ("Mississippi", 28), ("Missouri", 29), ("Montana", 30),
    ("Nebraska", 31), ("Nevada", 32), ("New Hampshire", 33), ("New Jersey", 34),
    ("New Mexico", 35), ("New York", 36), ("North Carolina", 37), ("North Dakota", 38),
    ("Ohio", 39), ("Oklahoma", 40), ("Oregon", 41), ("Pennsylvania", 42),
    ("Rhode Island", 44), ("South Carolina", 45), ("South Dakota", 46), ("Tennessee", 47),
    ("Texas", 48), ("Utah", 49), ("Vermont", 50), ("Virginia", 51),
    ("Washington", 53), ("West Virginia", 54), ("Wisconsin", 55), ("Wyoming", 56),
]

# Rows every raw source carries that must never reach the panel
NON_STATE_ROWS = [
    ("United States", "00"),
    ("Alaska", "02"),
    ("District of Columbia", "11"),
    ("Hawaii", "15"),
    ("New England", "91"),
    ("Source: historical statistics", ""),
]

INCOME_YEARS = list(range(1943, 1963))
POPULATION_YEARS = list(range(1947, 1965))


def income_value(fips: int, year: int) -> int:
    return 1000 + 10 * fips + 25 * (year - 1943)


def population_value(fips: int, year: int) -> int:
    return 100_000 * fips + 1_000 * (year - 1947)


def make_income_raw(states=STATES) -> pd.DataFrame:
    rows = []
    for name, fips in states:
        row = {"GeoName": f" {name} ", "GeoFips": f"{fips:02d}"}
        for year in INCOME_YEARS:
            row[str(year)] = f"{income_value(fips, year):,}"
        rows.append(row)
    for name, code in NON_STATE_ROWS:
        row = {"GeoName": name, "GeoFips": code}
        for year in INCOME_YEARS:
            row[str(year)] = "1,500"
        rows.append(row)
    return pd.DataFrame(rows)


def make_population_raw(states=STATES, years=POPULATION_YEARS) -> pd.DataFrame:
    """Raw variable names in the header, year-bearing labels in row one."""
    var_names = {year: f"v{i + 1}" for i, year in enumerate(years)}

    label_row = {"state": "State", "statefip": "FIPS code"}
    for year, var in var_names.items():
        label_row[var] = f"Resident population, July 1, {year}"

    rows = [label_row]
    for name, fips in states:
        row = {"state": name, "statefip": str(fips)}
        for year, var in var_names.items():
            row[var] = str(population_value(fips, year))
        rows.append(row)
    for name, code in NON_STATE_ROWS:
        row = {"state": name, "statefip": code}
        for var in var_names.values():
            row[var] = "1000"
        rows.append(row)
    return pd.DataFrame(rows)


def make_register_lines(states=STATES) -> list[str]:
    lines = ["STATE\tYr\tFacility\tFederal Share"]
    for i, (name, _) in enumerate(states):
        lines.append(f'{name}\t50\tGeneral Hospital {i}\t"{100_000 * (i + 1):,}"')
        lines.append(f"{name} \t50\tHealth Center {i}\t50000")
        amount = "n/a" if i == 0 else "75,000"
        lines.append(f"{name}\t60\tNursing Home {i}\t{amount}")
    lines.append("Puerto Rico\t55\tDistrict Hospital\t125000")
    lines.append("Ohio\t\tUndated project\t999999")
    return lines


@pytest.fixture
def income_raw():
    return make_income_raw()


@pytest.fixture
def population_raw():
    raw = make_population_raw()
    labels = raw.iloc[0].to_dict()
    return raw.iloc[1:].reset_index(drop=True), labels


@pytest.fixture
def income_csv(tmp_path):
    path = tmp_path / "income.csv"
    make_income_raw().to_csv(path, index=False)
    return path


@pytest.fixture
def population_csv(tmp_path):
    path = tmp_path / "population.csv"
    make_population_raw().to_csv(path, index=False)
    return path


@pytest.fixture
def register_tsv(tmp_path):
    path = tmp_path / "register.tsv"
    path.write_text("\n".join(make_register_lines()) + "\n", encoding="utf-8")
    return path
