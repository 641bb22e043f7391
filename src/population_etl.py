import pandas as pd

from config import PANEL_START, PANEL_END
from errors import ColumnResolutionError


def expand_population(population: pd.DataFrame) -> pd.DataFrame:
    """
    Restrict normalized population records to the panel years.

    A population table without the first panel year means the year labels
    were not read correctly, so it aborts instead of yielding a short panel.
    """
    if PANEL_START not in set(population["year"]):
        raise ColumnResolutionError(
            f"Population source has no {PANEL_START} column after year resolution; "
            f"found years: {sorted(population['year'].unique())[:5]}..."
        )

    out = population[population["year"].between(PANEL_START, PANEL_END)]
    out = out[["state_name", "state_fips", "year", "population"]]
    return out.sort_values(["state_fips", "year"]).reset_index(drop=True)
