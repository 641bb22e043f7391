from pathlib import Path

# Root of the repo (adjust if needed)
PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_RAW = PROJECT_ROOT / "data_raw"
DATA_EXPORTS = PROJECT_ROOT / "data_exports"

# Input files
INCOME_CSV = DATA_RAW / "state_income_1943_1962.csv"
POPULATION_CSV = DATA_RAW / "state_population_1947_1964.csv"
REGISTER_TSV = DATA_RAW / "hill_burton_projects.tsv"

# Output files
PANEL_CSV = DATA_EXPORTS / "allocation_panel.csv"
SCATTER_HTML = DATA_EXPORTS / "actual_vs_predicted.html"
REPORT_TXT = DATA_EXPORTS / "allocation_report.txt"

# Year coverage
PANEL_YEARS = range(1947, 1965)
PANEL_START = PANEL_YEARS[0]
PANEL_END = PANEL_YEARS[-1]
INCOME_EXTENSION_YEARS = 2
INCOME_LAGS = (2, 3, 4)

# State universe: 48 contiguous states
FIPS_MIN = 1
FIPS_MAX = 56
EXCLUDED_FIPS = {2, 11, 15}  # Alaska, District of Columbia, Hawaii
NATIONAL_ROW_NAME = "United States"
N_STATES = 48
EXPECTED_PANEL_ROWS = N_STATES * len(PANEL_YEARS)

# Allotment formula
ALLOTMENT_SLOPE = 0.5
ALLOTMENT_MIN = 0.33
ALLOTMENT_MAX = 0.75

# Minimum allotments; 1947 has none
FLOOR_1948 = 100_000
FLOOR_FROM_1949 = 200_000

# National hospital construction appropriation by fiscal year (USD)
APPROPRIATIONS = {
    1947: 75_000_000,
    1948: 75_000_000,
    1949: 75_000_000,
    1950: 150_000_000,
    1951: 150_000_000,
    1952: 82_500_000,
    1953: 75_000_000,
    1954: 65_000_000,
    1955: 75_000_000,
    1956: 101_200_000,
    1957: 123_800_000,
    1958: 120_000_000,
    1959: 121_200_000,
    1960: 125_000_000,
    1961: 126_200_000,
    1962: 150_000_000,
    1963: 150_000_000,
    1964: 150_000_000,
}

# Column lookups (matched case-insensitively after stripping)
STATE_NAME_CANDIDATES = ["state_name", "state", "name", "geoname", "area name"]
STATE_FIPS_CANDIDATES = ["state_fips", "statefip", "fips", "geofips", "code"]
REGISTER_STATE_CANDIDATES = ["state", "state_name"]
REGISTER_YEAR_CANDIDATES = ["yr", "year", "fy"]
REGISTER_FUNDS_CANDIDATES = [
    "federal_share",
    "federal share",
    "hb_funds",
    "hb funds",
    "amount",
]


def ensure_directories():
    DATA_RAW.mkdir(parents=True, exist_ok=True)
    DATA_EXPORTS.mkdir(parents=True, exist_ok=True)
