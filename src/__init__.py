"""
Hill-Burton state allocation panel.

Modules:
- config: paths, year ranges, state exclusions, appropriations and floors.
- errors: fatal integrity errors and their exit codes.
- base_etl: read raw income/population tables and normalize to long state-year records.
- income_etl: extend income series, 3-year lagged smoothing, allotment percentage.
- population_etl: restrict population to the panel years.
- allocation: weighted population shares, appropriation join, funding floors.
- actuals_etl: aggregate the project register to state-year actual funding.
- exports_panel: assemble, balance-check and write allocation_panel.csv.
- exports_report: correlation/OLS report and actual-vs-predicted scatter.
- pipeline: run the whole build and write the artifacts.
"""
