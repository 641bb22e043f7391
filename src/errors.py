import pandas as pd


class PanelIntegrityError(RuntimeError):
    """Base class for structural failures that abort the panel build."""

    exit_code = 1

    def __init__(self, message: str, diagnostics: pd.DataFrame | None = None):
        super().__init__(message)
        self.diagnostics = diagnostics


class ColumnResolutionError(PanelIntegrityError):
    """A required identity or year column could not be located."""

    exit_code = 2


class MergeIntegrityError(PanelIntegrityError):
    """A join expected to be total left keys unmatched on one side."""

    exit_code = 3


class BalanceViolationError(PanelIntegrityError):
    """The assembled panel is not one row per (state, year) over 48 x 18."""

    exit_code = 4
