"""Exception types raised by the data preparation and modeling pipeline."""

from typing import Iterable, Optional


class WinsPipelineError(Exception):
    """Base class for pipeline failures surfaced to the caller."""

    pass


class SchemaError(WinsPipelineError):
    """Raised when a dataset does not carry the columns or values a stage needs."""

    def __init__(self, message: str, columns: Optional[Iterable[str]] = None):
        self.columns = sorted(columns) if columns else []
        if self.columns:
            message = f"{message}: {self.columns}"
        super().__init__(message)


class InsufficientDataError(WinsPipelineError):
    """Raised when a column or partition has too few observed values to proceed."""

    def __init__(self, message: str, column: Optional[str] = None):
        self.column = column
        super().__init__(message)


class PartitionError(WinsPipelineError):
    """Raised when rows cannot be assigned to a train/test split or a group."""

    pass
