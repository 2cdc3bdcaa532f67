"""Adapters for reading and writing team-season datasets."""

from .csv_repository import (
    CsvDatasetRepository,
    drop_sparse_columns,
    normalize_column_name,
    normalize_columns,
    validate_schema,
)

__all__ = [
    "CsvDatasetRepository",
    "drop_sparse_columns",
    "normalize_column_name",
    "normalize_columns",
    "validate_schema",
]
