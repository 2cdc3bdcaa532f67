"""Common domain types shared across services."""

from .errors import (
    InsufficientDataError,
    PartitionError,
    SchemaError,
    WinsPipelineError,
)

__all__ = [
    "WinsPipelineError",
    "SchemaError",
    "InsufficientDataError",
    "PartitionError",
]
