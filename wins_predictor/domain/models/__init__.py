"""Domain models for team-season observations."""

from .observation import (
    CONSUMED_COLUMNS,
    DERIVED_FEATURES,
    GROUP_COLUMN,
    INDEX_COLUMN,
    OPTIONAL_PREDICTORS,
    PLATE_APPEARANCE_CONSTANT,
    RAW_PREDICTORS,
    REQUIRED_PREDICTORS,
    TARGET_COLUMN,
    ImputationMode,
    StrikeoutGroup,
)

__all__ = [
    "StrikeoutGroup",
    "ImputationMode",
    "INDEX_COLUMN",
    "TARGET_COLUMN",
    "GROUP_COLUMN",
    "PLATE_APPEARANCE_CONSTANT",
    "RAW_PREDICTORS",
    "OPTIONAL_PREDICTORS",
    "REQUIRED_PREDICTORS",
    "DERIVED_FEATURES",
    "CONSUMED_COLUMNS",
]
