"""
CSV dataset repository for team-season tables.

Loads the labelled training table and the unlabelled evaluation table from a
URL or local path, normalises the source headers (TEAM_BATTING_H -> batting_h,
TARGET_WINS -> wins, INDEX -> index) and validates the raw schema.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pandas as pd
from loguru import logger

from wins_predictor.config import DataSourceConfig, config
from wins_predictor.domain.common.errors import SchemaError
from wins_predictor.domain.models import (
    INDEX_COLUMN,
    RAW_PREDICTORS,
    REQUIRED_PREDICTORS,
    TARGET_COLUMN,
)

_HEADER_ALIASES = {"target_wins": TARGET_COLUMN}


def normalize_column_name(name: str) -> str:
    """Map a source header to the lower snake case schema name."""
    normalized = re.sub(r"[^0-9a-z]+", "_", str(name).strip().lower()).strip("_")
    if normalized.startswith("team_"):
        normalized = normalized[len("team_") :]
    return _HEADER_ALIASES.get(normalized, normalized)


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    renamed = df.rename(columns=normalize_column_name)
    duplicated = renamed.columns[renamed.columns.duplicated()].tolist()
    if duplicated:
        raise SchemaError("Duplicate columns after header normalisation", duplicated)
    return renamed


def validate_schema(df: pd.DataFrame, require_target: bool) -> None:
    """
    Fail fast when a required raw column is absent.

    Args:
        df: Normalised dataset
        require_target: Whether the target column must be present
    """
    required = list(REQUIRED_PREDICTORS)
    if require_target:
        required.append(TARGET_COLUMN)

    missing = set(required) - set(df.columns)
    if missing:
        raise SchemaError("Dataset is missing required columns", missing)


def coerce_numeric(df: pd.DataFrame) -> pd.DataFrame:
    """Cast schema columns to float, treating unparseable entries as missing."""
    df = df.copy()
    for column in RAW_PREDICTORS + [TARGET_COLUMN]:
        if column in df.columns:
            df[column] = pd.to_numeric(df[column], errors="coerce").astype("float64")
    return df


def drop_sparse_columns(
    df: pd.DataFrame, max_missing_fraction: float, protected: Optional[List[str]] = None
) -> Tuple[pd.DataFrame, List[str]]:
    """
    Drop predictor columns whose missing fraction exceeds the threshold.

    Args:
        df: Dataset
        max_missing_fraction: Largest tolerated missing fraction
        protected: Columns never dropped

    Returns:
        Tuple of (dataset without sparse columns, dropped column names)
    """
    protected = set(protected or [INDEX_COLUMN, TARGET_COLUMN])
    if df.empty:
        return df.copy(), []

    missing_fraction = df.isna().mean()
    dropped = [
        c
        for c in df.columns
        if c not in protected and missing_fraction[c] > max_missing_fraction
    ]
    for column in dropped:
        logger.warning(
            f"⚠️ Dropping '{column}': {missing_fraction[column]:.1%} missing "
            f"(> {max_missing_fraction:.0%})"
        )
    return df.drop(columns=dropped), dropped


class CsvDatasetRepository:
    """Load and save team-season tables as CSV."""

    def __init__(self, data_config: Optional[DataSourceConfig] = None):
        """
        Initialize repository.

        Args:
            data_config: Source locations and validation limits (defaults to config)
        """
        self.data_config = data_config or config.data_source

    def read_raw(self, source: Union[str, Path]) -> pd.DataFrame:
        """Read a table exactly as supplied, without normalisation."""
        logger.info(f"📦 Loading {source}...")
        df = pd.read_csv(source)
        logger.info(f"   {len(df)} rows, {len(df.columns)} columns")
        return df

    def prepare_raw(self, df: pd.DataFrame, require_target: bool) -> pd.DataFrame:
        """
        Normalise headers, validate schema and types of an in-memory table.

        Args:
            df: Table as read from the source
            require_target: True for the labelled training table

        Returns:
            Normalised copy with numeric schema columns
        """
        df = coerce_numeric(normalize_columns(df))
        validate_schema(df, require_target)

        if require_target:
            wins = df[TARGET_COLUMN]
            invalid = wins.isna() | (wins < self.data_config.min_wins) | (
                wins > self.data_config.max_wins
            )
            if invalid.any():
                raise SchemaError(
                    f"{int(invalid.sum())} rows have {TARGET_COLUMN} outside "
                    f"[{self.data_config.min_wins}, {self.data_config.max_wins}]"
                )
        return df

    def load_training_data(self, source: Optional[Union[str, Path]] = None) -> pd.DataFrame:
        """Load the labelled training table."""
        df = self.read_raw(source or self.data_config.training_url)
        return self.prepare_raw(df, require_target=True)

    def load_evaluation_data(
        self, source: Optional[Union[str, Path]] = None
    ) -> pd.DataFrame:
        """Load the unlabelled evaluation table."""
        df = self.read_raw(source or self.data_config.evaluation_url)
        return self.prepare_raw(df, require_target=False)

    def save_predictions(self, df: pd.DataFrame, path: Union[str, Path]) -> Path:
        """Write the evaluation table with its appended prediction column."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)
        logger.info(f"💾 Saved {len(df)} predictions to {path}")
        return path
