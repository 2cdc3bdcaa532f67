"""Train/test and cohort partitioning of prepared datasets."""

from typing import Dict, List, Optional, Tuple

import pandas as pd
from loguru import logger
from sklearn.model_selection import train_test_split

from wins_predictor.domain.common.errors import PartitionError
from wins_predictor.domain.models import GROUP_COLUMN, StrikeoutGroup


def split(
    df: pd.DataFrame, train_fraction: float = 0.8, seed: int = 42
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Randomly split rows into train and test partitions without replacement.

    The training partition holds round(train_fraction * n) rows. The same seed
    on the same rows always gives the same assignment.

    Args:
        df: Dataset to split
        train_fraction: Share of rows for training, in (0, 1)
        seed: Random seed

    Returns:
        Tuple of (train, test) row subsets, original index preserved
    """
    if not 0.0 < train_fraction < 1.0:
        raise PartitionError(f"train_fraction must be in (0, 1), got {train_fraction}")

    n_rows = len(df)
    n_train = int(round(train_fraction * n_rows))
    if n_train == 0 or n_train == n_rows:
        raise PartitionError(
            f"Cannot split {n_rows} rows at {train_fraction:.2f}: "
            f"one partition would be empty"
        )

    train, test = train_test_split(
        df, train_size=n_train, random_state=seed, shuffle=True
    )
    logger.info(f"✂️ Split {n_rows} rows → {len(train)} train / {len(test)} test")
    return train, test


def group_split(
    df: pd.DataFrame,
    group_column: str = GROUP_COLUMN,
    groups: Optional[List[str]] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Partition rows by exact match on a categorical column.

    Every expected group appears as a key, possibly with an empty frame.

    Args:
        df: Dataset to partition
        group_column: Categorical column to split on
        groups: Expected group values (defaults to the strikeout groups)

    Returns:
        Dict mapping group value -> row subset
    """
    if group_column not in df.columns:
        raise PartitionError(f"Column '{group_column}' not in dataset")

    groups = groups or StrikeoutGroup.levels()
    labels = df[group_column].astype("object")

    if labels.isna().any():
        raise PartitionError(
            f"{int(labels.isna().sum())} rows have no '{group_column}' value"
        )
    unknown = set(labels.unique()) - set(groups)
    if unknown:
        raise PartitionError(f"Unknown {group_column} values: {sorted(map(str, unknown))}")

    cohorts = {group: df[labels == group] for group in groups}
    logger.debug(
        "   Cohorts: " + ", ".join(f"{g}={len(c)}" for g, c in cohorts.items())
    )
    return cohorts
