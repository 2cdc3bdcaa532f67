"""
Feature engineering for team-season observations.

Derives composite baserunning, on-base and at-bat statistics and the
strikeout-group cohort from raw counting stats. Undefined results (missing
inputs, zero denominators) are left as NaN for the imputer to repair.
"""

from typing import Callable, List, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from wins_predictor.domain.common.errors import SchemaError
from wins_predictor.domain.models import (
    CONSUMED_COLUMNS,
    GROUP_COLUMN,
    PLATE_APPEARANCE_CONSTANT,
    StrikeoutGroup,
)


# Ordered rules: (group, offset). A row belongs to the first group whose
# threshold 0.96 * pitching_so + offset its batting_so meets or exceeds.
STRIKEOUT_SLOPE = 0.96
STRIKEOUT_RULES: List[Tuple[StrikeoutGroup, float]] = [
    (StrikeoutGroup.HIGH, 10.0),
    (StrikeoutGroup.MED_HIGH, -50.0),
    (StrikeoutGroup.MED_LOW, -120.0),
]
STRIKEOUT_DEFAULT = StrikeoutGroup.LOW


def strikeout_group_dtype() -> pd.CategoricalDtype:
    return pd.CategoricalDtype(categories=StrikeoutGroup.levels(), ordered=True)


def _safe_ratio(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    ratio = numerator / denominator
    return ratio.replace([np.inf, -np.inf], np.nan)


def assign_strikeout_groups(
    batting_so: pd.Series, pitching_so: pd.Series
) -> pd.Series:
    """
    Assign each row to a strikeout group using the ordered rule list.

    Rows where either input is missing get a missing group.

    Args:
        batting_so: Batting strikeouts
        pitching_so: Strikeouts by the team's pitchers

    Returns:
        Categorical Series aligned with the inputs
    """
    batting_so = batting_so.astype("float64")
    pitching_so = pitching_so.astype("float64")
    known = batting_so.notna() & pitching_so.notna()

    groups = pd.Series(pd.NA, index=batting_so.index, dtype="object")
    unassigned = known.copy()
    for group, offset in STRIKEOUT_RULES:
        matches = unassigned & (batting_so >= STRIKEOUT_SLOPE * pitching_so + offset)
        groups[matches] = group.value
        unassigned &= ~matches
    groups[unassigned] = STRIKEOUT_DEFAULT.value

    return groups.astype(strikeout_group_dtype())


# Derived features and the raw columns each one needs.
DERIVED_FEATURE_INPUTS = {
    "net_stolen_bases": ["baserun_sb", "baserun_cs"],
    "offense_on_base_pct": ["batting_h", "batting_bb", "baserun_cs"],
    "defense_on_base_pct": ["pitching_h", "fielding_e", "pitching_bb", "fielding_dp"],
    "total_at_bats": ["batting_h", "batting_bb", "baserun_cs"],
    GROUP_COLUMN: ["batting_so", "pitching_so"],
}


def _net_stolen_bases(df: pd.DataFrame) -> pd.Series:
    return df["baserun_sb"] - df["baserun_cs"]


def _total_at_bats(df: pd.DataFrame) -> pd.Series:
    return df["batting_h"] + df["batting_bb"] - df["baserun_cs"] + PLATE_APPEARANCE_CONSTANT


def _offense_on_base_pct(df: pd.DataFrame) -> pd.Series:
    return _safe_ratio(df["batting_h"] + df["batting_bb"], _total_at_bats(df))


def _defense_on_base_pct(df: pd.DataFrame) -> pd.Series:
    reached = df["pitching_h"] + df["fielding_e"] + df["pitching_bb"] - df["fielding_dp"]
    return _safe_ratio(reached, reached + PLATE_APPEARANCE_CONSTANT)


DERIVED_FEATURE_FUNCS: List[Tuple[str, Callable[[pd.DataFrame], pd.Series]]] = [
    ("net_stolen_bases", _net_stolen_bases),
    ("offense_on_base_pct", _offense_on_base_pct),
    ("defense_on_base_pct", _defense_on_base_pct),
    ("total_at_bats", _total_at_bats),
]


def drop_consumed_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Drop raw columns folded into the derived features."""
    return df.drop(columns=[c for c in CONSUMED_COLUMNS if c in df.columns])


class FeatureEngineer:
    """
    Derive composite statistics from raw team-season counts.

    Each derived value is a pure function of the raw values in the same row.
    """

    def required_columns(self) -> List[str]:
        columns: List[str] = []
        for inputs in DERIVED_FEATURE_INPUTS.values():
            columns.extend(c for c in inputs if c not in columns)
        return columns

    def engineer(self, df: pd.DataFrame, drop_consumed: bool = True) -> pd.DataFrame:
        """
        Add derived features and the strikeout group.

        The home-run columns (batting_hr, pitching_hr) are not consumed: no
        derived feature is built from them, so they stay as predictors even
        when drop_consumed is set.

        Args:
            df: Raw observations (not modified)
            drop_consumed: Drop the raw columns consumed by the derived features

        Returns:
            Augmented copy of the dataset
        """
        missing = set(self.required_columns()) - set(df.columns)
        if missing:
            raise SchemaError("Missing columns required for feature engineering", missing)

        features = df.copy()
        for name, func in DERIVED_FEATURE_FUNCS:
            features[name] = func(features).astype("float64")

        features[GROUP_COLUMN] = assign_strikeout_groups(
            features["batting_so"], features["pitching_so"]
        )

        undefined = {
            name: int(features[name].isna().sum())
            for name, _ in DERIVED_FEATURE_FUNCS + [(GROUP_COLUMN, None)]
        }
        logger.info(
            f"🔧 Engineered {len(DERIVED_FEATURE_FUNCS)} features + {GROUP_COLUMN} "
            f"for {len(features)} rows"
        )
        for name, count in undefined.items():
            if count:
                logger.debug(f"   {name}: {count} undefined values deferred to imputation")

        if drop_consumed:
            features = drop_consumed_columns(features)

        return features
