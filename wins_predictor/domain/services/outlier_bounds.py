"""Percentile-based outlier bounds and screening.

Values strictly outside the empirical [lower, upper] percentile range of a
column are flagged so the imputer can replace them instead of letting them
drive the regression fit directly.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from wins_predictor.config import OutlierConfig
from wins_predictor.domain.common.errors import InsufficientDataError


@dataclass(frozen=True)
class OutlierBounds:
    """Lower/upper clipping bounds for one column."""

    lower: float
    upper: float

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


def compute_bounds(
    values: Iterable[float],
    upper_percentile: float = 0.97,
    lower_percentile: float = 0.03,
) -> OutlierBounds:
    """
    Compute lower/upper empirical percentiles of the non-missing values.

    Args:
        values: Numeric values; NaN/None entries are ignored
        upper_percentile: Upper percentile in (0, 1)
        lower_percentile: Lower percentile in (0, 1), below upper_percentile

    Returns:
        OutlierBounds(lower, upper)
    """
    if not 0.0 < lower_percentile < upper_percentile < 1.0:
        raise ValueError(
            f"Percentiles must satisfy 0 < lower < upper < 1, got "
            f"lower={lower_percentile}, upper={upper_percentile}"
        )

    series = pd.to_numeric(pd.Series(values, dtype="float64"), errors="coerce").dropna()
    if series.empty:
        raise InsufficientDataError("Cannot compute bounds without observed values")

    lower, upper = series.quantile([lower_percentile, upper_percentile]).tolist()
    return OutlierBounds(lower=float(lower), upper=float(upper))


def flag_outliers(values: pd.Series, bounds: OutlierBounds) -> pd.Series:
    """Boolean mask of observed values strictly outside the bounds."""
    return values.notna() & ((values < bounds.lower) | (values > bounds.upper))


def screen_outliers(
    df: pd.DataFrame,
    columns: Iterable[str],
    outlier_config: Optional[OutlierConfig] = None,
) -> Tuple[pd.DataFrame, Dict[str, Dict[str, float]]]:
    """
    Replace outlying values with NaN in the given columns.

    Bounds are computed per column on that column's own non-missing values
    before any cell is cleared.

    Args:
        df: Dataset to screen (not modified)
        columns: Columns subject to screening
        outlier_config: Percentile thresholds (defaults to OutlierConfig())

    Returns:
        Tuple of (screened copy, per-column report with bounds and flagged count)
    """
    outlier_config = outlier_config or OutlierConfig()
    screened = df.copy()
    report: Dict[str, Dict[str, float]] = {}

    for column in columns:
        values = screened[column].astype("float64")
        try:
            bounds = compute_bounds(
                values,
                upper_percentile=outlier_config.upper_percentile,
                lower_percentile=outlier_config.lower_percentile,
            )
        except InsufficientDataError:
            raise InsufficientDataError(
                f"Column '{column}' has no observed values to screen", column=column
            )

        mask = flag_outliers(values, bounds)
        screened[column] = values.mask(mask, np.nan)

        report[column] = {
            "lower": bounds.lower,
            "upper": bounds.upper,
            "flagged": int(mask.sum()),
        }
        logger.debug(
            f"   {column}: bounds [{bounds.lower:.4f}, {bounds.upper:.4f}], "
            f"{int(mask.sum())} flagged"
        )

    total = sum(int(r["flagged"]) for r in report.values())
    logger.info(f"🔍 Outlier screening flagged {total} cells in {len(report)} columns")
    return screened, report
