"""
Imputation service for missing and outlying team-season values.

One parameterised imputer covers both processing paths:
- missing_only: fill cells that are NaN in the input
- missing_and_outliers: first clear values outside the percentile bounds of
  the screened columns, then fill them together with the missing cells

Filling is joint multiple imputation by chained equations: every column with
gaps is regressed on all other columns with a bootstrap OLS fit, and the
replacement is drawn from that conditional distribution. Several independent
rounds are drawn and resolved to one value per cell.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from loguru import logger
from sklearn.experimental import enable_iterative_imputer  # noqa: F401
from sklearn.impute import IterativeImputer

from wins_predictor.config import ImputationConfig, OutlierConfig, config
from wins_predictor.domain.common.errors import (
    InsufficientDataError,
    SchemaError,
    WinsPipelineError,
)
from wins_predictor.domain.ml.transformers import BootstrapRegressor
from wins_predictor.domain.models import (
    GROUP_COLUMN,
    INDEX_COLUMN,
    TARGET_COLUMN,
    ImputationMode,
)
from wins_predictor.domain.services.feature_engineering import (
    assign_strikeout_groups,
    strikeout_group_dtype,
)
from wins_predictor.domain.services.outlier_bounds import screen_outliers


@dataclass
class ImputationResult:
    """Completed dataset plus what the imputer changed."""

    data: pd.DataFrame
    mode: ImputationMode
    imputed_cells: Dict[str, int] = field(default_factory=dict)
    outlier_report: Dict[str, Dict[str, float]] = field(default_factory=dict)
    # True where a cell was missing or flagged and has been replaced
    imputed_mask: pd.DataFrame = field(default_factory=pd.DataFrame)
    rederived_groups: int = 0
    fallback_groups: int = 0

    @property
    def total_imputed(self) -> int:
        return int(sum(self.imputed_cells.values()))


class ImputationService:
    """Service for completing datasets with regression-based multiple imputation."""

    def __init__(
        self,
        imputation_config: Optional[ImputationConfig] = None,
        outlier_config: Optional[OutlierConfig] = None,
        random_seed: Optional[int] = None,
    ):
        """Initialize imputation service.

        Args:
            imputation_config: Rounds, sweeps and resolution rule (defaults to config)
            outlier_config: Percentiles and screened columns (defaults to config)
            random_seed: Seed for bootstrap draws (defaults to config)
        """
        self.imputation_config = imputation_config or config.imputation
        self.outlier_config = outlier_config or config.outliers
        self.random_seed = (
            random_seed if random_seed is not None else config.partition.random_seed
        )

    def impute(
        self,
        df: pd.DataFrame,
        mode: ImputationMode = ImputationMode.MISSING_ONLY,
        bounds_config: Optional[OutlierConfig] = None,
        group_columns: Optional[Iterable[str]] = None,
    ) -> ImputationResult:
        """
        Replace missing (and optionally outlying) cells across the whole dataset.

        Args:
            df: Dataset to complete (not modified)
            mode: ImputationMode.MISSING_ONLY or MISSING_AND_OUTLIERS
            bounds_config: Percentile thresholds overriding the service's
            group_columns: Columns to screen for outliers (defaults to configured
                screened columns present in df)

        Returns:
            ImputationResult whose data has no missing cells in modeled columns
        """
        mode = ImputationMode(mode)
        bounds_config = bounds_config or self.outlier_config
        numeric_columns = self._numeric_columns(df)

        logger.info(f"🧩 Imputing {len(df)} rows ({mode.value})...")

        data = df.copy()
        outlier_report: Dict[str, Dict[str, float]] = {}
        if mode == ImputationMode.MISSING_AND_OUTLIERS:
            screened = self._screened_columns(numeric_columns, group_columns, bounds_config)
            data, outlier_report = screen_outliers(data, screened, bounds_config)

        for column in numeric_columns:
            if data[column].notna().sum() == 0:
                raise InsufficientDataError(
                    f"Column '{column}' has no observed values to impute from",
                    column=column,
                )

        missing_mask = data[numeric_columns].isna()
        imputed_cells = {
            c: int(n) for c, n in missing_mask.sum().items() if n > 0
        }

        if imputed_cells:
            data[numeric_columns] = self._impute_numeric(
                data[numeric_columns].astype("float64"), missing_mask
            )
            for column, count in imputed_cells.items():
                logger.debug(f"   {column}: {count} cells imputed")
        else:
            logger.info("   No missing cells; skipping imputation")

        result = ImputationResult(
            data=data,
            mode=mode,
            imputed_cells=imputed_cells,
            outlier_report=outlier_report,
            imputed_mask=missing_mask,
        )

        if GROUP_COLUMN in data.columns:
            self._resolve_groups(result)

        remaining = int(result.data[numeric_columns].isna().sum().sum())
        if remaining:
            raise WinsPipelineError(f"{remaining} cells still missing after imputation")

        logger.info(
            f"✅ Imputed {result.total_imputed} cells across "
            f"{len(imputed_cells)} columns ({self.imputation_config.imputation_rounds} rounds)"
        )
        return result

    # ========== Private Internal Methods ==========

    def _numeric_columns(self, df: pd.DataFrame) -> List[str]:
        """Columns that take part in imputation, as predictors and targets."""
        excluded = {INDEX_COLUMN, GROUP_COLUMN}
        columns = [c for c in df.columns if c not in excluded]

        non_numeric = [
            c for c in columns if not pd.api.types.is_numeric_dtype(df[c])
        ]
        if non_numeric:
            raise SchemaError("Imputation requires numeric columns", non_numeric)

        if not columns:
            raise InsufficientDataError("No numeric columns to impute")
        return columns

    def _screened_columns(
        self,
        numeric_columns: List[str],
        group_columns: Optional[Iterable[str]],
        bounds_config: OutlierConfig,
    ) -> List[str]:
        if group_columns is None:
            return [c for c in bounds_config.screened_columns if c in numeric_columns]

        group_columns = list(group_columns)
        unknown = set(group_columns) - set(numeric_columns)
        if unknown:
            raise SchemaError("Outlier screening columns not in dataset", unknown)
        if TARGET_COLUMN in group_columns:
            raise SchemaError("The target column cannot be screened", [TARGET_COLUMN])
        return group_columns

    def _impute_numeric(
        self, values: pd.DataFrame, missing_mask: pd.DataFrame
    ) -> pd.DataFrame:
        """Draw the configured number of completions and resolve them per cell."""
        X = values.to_numpy()

        if self.imputation_config.clip_to_observed_range:
            min_value = np.nanmin(X, axis=0)
            max_value = np.nanmax(X, axis=0)
        else:
            min_value, max_value = -np.inf, np.inf

        draws = []
        for round_idx in range(self.imputation_config.imputation_rounds):
            seed = self.random_seed + round_idx
            # base seed only; each cloned regressor mixes in the data it is fitted on
            imputer = IterativeImputer(
                estimator=BootstrapRegressor(random_state=seed),
                sample_posterior=True,
                max_iter=self.imputation_config.max_iter,
                initial_strategy="mean",
                imputation_order="ascending",
                skip_complete=True,
                min_value=min_value,
                max_value=max_value,
                random_state=seed,
            )
            draws.append(imputer.fit_transform(X))
            if self.imputation_config.resolution == "first":
                break

        if self.imputation_config.resolution == "mean":
            resolved = np.mean(draws, axis=0)
        else:
            resolved = draws[0]

        completed = X.copy()
        mask = missing_mask.to_numpy()
        completed[mask] = resolved[mask]

        return pd.DataFrame(completed, columns=values.columns, index=values.index)

    def _resolve_groups(self, result: ImputationResult) -> None:
        """Re-derive missing strikeout groups, falling back to the configured group."""
        data = result.data
        groups = data[GROUP_COLUMN].astype(strikeout_group_dtype())
        missing = groups.isna()

        if missing.any() and {"batting_so", "pitching_so"} <= set(data.columns):
            rederived = assign_strikeout_groups(
                data.loc[missing, "batting_so"], data.loc[missing, "pitching_so"]
            )
            groups.loc[missing] = rederived
            result.rederived_groups = int(rederived.notna().sum())
            missing = groups.isna()

        if missing.any():
            fallback = self.imputation_config.fallback_group
            groups.loc[missing] = fallback
            result.fallback_groups = int(missing.sum())
            logger.warning(
                f"⚠️ {result.fallback_groups} rows had no resolvable {GROUP_COLUMN}; "
                f"assigned fallback '{fallback}'"
            )

        data[GROUP_COLUMN] = groups
