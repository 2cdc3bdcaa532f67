"""
ModelTrainer - fits the wins regressions and summarises them.

Provides:
- Pooled OLS fits with a coefficient table (estimate, std error, t, p)
- Piecewise fits, one OLS per strikeout-group cohort
- Saving fitted pipelines with JSON metadata
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import joblib
import numpy as np
import pandas as pd
from loguru import logger
from scipy import stats
from sklearn.pipeline import Pipeline

from wins_predictor.config import ModelingConfig, config
from wins_predictor.domain.common.errors import InsufficientDataError, SchemaError
from wins_predictor.domain.ml import GroupedLinearModel
from wins_predictor.domain.models import GROUP_COLUMN
from wins_predictor.domain.services.partition_service import group_split

from .config import EvaluationConfig
from .pipelines import build_ols_pipeline


@dataclass
class FittedModel:
    """A fitted regression with the statistics the comparison reports."""

    name: str
    model: Union[Pipeline, GroupedLinearModel]
    predictors: List[str]
    target: str
    n_obs: int
    intercept: float = float("nan")
    coefficients: Dict[str, float] = field(default_factory=dict)
    residual_df: int = 0
    r2: float = float("nan")
    adjusted_r2: float = float("nan")
    residual_std_error: float = float("nan")
    coefficient_table: Optional[pd.DataFrame] = None
    group_fits: Dict[str, "FittedModel"] = field(default_factory=dict)

    @property
    def num_coefficients(self) -> int:
        return len(self.predictors)

    @property
    def is_grouped(self) -> bool:
        return isinstance(self.model, GroupedLinearModel)

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        return np.asarray(self.model.predict(df), dtype="float64")

    def summary(self) -> Dict[str, Any]:
        info = {
            "name": self.name,
            "predictors": self.predictors,
            "n_obs": self.n_obs,
            "residual_df": self.residual_df,
            "r2": self.r2,
            "adjusted_r2": self.adjusted_r2,
            "residual_std_error": self.residual_std_error,
        }
        if self.is_grouped:
            info["groups"] = {g: fit.summary() for g, fit in self.group_fits.items()}
        else:
            info["intercept"] = self.intercept
            info["coefficients"] = self.coefficients
        return info


def _coefficient_table(
    X: np.ndarray, residuals: np.ndarray, params: np.ndarray, names: List[str]
) -> pd.DataFrame:
    """OLS standard errors, t values and two-sided p values."""
    design = np.column_stack([np.ones(len(X)), X])
    dof = design.shape[0] - design.shape[1]

    if dof > 0:
        sigma2 = (residuals**2).sum() / dof
        cov = sigma2 * np.linalg.pinv(design.T @ design)
        std_err = np.sqrt(np.clip(np.diag(cov), 0.0, None))
        with np.errstate(divide="ignore", invalid="ignore"):
            t_values = params / std_err
        p_values = 2 * stats.t.sf(np.abs(t_values), dof)
    else:
        std_err = t_values = p_values = np.full(len(params), np.nan)

    return pd.DataFrame(
        {
            "estimate": params,
            "std_error": std_err,
            "t_value": t_values,
            "p_value": p_values,
        },
        index=["intercept"] + names,
    )


class ModelTrainer:
    """
    Fits pooled and piecewise OLS models on prepared partitions.
    """

    def __init__(
        self,
        modeling_config: Optional[ModelingConfig] = None,
        evaluation_config: Optional[EvaluationConfig] = None,
    ):
        """
        Initialize trainer with configuration.

        Args:
            modeling_config: Target column and model directory (defaults to config)
            evaluation_config: Cohort size margins (defaults to EvaluationConfig())
        """
        self.modeling_config = modeling_config or config.modeling
        self.evaluation_config = evaluation_config or EvaluationConfig()

    @property
    def target(self) -> str:
        return self.modeling_config.target

    def _check_columns(self, df: pd.DataFrame, predictors: List[str]) -> None:
        missing = set(predictors + [self.target]) - set(df.columns)
        if missing:
            raise SchemaError("Training data is missing columns", missing)

    def fit(
        self, train_df: pd.DataFrame, predictors: List[str], name: str = "ols"
    ) -> FittedModel:
        """
        Fit a pooled OLS model.

        Args:
            train_df: Complete training partition
            predictors: Predictor columns
            name: Model identifier

        Returns:
            FittedModel with coefficients and fit statistics
        """
        predictors = list(predictors)
        self._check_columns(train_df, predictors)

        n_obs = len(train_df)
        k = len(predictors)
        if n_obs < k + 1:
            raise InsufficientDataError(
                f"{name}: {n_obs} rows cannot identify {k} coefficients + intercept"
            )

        X = train_df[predictors].to_numpy(dtype="float64")
        y = train_df[self.target].to_numpy(dtype="float64")
        if np.isnan(X).any() or np.isnan(y).any():
            raise InsufficientDataError(f"{name}: training data contains missing values")

        pipeline = build_ols_pipeline(predictors)
        pipeline.fit(train_df, y)

        regressor = pipeline.named_steps["regressor"]
        residuals = y - pipeline.predict(train_df)
        residual_df = n_obs - k - 1

        sse = float((residuals**2).sum())
        sst = float(((y - y.mean()) ** 2).sum())
        r2 = 1 - sse / sst if sst > 0 else float("nan")
        if residual_df > 0 and sst > 0:
            adjusted_r2 = 1 - (sse / residual_df) / (sst / (n_obs - 1))
            residual_std_error = float(np.sqrt(sse / residual_df))
        else:
            adjusted_r2 = residual_std_error = float("nan")

        params = np.concatenate([[regressor.intercept_], regressor.coef_])
        table = _coefficient_table(X, residuals, params, predictors)

        fitted = FittedModel(
            name=name,
            model=pipeline,
            predictors=predictors,
            target=self.target,
            n_obs=n_obs,
            intercept=float(regressor.intercept_),
            coefficients=dict(zip(predictors, map(float, regressor.coef_))),
            residual_df=residual_df,
            r2=r2,
            adjusted_r2=adjusted_r2,
            residual_std_error=residual_std_error,
            coefficient_table=table,
        )
        logger.info(
            f"📐 {name}: n={n_obs}, k={k}, R²={r2:.3f}, adj R²={adjusted_r2:.3f}"
        )
        return fitted

    def fit_grouped(
        self,
        train_df: pd.DataFrame,
        predictors: List[str],
        group_column: str = GROUP_COLUMN,
        name: str = "piecewise",
    ) -> FittedModel:
        """
        Fit one OLS model per group cohort.

        Cohorts too small to identify the coefficients are routed to a pooled
        model fitted on all rows.

        Args:
            train_df: Complete training partition including the group column
            predictors: Predictor columns
            group_column: Cohort column
            name: Model identifier

        Returns:
            FittedModel wrapping a GroupedLinearModel
        """
        predictors = list(predictors)
        self._check_columns(train_df, predictors)
        cohorts = group_split(train_df, group_column)

        min_rows = len(predictors) + 1 + self.evaluation_config.min_group_rows_margin
        group_fits: Dict[str, FittedModel] = {}
        for group, cohort in cohorts.items():
            if len(cohort) < min_rows:
                logger.warning(
                    f"   {name}/{group}: {len(cohort)} rows < {min_rows}, using pooled model"
                )
                continue
            group_fits[group] = self.fit(cohort, predictors, name=f"{name}/{group}")

        fallback = None
        if len(group_fits) < len(cohorts):
            fallback = self.fit(train_df, predictors, name=f"{name}/pooled").model

        grouped = GroupedLinearModel(
            {g: fit.model for g, fit in group_fits.items()},
            fallback_model=fallback,
            group_column=group_column,
        )

        y = train_df[self.target].to_numpy(dtype="float64")
        residuals = y - grouped.predict(train_df)
        sse = float((residuals**2).sum())
        sst = float(((y - y.mean()) ** 2).sum())
        residual_df = len(train_df) - len(predictors) - 1

        return FittedModel(
            name=name,
            model=grouped,
            predictors=predictors,
            target=self.target,
            n_obs=len(train_df),
            residual_df=residual_df,
            r2=1 - sse / sst if sst > 0 else float("nan"),
            residual_std_error=(
                float(np.sqrt(sse / residual_df)) if residual_df > 0 else float("nan")
            ),
            group_fits=group_fits,
        )

    def save_model(self, fitted: FittedModel, name_prefix: Optional[str] = None) -> Path:
        """
        Save a fitted model and its metadata.

        Args:
            fitted: Fitted model
            name_prefix: Optional prefix for the filename

        Returns:
            Path to the saved model
        """
        output_dir = Path(self.modeling_config.model_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base_name = f"{name_prefix or fitted.name}_{timestamp}"

        model_path = output_dir / f"{base_name}.joblib"
        joblib.dump(fitted.model, model_path)

        metadata = {
            **fitted.summary(),
            "config": self.modeling_config.model_dump(),
            "created_at": datetime.now().isoformat(),
        }
        if fitted.is_grouped:
            metadata["routing"] = fitted.model.metadata
        with open(output_dir / f"{base_name}.json", "w") as f:
            json.dump(metadata, f, indent=2, default=str)

        logger.info(f"💾 Saved: {model_path.name}")
        return model_path
