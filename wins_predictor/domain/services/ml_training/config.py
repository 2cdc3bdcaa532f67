"""
Configuration models for regression training.

Uses Pydantic for validation and type safety.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from wins_predictor.config import ModelingConfig
from wins_predictor.domain.models import GROUP_COLUMN, ImputationMode


class ModelSpec(BaseModel):
    """One candidate regression model in the comparison."""

    name: str = Field(..., min_length=1, description="Model identifier")
    predictors: List[str] = Field(..., min_length=1, description="Predictor columns")
    imputation_mode: ImputationMode = Field(
        default=ImputationMode.MISSING_AND_OUTLIERS,
        description="Which prepared dataset the model is fitted on",
    )
    grouped: bool = Field(
        default=False, description="Fit one regression per group (piecewise model)"
    )
    group_column: Optional[str] = Field(
        default=None, description="Group column for piecewise models"
    )

    @model_validator(mode="after")
    def validate_group_column(self):
        if self.grouped and self.group_column is None:
            self.group_column = GROUP_COLUMN
        if not self.grouped and self.group_column is not None:
            raise ValueError("group_column is only valid for grouped models")
        return self


class EvaluationConfig(BaseModel):
    """Configuration for model evaluation."""

    min_residual_df: int = Field(
        default=1,
        ge=1,
        description="Smallest n_test - k - 1 accepted for the RMSE denominator",
    )
    min_group_rows_margin: int = Field(
        default=1,
        ge=1,
        description="Extra rows beyond k + 1 a cohort needs for its own model",
    )


def default_model_specs(modeling: Optional[ModelingConfig] = None) -> List[ModelSpec]:
    """
    The four candidate models compared by the report.

    Args:
        modeling: Predictor lists (defaults to ModelingConfig())

    Returns:
        Model specs in comparison order
    """
    modeling = modeling or ModelingConfig()
    return [
        ModelSpec(
            name="raw_missing_only",
            predictors=modeling.raw_predictors,
            imputation_mode=ImputationMode.MISSING_ONLY,
        ),
        ModelSpec(
            name="raw_missing_and_outliers",
            predictors=modeling.raw_predictors,
            imputation_mode=ImputationMode.MISSING_AND_OUTLIERS,
        ),
        ModelSpec(
            name="engineered",
            predictors=modeling.engineered_predictors,
            imputation_mode=ImputationMode.MISSING_AND_OUTLIERS,
        ),
        ModelSpec(
            name="piecewise",
            predictors=modeling.engineered_predictors,
            imputation_mode=ImputationMode.MISSING_AND_OUTLIERS,
            grouped=True,
        ),
    ]
