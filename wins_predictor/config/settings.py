"""
Global Configuration System for the Season Wins Predictor

Centralized configuration for data sources, outlier screening, imputation,
partitioning and modeling. Provides type-safe configuration with validation
and environment variable support.
"""

import os
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class DataSourceConfig(BaseModel):
    """Raw Dataset Source Configuration"""

    training_url: str = Field(
        default="data/moneyball-training-data.csv",
        description="Labelled team-season table (URL or local path)",
    )
    evaluation_url: str = Field(
        default="data/moneyball-evaluation-data.csv",
        description="Unlabelled evaluation table (URL or local path)",
    )
    max_missing_fraction: float = Field(
        default=0.8,
        description="Columns missing more than this fraction are dropped before imputation",
        gt=0.0,
        le=1.0,
    )
    min_wins: int = Field(default=0, description="Lowest valid season win total", ge=0)
    max_wins: int = Field(
        default=162, description="Highest valid season win total", ge=1
    )


class OutlierConfig(BaseModel):
    """Percentile Outlier Screening Configuration"""

    upper_percentile: float = Field(
        default=0.97, description="Upper clipping percentile", gt=0.0, lt=1.0
    )
    lower_percentile: float = Field(
        default=0.03, description="Lower clipping percentile", gt=0.0, lt=1.0
    )
    screened_columns: List[str] = Field(
        default_factory=lambda: [
            "batting_so",
            "baserun_sb",
            "baserun_cs",
            "pitching_h",
            "pitching_bb",
            "pitching_so",
            "fielding_e",
            "net_stolen_bases",
            "offense_on_base_pct",
            "defense_on_base_pct",
            "total_at_bats",
        ],
        description="Derived and higher-variance raw columns subject to outlier screening",
    )

    @model_validator(mode="after")
    def validate_percentile_order(self):
        if self.lower_percentile >= self.upper_percentile:
            raise ValueError("lower_percentile must be less than upper_percentile")
        return self


class ImputationConfig(BaseModel):
    """Multiple Imputation Configuration"""

    imputation_rounds: int = Field(
        default=5, description="Independent completed datasets to draw", ge=1, le=50
    )
    max_iter: int = Field(
        default=10, description="Chained-equation sweeps per round", ge=1, le=100
    )
    resolution: Literal["mean", "first"] = Field(
        default="mean",
        description="How the rounds resolve to one value per cell",
    )
    fallback_group: Literal["high", "med_high", "med_low", "low"] = Field(
        default="high",
        description="Strikeout group assigned when it cannot be re-derived after imputation",
    )
    clip_to_observed_range: bool = Field(
        default=True,
        description="Bound imputed draws to each column's observed range",
    )


class PartitionConfig(BaseModel):
    """Train/Test Partition Configuration"""

    train_fraction: float = Field(
        default=0.8, description="Share of rows in the training partition", gt=0.0, lt=1.0
    )
    random_seed: int = Field(default=42, ge=0, description="Seed for splitting and imputation")
    group_column: str = Field(
        default="strikeout_group", description="Categorical column for cohort splits"
    )


class ModelingConfig(BaseModel):
    """Regression Model Configuration"""

    target: str = Field(default="wins", description="Target column")
    raw_predictors: List[str] = Field(
        default_factory=lambda: [
            "batting_h",
            "batting_2b",
            "batting_3b",
            "batting_hr",
            "batting_bb",
            "batting_so",
            "baserun_sb",
            "baserun_cs",
            "pitching_h",
            "pitching_hr",
            "pitching_bb",
            "pitching_so",
            "fielding_e",
            "fielding_dp",
        ],
        description="Predictors for the raw-column models",
    )
    engineered_predictors: List[str] = Field(
        default_factory=lambda: [
            "batting_2b",
            "batting_3b",
            "batting_hr",
            "batting_so",
            "pitching_hr",
            "pitching_so",
            "net_stolen_bases",
            "offense_on_base_pct",
            "defense_on_base_pct",
            "total_at_bats",
        ],
        description="Predictors for the engineered and piecewise models",
    )
    prediction_model: Optional[
        Literal["raw_missing_only", "raw_missing_and_outliers", "engineered", "piecewise"]
    ] = Field(
        default=None,
        description="Model used for evaluation-set predictions (None = lowest test RMSE)",
    )
    model_dir: Path = Field(
        default=Path("models"), description="Directory for saved model pipelines"
    )

    model_config = {"arbitrary_types_allowed": True, "protected_namespaces": ()}

    @field_validator("raw_predictors", "engineered_predictors")
    @classmethod
    def validate_non_empty(cls, v):
        if not v:
            raise ValueError("predictor list must not be empty")
        return v


class OutputConfig(BaseModel):
    """Report Output Configuration"""

    predictions_path: Path = Field(
        default=Path("output/evaluation_predictions.csv"),
        description="CSV written with evaluation rows plus predicted wins",
    )
    prediction_column: str = Field(
        default="predicted_wins", description="Name of the appended prediction column"
    )


class WinsConfig(BaseModel):
    """Master Season Wins Predictor Configuration Container"""

    data_source: DataSourceConfig = Field(
        default_factory=DataSourceConfig, description="Data Source Configuration"
    )
    outliers: OutlierConfig = Field(
        default_factory=OutlierConfig, description="Outlier Screening Configuration"
    )
    imputation: ImputationConfig = Field(
        default_factory=ImputationConfig, description="Imputation Configuration"
    )
    partition: PartitionConfig = Field(
        default_factory=PartitionConfig, description="Partition Configuration"
    )
    modeling: ModelingConfig = Field(
        default_factory=ModelingConfig, description="Modeling Configuration"
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig, description="Output Configuration"
    )

    @model_validator(mode="after")
    def validate_config_consistency(self):
        """Validate cross-field consistency"""
        if self.data_source.max_wins <= self.data_source.min_wins:
            raise ValueError("data_source.max_wins must be greater than min_wins")

        if self.modeling.target in self.outliers.screened_columns:
            raise ValueError("the target column cannot be screened for outliers")

        return self


# Sections whose names contain an underscore need explicit handling when
# parsing WINS_{SECTION}_{FIELD} environment variables.
_SECTIONS = ("data_source", "outliers", "imputation", "partition", "modeling", "output")


def _parse_env_value(value: str):
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        if "." in value:
            return float(value)
    except ValueError:
        pass
    return value


def load_config(
    config_path: Optional[Path] = None, config_data: Optional[Dict] = None
) -> WinsConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to a JSON configuration file
        config_data: Optional dictionary of configuration data

    Environment variables can override any config value using the pattern:
    WINS_{SECTION}_{FIELD} = value

    Example: WINS_PARTITION_TRAIN_FRACTION=0.75
    """
    config_dict: Dict = {}

    if config_path and config_path.exists():
        import json

        with open(config_path, "r") as f:
            if config_path.suffix.lower() == ".json":
                config_dict = json.load(f)

    if config_data:
        config_dict.update(config_data)

    env_overrides: Dict[str, Dict] = {}
    for env_var, value in os.environ.items():
        if not env_var.startswith("WINS_"):
            continue
        key = env_var[len("WINS_") :].lower()
        for section in _SECTIONS:
            if key.startswith(section + "_"):
                field = key[len(section) + 1 :]
                env_overrides.setdefault(section, {})[field] = _parse_env_value(value)
                break

    for section, fields in env_overrides.items():
        config_dict.setdefault(section, {})
        config_dict[section].update(fields)

    return WinsConfig(**config_dict)


# Global configuration instance
config = load_config()
