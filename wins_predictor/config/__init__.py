"""
Season Wins Predictor Configuration Module

Provides centralized configuration management for the entire pipeline.
Import the global config instance to access all configuration values.

Usage:
    from wins_predictor.config import config

    # Outlier screening thresholds
    upper = config.outliers.upper_percentile

    # Reproducibility control
    seed = config.partition.random_seed
"""

from .settings import (
    WinsConfig,
    DataSourceConfig,
    OutlierConfig,
    ImputationConfig,
    PartitionConfig,
    ModelingConfig,
    OutputConfig,
    config,
    load_config,
)

__all__ = [
    "WinsConfig",
    "DataSourceConfig",
    "OutlierConfig",
    "ImputationConfig",
    "PartitionConfig",
    "ModelingConfig",
    "OutputConfig",
    "config",
    "load_config",
]
