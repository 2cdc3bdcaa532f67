"""Tests for the global configuration system."""

import json

import pytest
from pydantic import ValidationError

from wins_predictor.config import (
    ImputationConfig,
    ModelingConfig,
    OutlierConfig,
    WinsConfig,
    load_config,
)


class TestDefaults:
    """Default values match the report's published settings."""

    def test_outlier_percentiles(self):
        config = WinsConfig()
        assert config.outliers.upper_percentile == 0.97
        assert config.outliers.lower_percentile == 0.03

    def test_partition_defaults(self):
        config = WinsConfig()
        assert config.partition.train_fraction == 0.8
        assert config.partition.random_seed == 42
        assert config.partition.group_column == "strikeout_group"

    def test_imputation_defaults(self):
        config = ImputationConfig()
        assert config.imputation_rounds == 5
        assert config.resolution == "mean"
        assert config.fallback_group == "high"

    def test_engineered_predictors_exclude_consumed_columns(self):
        modeling = ModelingConfig()
        assert "batting_h" in modeling.raw_predictors
        assert "batting_h" not in modeling.engineered_predictors
        assert "net_stolen_bases" in modeling.engineered_predictors

    def test_sparse_column_not_a_raw_predictor(self):
        assert "batting_hbp" not in ModelingConfig().raw_predictors


class TestValidation:
    """Invalid settings fail at construction."""

    def test_inverted_percentiles_rejected(self):
        with pytest.raises(ValidationError, match="lower_percentile"):
            OutlierConfig(upper_percentile=0.1, lower_percentile=0.9)

    def test_percentile_outside_unit_interval_rejected(self):
        with pytest.raises(ValidationError):
            OutlierConfig(upper_percentile=1.5)

    def test_train_fraction_bounds(self):
        with pytest.raises(ValidationError):
            WinsConfig(partition={"train_fraction": 1.0})

    def test_unknown_fallback_group_rejected(self):
        with pytest.raises(ValidationError):
            ImputationConfig(fallback_group="extreme")

    def test_empty_predictor_list_rejected(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            ModelingConfig(raw_predictors=[])

    def test_target_cannot_be_screened(self):
        with pytest.raises(ValidationError, match="target"):
            WinsConfig(outliers={"screened_columns": ["wins", "fielding_e"]})

    def test_win_range_must_be_ordered(self):
        with pytest.raises(ValidationError, match="max_wins"):
            WinsConfig(data_source={"min_wins": 100, "max_wins": 50})


class TestLoadConfig:
    """Configuration from dictionaries, files and environment variables."""

    def test_config_data_overrides(self):
        config = load_config(config_data={"partition": {"random_seed": 7}})
        assert config.partition.random_seed == 7
        assert config.partition.train_fraction == 0.8

    def test_json_file(self, tmp_path):
        path = tmp_path / "wins.json"
        path.write_text(json.dumps({"imputation": {"imputation_rounds": 3}}))

        config = load_config(config_path=path)
        assert config.imputation.imputation_rounds == 3

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(config_path=tmp_path / "absent.json")
        assert config.imputation.imputation_rounds == 5

    def test_env_override_float(self, monkeypatch):
        monkeypatch.setenv("WINS_PARTITION_TRAIN_FRACTION", "0.75")
        config = load_config()
        assert config.partition.train_fraction == 0.75

    def test_env_override_underscored_section(self, monkeypatch):
        monkeypatch.setenv("WINS_DATA_SOURCE_MAX_MISSING_FRACTION", "0.5")
        config = load_config()
        assert config.data_source.max_missing_fraction == 0.5

    def test_env_override_string(self, monkeypatch):
        monkeypatch.setenv("WINS_IMPUTATION_RESOLUTION", "first")
        config = load_config()
        assert config.imputation.resolution == "first"

    def test_invalid_env_value_raises(self, monkeypatch):
        monkeypatch.setenv("WINS_OUTLIERS_UPPER_PERCENTILE", "0.01")
        with pytest.raises(ValidationError):
            load_config()
