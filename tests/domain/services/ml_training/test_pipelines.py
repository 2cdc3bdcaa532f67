"""Tests for OLS pipeline construction."""

import numpy as np
import pandas as pd
import pytest
from sklearn.linear_model import LinearRegression

from wins_predictor.domain.ml import FeatureSelector
from wins_predictor.domain.services.ml_training.pipelines import build_ols_pipeline


class TestBuildOlsPipeline:
    """Tests for build_ols_pipeline."""

    def test_steps(self):
        pipeline = build_ols_pipeline(["a", "b"])
        assert list(pipeline.named_steps) == ["feature_selector", "regressor"]
        assert isinstance(pipeline.named_steps["feature_selector"], FeatureSelector)
        assert isinstance(pipeline.named_steps["regressor"], LinearRegression)
        assert pipeline.named_steps["regressor"].fit_intercept

    def test_ignores_extra_columns(self):
        df = pd.DataFrame(
            {"a": [0.0, 1.0, 2.0, 3.0], "noise": [9.0, -4.0, 2.0, 7.0]}
        )
        y = 5.0 + 2.0 * df["a"]
        pipeline = build_ols_pipeline(["a"]).fit(df, y)
        np.testing.assert_allclose(pipeline.predict(df), y)

    def test_params_applied(self):
        pipeline = build_ols_pipeline(["a"], params={"regressor__fit_intercept": False})
        assert pipeline.named_steps["regressor"].fit_intercept is False

    def test_empty_features_rejected(self):
        with pytest.raises(ValueError):
            build_ols_pipeline([])
