"""Unit tests for custom sklearn estimators."""

import numpy as np
import pandas as pd
import pytest
from sklearn.base import clone
from sklearn.exceptions import NotFittedError

from wins_predictor.domain.ml import BootstrapRegressor, FeatureSelector


class TestFeatureSelector:
    """Test selection of named features."""

    @pytest.fixture
    def df(self):
        return pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 4.0], "c": [5.0, 6.0]})

    def test_selects_in_given_order(self, df):
        selected = FeatureSelector(["c", "a"]).fit(df).transform(df)
        assert list(selected.columns) == ["c", "a"]

    def test_missing_feature_raises(self, df):
        with pytest.raises(ValueError, match="d"):
            FeatureSelector(["a", "d"]).transform(df)

    def test_requires_dataframe(self, df):
        with pytest.raises(TypeError):
            FeatureSelector(["a"]).transform(df.to_numpy())

    def test_feature_names_out(self):
        names = FeatureSelector(["a", "b"]).get_feature_names_out()
        assert names.tolist() == ["a", "b"]


class TestBootstrapRegressor:
    """Test the bootstrap OLS estimator used by the imputer."""

    @pytest.fixture
    def linear_data(self):
        rng = np.random.default_rng(0)
        X = rng.uniform(0, 10, size=(50, 2))
        y = 1.0 + 2.0 * X[:, 0] - 3.0 * X[:, 1]
        return X, y

    def test_recovers_exact_linear_relation(self, linear_data):
        X, y = linear_data
        model = BootstrapRegressor(random_state=0).fit(X, y)
        np.testing.assert_allclose(model.predict(X), y, atol=1e-8)
        assert model.sigma_ == pytest.approx(0.0, abs=1e-8)

    def test_return_std(self, linear_data):
        X, y = linear_data
        noisy = y + np.random.default_rng(1).normal(0, 2.0, len(y))
        model = BootstrapRegressor(random_state=0).fit(X, noisy)

        mean, std = model.predict(X[:5], return_std=True)
        assert mean.shape == (5,)
        assert std.shape == (5,)
        assert np.all(std == model.sigma_)
        assert model.sigma_ > 0

    def test_seeded_fits_identical(self, linear_data):
        X, y = linear_data
        noisy = y + np.random.default_rng(1).normal(0, 2.0, len(y))
        first = BootstrapRegressor(random_state=5).fit(X, noisy)
        second = clone(first).fit(X, noisy)
        np.testing.assert_array_equal(first.predict(X), second.predict(X))

    def test_different_seeds_differ(self, linear_data):
        X, y = linear_data
        noisy = y + np.random.default_rng(1).normal(0, 2.0, len(y))
        first = BootstrapRegressor(random_state=1).fit(X, noisy)
        second = BootstrapRegressor(random_state=2).fit(X, noisy)
        assert not np.allclose(first.predict(X), second.predict(X))

    def test_resample_depends_on_training_data(self, linear_data):
        X, y = linear_data
        model = BootstrapRegressor(random_state=5)
        first = clone(model).fit(X, y).bootstrap_rows_
        other_target = clone(model).fit(X, y + 1.0).bootstrap_rows_
        other_features = clone(model).fit(X * 2.0, y).bootstrap_rows_

        assert not np.array_equal(first, other_target)
        assert not np.array_equal(first, other_features)

    def test_resample_repeatable_for_same_data(self, linear_data):
        X, y = linear_data
        first = BootstrapRegressor(random_state=5).fit(X, y).bootstrap_rows_
        second = BootstrapRegressor(random_state=5).fit(X.copy(), y.copy()).bootstrap_rows_
        np.testing.assert_array_equal(first, second)

    def test_predict_before_fit_raises(self):
        with pytest.raises(NotFittedError):
            BootstrapRegressor().predict(np.zeros((1, 2)))

    def test_n_features_in(self, linear_data):
        X, y = linear_data
        assert BootstrapRegressor(random_state=0).fit(X, y).n_features_in_ == 2
