"""Custom sklearn estimators for the wins regression and imputation pipelines."""

import zlib
from typing import List

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, RegressorMixin, TransformerMixin
from sklearn.linear_model import LinearRegression
from sklearn.utils.validation import check_is_fitted


class FeatureSelector(BaseEstimator, TransformerMixin):
    """
    Select specific features by name from a DataFrame.

    Keeps fitted pipelines self-contained: the full prepared table can be
    passed to any model and the pipeline extracts the predictors it was
    trained on, in training order.

    Parameters
    ----------
    feature_names : list of str
        Names of features to select

    Examples
    --------
    >>> from sklearn.pipeline import Pipeline
    >>> from sklearn.linear_model import LinearRegression
    >>>
    >>> pipeline = Pipeline([
    ...     ('feature_selector', FeatureSelector(['batting_hr', 'pitching_so'])),
    ...     ('regressor', LinearRegression())
    ... ])
    >>> pipeline.fit(prepared_df, prepared_df['wins'])
    >>> pipeline.predict(prepared_df)
    """

    def __init__(self, feature_names: List[str]):
        self.feature_names = feature_names

    def fit(self, X, y=None):
        """Fit transformer (no-op for feature selection)."""
        return self

    def transform(self, X):
        """
        Select only the features the model was trained on.

        Parameters
        ----------
        X : DataFrame, shape (n_samples, n_features_input)
            Input features (can include extra columns)

        Returns
        -------
        X_selected : DataFrame, shape (n_samples, n_features_selected)
        """
        if not isinstance(X, pd.DataFrame):
            raise TypeError(
                f"FeatureSelector requires DataFrame input, got {type(X).__name__}"
            )

        missing_features = set(self.feature_names) - set(X.columns)
        if missing_features:
            raise ValueError(f"Missing required features: {sorted(missing_features)}")

        return X[self.feature_names]

    def get_feature_names_out(self, input_features=None):
        return np.array(self.feature_names)


class BootstrapRegressor(RegressorMixin, BaseEstimator):
    """
    Ordinary least squares fitted on a bootstrap resample of the training rows.

    Used as the per-column model inside ``IterativeImputer`` with
    ``sample_posterior=True``: ``predict(X, return_std=True)`` returns the
    bootstrap fit's predictions together with its residual standard deviation,
    so the imputer draws each replacement from the conditional distribution
    implied by the other columns rather than filling in the fitted mean.

    Parameters
    ----------
    random_state : int or None
        Base seed for the bootstrap resample. Each fit mixes it with a
        checksum of the training data, so the clones ``IterativeImputer`` fits
        for different columns and sweeps draw different resamples while a
        repeated fit on the same data draws the same one.
    """

    def __init__(self, random_state=None):
        self.random_state = random_state

    def fit(self, X, y):
        X = np.asarray(X, dtype="float64")
        y = np.asarray(y, dtype="float64")
        n_samples = X.shape[0]

        if self.random_state is None:
            rng = np.random.default_rng()
        else:
            rng = np.random.default_rng(
                [
                    self.random_state,
                    zlib.crc32(np.ascontiguousarray(X).tobytes()),
                    zlib.crc32(np.ascontiguousarray(y).tobytes()),
                ]
            )
        rows = rng.integers(0, n_samples, size=n_samples)
        self.bootstrap_rows_ = rows

        self.model_ = LinearRegression().fit(X[rows], y[rows])

        residuals = y[rows] - self.model_.predict(X[rows])
        dof = max(n_samples - X.shape[1] - 1, 1)
        self.sigma_ = float(np.sqrt((residuals**2).sum() / dof))
        self.n_features_in_ = X.shape[1]
        return self

    def predict(self, X, return_std: bool = False):
        check_is_fitted(self, "model_")
        mean = self.model_.predict(np.asarray(X, dtype="float64"))
        if return_std:
            return mean, np.full(mean.shape, self.sigma_)
        return mean
