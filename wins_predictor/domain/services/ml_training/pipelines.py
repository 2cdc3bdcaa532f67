"""
Pipeline construction for the wins regressions.

Every model is ordinary least squares behind a FeatureSelector, so a fitted
pipeline can be handed the whole prepared table.
"""

from typing import Any, Dict, List, Optional

from sklearn.linear_model import LinearRegression
from sklearn.pipeline import Pipeline

from wins_predictor.domain.ml import FeatureSelector


def build_ols_pipeline(
    feature_names: List[str],
    params: Optional[Dict[str, Any]] = None,
) -> Pipeline:
    """
    Build an OLS sklearn Pipeline.

    Pipeline structure:
    1. FeatureSelector - selects and orders predictors
    2. Regressor - LinearRegression with intercept

    Args:
        feature_names: Predictor columns
        params: Optional parameters to set on the pipeline

    Returns:
        Unfitted sklearn Pipeline
    """
    if not feature_names:
        raise ValueError("At least one predictor is required")

    pipeline = Pipeline(
        [
            ("feature_selector", FeatureSelector(list(feature_names))),
            ("regressor", LinearRegression(fit_intercept=True)),
        ]
    )

    if params:
        pipeline.set_params(**params)

    return pipeline
