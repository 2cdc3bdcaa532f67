"""
Piecewise (grouped) linear model for season wins.

Routes each row to the regression fitted on its strikeout-group cohort.
Groups without a cohort model fall back to a pooled model when one is given.

This class implements the sklearn estimator interface (predict method)
so it can be used wherever a fitted Pipeline is expected.
"""

from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline

from wins_predictor.domain.models import GROUP_COLUMN, StrikeoutGroup


class GroupedLinearModel:
    """
    Model that routes predictions by a categorical group column.

    Attributes:
        group_models: Dict mapping group value to fitted Pipeline
        fallback_model: Pipeline used for groups without their own model
        group_column: Column holding the group label

    Example:
        >>> grouped = GroupedLinearModel(
        ...     group_models={"high": high_pipeline, "low": low_pipeline},
        ...     fallback_model=pooled_pipeline,
        ... )
        >>> predictions = grouped.predict(prepared_df)
    """

    def __init__(
        self,
        group_models: Dict[str, Pipeline],
        fallback_model: Optional[Pipeline] = None,
        group_column: str = GROUP_COLUMN,
    ):
        if not group_models and fallback_model is None:
            raise ValueError("At least one group model or a fallback model is required")

        self.group_models = dict(group_models)
        self.fallback_model = fallback_model
        self.group_column = group_column

    @property
    def groups(self) -> List[str]:
        return [g for g in StrikeoutGroup.levels() if g in self.group_models] + [
            g for g in self.group_models if g not in StrikeoutGroup.levels()
        ]

    def get_model_for_group(self, group: str) -> Pipeline:
        """
        Get the model used for a group.

        Args:
            group: Group label, e.g. "high"

        Returns:
            Pipeline used for that group
        """
        if group in self.group_models:
            return self.group_models[group]
        if self.fallback_model is not None:
            return self.fallback_model
        raise ValueError(
            f"No model for group '{group}'. Available: {list(self.group_models)}"
        )

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """
        Generate predictions by routing each row to its group's model.

        Args:
            X: Feature DataFrame including the group column

        Returns:
            Array of predictions aligned with input order
        """
        if not isinstance(X, pd.DataFrame):
            raise TypeError(
                f"GroupedLinearModel requires DataFrame input, got {type(X).__name__}"
            )
        if self.group_column not in X.columns:
            raise ValueError(
                f"Input DataFrame must contain '{self.group_column}' column for routing"
            )

        labels = X[self.group_column].astype("object")
        if labels.isna().any():
            raise ValueError(
                f"{int(labels.isna().sum())} rows have no '{self.group_column}' value"
            )

        predictions = np.zeros(len(X))
        for group in pd.unique(labels):
            mask = (labels == group).to_numpy()
            model = self.get_model_for_group(group)
            predictions[mask] = model.predict(X.loc[mask])

        return predictions

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            "group_column": self.group_column,
            "groups": self.groups,
            "has_fallback": self.fallback_model is not None,
        }

    def __repr__(self) -> str:
        fallback = ", fallback" if self.fallback_model is not None else ""
        return f"GroupedLinearModel(groups=[{', '.join(self.groups)}]{fallback})"
