"""Unit tests for the Grouped Linear Model.

Tests for:
- Model initialization and validation
- Group-based routing with order preserved
- Fallback to the pooled model
- Metadata and introspection
"""

import numpy as np
import pandas as pd
import pytest

from wins_predictor.domain.ml import GroupedLinearModel
from wins_predictor.domain.models import GROUP_COLUMN


class ConstantModel:
    """Stand-in fitted model predicting a fixed value."""

    def __init__(self, value):
        self.value = value

    def predict(self, X):
        return np.full(len(X), self.value, dtype=float)


@pytest.fixture
def df():
    return pd.DataFrame(
        {
            "x": [1.0, 2.0, 3.0, 4.0],
            GROUP_COLUMN: pd.Categorical(["low", "high", "med_low", "high"]),
        }
    )


class TestInit:
    """Test construction."""

    def test_requires_some_model(self):
        with pytest.raises(ValueError, match="At least one"):
            GroupedLinearModel({})

    def test_fallback_only(self, df):
        model = GroupedLinearModel({}, fallback_model=ConstantModel(80.0))
        assert model.predict(df).tolist() == [80.0] * 4

    def test_groups_in_level_order(self):
        model = GroupedLinearModel(
            {"low": ConstantModel(1.0), "high": ConstantModel(2.0)}
        )
        assert model.groups == ["high", "low"]


class TestRouting:
    """Test prediction routing."""

    @pytest.fixture
    def model(self):
        return GroupedLinearModel(
            {"high": ConstantModel(90.0), "low": ConstantModel(70.0)},
            fallback_model=ConstantModel(80.0),
        )

    def test_routes_by_group_in_input_order(self, model, df):
        assert model.predict(df).tolist() == [70.0, 90.0, 80.0, 90.0]

    def test_non_default_index(self, model, df):
        df.index = [40, 10, 30, 20]
        assert model.predict(df).tolist() == [70.0, 90.0, 80.0, 90.0]

    def test_get_model_for_group(self, model):
        assert model.get_model_for_group("high").value == 90.0
        assert model.get_model_for_group("med_high").value == 80.0

    def test_no_model_no_fallback(self, df):
        model = GroupedLinearModel({"high": ConstantModel(90.0)})
        with pytest.raises(ValueError, match="No model for group"):
            model.predict(df)

    def test_missing_group_column(self, model, df):
        with pytest.raises(ValueError, match=GROUP_COLUMN):
            model.predict(df.drop(columns=[GROUP_COLUMN]))

    def test_missing_group_label(self, model, df):
        df.loc[0, GROUP_COLUMN] = np.nan
        with pytest.raises(ValueError, match="no"):
            model.predict(df)

    def test_requires_dataframe(self, model):
        with pytest.raises(TypeError):
            model.predict(np.zeros((2, 2)))


class TestIntrospection:
    """Test metadata and representation."""

    def test_metadata(self):
        model = GroupedLinearModel(
            {"high": ConstantModel(90.0)}, fallback_model=ConstantModel(80.0)
        )
        assert model.metadata == {
            "group_column": GROUP_COLUMN,
            "groups": ["high"],
            "has_fallback": True,
        }

    def test_repr(self):
        model = GroupedLinearModel(
            {"high": ConstantModel(90.0)}, fallback_model=ConstantModel(80.0)
        )
        assert repr(model) == "GroupedLinearModel(groups=[high], fallback)"
