"""Machine Learning domain components."""

from .grouped_model import GroupedLinearModel
from .transformers import BootstrapRegressor, FeatureSelector

__all__ = ["FeatureSelector", "BootstrapRegressor", "GroupedLinearModel"]
