"""
ML Training module for season wins regression.

Provides a unified API for fitting, evaluating and saving the pooled and
piecewise OLS models compared by the report.
"""

from .config import EvaluationConfig, ModelSpec, default_model_specs
from .evaluator import ModelEvaluator
from .pipelines import build_ols_pipeline
from .trainer import FittedModel, ModelTrainer

__all__ = [
    # Config
    "ModelSpec",
    "EvaluationConfig",
    "default_model_specs",
    # Core classes
    "ModelTrainer",
    "ModelEvaluator",
    "FittedModel",
    # Pipeline utilities
    "build_ols_pipeline",
]
