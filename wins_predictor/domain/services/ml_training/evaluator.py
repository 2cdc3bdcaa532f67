"""
ModelEvaluator - held-out evaluation and comparison of wins models.

RMSE uses the residual degrees of freedom as denominator,
sqrt(SSE / (n_test - k - 1)), so numbers compare with a standard
regression-summary residual error rather than a plain mean.
"""

from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from loguru import logger
from sklearn.metrics import mean_absolute_error

from wins_predictor.domain.common.errors import InsufficientDataError, SchemaError

from .config import EvaluationConfig
from .trainer import FittedModel


class ModelEvaluator:
    """
    Evaluate and compare fitted wins models on held-out partitions.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None):
        """
        Initialize evaluator.

        Args:
            config: Evaluation configuration
        """
        self.config = config or EvaluationConfig()

    def _residuals(self, model: FittedModel, test_df: pd.DataFrame) -> np.ndarray:
        if model.target not in test_df.columns:
            raise SchemaError("Test data is missing the target", [model.target])
        y = test_df[model.target].to_numpy(dtype="float64")
        return y - model.predict(test_df)

    def rmse(self, model: FittedModel, test_df: pd.DataFrame) -> float:
        """
        Root mean squared prediction error with an n - k - 1 denominator.

        Args:
            model: Fitted model
            test_df: Held-out partition with the target column

        Returns:
            sqrt(SSE / (n_test - num_coefficients - 1))
        """
        denominator = len(test_df) - model.num_coefficients - 1
        if denominator < self.config.min_residual_df:
            raise InsufficientDataError(
                f"{model.name}: {len(test_df)} test rows leave {denominator} residual "
                f"degrees of freedom for {model.num_coefficients} coefficients"
            )

        residuals = self._residuals(model, test_df)
        return float(np.sqrt((residuals**2).sum() / denominator))

    def evaluate_model(self, model: FittedModel, test_df: pd.DataFrame) -> Dict[str, Any]:
        """
        Evaluate a model on a held-out partition.

        Returns:
            Dictionary with rmse, mae, r2 and n_test
        """
        residuals = self._residuals(model, test_df)
        y = test_df[model.target].to_numpy(dtype="float64")
        sst = float(((y - y.mean()) ** 2).sum())

        return {
            "model": model.name,
            "rmse": self.rmse(model, test_df),
            "mae": mean_absolute_error(y, y - residuals),
            "r2": 1 - float((residuals**2).sum()) / sst if sst > 0 else float("nan"),
            "n_test": len(test_df),
            "num_coefficients": model.num_coefficients,
        }

    def compare(
        self, models: List[FittedModel], test_sets: Dict[str, pd.DataFrame]
    ) -> pd.DataFrame:
        """
        Evaluate several models and rank them by RMSE.

        Args:
            models: Fitted models
            test_sets: Dict mapping model name -> its held-out partition

        Returns:
            DataFrame of metrics sorted by ascending RMSE
        """
        rows = []
        for model in models:
            if model.name not in test_sets:
                raise SchemaError("No test partition for model", [model.name])
            rows.append(self.evaluate_model(model, test_sets[model.name]))

        results = pd.DataFrame(rows).sort_values("rmse").reset_index(drop=True)

        logger.info("\n📊 Model comparison (held-out RMSE):")
        logger.info(f"   {'Model':<26} {'RMSE':>8} {'MAE':>8} {'R²':>8}")
        logger.info("   " + "-" * 54)
        for _, row in results.iterrows():
            logger.info(
                f"   {row['model']:<26} {row['rmse']:>8.3f} {row['mae']:>8.3f} {row['r2']:>8.3f}"
            )

        return results

    def format_results(self, metrics: Dict[str, Any]) -> str:
        """
        Format evaluation results for display.

        Args:
            metrics: Evaluation metrics dict

        Returns:
            Formatted string
        """
        lines = [f"📊 Evaluation Results ({metrics.get('model', 'model')}):"]
        lines.append(f"   RMSE:     {metrics.get('rmse', 0):.3f}")
        lines.append(f"   MAE:      {metrics.get('mae', 0):.3f}")
        lines.append(f"   R²:       {metrics.get('r2', 0):.3f}")
        lines.append(f"   Test rows: {metrics.get('n_test', 0)}")
        return "\n".join(lines)
