"""
Season wins report pipeline.

Chains the preparation stages and the model comparison:
raw -> sparse-column drop -> feature engineering -> imputation (per mode)
-> train/test split -> candidate fits -> held-out RMSE -> evaluation-set
predictions with the selected model.

Each stage takes a DataFrame and returns a new one; nothing is mutated in place.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from loguru import logger

from wins_predictor.adapters.csv_repository import CsvDatasetRepository, drop_sparse_columns
from wins_predictor.config import WinsConfig, config
from wins_predictor.domain.common.errors import SchemaError
from wins_predictor.domain.models import ImputationMode
from wins_predictor.domain.services.feature_engineering import (
    FeatureEngineer,
    drop_consumed_columns,
)
from wins_predictor.domain.services.imputation_service import (
    ImputationResult,
    ImputationService,
)
from wins_predictor.domain.services.ml_training import (
    FittedModel,
    ModelEvaluator,
    ModelSpec,
    ModelTrainer,
    default_model_specs,
)
from wins_predictor.domain.services.partition_service import split


@dataclass
class PreparedDataset:
    """A dataset after feature engineering and imputation."""

    mode: ImputationMode
    data: pd.DataFrame
    imputation: ImputationResult
    dropped_columns: List[str] = field(default_factory=list)

    @property
    def modeling_frame(self) -> pd.DataFrame:
        """Prepared data without the raw columns folded into derived features."""
        return drop_consumed_columns(self.data)


@dataclass
class ReportResult:
    """Everything the report presents."""

    comparison: pd.DataFrame
    models: Dict[str, FittedModel]
    selected_model: str
    final_model: FittedModel
    predictions: pd.DataFrame
    prepared: Dict[ImputationMode, PreparedDataset]


class WinsReportPipeline:
    """Orchestrates preparation, model comparison and prediction."""

    def __init__(
        self,
        wins_config: Optional[WinsConfig] = None,
        repository: Optional[CsvDatasetRepository] = None,
        model_specs: Optional[List[ModelSpec]] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            wins_config: Full configuration (defaults to the global config)
            repository: Dataset repository (defaults to a CSV repository)
            model_specs: Candidate models (defaults to the four report models)
        """
        self.config = wins_config or config
        self.repository = repository or CsvDatasetRepository(self.config.data_source)
        self.model_specs = model_specs or default_model_specs(self.config.modeling)

        self.engineer = FeatureEngineer()
        self.imputer = ImputationService(
            self.config.imputation,
            self.config.outliers,
            random_seed=self.config.partition.random_seed,
        )
        self.trainer = ModelTrainer(self.config.modeling)
        self.evaluator = ModelEvaluator()
        self.models: Dict[str, FittedModel] = {}

    @property
    def modes(self) -> List[ImputationMode]:
        modes = []
        for spec in self.model_specs:
            if spec.imputation_mode not in modes:
                modes.append(spec.imputation_mode)
        return modes

    def prepare(
        self,
        raw_df: pd.DataFrame,
        mode: ImputationMode,
        drop_columns: Optional[List[str]] = None,
    ) -> PreparedDataset:
        """
        Engineer features and impute one dataset.

        Args:
            raw_df: Normalised raw table
            mode: Imputation mode
            drop_columns: Columns to drop up front; when None, columns above the
                configured missing fraction are dropped

        Returns:
            PreparedDataset holding raw and derived columns, all complete
        """
        if drop_columns is None:
            reduced, dropped = drop_sparse_columns(
                raw_df, self.config.data_source.max_missing_fraction
            )
        else:
            dropped = [c for c in drop_columns if c in raw_df.columns]
            reduced = raw_df.drop(columns=dropped)

        engineered = self.engineer.engineer(reduced, drop_consumed=False)
        imputation = self.imputer.impute(engineered, mode)

        return PreparedDataset(
            mode=ImputationMode(mode),
            data=imputation.data,
            imputation=imputation,
            dropped_columns=dropped,
        )

    def fit_candidates(
        self, prepared: Dict[ImputationMode, PreparedDataset]
    ) -> pd.DataFrame:
        """
        Fit every candidate on its training partition and rank by held-out RMSE.

        All modes are split with the same seed, so each model sees the same rows.

        Returns:
            Comparison table sorted by RMSE; fitted models in self.models
        """
        partition = self.config.partition
        splits = {
            mode: split(ds.data, partition.train_fraction, partition.random_seed)
            for mode, ds in prepared.items()
        }

        self.models = {}
        test_sets: Dict[str, pd.DataFrame] = {}
        for spec in self.model_specs:
            train, test = splits[spec.imputation_mode]
            self.models[spec.name] = self._fit_spec(spec, train)
            test_sets[spec.name] = test

        return self.evaluator.compare(list(self.models.values()), test_sets)

    def predict(
        self,
        model: FittedModel,
        evaluation_raw: pd.DataFrame,
        mode: ImputationMode,
        drop_columns: Optional[List[str]] = None,
    ) -> pd.DataFrame:
        """
        Predict wins for the evaluation table.

        Args:
            model: Fitted model
            evaluation_raw: Evaluation table as supplied (original columns)
            mode: Imputation mode the model was fitted under
            drop_columns: Columns dropped from the training table

        Returns:
            Copy of evaluation_raw with the prediction column appended, same row order
        """
        normalized = self.repository.prepare_raw(evaluation_raw, require_target=False)
        prepared = self.prepare(normalized, mode, drop_columns=drop_columns or [])

        predictions = np.clip(
            model.predict(prepared.data),
            self.config.data_source.min_wins,
            self.config.data_source.max_wins,
        )

        output = evaluation_raw.copy()
        output[self.config.output.prediction_column] = predictions
        return output

    def run(
        self, train_raw: pd.DataFrame, evaluation_raw: pd.DataFrame
    ) -> ReportResult:
        """
        Run the full report.

        Args:
            train_raw: Labelled training table as supplied
            evaluation_raw: Unlabelled evaluation table as supplied

        Returns:
            ReportResult with the comparison, fitted models and predictions
        """
        logger.info("=" * 70)
        logger.info("🎯 SEASON WINS REPORT")
        logger.info("=" * 70)

        train_df = self.repository.prepare_raw(train_raw, require_target=True)
        prepared = {mode: self.prepare(train_df, mode) for mode in self.modes}

        comparison = self.fit_candidates(prepared)

        selected = self.config.modeling.prediction_model or comparison.iloc[0]["model"]
        spec = self._spec(selected)
        logger.info(f"\n🏆 Predicting with {selected}")

        training = prepared[spec.imputation_mode]
        final_model = self._fit_spec(spec, training.data)
        predictions = self.predict(
            final_model,
            evaluation_raw,
            spec.imputation_mode,
            drop_columns=training.dropped_columns,
        )

        return ReportResult(
            comparison=comparison,
            models=self.models,
            selected_model=selected,
            final_model=final_model,
            predictions=predictions,
            prepared=prepared,
        )

    # ========== Private Internal Methods ==========

    def _spec(self, name: str) -> ModelSpec:
        for spec in self.model_specs:
            if spec.name == name:
                return spec
        raise SchemaError("Unknown model", [name])

    def _fit_spec(self, spec: ModelSpec, train: pd.DataFrame) -> FittedModel:
        if spec.grouped:
            return self.trainer.fit_grouped(
                train, spec.predictors, group_column=spec.group_column, name=spec.name
            )
        return self.trainer.fit(train, spec.predictors, name=spec.name)
