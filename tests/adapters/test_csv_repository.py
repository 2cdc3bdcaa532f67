"""Tests for the CSV dataset repository.

Tests for:
- Source header normalisation
- Schema and target validation
- Sparse column dropping
- Reading and writing CSV files
"""

import numpy as np
import pandas as pd
import pytest

from wins_predictor.adapters import (
    CsvDatasetRepository,
    drop_sparse_columns,
    normalize_column_name,
    normalize_columns,
)
from wins_predictor.config import DataSourceConfig
from wins_predictor.domain.common.errors import SchemaError


@pytest.fixture
def repository():
    return CsvDatasetRepository(DataSourceConfig())


class TestNormalizeHeaders:
    """Test mapping of source headers to schema names."""

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("TEAM_BATTING_H", "batting_h"),
            ("TEAM_BATTING_2B", "batting_2b"),
            ("TEAM_BASERUN_CS", "baserun_cs"),
            ("TEAM_FIELDING_DP", "fielding_dp"),
            ("TARGET_WINS", "wins"),
            ("INDEX", "index"),
            ("batting_hr", "batting_hr"),
            (" Team Pitching SO ", "pitching_so"),
        ],
    )
    def test_column_name(self, header, expected):
        assert normalize_column_name(header) == expected

    def test_duplicate_after_normalisation(self):
        df = pd.DataFrame(columns=["TEAM_BATTING_H", "batting_h"])
        with pytest.raises(SchemaError, match="batting_h"):
            normalize_columns(df)


class TestPrepareRaw:
    """Test validation of in-memory tables."""

    def test_source_headers_accepted(self, repository, raw_table, source_headers):
        prepared = repository.prepare_raw(source_headers(raw_table), require_target=True)
        assert list(prepared.columns) == list(raw_table.columns)

    def test_values_numeric(self, repository, raw_table):
        df = raw_table.astype({"batting_2b": "object"})
        df.loc[0, "batting_2b"] = "n/a"
        prepared = repository.prepare_raw(df, require_target=True)
        assert prepared["batting_2b"].dtype == "float64"
        assert np.isnan(prepared.loc[0, "batting_2b"])

    def test_missing_required_column(self, repository, raw_table):
        with pytest.raises(SchemaError) as exc_info:
            repository.prepare_raw(raw_table.drop(columns=["fielding_e"]), True)
        assert exc_info.value.columns == ["fielding_e"]

    def test_optional_column_may_be_absent(self, repository, raw_table):
        prepared = repository.prepare_raw(raw_table.drop(columns=["batting_hbp"]), True)
        assert "batting_hbp" not in prepared.columns

    def test_target_required_for_training(self, repository, evaluation_table):
        with pytest.raises(SchemaError, match="wins"):
            repository.prepare_raw(evaluation_table, require_target=True)

    def test_evaluation_without_target(self, repository, evaluation_table):
        prepared = repository.prepare_raw(evaluation_table, require_target=False)
        assert len(prepared) == 30

    @pytest.mark.parametrize("wins", [-1.0, 163.0, np.nan])
    def test_invalid_wins(self, repository, raw_table, wins):
        raw_table.loc[0, "wins"] = wins
        with pytest.raises(SchemaError, match="1 rows"):
            repository.prepare_raw(raw_table, require_target=True)

    def test_input_not_modified(self, repository, raw_table, source_headers):
        source = source_headers(raw_table)
        original = source.copy()
        repository.prepare_raw(source, require_target=True)
        pd.testing.assert_frame_equal(source, original)


class TestDropSparseColumns:
    """Test removal of mostly-missing columns."""

    def test_drops_above_threshold(self, raw_table):
        reduced, dropped = drop_sparse_columns(raw_table, 0.8)
        assert dropped == ["batting_hbp"]
        assert "batting_hbp" not in reduced.columns

    def test_keeps_at_threshold(self):
        df = pd.DataFrame({"a": [np.nan, 1.0], "wins": [80.0, 81.0]})
        _, dropped = drop_sparse_columns(df, 0.5)
        assert dropped == []

    def test_target_protected(self):
        df = pd.DataFrame({"a": [1.0, 2.0], "wins": [np.nan, np.nan]})
        _, dropped = drop_sparse_columns(df, 0.5)
        assert dropped == []

    def test_empty_table(self):
        reduced, dropped = drop_sparse_columns(pd.DataFrame(columns=["a"]), 0.5)
        assert dropped == []
        assert reduced.empty


class TestFiles:
    """Test reading and writing CSV files."""

    def test_load_training_data(self, repository, raw_table, source_headers, tmp_path):
        path = tmp_path / "train.csv"
        source_headers(raw_table).to_csv(path, index=False)

        loaded = repository.load_training_data(path)
        assert list(loaded.columns) == list(raw_table.columns)
        assert len(loaded) == len(raw_table)

    def test_load_evaluation_data(self, repository, evaluation_table, tmp_path):
        path = tmp_path / "eval.csv"
        evaluation_table.to_csv(path, index=False)

        loaded = repository.load_evaluation_data(path)
        assert "wins" not in loaded.columns
        assert len(loaded) == 30

    def test_default_source_from_config(self, raw_table, tmp_path):
        path = tmp_path / "train.csv"
        raw_table.to_csv(path, index=False)

        repository = CsvDatasetRepository(DataSourceConfig(training_url=str(path)))
        assert len(repository.load_training_data()) == len(raw_table)

    def test_read_raw_keeps_headers(self, repository, raw_table, source_headers, tmp_path):
        path = tmp_path / "train.csv"
        source_headers(raw_table).to_csv(path, index=False)
        assert "TARGET_WINS" in repository.read_raw(path).columns

    def test_save_predictions(self, repository, evaluation_table, tmp_path):
        path = tmp_path / "out" / "predictions.csv"
        saved = repository.save_predictions(
            evaluation_table.assign(predicted_wins=80.0), path
        )

        assert saved == path
        written = pd.read_csv(path)
        assert written["predicted_wins"].tolist() == [80.0] * 30
