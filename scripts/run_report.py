#!/usr/bin/env python3
"""
Season Wins Report CLI.

Single entry point for the report:
- run: prepare data, compare models, write evaluation-set predictions
- prepare: write the imputed modeling table for one imputation mode
- compare: print the held-out RMSE comparison only

Usage:
    # Full report
    python scripts/run_report.py run --train data/train.csv --evaluation data/eval.csv

    # Prepared table under outlier screening
    python scripts/run_report.py prepare --train data/train.csv --mode missing_and_outliers

    # Model comparison with a different seed
    python scripts/run_report.py compare --train data/train.csv --seed 7
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

# Add project root
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from wins_predictor.adapters import CsvDatasetRepository  # noqa: E402
from wins_predictor.config import WinsConfig, load_config  # noqa: E402
from wins_predictor.domain.common import WinsPipelineError  # noqa: E402
from wins_predictor.domain.models import ImputationMode  # noqa: E402
from wins_predictor.domain.services import WinsReportPipeline  # noqa: E402

app = typer.Typer(
    help="Season wins regression report",
    add_completion=False,
)


def _configure(
    config_file: Optional[str], seed: Optional[int], verbose: bool
) -> WinsConfig:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")

    wins_config = load_config(Path(config_file) if config_file else None)
    if seed is not None:
        wins_config.partition.random_seed = seed
    return wins_config


@app.command("run")
def run_report(
    train: Optional[str] = typer.Option(None, help="Training CSV (URL or path)"),
    evaluation: Optional[str] = typer.Option(None, help="Evaluation CSV (URL or path)"),
    output: Optional[str] = typer.Option(None, help="Predictions CSV path"),
    config_file: Optional[str] = typer.Option(None, help="JSON configuration file"),
    seed: Optional[int] = typer.Option(None, help="Random seed override"),
    save_model: bool = typer.Option(False, help="Save the selected model"),
    verbose: bool = typer.Option(False, help="Debug logging"),
):
    """Compare models and write evaluation-set predictions."""
    wins_config = _configure(config_file, seed, verbose)
    repository = CsvDatasetRepository(wins_config.data_source)
    pipeline = WinsReportPipeline(wins_config, repository)

    try:
        result = pipeline.run(
            repository.read_raw(train or wins_config.data_source.training_url),
            repository.read_raw(evaluation or wins_config.data_source.evaluation_url),
        )
    except WinsPipelineError as e:
        logger.error(f"❌ Report failed: {e}")
        raise typer.Exit(1)

    output_path = repository.save_predictions(
        result.predictions, output or wins_config.output.predictions_path
    )
    if save_model:
        pipeline.trainer.save_model(result.final_model)

    logger.info("\n" + "=" * 70)
    logger.info("✅ REPORT COMPLETE")
    logger.info("=" * 70)
    logger.info(f"   Selected model: {result.selected_model}")
    logger.info(f"   Predictions: {output_path}")


@app.command("prepare")
def prepare_data(
    train: Optional[str] = typer.Option(None, help="Training CSV (URL or path)"),
    mode: ImputationMode = typer.Option(
        ImputationMode.MISSING_AND_OUTLIERS, help="Imputation mode"
    ),
    output: str = typer.Option("output/prepared.csv", help="Prepared table path"),
    config_file: Optional[str] = typer.Option(None, help="JSON configuration file"),
    seed: Optional[int] = typer.Option(None, help="Random seed override"),
    verbose: bool = typer.Option(False, help="Debug logging"),
):
    """Write the imputed modeling table for one imputation mode."""
    wins_config = _configure(config_file, seed, verbose)
    repository = CsvDatasetRepository(wins_config.data_source)
    pipeline = WinsReportPipeline(wins_config, repository)

    try:
        prepared = pipeline.prepare(repository.load_training_data(train), mode)
    except WinsPipelineError as e:
        logger.error(f"❌ Preparation failed: {e}")
        raise typer.Exit(1)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    prepared.modeling_frame.to_csv(output_path, index=False)

    logger.info(f"   Imputed cells: {prepared.imputation.total_imputed}")
    logger.info(f"   Fallback groups: {prepared.imputation.fallback_groups}")
    logger.info(f"💾 Saved prepared table to {output_path}")


@app.command("compare")
def compare_models(
    train: Optional[str] = typer.Option(None, help="Training CSV (URL or path)"),
    config_file: Optional[str] = typer.Option(None, help="JSON configuration file"),
    seed: Optional[int] = typer.Option(None, help="Random seed override"),
    verbose: bool = typer.Option(False, help="Debug logging"),
):
    """Print the held-out RMSE comparison of the candidate models."""
    wins_config = _configure(config_file, seed, verbose)
    repository = CsvDatasetRepository(wins_config.data_source)
    pipeline = WinsReportPipeline(wins_config, repository)

    try:
        train_df = repository.load_training_data(train)
        prepared = {mode: pipeline.prepare(train_df, mode) for mode in pipeline.modes}
        comparison = pipeline.fit_candidates(prepared)
    except WinsPipelineError as e:
        logger.error(f"❌ Comparison failed: {e}")
        raise typer.Exit(1)

    typer.echo(comparison.to_string(index=False))
    for _, row in comparison.iterrows():
        typer.echo(pipeline.evaluator.format_results(row.to_dict()))


if __name__ == "__main__":
    app()
