"""Domain services for preparing team-season data and modeling wins."""

from .feature_engineering import FeatureEngineer, assign_strikeout_groups
from .imputation_service import ImputationResult, ImputationService
from .outlier_bounds import OutlierBounds, compute_bounds, flag_outliers, screen_outliers
from .partition_service import group_split, split
from .report_pipeline import PreparedDataset, ReportResult, WinsReportPipeline

__all__ = [
    "FeatureEngineer",
    "assign_strikeout_groups",
    "ImputationService",
    "ImputationResult",
    "OutlierBounds",
    "compute_bounds",
    "flag_outliers",
    "screen_outliers",
    "split",
    "group_split",
    "WinsReportPipeline",
    "PreparedDataset",
    "ReportResult",
]
