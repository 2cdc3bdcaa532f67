"""
Season Wins Predictor Package

A reproducible statistical pipeline over team-season baseball statistics:
feature engineering, percentile outlier screening, regression-based multiple
imputation, and a comparison of pooled and piecewise linear models that
predict a team's season win total.
"""

__version__ = "1.0.0"
