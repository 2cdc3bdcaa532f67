"""Shared fixtures: synthetic team-season tables shaped like the source data."""

import numpy as np
import pandas as pd
import pytest

# (mean, std) per raw column, roughly matching real season totals
RAW_DISTRIBUTIONS = {
    "batting_h": (1470, 140),
    "batting_2b": (241, 46),
    "batting_3b": (55, 27),
    "batting_hr": (100, 60),
    "batting_bb": (500, 120),
    "baserun_sb": (125, 80),
    "baserun_cs": (53, 20),
    "batting_hbp": (59, 12),
    "pitching_h": (1780, 300),
    "pitching_hr": (105, 60),
    "pitching_bb": (553, 160),
    "pitching_so": (818, 200),
    "fielding_e": (246, 100),
    "fielding_dp": (146, 25),
}


def make_raw_table(
    n_rows: int = 100,
    seed: int = 0,
    with_target: bool = True,
    hbp_missing_fraction: float = 0.92,
) -> pd.DataFrame:
    """Build a normalised raw table with realistic value ranges."""
    rng = np.random.default_rng(seed)

    data = {"index": np.arange(1, n_rows + 1)}
    for column, (mean, std) in RAW_DISTRIBUTIONS.items():
        data[column] = np.clip(rng.normal(mean, std, n_rows), 1, None).round()

    # Batting strikeouts track pitching strikeouts so every cohort is populated
    data["batting_so"] = np.clip(
        0.96 * data["pitching_so"] + rng.normal(-40, 90, n_rows), 1, None
    ).round()

    df = pd.DataFrame(data)

    hbp_missing = rng.random(n_rows) < hbp_missing_fraction
    df.loc[hbp_missing, "batting_hbp"] = np.nan

    if with_target:
        wins = (
            80
            + 0.04 * (df["batting_h"] - 1470)
            + 0.03 * (df["batting_bb"] - 500)
            - 0.02 * (df["pitching_h"] - 1780)
            - 0.03 * (df["fielding_e"] - 246)
            + rng.normal(0, 8, n_rows)
        )
        df["wins"] = np.clip(wins, 0, 162).round()

    return df


@pytest.fixture
def raw_table():
    """100-row normalised training table (wins included, batting_hbp sparse)."""
    return make_raw_table()


@pytest.fixture
def evaluation_table():
    """30-row normalised evaluation table without wins."""
    return make_raw_table(n_rows=30, seed=1, with_target=False)


@pytest.fixture
def source_headers():
    """Map from normalised names back to the source file headers."""

    def _to_source(df: pd.DataFrame) -> pd.DataFrame:
        renamed = {}
        for column in df.columns:
            if column == "index":
                renamed[column] = "INDEX"
            elif column == "wins":
                renamed[column] = "TARGET_WINS"
            else:
                renamed[column] = f"TEAM_{column.upper()}"
        return df.rename(columns=renamed)

    return _to_source
