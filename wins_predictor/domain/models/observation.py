"""Team-season observation schema: raw columns, derived features and cohorts."""

from enum import Enum
from typing import List


class StrikeoutGroup(str, Enum):
    """Four-level cohort from batting vs. pitching strikeouts, highest band first."""

    HIGH = "high"
    MED_HIGH = "med_high"
    MED_LOW = "med_low"
    LOW = "low"

    @classmethod
    def levels(cls) -> List[str]:
        return [member.value for member in cls]


class ImputationMode(str, Enum):
    """Which cells the imputer treats as missing."""

    MISSING_ONLY = "missing_only"
    MISSING_AND_OUTLIERS = "missing_and_outliers"


INDEX_COLUMN = "index"
TARGET_COLUMN = "wins"
GROUP_COLUMN = "strikeout_group"

# 162 games x 27 outs per game
PLATE_APPEARANCE_CONSTANT = 4374

RAW_PREDICTORS = [
    "batting_h",
    "batting_2b",
    "batting_3b",
    "batting_hr",
    "batting_bb",
    "batting_so",
    "baserun_sb",
    "baserun_cs",
    "batting_hbp",
    "pitching_h",
    "pitching_hr",
    "pitching_bb",
    "pitching_so",
    "fielding_e",
    "fielding_dp",
]

# Sparse in the source data and dropped before imputation, so never required.
OPTIONAL_PREDICTORS = ["batting_hbp"]

REQUIRED_PREDICTORS = [c for c in RAW_PREDICTORS if c not in OPTIONAL_PREDICTORS]

DERIVED_FEATURES = [
    "net_stolen_bases",
    "offense_on_base_pct",
    "defense_on_base_pct",
    "total_at_bats",
]

# Raw inputs folded entirely into the derived features. Home-run columns
# feed no derived feature and remain predictors.
CONSUMED_COLUMNS = [
    "batting_h",
    "batting_bb",
    "baserun_sb",
    "baserun_cs",
    "pitching_h",
    "pitching_bb",
    "fielding_e",
    "fielding_dp",
]
