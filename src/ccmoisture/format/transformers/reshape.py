"""
Long-to-wide reassembly for the reformatter pipeline.
"""

import logging

import pandas as pd

from ccmoisture.exceptions import PivotCollisionError
from ccmoisture.format.transformers.timestamps import TIMESTAMP
FACTOR_COLUMNS = ["treatment", "depth", "stat", "cc_plant_time", "data_freq"]
PIVOT_KEY = [TIMESTAMP] + FACTOR_COLUMNS

# Placeholder column pivot produces for timestamps without a quantity.
PIVOT_ARTIFACT_COLUMN: str = "timestamp_NA"


def pivot_wide(
    long: pd.DataFrame,
    logger: logging.Logger,
    artifact_column: str = PIVOT_ARTIFACT_COLUMN,
) -> pd.DataFrame:
    """
    Pivot long observations to one row per experimental key.

    Each distinct ``measure_units`` value becomes a column holding
    ``value``. Observations with an incomplete key cannot be placed and are
    dropped. Exact repeats of an observation collapse to one; two different
    values for the same key and column raise.

    Parameters
    ----------
    long : pd.DataFrame
        Long observations from ``decompose_columns``.
    logger : logging.Logger
        The logger for tracking the reshape.
    artifact_column : str, optional
        Name of the placeholder column produced for timestamps without a
        quantity. Dropped when present.

    Returns
    -------
    pd.DataFrame
        Wide table keyed by :data:`PIVOT_KEY`, factors as categoricals.

    Raises
    ------
    PivotCollisionError
        If two observations disagree on the same wide-table cell.
    """
    incomplete = long[PIVOT_KEY].isna().any(axis=1)
    if incomplete.any():
        logger.info(f"Dropped {int(incomplete.sum())} observations with incomplete keys")
        long = long.loc[~incomplete]

    long = long.drop_duplicates(subset=PIVOT_KEY + ["measure_units", "value"])
    clash = long.duplicated(subset=PIVOT_KEY + ["measure_units"], keep=False)
    if clash.any():
        collisions = long.loc[clash].sort_values(PIVOT_KEY + ["measure_units"])
        logger.error(f"{len(collisions)} observations collide on the wide-table key")
        raise PivotCollisionError(
            f"{len(collisions)} observations map to the same key and quantity, "
            f"first: {collisions.iloc[0][PIVOT_KEY + ['measure_units']].to_dict()}",
            collisions=collisions.reset_index(drop=True),
        )

    if long.empty:
        wide = pd.DataFrame({c: long[c] for c in PIVOT_KEY}).reset_index(drop=True)
    else:
        wide = long.pivot(
            index=PIVOT_KEY, columns="measure_units", values="value"
        ).reset_index()
        wide.columns.name = None

    if artifact_column in wide.columns:
        logger.debug(f"Dropping pivot artifact column {artifact_column}")
        wide = wide.drop(columns=[artifact_column])

    wide = wide.sort_values(PIVOT_KEY).reset_index(drop=True)
    for col in FACTOR_COLUMNS:
        wide[col] = wide[col].astype("category")
    logger.debug(f"Len of wide table {len(wide)}")
    return wide


__all__ = [
    "FACTOR_COLUMNS",
    "PIVOT_KEY",
    "PIVOT_ARTIFACT_COLUMN",
    "pivot_wide",
]
