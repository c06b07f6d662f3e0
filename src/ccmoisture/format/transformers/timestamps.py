"""
Timestamp transformation functions for the reformatter pipeline.

This module parses the logger timestamp column and restricts rows to the
window in which a site's sensors were installed.
"""

import logging
from typing import Optional

import pandas as pd

from ccmoisture.exceptions import UnknownColumnLayoutError

TIMESTAMP: str = "timestamp"

RAW_TIMESTAMP_COLUMN: str = "timestamp_(ts)"
RAW_TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S"


def fix_timestamps(
    df: pd.DataFrame,
    logger: logging.Logger,
    ts_col: str = RAW_TIMESTAMP_COLUMN,
    ts_format: str = RAW_TIMESTAMP_FORMAT,
) -> pd.DataFrame:
    """
    Convert the raw timestamp column to datetimes named ``timestamp``.

    Rows whose timestamp cannot be parsed are dropped. The raw column is
    removed and ``timestamp`` is placed first.

    Parameters
    ----------
    df : pd.DataFrame
        The input DataFrame with a raw timestamp column.
    logger : logging.Logger
        The logger for tracking progress.
    ts_col : str, optional
        Raw timestamp column.
    ts_format : str, optional
        ``strftime`` format of the raw timestamps.

    Returns
    -------
    pd.DataFrame
        The DataFrame with a ``timestamp`` column of datetime objects.
    """
    if ts_col not in df.columns:
        raise UnknownColumnLayoutError(
            f"Timestamp column '{ts_col}' not in {list(df.columns)}"
        )

    df = df.copy()
    parsed = pd.to_datetime(df[ts_col], format=ts_format, errors="coerce")
    df = df.drop(columns=[ts_col])
    df.insert(0, TIMESTAMP, parsed)
    n_in = len(df)
    df = df.dropna(subset=[TIMESTAMP]).reset_index(drop=True)
    if len(df) < n_in:
        logger.info(f"Dropped {n_in - len(df)} rows with unparseable timestamps")
    logger.debug(f"Len of fixed timestamps {len(df)}")
    return df


def apply_deployment_window(
    df: pd.DataFrame,
    deployment_end: pd.Timestamp,
    logger: logging.Logger,
    deployment_start: Optional[pd.Timestamp] = None,
) -> pd.DataFrame:
    """
    Drop rows recorded after the sensors were removed.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame with a ``timestamp`` column.
    deployment_end : pd.Timestamp
        Last installed instant (inclusive).
    logger : logging.Logger
        The logger for tracking dropped rows.
    deployment_start : pd.Timestamp, optional
        First installed instant (inclusive). No lower bound when None.

    Returns
    -------
    pd.DataFrame
        Rows inside the deployment window.
    """
    keep = df[TIMESTAMP] <= pd.Timestamp(deployment_end)
    if deployment_start is not None:
        keep &= df[TIMESTAMP] >= pd.Timestamp(deployment_start)
    out = df.loc[keep].reset_index(drop=True)
    if len(out) < len(df):
        logger.info(
            f"Dropped {len(df) - len(out)} rows outside deployment window "
            f"[{deployment_start}, {deployment_end}]"
        )
    return out


__all__ = [
    "TIMESTAMP",
    "RAW_TIMESTAMP_COLUMN",
    "RAW_TIMESTAMP_FORMAT",
    "fix_timestamps",
    "apply_deployment_window",
]
