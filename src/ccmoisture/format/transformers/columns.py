"""
Column naming functions for the reformatter pipeline.

This module fuses the logger units row into the column labels, drops the
logger housekeeping columns and standardizes the label case.
"""

import logging
from typing import Dict, Sequence, Tuple

import pandas as pd

from ccmoisture.exceptions import UnknownColumnLayoutError

# Rows 0 and 1 of a compiled site table: units, then the sentinel row.
HEADER_ROWS: int = 2

SOURCE_FILE_COLUMN: str = "source_file"

# Logger housekeeping columns, as "<name>_(<unit>)" before snake-casing.
INSTRUMENTATION_COLUMNS: Tuple[str, ...] = (
    "RECORD_(RN)",
    "BattV_Min_(Volts)",
    "PTemp_C_Avg_(Deg C)",
    "BattV_Avg_(Volts)",
)


def normalize_header(
    df: pd.DataFrame,
    logger: logging.Logger,
    instrumentation_columns: Sequence[str] = INSTRUMENTATION_COLUMNS,
    source_file_column: str = SOURCE_FILE_COLUMN,
) -> pd.DataFrame:
    """
    Fuse units into column names and drop instrumentation columns.

    The first row of ``df`` is read as the units of every column. It and
    the sentinel row after it are dropped, each column is renamed to
    ``"<name>_(<unit>)"``, the logger housekeeping columns are removed and
    the names are snake-cased.

    Parameters
    ----------
    df : pd.DataFrame
        Compiled raw table of one site.
    logger : logging.Logger
        The logger for tracking the renaming.
    instrumentation_columns : sequence of str, optional
        Housekeeping columns as ``"<name>_(<unit>)"``.
    source_file_column : str, optional
        Name of the source file column, which has no unit.

    Returns
    -------
    pd.DataFrame
        A new DataFrame of data rows with normalized column names.

    Raises
    ------
    UnknownColumnLayoutError
        If the table has no header rows, a housekeeping column is absent,
        or two columns normalize to the same name.
    """
    if len(df) < HEADER_ROWS:
        raise UnknownColumnLayoutError(
            f"Expected a units row and a sentinel row, got {len(df)} rows"
        )

    units = df.iloc[0].fillna("").astype(str).str.strip()
    body = df.iloc[HEADER_ROWS:].reset_index(drop=True)

    rename_map: Dict[str, str] = {
        col: f"{col}_({units[col]})" for col in body.columns if col != source_file_column
    }
    logger.debug(f"Unit labels: {rename_map}")
    body = body.rename(columns=rename_map)

    missing = [c for c in instrumentation_columns if c not in body.columns]
    if missing:
        logger.error(f"Instrumentation columns not found: {missing}")
        raise UnknownColumnLayoutError(
            f"Expected instrumentation columns not found: {missing}"
        )
    body = body.drop(columns=list(instrumentation_columns))
    logger.debug(f"Dropped instrumentation columns {list(instrumentation_columns)}")

    return snake_case_columns(body, logger)


def snake_case_columns(df: pd.DataFrame, logger: logging.Logger) -> pd.DataFrame:
    """
    Lowercase column names and replace spaces with underscores.

    Raises
    ------
    UnknownColumnLayoutError
        If two columns collide after normalization.
    """
    df = df.copy()
    df.columns = df.columns.str.strip().str.lower().str.replace(" ", "_", regex=False)
    dupes = df.columns[df.columns.duplicated()]
    if len(dupes):
        logger.error(f"Column names collide after normalization: {list(dupes)}")
        raise UnknownColumnLayoutError(
            f"Column names collide after normalization: {sorted(set(dupes))}"
        )
    return df


__all__ = [
    "HEADER_ROWS",
    "SOURCE_FILE_COLUMN",
    "INSTRUMENTATION_COLUMNS",
    "normalize_header",
    "snake_case_columns",
]
