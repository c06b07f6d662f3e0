"""
Row cleanup functions for the reformatter pipeline.
"""

import logging

import pandas as pd


def drop_na_drop_dups(df: pd.DataFrame, logger: logging.Logger) -> pd.DataFrame:
    """
    Drop rows with any missing field, then exact duplicate rows.

    Parameters
    ----------
    df : pd.DataFrame
        The normalized raw table.
    logger : logging.Logger
        The logger for tracking dropped rows.

    Returns
    -------
    pd.DataFrame
        A new DataFrame without missing values or duplicate rows.
    """
    n_in = len(df)
    out = df.dropna()
    n_na = n_in - len(out)
    out = out.drop_duplicates().reset_index(drop=True)
    n_dup = n_in - n_na - len(out)
    if n_na or n_dup:
        logger.info(f"Dropped {n_na} rows with missing fields, {n_dup} duplicate rows")
    logger.debug(f"Len after NA/duplicate removal {len(out)}")
    return out


__all__ = ["drop_na_drop_dups"]
