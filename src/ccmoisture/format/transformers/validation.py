"""
Physical validity checks for the reformatter pipeline.

Sensors that are powered but not yet installed (or already removed) log
non-positive water content and negative conductivity. Rows with such
readings, and rows with any missing value, are removed.
"""

import logging
import math
from typing import Dict, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

# Column -> limits. Unplugged sensors read zero water content and negative
# conductivity.
VALIDITY_LIMITS: Dict[str, Dict] = {
    "vwc_(m^3/m^3)": {"Min": 0.0, "Strict": True},
    "ec_(ds/m)": {"Min": 0.0, "Strict": False},
}


def _is_set(value) -> bool:
    return value is not None and not (isinstance(value, float) and math.isnan(value))


def apply_validity_limits(
    df: pd.DataFrame,
    logger: logging.Logger,
    limits: Optional[Mapping[str, Dict]] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Drop rows with physically impossible readings or missing values.

    Parameters
    ----------
    df : pd.DataFrame
        Wide table of one site.
    logger : logging.Logger
        The logger for tracking dropped rows.
    limits : mapping, optional
        Column -> ``{"Min": float, "Max": float, "Strict": bool}``. A value
        is invalid below ``Min`` (at or below when ``Strict``) or above
        ``Max``. Columns absent from ``df`` are skipped. Defaults to
        :data:`VALIDITY_LIMITS`.

    Returns
    -------
    tuple[pd.DataFrame, pd.DataFrame]
        - The filtered table.
        - A report with the number of rows flagged per column.
    """
    if limits is None:
        limits = VALIDITY_LIMITS

    keep = pd.Series(True, index=df.index)
    records = []
    for col, lim in limits.items():
        if col not in df.columns:
            logger.debug(f"No {col} column; skipping its limits")
            continue
        ser = pd.to_numeric(df[col], errors="coerce")
        mn = lim.get("Min", np.nan)
        mx = lim.get("Max", np.nan)
        strict = bool(lim.get("Strict", False))

        bad = pd.Series(False, index=df.index)
        if _is_set(mn):
            bad |= (ser <= mn) if strict else (ser < mn)
        n_below = int(bad.sum())
        if _is_set(mx):
            bad |= ser > mx
        keep &= ~bad
        records.append(
            {
                "column": col,
                "Min": mn,
                "Max": mx,
                "n_below": n_below,
                "n_above": int(bad.sum()) - n_below,
                "n_flagged": int(bad.sum()),
            }
        )

    out = df.loc[keep]
    n_limits = len(df) - len(out)
    out = out.dropna().reset_index(drop=True)
    n_na = len(df) - n_limits - len(out)
    logger.info(
        f"Dropped {n_limits} rows outside validity limits, {n_na} rows with missing values"
    )
    report = pd.DataFrame(
        records, columns=["column", "Min", "Max", "n_below", "n_above", "n_flagged"]
    )
    return out, report


__all__ = ["VALIDITY_LIMITS", "apply_validity_limits"]
