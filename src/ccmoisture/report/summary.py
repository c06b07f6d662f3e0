"""
Descriptive summaries of cleaned site datasets.
"""

from typing import Sequence

import pandas as pd

from ccmoisture.partition import SiteDataset


def summarize_partitions(dataset: SiteDataset) -> pd.DataFrame:
    """
    Summarize each ``(stat, data_freq)`` partition of a site.

    Returns
    -------
    pd.DataFrame
        One row per partition with columns ``stat``, ``data_freq``,
        ``n_rows``, ``first_timestamp`` and ``last_timestamp``.
    """
    rows = []
    for (stat, freq), part in dataset.partitions.items():
        rows.append(
            {
                "stat": stat,
                "data_freq": freq,
                "n_rows": len(part),
                "first_timestamp": part["timestamp"].min() if len(part) else pd.NaT,
                "last_timestamp": part["timestamp"].max() if len(part) else pd.NaT,
            }
        )
    return pd.DataFrame(
        rows, columns=["stat", "data_freq", "n_rows", "first_timestamp", "last_timestamp"]
    )


def factor_summary(
    table: pd.DataFrame,
    quantity: str,
    by: Sequence[str] = ("treatment", "depth", "cc_plant_time"),
) -> pd.DataFrame:
    """
    Describe one quantity per combination of experimental factors.

    Parameters
    ----------
    table : pd.DataFrame
        A cleaned wide table or one of its partitions.
    quantity : str
        Quantity column, e.g. ``vwc_(m^3/m^3)``.
    by : sequence of str
        Factor columns to group by.

    Returns
    -------
    pd.DataFrame
        Count, mean, standard deviation, minimum and maximum per group.
        Only factor levels present in ``table`` are listed.
    """
    if quantity not in table.columns:
        raise KeyError(f"Quantity '{quantity}' not in table columns {list(table.columns)}")
    return (
        table.groupby(list(by), observed=True)[quantity]
        .agg(["count", "mean", "std", "min", "max"])
        .reset_index()
    )


__all__ = ["summarize_partitions", "factor_summary"]
