"""
Partitioning of a site's cleaned wide table by statistic and frequency.

The rendering layer reads one partition per ``(stat, data_freq)`` pair.
All six pairs always exist, possibly with zero rows.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

import pandas as pd

PartitionKey = Tuple[str, str]

PARTITION_STATS: Tuple[str, ...] = ("avg", "min", "max")
PARTITION_FREQS: Tuple[str, ...] = ("daily", "hourly")


@dataclass(frozen=True)
class SiteDataset:
    """
    Cleaned wide table of one site and its partitions.

    Attributes
    ----------
    site_id : str
        Site name.
    table : pd.DataFrame
        The cleaned wide table.
    partitions : Mapping[(str, str), pd.DataFrame]
        Read-only mapping from ``(stat, data_freq)`` to the matching rows.
    """

    site_id: str
    table: pd.DataFrame
    partitions: Mapping[PartitionKey, pd.DataFrame]

    def partition(self, stat: str, data_freq: str) -> pd.DataFrame:
        """Return the rows for one statistic and frequency."""
        return self.partitions[(stat, data_freq)]


def partition_table(df: pd.DataFrame, stat: str, data_freq: str) -> pd.DataFrame:
    """
    Select the rows of one statistic and sampling frequency.

    Applying the same selection to its own output returns the same rows.
    """
    mask = (df["stat"].astype(str) == stat) & (df["data_freq"].astype(str) == data_freq)
    return df.loc[mask].reset_index(drop=True)


def partition_site(
    site_id: str,
    table: pd.DataFrame,
    stats: Optional[Iterable[str]] = None,
    freqs: Optional[Iterable[str]] = None,
) -> SiteDataset:
    """
    Build a SiteDataset with one partition per ``(stat, data_freq)``.

    Parameters
    ----------
    site_id : str
        Site name.
    table : pd.DataFrame
        The cleaned wide table.
    stats, freqs : iterable of str, optional
        Statistics and frequencies to cross. Default to ``avg/min/max`` and
        ``daily/hourly``.
    """
    stats = tuple(stats) if stats is not None else PARTITION_STATS
    freqs = tuple(freqs) if freqs is not None else PARTITION_FREQS
    partitions = {
        (stat, freq): partition_table(table, stat, freq)
        for stat in stats
        for freq in freqs
    }
    return SiteDataset(site_id, table, MappingProxyType(partitions))


__all__ = [
    "PARTITION_STATS",
    "PARTITION_FREQS",
    "SiteDataset",
    "partition_table",
    "partition_site",
]
