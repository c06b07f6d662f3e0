"""
Column decomposition for the reformatter pipeline.

Measurement columns encode five facets in one underscore-joined label,
``measure_treatment_depth_stat_units``, e.g. ``vwc_ctrl_5cm_avg_(m^3/m^3)``.
This module parses those labels into :class:`ColumnFacets`, reads the
planting cohort and sampling frequency from the source file name, and
melts a cleaned wide table into long observations.

The temperature unit ``(Deg C)`` contains a space, so after snake-casing
it spans two fields (``(deg`` and ``c)``). Such labels are resolved
through an explicit exception table keyed on the measure and the whole
underscore-joined unit tail.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

import pandas as pd

from ccmoisture.exceptions import GrammarViolationError, UnknownColumnLayoutError
from ccmoisture.format.transformers.columns import SOURCE_FILE_COLUMN
from ccmoisture.format.transformers.timestamps import TIMESTAMP

N_FIELDS: int = 5

# (measure, unit tail) -> measure_units, lowercase.
GRAMMAR_EXCEPTIONS: Dict[Tuple[str, str], str] = {
    ("t", "(deg_c)"): "t_(deg_c)",
}

# Field -> value -> case-insensitive file name token.
FILENAME_TOKENS: Dict[str, Dict[str, str]] = {
    "cc_plant_time": {"early": "Early", "late": "Late"},
    "data_freq": {"daily": "Daily", "hourly": "Hourly"},
}

LONG_COLUMNS = [
    TIMESTAMP,
    "treatment",
    "depth",
    "stat",
    "cc_plant_time",
    "data_freq",
    "measure_units",
    "value",
]


@dataclass(frozen=True)
class ColumnFacets:
    """Parsed facets of one measurement column label."""

    column: str
    measure: str
    treatment: str
    depth: str
    stat: str
    units: str
    measure_units: Optional[str]


def parse_column_name(
    column: str,
    exceptions: Optional[Mapping[Tuple[str, str], str]] = None,
) -> ColumnFacets:
    """
    Split a measurement column label into its five facets.

    Parameters
    ----------
    column : str
        Column label, e.g. ``ec_ctrl_20cm_max_(ds/m)``.
    exceptions : mapping, optional
        ``(measure, unit tail) -> measure_units`` for labels whose unit
        token spans several fields, where the unit tail is every field from
        the fifth on joined by ``_``. Keys are lowercase. Defaults to
        :data:`GRAMMAR_EXCEPTIONS`.

    Returns
    -------
    ColumnFacets
        The facets. ``measure_units`` is None when the unit field is empty.

    Raises
    ------
    GrammarViolationError
        If the label has fewer than five fields, more than five without a
        matching exception, a unit tail that only partly matches an
        exception, or an empty measure/treatment/depth/stat field.

    Examples
    --------
    >>> parse_column_name("t_ctrl_5cm_avg_(deg_c)").measure_units
    't_(deg_c)'
    """
    if exceptions is None:
        exceptions = GRAMMAR_EXCEPTIONS

    parts = column.split("_")
    n = len(parts)
    if n < N_FIELDS:
        raise GrammarViolationError(column, n)

    measure, treatment, depth, stat, units = parts[:N_FIELDS]
    empty = [
        name
        for name, value in zip(("measure", "treatment", "depth", "stat"), parts)
        if not value
    ]
    if empty:
        raise GrammarViolationError(column, n, reason=f"has empty {', '.join(empty)}")

    tail = "_".join(parts[N_FIELDS - 1:]).lower()
    if (measure.lower(), tail) in exceptions:
        measure_units: Optional[str] = exceptions[(measure.lower(), tail)]
    elif any(
        m == measure.lower() and t.split("_")[0] == units.lower()
        for m, t in exceptions
    ):
        raise GrammarViolationError(
            column, n, reason=f"has unit tail '{tail}' not in the exception table"
        )
    elif n > N_FIELDS:
        raise GrammarViolationError(column, n)
    elif units:
        measure_units = f"{measure}_{units}"
    else:
        measure_units = None

    return ColumnFacets(column, measure, treatment, depth, stat, units, measure_units)


def filename_metadata(
    name: str,
    tokens: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> Dict[str, Optional[str]]:
    """
    Derive experiment metadata from a raw file name.

    Each field maps values to the token that marks them, e.g.
    ``{"data_freq": {"daily": "Daily", "hourly": "Hourly"}}``. Tokens are
    matched case-insensitively as substrings; the first listed match wins.

    Returns
    -------
    dict
        Field -> value, or None where no token matches.
    """
    if tokens is None:
        tokens = FILENAME_TOKENS
    lowered = name.lower()
    meta: Dict[str, Optional[str]] = {}
    for field_name, mapping in tokens.items():
        meta[field_name] = next(
            (value for value, token in mapping.items() if token.lower() in lowered),
            None,
        )
    return meta


def decompose_columns(
    df: pd.DataFrame,
    logger: logging.Logger,
    source_file_column: str = SOURCE_FILE_COLUMN,
    exceptions: Optional[Mapping[Tuple[str, str], str]] = None,
    tokens: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> pd.DataFrame:
    """
    Melt a cleaned wide table into long observations.

    Every non-identifier column is parsed with :func:`parse_column_name`
    before any reshaping, so a bad label fails the whole table. Values
    are coerced to numbers (non-numeric becomes NaN). Cohort and frequency
    come from the source file name; rows whose ``measure_units`` cannot be
    resolved are dropped.

    Parameters
    ----------
    df : pd.DataFrame
        Cleaned table with ``timestamp``, the source file column and
        measurement columns.
    logger : logging.Logger
        The logger for tracking the reshape.
    source_file_column : str, optional
        Name of the source file column.
    exceptions : mapping, optional
        Grammar exception table passed to :func:`parse_column_name`.
    tokens : mapping, optional
        Filename token table passed to :func:`filename_metadata`.

    Returns
    -------
    pd.DataFrame
        Long observations with columns :data:`LONG_COLUMNS`.
    """
    source = source_file_column
    if tokens is None:
        tokens = FILENAME_TOKENS

    id_cols = [TIMESTAMP, source]
    missing = [c for c in id_cols if c not in df.columns]
    if missing:
        raise UnknownColumnLayoutError(f"Identifier columns {missing} not in table")

    measure_cols: Sequence[str] = [c for c in df.columns if c not in id_cols]
    facets = {c: parse_column_name(c, exceptions) for c in measure_cols}
    logger.debug(f"Decomposing {len(facets)} measurement columns")

    long = df.melt(
        id_vars=id_cols,
        value_vars=list(measure_cols),
        var_name="column",
        value_name="value",
    )
    long["value"] = pd.to_numeric(long["value"], errors="coerce")
    for attr in ("treatment", "depth", "stat", "measure_units"):
        long[attr] = long["column"].map({c: getattr(f, attr) for c, f in facets.items()})

    meta = {name: filename_metadata(name, tokens) for name in long[source].unique()}
    for field_name in tokens:
        long[field_name] = long[source].map({n: m[field_name] for n, m in meta.items()})
    unmatched = sorted(n for n, m in meta.items() if None in m.values())
    if unmatched:
        logger.warning(f"No cohort/frequency token in file names: {unmatched}")

    unresolved = long["measure_units"].isna()
    if unresolved.any():
        logger.info(f"Dropped {int(unresolved.sum())} observations without units")
        long = long.loc[~unresolved]

    long = long.reindex(columns=LONG_COLUMNS).reset_index(drop=True)
    logger.debug(f"Len of long observations {len(long)}")
    return long


__all__ = [
    "N_FIELDS",
    "GRAMMAR_EXCEPTIONS",
    "FILENAME_TOKENS",
    "LONG_COLUMNS",
    "ColumnFacets",
    "parse_column_name",
    "filename_metadata",
    "decompose_columns",
]
