"""
Data transformation functions for the reformatter pipeline.

This package contains modular transformation functions organized by stage:
- columns: Units fusion, instrumentation column removal, snake-casing
- cleanup: Missing value and duplicate row removal
- timestamps: Timestamp parsing and the deployment window
- decompose: Column-name grammar and long-format melting
- reshape: Long-to-wide reassembly
- validation: Physical validity limits
"""

from .columns import (
    HEADER_ROWS,
    SOURCE_FILE_COLUMN,
    INSTRUMENTATION_COLUMNS,
    normalize_header,
    snake_case_columns,
)

from .cleanup import drop_na_drop_dups

from .timestamps import (
    TIMESTAMP,
    RAW_TIMESTAMP_COLUMN,
    RAW_TIMESTAMP_FORMAT,
    fix_timestamps,
    apply_deployment_window,
)

from .decompose import (
    LONG_COLUMNS,
    GRAMMAR_EXCEPTIONS,
    FILENAME_TOKENS,
    ColumnFacets,
    parse_column_name,
    filename_metadata,
    decompose_columns,
)

from .reshape import (
    FACTOR_COLUMNS,
    PIVOT_KEY,
    PIVOT_ARTIFACT_COLUMN,
    pivot_wide,
)

from .validation import VALIDITY_LIMITS, apply_validity_limits

__all__ = [
    # Constants
    "HEADER_ROWS",
    "SOURCE_FILE_COLUMN",
    "INSTRUMENTATION_COLUMNS",
    "TIMESTAMP",
    "RAW_TIMESTAMP_COLUMN",
    "RAW_TIMESTAMP_FORMAT",
    "LONG_COLUMNS",
    "GRAMMAR_EXCEPTIONS",
    "FILENAME_TOKENS",
    "FACTOR_COLUMNS",
    "PIVOT_KEY",
    "PIVOT_ARTIFACT_COLUMN",
    "VALIDITY_LIMITS",

    # Column functions
    "normalize_header",
    "snake_case_columns",

    # Cleanup functions
    "drop_na_drop_dups",

    # Timestamp functions
    "fix_timestamps",
    "apply_deployment_window",

    # Decomposition
    "ColumnFacets",
    "parse_column_name",
    "filename_metadata",
    "decompose_columns",

    # Reshape
    "pivot_wide",

    # Validation functions
    "apply_validity_limits",
]
