"""
Exceptions for ccmoisture processing.

Each of these aborts processing for the site that raised it. Data-quality
problems (missing values, out-of-window timestamps, implausible readings)
are filtered rather than raised.
"""


class CCMoistureError(Exception):
    """Base exception for structural errors in the cleaning pipeline."""

    pass


class SchemaMismatchError(CCMoistureError):
    """Raw files for one site disagree on column layout or units."""

    def __init__(self, message: str, file=None, missing=None, extra=None):
        super().__init__(message)
        self.file = file
        self.missing = sorted(missing or [])
        self.extra = sorted(extra or [])


class UnknownColumnLayoutError(CCMoistureError):
    """Expected logger columns are absent, or normalized names collide."""

    pass


class GrammarViolationError(CCMoistureError):
    """A measurement column name does not fit the five-field grammar."""

    def __init__(self, column: str, n_fields: int, reason: str | None = None):
        if reason is None:
            reason = f"splits into {n_fields} underscore fields"
        super().__init__(
            f"Column '{column}' {reason}; "
            "expected measure_treatment_depth_stat_units"
        )
        self.column = column
        self.n_fields = n_fields


class PivotCollisionError(CCMoistureError):
    """Two long observations map to the same wide-table cell."""

    def __init__(self, message: str, collisions=None):
        super().__init__(message)
        self.collisions = collisions


class FilenameMetadataError(CCMoistureError):
    """A raw file name carries no cohort or no frequency token."""

    pass
