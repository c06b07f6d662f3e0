"""
This module provides the Reformatter class for turning a compiled raw
logger table of one site into the cleaned, wide analysis table.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

import pandas as pd

from ccmoisture.format import transformers
from ccmoisture.utils import LayoutConfig, SiteConfig, default_layout, logger_check


class Reformatter:
    """
    A class to clean and reshape one site's raw logger data.

    The stages run in a fixed order, each returning a new table:

    1. ``normalize_header``: units into labels, housekeeping columns out
    2. ``drop_na_drop_dups``: rows with missing fields and duplicates out
    3. ``fix_timestamps``: parse ``timestamp``
    4. ``apply_deployment_window``: rows after sensor removal out
    5. ``decompose_columns``: melt into long observations
    6. ``pivot_wide``: one row per experimental key
    7. ``apply_validity_limits``: implausible readings and gaps out

    Parameters
    ----------
    site_config : SiteConfig
        Deployment window of the site.
    layout : LayoutConfig, optional
        Raw layout constants. Defaults to the packaged configuration.
    logger : logging.Logger, optional
        A logger for tracking the reformatting process.

    Attributes
    ----------
    long_ : pd.DataFrame or None
        Long observations of the last ``process`` call.
    limits_report_ : pd.DataFrame or None
        Validity limits report of the last ``process`` call.
    """

    def __init__(
        self,
        site_config: SiteConfig,
        layout: LayoutConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        self.logger = logger_check(logger)
        self.site_config = site_config
        self.layout = layout or default_layout()
        self.long_: pd.DataFrame | None = None
        self.limits_report_: pd.DataFrame | None = None

    def process(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Clean and reshape a compiled raw table.

        Parameters
        ----------
        df : pd.DataFrame
            Output of ``LoggerFileReader.raw_file_compile`` for this site.

        Returns
        -------
        tuple[pd.DataFrame, pd.DataFrame]
            - The cleaned wide table.
            - A report of row counts in and out of every stage.
        """
        site = self.site_config.site_id
        layout = self.layout
        self.logger.info("Starting reformat of %s (%s rows)", site, len(df))
        stages: List[dict] = []

        def track(stage: str, before: pd.DataFrame, after: pd.DataFrame) -> pd.DataFrame:
            stages.append(
                {
                    "stage": stage,
                    "rows_in": len(before),
                    "rows_out": len(after),
                    "rows_dropped": len(before) - len(after),
                }
            )
            self.logger.debug(f"{stage}: {len(before)} -> {len(after)} rows")
            return after

        out = track(
            "normalize_header",
            df,
            transformers.normalize_header(
                df,
                logger=self.logger,
                instrumentation_columns=layout.instrumentation_columns,
                source_file_column=layout.source_file_column,
            ),
        )
        out = track(
            "drop_na_drop_dups", out, transformers.drop_na_drop_dups(out, self.logger)
        )
        out = track(
            "fix_timestamps",
            out,
            transformers.fix_timestamps(
                out,
                logger=self.logger,
                ts_col=layout.timestamp_column,
                ts_format=layout.timestamp_format,
            ),
        )
        out = track(
            "apply_deployment_window",
            out,
            transformers.apply_deployment_window(
                out,
                deployment_end=self.site_config.deployment_end,
                logger=self.logger,
                deployment_start=self.site_config.deployment_start,
            ),
        )
        long = track(
            "decompose_columns",
            out,
            transformers.decompose_columns(
                out,
                logger=self.logger,
                source_file_column=layout.source_file_column,
                exceptions=layout.grammar_exceptions,
                tokens=layout.filename_tokens,
            ),
        )
        wide = track(
            "pivot_wide",
            long,
            transformers.pivot_wide(
                long, logger=self.logger, artifact_column=layout.pivot_artifact_column
            ),
        )
        cleaned, limits_report = transformers.apply_validity_limits(
            wide, logger=self.logger, limits=layout.validity_limits
        )
        track("apply_validity_limits", wide, cleaned)

        self.long_ = long
        self.limits_report_ = limits_report
        self.logger.info("Done; final shape: %s", cleaned.shape)
        return cleaned, pd.DataFrame(
            stages, columns=["stage", "rows_in", "rows_out", "rows_dropped"]
        )
