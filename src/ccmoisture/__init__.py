"""
ccmoisture: Cleaning of cover-crop soil moisture logger data.

This package reads raw soil moisture logger files from the Midville and
Watkinsville field sites, normalizes their column layout into one schema and
derives per-site wide tables for comparison across treatment, depth,
planting time, statistic and sampling frequency.

The main components of the package are:
- `LoggerFileReader`: For reading and compiling raw logger files.
- `Reformatter`: For cleaning and reshaping one site's raw table.
- `Pipeline`: For running every stage per site.
- `SiteDataset`: The cleaned table of a site and its partitions.
"""
from .reader import LoggerFileReader
from .format.reformatter import Reformatter
from .format import transformers
from .partition import SiteDataset, partition_site, partition_table
from .pipeline import Pipeline, PipelineConfig, ProcessingResult
from .report import summary
from .utils import read_site_config, read_layout_config, get_all_site_configs
from .exceptions import (
    CCMoistureError,
    SchemaMismatchError,
    UnknownColumnLayoutError,
    GrammarViolationError,
    PivotCollisionError,
    FilenameMetadataError,
)

__version__ = "0.1.0"

__all__ = [
    "LoggerFileReader",
    "Reformatter",
    "transformers",
    "SiteDataset",
    "partition_site",
    "partition_table",
    "Pipeline",
    "PipelineConfig",
    "ProcessingResult",
    "summary",
    "read_site_config",
    "read_layout_config",
    "get_all_site_configs",
    "CCMoistureError",
    "SchemaMismatchError",
    "UnknownColumnLayoutError",
    "GrammarViolationError",
    "PivotCollisionError",
    "FilenameMetadataError",
]
