"""
Utility functions for the ccmoisture package.
"""
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd
import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / "data" / "site_config.yml"


def load_yaml(path: Path | str) -> Dict:
    """
    Load a YAML file and return its contents as a dictionary.

    Parameters
    ----------
    path : Path or str
        The path to the YAML file.

    Returns
    -------
    dict
        The contents of the YAML file as a dictionary.

    Raises
    ------
    FileNotFoundError
        If the specified file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open() as fp:
        return yaml.safe_load(fp)


def logger_check(logger: logging.Logger | None) -> logging.Logger:
    """
    Initialize and return a logger instance if none is provided.

    This function checks if a logger object is provided. If not, it
    creates and configures a new logger.

    Parameters
    ----------
    logger : logging.Logger or None
        An existing logger instance.

    Returns
    -------
    logging.Logger
        A configured logger instance.
    """
    if logger is None:
        logger = logging.getLogger("ccmoisture")
        logger.setLevel(logging.WARNING)
        if not logger.handlers:
            ch = logging.StreamHandler()
            ch.setFormatter(
                logging.Formatter(
                    fmt="%(levelname)s [%(asctime)s] %(name)s – %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            logger.addHandler(ch)
    return logger


# ============================================================================
# Site and Layout Configuration
# ============================================================================


@dataclass(frozen=True)
class SiteConfig:
    """
    Fixed configuration of one field deployment.

    Attributes
    ----------
    site_id : str
        Site name, also the token raw file names carry (e.g. 'Midville').
    deployment_end : pd.Timestamp
        Last instant the sensors were installed (inclusive).
    deployment_start : pd.Timestamp or None
        First installed instant (inclusive). None applies no lower bound.
    expected_columns : int or None
        Raw column count every file of the site must have. None skips the check.
    """

    site_id: str
    deployment_end: pd.Timestamp
    deployment_start: Optional[pd.Timestamp] = None
    expected_columns: Optional[int] = None

    @property
    def file_pattern(self) -> str:
        return f"*{self.site_id}*"


@dataclass(frozen=True)
class LayoutConfig:
    """Raw file layout and column grammar shared by both sites."""

    file_glob: str = "*.dat"
    preamble_lines: int = 1
    source_file_column: str = "source_file"
    timestamp_column: str = "timestamp_(ts)"
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
    instrumentation_columns: Tuple[str, ...] = ()
    grammar_fields: Tuple[str, ...] = ("measure", "treatment", "depth", "stat", "units")
    grammar_exceptions: Dict[Tuple[str, str], str] = field(default_factory=dict)
    filename_tokens: Dict[str, Dict[str, str]] = field(default_factory=dict)
    pivot_artifact_column: str = "timestamp_NA"
    validity_limits: Dict[str, Dict] = field(default_factory=dict)
    partition_stats: Tuple[str, ...] = ("avg", "min", "max")
    partition_freqs: Tuple[str, ...] = ("daily", "hourly")


def _to_timestamp(value) -> Optional[pd.Timestamp]:
    if value is None:
        return None
    return pd.Timestamp(value)


def read_site_config(
    site_id: str, config_path: Path | str | None = None
) -> SiteConfig:
    """
    Read one site's deployment configuration.

    Parameters
    ----------
    site_id : str
        The site identifier (e.g., 'Midville', 'Watkinsville').
    config_path : Path or str, optional
        YAML configuration file. Defaults to the packaged ``site_config.yml``.

    Returns
    -------
    SiteConfig
        The site's configuration.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    KeyError
        If the site is not configured or lacks a deployment end date.

    Examples
    --------
    >>> read_site_config('Midville').deployment_end
    Timestamp('2024-10-11 23:59:59')
    """
    config = load_yaml(config_path or DEFAULT_CONFIG_PATH)
    sites = config.get("sites", {})
    if site_id not in sites:
        raise KeyError(
            f"Site '{site_id}' not configured. "
            f"Available sites: {', '.join(sorted(sites))}"
        )
    entry = sites[site_id] or {}
    try:
        deployment_end = _to_timestamp(entry["deployment_end"])
    except KeyError as e:
        raise KeyError(f"Missing required field for site {site_id}: {e}") from e
    expected = entry.get("expected_columns")
    return SiteConfig(
        site_id=site_id,
        deployment_end=deployment_end,
        deployment_start=_to_timestamp(entry.get("deployment_start")),
        expected_columns=int(expected) if expected is not None else None,
    )


def get_all_site_configs(
    config_path: Path | str | None = None,
) -> Dict[str, SiteConfig]:
    """
    Read every configured site.

    Returns
    -------
    dict
        Dictionary mapping site_id to SiteConfig.
    """
    config = load_yaml(config_path or DEFAULT_CONFIG_PATH)
    return {
        site_id: read_site_config(site_id, config_path)
        for site_id in config.get("sites", {})
    }


def read_layout_config(config_path: Path | str | None = None) -> LayoutConfig:
    """
    Read the shared raw-layout configuration.

    Parameters
    ----------
    config_path : Path or str, optional
        YAML configuration file. Defaults to the packaged ``site_config.yml``.

    Returns
    -------
    LayoutConfig
        Layout constants, column grammar and validity limits.
    """
    layout = load_yaml(config_path or DEFAULT_CONFIG_PATH).get("layout", {})
    exceptions = {
        (str(e["measure"]).lower(), str(e["units"]).lower()): e["measure_units"]
        for e in layout.get("grammar_exceptions", [])
    }
    defaults = LayoutConfig()
    return LayoutConfig(
        file_glob=layout.get("file_glob", defaults.file_glob),
        preamble_lines=int(layout.get("preamble_lines", defaults.preamble_lines)),
        source_file_column=layout.get(
            "source_file_column", defaults.source_file_column
        ),
        timestamp_column=layout.get("timestamp_column", defaults.timestamp_column),
        timestamp_format=layout.get("timestamp_format", defaults.timestamp_format),
        instrumentation_columns=tuple(layout.get("instrumentation_columns", [])),
        grammar_fields=tuple(layout.get("grammar_fields", defaults.grammar_fields)),
        grammar_exceptions=exceptions,
        filename_tokens=layout.get("filename_tokens", {}),
        pivot_artifact_column=layout.get(
            "pivot_artifact_column", defaults.pivot_artifact_column
        ),
        validity_limits=layout.get("validity_limits", {}),
        partition_stats=tuple(layout.get("partition_stats", defaults.partition_stats)),
        partition_freqs=tuple(layout.get("partition_freqs", defaults.partition_freqs)),
    )


@lru_cache(maxsize=1)
def default_layout() -> LayoutConfig:
    """Return the packaged layout configuration, read once."""
    return read_layout_config()


__all__ = [
    "load_yaml",
    "logger_check",
    "SiteConfig",
    "LayoutConfig",
    "read_site_config",
    "get_all_site_configs",
    "read_layout_config",
    "default_layout",
]
