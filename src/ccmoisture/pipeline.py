"""
Complete pipeline for cleaning cover-crop soil moisture logger data.

This module provides high-level orchestration from the raw ``.dat`` files of
each field site to the cleaned wide table and its partitions.

Classes
-------
Pipeline : Main orchestration class for data processing
PipelineConfig : Configuration container for pipeline settings
ProcessingResult : Container for processing results and metadata

Functions
---------
process_site : Convenience function to process one site
process_all : Convenience function to process every configured site

Examples
--------
Basic usage:

    >>> from ccmoisture.pipeline import Pipeline
    >>>
    >>> pipeline = Pipeline()
    >>> result = pipeline.process_site('Midville', input_dir='./raw_data')
    >>> result.dataset.partition('avg', 'daily')
    >>>
    >>> # Both sites, independently
    >>> results = pipeline.process_all('./raw_data')

Command-line usage:

    $ python -m ccmoisture.pipeline --input raw_data/ --site Midville
    $ python -m ccmoisture.pipeline --input raw_data/
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ccmoisture.exceptions import CCMoistureError
from ccmoisture.format.reformatter import Reformatter
from ccmoisture.partition import SiteDataset, partition_site
from ccmoisture.reader import LoggerFileReader
from ccmoisture.report import summary
from ccmoisture.utils import (
    get_all_site_configs,
    logger_check,
    read_layout_config,
    read_site_config,
)


# =============================================================================
# Configuration and Result Containers
# =============================================================================

@dataclass
class PipelineConfig:
    """
    Configuration settings for the data processing pipeline.

    Attributes
    ----------
    config_path : Path or None
        YAML site/layout configuration. None uses the packaged file.
    strict_filenames : bool
        Reject raw files whose name has no cohort or frequency token.
    generate_reports : bool
        Whether to build partition summaries.
    """

    config_path: Optional[Path] = None
    strict_filenames: bool = False
    generate_reports: bool = True

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        d = asdict(self)
        if d['config_path'] is not None:
            d['config_path'] = str(d['config_path'])
        return d


@dataclass
class ProcessingResult:
    """
    Container for processing results and metadata.

    Attributes
    ----------
    site_id : str
        Site name.
    success : bool
        Whether processing completed successfully.
    input_files : list of Path
        Raw files read for the site.
    n_records_input : int
        Rows in the compiled raw table.
    n_records_output : int
        Rows in the cleaned wide table.
    n_long : int
        Long observations produced by decomposition.
    processing_time : float
        Processing time in seconds.
    error_message : str or None
        Error message if processing failed.
    dataset : SiteDataset or None
        Cleaned table and partitions.
    reports : dict
        Dictionary of generated reports.
    """

    site_id: str
    success: bool
    input_files: List[Path] = field(default_factory=list)
    n_records_input: int = 0
    n_records_output: int = 0
    n_long: int = 0
    processing_time: float = 0.0
    error_message: Optional[str] = None
    dataset: Optional[SiteDataset] = None
    reports: Dict[str, pd.DataFrame] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert result to a JSON-friendly dictionary, without tables."""
        return {
            'site_id': self.site_id,
            'success': self.success,
            'input_files': [str(f) for f in self.input_files],
            'n_records_input': self.n_records_input,
            'n_records_output': self.n_records_output,
            'n_long': self.n_long,
            'processing_time': self.processing_time,
            'error_message': self.error_message,
            'reports': sorted(self.reports),
        }

    def summary(self) -> str:
        """Generate a human-readable summary."""
        status = "SUCCESS" if self.success else "FAILED"
        lines = [
            f"Processing Result: {status}",
            f"Site: {self.site_id}",
            f"Files: {len(self.input_files)}",
            f"Records: {self.n_records_input} → {self.n_records_output}",
            f"Long observations: {self.n_long}",
            f"Time: {self.processing_time:.2f}s",
        ]
        if self.error_message:
            lines.append(f"Error: {self.error_message}")
        return "\n".join(lines)


# =============================================================================
# Main Pipeline Class
# =============================================================================

class Pipeline:
    """
    Main orchestration class for soil moisture data processing.

    Each site runs through its own reader and reformatter; no state is
    shared between sites.

    Parameters
    ----------
    config : PipelineConfig, optional
        Configuration settings for the pipeline.
    logger : logging.Logger, optional
        Logger instance for tracking progress.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config or PipelineConfig()
        self.logger = logger_check(logger)
        self.layout = read_layout_config(self.config.config_path)

        self.logger.info("Pipeline initialized")
        self.logger.debug(f"Configuration: {self.config.to_dict()}")

    def process_site(
        self,
        site_id: str,
        input_dir: Optional[Union[str, Path]] = None,
        files: Optional[Sequence[Union[str, Path]]] = None,
    ) -> ProcessingResult:
        """
        Process all raw files of one site.

        Parameters
        ----------
        site_id : str
            Site name (e.g., 'Midville').
        input_dir : str or Path, optional
            Directory searched for the site's files. Ignored if ``files``
            is given.
        files : sequence of str or Path, optional
            Explicit raw files of the site.

        Returns
        -------
        ProcessingResult
            Result holding the site's SiteDataset.

        Raises
        ------
        CCMoistureError
            On any structural problem with the site's files.
        FileNotFoundError
            If the files or directory cannot be found.
        """
        start_time = datetime.now()
        site_config = read_site_config(site_id, self.config.config_path)
        reader = LoggerFileReader(layout=self.layout, logger=self.logger)

        if files is None:
            if input_dir is None:
                raise ValueError("Either input_dir or files is required")
            files = reader.discover_site_files(input_dir, site_id)
        files = [Path(f) for f in files]

        self.logger.info(f"Processing {site_id}: {len(files)} files")

        self.logger.info("Step 1/3: Reading raw data...")
        raw = reader.raw_file_compile(
            files,
            expected_columns=site_config.expected_columns,
            strict_filenames=self.config.strict_filenames,
        )

        self.logger.info("Step 2/3: Cleaning and reshaping...")
        reformatter = Reformatter(site_config, layout=self.layout, logger=self.logger)
        table, stage_report = reformatter.process(raw)

        self.logger.info("Step 3/3: Partitioning...")
        dataset = partition_site(
            site_id,
            table,
            stats=self.layout.partition_stats,
            freqs=self.layout.partition_freqs,
        )

        reports = {
            'stages': stage_report,
            'limits': reformatter.limits_report_,
        }
        if self.config.generate_reports:
            reports['partitions'] = summary.summarize_partitions(dataset)

        processing_time = (datetime.now() - start_time).total_seconds()
        result = ProcessingResult(
            site_id=site_id,
            success=True,
            input_files=files,
            n_records_input=len(raw),
            n_records_output=len(table),
            n_long=len(reformatter.long_),
            processing_time=processing_time,
            dataset=dataset,
            reports=reports,
        )
        self.logger.info(f"✓ {site_id} complete: {processing_time:.2f}s")
        return result

    def process_all(
        self,
        input_dir: Union[str, Path],
        sites: Optional[Sequence[str]] = None,
    ) -> Dict[str, ProcessingResult]:
        """
        Process every configured site independently.

        A structural failure of one site is recorded on its result and does
        not stop the other sites.

        Parameters
        ----------
        input_dir : str or Path
            Directory containing the raw files of all sites.
        sites : sequence of str, optional
            Sites to process. Defaults to all configured sites.

        Returns
        -------
        dict
            Dictionary mapping site_id to ProcessingResult.
        """
        if sites is None:
            sites = list(get_all_site_configs(self.config.config_path))

        results = {}
        for site_id in sites:
            start_time = datetime.now()
            try:
                results[site_id] = self.process_site(site_id, input_dir=input_dir)
            except (CCMoistureError, OSError) as e:
                self.logger.error(f"✗ {site_id} failed: {e}")
                results[site_id] = ProcessingResult(
                    site_id=site_id,
                    success=False,
                    processing_time=(datetime.now() - start_time).total_seconds(),
                    error_message=str(e),
                )

        self._log_batch_summary(results)
        return results

    def _log_batch_summary(self, results: Dict[str, ProcessingResult]) -> None:
        """Log summary statistics for a multi-site run."""
        n_total = len(results)
        n_success = sum(1 for r in results.values() if r.success)

        self.logger.info(f"{'='*60}")
        self.logger.info("SITE PROCESSING SUMMARY")
        self.logger.info(f"{'='*60}")
        self.logger.info(f"Sites:          {n_total}")
        self.logger.info(f"Successful:     {n_success}")
        self.logger.info(f"Failed:         {n_total - n_success}")
        for r in results.values():
            if not r.success:
                self.logger.warning(f"  {r.site_id}: {r.error_message}")


# =============================================================================
# Convenience Functions
# =============================================================================

def process_site(
    site_id: str,
    input_dir: Union[str, Path],
    **kwargs
) -> ProcessingResult:
    """
    Convenience function to process a single site.

    Parameters
    ----------
    site_id : str
        Site name.
    input_dir : str or Path
        Input directory.
    **kwargs
        Additional arguments passed to Pipeline constructor.
    """
    pipeline = Pipeline(**kwargs)
    return pipeline.process_site(site_id, input_dir=input_dir)


def process_all(
    input_dir: Union[str, Path],
    **kwargs
) -> Dict[str, ProcessingResult]:
    """
    Convenience function to process every configured site.

    Parameters
    ----------
    input_dir : str or Path
        Input directory.
    **kwargs
        Additional arguments passed to Pipeline constructor.
    """
    pipeline = Pipeline(**kwargs)
    return pipeline.process_all(input_dir)


# =============================================================================
# Command-Line Interface
# =============================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line interface for the pipeline."""
    parser = argparse.ArgumentParser(
        description='Clean cover-crop soil moisture logger data',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process one site
  python -m ccmoisture.pipeline --input raw_data/ --site Midville

  # Process all configured sites
  python -m ccmoisture.pipeline --input raw_data/
        """
    )

    parser.add_argument('--input', '-i', required=True,
                        help='Directory containing raw .dat files')
    parser.add_argument('--site', '-s', action='append',
                        help='Site to process (repeatable; default: all)')
    parser.add_argument('--config', '-c', type=Path,
                        help='Site/layout YAML configuration')
    parser.add_argument('--strict-filenames', action='store_true',
                        help='Fail on files without cohort/frequency tokens')

    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output (DEBUG level)')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Quiet output (WARNING level only)')

    args = parser.parse_args(argv)

    known_sites = get_all_site_configs(args.config)
    for site in args.site or []:
        if site not in known_sites:
            parser.error(f"unknown site '{site}' (choose from {', '.join(known_sites)})")

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(levelname)s [%(asctime)s] %(name)s – %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    config = PipelineConfig(
        config_path=args.config,
        strict_filenames=args.strict_filenames,
    )
    pipeline = Pipeline(config=config, logger=logging.getLogger('ccmoisture'))
    results = pipeline.process_all(args.input, sites=args.site)

    for result in results.values():
        print("\n" + result.summary())
        if 'partitions' in result.reports:
            print(result.reports['partitions'].to_string(index=False))

    return 0 if all(r.success for r in results.values()) else 1


if __name__ == '__main__':
    raise SystemExit(main())
