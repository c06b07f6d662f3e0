"""
This module provides the LoggerFileReader class for reading Campbell-style
soil moisture logger ``.dat`` files into pandas DataFrames and compiling
all files of one site into a single raw table.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd

from ccmoisture.exceptions import FilenameMetadataError, SchemaMismatchError
from ccmoisture.format.transformers.decompose import filename_metadata
from ccmoisture.utils import LayoutConfig, default_layout, logger_check


class LoggerFileReader:
    """
    Read raw logger tables and tag each row with its source file.

    A raw file holds one preamble line, a header row, a units row, a
    sentinel row and then data rows. The units and sentinel rows are kept
    as the first two data rows; the header normalizer consumes them.

    Parameters
    ----------
    layout : LayoutConfig, optional
        Raw layout constants. Defaults to the packaged configuration.
    logger : logging.Logger, optional
        Logger to use.
    """

    NA_VALUES = ["-9999", "-7999", "NAN", "NaN", "nan"]

    def __init__(
        self,
        layout: Optional[LayoutConfig] = None,
        logger: logging.Logger = None,  # type: ignore
    ):
        self.layout = layout or default_layout()
        self.logger = logger_check(logger)

    @property
    def source_column(self) -> str:
        return self.layout.source_file_column

    def to_dataframe(self, file: Union[str, Path]) -> pd.DataFrame:
        """Return one raw file as a DataFrame of strings with a source column."""
        file = Path(file)
        if not file.is_file():
            raise FileNotFoundError(f"Raw file not found: {file}")

        with file.open("r") as fp:
            preamble = [fp.readline().strip() for _ in range(self.layout.preamble_lines)]
        self.logger.debug(f"Preamble of {file.name}: {preamble}")

        df = pd.read_csv(
            file,
            skiprows=self.layout.preamble_lines,
            dtype=str,
            na_values=self.NA_VALUES,
        )
        df.columns = df.columns.str.strip()
        df[self.source_column] = file.name
        self.logger.debug(f"Read {len(df)} rows from {file.name}")
        return df

    def discover_site_files(
        self, input_dir: Union[str, Path], site_id: str
    ) -> List[Path]:
        """
        Find the raw files of one site below ``input_dir``.

        Files must match the layout glob (``*.dat``) and contain the site
        name case-insensitively.
        """
        input_dir = Path(input_dir)
        if not input_dir.is_dir():
            raise FileNotFoundError(f"Input directory not found: {input_dir}")
        files = sorted(
            f
            for f in input_dir.rglob(self.layout.file_glob)
            if f.is_file() and site_id.lower() in f.name.lower()
        )
        self.logger.info(f"Found {len(files)} raw files for {site_id} in {input_dir}")
        return files

    def raw_file_compile(
        self,
        files: Iterable[Union[str, Path]],
        expected_columns: Optional[int] = None,
        strict_filenames: bool = False,
    ) -> pd.DataFrame:
        """
        Compile raw files of one site into a single DataFrame.

        Every file must share the first file's column set and units row.

        Parameters
        ----------
        files : iterable of str or Path
            Raw files of one site.
        expected_columns : int, optional
            Number of raw columns each file must have (source column excluded).
        strict_filenames : bool, optional
            Reject files whose name lacks a cohort or frequency token.

        Returns
        -------
        pd.DataFrame
            Row-wise union of all files, columns in the first file's order.

        Raises
        ------
        FileNotFoundError
            If no files are given or a file cannot be found.
        SchemaMismatchError
            If the files disagree on columns or units.
        FilenameMetadataError
            If ``strict_filenames`` is set and a file name is missing a token.
        """
        files = [Path(f) for f in files]
        if not files:
            raise FileNotFoundError("No raw files to compile")

        compiled_data = []
        ref_cols: Optional[List[str]] = None
        ref_units: Optional[pd.Series] = None

        for file in files:
            self.logger.info(f"Processing file: {file}")
            if strict_filenames:
                self._check_filename(file)

            df = self.to_dataframe(file)
            cols = [c for c in df.columns if c != self.source_column]

            if expected_columns is not None and len(cols) != expected_columns:
                raise SchemaMismatchError(
                    f"{file.name} has {len(cols)} columns, expected {expected_columns}",
                    file=file,
                )
            if df.empty:
                raise SchemaMismatchError(f"{file.name} has no units row", file=file)

            units = df.iloc[0][cols].fillna("").str.strip()
            if ref_cols is None:
                ref_cols, ref_units = cols, units
            else:
                missing = set(ref_cols) - set(cols)
                extra = set(cols) - set(ref_cols)
                if missing or extra:
                    self.logger.error(
                        f"Column layout of {file.name} differs from {files[0].name}"
                    )
                    raise SchemaMismatchError(
                        f"{file.name} columns differ from {files[0].name}: "
                        f"missing {sorted(missing)}, extra {sorted(extra)}",
                        file=file,
                        missing=missing,
                        extra=extra,
                    )
                differing = [c for c in ref_cols if units[c] != ref_units[c]]
                if differing:
                    raise SchemaMismatchError(
                        f"{file.name} units differ from {files[0].name} for {differing}",
                        file=file,
                    )
            compiled_data.append(df[ref_cols + [self.source_column]])

        compiled_df = pd.concat(compiled_data, ignore_index=True)
        self.logger.info(f"Compiled {len(compiled_df)} rows from {len(files)} files")
        return compiled_df

    def _check_filename(self, file: Path) -> None:
        meta = filename_metadata(file.name, self.layout.filename_tokens)
        missing = [k for k, v in meta.items() if v is None]
        if missing:
            raise FilenameMetadataError(
                f"{file.name} carries no token for {', '.join(missing)}"
            )
