import tempfile
import unittest
from pathlib import Path

from ccmoisture.exceptions import FilenameMetadataError, SchemaMismatchError
from ccmoisture.reader import LoggerFileReader

from logger_files import COLUMNS, make_row, write_logger_file


class TestLoggerFileReader(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.reader = LoggerFileReader()

    def tearDown(self):
        self._tmp.cleanup()

    def test_to_dataframe_skips_preamble_and_tags_source(self):
        path = write_logger_file(
            self.dir / "Midville_Early_Daily.dat",
            [make_row("2024-10-01 00:00:00", 1)],
        )
        df = self.reader.to_dataframe(path)
        self.assertEqual(list(df.columns[:2]), ["TIMESTAMP", "RECORD"])
        # units row, sentinel row, one data row
        self.assertEqual(len(df), 3)
        self.assertEqual(df.iloc[0]["TIMESTAMP"], "TS")
        self.assertTrue((df["source_file"] == "Midville_Early_Daily.dat").all())

    def test_raw_file_compile_concatenates(self):
        a = write_logger_file(
            self.dir / "Midville_Early_Daily.dat",
            [make_row("2024-10-01 00:00:00", 1), make_row("2024-10-02 00:00:00", 2)],
        )
        b = write_logger_file(
            self.dir / "Midville_Late_Hourly.dat",
            [make_row("2024-10-01 01:00:00", 1)],
        )
        df = self.reader.raw_file_compile([a, b])
        self.assertEqual(len(df), 4 + 3)
        self.assertEqual(
            sorted(df["source_file"].unique()),
            ["Midville_Early_Daily.dat", "Midville_Late_Hourly.dat"],
        )
        self.assertEqual(df.columns[-1], "source_file")

    def test_column_mismatch_raises(self):
        a = write_logger_file(
            self.dir / "Midville_Early_Daily.dat", [make_row("2024-10-01 00:00:00", 1)]
        )
        b = write_logger_file(
            self.dir / "Midville_Late_Daily.dat",
            [make_row("2024-10-01 00:00:00", 1)[:-1]],
            columns=COLUMNS[:-1],
        )
        with self.assertRaises(SchemaMismatchError) as ctx:
            self.reader.raw_file_compile([a, b])
        self.assertEqual(ctx.exception.missing, ["T_CTRL_5cm_Max"])

    def test_units_mismatch_raises(self):
        a = write_logger_file(
            self.dir / "Midville_Early_Daily.dat", [make_row("2024-10-01 00:00:00", 1)]
        )
        columns = list(COLUMNS)
        columns[6] = ("EC_CTRL_5cm_Avg", "mS/cm", "Avg")
        b = write_logger_file(
            self.dir / "Midville_Late_Daily.dat",
            [make_row("2024-10-01 00:00:00", 1)],
            columns=columns,
        )
        with self.assertRaises(SchemaMismatchError):
            self.reader.raw_file_compile([a, b])

    def test_expected_column_count(self):
        a = write_logger_file(
            self.dir / "Midville_Early_Daily.dat", [make_row("2024-10-01 00:00:00", 1)]
        )
        self.assertEqual(len(self.reader.raw_file_compile([a], expected_columns=11)), 3)
        with self.assertRaises(SchemaMismatchError):
            self.reader.raw_file_compile([a], expected_columns=12)

    def test_missing_file_raises_ioerror(self):
        with self.assertRaises(IOError):
            self.reader.raw_file_compile([self.dir / "Midville_Early_Daily.dat"])

    def test_no_files_raises(self):
        with self.assertRaises(FileNotFoundError):
            self.reader.raw_file_compile([])

    def test_strict_filenames(self):
        path = write_logger_file(
            self.dir / "Midville_Daily.dat", [make_row("2024-10-01 00:00:00", 1)]
        )
        self.assertEqual(len(self.reader.raw_file_compile([path])), 3)
        with self.assertRaises(FilenameMetadataError):
            self.reader.raw_file_compile([path], strict_filenames=True)

    def test_discover_site_files(self):
        row = [make_row("2024-10-01 00:00:00", 1)]
        write_logger_file(self.dir / "midville_early_daily.dat", row)
        write_logger_file(self.dir / "Watkinsville_Early_Daily.dat", row)
        (self.dir / "Midville_notes.txt").write_text("not a logger file")
        files = self.reader.discover_site_files(self.dir, "Midville")
        self.assertEqual([f.name for f in files], ["midville_early_daily.dat"])


if __name__ == '__main__':
    unittest.main()
