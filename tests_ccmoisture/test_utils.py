import tempfile
import unittest
from pathlib import Path

import pandas as pd

from ccmoisture.format import transformers
from ccmoisture.partition import PARTITION_FREQS, PARTITION_STATS
from ccmoisture.utils import (
    get_all_site_configs,
    load_yaml,
    read_layout_config,
    read_site_config,
)


class TestSiteConfig(unittest.TestCase):
    def test_packaged_sites(self):
        self.assertEqual(
            read_site_config("Midville").deployment_end,
            pd.Timestamp("2024-10-11 23:59:59"),
        )
        wat = read_site_config("Watkinsville")
        self.assertEqual(wat.deployment_end, pd.Timestamp("2024-11-11 23:59:59"))
        self.assertIsNone(wat.deployment_start)
        self.assertEqual(sorted(get_all_site_configs()), ["Midville", "Watkinsville"])

    def test_unknown_site(self):
        with self.assertRaises(KeyError):
            read_site_config("Tifton")

    def test_layout(self):
        layout = read_layout_config()
        self.assertEqual(layout.grammar_exceptions[("t", "(deg_c)")], "t_(deg_c)")
        self.assertIn("BattV_Min_(Volts)", layout.instrumentation_columns)
        self.assertEqual(layout.filename_tokens["data_freq"]["hourly"], "Hourly")
        self.assertEqual(layout.partition_stats, ("avg", "min", "max"))

    def test_packaged_layout_matches_stage_defaults(self):
        layout = read_layout_config()
        self.assertEqual(layout.source_file_column, transformers.SOURCE_FILE_COLUMN)
        self.assertEqual(
            layout.instrumentation_columns, transformers.INSTRUMENTATION_COLUMNS
        )
        self.assertEqual(layout.timestamp_column, transformers.RAW_TIMESTAMP_COLUMN)
        self.assertEqual(layout.timestamp_format, transformers.RAW_TIMESTAMP_FORMAT)
        self.assertEqual(layout.grammar_exceptions, transformers.GRAMMAR_EXCEPTIONS)
        self.assertEqual(layout.filename_tokens, transformers.FILENAME_TOKENS)
        self.assertEqual(
            layout.pivot_artifact_column, transformers.PIVOT_ARTIFACT_COLUMN
        )
        self.assertEqual(layout.validity_limits, transformers.VALIDITY_LIMITS)
        self.assertEqual(layout.partition_stats, PARTITION_STATS)
        self.assertEqual(layout.partition_freqs, PARTITION_FREQS)

    def test_custom_config_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "sites.yml"
            path.write_text(
                "sites:\n"
                "  Midville:\n"
                "    deployment_end: '2024-09-30 23:59:59'\n"
                "    deployment_start: '2024-05-01'\n"
                "    expected_columns: 42\n"
            )
            cfg = read_site_config("Midville", path)
            self.assertEqual(cfg.deployment_start, pd.Timestamp("2024-05-01"))
            self.assertEqual(cfg.expected_columns, 42)

    def test_missing_config_file(self):
        with self.assertRaises(FileNotFoundError):
            load_yaml("does/not/exist.yml")


if __name__ == '__main__':
    unittest.main()
