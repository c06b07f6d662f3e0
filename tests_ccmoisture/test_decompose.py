import logging
import unittest
from unittest import mock

import numpy as np
import pandas as pd

from ccmoisture.exceptions import GrammarViolationError
from ccmoisture.format.transformers.decompose import (
    LONG_COLUMNS,
    decompose_columns,
    filename_metadata,
    parse_column_name,
)
from ccmoisture.utils import default_layout

logger = logging.getLogger("ccmoisture.tests")


class TestParseColumnName(unittest.TestCase):
    def test_five_fields(self):
        f = parse_column_name("vwc_ctrl_5cm_avg_(m^3/m^3)")
        self.assertEqual(
            (f.measure, f.treatment, f.depth, f.stat, f.units),
            ("vwc", "ctrl", "5cm", "avg", "(m^3/m^3)"),
        )
        self.assertEqual(f.measure_units, "vwc_(m^3/m^3)")

    def test_degree_celsius_exception(self):
        f = parse_column_name("t_ctrl_20cm_min_(deg_c)")
        self.assertEqual(f.units, "(deg")
        self.assertEqual(f.measure_units, "t_(deg_c)")
        self.assertEqual(f.depth, "20cm")

    def test_exception_is_case_insensitive(self):
        self.assertEqual(
            parse_column_name("t_ctrl_5cm_avg_(Deg_C)").measure_units, "t_(deg_c)"
        )

    def test_degree_celsius_with_trailing_fields(self):
        with self.assertRaises(GrammarViolationError) as ctx:
            parse_column_name("t_ctrl_5cm_avg_(deg_c)_extra_junk")
        self.assertEqual(ctx.exception.n_fields, 7)

    def test_truncated_degree_celsius(self):
        with self.assertRaises(GrammarViolationError) as ctx:
            parse_column_name("t_ctrl_5cm_avg_(deg")
        self.assertEqual(ctx.exception.column, "t_ctrl_5cm_avg_(deg")

    def test_defaults_do_not_read_config(self):
        default_layout.cache_clear()
        try:
            with mock.patch(
                "ccmoisture.utils.load_yaml", side_effect=FileNotFoundError
            ):
                f = parse_column_name("t_ctrl_5cm_avg_(deg_c)")
                meta = filename_metadata("CR1000X_Midville_Early_Hourly.dat")
        finally:
            default_layout.cache_clear()
        self.assertEqual(f.measure_units, "t_(deg_c)")
        self.assertEqual(meta, {"cc_plant_time": "early", "data_freq": "hourly"})

    def test_too_few_fields(self):
        with self.assertRaises(GrammarViolationError) as ctx:
            parse_column_name("foo_bar_baz")
        self.assertEqual(ctx.exception.column, "foo_bar_baz")
        self.assertEqual(ctx.exception.n_fields, 3)

    def test_extra_fields_without_exception(self):
        with self.assertRaises(GrammarViolationError):
            parse_column_name("ec_ctrl_5cm_avg_(ds_m)")

    def test_empty_facet(self):
        with self.assertRaises(GrammarViolationError):
            parse_column_name("vwc__5cm_avg_(m^3/m^3)")

    def test_empty_units_unresolved(self):
        self.assertIsNone(parse_column_name("vwc_ctrl_5cm_avg_").measure_units)

    def test_custom_exception_table(self):
        f = parse_column_name(
            "par_ctrl_0cm_avg_(umol_m-2_s-1)",
            exceptions={("par", "(umol_m-2_s-1)"): "par_(umol_m-2_s-1)"},
        )
        self.assertEqual(f.measure_units, "par_(umol_m-2_s-1)")


class TestFilenameMetadata(unittest.TestCase):
    def test_tokens(self):
        self.assertEqual(
            filename_metadata("CR1000X_Midville_Early_Daily.dat"),
            {"cc_plant_time": "early", "data_freq": "daily"},
        )
        self.assertEqual(
            filename_metadata("watkinsville_LATE_hourly.dat"),
            {"cc_plant_time": "late", "data_freq": "hourly"},
        )

    def test_no_token(self):
        self.assertEqual(
            filename_metadata("Midville_Table1.dat"),
            {"cc_plant_time": None, "data_freq": None},
        )


class TestDecomposeColumns(unittest.TestCase):
    def setUp(self):
        self.df = pd.DataFrame({
            "timestamp": pd.to_datetime(["2024-10-01", "2024-10-02"]),
            "vwc_ctrl_5cm_avg_(m^3/m^3)": ["0.25", "NAN"],
            "t_cc_20cm_avg_(deg_c)": ["21.5", "22.0"],
            "source_file": ["Midville_Early_Daily.dat", "Midville_Table.dat"],
        })

    def test_one_observation_per_cell(self):
        long = decompose_columns(self.df, logger)
        self.assertEqual(list(long.columns), LONG_COLUMNS)
        self.assertEqual(len(long), 4)
        self.assertEqual(
            sorted(long["measure_units"].unique()), ["t_(deg_c)", "vwc_(m^3/m^3)"]
        )
        self.assertNotIn("source_file", long.columns)

    def test_facets_and_metadata(self):
        long = decompose_columns(self.df, logger)
        row = long[
            (long["timestamp"] == pd.Timestamp("2024-10-01"))
            & (long["measure_units"] == "t_(deg_c)")
        ].iloc[0]
        self.assertEqual(row["treatment"], "cc")
        self.assertEqual(row["depth"], "20cm")
        self.assertEqual(row["stat"], "avg")
        self.assertEqual(row["cc_plant_time"], "early")
        self.assertEqual(row["data_freq"], "daily")
        self.assertEqual(row["value"], 21.5)

    def test_unmatched_filename_gives_null_metadata(self):
        long = decompose_columns(self.df, logger)
        later = long[long["timestamp"] == pd.Timestamp("2024-10-02")]
        self.assertTrue(later["cc_plant_time"].isna().all())
        self.assertTrue(later["data_freq"].isna().all())

    def test_non_numeric_values_become_nan(self):
        long = decompose_columns(self.df, logger)
        vwc = long[long["measure_units"] == "vwc_(m^3/m^3)"]["value"]
        self.assertTrue(np.isnan(vwc.iloc[1]))

    def test_unresolved_units_dropped(self):
        df = self.df.assign(**{"ec_ctrl_5cm_avg_": ["0.1", "0.2"]})
        long = decompose_columns(df, logger)
        self.assertEqual(len(long), 4)
        self.assertFalse(long["measure_units"].isna().any())

    def test_grammar_violation_raises(self):
        df = self.df.assign(foo_bar_baz=["1", "2"])
        with self.assertRaises(GrammarViolationError):
            decompose_columns(df, logger)


if __name__ == '__main__':
    unittest.main()
