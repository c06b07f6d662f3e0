import logging
import unittest

import numpy as np
import pandas as pd

from ccmoisture.format.transformers.validation import apply_validity_limits

logger = logging.getLogger("ccmoisture.tests")


class TestValidityLimits(unittest.TestCase):
    def setUp(self):
        self.df = pd.DataFrame({
            "timestamp": pd.date_range("2024-10-01", periods=6, freq="D"),
            "vwc_(m^3/m^3)": [0.25, 0.0, -0.01, 0.30, 0.22, np.nan],
            "ec_(ds/m)": [0.1, 0.1, 0.1, 0.0, -0.2, 0.1],
        })

    def test_invalid_rows_dropped(self):
        out, _ = apply_validity_limits(self.df, logger)
        self.assertEqual(list(out["vwc_(m^3/m^3)"]), [0.25, 0.30])
        self.assertTrue((out["vwc_(m^3/m^3)"] > 0).all())
        self.assertTrue((out["ec_(ds/m)"] >= 0).all())
        self.assertEqual(list(out.index), [0, 1])

    def test_report(self):
        _, report = apply_validity_limits(self.df, logger)
        flagged = report.set_index("column")["n_flagged"]
        self.assertEqual(flagged["vwc_(m^3/m^3)"], 2)
        self.assertEqual(flagged["ec_(ds/m)"], 1)

    def test_absent_quantity_skipped(self):
        df = self.df.drop(columns=["ec_(ds/m)"])
        out, report = apply_validity_limits(df, logger)
        self.assertEqual(list(report["column"]), ["vwc_(m^3/m^3)"])
        self.assertEqual(len(out), 3)

    def test_custom_limits_with_max(self):
        df = pd.DataFrame({"t_(deg_c)": [-5.0, 20.0, 80.0]})
        out, report = apply_validity_limits(
            df, logger, limits={"t_(deg_c)": {"Min": -40.0, "Max": 60.0}}
        )
        self.assertEqual(list(out["t_(deg_c)"]), [-5.0, 20.0])
        self.assertEqual(report.iloc[0]["n_above"], 1)

    def test_input_unchanged(self):
        before = self.df.copy()
        apply_validity_limits(self.df, logger)
        pd.testing.assert_frame_equal(self.df, before)


if __name__ == '__main__':
    unittest.main()
