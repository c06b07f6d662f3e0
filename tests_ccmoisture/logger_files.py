"""Synthetic soil moisture logger files for the tests."""
from pathlib import Path

PREAMBLE = '"TOA5","CC_Soil","CR1000X","12345","CR1000X.Std.06","CPU:soil.CR1X","4321","Table"'

HOUSEKEEPING = [
    ("TIMESTAMP", "TS", ""),
    ("RECORD", "RN", ""),
    ("BattV_Min", "Volts", "Min"),
    ("PTemp_C_Avg", "Deg C", "Avg"),
    ("BattV_Avg", "Volts", "Avg"),
]

MEASUREMENTS = [
    ("VWC_CTRL_5cm_Avg", "m^3/m^3", "Avg"),
    ("EC_CTRL_5cm_Avg", "dS/m", "Avg"),
    ("T_CTRL_5cm_Avg", "Deg C", "Avg"),
    ("VWC_CTRL_5cm_Max", "m^3/m^3", "Max"),
    ("EC_CTRL_5cm_Max", "dS/m", "Max"),
    ("T_CTRL_5cm_Max", "Deg C", "Max"),
]

COLUMNS = HOUSEKEEPING + MEASUREMENTS


def make_row(ts, record, vwc=0.25, ec=0.1, t=21.5):
    """One data row matching COLUMNS; the Max columns repeat the Avg values."""
    return [ts, record, 12.4, 25.0, 12.6, vwc, ec, t, vwc, ec, t]


def _quote(value):
    return f'"{value}"' if isinstance(value, str) else str(value)


def write_logger_file(path, rows, columns=COLUMNS):
    """Write a logger file: preamble, header, units, sentinel, data rows."""
    path = Path(path)
    lines = [
        PREAMBLE,
        ",".join(_quote(name) for name, _, _ in columns),
        ",".join(_quote(unit) for _, unit, _ in columns),
        ",".join(_quote(proc) for _, _, proc in columns),
    ]
    lines += [",".join(_quote(v) for v in row) for row in rows]
    path.write_text("\n".join(lines) + "\n")
    return path
