"""
Scalar formatters shared by the table grammar and the model converters.

All functions are pure and take the formatting defaults explicitly through
a :class:`flextable.config.FlextableDefaults`.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional

import numpy as np
import pandas as pd

from .config import DEFAULTS, FlextableDefaults

__all__ = [
    "format_double",
    "format_int",
    "format_value",
    "format_fun",
    "pvalue_format",
    "look_like_int",
    "SIGNIF_LEGEND",
]

SIGNIF_LEGEND = "Signif. codes: 0 <= '***' < 0.001 < '**' < 0.01 < '*' < 0.05"


def _is_missing(x: Any) -> bool:
    if x is None or x is pd.NA or x is pd.NaT:
        return True
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        return False


def _missing_text(x: Any, config: FlextableDefaults) -> str:
    if isinstance(x, float) and math.isnan(x):
        return config.nan_str
    return config.na_str


def _group_thousands(int_part: str, big_mark: str) -> str:
    if not big_mark:
        return int_part
    sign = ""
    if int_part.startswith("-"):
        sign, int_part = "-", int_part[1:]
    groups = []
    while len(int_part) > 3:
        groups.insert(0, int_part[-3:])
        int_part = int_part[:-3]
    groups.insert(0, int_part)
    return sign + big_mark.join(groups)


def format_double(
    x: Any,
    digits: Optional[int] = None,
    config: FlextableDefaults = DEFAULTS,
    *,
    prefix: str = "",
    suffix: str = "",
) -> str:
    """Format a number with a fixed number of decimals."""
    if _is_missing(x):
        return _missing_text(x, config)
    digits = config.digits if digits is None else digits
    txt = f"{float(x):.{digits}f}"
    int_part, _, dec_part = txt.partition(".")
    int_part = _group_thousands(int_part, config.big_mark)
    out = int_part if not dec_part else f"{int_part}{config.decimal_mark}{dec_part}"
    return f"{prefix}{out}{suffix}"


def format_int(
    x: Any, config: FlextableDefaults = DEFAULTS, *, prefix: str = "", suffix: str = ""
) -> str:
    if _is_missing(x):
        return _missing_text(x, config)
    # exact for integers beyond float precision
    n = int(x) if isinstance(x, (int, np.integer)) else int(round(float(x)))
    return f"{prefix}{_group_thousands(str(n), config.big_mark)}{suffix}"


def format_value(x: Any, config: FlextableDefaults = DEFAULTS) -> str:
    """Default text for a cell value, chosen from the value's type."""
    if _is_missing(x):
        return _missing_text(x, config)
    if isinstance(x, (bool, np.bool_)):
        return "TRUE" if x else "FALSE"
    if isinstance(x, (int, np.integer)):
        return format_int(x, config)
    if isinstance(x, (float, np.floating)):
        return format_double(x, config.digits, config)
    if isinstance(x, pd.Timestamp):
        if x == x.normalize():
            return x.strftime("%Y-%m-%d")
        return x.strftime("%Y-%m-%d %H:%M:%S")
    return str(x)


def format_fun(
    x: Any, digits: int = 4, config: FlextableDefaults = DEFAULTS, suffix: str = ""
) -> str:
    """Format a statistic for a footer line.

    Integral values are shown without decimals; others with ``digits``
    significant figures.
    """
    if _is_missing(x):
        return _missing_text(x, config)
    val = float(x)
    if val.is_integer():
        return format_int(val, config, suffix=suffix)
    return f"{val:.{digits}g}{suffix}"


def pvalue_format(
    p: Iterable[Any] | Any, config: FlextableDefaults = DEFAULTS
) -> List[str] | str:
    """Map p‑values to significance codes.

    Returns a list when given an iterable, a single string otherwise.
    Missing p‑values map to an empty string.
    """
    b1, b2, b3, b4 = config.signif_breaks

    def one(v: Any) -> str:
        if _is_missing(v):
            return ""
        v = float(v)
        if v <= b1:
            return "***"
        if v <= b2:
            return " **"
        if v <= b3:
            return "  *"
        if v <= b4:
            return "  ."
        return "   "

    if isinstance(p, (str, bytes)) or not isinstance(p, Iterable):
        return one(p)
    return [one(v) for v in p]


def look_like_int(s: pd.Series) -> bool:
    """True for integer columns and float columns holding only whole numbers."""
    if pd.api.types.is_bool_dtype(s):
        return False
    if pd.api.types.is_integer_dtype(s):
        return True
    if not pd.api.types.is_float_dtype(s):
        return False
    vals = s.dropna().to_numpy(dtype=float)
    if vals.size == 0 or not np.all(np.isfinite(vals)):
        return False
    return bool(np.all(vals == np.round(vals)))
