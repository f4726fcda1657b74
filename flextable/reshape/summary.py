"""
Summary tables of continuous columns.

:func:`continuous_summary` computes, for each numeric column and each
group of ``by``, the count, extremes, quartiles, mean, standard
deviation, scaled median absolute deviation and number of missing values,
and lays the result out as grouped data with one separator row per
summarised column.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats  # type: ignore[import-not-found]

from ..config import DEFAULTS, FlextableDefaults
from ..errors import InvalidInputError, UnknownColumnError
from ..grouping import as_grouped_data, grouped_as_flextable
from ..grouping.grouped_data import coerce_table
from ..table import (
    FlexTable,
    colformat_double,
    colformat_int,
    fix_border_issues,
    fp_border,
    hline,
    italic,
    merge_v,
    set_header_labels,
    valign,
    vline,
)

__all__ = ["continuous_summary", "summarise_columns", "SUMMARY_STATS"]

SUMMARY_STATS = ("N", "MIN", "Q1", "MEDIAN", "Q3", "MAX", "MEAN", "SD", "MAD", "NAS")

_HEADER_LABELS = {
    "MIN": "min.",
    "MAX": "max.",
    "Q1": "q1",
    "Q3": "q3",
    "MEDIAN": "median",
    "MEAN": "mean",
    "SD": "sd",
    "MAD": "mad",
    "NAS": "# na",
}


def _describe(values: pd.Series) -> Dict[str, Any]:
    x = pd.to_numeric(values, errors="coerce").astype(float)
    v = x.dropna()
    if v.empty:
        nums = {k: np.nan for k in SUMMARY_STATS[1:-1]}
    else:
        nums = {
            "MIN": float(v.min()),
            "Q1": float(v.quantile(0.25)),
            "MEDIAN": float(v.median()),
            "Q3": float(v.quantile(0.75)),
            "MAX": float(v.max()),
            "MEAN": float(v.mean()),
            "SD": float(v.std(ddof=1)) if len(v) > 1 else np.nan,
            "MAD": float(stats.median_abs_deviation(v.to_numpy(), scale="normal")),
        }
    return {"N": int(len(x)), **nums, "NAS": int(x.isna().sum())}


def summarise_columns(
    dat: Any, columns: Optional[Sequence[str]] = None, by: Sequence[str] = ()
) -> pd.DataFrame:
    """
    Long summary table: one row per (column, by‑group).

    Returns
    -------
    DataFrame
        Columns ``by`` (in order), ``variable`` and the statistics of
        :data:`SUMMARY_STATS`.  Rows are ordered by column, then by group
        in order of first appearance.
    """
    frame = coerce_table(dat)
    by = [str(b) for b in by]
    missing = set(by) - set(frame.columns)
    if missing:
        raise UnknownColumnError(missing, where="table")
    if columns is None:
        columns = [
            c
            for c in frame.columns
            if c not in by
            and pd.api.types.is_numeric_dtype(frame[c])
            and not pd.api.types.is_bool_dtype(frame[c])
        ]
    else:
        columns = [str(c) for c in columns]
        missing = set(columns) - set(frame.columns)
        if missing:
            raise UnknownColumnError(missing, where="table")
        not_numeric = [c for c in columns if not pd.api.types.is_numeric_dtype(frame[c])]
        if not_numeric:
            raise InvalidInputError(f"columns are not numeric: {not_numeric}")
    if not columns:
        raise InvalidInputError("no continuous column to summarise")

    if by:
        groups = [
            (key if isinstance(key, tuple) else (key,), g)
            for key, g in frame.groupby(by, sort=False, dropna=False)
        ]
    else:
        groups = [((), frame)]

    records: List[Dict[str, Any]] = []
    for col in columns:
        for key, g in groups:
            rec: Dict[str, Any] = dict(zip(by, key))
            rec["variable"] = col
            rec.update(_describe(g[col]))
            records.append(rec)
    return pd.DataFrame(records, columns=by + ["variable", *SUMMARY_STATS])


def continuous_summary(
    dat: Any,
    columns: Optional[Sequence[str]] = None,
    by: Sequence[str] = (),
    hide_grouplabel: bool = True,
    digits: int = 3,
    *,
    config: FlextableDefaults = DEFAULTS,
) -> FlexTable:
    """
    Flextable summarising continuous columns.

    Parameters
    ----------
    dat : DataFrame
    columns : sequence of str, optional
        Columns to summarise; defaults to every numeric non‑``by`` column.
    by : sequence of str
        Discrete columns defining groups.
    hide_grouplabel : bool, default True
        Show only the column name on separator rows.
    digits : int, default 3
        Decimals for the real‑valued statistics.
    config : FlextableDefaults, optional

    Returns
    -------
    FlexTable
        Separator rows are italic with a thin bottom rule; ``by`` columns
        are merged vertically, top aligned and followed by a vertical rule.
    """
    by = [str(b) for b in by]
    agg = summarise_columns(dat, columns=columns, by=by)
    grouped = as_grouped_data(
        agg, groups=["variable"], columns=[c for c in agg.columns if c != "variable"]
    )
    is_label = grouped.is_title()
    ft = grouped_as_flextable(grouped, hide_grouplabel=hide_grouplabel, config=config)

    ft = colformat_int(ft, j=["N", "NAS"])
    ft = colformat_double(
        ft, j=[s for s in SUMMARY_STATS if s not in ("N", "NAS")], digits=digits
    )
    ft = set_header_labels(ft, _HEADER_LABELS)
    thin = fp_border(width=0.5, config=config)
    ft = hline(ft, i=is_label, border=thin)
    ft = italic(ft, i=is_label, italic=True)
    if by:
        ft = merge_v(ft, j=by)
        ft = valign(ft, j=by, valign="top")
        ft = vline(ft, j=by[-1], border=thin, part="body")
        ft = vline(ft, j=by[-1], border=thin, part="header")
    return fix_border_issues(ft)
