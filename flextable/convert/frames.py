"""
Data frame printers.

A data frame with several rows is shown as a regular table of its first
``max_row`` rows, optionally with a header row giving each column's type
and a footer giving the total row count.  A single‑row data frame is
shown vertically: one line per column with its value.
"""

from __future__ import annotations

import re
from typing import List

import pandas as pd

from ..config import DEFAULTS, FlextableDefaults
from ..formatting import format_value, look_like_int
from ..table import (
    FlexTable,
    add_footer_lines,
    add_header_row,
    align,
    append_chunks,
    as_chunk,
    autofit,
    colformat_double,
    colformat_int,
    color,
    delete_part,
    flextable,
    get_theme,
    set_header_labels,
    set_table_properties,
    valign,
)

__all__ = ["dataframe_as_flextable"]


def _coltypes(dat: pd.DataFrame) -> List[str]:
    return [str(dat[c].dtype) for c in dat.columns]


def _as_ints(dat: pd.DataFrame) -> pd.DataFrame:
    """Integer‑valued float columns become nullable integers."""
    converted = {c: dat[c].astype("Int64") for c in dat.columns if look_like_int(dat[c])}
    return dat.assign(**converted) if converted else dat


def _shorten(dat: pd.DataFrame, size: int, suffix: str) -> pd.DataFrame:
    def cut(v):
        if isinstance(v, str) and len(v) > size:
            return v[:size] + suffix
        return v

    text_cols = {
        c: dat[c].map(cut)
        for c in dat.columns
        if pd.api.types.is_object_dtype(dat[c]) or pd.api.types.is_string_dtype(dat[c])
    }
    return dat.assign(**text_cols) if text_cols else dat


def _finish(ft: FlexTable, do_autofit: bool, config: FlextableDefaults) -> FlexTable:
    ft = set_table_properties(ft, layout=config.table_layout)
    if config.table_layout == "fixed" and do_autofit:
        ft = autofit(ft)
    return get_theme(config.theme)(ft)


def _multirow(
    dat: pd.DataFrame,
    max_row: int,
    split_colnames: bool,
    short_strings: bool,
    short_size: int,
    short_suffix: str,
    do_autofit: bool,
    show_coltype: bool,
    color_coltype: str,
    config: FlextableDefaults,
) -> FlexTable:
    nro = len(dat)
    coltypes = _coltypes(dat)
    x = _as_ints(dat.head(max_row).reset_index(drop=True))
    if short_strings:
        x = _shorten(x, short_size, short_suffix)
    x.columns = [str(c) for c in x.columns]

    ft = flextable(x, config=config)
    if split_colnames:
        labels = {
            key: "\n".join(p for p in re.split(r"[^0-9A-Za-z]+", key) if p) or key
            for key in ft.col_keys
        }
        ft = set_header_labels(ft, labels)
    if show_coltype:
        ft = add_header_row(ft, values=coltypes, top=False)
    ft = colformat_double(ft)
    ft = colformat_int(ft)
    if nro > max_row:
        ft = add_footer_lines(ft, values=f"n: {nro:.0f}")
    ft = _finish(ft, do_autofit, config)
    if show_coltype:
        ft = color(ft, i=ft.header.nrow - 1, part="header", color=color_coltype)
    return align(ft, align="left", part="footer")


def _singlerow(
    dat: pd.DataFrame,
    short_strings: bool,
    short_size: int,
    short_suffix: str,
    do_autofit: bool,
    show_coltype: bool,
    color_coltype: str,
    config: FlextableDefaults,
) -> FlexTable:
    coltypes = _coltypes(dat)
    dat = _as_ints(dat)
    x = pd.DataFrame(
        {
            "Col.": [str(c) for c in dat.columns],
            "Type": coltypes,
            "Val.": [format_value(dat[c].iloc[0], config) for c in dat.columns],
        }
    )
    if short_strings:
        x = _shorten(x, short_size, short_suffix)

    ft = flextable(x, col_keys=["Col.", "Val."], config=config)
    ft = delete_part(ft, part="header")
    ft = _finish(ft, do_autofit, config)
    ft = align(ft, align="center", part="all")
    ft = align(ft, j=0, align="right", part="all")
    ft = valign(ft, valign="top", part="body")
    if show_coltype:
        small = config.font_size * 2 / 3
        ft = append_chunks(
            ft,
            "\n",
            lambda row: as_chunk(row["Type"], font_size=small, color=color_coltype),
            j="Col.",
        )
    return ft


def dataframe_as_flextable(
    x: pd.DataFrame,
    max_row: int = 10,
    split_colnames: bool = False,
    short_strings: bool = False,
    short_size: int = 35,
    short_suffix: str = "...",
    do_autofit: bool = True,
    show_coltype: bool = True,
    color_coltype: str = "#999999",
    *,
    config: FlextableDefaults = DEFAULTS,
) -> FlexTable:
    """
    Summarise a data frame as a flextable.

    Parameters
    ----------
    x : DataFrame
    max_row : int, default 10
        Number of rows shown; a footer gives the total when rows are cut.
    split_colnames : bool, default False
        Break column names on non alphanumeric characters.
    short_strings : bool, default False
        Truncate text values longer than ``short_size`` and append
        ``short_suffix``.
    do_autofit : bool, default True
        Size columns to their content when the layout is ``"fixed"``.
    show_coltype : bool, default True
        Show column dtypes (in ``color_coltype``).
    config : FlextableDefaults, optional
        Supplies the theme and table layout.
    """
    if len(x) == 1:
        return _singlerow(
            x, short_strings, short_size, short_suffix, do_autofit,
            show_coltype, color_coltype, config,
        )
    return _multirow(
        x, max_row, split_colnames, short_strings, short_size, short_suffix,
        do_autofit, show_coltype, color_coltype, config,
    )
