"""
Cross‑tabulation of a long table into a wide one.

:func:`tabulator` spreads the values of one column across the distinct
combinations of ``columns``, one output row per distinct combination of
``rows``.  Order of first appearance is kept on both axes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from ..config import DEFAULTS, FlextableDefaults
from ..errors import InvalidInputError, UnknownColumnError
from ..grouping.grouped_data import coerce_table
from ..table import FlexTable, add_header_row, align, flextable, merge_v, set_header_labels

__all__ = ["Tabulation", "tabulator", "tabulator_colnames", "tabulation_as_flextable"]

SEP = "@"


@dataclass(frozen=True)
class Tabulation:
    """
    Wide table produced by :func:`tabulator`.

    Attributes
    ----------
    data : DataFrame
        Row key columns, hidden columns, then one column per column level.
    rows, columns : tuple of str
        Row and column key variables.
    value : str
        Tabulated column.
    levels : DataFrame
        Distinct combinations of ``columns``, one per value column.
    value_keys : tuple of str
        Names of the value columns in ``data``, aligned with ``levels``.
    hidden : tuple of str
        Columns joined from ``hidden_data``; available to row selectors
        but not displayed.
    """

    data: pd.DataFrame
    rows: Tuple[str, ...]
    columns: Tuple[str, ...]
    value: str
    levels: pd.DataFrame
    value_keys: Tuple[str, ...]
    hidden: Tuple[str, ...] = ()


def _level_name(value: str, combo: Sequence[Any]) -> str:
    return value + SEP + "|".join(str(v) for v in combo)


def tabulator(
    x: Any,
    rows: Sequence[str],
    columns: Sequence[str],
    value: str,
    hidden_data: Optional[pd.DataFrame] = None,
) -> Tabulation:
    """
    Spread ``value`` across the combinations of ``columns``.

    Parameters
    ----------
    x : DataFrame
        Long table with one row per (rows, columns) combination.
    rows, columns : sequence of str
        Row and column key variables; both must be non‑empty.
    value : str
        Column holding the cell values.
    hidden_data : DataFrame, optional
        Extra per‑row information joined on the row keys it shares with
        ``rows``.

    Raises
    ------
    InvalidInputError
        Empty key lists or more than one value per cell.
    UnknownColumnError
        Unknown key or value column.
    """
    frame = coerce_table(x)
    rows, columns = tuple(rows), tuple(columns)
    if not rows or not columns:
        raise InvalidInputError("tabulator needs at least one row and one column variable")
    missing = set(rows) | set(columns) | {value}
    missing -= set(frame.columns)
    if missing:
        raise UnknownColumnError(missing, where="table")
    if frame.duplicated(subset=list(rows + columns)).any():
        raise InvalidInputError("tabulator needs exactly one value per (rows, columns) cell")

    row_keys = frame[list(rows)].drop_duplicates().reset_index(drop=True)
    levels = frame[list(columns)].drop_duplicates().reset_index(drop=True)
    lookup = dict(
        zip(frame[list(rows + columns)].itertuples(index=False, name=None), frame[value])
    )

    wide = row_keys.copy()
    value_keys: List[str] = []
    for combo in levels.itertuples(index=False, name=None):
        name = _level_name(value, combo)
        cells = [
            lookup.get(tuple(rk) + tuple(combo))
            for rk in row_keys.itertuples(index=False, name=None)
        ]
        wide[name] = pd.Series(cells)
        value_keys.append(name)

    hidden: Tuple[str, ...] = ()
    if hidden_data is not None:
        on = [r for r in rows if r in hidden_data.columns]
        if not on:
            raise InvalidInputError("hidden_data must share at least one row key")
        extra = hidden_data.drop_duplicates(subset=on)
        hidden = tuple(c for c in extra.columns if c not in on)
        wide = wide.merge(extra, on=on, how="left", validate="m:1")
        wide = wide[list(rows) + list(hidden) + value_keys]

    return Tabulation(
        data=wide,
        rows=rows,
        columns=columns,
        value=value,
        levels=levels,
        value_keys=tuple(value_keys),
        hidden=hidden,
    )


def tabulator_colnames(ct: Tabulation, level: Optional[dict] = None) -> List[str]:
    """Value column keys, optionally those matching ``level``
    (a mapping of column variable to value)."""
    if not level:
        return list(ct.value_keys)
    mask = pd.Series(True, index=ct.levels.index)
    for var, val in level.items():
        if var not in ct.columns:
            raise UnknownColumnError([var], where="columns")
        mask &= ct.levels[var] == val
    return [k for k, keep in zip(ct.value_keys, mask) if keep]


def _header_runs(values: Sequence[Any]) -> Tuple[List[str], List[int]]:
    labels: List[str] = []
    widths: List[int] = []
    for v in values:
        if labels and labels[-1] == str(v):
            widths[-1] += 1
        else:
            labels.append(str(v))
            widths.append(1)
    return labels, widths


def tabulation_as_flextable(ct: Tabulation, *, config: FlextableDefaults = DEFAULTS) -> FlexTable:
    """
    Render a :class:`Tabulation`.

    The bottom header row shows the row variable names and the innermost
    column level; one header row per outer column variable sits above it
    with consecutive equal values merged.  Row keys are merged vertically.
    """
    keys = list(ct.rows) + list(ct.value_keys)
    ft = flextable(ct.data, col_keys=keys, config=config)
    inner = ct.columns[-1]
    labels = {k: str(v) for k, v in zip(ct.value_keys, ct.levels[inner])}
    ft = set_header_labels(ft, labels)
    for var in reversed(ct.columns[:-1]):
        # spans of an outer level never cross a boundary of the levels above it
        prefix = ct.levels[list(ct.columns[: ct.columns.index(var) + 1])]
        combos = ["|".join(map(str, c)) for c in prefix.itertuples(index=False, name=None)]
        run_labels, widths = _header_runs(combos)
        values = [""] * len(ct.rows) + [lab.split("|")[-1] for lab in run_labels]
        ft = add_header_row(ft, values, colwidths=[1] * len(ct.rows) + widths, top=True)
    ft = merge_v(ft, j=list(ct.rows))
    ft = align(ft, j=list(ct.value_keys), align="center", part="all")
    return ft
