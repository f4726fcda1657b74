"""
Grouped data: repeated leading values as separator rows.

:func:`as_grouped_data` turns a flat table and an ordered list of group
columns into a flat sequence where each run of identical consecutive
group values is announced by a *title row* and the group values are
blanked on the data rows that the title now represents.

Example
-------
>>> df = pd.DataFrame({"g": ["A", "A", "B"], "v": [1, 2, 3]})
>>> as_grouped_data(df, groups=["g"]).data
      g     v
0     A  <NA>
1   NaN     1
2   NaN     2
3     B  <NA>
4   NaN     3

Runs
----
A run is a maximal block of consecutive rows sharing the same values for
every group column; missing values compare equal to each other.  Only
contiguous rows collapse: a value that recurs after a different one
starts a new run.  Each run gets one title row per level, outer to inner,
placed before the run's first data row, so every level has the same
number of title rows.

With ``expand_single=False`` runs made of a single row get no title rows
and that row keeps all of its group values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..errors import InvalidInputError, UnknownColumnError
from ..util.logging import get_logger

__all__ = ["GroupedData", "as_grouped_data", "coerce_table"]

log = get_logger("flextable.grouping")


@dataclass(frozen=True)
class GroupedData:
    """
    Result of :func:`as_grouped_data`.

    Attributes
    ----------
    data : DataFrame
        Grouped rows; columns are ``groups`` followed by ``columns``.
        Treat as read‑only; :meth:`to_frame` returns a copy.
    groups : tuple of str
        Group columns, outer to inner.
    columns : tuple of str
        Non‑group columns kept in the output.
    levels : tuple of int
        Nesting depth of each row: ``k`` for a title row of
        ``groups[k]``, ``len(groups)`` for data rows.
    source_rows : tuple of int
        Position in the input table of each data row, or of the first row
        of the run announced by each title row.
    run_lengths : tuple of int
        Number of input rows covered by each title row (1 for data rows).
    """

    data: pd.DataFrame
    groups: Tuple[str, ...]
    columns: Tuple[str, ...]
    levels: Tuple[int, ...]
    source_rows: Tuple[int, ...]
    run_lengths: Tuple[int, ...]

    @property
    def n_levels(self) -> int:
        return len(self.groups)

    def __len__(self) -> int:
        return len(self.levels)

    def is_title(self, level: Optional[int] = None) -> np.ndarray:
        """Boolean mask of title rows, optionally restricted to one level."""
        lv = np.asarray(self.levels, dtype=int)
        if level is None:
            return lv < self.n_levels
        if not 0 <= level < self.n_levels:
            raise InvalidInputError(f"level must be in [0, {self.n_levels})")
        return lv == level

    def title_counts(self) -> List[int]:
        """Number of title rows at each level, outer to inner."""
        lv = np.asarray(self.levels, dtype=int)
        return [int(np.sum(lv == k)) for k in range(self.n_levels)]

    def to_frame(self) -> pd.DataFrame:
        return self.data.copy()

    def to_original(self) -> pd.DataFrame:
        """
        Rebuild the input table: drop title rows and restore the group
        values they represent on the data rows they cover.
        """
        data_pos = [k for k, lv in enumerate(self.levels) if lv == self.n_levels]
        out = self.data.iloc[data_pos].reset_index(drop=True)
        if not self.groups:
            return out
        src = np.asarray([self.source_rows[k] for k in data_pos])
        restored = {}
        for level, grp in enumerate(self.groups):
            col = out[grp].copy()
            for k in np.flatnonzero(self.is_title(level)):
                start = self.source_rows[k]
                covered = (src >= start) & (src < start + self.run_lengths[k])
                col[covered] = self.data[grp].iloc[k]
            restored[grp] = col
        return out.assign(**restored)


def coerce_table(x: Any) -> pd.DataFrame:
    """Convert a supported tabular input to a DataFrame with str column names.

    Supported inputs are DataFrames, 2‑D arrays (columns named ``V1``,
    ``V2``, ...) and mappings of column name to values.
    """
    if isinstance(x, pd.DataFrame):
        frame = x
    elif isinstance(x, np.ndarray):
        if x.ndim != 2:
            raise InvalidInputError(f"expected a 2‑D array, got {x.ndim} dimensions")
        frame = pd.DataFrame(x, columns=[f"V{k + 1}" for k in range(x.shape[1])])
    elif isinstance(x, Mapping):
        try:
            frame = pd.DataFrame(dict(x))
        except ValueError as exc:
            raise InvalidInputError(f"mapping is not tabular: {exc}") from exc
    else:
        raise InvalidInputError(
            f"expected a table (DataFrame, 2‑D array or mapping), got {type(x).__name__}"
        )
    if frame.shape[1] == 0:
        raise InvalidInputError("table has zero columns")
    names = [str(c) for c in frame.columns]
    if len(set(names)) != len(names):
        raise InvalidInputError(f"column names must be unique, got {names}")
    return frame.set_axis(names, axis=1).reset_index(drop=True)


def _changes(s: pd.Series) -> np.ndarray:
    """True where a value differs from the previous row (NA equals NA)."""
    prev = s.shift(1)
    same = (s == prev).fillna(False).astype(bool) | (s.isna() & prev.isna())
    out = ~same.to_numpy(dtype=bool)
    if len(out):
        out[0] = True
    return out


def _run_lengths(starts: np.ndarray) -> np.ndarray:
    """Length of the run each row belongs to, given run start flags."""
    run_id = np.cumsum(starts) - 1
    return np.bincount(run_id)[run_id]


def _blankable(s: pd.Series) -> pd.Series:
    """Use a dtype able to hold missing values without changing the values."""
    if pd.api.types.is_bool_dtype(s):
        return s.astype("boolean")
    if pd.api.types.is_integer_dtype(s):
        return s.astype("Int64")
    return s


def as_grouped_data(
    x: Any,
    groups: Sequence[str],
    columns: Optional[Sequence[str]] = None,
    expand_single: bool = True,
) -> GroupedData:
    """
    Add title rows for runs of repeated group values.

    Parameters
    ----------
    x : DataFrame, 2‑D ndarray or mapping
        Input table.
    groups : sequence of str
        Group columns, outer to inner.  Order matters: outer columns
        should vary no faster than inner ones.
    columns : sequence of str, optional
        Non‑group columns to keep; defaults to every non‑group column in
        table order.
    expand_single : bool, default True
        If False, runs of a single row get no title row and keep their
        group value.

    Returns
    -------
    GroupedData

    Raises
    ------
    InvalidInputError
        ``x`` is not tabular, has no columns, or ``columns`` repeats a
        group column.
    UnknownColumnError
        A group or display column is absent from the table.
    """
    frame = coerce_table(x)
    groups = tuple(str(g) for g in groups)
    if len(set(groups)) != len(groups):
        raise InvalidInputError(f"groups must be unique, got {list(groups)}")
    missing = set(groups) - set(frame.columns)
    if missing:
        raise UnknownColumnError(missing, where="table")
    if columns is None:
        columns = tuple(c for c in frame.columns if c not in groups)
    else:
        columns = tuple(str(c) for c in columns)
        missing = set(columns) - set(frame.columns)
        if missing:
            raise UnknownColumnError(missing, where="table")
        overlap = set(columns) & set(groups)
        if overlap:
            raise InvalidInputError(f"columns repeat group columns: {sorted(overlap)}")

    base = frame[list(groups) + list(columns)]
    n = len(base)
    n_levels = len(groups)

    if n_levels == 0:
        return GroupedData(
            data=base.copy(),
            groups=(),
            columns=columns,
            levels=tuple(0 for _ in range(n)),
            source_rows=tuple(range(n)),
            run_lengths=tuple(1 for _ in range(n)),
        )

    # runs over the full group tuple, shared by every level
    starts = np.zeros(n, dtype=bool)
    for grp in groups:
        starts = starts | _changes(base[grp])
    run_len = _run_lengths(starts)
    titled = run_len > 1 if not expand_single else np.ones(n, dtype=bool)
    heads = np.flatnonzero(starts & titled)

    # rows of the output: (source row, level) with per-column blank flags
    src: List[int] = []
    lvl: List[int] = []
    rlen: List[int] = []
    blank_rows: List[np.ndarray] = []
    all_cols = list(base.columns)
    for k, grp in enumerate(groups):
        for p in heads:
            mask = np.ones(len(all_cols), dtype=bool)
            mask[all_cols.index(grp)] = False
            src.append(int(p))
            lvl.append(k)
            rlen.append(int(run_len[p]))
            blank_rows.append(mask)
    for r in range(n):
        mask = np.zeros(len(all_cols), dtype=bool)
        mask[:n_levels] = titled[r]
        src.append(r)
        lvl.append(n_levels)
        rlen.append(1)
        blank_rows.append(mask)

    order = np.lexsort((np.asarray(lvl), np.asarray(src)))
    src_sorted = np.asarray(src, dtype=int)[order]
    blank = (
        np.vstack([blank_rows[k] for k in order])
        if len(order)
        else np.zeros((0, len(all_cols)), dtype=bool)
    )

    picked = base.iloc[src_sorted].reset_index(drop=True)
    out_cols = {}
    for c, col in enumerate(all_cols):
        s = picked[col]
        if blank[:, c].any():
            s = _blankable(s).mask(pd.Series(blank[:, c], index=s.index))
        out_cols[col] = s
    data = pd.DataFrame(out_cols, columns=all_cols)

    result = GroupedData(
        data=data,
        groups=groups,
        columns=columns,
        levels=tuple(int(lvl[k]) for k in order),
        source_rows=tuple(int(v) for v in src_sorted),
        run_lengths=tuple(int(rlen[k]) for k in order),
    )
    log.debug(
        "as_grouped_data: %d input rows, %s title rows by level",
        n,
        result.title_counts(),
    )
    return result
