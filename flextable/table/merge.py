"""Cell merges and row pagination flags."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, List, Optional, Sequence, Tuple

from ..errors import InvalidInputError
from ..util.selectors import resolve_cols, resolve_rows
from .core import FlexTable, Matrix

__all__ = ["merge_h_range", "merge_v", "merge_at", "merge_none", "set_keep_with_next"]


def _col_position(ft: FlexTable, j: Any) -> int:
    cols = resolve_cols(j, ft.col_keys)
    if len(cols) != 1:
        raise InvalidInputError(f"expected a single column, got {j!r}")
    return cols[0]


def _clear_hspans(row: Tuple[int, ...], j1: int, j2: int) -> List[int]:
    """Undo every horizontal merge of ``row`` that intersects [j1, j2]."""
    out = list(row)
    for start, width in enumerate(row):
        if width > 1 and start <= j2 and start + width - 1 >= j1:
            for k in range(start, start + width):
                out[k] = 1
    return out


def merge_h_range(
    ft: FlexTable, i: Any = None, j1: Any = 0, j2: Any = None, part: str = "body"
) -> FlexTable:
    """
    Merge cells horizontally from column ``j1`` to ``j2`` (inclusive) for
    each selected row.

    ``j2`` defaults to the last displayed column.  Existing horizontal
    merges overlapping the range are replaced.  Rows whose cells in the
    range take part in a vertical merge are rejected.
    """
    p = ft.part(part)
    rows = resolve_rows(i, p.dataset, p.nrow)
    start = _col_position(ft, j1)
    end = ft.ncol - 1 if j2 is None else _col_position(ft, j2)
    if end < start:
        raise InvalidInputError(f"j2 ({end}) must not precede j1 ({start})")
    for r in rows:
        if any(p.vspans[r][c] != 1 for c in range(start, end + 1)):
            raise InvalidInputError(
                f"row {r} is vertically merged within columns {start}..{end}"
            )
    hspans = list(p.hspans)
    for r in rows:
        row = _clear_hspans(hspans[r], start, end)
        row[start] = end - start + 1
        for k in range(start + 1, end + 1):
            row[k] = 0
        hspans[r] = tuple(row)
    return ft.with_part(part, replace(p, hspans=tuple(hspans)))


def _set_column(matrix: Matrix, col: int, values: Sequence[int]) -> Matrix:
    out = []
    for row, v in zip(matrix, values):
        new_row = list(row)
        new_row[col] = v
        out.append(tuple(new_row))
    return tuple(out)


def merge_v(
    ft: FlexTable,
    j: Any = None,
    target: Optional[Any] = None,
    part: str = "body",
    combine: bool = False,
) -> FlexTable:
    """
    Merge consecutive cells showing identical text, column by column.

    Parameters
    ----------
    j : column selector
        Columns whose displayed text defines the runs.
    target : column selector, optional
        Columns receiving the merges; defaults to ``j``.  When given, runs
        are defined by the combined text of all ``j`` columns.
    combine : bool, default False
        Use the combined text of the ``j`` columns as run key.

    Rows where a target cell is horizontally merged break the runs.
    """
    p = ft.part(part)
    key_cols = resolve_cols(j, ft.col_keys)
    targets = key_cols if target is None else resolve_cols(target, ft.col_keys)
    joint = combine or target is not None

    def text(r: int, c: int) -> str:
        return ft.cell_paragraph(part, r, c).text

    vspans = p.vspans
    for t in targets:
        if joint:
            keys = [tuple(text(r, c) for c in key_cols) for r in range(p.nrow)]
        else:
            keys = [text(r, t) for r in range(p.nrow)]
        spans = [1] * p.nrow
        r = 0
        while r < p.nrow:
            if p.hspans[r][t] != 1:
                spans[r] = vspans[r][t]
                r += 1
                continue
            end = r
            while (
                end + 1 < p.nrow
                and p.hspans[end + 1][t] == 1
                and keys[end + 1] == keys[r]
            ):
                end += 1
            spans[r] = end - r + 1
            for k in range(r + 1, end + 1):
                spans[k] = 0
            r = end + 1
        vspans = _set_column(vspans, t, spans)
    return ft.with_part(part, replace(p, vspans=vspans))


def merge_at(ft: FlexTable, i: Any, j: Any, part: str = "body") -> FlexTable:
    """Merge a contiguous block of rows ``i`` and columns ``j`` into one cell."""
    p = ft.part(part)
    rows = resolve_rows(i, p.dataset, p.nrow)
    cols = resolve_cols(j, ft.col_keys)
    if not rows or not cols:
        return ft
    if rows != list(range(rows[0], rows[-1] + 1)) or cols != list(
        range(cols[0], cols[-1] + 1)
    ):
        raise InvalidInputError("merge_at requires contiguous rows and columns")
    h, w = len(rows), len(cols)
    hspans = [list(r) for r in p.hspans]
    vspans = [list(r) for r in p.vspans]
    for r in rows:
        for c in cols:
            hspans[r][c] = 0
            vspans[r][c] = 0
    hspans[rows[0]][cols[0]] = w
    vspans[rows[0]][cols[0]] = h
    return ft.with_part(
        part,
        replace(
            p,
            hspans=tuple(tuple(r) for r in hspans),
            vspans=tuple(tuple(r) for r in vspans),
        ),
    )


def merge_none(ft: FlexTable, part: str = "body") -> FlexTable:
    """Remove every merge of ``part``."""
    p = ft.part(part)
    ones = tuple(tuple(1 for _ in row) for row in p.hspans)
    return ft.with_part(part, replace(p, hspans=ones, vspans=ones))


def set_keep_with_next(
    ft: FlexTable, rows: Any = None, value: bool = True, part: str = "body"
) -> FlexTable:
    """
    Tag rows as "keep with next".

    In a word‑processor table a tagged row stays on the same page as the
    first line of the following row when a page break occurs.  The flag
    overrides the ``keep_with_next`` argument of
    :func:`flextable.render.body_add_flextable` for those rows, so
    ``value=False`` lets a row break away even when the argument is True.
    Untagged rows hold None.

    ``rows`` accepts row positions, row labels of the part's data frame or
    a boolean mask.
    """
    p = ft.part(part)
    selected = set(resolve_rows(rows, p.dataset, p.nrow))
    flags = tuple(
        bool(value) if k in selected else old for k, old in enumerate(p.keep_with_next)
    )
    return ft.with_part(part, replace(p, keep_with_next=flags))
