"""Text properties, alignments, borders and column widths."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from ..errors import InvalidInputError
from ..util.selectors import parts_of, resolve_cols, resolve_rows
from .core import Border, CellStyle, FlexTable, fp_border, update_cells

__all__ = [
    "align",
    "valign",
    "bold",
    "italic",
    "color",
    "fontsize",
    "hline",
    "hline_top",
    "hline_bottom",
    "vline",
    "border_remove",
    "fix_border_issues",
    "width",
    "autofit",
    "dim_pretty",
    "set_table_properties",
]

_ALIGNS = ("left", "center", "right", "justify")
_VALIGNS = ("top", "center", "bottom")

# average glyph width relative to the font size
_CHAR_WIDTH = 0.55


def _style(ft: FlexTable, i: Any, j: Any, part: str, **changes: Any) -> FlexTable:
    for name in parts_of(part):
        p = ft.part(name)
        if p.nrow == 0:
            continue
        # row selectors only make sense for a single part
        rows = resolve_rows(i if part != "all" else None, p.dataset, p.nrow)
        cols = resolve_cols(j, ft.col_keys)
        styles = update_cells(
            p.styles, rows, cols, lambda old, r, c: replace(old, **changes)
        )
        ft = ft.with_part(name, replace(p, styles=styles))
    return ft


def align(
    ft: FlexTable, i: Any = None, j: Any = None, align: str = "left", part: str = "body"
) -> FlexTable:
    if align not in _ALIGNS:
        raise InvalidInputError(f"align must be one of {_ALIGNS}, got {align!r}")
    return _style(ft, i, j, part, align=align)


def valign(
    ft: FlexTable, i: Any = None, j: Any = None, valign: str = "center", part: str = "body"
) -> FlexTable:
    if valign not in _VALIGNS:
        raise InvalidInputError(f"valign must be one of {_VALIGNS}, got {valign!r}")
    return _style(ft, i, j, part, valign=valign)


def bold(ft: FlexTable, i: Any = None, j: Any = None, bold: bool = True, part: str = "body") -> FlexTable:
    return _style(ft, i, j, part, bold=bool(bold))


def italic(
    ft: FlexTable, i: Any = None, j: Any = None, italic: bool = True, part: str = "body"
) -> FlexTable:
    return _style(ft, i, j, part, italic=bool(italic))


def color(ft: FlexTable, i: Any = None, j: Any = None, color: str = "#000000", part: str = "body") -> FlexTable:
    return _style(ft, i, j, part, color=color)


def fontsize(ft: FlexTable, i: Any = None, j: Any = None, size: float = 11, part: str = "body") -> FlexTable:
    if size <= 0:
        raise InvalidInputError("size must be positive")
    return _style(ft, i, j, part, font_size=float(size))


def _border(ft: FlexTable, border: Optional[Border]) -> Border:
    return border if border is not None else fp_border(
        width=ft.config.border_width, config=ft.config
    )


def hline(
    ft: FlexTable, i: Any = None, j: Any = None, border: Optional[Border] = None, part: str = "body"
) -> FlexTable:
    """Set the bottom border of the selected cells."""
    return _style(ft, i, j, part, border_bottom=_border(ft, border))


def hline_top(ft: FlexTable, j: Any = None, border: Optional[Border] = None, part: str = "body") -> FlexTable:
    """Set the top border of the first row of each selected part."""
    b = _border(ft, border)
    for name in parts_of(part):
        if ft.part(name).nrow:
            ft = _style(ft, [0], j, name, border_top=b)
    return ft


def hline_bottom(ft: FlexTable, j: Any = None, border: Optional[Border] = None, part: str = "body") -> FlexTable:
    """Set the bottom border of the last row of each selected part."""
    b = _border(ft, border)
    for name in parts_of(part):
        n = ft.part(name).nrow
        if n:
            ft = _style(ft, [n - 1], j, name, border_bottom=b)
    return ft


def vline(
    ft: FlexTable, i: Any = None, j: Any = None, border: Optional[Border] = None, part: str = "all"
) -> FlexTable:
    """Set the right border of the selected cells."""
    return _style(ft, i, j, part, border_right=_border(ft, border))


def border_remove(ft: FlexTable) -> FlexTable:
    return _style(
        ft, None, None, "all",
        border_top=None, border_bottom=None, border_left=None, border_right=None,
    )


def fix_border_issues(ft: FlexTable) -> FlexTable:
    """
    Make adjacent borders agree.

    A bottom border also becomes the top border of the cell below (across
    part boundaries) and a right border the left border of the next cell.
    Renderers that draw only one side of a cell then produce the same
    lines as those drawing both.
    """
    names = [n for n in ("header", "body", "footer") if ft.part(n).nrow]
    rows: List[List[CellStyle]] = []
    owners: List[tuple] = []
    for name in names:
        for r, row in enumerate(ft.part(name).styles):
            rows.append(list(row))
            owners.append((name, r))
    for r in range(len(rows)):
        for c in range(ft.ncol):
            cell = rows[r][c]
            if c + 1 < ft.ncol:
                nxt = rows[r][c + 1]
                if cell.border_right is not None and nxt.border_left is None:
                    rows[r][c + 1] = nxt = replace(nxt, border_left=cell.border_right)
                elif nxt.border_left is not None and cell.border_right is None:
                    rows[r][c] = cell = replace(cell, border_right=nxt.border_left)
            if r + 1 < len(rows):
                below = rows[r + 1][c]
                if cell.border_bottom is not None and below.border_top is None:
                    rows[r + 1][c] = replace(below, border_top=cell.border_bottom)
                elif below.border_top is not None and cell.border_bottom is None:
                    rows[r][c] = replace(cell, border_bottom=below.border_top)
    by_part: Dict[str, list] = {n: [] for n in names}
    for (name, _), row in zip(owners, rows):
        by_part[name].append(tuple(row))
    for name in names:
        ft = ft.with_part(name, replace(ft.part(name), styles=tuple(by_part[name])))
    return ft


def width(ft: FlexTable, j: Any = None, width: float | Sequence[float] = 1.0) -> FlexTable:
    """Set column widths in inches."""
    cols = resolve_cols(j, ft.col_keys)
    if isinstance(width, (int, float)):
        values = [float(width)] * len(cols)
    else:
        values = [float(w) for w in width]
        if len(values) != len(cols):
            raise InvalidInputError(
                f"{len(values)} widths supplied for {len(cols)} columns"
            )
    if any(w <= 0 for w in values):
        raise InvalidInputError("widths must be positive")
    widths = list(ft.widths)
    for c, w in zip(cols, values):
        widths[c] = w
    return replace(ft, widths=tuple(widths))


def dim_pretty(ft: FlexTable, part: str = "all") -> Dict[str, List[float]]:
    """
    Estimate the widths and heights (inches) needed to show the content
    on one line per paragraph line.

    Merged cells spread their width evenly over the columns they cover.
    """
    pad = 2 * ft.config.padding / 72.0
    widths = [0.0] * ft.ncol
    heights: List[float] = []
    for name in parts_of(part):
        p = ft.part(name)
        for r in range(p.nrow):
            row_h = 0.0
            for c in range(ft.ncol):
                span = p.hspans[r][c]
                if span == 0 or p.vspans[r][c] == 0:
                    continue
                style = p.styles[r][c]
                lines = ft.cell_paragraph(name, r, c).text.split("\n")
                longest = max(len(line) for line in lines)
                w = longest * style.font_size * _CHAR_WIDTH / 72.0 + pad
                for k in range(c, c + span):
                    widths[k] = max(widths[k], w / span)
                row_h = max(row_h, len(lines) * style.font_size * 1.2 / 72.0 + pad)
            heights.append(row_h)
    return {"widths": widths, "heights": heights}


def autofit(ft: FlexTable, part: str | Sequence[str] = "all", add_w: float = 0.1) -> FlexTable:
    """Size columns to their content (see :func:`dim_pretty`)."""
    names = [part] if isinstance(part, str) else list(part)
    widths = [0.0] * ft.ncol
    for name in names:
        dims = dim_pretty(ft, part=name)
        widths = [max(a, b) for a, b in zip(widths, dims["widths"])]
    return replace(ft, widths=tuple(max(w + add_w, 0.1) for w in widths))


def set_table_properties(ft: FlexTable, layout: str = "fixed") -> FlexTable:
    if layout not in ("fixed", "autofit"):
        raise InvalidInputError(f"layout must be 'fixed' or 'autofit', got {layout!r}")
    return replace(ft, layout=layout)
