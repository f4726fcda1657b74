"""Cell content: composition, labels, extra rows and column formats."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import pandas as pd

from ..config import FlextableDefaults
from ..errors import InvalidInputError
from ..formatting import format_double, format_int, format_value
from ..util.selectors import resolve_cols, resolve_rows
from .chunks import Chunk, Paragraph, as_paragraph
from .core import CellStyle, FlexTable, TablePart, update_cells

__all__ = [
    "compose",
    "mk_par",
    "append_chunks",
    "set_header_labels",
    "add_header_row",
    "add_header_lines",
    "add_footer_lines",
    "add_footer_row",
    "delete_part",
    "colformat_double",
    "colformat_int",
    "colformat_char",
]

ParagraphValue = Union[
    Paragraph, str, Sequence[Paragraph], Callable[[pd.Series], Paragraph]
]


def _per_row(value: Any, rows: Sequence[int], dataset: pd.DataFrame) -> dict:
    """Map each selected row to the paragraph it receives."""
    if isinstance(value, (Paragraph, Chunk, str)):
        para = as_paragraph(value)
        return {i: para for i in rows}
    if callable(value):
        out = {}
        for i in rows:
            res = value(dataset.iloc[i])
            out[i] = as_paragraph(res) if not isinstance(res, Paragraph) else res
        return out
    values = list(value)
    if len(values) == 1:
        para = as_paragraph(values[0])
        return {i: para for i in rows}
    if len(values) != len(rows):
        raise InvalidInputError(
            f"{len(values)} paragraphs supplied for {len(rows)} selected rows"
        )
    return {
        i: v if isinstance(v, Paragraph) else as_paragraph(v)
        for i, v in zip(rows, values)
    }


def compose(
    ft: FlexTable,
    i: Any = None,
    j: Any = None,
    value: ParagraphValue = "",
    part: str = "body",
) -> FlexTable:
    """
    Replace the content of the selected cells.

    Parameters
    ----------
    ft : FlexTable
    i, j : row and column selectors
        See :mod:`flextable.util.selectors`.
    value : Paragraph, str, sequence of Paragraph or callable
        A single paragraph is used for every selected cell.  A sequence
        provides one paragraph per selected row.  A callable receives the
        row of the part's data frame and returns the paragraph, which lets
        content depend on hidden columns.
    part : {"body", "header", "footer"}
    """
    p = ft.part(part)
    rows = resolve_rows(i, p.dataset, p.nrow)
    cols = resolve_cols(j, ft.col_keys)
    by_row = _per_row(value, rows, p.dataset)
    content = update_cells(p.content, rows, cols, lambda old, r, c: by_row[r])
    return ft.with_part(part, replace(p, content=content))


mk_par = compose


def append_chunks(
    ft: FlexTable,
    *chunks: Union[Chunk, str, Callable[[pd.Series], Chunk]],
    i: Any = None,
    j: Any = None,
    part: str = "body",
) -> FlexTable:
    """Append chunks to the content currently displayed in the selected cells.

    Callables receive the row of the part's data frame.
    """
    p = ft.part(part)
    rows = resolve_rows(i, p.dataset, p.nrow)
    cols = resolve_cols(j, ft.col_keys)

    def extend(old: Optional[Paragraph], r: int, c: int) -> Paragraph:
        current = ft.cell_paragraph(part, r, c)
        extra = [ch(p.dataset.iloc[r]) if callable(ch) else ch for ch in chunks]
        return current + as_paragraph(*extra)

    content = update_cells(p.content, rows, cols, extend)
    return ft.with_part(part, replace(p, content=content))


def set_header_labels(
    ft: FlexTable, values: Optional[Mapping[str, str]] = None, **labels: str
) -> FlexTable:
    """Set the labels of the bottom header row for the given column keys.

    Keys may be passed as a mapping (``values``) or as keyword arguments;
    keys that are not displayed columns are ignored.
    """
    mapping = dict(values or {})
    mapping.update(labels)
    p = ft.header
    if p.nrow == 0:
        return ft
    last = p.nrow - 1
    cols = [k for k, key in enumerate(ft.col_keys) if key in mapping]
    content = update_cells(
        p.content,
        [last],
        cols,
        lambda old, r, c: as_paragraph(str(mapping[ft.col_keys[c]])),
    )
    dataset = p.dataset.copy()
    for c in cols:
        key = ft.col_keys[c]
        dataset.loc[dataset.index[last], key] = str(mapping[key])
    return ft.with_part("header", replace(p, content=content, dataset=dataset))


def _new_rows(
    ft: FlexTable,
    labels: Sequence[Sequence[str]],
    spans: Sequence[Sequence[int]],
    align: str,
) -> TablePart:
    """Build rows of text cells; ``spans`` follow the hspans convention."""
    cfg: FlextableDefaults = ft.config
    style = CellStyle(
        align=align,
        color=cfg.font_color,
        font_size=cfg.font_size,
        font_family=cfg.font_family,
    )
    frame = pd.DataFrame(
        [list(r) for r in labels], columns=list(ft.col_keys), dtype=object
    )
    return TablePart(
        dataset=frame,
        content=tuple(tuple(as_paragraph(str(v)) for v in row) for row in labels),
        styles=tuple(tuple(style for _ in ft.col_keys) for _ in labels),
        hspans=tuple(tuple(s) for s in spans),
        vspans=tuple(tuple(1 for _ in ft.col_keys) for _ in labels),
        keep_with_next=tuple(None for _ in labels),
    )


def _spread(values: Sequence[Any], colwidths: Optional[Sequence[int]], ncol: int):
    values = [("" if v is None else str(v)) for v in values]
    if colwidths is None:
        if len(values) != ncol:
            raise InvalidInputError(
                f"{len(values)} values supplied for {ncol} columns; pass colwidths"
            )
        colwidths = [1] * ncol
    if len(colwidths) != len(values) or sum(colwidths) != ncol:
        raise InvalidInputError("colwidths must match values and sum to the number of columns")
    labels, spans = [], []
    for v, w in zip(values, colwidths):
        if w < 1:
            raise InvalidInputError("colwidths must be positive")
        labels.extend([v] * w)
        spans.extend([w] + [0] * (w - 1))
    return labels, spans


def add_header_row(
    ft: FlexTable,
    values: Sequence[Any],
    colwidths: Optional[Sequence[int]] = None,
    top: bool = True,
) -> FlexTable:
    """Add a header row; ``colwidths`` gives the number of columns each
    value spans."""
    labels, spans = _spread(values, colwidths, ft.ncol)
    rows = _new_rows(ft, [labels], [spans], align="center")
    return ft.with_part("header", ft.header.append_rows(rows, top=top))


def add_footer_row(
    ft: FlexTable,
    values: Sequence[Any],
    colwidths: Optional[Sequence[int]] = None,
    top: bool = False,
) -> FlexTable:
    labels, spans = _spread(values, colwidths, ft.ncol)
    rows = _new_rows(ft, [labels], [spans], align="left")
    return ft.with_part("footer", ft.footer.append_rows(rows, top=top))


def _lines(ft: FlexTable, values: Sequence[str] | str) -> TablePart:
    if isinstance(values, str):
        values = [values]
    n = ft.ncol
    labels = [[str(v)] * n for v in values]
    spans = [[n] + [0] * (n - 1) for _ in values]
    return _new_rows(ft, labels, spans, align="left")


def add_header_lines(ft: FlexTable, values: Sequence[str] | str, top: bool = True) -> FlexTable:
    """Add full‑width header rows, one per value."""
    return ft.with_part("header", ft.header.append_rows(_lines(ft, values), top=top))


def add_footer_lines(ft: FlexTable, values: Sequence[str] | str, top: bool = False) -> FlexTable:
    """Add full‑width footer rows, one per value."""
    return ft.with_part("footer", ft.footer.append_rows(_lines(ft, values), top=top))


def delete_part(ft: FlexTable, part: str = "header") -> FlexTable:
    if part == "body":
        raise InvalidInputError("the body part cannot be deleted")
    ft.part(part)
    return ft.with_part(part, TablePart.empty(ft.col_keys))


def _colformat(
    ft: FlexTable,
    i: Any,
    j: Any,
    accepts: Callable[[pd.Series], bool],
    fmt: Callable[[Any], str],
) -> FlexTable:
    p = ft.body
    rows = resolve_rows(i, p.dataset, p.nrow)
    cols = resolve_cols(j, ft.col_keys)
    cols = [
        c
        for c in cols
        if ft.col_keys[c] in p.dataset.columns and accepts(p.dataset[ft.col_keys[c]])
    ]

    def apply(old: Optional[Paragraph], r: int, c: int) -> Optional[Paragraph]:
        if old is not None:
            return old
        value = p.dataset[ft.col_keys[c]].iloc[r]
        return Paragraph((Chunk(text=fmt(value)),))

    content = update_cells(p.content, rows, cols, apply)
    return ft.with_part("body", replace(p, content=content))


def _cfg(ft: FlexTable, **overrides: Any) -> FlextableDefaults:
    changes = {k: v for k, v in overrides.items() if v is not None}
    return ft.config.update(**changes) if changes else ft.config


def colformat_double(
    ft: FlexTable,
    i: Any = None,
    j: Any = None,
    digits: Optional[int] = None,
    big_mark: Optional[str] = None,
    decimal_mark: Optional[str] = None,
    na_str: Optional[str] = None,
    nan_str: Optional[str] = None,
    prefix: str = "",
    suffix: str = "",
) -> FlexTable:
    """Format float columns with a fixed number of decimals.

    Only cells still showing their dataset value are affected; composed
    cells keep their content.
    """
    cfg = _cfg(
        ft, digits=digits, big_mark=big_mark, decimal_mark=decimal_mark,
        na_str=na_str, nan_str=nan_str,
    )
    return _colformat(
        ft,
        i,
        j,
        pd.api.types.is_float_dtype,
        lambda v: format_double(v, cfg.digits, cfg, prefix=prefix, suffix=suffix),
    )


def colformat_int(
    ft: FlexTable,
    i: Any = None,
    j: Any = None,
    big_mark: Optional[str] = None,
    na_str: Optional[str] = None,
    prefix: str = "",
    suffix: str = "",
) -> FlexTable:
    """Format integer columns (including nullable ``Int64``)."""
    cfg = _cfg(ft, big_mark=big_mark, na_str=na_str)

    def accepts(s: pd.Series) -> bool:
        return pd.api.types.is_integer_dtype(s) and not pd.api.types.is_bool_dtype(s)

    return _colformat(
        ft, i, j, accepts, lambda v: format_int(v, cfg, prefix=prefix, suffix=suffix)
    )


def colformat_char(
    ft: FlexTable,
    i: Any = None,
    j: Any = None,
    na_str: Optional[str] = None,
    prefix: str = "",
    suffix: str = "",
) -> FlexTable:
    cfg = _cfg(ft, na_str=na_str)

    def accepts(s: pd.Series) -> bool:
        return pd.api.types.is_object_dtype(s) or pd.api.types.is_string_dtype(s)

    def fmt(v: Any) -> str:
        txt = format_value(v, cfg)
        return f"{prefix}{txt}{suffix}" if txt else txt

    return _colformat(ft, i, j, accepts, fmt)
