"""
The immutable :class:`FlexTable` value and its constructor.

A flextable is made of three parts (header, body and footer).  Each part
stores, for every (row, column) position:

* the cell content as a :class:`~flextable.table.chunks.Paragraph`, or
  ``None`` when the cell still shows the formatted dataset value;
* a :class:`CellStyle` (alignment, text properties and borders);
* a horizontal and a vertical span.  A span of ``n > 1`` marks the first
  cell of a merge covering ``n`` cells; ``0`` marks a covered cell.

Parts also carry a per‑row keep‑with‑next flag used by word processors to
keep a row on the same page as the following one.

Every operation in :mod:`flextable.table` returns a new FlexTable built
with :func:`dataclasses.replace`; no object reachable from a FlexTable is
ever mutated, so versions can be shared freely.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..config import DEFAULTS, FlextableDefaults
from ..errors import InvalidInputError
from ..formatting import format_value
from ..util.logging import get_logger
from .chunks import Chunk, Paragraph

__all__ = [
    "Border",
    "CellStyle",
    "TablePart",
    "FlexTable",
    "flextable",
    "fp_border",
    "PARTS",
]

log = get_logger("flextable.table")

PARTS = ("header", "body", "footer")

Matrix = Tuple[Tuple[Any, ...], ...]


@dataclass(frozen=True)
class Border:
    width: float = 1.0
    color: str = "#666666"
    style: str = "solid"


def fp_border(
    width: float = 1.0, color: Optional[str] = None, style: str = "solid",
    config: FlextableDefaults = DEFAULTS,
) -> Border:
    """Line properties for :func:`hline`, :func:`vline` and friends."""
    if width < 0:
        raise InvalidInputError("border width must be non‑negative")
    if style not in ("solid", "dashed", "dotted", "double", "none"):
        raise InvalidInputError(f"unknown border style {style!r}")
    return Border(width=float(width), color=color or config.border_color, style=style)


@dataclass(frozen=True)
class CellStyle:
    align: str = "left"
    valign: str = "center"
    bold: bool = False
    italic: bool = False
    color: str = "#000000"
    font_size: float = 11.0
    font_family: str = "Arial"
    border_top: Optional[Border] = None
    border_bottom: Optional[Border] = None
    border_left: Optional[Border] = None
    border_right: Optional[Border] = None


def _fill(nrow: int, ncol: int, value: Any) -> Matrix:
    return tuple(tuple(value for _ in range(ncol)) for _ in range(nrow))


def update_cells(
    matrix: Matrix,
    rows: Iterable[int],
    cols: Iterable[int],
    fn: Callable[[Any, int, int], Any],
) -> Matrix:
    """Return a copy of ``matrix`` with ``fn(old, i, j)`` applied to the
    selected cells."""
    rows = set(rows)
    cols = list(cols)
    out = []
    for i, row in enumerate(matrix):
        if i not in rows:
            out.append(row)
            continue
        new_row = list(row)
        for j in cols:
            new_row[j] = fn(row[j], i, j)
        out.append(tuple(new_row))
    return tuple(out)


@dataclass(frozen=True)
class TablePart:
    """One part (header, body or footer) of a flextable."""

    dataset: pd.DataFrame
    content: Matrix
    styles: Matrix
    hspans: Matrix
    vspans: Matrix
    keep_with_next: Tuple[Optional[bool], ...]

    @property
    def nrow(self) -> int:
        return len(self.content)

    @property
    def ncol(self) -> int:
        return len(self.content[0]) if self.content else 0

    @classmethod
    def empty(cls, col_keys: Sequence[str]) -> "TablePart":
        return cls(
            dataset=pd.DataFrame(columns=list(col_keys), dtype=object),
            content=(),
            styles=(),
            hspans=(),
            vspans=(),
            keep_with_next=(),
        )

    @classmethod
    def from_frame(
        cls,
        dataset: pd.DataFrame,
        col_keys: Sequence[str],
        config: FlextableDefaults,
        content: Optional[Matrix] = None,
    ) -> "TablePart":
        nrow, ncol = len(dataset), len(col_keys)
        base = CellStyle(
            color=config.font_color,
            font_size=config.font_size,
            font_family=config.font_family,
        )
        numeric = [
            key in dataset.columns
            and pd.api.types.is_numeric_dtype(dataset[key])
            and not pd.api.types.is_bool_dtype(dataset[key])
            for key in col_keys
        ]
        row_styles = tuple(
            replace(base, align="right") if is_num else base for is_num in numeric
        )
        styles = tuple(row_styles for _ in range(nrow))
        return cls(
            dataset=dataset,
            content=content if content is not None else _fill(nrow, ncol, None),
            styles=styles,
            hspans=_fill(nrow, ncol, 1),
            vspans=_fill(nrow, ncol, 1),
            keep_with_next=tuple(None for _ in range(nrow)),
        )

    def append_rows(self, other: "TablePart", top: bool = False) -> "TablePart":
        """Stack ``other`` below (or above, with ``top=True``) this part."""
        first, second = (other, self) if top else (self, other)
        return TablePart(
            dataset=pd.concat([first.dataset, second.dataset], ignore_index=True),
            content=first.content + second.content,
            styles=first.styles + second.styles,
            hspans=first.hspans + second.hspans,
            vspans=first.vspans + second.vspans,
            keep_with_next=first.keep_with_next + second.keep_with_next,
        )


@dataclass(frozen=True)
class FlexTable:
    """An immutable styled table.

    Use :func:`flextable` or :func:`flextable.as_flextable` to create one
    and the functions of :mod:`flextable.table` to derive new versions.
    """

    col_keys: Tuple[str, ...]
    header: TablePart
    body: TablePart
    footer: TablePart
    widths: Tuple[float, ...]
    layout: str = "fixed"
    config: FlextableDefaults = field(default=DEFAULTS, repr=False)

    @property
    def ncol(self) -> int:
        return len(self.col_keys)

    def nrow(self, part: str = "body") -> int:
        return self.part(part).nrow

    def part(self, name: str) -> TablePart:
        if name not in PARTS:
            raise InvalidInputError(f"part must be one of {PARTS}, got {name!r}")
        return getattr(self, name)

    def with_part(self, name: str, part: TablePart) -> "FlexTable":
        if name not in PARTS:
            raise InvalidInputError(f"part must be one of {PARTS}, got {name!r}")
        return replace(self, **{name: part})

    def cell_paragraph(self, part: str, i: int, j: int) -> Paragraph:
        """Content displayed at ``(i, j)`` of ``part`` (ignoring merges)."""
        p = self.part(part)
        para = p.content[i][j]
        if para is not None:
            return para
        key = self.col_keys[j]
        if key not in p.dataset.columns:
            return Paragraph()
        value = p.dataset[key].iloc[i]
        return Paragraph((Chunk(text=format_value(value, self.config)),))

    def get_text(self, part: str = "body") -> pd.DataFrame:
        """Displayed text of ``part``; cells covered by a merge are empty."""
        p = self.part(part)
        rows: List[List[str]] = []
        for i in range(p.nrow):
            row = []
            for j in range(self.ncol):
                if p.hspans[i][j] == 0 or p.vspans[i][j] == 0:
                    row.append("")
                else:
                    row.append(self.cell_paragraph(part, i, j).text)
            rows.append(row)
        return pd.DataFrame(rows, columns=list(self.col_keys), dtype=object)

    def __repr__(self) -> str:
        return (
            f"FlexTable(ncol={self.ncol}, header={self.header.nrow}, "
            f"body={self.body.nrow}, footer={self.footer.nrow})"
        )


def _header_frame(col_keys: Sequence[str]) -> pd.DataFrame:
    return pd.DataFrame([list(col_keys)], columns=list(col_keys), dtype=object)


def flextable(
    data: pd.DataFrame,
    col_keys: Optional[Sequence[str]] = None,
    *,
    config: FlextableDefaults = DEFAULTS,
) -> FlexTable:
    """
    Create a flextable from a data frame.

    Parameters
    ----------
    data : DataFrame
        Body data.  Columns not listed in ``col_keys`` stay available to
        row selectors and composed content but are not displayed.
    col_keys : sequence of str, optional
        Columns to display, in order.  Keys absent from ``data`` are added
        as blank columns.  Defaults to all columns of ``data``.
    config : FlextableDefaults, optional
        Formatting defaults used for this table.

    Returns
    -------
    FlexTable
        A table with a single header row holding the column keys.
    """
    if not isinstance(data, pd.DataFrame):
        raise InvalidInputError(
            f"flextable() expects a DataFrame, got {type(data).__name__}"
        )
    if col_keys is None:
        col_keys = [str(c) for c in data.columns]
    col_keys = tuple(str(c) for c in col_keys)
    if not col_keys:
        raise InvalidInputError("a flextable needs at least one column")
    if len(set(col_keys)) != len(col_keys):
        raise InvalidInputError(f"col_keys must be unique, got {list(col_keys)}")
    dataset = data.reset_index(drop=True)
    dataset.columns = [str(c) for c in dataset.columns]
    header = TablePart.from_frame(_header_frame(col_keys), col_keys, config)
    body = TablePart.from_frame(dataset, col_keys, config)
    # header cells follow the body alignment of their column
    header = replace(
        header,
        styles=tuple(
            tuple(
                replace(h, align=body.styles[0][j].align if body.nrow else h.align)
                for j, h in enumerate(row)
            )
            for row in header.styles
        ),
    )
    log.debug("flextable: %d rows x %d columns", len(dataset), len(col_keys))
    return FlexTable(
        col_keys=col_keys,
        header=header,
        body=body,
        footer=TablePart.empty(col_keys),
        widths=tuple(0.75 for _ in col_keys),
        layout=config.table_layout,
        config=config,
    )
