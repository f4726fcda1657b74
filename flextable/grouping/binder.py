"""
Binding grouped data to a flextable.

For every title row of a :class:`~flextable.grouping.grouped_data.GroupedData`
the binder produces one :class:`TitleRowInstruction`: the label to show in
the first displayed column, a horizontal merge from the first to the last
displayed column and left alignment.  :func:`grouped_as_flextable` applies
those instructions with :func:`~flextable.table.compose`,
:func:`~flextable.table.merge_h_range` and :func:`~flextable.table.align`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULTS, FlextableDefaults
from ..errors import InvalidInputError
from ..table import FlexTable, align, as_chunk, as_paragraph, compose, flextable, merge_h_range
from ..table.chunks import Paragraph
from ..util.logging import get_logger
from .grouped_data import GroupedData

__all__ = ["TitleRowInstruction", "group_title_instructions", "grouped_as_flextable"]

log = get_logger("flextable.grouping")


@dataclass(frozen=True)
class TitleRowInstruction:
    """Rendering instruction for one title row (0‑based positions)."""

    row: int
    level: int
    group: str
    label: Paragraph
    j1: int
    j2: int
    align: str = "left"


def display_keys(
    grouped: GroupedData,
    col_keys: Optional[Sequence[str]] = None,
    hide_grouplabel: bool = False,
) -> Tuple[str, ...]:
    """Columns displayed for ``grouped``; group columns are dropped when
    their label is hidden."""
    keys = tuple(
        grouped.data.columns if col_keys is None else (str(k) for k in col_keys)
    )
    if hide_grouplabel:
        keys = tuple(k for k in keys if k not in grouped.groups)
    if not keys:
        raise InvalidInputError("no column left to display")
    return keys


def group_title_instructions(
    grouped: GroupedData,
    col_keys: Optional[Sequence[str]] = None,
    hide_grouplabel: bool = False,
    config: FlextableDefaults = DEFAULTS,
) -> List[TitleRowInstruction]:
    """
    Compute the title‑row instructions for ``grouped``.

    Labels read ``"<group>: <value>"``, or just ``"<value>"`` when
    ``hide_grouplabel`` is True.  Instructions are ordered by group level,
    then by row.
    """
    keys = display_keys(grouped, col_keys, hide_grouplabel)
    j2 = len(keys) - 1
    out: List[TitleRowInstruction] = []
    for level, grp in enumerate(grouped.groups):
        rows = [int(r) for r in grouped.is_title(level).nonzero()[0]]
        values = grouped.data[grp]
        for r in rows:
            value = as_chunk(values.iloc[r], config=config)
            if hide_grouplabel:
                label = as_paragraph(value)
            else:
                label = as_paragraph(as_chunk(grp), ": ", value)
            out.append(
                TitleRowInstruction(
                    row=r, level=level, group=grp, label=label, j1=0, j2=j2
                )
            )
    return out


def grouped_as_flextable(
    grouped: GroupedData,
    col_keys: Optional[Sequence[str]] = None,
    hide_grouplabel: bool = False,
    *,
    config: FlextableDefaults = DEFAULTS,
) -> FlexTable:
    """
    Create a flextable from grouped data.

    Parameters
    ----------
    grouped : GroupedData
        Output of :func:`~flextable.grouping.as_grouped_data`.
    col_keys : sequence of str, optional
        Columns to display; defaults to every column of ``grouped.data``
        (group columns first).  Keys absent
        from the data become blank columns.
    hide_grouplabel : bool, default False
        Show only the group value on title rows (and drop group columns
        from the display).
    config : FlextableDefaults, optional
    """
    keys = display_keys(grouped, col_keys, hide_grouplabel)
    ft = flextable(grouped.data, col_keys=keys, config=config)
    instructions = group_title_instructions(grouped, keys, hide_grouplabel, config)
    for level in range(grouped.n_levels):
        batch = [ins for ins in instructions if ins.level == level]
        if not batch:
            continue
        rows = [ins.row for ins in batch]
        ft = compose(ft, i=rows, j=0, value=[ins.label for ins in batch])
        ft = merge_h_range(ft, i=rows, j1=0, j2=len(keys) - 1)
        ft = align(ft, i=rows, align="left")
    log.debug("grouped_as_flextable: %d title rows bound", len(instructions))
    return ft
