"""
The flextable grammar.

A :class:`FlexTable` is created from a data frame with :func:`flextable`
and refined by functions that each return a new table:

``content``
    :func:`compose`, :func:`append_chunks`, header/footer rows and column
    formats.
``merge``
    Horizontal, vertical and block merges, keep‑with‑next flags.
``styling``
    Alignments, text properties, borders and widths.
``themes``
    Ready‑made border/weight combinations.
"""

from .chunks import Chunk, Paragraph, as_chunk, as_paragraph, colorize
from .core import Border, CellStyle, FlexTable, TablePart, flextable, fp_border
from .content import (
    add_footer_lines,
    add_footer_row,
    add_header_lines,
    add_header_row,
    append_chunks,
    colformat_char,
    colformat_double,
    colformat_int,
    compose,
    delete_part,
    mk_par,
    set_header_labels,
)
from .merge import merge_at, merge_h_range, merge_none, merge_v, set_keep_with_next
from .styling import (
    align,
    autofit,
    bold,
    border_remove,
    color,
    dim_pretty,
    fix_border_issues,
    fontsize,
    hline,
    hline_bottom,
    hline_top,
    italic,
    set_table_properties,
    valign,
    vline,
    width,
)
from .themes import get_theme, theme_booktabs, theme_box, theme_vanilla

__all__ = [
    "Chunk",
    "Paragraph",
    "as_chunk",
    "as_paragraph",
    "colorize",
    "Border",
    "CellStyle",
    "FlexTable",
    "TablePart",
    "flextable",
    "fp_border",
    "add_footer_lines",
    "add_footer_row",
    "add_header_lines",
    "add_header_row",
    "append_chunks",
    "colformat_char",
    "colformat_double",
    "colformat_int",
    "compose",
    "delete_part",
    "mk_par",
    "set_header_labels",
    "merge_at",
    "merge_h_range",
    "merge_none",
    "merge_v",
    "set_keep_with_next",
    "align",
    "autofit",
    "bold",
    "border_remove",
    "color",
    "dim_pretty",
    "fix_border_issues",
    "fontsize",
    "hline",
    "hline_bottom",
    "hline_top",
    "italic",
    "set_table_properties",
    "valign",
    "vline",
    "width",
    "get_theme",
    "theme_booktabs",
    "theme_box",
    "theme_vanilla",
]
