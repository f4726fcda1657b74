"""
Word output through python-docx.

:func:`body_add_flextable` appends a flextable to a
:class:`docx.document.Document`; :func:`save_as_docx` writes a new
document holding a single table.

Notes
-----
Merges are applied before content is written so that python-docx does
not concatenate the text of covered cells.  Borders, row pagination
flags and header repetition have no python-docx API and are written as
raw ``w:`` elements.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

from docx import Document
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT, WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls, qn
from docx.shared import Inches, Pt, RGBColor

from ..errors import InvalidInputError
from ..table import Border, CellStyle, FlexTable
from ..table.chunks import Chunk, Paragraph
from ..table.core import PARTS, TablePart
from ..util.logging import get_logger

__all__ = ["body_add_flextable", "save_as_docx"]

log = get_logger("flextable.render")

_TABLE_ALIGN = {
    "left": WD_TABLE_ALIGNMENT.LEFT,
    "center": WD_TABLE_ALIGNMENT.CENTER,
    "right": WD_TABLE_ALIGNMENT.RIGHT,
}
_PAR_ALIGN = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}
_VALIGN = {
    "top": WD_CELL_VERTICAL_ALIGNMENT.TOP,
    "center": WD_CELL_VERTICAL_ALIGNMENT.CENTER,
    "bottom": WD_CELL_VERTICAL_ALIGNMENT.BOTTOM,
}
_BORDER_VAL = {
    "solid": "single",
    "dashed": "dashed",
    "dotted": "dotted",
    "double": "double",
    "none": "nil",
}


def _rgb(color: str) -> RGBColor:
    return RGBColor.from_string(color.lstrip("#").upper()[:6])


def set_cell_border(tc: Any, **edges: Border) -> None:
    """Write ``w:tcBorders`` of a ``w:tc`` element for the given edges
    (top, bottom, left, right)."""
    tc_pr = tc.get_or_add_tcPr()
    borders = tc_pr.find(qn("w:tcBorders"))
    if borders is None:
        borders = parse_xml(f"<w:tcBorders {nsdecls('w')}/>")
        tc_pr.append(borders)
    for edge, b in edges.items():
        old = borders.find(qn(f"w:{edge}"))
        if old is not None:
            borders.remove(old)
        # sz is in eighths of a point
        size = max(int(round(b.width * 8)), 0)
        val = _BORDER_VAL[b.style] if b.width > 0 else "nil"
        borders.append(
            parse_xml(
                f'<w:{edge} {nsdecls("w")} w:val="{val}" w:sz="{size}" '
                f'w:space="0" w:color="{b.color.lstrip("#").upper()[:6]}"/>'
            )
        )


def _grid_tc(tr: Any, j: int) -> Any:
    """The ``w:tc`` element of a row covering grid column ``j``."""
    pos = 0
    for tc in tr.tc_lst:
        pos += tc.grid_span
        if j < pos:
            return tc
    raise IndexError(j)


def _edges(p: TablePart, i: int, j: int, ncol: int) -> dict:
    """Borders of position (i, j) that belong to its ``w:tc`` element.

    Cells covered by a horizontal merge share the element of their
    anchor; only the first position writes the left edge and only the
    last writes the right edge.
    """
    style = p.styles[i][j]
    first = p.hspans[i][j] != 0
    last = j + 1 == ncol or p.hspans[i][j + 1] != 0
    edges = {"top": style.border_top, "bottom": style.border_bottom}
    if first:
        edges["left"] = style.border_left
    if last:
        edges["right"] = style.border_right
    return {k: b for k, b in edges.items() if b is not None}


def _row_flag(row: Any, tag: str) -> None:
    tr_pr = row._tr.get_or_add_trPr()
    if tr_pr.find(qn(f"w:{tag}")) is None:
        tr_pr.append(parse_xml(f"<w:{tag} {nsdecls('w')}/>"))


def _write_chunks(par: Any, content: Paragraph, style: CellStyle) -> None:
    for chunk in content.chunks:
        run = par.add_run(chunk.text)
        _run_props(run, chunk, style)


def _run_props(run: Any, chunk: Chunk, style: CellStyle) -> None:
    run.bold = style.bold if chunk.bold is None else chunk.bold
    run.italic = style.italic if chunk.italic is None else chunk.italic
    run.font.size = Pt(chunk.font_size or style.font_size)
    run.font.name = chunk.font_family or style.font_family
    run.font.color.rgb = _rgb(chunk.color or style.color)


def _rows(ft: FlexTable) -> List[Tuple[str, TablePart, int]]:
    return [(name, ft.part(name), i) for name in PARTS for i in range(ft.part(name).nrow)]


def body_add_flextable(
    doc: Any,
    ft: FlexTable,
    align: str = "center",
    keep_with_next: bool = False,
    split: bool = True,
) -> Any:
    """
    Append ``ft`` to a python-docx document.

    Parameters
    ----------
    doc : docx.document.Document
    ft : FlexTable
    align : {"left", "center", "right"}
        Table alignment on the page.
    keep_with_next : bool, default False
        Keep every row with the next one.  Rows tagged with
        :func:`~flextable.table.set_keep_with_next` use their own value
        instead.
    split : bool, default True
        If False, a row may not break across pages.

    Returns
    -------
    docx.table.Table
    """
    if align not in _TABLE_ALIGN:
        raise InvalidInputError(f"align must be one of {tuple(_TABLE_ALIGN)}, got {align!r}")
    rows = _rows(ft)
    if not rows:
        raise InvalidInputError("cannot render a flextable without rows")

    table = doc.add_table(rows=len(rows), cols=ft.ncol)
    table.alignment = _TABLE_ALIGN[align]
    table.autofit = ft.layout == "autofit"
    for j, w in enumerate(ft.widths):
        table.columns[j].width = Inches(w)
        for cell in table.columns[j].cells:
            cell.width = Inches(w)

    for r, (_, p, i) in enumerate(rows):
        for j in range(ft.ncol):
            h, v = p.hspans[i][j], p.vspans[i][j]
            if h > 0 and v > 0 and (h > 1 or v > 1):
                table.cell(r, j).merge(table.cell(r + v - 1, j + h - 1))

    n_header = ft.header.nrow
    for r, (name, p, i) in enumerate(rows):
        row = table.rows[r]
        if not split:
            _row_flag(row, "cantSplit")
        if r < n_header:
            _row_flag(row, "tblHeader")
        flag = p.keep_with_next[i]
        kwn = keep_with_next if flag is None else flag
        for j in range(ft.ncol):
            style = p.styles[i][j]
            set_cell_border(_grid_tc(row._tr, j), **_edges(p, i, j, ft.ncol))
            if p.hspans[i][j] == 0 or p.vspans[i][j] == 0:
                continue
            cell = table.cell(r, j)
            cell.vertical_alignment = _VALIGN[style.valign]
            par = cell.paragraphs[0]
            par.alignment = _PAR_ALIGN[style.align]
            par.paragraph_format.keep_with_next = kwn
            _write_chunks(par, ft.cell_paragraph(name, i, j), style)
    return table


def save_as_docx(ft: FlexTable, path: str | Path, align: str = "center") -> Path:
    """Write ``ft`` to a new Word document at ``path``."""
    path = Path(path)
    doc = Document()
    body_add_flextable(doc, ft, align=align)
    doc.save(str(path))
    log.info("save_as_docx: wrote %d x %d table to %s", len(_rows(ft)), ft.ncol, path)
    return path
