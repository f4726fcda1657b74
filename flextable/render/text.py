"""
Text renderings of a flextable: HTML, Markdown and LaTeX.

:func:`to_html` keeps merges (``colspan``/``rowspan``), alignments, text
properties and borders as inline CSS; the markup is rendered from the
jinja2 template ``templates/table.html.j2`` with autoescaping.
:func:`to_markdown` and :func:`to_latex` go through pandas and keep only the displayed text;
footer rows are written as plain lines under the table.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..table import Border, CellStyle, FlexTable
from ..table.chunks import Chunk
from ..table.core import PARTS

__all__ = ["to_html", "to_markdown", "to_latex", "text_frame"]

_TAGS = {"header": ("thead", "th"), "body": ("tbody", "td"), "footer": ("tfoot", "td")}
_VALIGN = {"top": "top", "center": "middle", "bottom": "bottom"}

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(enabled_extensions=("html.j2",)),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _css(props: Dict[str, str]) -> str:
    return ";".join(f"{k}:{v}" for k, v in props.items())


def _border_css(b: Optional[Border]) -> Optional[str]:
    if b is None:
        return None
    if b.width == 0 or b.style == "none":
        return "none"
    return f"{b.width:g}pt {b.style} {b.color}"


def _cell_css(style: CellStyle, padding: float) -> str:
    props = {
        "text-align": style.align,
        "vertical-align": _VALIGN[style.valign],
        "padding": f"{padding:g}pt",
    }
    for edge in ("top", "bottom", "left", "right"):
        css = _border_css(getattr(style, f"border_{edge}"))
        if css is not None:
            props[f"border-{edge}"] = css
    return _css(props)


def _chunk_ctx(chunk: Chunk, style: CellStyle) -> Dict[str, Any]:
    props = {
        "font-family": chunk.font_family or style.font_family,
        "font-size": f"{chunk.font_size or style.font_size:g}pt",
        "color": chunk.color or style.color,
    }
    bold = style.bold if chunk.bold is None else chunk.bold
    italic = style.italic if chunk.italic is None else chunk.italic
    if bold:
        props["font-weight"] = "bold"
    if italic:
        props["font-style"] = "italic"
    return {"css": _css(props), "lines": chunk.text.split("\n")}


def _part_rows(ft: FlexTable, name: str) -> List[List[Dict[str, Any]]]:
    """Anchor cells of each row; cells covered by a merge are left out."""
    p = ft.part(name)
    rows = []
    for i in range(p.nrow):
        cells = []
        for j in range(ft.ncol):
            h, v = p.hspans[i][j], p.vspans[i][j]
            if h == 0 or v == 0:
                continue
            style = p.styles[i][j]
            cells.append(
                {
                    "colspan": h,
                    "rowspan": v,
                    "css": _cell_css(style, ft.config.padding),
                    "chunks": [
                        _chunk_ctx(c, style) for c in ft.cell_paragraph(name, i, j).chunks
                    ],
                }
            )
        rows.append(cells)
    return rows


def to_html(ft: FlexTable) -> str:
    """
    HTML ``<table>`` for ``ft``.

    Cells covered by a merge are omitted; their anchor carries the
    ``colspan``/``rowspan``.  Text is escaped by the template.
    """
    parts = [
        {"section": _TAGS[name][0], "tag": _TAGS[name][1], "rows": _part_rows(ft, name)}
        for name in PARTS
        if ft.part(name).nrow
    ]
    template = _env.get_template("table.html.j2")
    return template.render(widths=[f"{w:g}" for w in ft.widths], parts=parts)


def text_frame(ft: FlexTable) -> pd.DataFrame:
    """
    Displayed body text with one column per displayed column.

    Column labels join the non‑empty header texts of each column from
    top to bottom with a space; labels are made unique by position.
    """
    body = ft.get_text("body")
    header = ft.get_text("header")
    labels: List[str] = []
    for j in range(ft.ncol):
        parts = [t for t in header.iloc[:, j].tolist() if t]
        labels.append(" ".join(parts) if parts else "")
    seen: Dict[str, int] = {}
    unique = []
    for lab in labels:
        n = seen.get(lab, 0)
        unique.append(lab if n == 0 else f"{lab}.{n}")
        seen[lab] = n + 1
    body.columns = unique
    return body


def _footer_lines(ft: FlexTable) -> List[str]:
    footer = ft.get_text("footer")
    return [" ".join(t for t in row if t) for row in footer.itertuples(index=False)]


def to_markdown(ft: FlexTable) -> str:
    """Markdown (pipe) table of the displayed text; needs ``tabulate``."""
    md = text_frame(ft).to_markdown(index=False)
    footer = _footer_lines(ft)
    return md if not footer else md + "\n\n" + "\n".join(footer)


def to_latex(ft: FlexTable) -> str:
    """LaTeX tabular of the displayed text."""
    latex = text_frame(ft).to_latex(index=False, escape=False)
    footer = _footer_lines(ft)
    return latex if not footer else latex + "\n".join(footer) + "\n"
