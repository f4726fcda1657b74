from __future__ import annotations

import pandas as pd
import pytest
from docx import Document
from docx.oxml.ns import qn

from flextable import (
    InvalidInputError,
    as_grouped_data,
    body_add_flextable,
    grouped_as_flextable,
    save_as_docx,
    set_keep_with_next,
    to_html,
    to_latex,
    to_markdown,
)
from flextable.table import add_footer_lines, bold, flextable, hline, merge_v


@pytest.fixture
def ft():
    df = pd.DataFrame(
        {
            "team": ["red", "red", "blue"],
            "player": ["ann", "bob", "cid"],
            "score": [3, 5, 2],
        }
    )
    ft = grouped_as_flextable(as_grouped_data(df, groups=["team"]), hide_grouplabel=True)
    ft = bold(ft, part="header")
    return add_footer_lines(ft, "source: league <2024>")


def test_docx_table_structure(ft) -> None:
    doc = Document()
    table = body_add_flextable(doc, ft)

    assert len(table.rows) == 1 + 5 + 1
    assert table.cell(0, 0).text == "player"
    assert table.cell(1, 0).text == "red"
    # title rows are merged across the table
    assert table.cell(1, 1)._tc is table.cell(1, 0)._tc
    assert table.cell(2, 1).text == "3"
    assert table.cell(6, 0).text == "source: league <2024>"
    assert table.cell(0, 0).paragraphs[0].runs[0].bold is True
    assert table.rows[0]._tr.trPr.find(qn("w:tblHeader")) is not None


def test_docx_keep_with_next_and_split(ft) -> None:
    ft = set_keep_with_next(ft, rows=[0, 3])
    table = body_add_flextable(Document(), ft, split=False)

    def kwn(r):
        return table.cell(r, 0).paragraphs[0].paragraph_format.keep_with_next

    # body rows start after the single header row
    assert kwn(1) is True and kwn(4) is True
    assert kwn(2) is False
    assert all(row._tr.trPr.find(qn("w:cantSplit")) is not None for row in table.rows)

    table = body_add_flextable(Document(), ft, keep_with_next=True)
    assert table.cell(2, 0).paragraphs[0].paragraph_format.keep_with_next is True


def test_docx_row_flag_overrides_keep_with_next_argument(ft) -> None:
    ft = set_keep_with_next(ft, rows=[0], value=False)
    table = body_add_flextable(Document(), ft, keep_with_next=True)

    def kwn(r):
        return table.cell(r, 0).paragraphs[0].paragraph_format.keep_with_next

    assert kwn(1) is False
    # untagged rows follow the argument
    assert kwn(2) is True and kwn(0) is True


def test_docx_vertical_merge_and_borders() -> None:
    df = pd.DataFrame({"k": ["a", "a", "b"], "v": [1, 2, 3]})
    ft = hline(merge_v(flextable(df), j="k"), i=2)
    table = body_add_flextable(Document(), ft, align="left")

    assert table.cell(1, 0)._tc is table.cell(2, 0)._tc
    assert table.cell(1, 0).text == "a"
    borders = table.rows[3]._tr.tc_lst[1].tcPr.find(qn("w:tcBorders"))
    assert borders.find(qn("w:bottom")) is not None

    with pytest.raises(InvalidInputError):
        body_add_flextable(Document(), ft, align="middle")


def test_save_as_docx_round_trip(ft, tmp_path) -> None:
    path = save_as_docx(ft, tmp_path / "table.docx")

    doc = Document(str(path))
    assert len(doc.tables) == 1
    assert doc.tables[0].cell(4, 0).text == "blue"


def test_html(ft) -> None:
    html = to_html(ft)

    assert html.startswith("<table")
    assert html.count("<tr>") == 7
    assert 'colspan="2"' in html
    assert "&lt;2024&gt;" in html
    assert "font-weight:bold" in html
    assert "<thead>" in html and "<tfoot>" in html


def test_html_escapes_text_and_keeps_line_breaks() -> None:
    df = pd.DataFrame({"note": ["<b>a & b</b>", "first\nsecond"]})
    html = to_html(flextable(df))

    assert "&lt;b&gt;a &amp; b&lt;/b&gt;" in html
    assert "<b>" not in html
    assert "first<br>second" in html
    assert html.rstrip().endswith("</table>")


def test_markdown_and_latex(ft) -> None:
    md = to_markdown(ft)
    assert "| player" in md
    assert md.rstrip().endswith("source: league <2024>")

    latex = to_latex(ft)
    assert "\\begin{tabular}" in latex
    assert "red" in latex
