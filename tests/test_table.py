from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from flextable import FlextableDefaults, InvalidInputError, UnknownColumnError
from flextable.table import (
    add_footer_lines,
    add_footer_row,
    add_header_row,
    align,
    append_chunks,
    as_chunk,
    as_paragraph,
    autofit,
    bold,
    colformat_char,
    colformat_double,
    colformat_int,
    colorize,
    compose,
    delete_part,
    dim_pretty,
    fix_border_issues,
    flextable,
    fp_border,
    hline,
    merge_at,
    merge_h_range,
    merge_none,
    merge_v,
    set_header_labels,
    set_keep_with_next,
    set_table_properties,
    theme_booktabs,
    theme_box,
    width,
)


@pytest.fixture
def df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "name": ["alpha", "alpha", "beta", "gamma"],
            "count": [1, 2000, 3, 4],
            "ratio": [0.5, np.nan, 1.25, 2.0],
            "flag": [True, False, True, False],
        }
    )


def test_flextable_defaults(df) -> None:
    ft = flextable(df)

    assert ft.col_keys == ("name", "count", "ratio", "flag")
    assert ft.header.nrow == 1 and ft.body.nrow == 4 and ft.footer.nrow == 0
    assert ft.get_text("header").iloc[0].tolist() == ["name", "count", "ratio", "flag"]
    assert ft.get_text().iloc[0].tolist() == ["alpha", "1", "0.50", "TRUE"]
    assert ft.get_text()["ratio"].iloc[1] == ""
    # numbers are right aligned, in the header too
    assert ft.body.styles[0][1].align == "right"
    assert ft.header.styles[0][1].align == "right"
    assert ft.body.styles[0][3].align == "left"


def test_missing_col_keys_become_blank_columns(df) -> None:
    ft = flextable(df, col_keys=["name", "extra"])
    assert ft.get_text()["extra"].tolist() == ["", "", "", ""]


def test_flextable_rejects_bad_input(df) -> None:
    with pytest.raises(InvalidInputError):
        flextable([1, 2])
    with pytest.raises(InvalidInputError):
        flextable(df, col_keys=["name", "name"])


def test_functional_updates_leave_original_untouched(df) -> None:
    ft = flextable(df)
    bolded = bold(ft, j="name")

    assert not ft.body.styles[0][0].bold
    assert bolded.body.styles[0][0].bold
    assert ft.body.dataset is bolded.body.dataset


def test_compose_with_callable_uses_hidden_columns(df) -> None:
    ft = flextable(df, col_keys=["name", "count"])
    ft = compose(
        ft,
        j="name",
        value=lambda row: as_paragraph(as_chunk(row["name"], bold=True), f" ({row['ratio']})"),
    )

    assert ft.get_text()["name"].iloc[2] == "beta (1.25)"
    assert ft.body.content[0][0].chunks[0].bold is True


def test_compose_row_selectors(df) -> None:
    ft = flextable(df)
    ft = compose(ft, i=lambda d: d["count"] > 2, j=0, value="big")
    assert ft.get_text()["name"].tolist() == ["alpha", "big", "big", "big"]

    ft = compose(ft, i=[True, False, False, False], j="name", value="first")
    assert ft.get_text()["name"].iloc[0] == "first"

    ft = compose(ft, i=[0, 1], j="flag", value=["x", "y"])
    assert ft.get_text()["flag"].tolist()[:2] == ["x", "y"]

    with pytest.raises(InvalidInputError):
        compose(ft, i=[0, 1], j="flag", value=["x", "y", "z"])
    with pytest.raises(InvalidInputError):
        compose(ft, i=10, j=0, value="x")
    with pytest.raises(InvalidInputError):
        compose(ft, i=[True, False], j=0, value="x")
    with pytest.raises(UnknownColumnError):
        compose(ft, j="missing", value="x")


def test_append_chunks_extends_displayed_text(df) -> None:
    ft = flextable(df)
    ft = append_chunks(ft, "%", j="ratio", i=0)
    assert ft.get_text()["ratio"].iloc[0] == "0.50%"


def test_colformat_only_fills_default_cells(df) -> None:
    ft = flextable(df)
    ft = compose(ft, i=0, j="ratio", value="kept")
    ft = colformat_double(ft, j="ratio", digits=3, na_str="n/a")
    ft = colformat_int(ft, j="count", big_mark=",")

    text = ft.get_text()
    assert text["ratio"].tolist() == ["kept", "", "1.250", "2.000"]
    assert text["count"].tolist() == ["1", "2,000", "3", "4"]


def test_colformat_double_na_string() -> None:
    ft = flextable(pd.DataFrame({"x": [np.nan, 1.0]}))
    ft = colformat_double(ft, na_str="-", nan_str="-")
    assert ft.get_text()["x"].tolist() == ["-", "1.00"]


def test_header_labels_and_rows(df) -> None:
    ft = flextable(df)
    ft = set_header_labels(ft, {"count": "N"}, ratio="Ratio")
    ft = add_header_row(ft, values=["", "numbers", ""], colwidths=[1, 2, 1])

    header = ft.get_text("header")
    assert header.iloc[1].tolist() == ["name", "N", "Ratio", "flag"]
    assert header.iloc[0].tolist() == ["", "numbers", "", ""]
    assert ft.header.hspans[0] == (1, 2, 0, 1)

    with pytest.raises(InvalidInputError):
        add_header_row(ft, values=["a", "b"], colwidths=[1, 1])


def test_footer_lines_and_delete_part(df) -> None:
    ft = add_footer_lines(flextable(df), ["note 1", "note 2"])

    assert ft.footer.nrow == 2
    assert ft.footer.hspans[0] == (4, 0, 0, 0)
    assert ft.get_text("footer").iloc[1, 0] == "note 2"

    ft = delete_part(ft, "header")
    assert ft.header.nrow == 0
    with pytest.raises(InvalidInputError):
        delete_part(ft, "body")


def test_merge_h_range_and_overlap(df) -> None:
    ft = merge_h_range(flextable(df), i=0, j1=0, j2=1)
    assert ft.body.hspans[0] == (2, 0, 1, 1)

    ft = merge_h_range(ft, i=0, j1=1, j2="flag")
    assert ft.body.hspans[0] == (1, 3, 0, 0)

    ft = merge_none(ft)
    assert ft.body.hspans[0] == (1, 1, 1, 1)


def test_merge_v_groups_identical_text(df) -> None:
    ft = merge_v(flextable(df), j="name")

    assert [row[0] for row in ft.body.vspans] == [2, 0, 1, 1]
    assert ft.get_text()["name"].tolist() == ["alpha", "", "beta", "gamma"]

    with pytest.raises(InvalidInputError):
        merge_h_range(ft, i=1, j1=0, j2=1)


def test_merge_at_block(df) -> None:
    ft = merge_at(flextable(df), i=[1, 2], j=["count", "ratio"])

    assert ft.body.hspans[1][1:3] == (2, 0)
    assert ft.body.vspans[1][1:3] == (2, 0)
    assert ft.body.hspans[2][1:3] == (0, 0)
    with pytest.raises(InvalidInputError):
        merge_at(ft, i=[0, 2], j=0)


def test_keep_with_next_flags(df) -> None:
    ft = flextable(df)
    assert ft.body.keep_with_next == (None,) * 4

    ft = set_keep_with_next(ft, rows=[0, 2])
    assert ft.body.keep_with_next == (True, None, True, None)

    ft = set_keep_with_next(ft, rows=[True, True, False, False], value=False)
    assert ft.body.keep_with_next == (False, False, True, None)


def test_styles_and_borders(df) -> None:
    ft = flextable(df)
    ft = align(ft, j="name", align="center", part="all")
    ft = hline(ft, i=0, border=fp_border(width=2, color="#FF0000"))
    ft = fix_border_issues(ft)

    assert ft.header.styles[0][0].align == "center"
    assert ft.body.styles[0][0].border_bottom.width == 2.0
    assert ft.body.styles[1][0].border_top.color == "#FF0000"

    with pytest.raises(InvalidInputError):
        align(ft, align="middle")
    with pytest.raises(InvalidInputError):
        fp_border(width=-1)


def test_themes(df) -> None:
    ft = theme_booktabs(flextable(df))
    assert ft.header.styles[0][0].border_top.width == 2.0
    assert ft.body.styles[-1][0].border_bottom.width == 2.0
    assert ft.body.styles[0][0].border_bottom is None

    ft = theme_box(flextable(df))
    assert all(s.border_left is not None for row in ft.body.styles for s in row)
    assert all(s.bold for s in ft.header.styles[0])


def test_widths_and_autofit(df) -> None:
    ft = width(flextable(df), j="name", width=2)
    assert ft.widths[0] == 2.0
    with pytest.raises(InvalidInputError):
        width(ft, j=["name", "count"], width=[1.0])

    dims = dim_pretty(ft)
    assert len(dims["widths"]) == 4 and len(dims["heights"]) == 5

    fitted = autofit(ft)
    assert fitted.widths[0] > 0.1
    assert set_table_properties(fitted, layout="autofit").layout == "autofit"
    with pytest.raises(InvalidInputError):
        set_table_properties(fitted, layout="auto")


def test_config_threads_through(df) -> None:
    cfg = FlextableDefaults().update(digits=1, decimal_mark=",")
    ft = flextable(df, config=cfg)
    assert ft.get_text()["ratio"].iloc[2] == "1,2"

    with pytest.raises(InvalidInputError):
        FlextableDefaults().update(colour="red")


def test_text_columns_and_footer_rows(df) -> None:
    ft = colformat_char(flextable(df), j="name", prefix="<", suffix=">")
    assert ft.get_text()["name"].iloc[0] == "<alpha>"

    ft = add_footer_row(ft, values=["total", 2007, "", ""])
    assert ft.get_text("footer").iloc[0].tolist() == ["total", "2007", "", ""]
    assert ft.footer.styles[0][0].align == "left"

    red = colorize(as_chunk("x"), "#FF0000")
    ft = compose(ft, i=0, j="flag", value=as_paragraph(red))
    assert ft.body.content[0][3].chunks[0].color == "#FF0000"
