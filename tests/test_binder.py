from __future__ import annotations

import pandas as pd
import pytest

from flextable import (
    InvalidInputError,
    as_flextable,
    as_grouped_data,
    group_title_instructions,
    grouped_as_flextable,
)


@pytest.fixture
def grouped():
    df = pd.DataFrame(
        {
            "species": ["setosa", "setosa", "virginica"],
            "length": [5.1, 4.9, 6.3],
            "width": [3.5, 3.0, 3.3],
        }
    )
    return as_grouped_data(df, groups=["species"])


def test_instructions_cover_every_title_row(grouped) -> None:
    ins = group_title_instructions(grouped)

    assert [i.row for i in ins] == [0, 3]
    assert [i.label.text for i in ins] == ["species: setosa", "species: virginica"]
    assert all(i.j1 == 0 and i.j2 == 2 for i in ins)
    assert all(i.align == "left" for i in ins)


def test_hidden_label_drops_group_column(grouped) -> None:
    ins = group_title_instructions(grouped, hide_grouplabel=True)

    assert [i.label.text for i in ins] == ["setosa", "virginica"]
    assert all(i.j2 == 1 for i in ins)


def test_no_group_columns_no_instructions() -> None:
    g = as_grouped_data(pd.DataFrame({"x": [1, 2]}), groups=[])
    assert group_title_instructions(g) == []

    ft = grouped_as_flextable(g)
    assert ft.get_text()["x"].tolist() == ["1", "2"]


def test_title_rows_are_merged_and_labelled(grouped) -> None:
    ft = grouped_as_flextable(grouped)

    assert ft.col_keys == ("species", "length", "width")
    for r in (0, 3):
        assert ft.body.hspans[r] == (3, 0, 0)
        assert all(s.align == "left" for s in ft.body.styles[r])
    assert ft.body.hspans[1] == (1, 1, 1)

    text = ft.get_text()
    assert text.iloc[0].tolist() == ["species: setosa", "", ""]
    assert text.iloc[1].tolist() == ["", "5.10", "3.50"]


def test_explicit_col_keys(grouped) -> None:
    ft = grouped_as_flextable(grouped, col_keys=["width", "length"], hide_grouplabel=True)

    assert ft.col_keys == ("width", "length")
    assert ft.body.hspans[0] == (2, 0)
    assert ft.get_text().iloc[0, 0] == "setosa"


def test_nothing_left_to_display(grouped) -> None:
    with pytest.raises(InvalidInputError):
        grouped_as_flextable(grouped, col_keys=["species"], hide_grouplabel=True)


def test_dispatch_and_determinism(grouped) -> None:
    a = as_flextable(grouped, hide_grouplabel=True)
    b = as_flextable(grouped, hide_grouplabel=True)

    assert a.body.hspans == b.body.hspans
    pd.testing.assert_frame_equal(a.get_text(), b.get_text())
    assert group_title_instructions(grouped) == group_title_instructions(grouped)
