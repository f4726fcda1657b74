from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from flextable import (
    InvalidInputError,
    UnknownColumnError,
    as_flextable,
    continuous_summary,
    tabulator,
    tabulator_colnames,
)
from flextable.reshape import summarise_columns


@pytest.fixture
def measures() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "grp": ["a", "a", "b", "b"],
            "x": [1.0, 2.0, 3.0, np.nan],
            "y": [1, 2, 3, 4],
            "label": ["p", "q", "r", "s"],
        }
    )


def test_summarise_columns_statistics(measures) -> None:
    agg = summarise_columns(measures, by=["grp"])

    assert agg[["variable", "grp"]].values.tolist() == [
        ["x", "a"],
        ["x", "b"],
        ["y", "a"],
        ["y", "b"],
    ]
    xb = agg.iloc[1]
    assert xb["N"] == 2 and xb["NAS"] == 1
    assert xb["MIN"] == 3.0 and xb["MAX"] == 3.0
    assert np.isnan(xb["SD"])
    assert agg.iloc[2]["MEAN"] == pytest.approx(1.5)
    assert agg.iloc[0]["MAD"] == pytest.approx(0.5 * 1.482602218505602)


def test_summarise_columns_validation(measures) -> None:
    with pytest.raises(UnknownColumnError):
        summarise_columns(measures, by=["nope"])
    with pytest.raises(InvalidInputError):
        summarise_columns(measures, columns=["label"])
    with pytest.raises(InvalidInputError):
        summarise_columns(measures[["label"]])


def test_continuous_summary_layout(measures) -> None:
    ft = continuous_summary(measures, by=["grp"])

    assert ft.col_keys[0] == "grp"
    assert "variable" not in ft.col_keys
    assert ft.body.nrow == 6
    text = ft.get_text()
    assert text["grp"].tolist() == ["x", "a", "b", "y", "a", "b"]
    assert text["N"].tolist()[1:3] == ["2", "2"]
    assert text["MEAN"].iloc[1] == "1.500"
    assert ft.get_text("header").iloc[0].tolist()[:3] == ["grp", "N", "min."]

    # separator rows
    assert ft.body.hspans[0][0] == len(ft.col_keys)
    assert all(s.italic for s in ft.body.styles[3])
    assert ft.body.styles[0][0].border_bottom.width == 0.5
    # rule after the grouping column
    assert ft.body.styles[1][0].border_right is not None


def test_continuous_summary_without_groups(measures) -> None:
    ft = continuous_summary(measures, columns=["y"], hide_grouplabel=False)

    assert ft.col_keys[0] == "variable"
    assert ft.get_text().iloc[0, 0] == "variable: y"
    assert ft.body.nrow == 2


@pytest.fixture
def long() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "row": ["r1", "r1", "r1", "r2", "r2", "r2"],
            "g": ["A", "A", "B", "A", "A", "B"],
            "h": ["x", "y", "x", "x", "y", "x"],
            "val": [1, 2, 3, 4, 5, 6],
        }
    )


def test_tabulator_spreads_values(long) -> None:
    ct = tabulator(long, rows=["row"], columns=["g", "h"], value="val")

    assert ct.value_keys == ("val@A|x", "val@A|y", "val@B|x")
    assert ct.data["val@A|y"].tolist() == [2, 5]
    assert tabulator_colnames(ct) == list(ct.value_keys)
    assert tabulator_colnames(ct, {"g": "A"}) == ["val@A|x", "val@A|y"]
    with pytest.raises(UnknownColumnError):
        tabulator_colnames(ct, {"zz": 1})


def test_tabulator_validation(long) -> None:
    with pytest.raises(InvalidInputError):
        tabulator(long, rows=["row"], columns=["g"], value="val")
    with pytest.raises(UnknownColumnError):
        tabulator(long, rows=["row"], columns=["g", "h"], value="nope")
    with pytest.raises(InvalidInputError):
        tabulator(long, rows=[], columns=["g"], value="val")


def test_tabulator_hidden_data(long) -> None:
    extra = pd.DataFrame({"row": ["r1", "r2"], "kind": ["first", "second"]})
    ct = tabulator(long, rows=["row"], columns=["g", "h"], value="val", hidden_data=extra)

    assert ct.hidden == ("kind",)
    assert ct.data["kind"].tolist() == ["first", "second"]


def test_tabulation_headers(long) -> None:
    ct = tabulator(long, rows=["row"], columns=["g", "h"], value="val")
    ft = as_flextable(ct)

    assert ft.col_keys == ("row",) + ct.value_keys
    header = ft.get_text("header")
    assert header.iloc[0].tolist() == ["", "A", "", "B"]
    assert header.iloc[1].tolist() == ["row", "x", "y", "x"]
    assert ft.header.hspans[0] == (1, 2, 0, 1)
    assert ft.get_text()["val@B|x"].tolist() == ["3", "6"]
    assert ft.body.styles[0][1].align == "center"
