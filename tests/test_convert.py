from __future__ import annotations

import unittest

import numpy as np
import pandas as pd
import pytest
import statsmodels.api as sm
import statsmodels.formula.api as smf
from scipy import stats  # type: ignore[import-not-found]
from scipy.cluster.vq import kmeans2  # type: ignore[import-not-found]

from flextable import (
    ClusterFit,
    InvalidInputError,
    MedoidFit,
    MissingDependencyError,
    SourceKind,
    as_flextable,
    source_kind,
)
from flextable.convert.models import require


def test_dataframe_multirow_printer() -> None:
    df = pd.DataFrame(
        {
            "id": np.arange(12),
            "score": np.linspace(0.0, 1.1, 12),
            "whole": np.arange(12, dtype=float),
            "name.long": ["abcdefghij"] * 12,
        }
    )
    ft = as_flextable(df, split_colnames=True, short_strings=True, short_size=4)

    assert ft.body.nrow == 10
    assert ft.get_text("footer").iloc[0, 0] == "n: 12"
    header = ft.get_text("header")
    assert header.iloc[0].tolist() == ["id", "score", "whole", "name\nlong"]
    assert header.iloc[1].tolist()[:3] == ["int64", "float64", "float64"]
    assert ft.header.styles[1][0].color == "#999999"

    body = ft.get_text()
    assert body["whole"].iloc[3] == "3"
    assert body["score"].iloc[1] == "0.10"
    assert body["name.long"].iloc[0] == "abcd..."


def test_dataframe_short_table_has_no_footer() -> None:
    ft = as_flextable(pd.DataFrame({"a": [1, 2]}), show_coltype=False)
    assert ft.footer.nrow == 0
    assert ft.header.nrow == 1


def test_dataframe_single_row_printer() -> None:
    ft = as_flextable(pd.DataFrame({"a": [1], "b": ["text"]}))

    assert ft.col_keys == ("Col.", "Val.")
    assert ft.header.nrow == 0
    text = ft.get_text()
    assert text["Col."].iloc[0] == "a\nint64"
    assert text["Col."].iloc[1].startswith("b\n")
    assert text["Val."].tolist() == ["1", "text"]
    assert ft.body.styles[0][0].align == "right"


@pytest.fixture
def regression_data() -> pd.DataFrame:
    rng = np.random.default_rng(42)
    x = rng.normal(size=200)
    g = np.repeat(np.arange(20), 10)
    u = rng.normal(scale=0.5, size=20)[g]
    y = 1.0 + 2.0 * x + u + rng.normal(scale=0.3, size=200)
    yb = (y + rng.normal(size=200) > 1.0).astype(float)
    return pd.DataFrame({"x": x, "y": y, "yb": yb, "g": g})


def test_ols_table(regression_data) -> None:
    X = sm.add_constant(regression_data[["x"]])
    res = sm.OLS(regression_data["y"], X).fit()

    assert source_kind(res) is SourceKind.OLS
    ft = as_flextable(res)
    body = ft.get_text()
    assert body["term"].tolist() == ["const", "x"]
    assert body["signif"].iloc[1] == "***"
    header = ft.get_text("header").iloc[0].tolist()
    assert header == ["", "Estimate", "Standard Error", "t value", "Pr(>|t|)", ""]
    footer = ft.get_text("footer")["term"].tolist()
    assert footer[0].startswith("Signif. codes")
    assert footer[2].startswith("Residual standard error:")
    assert "198 degrees of freedom" in footer[2]
    assert footer[4].startswith("F-statistic:")


def test_glm_table(regression_data) -> None:
    X = sm.add_constant(regression_data[["x"]])
    res = sm.GLM(regression_data["yb"], X, family=sm.families.Binomial()).fit()

    assert source_kind(res) is SourceKind.GLM
    ft = as_flextable(res)
    assert ft.get_text("header").iloc[0, 3] == "z value"
    footer = ft.get_text("footer")["term"].tolist()
    assert "binomial family" in footer[2]
    assert footer[3].startswith("Null deviance:")
    assert "199 degrees of freedom" in footer[3]


def test_mixed_model_table(regression_data) -> None:
    res = smf.mixedlm("y ~ x", regression_data, groups=regression_data["g"]).fit()

    assert source_kind(res) is SourceKind.MIXED
    ft = as_flextable(res)
    assert "effect" not in ft.col_keys
    body = ft.get_text()
    assert body.iloc[0, 0] == "fixed"
    assert body["term"].tolist()[1:3] == ["Intercept", "x"]
    assert body.iloc[3, 0] == "ran_pars"
    assert body["term"].iloc[-1] == "sd__Observation"
    assert ft.body.styles[0][0].align == "center"
    assert ft.body.hspans[3][0] == len(ft.col_keys)
    footer = ft.get_text("footer")["group"].tolist()
    assert footer[-1].startswith("Bayesian Information Criterion:")


def test_htest_table() -> None:
    rng = np.random.default_rng(0)
    res = stats.ttest_ind(rng.normal(size=50), rng.normal(loc=1.0, size=50))

    assert source_kind(res) is SourceKind.HTEST
    ft = as_flextable(res, method="Two Sample t-test")
    assert ft.body.nrow == 1
    assert {"statistic", "p.value", "parameter", "method"} <= set(ft.col_keys)
    assert ft.get_text()["p.value"].iloc[0].endswith("***")
    assert ft.get_text()["parameter"].iloc[0] == "98.00"


class TestClusterFit(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(3)
        blob_a = rng.normal(loc=0.0, scale=0.2, size=(15, 2))
        blob_b = rng.normal(loc=5.0, scale=0.2, size=(15, 2))
        self.data = pd.DataFrame(np.vstack([blob_a, blob_b]), columns=["u", "v"])
        start = np.array([[0.0, 0.0], [5.0, 5.0]])
        centroids, labels = kmeans2(self.data.to_numpy(), start, minit="matrix")
        self.fit = ClusterFit.from_kmeans2(self.data, centroids, labels, iterations=10)

    def test_sums_of_squares(self):
        self.assertEqual(int(self.fit.size.sum()), 30)
        self.assertAlmostEqual(
            self.fit.betweenss + self.fit.tot_withinss, self.fit.totss
        )
        self.assertGreater(self.fit.betweenss / self.fit.totss, 0.9)

    def test_table(self):
        self.assertIs(source_kind(self.fit), SourceKind.CLUSTER)
        ft = as_flextable(self.fit)
        body = ft.get_text()
        self.assertEqual(body["variable"].tolist(), ["withinss", "size", "u*", "v*"])
        self.assertEqual(ft.get_text("header").iloc[0].tolist()[1:], ["1", "2"])
        sizes = sorted(int(body[k].iloc[1]) for k in ft.col_keys[1:])
        self.assertEqual(sizes, [15, 15])
        footer = ft.get_text("footer")["variable"].tolist()
        self.assertEqual(footer[0], "(*) Centers")
        self.assertEqual(footer[-1], "Number of iterations: 10")
        self.assertTrue(footer[4].startswith("BSS/TSS ratio:"))
        self.assertTrue(footer[4].endswith("%"))

    def test_rejects_mismatched_labels(self):
        with self.assertRaises(InvalidInputError):
            ClusterFit.from_kmeans2(self.data, self.fit.centers, self.fit.labels[:-1])


class TestMedoidFit(unittest.TestCase):
    def setUp(self):
        self.data = pd.DataFrame(
            {"x": [0.0, 0.0, 1.0, 10.0, 10.0, 11.0], "y": [0.0, 1.0, 0.0, 10.0, 11.0, 10.0]}
        )
        self.fit = MedoidFit.from_medoids(self.data, medoids=[0, 3])

    def test_cluster_statistics(self):
        self.assertEqual(self.fit.labels.tolist(), [0, 0, 0, 1, 1, 1])
        info = self.fit.cluster_info()
        self.assertEqual(info["size"].tolist(), [3.0, 3.0])
        np.testing.assert_allclose(info["max.diss"], [1.0, 1.0])
        np.testing.assert_allclose(info["avg.diss"], [2 / 3, 2 / 3])
        np.testing.assert_allclose(info["diameter"], [np.sqrt(2), np.sqrt(2)])
        np.testing.assert_allclose(info["separation"], [np.sqrt(181), np.sqrt(181)])
        self.assertTrue((self.fit.silhouette > 0.8).all())
        self.assertAlmostEqual(
            info["avg.width"].mean(), self.fit.avg_silhouette_width
        )

    def test_table(self):
        self.assertIs(source_kind(self.fit), SourceKind.MEDOID)
        ft = as_flextable(self.fit)
        body = ft.get_text()
        self.assertEqual(
            body["variable"].tolist(),
            ["x*", "y*", "size", "max.diss", "avg.diss", "diameter", "separation", "avg.width"],
        )
        self.assertEqual(body.iloc[0].tolist()[1:], ["0", "10"])
        self.assertEqual(body.iloc[2].tolist()[1:], ["3", "3"])
        footer = ft.get_text("footer")["variable"].tolist()
        self.assertEqual(footer[0], "(*) Centers")
        self.assertTrue(footer[1].startswith("The average silhouette width is 0."))

    def test_singleton_cluster_has_zero_width(self):
        fit = MedoidFit.from_medoids(self.data, medoids=[0, 3], labels=[0, 0, 0, 1, 1, 1])
        self.assertEqual(fit.labels.tolist(), self.fit.labels.tolist())
        lonely = pd.DataFrame({"x": [0.0, 0.5, 9.0], "y": [0.0, 0.0, 9.0]})
        fit = MedoidFit.from_medoids(lonely, medoids=[0, 2])
        self.assertEqual(fit.silhouette[2], 0.0)
        self.assertEqual(fit.size.tolist(), [2, 1])

    def test_rejects_bad_medoids(self):
        with self.assertRaises(InvalidInputError):
            MedoidFit.from_medoids(self.data, medoids=[0])
        with self.assertRaises(InvalidInputError):
            MedoidFit.from_medoids(self.data, medoids=[0, 0])
        with self.assertRaises(InvalidInputError):
            MedoidFit.from_medoids(self.data, medoids=[0, 3], labels=[1, 0, 0, 1, 1, 1])


def test_unsupported_objects() -> None:
    with pytest.raises(InvalidInputError):
        as_flextable(object())
    with pytest.raises(InvalidInputError):
        source_kind([1, 2, 3])


def test_missing_dependency_message() -> None:
    with pytest.raises(MissingDependencyError) as err:
        require("surely_not_installed_pkg", "lme")
    assert isinstance(err.value, ImportError)
    assert "'surely_not_installed_pkg' package should be installed" in str(err.value)
    assert "'lme'" in str(err.value)
