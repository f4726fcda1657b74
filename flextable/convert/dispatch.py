"""
Conversion of supported objects to flextables.

The supported inputs form a closed set, listed in :class:`SourceKind`.
:func:`source_kind` classifies an object with explicit type checks and
:func:`as_flextable` calls the converter registered for that kind.

Usage
-----
>>> ft = as_flextable(df, max_row=5)
>>> ft = as_flextable(sm.OLS(y, X).fit())
>>> ft = as_flextable(as_grouped_data(df, groups=["g"]), hide_grouplabel=True)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict

import pandas as pd

from ..config import DEFAULTS, FlextableDefaults
from ..errors import InvalidInputError
from ..grouping import GroupedData, grouped_as_flextable
from ..reshape.tabulator import Tabulation, tabulation_as_flextable
from ..table import FlexTable
from ..util.logging import get_logger
from .clusters import ClusterFit, MedoidFit, kmeans_as_flextable, pam_as_flextable
from .frames import dataframe_as_flextable
from .models import (
    glm_as_flextable,
    htest_as_flextable,
    lm_as_flextable,
    mixed_as_flextable,
    require,
)

__all__ = ["SourceKind", "source_kind", "as_flextable"]

log = get_logger("flextable.convert")


class SourceKind(Enum):
    DATAFRAME = "dataframe"
    GROUPED = "grouped"
    TABULATION = "tabulation"
    OLS = "ols"
    GLM = "glm"
    MIXED = "mixed"
    HTEST = "htest"
    CLUSTER = "cluster"
    MEDOID = "medoid"


def _root_module(x: Any) -> str:
    return type(x).__module__.split(".")[0]


def _statsmodels_kind(x: Any) -> SourceKind:
    require("statsmodels", type(x).__name__)
    from statsmodels.genmod.generalized_linear_model import GLMResults
    from statsmodels.regression.linear_model import RegressionResults
    from statsmodels.regression.mixed_linear_model import MixedLMResults

    res = getattr(x, "_results", x)
    if isinstance(res, GLMResults):
        return SourceKind.GLM
    if isinstance(res, MixedLMResults):
        return SourceKind.MIXED
    if isinstance(res, RegressionResults):
        return SourceKind.OLS
    raise InvalidInputError(
        f"unsupported statsmodels result {type(x).__name__}; "
        "expected a regression, GLM or mixed linear model result"
    )


def source_kind(x: Any) -> SourceKind:
    """
    Classify ``x`` into one of the supported input kinds.

    Raises
    ------
    InvalidInputError
        ``x`` is of no supported kind.
    """
    if isinstance(x, pd.DataFrame):
        return SourceKind.DATAFRAME
    if isinstance(x, GroupedData):
        return SourceKind.GROUPED
    if isinstance(x, Tabulation):
        return SourceKind.TABULATION
    if isinstance(x, ClusterFit):
        return SourceKind.CLUSTER
    if isinstance(x, MedoidFit):
        return SourceKind.MEDOID
    root = _root_module(x)
    if root == "statsmodels":
        return _statsmodels_kind(x)
    if root == "scipy" and hasattr(x, "statistic") and hasattr(x, "pvalue"):
        return SourceKind.HTEST
    raise InvalidInputError(f"cannot create a flextable from an object of type {type(x).__name__}")


_CONVERTERS: Dict[SourceKind, Callable[..., FlexTable]] = {
    SourceKind.DATAFRAME: dataframe_as_flextable,
    SourceKind.GROUPED: grouped_as_flextable,
    SourceKind.TABULATION: tabulation_as_flextable,
    SourceKind.OLS: lm_as_flextable,
    SourceKind.GLM: glm_as_flextable,
    SourceKind.MIXED: mixed_as_flextable,
    SourceKind.HTEST: htest_as_flextable,
    SourceKind.CLUSTER: kmeans_as_flextable,
    SourceKind.MEDOID: pam_as_flextable,
}


def as_flextable(x: Any, *, config: FlextableDefaults = DEFAULTS, **kwargs: Any) -> FlexTable:
    """
    Create a flextable from a supported object.

    Parameters
    ----------
    x : object
        A DataFrame, :class:`~flextable.grouping.GroupedData`,
        :class:`~flextable.reshape.Tabulation`, :class:`ClusterFit`,
        :class:`MedoidFit`, a
        statsmodels OLS/GLM/MixedLM result or a scipy.stats test result.
    config : FlextableDefaults, optional
    **kwargs
        Passed to the converter of the kind of ``x``.
    """
    kind = source_kind(x)
    log.debug("as_flextable: converting %s", kind.value)
    return _CONVERTERS[kind](x, config=config, **kwargs)
