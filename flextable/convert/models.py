"""
Tables of statistical results.

Fitted statsmodels results (ordinary least squares, generalised linear
and linear mixed models) and scipy.stats test results are turned into
coefficient tables with significance codes and a footer of fit
statistics.

Notes
-----
The statistical libraries are imported on first use.  When one is not
installed a :class:`~flextable.errors.MissingDependencyError` names the
package and the kind of object that needed it.
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..config import DEFAULTS, FlextableDefaults
from ..errors import MissingDependencyError
from ..formatting import SIGNIF_LEGEND, format_fun, pvalue_format
from ..grouping import as_grouped_data, grouped_as_flextable
from ..table import (
    FlexTable,
    add_footer_lines,
    align,
    append_chunks,
    as_chunk,
    autofit,
    colformat_double,
    compose,
    flextable,
    italic,
    set_header_labels,
    width,
)

__all__ = [
    "require",
    "tidy_regression",
    "tidy_mixed",
    "tidy_htest",
    "lm_as_flextable",
    "glm_as_flextable",
    "mixed_as_flextable",
    "htest_as_flextable",
]

COEF_KEYS = ["term", "estimate", "std.error", "statistic", "p.value", "signif"]


def require(package: str, capability: str) -> ModuleType:
    """Import ``package`` or raise :class:`MissingDependencyError`."""
    try:
        return importlib.import_module(package)
    except ImportError as exc:
        raise MissingDependencyError(package, capability) from exc


def _results(x: Any) -> Any:
    """Unwrap a statsmodels results wrapper."""
    return getattr(x, "_results", x)


def _stat(value: Any, digits: int = 4, config: FlextableDefaults = DEFAULTS) -> str:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return "NA"
    if not np.isfinite(v):
        return "NA"
    return format_fun(v, digits=digits, config=config)


def tidy_regression(res: Any) -> pd.DataFrame:
    """Coefficient table of a statsmodels regression or GLM result."""
    res = _results(res)
    return pd.DataFrame(
        {
            "term": [str(n) for n in res.model.exog_names],
            "estimate": np.asarray(res.params, dtype=float),
            "std.error": np.asarray(res.bse, dtype=float),
            "statistic": np.asarray(res.tvalues, dtype=float),
            "p.value": np.asarray(res.pvalues, dtype=float),
        }
    )


def _coef_table(
    data_t: pd.DataFrame, stat_label: str, p_label: str, config: FlextableDefaults
) -> FlexTable:
    ft = flextable(data_t, col_keys=COEF_KEYS, config=config)
    ft = colformat_double(ft, j=["estimate", "std.error", "statistic"], digits=3)
    ft = colformat_double(ft, j="p.value", digits=4)
    ft = compose(
        ft, j="signif", value=lambda row: pvalue_format(row["p.value"], config)
    )
    return set_header_labels(
        ft,
        {
            "term": "",
            "estimate": "Estimate",
            "std.error": "Standard Error",
            "statistic": stat_label,
            "p.value": p_label,
            "signif": "",
        },
    )


def _finish_model(ft: FlexTable, lines: List[str]) -> FlexTable:
    ft = add_footer_lines(ft, [SIGNIF_LEGEND, ""] + lines)
    ft = align(ft, i=0, align="right", part="footer")
    ft = italic(ft, i=0, part="footer")
    ft = autofit(ft, part=["header", "body"])
    return width(ft, j="signif", width=0.4)


def lm_as_flextable(x: Any, *, config: FlextableDefaults = DEFAULTS) -> FlexTable:
    """
    Coefficient table of an ordinary least squares fit.

    Parameters
    ----------
    x : statsmodels RegressionResults (or its wrapper)

    Returns
    -------
    FlexTable
        Columns term, estimate, std.error, statistic, p.value and
        significance code; the footer gives the residual standard error,
        R-squared and F-statistic.
    """
    require("statsmodels", "OLS")
    res = _results(x)
    ft = _coef_table(tidy_regression(res), "t value", "Pr(>|t|)", config)
    lines = [
        f"Residual standard error: {_stat(np.sqrt(res.scale), config=config)} "
        f"on {res.df_resid:.0f} degrees of freedom",
        f"Multiple R-squared: {_stat(res.rsquared, config=config)}, "
        f"Adjusted R-squared: {_stat(res.rsquared_adj, config=config)}",
        f"F-statistic: {_stat(res.fvalue, config=config)} on {res.df_model:.0f} "
        f"and {res.df_resid:.0f} DF, p-value: {_stat(res.f_pvalue, config=config)}",
    ]
    return _finish_model(ft, lines)


def glm_as_flextable(x: Any, *, config: FlextableDefaults = DEFAULTS) -> FlexTable:
    """
    Coefficient table of a generalised linear model fit.

    The footer gives the dispersion parameter and the null and residual
    deviances with their degrees of freedom.
    """
    require("statsmodels", "GLM")
    res = _results(x)
    ft = _coef_table(tidy_regression(res), "z value", "Pr(>|z|)", config)
    family = type(res.model.family).__name__.lower()
    df_null = res.nobs - res.model.k_constant
    lines = [
        f"(Dispersion parameter for {family} family taken to be "
        f"{_stat(res.scale, config=config)})",
        f"Null deviance: {_stat(res.null_deviance, config=config)} "
        f"on {df_null:.0f} degrees of freedom",
        f"Residual deviance: {_stat(res.deviance, config=config)} "
        f"on {res.df_resid:.0f} degrees of freedom",
    ]
    return _finish_model(ft, lines)


def tidy_mixed(res: Any) -> pd.DataFrame:
    """
    Fixed and random effects of a statsmodels linear mixed model.

    Random effects are given as standard deviations (``sd__`` terms) of
    the group level effects and of the residual.
    """
    res = _results(res)
    k_fe = int(res.k_fe)
    fe_names = [str(n) for n in res.fe_params.index]
    fixed = pd.DataFrame(
        {
            "effect": "fixed",
            "group": None,
            "term": fe_names,
            "estimate": np.asarray(res.fe_params, dtype=float),
            "std.error": np.asarray(res.bse_fe, dtype=float),
            "statistic": np.asarray(res.tvalues, dtype=float)[:k_fe],
            "p.value": np.asarray(res.pvalues, dtype=float)[:k_fe],
        }
    )
    cov_re = res.cov_re
    re_terms = [str(n) for n in cov_re.index]
    sds = np.sqrt(np.diag(np.asarray(cov_re, dtype=float)))
    random = pd.DataFrame(
        {
            "effect": "ran_pars",
            "group": ["Group"] * len(re_terms) + ["Residual"],
            "term": [f"sd__{t}" for t in re_terms] + ["sd__Observation"],
            "estimate": list(sds) + [float(np.sqrt(res.scale))],
            "std.error": np.nan,
            "statistic": np.nan,
            "p.value": np.nan,
        }
    )
    return pd.concat([fixed, random], ignore_index=True)


def mixed_as_flextable(x: Any, *, config: FlextableDefaults = DEFAULTS) -> FlexTable:
    """
    Table of a linear mixed model: fixed effects, then random effect
    standard deviations, each introduced by a centred separator row.
    """
    require("statsmodels", "MixedLM")
    res = _results(x)
    data_t = tidy_mixed(res)
    col_keys = ["effect", "group"] + COEF_KEYS
    grouped = as_grouped_data(data_t, groups=["effect"])
    ft = grouped_as_flextable(
        grouped, col_keys=col_keys, hide_grouplabel=True, config=config
    )
    ft = colformat_double(ft, j=["estimate", "std.error", "statistic"], digits=3)
    ft = colformat_double(ft, j="p.value", digits=4)
    ft = compose(
        ft,
        i=~grouped.is_title(),
        j="signif",
        value=lambda row: pvalue_format(row["p.value"], config),
    )
    ft = set_header_labels(
        ft,
        {
            "group": "",
            "term": "",
            "estimate": "Estimate",
            "std.error": "Standard Error",
            "statistic": "z value",
            "p.value": "Pr(>|z|)",
            "signif": "",
        },
    )
    ft = align(ft, i=grouped.is_title(), align="center")
    lines = [
        f"square root of the estimated residual variance: "
        f"{_stat(np.sqrt(res.scale), config=config)}",
        f"data's log-likelihood under the model: {_stat(res.llf, config=config)}",
        f"Akaike Information Criterion: {_stat(res.aic, config=config)}",
        f"Bayesian Information Criterion: {_stat(res.bic, config=config)}",
    ]
    return _finish_model(ft, lines)


def tidy_htest(
    x: Any,
    estimate: Optional[float] = None,
    method: Optional[str] = None,
    alternative: Optional[str] = None,
) -> pd.DataFrame:
    """One‑row table of a scipy.stats test result.

    Degrees of freedom and confidence intervals are included when the
    result provides them.
    """
    rec: Dict[str, Any] = {}
    if estimate is not None:
        rec["estimate"] = float(estimate)
    rec["statistic"] = float(np.asarray(x.statistic, dtype=float))
    rec["p.value"] = float(np.asarray(x.pvalue, dtype=float))
    param = getattr(x, "df", getattr(x, "dof", None))
    if param is not None:
        rec["parameter"] = float(np.asarray(param, dtype=float))
    if callable(getattr(x, "confidence_interval", None)):
        try:
            ci = x.confidence_interval()
        except (TypeError, ValueError):
            ci = None
        if ci is not None:
            rec["conf.low"] = float(ci.low)
            rec["conf.high"] = float(ci.high)
    if method is not None:
        rec["method"] = method
    if alternative is not None:
        rec["alternative"] = str(alternative)
    return pd.DataFrame([rec])


def htest_as_flextable(
    x: Any,
    estimate: Optional[float] = None,
    method: Optional[str] = None,
    alternative: Optional[str] = None,
    *,
    config: FlextableDefaults = DEFAULTS,
) -> FlexTable:
    """
    Table of a hypothesis test result.

    Parameters
    ----------
    x : scipy.stats result
        Any result exposing ``statistic`` and ``pvalue``.
    estimate, method, alternative : optional
        Shown when given; scipy results do not always carry them.
    """
    require("scipy", "htest")
    data_t = tidy_htest(x, estimate=estimate, method=method, alternative=alternative)
    ft = flextable(data_t, config=config)
    ft = colformat_double(ft, j="p.value", digits=4)
    ft = colformat_double(ft)
    ft = append_chunks(
        ft, lambda row: as_chunk(pvalue_format(row["p.value"], config)), j="p.value"
    )
    ft = add_footer_lines(ft, SIGNIF_LEGEND)
    ft = align(ft, part="footer", align="right")
    ft = italic(ft, part="footer")
    return autofit(ft)
