"""
flextable
=========

Tabular reporting for pandas data frames and statistical results.

A *flextable* is an immutable styled table with a header, a body and a
footer.  It is created from a data frame (or converted from a grouped
table, a cross‑tabulation, a fitted model or a test result) and refined
by pure functions that each return a new table, before being written to
a Word document with python-docx or rendered to HTML, Markdown or LaTeX.

Subpackages and modules
-----------------------

``grouping``
    :func:`as_grouped_data` inserts a title row before each run of
    repeated group values; :func:`grouped_as_flextable` turns those title
    rows into merged, labelled separator rows.

``table``
    The :class:`FlexTable` value and its grammar: content composition,
    merges, styles, borders, widths, themes and pagination flags.

``convert``
    :func:`as_flextable` for data frames, grouped data, tabulations,
    statsmodels OLS/GLM/MixedLM results, scipy.stats tests and k‑means
    fits.

``reshape``
    Continuous summaries and cross‑tabulation.

``render``
    Word, HTML, Markdown and LaTeX output.

Formatting defaults are carried by a :class:`FlextableDefaults` passed
as ``config=``; there is no process‑wide option state.
"""

from . import convert, grouping, render, reshape, table  # noqa: F401  # re-export subpackages
from .config import DEFAULTS, FlextableDefaults
from .convert import ClusterFit, MedoidFit, SourceKind, as_flextable, source_kind
from .errors import (
    FlextableError,
    InvalidInputError,
    MissingDependencyError,
    UnknownColumnError,
)
from .grouping import (
    GroupedData,
    TitleRowInstruction,
    as_grouped_data,
    group_title_instructions,
    grouped_as_flextable,
)
from .reshape import Tabulation, continuous_summary, tabulator, tabulator_colnames
from .render import body_add_flextable, save_as_docx, to_html, to_latex, to_markdown
from .table import FlexTable, flextable, set_keep_with_next

__version__ = "0.1.0"

__all__ = [
    "convert",
    "grouping",
    "render",
    "reshape",
    "table",
    "DEFAULTS",
    "FlextableDefaults",
    "ClusterFit",
    "MedoidFit",
    "SourceKind",
    "as_flextable",
    "source_kind",
    "FlextableError",
    "InvalidInputError",
    "MissingDependencyError",
    "UnknownColumnError",
    "GroupedData",
    "TitleRowInstruction",
    "as_grouped_data",
    "group_title_instructions",
    "grouped_as_flextable",
    "Tabulation",
    "continuous_summary",
    "tabulator",
    "tabulator_colnames",
    "body_add_flextable",
    "save_as_docx",
    "to_html",
    "to_latex",
    "to_markdown",
    "FlexTable",
    "flextable",
    "set_keep_with_next",
]
