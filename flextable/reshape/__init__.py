"""Data‑reshaping helpers: continuous summaries and cross‑tabulation."""

from .summary import SUMMARY_STATS, continuous_summary, summarise_columns
from .tabulator import Tabulation, tabulation_as_flextable, tabulator, tabulator_colnames

__all__ = [
    "SUMMARY_STATS",
    "continuous_summary",
    "summarise_columns",
    "Tabulation",
    "tabulation_as_flextable",
    "tabulator",
    "tabulator_colnames",
]
