"""Grouped data construction and its binding to flextables."""

from .binder import TitleRowInstruction, group_title_instructions, grouped_as_flextable
from .grouped_data import GroupedData, as_grouped_data

__all__ = [
    "GroupedData",
    "as_grouped_data",
    "TitleRowInstruction",
    "group_title_instructions",
    "grouped_as_flextable",
]
