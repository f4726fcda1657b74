"""Utility helpers for the flextable package."""

from .logging import get_logger
from .selectors import parts_of, resolve_cols, resolve_rows

__all__ = ["get_logger", "parts_of", "resolve_cols", "resolve_rows"]
