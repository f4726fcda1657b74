"""
Formatting defaults for flextable objects.

Every function that needs a formatting default (number of digits, font
size, border colour, table layout, ...) takes an explicit ``config``
argument holding a :class:`FlextableDefaults`.  The value is constructed
once at the call site and threaded through; there are no process‑wide
options to set or reset.

Usage
-----
>>> from flextable.config import FlextableDefaults
>>> cfg = FlextableDefaults().update(digits=2, big_mark=",")
>>> ft = flextable(df, config=cfg)
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Tuple

from .errors import InvalidInputError

__all__ = ["FlextableDefaults", "DEFAULTS"]

_LAYOUTS = ("fixed", "autofit")
_THEMES = ("booktabs", "box", "vanilla", "none")


@dataclass(frozen=True)
class FlextableDefaults:
    """
    Formatting defaults applied when a table is created or rendered.

    Parameters
    ----------
    font_family : str, default "Arial"
        Font used by renderers when a chunk does not set its own.
    font_size : float, default 11
        Font size in points.
    font_color : str, default "#000000"
        Default text colour.
    padding : float, default 5
        Cell padding in points (top/bottom/left/right).
    border_color : str, default "#666666"
        Colour used by themes and by the line helpers.
    border_width : float, default 1.0
        Line width in points used by themes and line helpers.
    digits : int, default 2
        Decimal places used for double columns.
    decimal_mark, big_mark : str
        Decimal and thousands separators.
    na_str, nan_str : str
        Text shown for missing values and for floating NaN.
    table_layout : {"fixed", "autofit"}
        ``fixed`` uses the widths computed by :func:`autofit`; ``autofit``
        lets the renderer size columns.
    theme : {"booktabs", "box", "vanilla", "none"}
        Theme applied by the data frame printers.
    signif_breaks : tuple of float
        Upper bounds of the p‑value classes shown as ``***``, ``**``,
        ``*`` and ``.``.
    """

    font_family: str = "Arial"
    font_size: float = 11.0
    font_color: str = "#000000"
    padding: float = 5.0
    border_color: str = "#666666"
    border_width: float = 1.0
    digits: int = 2
    decimal_mark: str = "."
    big_mark: str = ""
    na_str: str = ""
    nan_str: str = ""
    table_layout: str = "fixed"
    theme: str = "booktabs"
    signif_breaks: Tuple[float, ...] = (0.001, 0.01, 0.05, 0.1)

    def __post_init__(self) -> None:
        if self.table_layout not in _LAYOUTS:
            raise InvalidInputError(
                f"table_layout must be one of {_LAYOUTS}, got {self.table_layout!r}"
            )
        if self.theme not in _THEMES:
            raise InvalidInputError(f"theme must be one of {_THEMES}, got {self.theme!r}")
        if self.digits < 0:
            raise InvalidInputError("digits must be non‑negative")
        if len(self.signif_breaks) != 4 or list(self.signif_breaks) != sorted(
            self.signif_breaks
        ):
            raise InvalidInputError("signif_breaks must be four increasing thresholds")

    def update(self, **changes: Any) -> "FlextableDefaults":
        """Return a copy with ``changes`` applied."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise InvalidInputError(f"unknown defaults: {sorted(unknown)}")
        return replace(self, **changes)


DEFAULTS = FlextableDefaults()
