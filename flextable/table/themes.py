"""Table themes.  Each theme is a function FlexTable -> FlexTable."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict

from ..errors import InvalidInputError
from .core import Border, FlexTable, fp_border
from .styling import (
    bold,
    border_remove,
    fix_border_issues,
    hline,
    hline_bottom,
    hline_top,
    vline,
)

__all__ = ["theme_booktabs", "theme_box", "theme_vanilla", "get_theme"]


def theme_booktabs(ft: FlexTable) -> FlexTable:
    """Top and bottom rules around the header and a rule below the body."""
    cfg = ft.config
    thick = fp_border(width=2 * cfg.border_width, config=cfg)
    thin = fp_border(width=cfg.border_width, config=cfg)
    ft = border_remove(ft)
    ft = hline_top(ft, border=thick, part="header")
    ft = hline_bottom(ft, border=thin, part="header")
    ft = hline_bottom(ft, border=thick, part="body")
    return fix_border_issues(ft)


def theme_box(ft: FlexTable) -> FlexTable:
    """Every cell boxed."""
    b = fp_border(width=ft.config.border_width, config=ft.config)
    ft = border_remove(ft)
    for part in ("header", "body", "footer"):
        if ft.part(part).nrow:
            ft = hline(ft, border=b, part=part)
            ft = hline_top(ft, border=b, part=part)
            ft = vline(ft, border=b, part=part)
    ft = _left_edge(ft, b)
    ft = bold(ft, part="header")
    return fix_border_issues(ft)


def _left_edge(ft: FlexTable, b: Border) -> FlexTable:
    for part in ("header", "body", "footer"):
        p = ft.part(part)
        if not p.nrow:
            continue
        styles = tuple(
            (replace(row[0], border_left=b),) + row[1:] for row in p.styles
        )
        ft = ft.with_part(part, replace(p, styles=styles))
    return ft


def theme_vanilla(ft: FlexTable) -> FlexTable:
    """Bold header, thick outer rules and thin rules between body rows."""
    cfg = ft.config
    thick = fp_border(width=2 * cfg.border_width, config=cfg)
    thin = fp_border(width=0.5 * cfg.border_width, config=cfg)
    ft = border_remove(ft)
    ft = hline_top(ft, border=thick, part="header")
    ft = hline_bottom(ft, border=thick, part="header")
    if ft.body.nrow:
        ft = hline(ft, border=thin, part="body")
    ft = hline_bottom(ft, border=thick, part="body")
    ft = bold(ft, part="header")
    return fix_border_issues(ft)


_THEMES: Dict[str, Callable[[FlexTable], FlexTable]] = {
    "booktabs": theme_booktabs,
    "box": theme_box,
    "vanilla": theme_vanilla,
    "none": lambda ft: ft,
}


def get_theme(name: str) -> Callable[[FlexTable], FlexTable]:
    try:
        return _THEMES[name]
    except KeyError:
        raise InvalidInputError(f"unknown theme {name!r}") from None
