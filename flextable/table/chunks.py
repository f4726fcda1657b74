"""Text chunks and paragraphs used as cell content."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Tuple, Union

from ..config import DEFAULTS, FlextableDefaults
from ..formatting import format_value

__all__ = ["Chunk", "Paragraph", "as_chunk", "as_paragraph", "colorize"]


@dataclass(frozen=True)
class Chunk:
    """A run of text sharing one set of text properties.

    Properties left as ``None`` inherit from the cell style.
    """

    text: str
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    color: Optional[str] = None
    font_size: Optional[float] = None
    font_family: Optional[str] = None


@dataclass(frozen=True)
class Paragraph:
    chunks: Tuple[Chunk, ...] = ()

    @property
    def text(self) -> str:
        return "".join(c.text for c in self.chunks)

    def __add__(self, other: "Paragraph") -> "Paragraph":
        return Paragraph(self.chunks + other.chunks)


def as_chunk(
    value: Any,
    formatter: Optional[Callable[[Any], str]] = None,
    config: FlextableDefaults = DEFAULTS,
    **props: Any,
) -> Chunk:
    """Build a :class:`Chunk` from a scalar.

    ``formatter`` converts the value to text; without one the default
    type‑based formatting of ``config`` is used.  Remaining keyword
    arguments are chunk properties (``bold``, ``italic``, ``color``,
    ``font_size``, ``font_family``).
    """
    if isinstance(value, Chunk):
        return replace(value, **props) if props else value
    if formatter is not None:
        text = formatter(value)
    elif isinstance(value, str):
        text = value
    else:
        text = format_value(value, config)
    return Chunk(text=text, **props)


def as_paragraph(*parts: Union[str, Chunk, Paragraph]) -> Paragraph:
    chunks: list[Chunk] = []
    for part in parts:
        if isinstance(part, Paragraph):
            chunks.extend(part.chunks)
        elif isinstance(part, Chunk):
            chunks.append(part)
        else:
            chunks.append(Chunk(text=str(part)))
    return Paragraph(tuple(chunks))


def colorize(chunk: Chunk, color: str) -> Chunk:
    return replace(chunk, color=color)
