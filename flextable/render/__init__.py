"""Rendering: Word documents through python-docx, and text formats."""

from .word import body_add_flextable, save_as_docx
from .text import text_frame, to_html, to_latex, to_markdown

__all__ = [
    "body_add_flextable",
    "save_as_docx",
    "text_frame",
    "to_html",
    "to_latex",
    "to_markdown",
]
