"""Exception types raised by the flextable package.

All errors surface synchronously to the caller.  Invalid arguments are
reported as :class:`InvalidInputError` (a ``ValueError``), unknown column
names as :class:`UnknownColumnError` (also a ``KeyError`` so that
``except KeyError`` code written against pandas keeps working) and absent
optional statistical libraries as :class:`MissingDependencyError`.
"""

from __future__ import annotations

__all__ = [
    "FlextableError",
    "InvalidInputError",
    "UnknownColumnError",
    "MissingDependencyError",
]


class FlextableError(Exception):
    """Base class for every error raised by flextable."""


class InvalidInputError(FlextableError, ValueError):
    """Argument is not tabular, has no columns or is otherwise unusable."""


class UnknownColumnError(InvalidInputError, KeyError):
    """One or more column names are not present in the table."""

    def __init__(self, missing, where: str = "table") -> None:
        self.missing = sorted(str(m) for m in missing)
        self.where = where
        super().__init__(f"{where} is missing required columns: {self.missing}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class MissingDependencyError(FlextableError, ImportError):
    """A companion library required for a conversion is not installed."""

    def __init__(self, package: str, capability: str) -> None:
        self.package = package
        self.capability = capability
        super().__init__(
            f"'{package}' package should be installed to create a flextable "
            f"from an object of type '{capability}'."
        )
