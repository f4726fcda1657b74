"""Resolution of row (``i``) and column (``j``) selectors to positions.

Row selectors accept ``None`` (all rows), an int position, a row label
string, a sequence of those, a boolean mask (list, array or Series) of
the part's length, or a callable receiving the part's data frame and
returning such a mask.  Column selectors accept ``None``, an int
position, a column key or a sequence of those.  Positions are 0‑based.
"""

from __future__ import annotations

from typing import Any, List, Sequence

import numpy as np
import pandas as pd

from ..errors import InvalidInputError, UnknownColumnError

__all__ = ["resolve_rows", "resolve_cols", "parts_of"]


def _is_bool_mask(values: Sequence[Any]) -> bool:
    return len(values) > 0 and all(isinstance(v, (bool, np.bool_)) for v in values)


def resolve_rows(i: Any, dataset: pd.DataFrame, nrow: int) -> List[int]:
    if i is None:
        return list(range(nrow))
    if callable(i):
        i = i(dataset)
    if isinstance(i, pd.Series):
        i = i.tolist()
    elif isinstance(i, np.ndarray):
        i = i.tolist()
    if isinstance(i, (bool, np.bool_)):
        raise InvalidInputError("a single boolean is not a valid row selector")
    if isinstance(i, (int, np.integer, str)):
        i = [i]
    values = list(i)
    if _is_bool_mask(values):
        if len(values) != nrow:
            raise InvalidInputError(
                f"boolean row selector has length {len(values)}, expected {nrow}"
            )
        return [k for k, flag in enumerate(values) if flag]
    out: List[int] = []
    labels = list(dataset.index) if dataset is not None else []
    for v in values:
        if isinstance(v, str):
            if v not in labels:
                raise InvalidInputError(f"unknown row label {v!r}")
            out.append(labels.index(v))
        elif isinstance(v, (int, np.integer)) and not isinstance(v, (bool, np.bool_)):
            pos = int(v)
            if pos < 0 or pos >= nrow:
                raise InvalidInputError(f"row {pos} out of range [0, {nrow})")
            out.append(pos)
        else:
            raise InvalidInputError(f"invalid row selector element {v!r}")
    return sorted(set(out))


def resolve_cols(j: Any, col_keys: Sequence[str]) -> List[int]:
    ncol = len(col_keys)
    if j is None:
        return list(range(ncol))
    if isinstance(j, (int, np.integer, str)):
        j = [j]
    out: List[int] = []
    missing = []
    for v in j:
        if isinstance(v, str):
            if v not in col_keys:
                missing.append(v)
                continue
            out.append(list(col_keys).index(v))
        elif isinstance(v, (int, np.integer)) and not isinstance(v, (bool, np.bool_)):
            pos = int(v)
            if pos < 0 or pos >= ncol:
                raise InvalidInputError(f"column {pos} out of range [0, {ncol})")
            out.append(pos)
        else:
            raise InvalidInputError(f"invalid column selector element {v!r}")
    if missing:
        raise UnknownColumnError(missing, where="col_keys")
    return sorted(set(out))


def parts_of(part: str, allowed: Sequence[str] = ("header", "body", "footer")) -> List[str]:
    if part == "all":
        return list(allowed)
    if part not in allowed:
        raise InvalidInputError(f"part must be one of {list(allowed) + ['all']}, got {part!r}")
    return [part]


