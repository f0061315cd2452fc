from __future__ import annotations

import warnings
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from .constants import BINARY_OUTCOME_VALUES


def _validate_required_columns(
    df: pd.DataFrame,
    required_columns: Iterable[str],
    *,
    context: str,
) -> None:
    """Raise if any column needed for `context` is absent from the trial table."""
    required = list(dict.fromkeys(required_columns))
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(
            f"Missing required columns for {context}: {missing}. "
            f"Found columns: {list(df.columns)}"
        )


def _coerce_numeric_columns(
    df: pd.DataFrame,
    columns: Iterable[str],
    *,
    context: str,
) -> pd.DataFrame:
    """Return a copy with `columns` cast to numbers; unparseable entries become NaN."""
    out = df.copy()
    for col in columns:
        coerced = pd.to_numeric(out[col], errors="coerce")
        n_unparsed = int((coerced.isna() & out[col].notna()).sum())
        if n_unparsed > 0:
            warnings.warn(
                f"{n_unparsed} non-numeric values in '{col}' read as NaN during {context}.",
                RuntimeWarning,
                stacklevel=3,
            )
        out[col] = coerced
    return out


def _drop_non_finite_rows(
    df: pd.DataFrame,
    numeric_columns: Sequence[str],
    *,
    context: str,
) -> pd.DataFrame:
    """Keep the rows whose `numeric_columns` are all finite.

    The warning lists how many entries were non-finite per column, so a cue
    filtered on its own reports only its own gaps.
    """
    cols = list(numeric_columns)
    finite = np.isfinite(df[cols].to_numpy(dtype=float))
    keep = finite.all(axis=1)
    n_dropped = int((~keep).sum())
    if n_dropped == 0:
        return df

    per_column = {col: int((~finite[:, i]).sum()) for i, col in enumerate(cols)}
    warnings.warn(
        f"Dropping {n_dropped} rows with non-finite values during {context} "
        f"(per column: {per_column}).",
        RuntimeWarning,
        stacklevel=3,
    )
    return df.loc[keep]


def _as_outcome_matrix(outcomes: object) -> np.ndarray:
    """Return outcomes as a float T x C matrix; 1-D input is a single cue.

    A float ndarray that is already two-dimensional is returned as is, so
    converting twice costs nothing. Values are not range-checked here.
    Non-numeric input raises whatever NumPy raises for the float conversion.
    """
    matrix = np.asarray(outcomes, dtype=float)
    if matrix.ndim == 0:
        matrix = matrix.reshape(1, 1)
    elif matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    return matrix


def _warn_on_non_binary_outcomes(outcomes: np.ndarray) -> None:
    """Warn when binary outcomes contain values other than 0 and 1."""
    values = np.asarray(outcomes, dtype=float)
    valid_mask = np.isin(values, BINARY_OUTCOME_VALUES)
    if not bool(np.all(valid_mask)):
        invalid_values = np.unique(values[~valid_mask]).tolist()
        warnings.warn(
            "Binary outcomes are expected in {0, 1}; "
            f"processing unexpected values as given: {invalid_values}",
            RuntimeWarning,
            stacklevel=3,
        )
