"""Resampling of trajectories onto a common time grid.

Adaptive-step solvers report different time points for each run, which
would leave every (combination, time, variable) group with a single
replicate. Interpolating each series onto one grid first makes the
replicate summaries meaningful.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
import pandas as pd
from scipy.interpolate import interp1d

from ..contracts.errors import ValidationError
from ..contracts.types import COMBINATION, LONG_COLUMNS, REPLICATE, TIME, VALUE, VARIABLE

ArrayLike = Union[Sequence[float], np.ndarray]


def resample(times: ArrayLike, values: ArrayLike, new_times: ArrayLike) -> np.ndarray:
    """Evaluate a linear interpolant of ``values`` at ``new_times``.

    Outside the sampled range the nearest sampled value is returned. Input
    points need not be sorted.

    Example:
        >>> resample([0.0, 1.0, 2.0], [10.0, 20.0, 30.0], [0.5, 1.5, 3.0])
        array([15., 25., 30.])
    """
    t = np.asarray(times, dtype=float)
    y = np.asarray(values, dtype=float)
    new_t = np.asarray(new_times, dtype=float)

    if t.shape != y.shape or t.ndim != 1:
        raise ValidationError(
            f"times and values must be 1-d and of equal length, got {t.shape} and {y.shape}"
        )
    if t.size == 0:
        raise ValidationError("Cannot resample an empty series")
    if t.size == 1:
        return np.full(new_t.shape, y[0])

    order = np.argsort(t, kind="stable")
    t, y = t[order], y[order]
    interpolant = interp1d(
        t, y,
        kind="linear",
        bounds_error=False,
        fill_value=(y[0], y[-1]),
        assume_sorted=True,
    )
    return interpolant(new_t)


def resample_long_table(long_table: pd.DataFrame, new_times: ArrayLike) -> pd.DataFrame:
    """Resample every (combination, replicate, variable) series of a long table.

    Returns a long table with the same columns whose ``time`` column takes
    exactly the values of ``new_times`` for every series.
    """
    new_t = np.asarray(new_times, dtype=float)
    if new_t.ndim != 1:
        raise ValidationError("new_times must be one-dimensional")

    pieces = []
    keys = [COMBINATION, REPLICATE, VARIABLE]
    for (combination, replicate, variable), series in long_table.groupby(keys, sort=True):
        pieces.append(
            pd.DataFrame({
                COMBINATION: combination,
                REPLICATE: replicate,
                TIME: new_t,
                VARIABLE: variable,
                VALUE: resample(series[TIME].to_numpy(), series[VALUE].to_numpy(), new_t),
            })
        )

    if not pieces:
        return long_table.iloc[0:0][list(LONG_COLUMNS)].copy()
    result = pd.concat(pieces, ignore_index=True)
    return result[list(LONG_COLUMNS)].astype({c: long_table[c].dtype for c in LONG_COLUMNS})
