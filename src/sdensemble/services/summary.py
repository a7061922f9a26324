"""Replicate summaries of long-format ensemble tables.

Values are grouped by (combination_index, time, variable). Within a group,
NaN, missing and infinite values are counted in ``missing_count`` and left
out of every statistic; a group without valid values gets NaN statistics.
Rows with a missing group key are rejected, never dropped.

Statistics per group:
    mean, median, variance (divisor n - 1, NaN for a single value) and one
    column per requested quantile level, using numpy's default linear
    interpolation.

Quantile columns are labelled by :func:`quantile_label`: the level is
written in positional notation and its leading ``"0."`` dropped, so
0.025 -> ``q025``, 0.5 -> ``q5``, 0.975 -> ``q975``. The end points map to
``q0`` and ``q100``.

Rows are sorted by (combination_index, time, variable).
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import structlog

from ..contracts.errors import InvalidQuantileLevel, ValidationError
from ..contracts.types import COMBINATION, GROUP_KEYS, TIME, VALUE, VARIABLE
from ..engine.parallel import run_partitioned

logger = structlog.get_logger()

DEFAULT_QUANTILES: Tuple[float, ...] = (0.025, 0.975)
STAT_COLUMNS: Tuple[str, ...] = ("mean", "median", "variance")
MISSING_COUNT = "missing_count"

GroupKey = Tuple[int, float, str]
Bucket = Tuple[GroupKey, np.ndarray]


def quantile_label(level: Any) -> str:
    """Return the summary column name for a quantile level.

    Raises:
        InvalidQuantileLevel: If the level is not a number in [0, 1]
    """
    try:
        value = float(level)
    except (TypeError, ValueError) as exc:
        raise InvalidQuantileLevel(
            f"Quantile level must be a number, got {level!r}", {"level": level}
        ) from exc

    if not 0.0 <= value <= 1.0:
        raise InvalidQuantileLevel(
            f"Quantile level must lie in [0, 1], got {value}", {"level": value}
        )

    if value == 1.0:
        return "q100"
    text = np.format_float_positional(value, trim="-")
    if text.startswith("0."):
        text = text[2:]
    return f"q{text}"


def validate_quantile_levels(levels: Iterable[Any]) -> Tuple[List[float], List[str]]:
    """Check quantile levels and derive their labels.

    Raises:
        InvalidQuantileLevel: For levels outside [0, 1], non-numeric levels
            or levels sharing a label
    """
    levels = list(levels)
    labels = [quantile_label(level) for level in levels]
    duplicates = sorted({label for label in labels if labels.count(label) > 1})
    if duplicates:
        raise InvalidQuantileLevel(
            f"Quantile levels map to duplicate columns {duplicates}",
            {"levels": levels, "duplicates": duplicates},
        )
    return [float(level) for level in levels], labels


def group_statistics(values: np.ndarray, levels: Sequence[float]) -> Tuple[Any, ...]:
    """Return ``(mean, median, variance, *quantiles, missing_count)`` for one group."""
    values = np.asarray(values, dtype=float)
    valid = values[np.isfinite(values)]
    missing_count = int(values.size - valid.size)

    if valid.size == 0:
        return (np.nan,) * (len(STAT_COLUMNS) + len(levels)) + (missing_count,)

    mean = float(np.mean(valid))
    median = float(np.median(valid))
    variance = float(np.var(valid, ddof=1)) if valid.size > 1 else np.nan
    quantiles = tuple(float(q) for q in np.quantile(valid, levels)) if levels else ()
    return (mean, median, variance) + quantiles + (missing_count,)


def _value_array(long_table: pd.DataFrame) -> np.ndarray:
    try:
        numeric = pd.to_numeric(long_table[VALUE])
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Column '{VALUE}' must be numeric: {exc}") from exc
    return numeric.to_numpy(dtype="float64", na_value=np.nan)


def _group_buckets(long_table: pd.DataFrame) -> List[Bucket]:
    """Split the value column into per-group arrays, sorted by group key."""
    missing = [column for column in (*GROUP_KEYS, VALUE) if column not in long_table.columns]
    if missing:
        raise ValidationError(
            f"Long table is missing columns {missing}",
            {"columns": list(long_table.columns)},
        )

    keyless = long_table[list(GROUP_KEYS)].isna().any(axis=1)
    if keyless.any():
        raise ValidationError(
            f"Long table has {int(keyless.sum())} rows with missing group keys",
            {"rows": long_table.index[keyless].tolist()},
        )

    values = _value_array(long_table)
    if long_table.empty:
        return []

    indices = long_table.groupby(list(GROUP_KEYS), sort=True).indices
    buckets = [
        ((int(key[0]), float(key[1]), str(key[2])), values[positions])
        for key, positions in indices.items()
    ]
    buckets.sort(key=lambda bucket: bucket[0])
    return buckets


def _summary_frame(rows: List[tuple], labels: Sequence[str]) -> pd.DataFrame:
    columns = [COMBINATION, TIME, VARIABLE, *STAT_COLUMNS, *labels, MISSING_COUNT]
    dtypes = {COMBINATION: "int64", TIME: "float64", VARIABLE: "object", MISSING_COUNT: "int64"}
    dtypes.update({column: "float64" for column in (*STAT_COLUMNS, *labels)})

    if rows:
        frame = pd.DataFrame.from_records(rows, columns=columns)
    else:
        frame = pd.DataFrame({column: pd.Series(dtype=dtypes[column]) for column in columns})
    return frame.astype(dtypes)


def _run_summary(
    long_table: pd.DataFrame,
    quantile_levels: Iterable[Any],
    parallel: bool,
    threads: Optional[int] = None,
) -> pd.DataFrame:
    levels, labels = validate_quantile_levels(quantile_levels)
    buckets = _group_buckets(long_table)

    def summarize_chunk(chunk: Sequence[Bucket]) -> List[tuple]:
        return [key + group_statistics(values, levels) for key, values in chunk]

    if not parallel:
        chunks = [summarize_chunk(buckets)]
    else:
        chunks = run_partitioned(summarize_chunk, buckets, threads=threads)

    rows = [row for chunk in chunks for row in chunk]
    summary = _summary_frame(rows, labels)
    logger.info(
        "Summarized ensemble",
        n_rows=len(long_table),
        n_groups=len(summary),
        quantiles=labels,
        n_chunks=len(chunks),
    )
    return summary


def summarize(
    long_table: pd.DataFrame,
    quantile_levels: Iterable[Any] = DEFAULT_QUANTILES,
) -> pd.DataFrame:
    """Summarize replicates per (combination_index, time, variable).

    Args:
        long_table: Long-format table as produced by ``flatten``.
        quantile_levels: Quantile levels in [0, 1], one output column each.

    Returns:
        Summary table with columns ``combination_index``, ``time``,
        ``variable``, ``mean``, ``median``, ``variance``, one ``q<label>``
        column per level (in request order) and ``missing_count``.

    Raises:
        InvalidQuantileLevel: Checked before any grouping work
        ValidationError: If required columns are missing or non-numeric
    """
    return _run_summary(long_table, quantile_levels, parallel=False)


def summarize_parallel(
    long_table: pd.DataFrame,
    quantile_levels: Iterable[Any] = DEFAULT_QUANTILES,
    threads: Optional[int] = None,
) -> pd.DataFrame:
    """Thread-parallel :func:`summarize`.

    Groups are split into contiguous chunks owned by one worker each, and
    every group is reduced by the same routine as the sequential path, so
    the results are identical. ``threads`` defaults to the CPU count.
    """
    return _run_summary(long_table, quantile_levels, parallel=True, threads=threads)
