"""Flattening of ensemble run outputs into long-format (tidy) tables.

Run ``k`` (0-based) belongs to combination ``k // replicates + 1`` and is
replicate ``k % replicates + 1`` of it, so runs must arrive
combination-major, replicate-minor.

Variable labels come from the declared names. Positions beyond the
declared names fall back to 1-based labels: ``var_<n>`` for state series
and ``int_var_<n>`` for intermediary series.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import pandas as pd
import structlog

from ..contracts.errors import MalformedRunOutput, ValidationError
from ..contracts.types import (
    LONG_COLUMNS,
    VALUE_COLUMNS,
    Record,
    Vector,
    classify_state,
    coerce_run_output,
)
from ..domain.quantity import is_numeric_like, to_float
from ..engine.parallel import run_partitioned
from .intermediaries import NormalizedIntermediary, normalize_intermediaries

logger = structlog.get_logger()

STATE_FALLBACK_PREFIX = "var_"
INTERMEDIARY_FALLBACK_PREFIX = "int_var_"

_LONG_DTYPES = {
    "combination_index": "int64",
    "replicate_index": "int64",
    "time": "float64",
    "variable": "object",
    "value": "float64",
}
_VALUE_DTYPES = {
    "combination_index": "int64",
    "replicate_index": "int64",
    "variable": "object",
    "value": "float64",
}


class FlattenedEnsemble(NamedTuple):
    """Tables produced by :func:`flatten`."""

    timeseries: pd.DataFrame
    parameters: pd.DataFrame
    initial_values: pd.DataFrame


@dataclass
class _TableParts:
    """Row buffers owned by a single worker."""

    long_rows: List[Tuple[int, int, float, str, float]] = field(default_factory=list)
    parameter_rows: List[Tuple[int, int, str, float]] = field(default_factory=list)
    initial_rows: List[Tuple[int, int, str, float]] = field(default_factory=list)


def run_indices(run_index: int, replicates_per_combination: int) -> Tuple[int, int]:
    """Return the 1-based (combination_index, replicate_index) of a run."""
    combination, replicate = divmod(run_index, replicates_per_combination)
    return combination + 1, replicate + 1


def _resolve_values(state: Any, names: Sequence[str], fallback_prefix: str) -> List[Tuple[str, Any]]:
    """Bind a state value to variable names according to its shape."""
    shape = classify_state(state)

    if isinstance(shape, Record):
        if not names:
            return list(shape.fields.items())
        missing = [name for name in names if name not in shape.fields]
        if missing:
            raise KeyError(f"record is missing declared variables {missing}")
        return [(name, shape.fields[name]) for name in names]

    if isinstance(shape, Vector):
        return [
            (names[pos] if pos < len(names) else f"{fallback_prefix}{pos + 1}", value)
            for pos, value in enumerate(shape.values)
        ]

    return [(names[0] if names else f"{fallback_prefix}1", shape.value)]


def _series_rows(
    combination: int,
    replicate: int,
    times: Sequence[Any],
    values: Sequence[Any],
    names: Sequence[str],
    fallback_prefix: str,
) -> Iterable[Tuple[int, int, float, str, float]]:
    if len(times) != len(values):
        raise ValueError(f"{len(times)} time points but {len(values)} values")

    for raw_time, state in zip(times, values):
        time = to_float(raw_time)
        if not math.isfinite(time):
            raise ValueError(f"time points must be finite, got {time}")
        for name, raw_value in _resolve_values(state, names, fallback_prefix):
            # Callables are parameter placeholders, never time series data
            if callable(raw_value):
                continue
            yield combination, replicate, time, name, to_float(raw_value)


def extract_parameters(parameters: Any) -> List[Tuple[str, float]]:
    """Return ``(name, value)`` pairs for the numeric entries of a parameter set.

    Records keep their field names, unnamed sequences are labelled
    ``p1, p2, ...`` by position and a lone scalar is ``p1``. Non-numeric
    entries (callables, interpolators, strings, None, nested sequences)
    are dropped.
    """
    if parameters is None:
        return []

    shape = classify_state(parameters)
    if isinstance(shape, Record):
        items = list(shape.fields.items())
    elif isinstance(shape, Vector):
        items = [(f"p{pos}", value) for pos, value in enumerate(shape.values, start=1)]
    else:
        items = [("p1", shape.value)]

    return [(name, to_float(value)) for name, value in items if is_numeric_like(value)]


def extract_initial_values(initial: Any, names: Sequence[str]) -> List[Tuple[str, float]]:
    """Return ``(name, value)`` pairs for an initial condition."""
    if initial is None:
        return []
    return [
        (name, to_float(value))
        for name, value in _resolve_values(initial, names, STATE_FALLBACK_PREFIX)
        if not callable(value)
    ]


def _flatten_run(
    run_index: int,
    raw_run: Any,
    variable_names: Sequence[str],
    intermediary: Optional[NormalizedIntermediary],
    intermediary_names: Sequence[str],
    replicates_per_combination: int,
    parts: _TableParts,
) -> None:
    combination, replicate = run_indices(run_index, replicates_per_combination)
    series = "run"
    try:
        run = coerce_run_output(raw_run)

        series = "states"
        parts.long_rows.extend(
            _series_rows(
                combination, replicate, run.times, run.states,
                variable_names, STATE_FALLBACK_PREFIX,
            )
        )

        if intermediary is not None and not intermediary.is_empty():
            series = "intermediaries"
            parts.long_rows.extend(
                _series_rows(
                    combination, replicate, intermediary.times, intermediary.values,
                    intermediary_names, INTERMEDIARY_FALLBACK_PREFIX,
                )
            )

        series = "parameters"
        parts.parameter_rows.extend(
            (combination, replicate, name, value)
            for name, value in extract_parameters(run.parameters)
        )

        series = "initial"
        parts.initial_rows.extend(
            (combination, replicate, name, value)
            for name, value in extract_initial_values(run.initial, variable_names)
        )
    except (TypeError, ValueError, KeyError) as exc:
        raise MalformedRunOutput(
            f"Run {run_index} (combination {combination}, replicate {replicate}) "
            f"has malformed {series}: {exc}",
            {
                "run_index": run_index,
                "combination_index": combination,
                "replicate_index": replicate,
                "series": series,
            },
        ) from exc


def _as_names(names: Union[str, Sequence[Any], None]) -> List[str]:
    if names is None:
        return []
    if isinstance(names, str):
        return [names]
    return [str(name) for name in names]


def _prepare(
    run_outputs: Sequence[Any],
    variable_names: Union[str, Sequence[Any], None],
    intermediaries: Optional[Sequence[Any]],
    intermediary_names: Union[str, Sequence[Any], None],
    replicates_per_combination: int,
) -> Tuple[List[str], Optional[List[NormalizedIntermediary]], List[str]]:
    """Validate call-level arguments before any per-run work starts."""
    if replicates_per_combination < 1:
        raise ValidationError(
            f"replicates_per_combination must be at least 1, got {replicates_per_combination}",
            {"replicates_per_combination": replicates_per_combination},
        )

    names = _as_names(variable_names)
    int_names = _as_names(intermediary_names)

    normalized: Optional[List[NormalizedIntermediary]] = None
    if intermediaries is not None:
        if len(intermediaries) != len(run_outputs):
            raise ValidationError(
                f"Got {len(intermediaries)} intermediary records for {len(run_outputs)} runs",
                {"n_intermediaries": len(intermediaries), "n_runs": len(run_outputs)},
            )
        normalized = normalize_intermediaries(intermediaries, int_names or None)

    if len(run_outputs) % replicates_per_combination:
        logger.warning(
            "Run count is not a multiple of the replicate count",
            n_runs=len(run_outputs),
            replicates_per_combination=replicates_per_combination,
        )
    return names, normalized, int_names


def _frame(rows: List[tuple], columns: Sequence[str], dtypes: dict) -> pd.DataFrame:
    if rows:
        frame = pd.DataFrame.from_records(rows, columns=list(columns))
    else:
        frame = pd.DataFrame({column: pd.Series(dtype=dtypes[column]) for column in columns})
    return frame.astype(dtypes)


def _assemble(chunks: Sequence[_TableParts]) -> FlattenedEnsemble:
    long_rows: List[tuple] = []
    parameter_rows: List[tuple] = []
    initial_rows: List[tuple] = []
    for parts in chunks:
        long_rows.extend(parts.long_rows)
        parameter_rows.extend(parts.parameter_rows)
        initial_rows.extend(parts.initial_rows)

    return FlattenedEnsemble(
        timeseries=_frame(long_rows, LONG_COLUMNS, _LONG_DTYPES),
        parameters=_frame(parameter_rows, VALUE_COLUMNS, _VALUE_DTYPES),
        initial_values=_frame(initial_rows, VALUE_COLUMNS, _VALUE_DTYPES),
    )


def _run_flatten(
    run_outputs: Sequence[Any],
    variable_names: Union[str, Sequence[Any], None],
    intermediaries: Optional[Sequence[Any]],
    intermediary_names: Union[str, Sequence[Any], None],
    replicates_per_combination: int,
    parallel: bool,
    threads: Optional[int] = None,
) -> FlattenedEnsemble:
    names, normalized, int_names = _prepare(
        run_outputs, variable_names, intermediaries, intermediary_names,
        replicates_per_combination,
    )

    def flatten_chunk(indices: Sequence[int]) -> _TableParts:
        parts = _TableParts()
        for run_index in indices:
            _flatten_run(
                run_index,
                run_outputs[run_index],
                names,
                normalized[run_index] if normalized is not None else None,
                int_names,
                replicates_per_combination,
                parts,
            )
        return parts

    if not parallel:
        chunks = [flatten_chunk(range(len(run_outputs)))]
    else:
        chunks = run_partitioned(flatten_chunk, range(len(run_outputs)), threads=threads)

    result = _assemble(chunks)
    logger.info(
        "Flattened ensemble",
        n_runs=len(run_outputs),
        n_rows=len(result.timeseries),
        n_chunks=len(chunks),
    )
    return result


def flatten(
    run_outputs: Sequence[Any],
    variable_names: Union[str, Sequence[Any], None],
    intermediaries: Optional[Sequence[Any]] = None,
    intermediary_names: Union[str, Sequence[Any], None] = None,
    replicates_per_combination: int = 1,
) -> FlattenedEnsemble:
    """Flatten ensemble run outputs into long-format tables.

    Args:
        run_outputs: One :class:`RunOutput` (or mapping with ``t``/``u``/
            ``u0``/``p`` keys) per run, combination-major.
        variable_names: Names of the state variables.
        intermediaries: Optional intermediary record per run (None entries
            allowed); must match ``run_outputs`` in length.
        intermediary_names: Names of the intermediary variables.
        replicates_per_combination: Number of consecutive runs sharing a
            parameter combination.

    Returns:
        ``FlattenedEnsemble(timeseries, parameters, initial_values)``. The
        time series table has columns ``combination_index``,
        ``replicate_index``, ``time``, ``variable`` and ``value``; the other
        two tables drop ``time``. All units are stripped.

    Raises:
        ValidationError: For invalid call-level arguments
        MalformedRunOutput: If a run cannot be flattened
    """
    return _run_flatten(
        run_outputs, variable_names, intermediaries, intermediary_names,
        replicates_per_combination, parallel=False,
    )


def flatten_parallel(
    run_outputs: Sequence[Any],
    variable_names: Union[str, Sequence[Any], None],
    intermediaries: Optional[Sequence[Any]] = None,
    intermediary_names: Union[str, Sequence[Any], None] = None,
    replicates_per_combination: int = 1,
    threads: Optional[int] = None,
) -> FlattenedEnsemble:
    """Thread-parallel :func:`flatten`.

    Runs are split into contiguous chunks, one per worker, and the chunk
    tables are concatenated in run order, so the result equals the
    sequential one row for row. ``threads`` defaults to the CPU count.
    """
    return _run_flatten(
        run_outputs, variable_names, intermediaries, intermediary_names,
        replicates_per_combination, parallel=True, threads=threads,
    )
