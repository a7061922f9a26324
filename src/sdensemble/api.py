"""High-level entry point: flatten and summarize an ensemble in one call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence, Union

import pandas as pd

from .config.model import EnsembleConfig
from .config.validation import validate_config
from .engine.context import EnsembleContext, configure_logging
from .services.summary import summarize, summarize_parallel, validate_quantile_levels
from .simulation.flatten import flatten, flatten_parallel


@dataclass
class EnsembleResult:
    """Tables produced by :func:`process_ensemble`."""

    timeseries: pd.DataFrame
    parameters: pd.DataFrame
    initial_values: pd.DataFrame
    summary: pd.DataFrame
    metadata: Dict[str, Any] = field(default_factory=dict)


def process_ensemble(
    run_outputs: Sequence[Any],
    variable_names: Union[str, Sequence[Any], None],
    intermediaries: Optional[Sequence[Any]] = None,
    intermediary_names: Union[str, Sequence[Any], None] = None,
    replicates_per_combination: Optional[int] = None,
    quantiles: Optional[Iterable[float]] = None,
    config: Optional[EnsembleConfig] = None,
    parallel: Optional[bool] = None,
    run_id: Optional[str] = None,
) -> EnsembleResult:
    """Flatten ensemble run outputs and summarize them over replicates.

    Arguments left as None fall back to ``config`` (or the default
    configuration): ``replicates_per_combination`` to
    ``design.n_replicates``, ``quantiles`` to ``summary.quantiles`` and
    ``parallel`` to ``run.parallel``. The parallel paths use
    ``run.threads`` workers. The configuration is validated first, and an
    explicitly passed ``config`` also sets the log level to
    ``run.log_level``.

    Raises:
        InvalidQuantileLevel: Before any flattening work
        ValidationError: For an inconsistent configuration or invalid
            call-level arguments
        MalformedRunOutput: If a run cannot be flattened
    """
    if config is not None:
        configure_logging(config.run.log_level)
    else:
        config = EnsembleConfig()
    validate_config(config)

    replicates = (
        config.design.n_replicates
        if replicates_per_combination is None
        else replicates_per_combination
    )
    levels = list(quantiles) if quantiles is not None else list(config.summary.quantiles)
    use_parallel = config.run.parallel if parallel is None else parallel
    threads = config.run.threads

    # Reject bad levels before touching any run
    validate_quantile_levels(levels)

    context = EnsembleContext(run_id=run_id, threads=threads, parallel=use_parallel)
    context.start_run()

    with context.time_stage("flatten"):
        if use_parallel:
            tables = flatten_parallel(
                run_outputs, variable_names, intermediaries, intermediary_names,
                replicates_per_combination=replicates, threads=threads,
            )
        else:
            tables = flatten(
                run_outputs, variable_names, intermediaries, intermediary_names,
                replicates_per_combination=replicates,
            )

    with context.time_stage("summarize"):
        if use_parallel:
            summary = summarize_parallel(tables.timeseries, levels, threads=threads)
        else:
            summary = summarize(tables.timeseries, levels)

    context.end_run()
    metadata = context.get_runtime_metadata()
    metadata.update({
        "n_runs": len(run_outputs),
        "replicates_per_combination": replicates,
        "quantiles": levels,
    })

    return EnsembleResult(
        timeseries=tables.timeseries,
        parameters=tables.parameters,
        initial_values=tables.initial_values,
        summary=summary,
        metadata=metadata,
    )
