"""Parameter-combination generation for crossed and paired designs.

Parameter names are always sorted lexicographically, so combination values
appear in name order. A crossed design enumerates the Cartesian product
like an odometer: the last name in sorted order varies fastest. The
resulting positions define ``combination_index`` (1-based) and must stay
stable, since runs are matched to combinations by position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
import structlog

from ..config.model import DesignConfig
from ..contracts.errors import InvalidDesign
from ..contracts.types import COMBINATION

logger = structlog.get_logger()

ParameterCombination = Tuple[Any, ...]


@dataclass(frozen=True)
class RunTask:
    """Descriptor for a single simulation run of the ensemble."""

    run_index: int
    combination_index: int
    replicate_index: int
    parameters: Mapping[str, Any] = field(default_factory=dict)
    seed: int = 0


def _validated_ranges(ranges: Mapping[str, Sequence[Any]], replicates: int) -> Dict[str, List[Any]]:
    if not ranges:
        raise InvalidDesign("Parameter ranges must not be empty")
    if replicates < 1:
        raise InvalidDesign(
            f"replicates must be at least 1, got {replicates}",
            {"replicates": replicates},
        )

    sorted_ranges: Dict[str, List[Any]] = {}
    for name in sorted(ranges, key=str):
        values = list(ranges[name])
        if not values:
            raise InvalidDesign(
                f"Parameter '{name}' has no candidate values",
                {"parameter": str(name)},
            )
        sorted_ranges[str(name)] = values
    return sorted_ranges


def generate_combinations(
    ranges: Mapping[str, Sequence[Any]],
    crossed: bool = True,
    replicates: int = 1,
) -> Tuple[List[ParameterCombination], int]:
    """Build the parameter combinations of an experimental design.

    Args:
        ranges: Parameter name to candidate values.
        crossed: Full factorial design if True, element-wise pairing if False.
        replicates: Number of replicate runs per combination.

    Returns:
        Tuple of (combinations, total_runs). Each combination is a tuple of
        values ordered by sorted parameter name; ``total_runs`` is
        ``len(combinations) * replicates``.

    Raises:
        InvalidDesign: For empty ranges, replicates < 1, or paired sequences
            of unequal length.

    Example:
        >>> generate_combinations({"beta": [2.0, 5.0], "alpha": [0.1, 0.5]}, crossed=False)
        ([(0.1, 2.0), (0.5, 5.0)], 2)
    """
    sorted_ranges = _validated_ranges(ranges, replicates)
    sequences = list(sorted_ranges.values())

    if crossed:
        combinations = [tuple(combo) for combo in product(*sequences)]
    else:
        lengths = {name: len(values) for name, values in sorted_ranges.items()}
        if len(set(lengths.values())) != 1:
            raise InvalidDesign(
                f"Paired design requires equal-length parameter sequences, got {lengths}",
                {"lengths": lengths},
            )
        combinations = [tuple(combo) for combo in zip(*sequences)]

    total_runs = len(combinations) * replicates
    logger.debug(
        "Generated design",
        design="crossed" if crossed else "paired",
        parameters=list(sorted_ranges),
        n_combinations=len(combinations),
        total_runs=total_runs,
    )
    return combinations, total_runs


def _design_settings(config: Optional[DesignConfig]) -> DesignConfig:
    return config if config is not None else DesignConfig()


def design_table(
    ranges: Mapping[str, Sequence[Any]],
    crossed: Optional[bool] = None,
    config: Optional[DesignConfig] = None,
) -> pd.DataFrame:
    """Return the design as a table with one row per combination.

    Columns are ``combination_index`` followed by the sorted parameter names,
    ready to be merged onto a summary table. ``crossed`` defaults to
    ``config.crossed``.
    """
    if crossed is None:
        crossed = _design_settings(config).crossed
    combinations, _ = generate_combinations(ranges, crossed=crossed, replicates=1)
    names = sorted(str(name) for name in ranges)
    table = pd.DataFrame(combinations, columns=names)
    table.insert(0, COMBINATION, range(1, len(combinations) + 1))
    return table


def build_run_tasks(
    ranges: Mapping[str, Sequence[Any]],
    crossed: Optional[bool] = None,
    replicates: Optional[int] = None,
    base_seed: Optional[int] = None,
    config: Optional[DesignConfig] = None,
) -> List[RunTask]:
    """Expand a design into one task per run.

    Tasks are ordered combination-major, replicate-minor, which is the run
    order the flattener assumes. Seeds are derived deterministically as
    ``base_seed + combination_index * 10_000 + replicate_index``.

    Arguments left as None take their value from ``config`` (``crossed``,
    ``n_replicates``, ``base_seed``), or from the default design settings.
    """
    settings = _design_settings(config)
    crossed = settings.crossed if crossed is None else crossed
    replicates = settings.n_replicates if replicates is None else replicates
    base_seed = settings.base_seed if base_seed is None else base_seed

    combinations, _ = generate_combinations(ranges, crossed=crossed, replicates=replicates)
    names = sorted(str(name) for name in ranges)

    tasks: List[RunTask] = []
    for combo_idx, combo in enumerate(combinations, start=1):
        combo_offset = combo_idx * 10_000
        for replicate_idx in range(1, replicates + 1):
            tasks.append(
                RunTask(
                    run_index=len(tasks),
                    combination_index=combo_idx,
                    replicate_index=replicate_idx,
                    parameters=dict(zip(names, combo)),
                    seed=base_seed + combo_offset + replicate_idx,
                )
            )

    return tasks
