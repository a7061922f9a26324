"""Ensemble design, normalization, flattening and resampling."""

from .design import RunTask, build_run_tasks, design_table, generate_combinations
from .intermediaries import NormalizedIntermediary, normalize_intermediaries
from .flatten import (
    FlattenedEnsemble,
    extract_initial_values,
    extract_parameters,
    flatten,
    flatten_parallel,
    run_indices,
)
from .resample import resample, resample_long_table

__all__ = [
    "RunTask",
    "build_run_tasks",
    "design_table",
    "generate_combinations",
    "NormalizedIntermediary",
    "normalize_intermediaries",
    "FlattenedEnsemble",
    "extract_initial_values",
    "extract_parameters",
    "flatten",
    "flatten_parallel",
    "run_indices",
    "resample",
    "resample_long_table",
]
