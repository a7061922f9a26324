"""Tidy tables and replicate summaries for simulation ensembles."""

__version__ = "0.1.0"

from .contracts import (
    EnsembleError,
    ConfigError,
    ValidationError,
    InvalidDesign,
    InvalidQuantileLevel,
    MalformedRunOutput,
    RunOutput,
    IntermediaryRecord,
)
from .domain import Quantity, clean_constants, clean_init
from .simulation import (
    RunTask,
    build_run_tasks,
    design_table,
    generate_combinations,
    normalize_intermediaries,
    flatten,
    flatten_parallel,
    resample,
    resample_long_table,
)
from .services import summarize, summarize_parallel, quantile_label
from .api import EnsembleResult, process_ensemble

__all__ = [
    "__version__",
    "EnsembleError",
    "ConfigError",
    "ValidationError",
    "InvalidDesign",
    "InvalidQuantileLevel",
    "MalformedRunOutput",
    "RunOutput",
    "IntermediaryRecord",
    "Quantity",
    "clean_constants",
    "clean_init",
    "RunTask",
    "build_run_tasks",
    "design_table",
    "generate_combinations",
    "normalize_intermediaries",
    "flatten",
    "flatten_parallel",
    "resample",
    "resample_long_table",
    "summarize",
    "summarize_parallel",
    "quantile_label",
    "EnsembleResult",
    "process_ensemble",
]
