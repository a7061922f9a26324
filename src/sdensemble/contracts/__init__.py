"""Core contracts and interfaces."""

from .errors import (
    EnsembleError,
    ConfigError,
    ValidationError,
    InvalidDesign,
    InvalidQuantileLevel,
    MalformedRunOutput,
)
from .types import (
    RunOutput,
    IntermediaryRecord,
    Scalar,
    Vector,
    Record,
    StateValue,
    classify_state,
    coerce_run_output,
    coerce_intermediary,
)

__all__ = [
    "EnsembleError",
    "ConfigError",
    "ValidationError",
    "InvalidDesign",
    "InvalidQuantileLevel",
    "MalformedRunOutput",
    "RunOutput",
    "IntermediaryRecord",
    "Scalar",
    "Vector",
    "Record",
    "StateValue",
    "classify_state",
    "coerce_run_output",
    "coerce_intermediary",
]
