"""Type definitions for run outputs and table layouts."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from ..domain.quantity import is_quantity, strip_units


COMBINATION = "combination_index"
REPLICATE = "replicate_index"
TIME = "time"
VARIABLE = "variable"
VALUE = "value"

LONG_COLUMNS: Tuple[str, ...] = (COMBINATION, REPLICATE, TIME, VARIABLE, VALUE)
"""Column order of the long-format (tidy) time series table"""

VALUE_COLUMNS: Tuple[str, ...] = (COMBINATION, REPLICATE, VARIABLE, VALUE)
"""Column order of the parameter and initial-value tables"""

GROUP_KEYS: Tuple[str, ...] = (COMBINATION, TIME, VARIABLE)
"""Keys the summary statistics are computed over"""


@dataclass(frozen=True)
class Scalar:
    """Single state value."""

    value: Any


@dataclass(frozen=True)
class Vector:
    """Ordered state values, bound to variable names by position."""

    values: Tuple[Any, ...]


@dataclass(frozen=True)
class Record:
    """Named state values, looked up by variable name."""

    fields: Mapping[str, Any]


StateValue = Union[Scalar, Vector, Record]


def classify_state(value: Any) -> StateValue:
    """Wrap a raw state, initial or parameter value in its shape variant.

    Mappings and namedtuples are records; lists, tuples and 1-d arrays are
    vectors; anything else is a scalar. Quantities wrapping an array are
    vectors of their magnitudes.

    Raises:
        TypeError: For arrays with more than one dimension
    """
    if isinstance(value, (Scalar, Vector, Record)):
        return value

    if isinstance(value, Mapping):
        return Record(fields={str(k): v for k, v in value.items()})

    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return Record(fields=dict(zip(value._fields, value)))

    if is_quantity(value) and np.ndim(strip_units(value)) > 0:
        value = np.asarray(strip_units(value))

    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return Scalar(value=value.item())
        if value.ndim == 1:
            return Vector(values=tuple(value.tolist()))
        raise TypeError(f"State arrays must be 1-dimensional, got shape {value.shape}")

    if isinstance(value, (list, tuple)):
        return Vector(values=tuple(value))

    return Scalar(value=value)


@dataclass(frozen=True)
class RunOutput:
    """Raw output of a single simulation run."""
    
    times: Sequence[Any]
    """Time points, plain numbers or quantities"""
    
    states: Sequence[Any]
    """State value at each time point (scalar, sequence or record)"""
    
    initial: Any = None
    """Initial condition (scalar, sequence or record)"""
    
    parameters: Any = None
    """Parameter set (scalar, sequence, record or None)"""


@dataclass(frozen=True)
class IntermediaryRecord:
    """Derived quantities recorded alongside one run."""
    
    times: Sequence[Any] = field(default_factory=tuple)
    values: Sequence[Any] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        return len(self.times) == 0


def _first_key(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def coerce_run_output(run: Any) -> RunOutput:
    """Accept a RunOutput or a mapping with ``t``/``u``/``u0``/``p`` style keys.

    Raises:
        TypeError: If the object cannot be interpreted as a run output
    """
    if isinstance(run, RunOutput):
        return run
    if isinstance(run, Mapping):
        times = _first_key(run, "times", "t")
        states = _first_key(run, "states", "u")
        if times is None or states is None:
            raise TypeError("Run output mapping needs 'times'/'t' and 'states'/'u' entries")
        return RunOutput(
            times=times,
            states=states,
            initial=_first_key(run, "initial", "u0"),
            parameters=_first_key(run, "parameters", "p"),
        )
    raise TypeError(f"Cannot interpret {type(run).__name__} as a run output")


def coerce_intermediary(record: Any) -> Optional[IntermediaryRecord]:
    """Accept None, an IntermediaryRecord, or a mapping with ``t``/``saveval`` style keys."""
    if record is None or isinstance(record, IntermediaryRecord):
        return record
    if isinstance(record, Mapping):
        return IntermediaryRecord(
            times=_first_key(record, "times", "t", default=()),
            values=_first_key(record, "values", "saveval", "u", default=()),
        )
    raise TypeError(f"Cannot interpret {type(record).__name__} as an intermediary record")
