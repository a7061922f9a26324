"""Cleaning of constant sets and initial values for export."""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

import numpy as np

from .quantity import is_numeric_like, strip_units, to_float


def _numeric_sequence(value: Any) -> Union[List[float], None]:
    bare = strip_units(value)
    if isinstance(bare, np.ndarray):
        if bare.ndim != 1 or not np.issubdtype(bare.dtype, np.number):
            return None
        return [float(v) for v in bare]
    if isinstance(bare, (list, tuple)):
        if not all(is_numeric_like(v) for v in bare):
            return None
        return [to_float(v) for v in bare]
    return None


def clean_constants(constants: Mapping[str, Any]) -> Dict[str, Union[float, List[float]]]:
    """Strip units from a constant set and drop non-numeric entries.

    Scalars become floats and numeric sequences become lists of floats.
    Strings, callables and any other objects are removed. Key order is kept.

    Example:
        >>> clean_constants({"a": Quantity(1.0, "m"), "b": 2, "c": [1, 2], "d": "x"})
        {'a': 1.0, 'b': 2.0, 'c': [1.0, 2.0]}
    """
    cleaned: Dict[str, Union[float, List[float]]] = {}
    for name, value in constants.items():
        if is_numeric_like(value):
            cleaned[str(name)] = to_float(value)
            continue
        if callable(value):
            continue
        sequence = _numeric_sequence(value)
        if sequence is not None:
            cleaned[str(name)] = sequence
    return cleaned


def clean_init(values: Union[Sequence[Any], np.ndarray], names: Iterable[Any]) -> Dict[str, float]:
    """Map initial-condition names to unitless float values."""
    names = [str(name) for name in names]
    values = list(values)
    if len(values) != len(names):
        raise ValueError(
            f"Got {len(values)} initial values for {len(names)} names"
        )
    return {name: to_float(value) for name, value in zip(names, values)}
