"""Unit-tagged quantities and unit stripping.

The engine never converts between units. A quantity only has to expose its
bare magnitude; everything downstream of :func:`strip_units` works on plain
floats.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
import numbers

import numpy as np


@dataclass(frozen=True)
class Quantity:
    """Numeric value tagged with a physical unit."""
    
    value: float
    unit: Optional[str] = None
    
    def strip(self) -> float:
        """Return the bare magnitude."""
        return self.value
    
    def __str__(self) -> str:
        if self.unit is None:
            return f"{self.value}"
        return f"{self.value} {self.unit}"


def is_quantity(value: Any) -> bool:
    """Return True for unit-tagged values.

    Besides :class:`Quantity`, objects following the pint protocol
    (``magnitude`` and ``units`` attributes) are recognised.
    """
    if isinstance(value, Quantity):
        return True
    return hasattr(value, "magnitude") and hasattr(value, "units")


def strip_units(value: Any) -> Any:
    """Return the bare magnitude of a quantity, or the value unchanged."""
    if isinstance(value, Quantity):
        return value.strip()
    if is_quantity(value):
        return value.magnitude
    return value


def to_float(value: Any) -> float:
    """Strip units and coerce to float.

    Raises:
        TypeError: If the value is not numeric (strings, None, containers)
    """
    bare = strip_units(value)
    if isinstance(bare, (str, bytes)) or bare is None:
        raise TypeError(f"Expected a numeric value, got {type(bare).__name__}: {bare!r}")
    if isinstance(bare, np.ndarray):
        if bare.ndim != 0:
            raise TypeError(f"Expected a scalar, got array of shape {bare.shape}")
        bare = bare.item()
    if not isinstance(bare, (numbers.Real, np.number, np.bool_)):
        raise TypeError(f"Expected a numeric value, got {type(bare).__name__}")
    return float(bare)


def is_numeric_like(value: Any) -> bool:
    """Return True if ``value`` is a scalar number once units are stripped.

    Callables (functions, interpolators), strings, None and containers are
    not numeric-like.
    """
    if callable(value) or value is None:
        return False
    bare = strip_units(value)
    if isinstance(bare, (str, bytes)):
        return False
    if isinstance(bare, np.ndarray):
        return bare.ndim == 0 and np.issubdtype(bare.dtype, np.number)
    return isinstance(bare, (numbers.Real, np.number, np.bool_))
