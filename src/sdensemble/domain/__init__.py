"""Domain value types: unit-tagged quantities and cleaning helpers."""

from .quantity import Quantity, is_quantity, strip_units, to_float, is_numeric_like
from .cleaning import clean_constants, clean_init

__all__ = [
    "Quantity",
    "is_quantity",
    "strip_units",
    "to_float",
    "is_numeric_like",
    "clean_constants",
    "clean_init",
]
