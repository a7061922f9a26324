"""Services operating on flattened ensemble tables."""

from .summary import (
    DEFAULT_QUANTILES,
    group_statistics,
    quantile_label,
    summarize,
    summarize_parallel,
    validate_quantile_levels,
)

__all__ = [
    "DEFAULT_QUANTILES",
    "group_statistics",
    "quantile_label",
    "summarize",
    "summarize_parallel",
    "validate_quantile_levels",
]
