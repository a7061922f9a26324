"""Normalization of per-run intermediary (derived-quantity) recordings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import structlog

from ..contracts.errors import ValidationError
from ..contracts.types import coerce_intermediary

logger = structlog.get_logger()


@dataclass(frozen=True)
class NormalizedIntermediary:
    """Uniformly shaped intermediary series for one run."""

    times: Sequence[Any] = field(default_factory=tuple)
    values: Sequence[Any] = field(default_factory=tuple)
    parameters: None = None

    def is_empty(self) -> bool:
        return len(self.times) == 0


def normalize_intermediaries(
    records: Sequence[Any],
    names: Optional[Sequence[str]] = None,
) -> List[NormalizedIntermediary]:
    """Bring one optional intermediary record per run into a uniform shape.

    Absent records become empty series. Present records keep their content
    untouched; units are stripped later by the flattener. ``names`` only
    labels the series downstream and may be omitted.

    Raises:
        ValidationError: If a record cannot be interpreted, or its time and
            value series differ in length
    """
    normalized: List[NormalizedIntermediary] = []
    for run_idx, raw in enumerate(records):
        if isinstance(raw, NormalizedIntermediary):
            normalized.append(raw)
            continue
        try:
            record = coerce_intermediary(raw)
        except TypeError as exc:
            raise ValidationError(str(exc), {"run_index": run_idx}) from exc

        if record is None:
            normalized.append(NormalizedIntermediary())
            continue

        if len(record.times) != len(record.values):
            raise ValidationError(
                f"Intermediary record {run_idx} has {len(record.times)} time points "
                f"but {len(record.values)} values",
                {"run_index": run_idx},
            )
        normalized.append(NormalizedIntermediary(times=record.times, values=record.values))

    logger.debug(
        "Normalized intermediaries",
        n_runs=len(normalized),
        n_present=sum(not item.is_empty() for item in normalized),
        names=list(names) if names is not None else None,
    )
    return normalized
