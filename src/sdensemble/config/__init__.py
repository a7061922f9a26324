"""Configuration system with lazy attribute loading to avoid circular imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple

_LAZY_ATTRS: Dict[str, Tuple[str, str]] = {
    "EnsembleConfig": (".model", "EnsembleConfig"),
    "RunConfig": (".model", "RunConfig"),
    "DesignConfig": (".model", "DesignConfig"),
    "SummaryConfig": (".model", "SummaryConfig"),
    "load_config": (".load", "load_config"),
    "default_config": (".load", "default_config"),
    "validate_config": (".validation", "validate_config"),
}

__all__ = sorted(_LAZY_ATTRS.keys())


def __getattr__(name: str) -> Any:
    """Lazily load configuration helpers and models on first access."""

    try:
        module_name, attr_name = _LAZY_ATTRS[name]
    except KeyError as exc:
        raise AttributeError(f"module {__name__} has no attribute {name}") from exc

    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return list(__all__)
