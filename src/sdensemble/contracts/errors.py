"""Error definitions for the sdensemble package."""

from __future__ import annotations
from typing import Dict, Optional


class EnsembleError(Exception):
    """Base exception for all sdensemble errors."""
    
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(EnsembleError):
    """Configuration-related errors."""
    pass


class ValidationError(ConfigError):
    """Input validation errors."""
    pass


class InvalidDesign(ValidationError):
    """Parameter ranges cannot form the requested experimental design."""
    pass


class InvalidQuantileLevel(ValidationError):
    """Requested quantile level is outside [0, 1] or duplicated."""
    pass


class MalformedRunOutput(EnsembleError):
    """A run's state or parameter shape cannot be flattened."""
    pass
