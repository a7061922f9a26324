"""Configuration validation utilities."""

from typing import List
import structlog

from ..contracts.errors import ValidationError
from .model import EnsembleConfig

logger = structlog.get_logger()


def validate_config(config: EnsembleConfig) -> None:
    """Validate configuration for common issues and conflicts.
    
    Args:
        config: Configuration to validate
        
    Raises:
        ValidationError: If configuration is invalid
    """
    errors: List[str] = []
    warnings: List[str] = []
    
    _validate_resource_constraints(config, warnings)
    _validate_summary(config, errors, warnings)
    
    for warning in warnings:
        logger.warning(warning)
    
    if errors:
        raise ValidationError(
            f"Configuration validation failed: {'; '.join(errors)}",
            {"errors": errors},
        )


def _validate_resource_constraints(config: EnsembleConfig, warnings: List[str]) -> None:
    """Check resource usage settings."""
    
    if config.run.threads > 32:
        warnings.append(
            f"threads={config.run.threads} may cause performance issues"
        )
    
    if config.run.parallel and config.run.threads == 1:
        warnings.append(
            "parallel processing requested with a single thread; runs sequentially"
        )


def _validate_summary(config: EnsembleConfig, errors: List[str], warnings: List[str]) -> None:
    """Check requested quantile levels."""
    from ..services.summary import quantile_label

    labels = [quantile_label(q) for q in config.summary.quantiles]
    if len(set(labels)) != len(labels):
        errors.append(f"duplicate quantile levels: {config.summary.quantiles}")
    
    if config.design.n_replicates < 3 and config.summary.quantiles:
        warnings.append(
            f"n_replicates={config.design.n_replicates} gives unreliable replicate quantiles"
        )
