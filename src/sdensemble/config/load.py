"""Configuration loading utilities."""

from __future__ import annotations
import os
from pathlib import Path
from typing import Dict, Any, Union, Optional

from ..contracts.errors import ConfigError
from .model import EnsembleConfig

ENV_PREFIX = "SDENSEMBLE_"


def default_config() -> EnsembleConfig:
    """Create default configuration."""
    return EnsembleConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> EnsembleConfig:
    """Load configuration from file or environment.
    
    Args:
        path: Path to configuration file. If None, looks for:
              - SDENSEMBLE_CONFIG environment variable
              - sdensemble.toml in current directory
              - ~/.sdensemble/config.toml
              
    Returns:
        Loaded and validated configuration
        
    Raises:
        ConfigError: If configuration file is invalid or not found
    """
    if path is None:
        path = _find_config_file()
        
    if path is None:
        return _apply_env_overrides(default_config())
        
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", {"path": str(path)})
        
    try:
        config = EnsembleConfig.from_toml_file(path)
        return _apply_env_overrides(config)
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}", {"path": str(path)}) from e


def _find_config_file() -> Optional[Path]:
    """Find configuration file using standard search paths."""
    
    env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
    if env_path:
        return Path(env_path)
    
    cwd_config = Path("sdensemble.toml")
    if cwd_config.exists():
        return cwd_config
        
    user_config = Path.home() / ".sdensemble" / "config.toml"
    if user_config.exists():
        return user_config
        
    return None


def _apply_env_overrides(config: EnsembleConfig) -> EnsembleConfig:
    """Apply environment variable overrides to configuration.
    
    Environment variables follow pattern: SDENSEMBLE_<SECTION>_<KEY>
    Examples:
        SDENSEMBLE_RUN_THREADS=4
        SDENSEMBLE_DESIGN_CROSSED=false
        SDENSEMBLE_DESIGN_N_REPLICATES=50
    """
    overrides: Dict[str, Dict[str, Any]] = {}
    
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key == f"{ENV_PREFIX}CONFIG":
            continue
            
        parts = key[len(ENV_PREFIX):].lower().split("_", 1)
        if len(parts) != 2:
            continue
            
        section, field = parts
        overrides.setdefault(section, {})[field] = _convert_env_value(value)
    
    if overrides:
        config_dict = config.model_dump()
        for section, fields in overrides.items():
            if section in config_dict:
                config_dict[section].update(fields)
                
        config = EnsembleConfig.model_validate(config_dict)
    
    return config


def _convert_env_value(value: str) -> Any:
    """Convert string environment variable to appropriate type."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    
    try:
        return int(value)
    except ValueError:
        pass
        
    try:
        return float(value)
    except ValueError:
        pass
        
    return value
