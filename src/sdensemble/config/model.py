"""Configuration data models."""

from __future__ import annotations
from typing import List, Union
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


class DesignConfig(BaseModel):
    """Experimental design settings."""
    
    crossed: bool = Field(True, description="Full factorial (True) or paired (False) design")
    n_replicates: int = Field(1, ge=1, description="Replicates per parameter combination")
    base_seed: int = Field(1234, description="Base seed used to derive per-run seeds")


class SummaryConfig(BaseModel):
    """Replicate summary settings."""
    
    quantiles: List[float] = Field(default_factory=lambda: [0.025, 0.975])
    
    @field_validator("quantiles")
    @classmethod
    def validate_quantiles(cls, v: List[float]) -> List[float]:
        bad = [q for q in v if not 0.0 <= q <= 1.0]
        if bad:
            raise ValueError(f"quantile levels must lie in [0, 1], got {bad}")
        return v


class RunConfig(BaseModel):
    """Execution settings."""
    
    threads: int = 1
    parallel: bool = False
    log_level: str = "INFO"
    
    @field_validator("threads")
    @classmethod
    def validate_threads(cls, v: int) -> int:
        if v < 1:
            raise ValueError("threads must be positive")
        return v
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return level


class EnsembleConfig(BaseModel):
    """Complete ensemble processing configuration."""
    
    run: RunConfig = Field(default_factory=RunConfig)
    design: DesignConfig = Field(default_factory=DesignConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)
    
    @classmethod
    def from_toml_file(cls, path: Union[Path, str]) -> "EnsembleConfig":
        """Load configuration from TOML file."""
        try:
            import tomllib
        except ImportError:
            import tomli as tomllib
            
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.model_validate(data)
