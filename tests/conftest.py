"""Pytest configuration and fixtures."""

import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

import pytest

from sdensemble.config import EnsembleConfig
from sdensemble.contracts.types import RunOutput


@pytest.fixture
def temp_dir():
    """Temporary directory for test artifacts."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def sample_config() -> EnsembleConfig:
    """Sample configuration for testing."""
    return EnsembleConfig()


@pytest.fixture
def sample_toml_config(temp_dir: Path) -> Path:
    """Sample TOML configuration file."""
    config_content = """
[run]
threads = 4
parallel = true
log_level = "debug"

[design]
crossed = false
n_replicates = 20
base_seed = 99

[summary]
quantiles = [0.05, 0.5, 0.95]
"""
    
    config_file = temp_dir / "sdensemble.toml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def two_variable_runs() -> List[RunOutput]:
    """Two combinations with two replicates each, vector states."""
    runs = []
    for combo, scale in enumerate([1.0, 2.0], start=1):
        for replicate in range(2):
            offset = replicate * 0.5
            runs.append(
                RunOutput(
                    times=[0.0, 1.0, 2.0],
                    states=[
                        [10.0 * scale + offset, 20.0 * scale + offset],
                        [11.0 * scale + offset, 21.0 * scale + offset],
                        [12.0 * scale + offset, 22.0 * scale + offset],
                    ],
                    initial=[10.0 * scale + offset, 20.0 * scale + offset],
                    parameters={"alpha": scale, "beta": 2.0},
                )
            )
    return runs


@pytest.fixture
def mapping_runs() -> List[Dict[str, Any]]:
    """Runs given as plain mappings with short keys."""
    return [
        {"t": [0.0, 1.0], "u": [10.0, 11.0], "u0": 10.0, "p": {"a": 1.0}},
        {"t": [0.0, 1.0], "u": [10.5, 11.5], "u0": 10.5, "p": {"a": 1.0}},
        {"t": [0.0, 1.0], "u": [20.0, 21.0], "u0": 20.0, "p": {"a": 2.0}},
        {"t": [0.0, 1.0], "u": [20.5, 21.5], "u0": 20.5, "p": {"a": 2.0}},
    ]
