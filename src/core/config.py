# -----------------------------------------------------------------------------
# CONFIGURATION LOADER
# -----------------------------------------------------------------------------
# Responsibility: Build a PipelineConfig from three layers, lowest first:
#   1. Model defaults (the classic ../target -> ../res -> neardev layout)
#   2. wasmforge.yaml in the working directory (or an explicit --config)
#   3. Environment variables (optionally from .env via python-dotenv)
#
# A missing default file is not an error. An explicit file that is missing,
# unparsable, or has unknown keys is.
# -----------------------------------------------------------------------------

import os
from pathlib import Path

import yaml
from pydantic import ValidationError
from rich.console import Console

from src.core.errors import ConfigError
from src.domain.models import PipelineConfig

console = Console()

DEFAULT_CONFIG_NAME = "wasmforge.yaml"

# Environment variable -> PipelineConfig field
ENV_OVERRIDES = {
    "WASMFORGE_ARTIFACT": "artifact_name",
    "WASMFORGE_TARGET_DIR": "target_dir",
    "WASMFORGE_RELEASE_DIR": "release_dir",
    "WASMFORGE_STATE_DIR": "state_dir",
    "WASMFORGE_STEP_TIMEOUT": "step_timeout_seconds",
    "WASMFORGE_RPC_URL": "verify_rpc_url",
    "WASMFORGE_RUN_LOG_DIR": "run_log_dir",
    "CARGO_BIN": "cargo_bin",
    "NEAR_BIN": "near_bin",
}


def _read_yaml(path: Path) -> dict:
    """Read a YAML mapping, treating an empty file as no overrides."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config(config_path: Path | None = None, workdir: Path | None = None) -> PipelineConfig:
    """
    Resolve the pipeline configuration.

    Args:
        config_path: Explicit YAML file. Must exist when given.
        workdir: Directory searched for the default wasmforge.yaml.

    Returns:
        Validated PipelineConfig.

    Raises:
        ConfigError: If the file is missing/invalid or a value fails validation.
    """
    workdir = workdir or Path.cwd()
    data: dict = {}

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        data = _read_yaml(config_path)
        console.print(f"[cyan][CONFIG] Loaded {config_path}[/cyan]")
    else:
        default_path = workdir / DEFAULT_CONFIG_NAME
        if default_path.exists():
            data = _read_yaml(default_path)
            console.print(f"[cyan][CONFIG] Loaded {default_path}[/cyan]")

    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[field_name] = value

    try:
        return PipelineConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid pipeline configuration: {e}")
