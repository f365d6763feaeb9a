# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The business logic of the pipeline:
# - Toolchain: cargo clean / build
# - Stager: copy the .wasm into the release directory
# - Deployer: reset neardev, near dev-deploy, optional RPC check
# - Pipeline: fail-fast orchestrator
# - RunRecorder: black-box run log
# -----------------------------------------------------------------------------

from .config import load_config
from .deployer import Deployer
from .errors import (
    ConfigError,
    DeployError,
    PipelineError,
    StagingError,
    StateResetError,
    ToolchainError,
    VerificationError,
)
from .pipeline import Pipeline
from .recorder import RunRecorder
from .stager import Stager
from .toolchain import Toolchain

__all__ = [
    "load_config",
    "Deployer",
    "ConfigError", "DeployError", "PipelineError", "StagingError",
    "StateResetError", "ToolchainError", "VerificationError",
    "Pipeline",
    "RunRecorder",
    "Stager",
    "Toolchain",
]
