# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# DOMAIN MODELS - PIPELINE CONFIGURATION & RESULTS
# -----------------------------------------------------------------------------
# PipelineConfig describes WHERE things live (target dir, release dir, local
# deploy state) and WHICH tools to call. StepResult / PipelineResult describe
# what happened during a run.
#
# All paths are kept as strings relative to the working directory so that the
# commands we print and execute look exactly like the ones a human would type
# (e.g. `near dev-deploy ../res/non_fungible_token.wasm`).
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class StepName(str, Enum):
    """
    The five pipeline steps, declared in execution order.

    Iterating the enum yields the canonical order:
    clean -> build -> stage -> reset_state -> deploy
    """

    CLEAN = "clean"
    BUILD = "build"
    STAGE = "stage"
    RESET_STATE = "reset_state"
    DEPLOY = "deploy"


class PipelineConfig(BaseModel):
    """
    Settings for one build-stage-deploy run.

    Defaults reproduce the classic NEAR contract layout:
    - cargo writes to ../target/wasm32-unknown-unknown/release/<name>.wasm
    - the artifact is staged into ../res/<name>.wasm
    - near-cli keeps its dev account in ./neardev
    """

    artifact_name: str = Field(
        "non_fungible_token",
        min_length=1,
        pattern=r"^[A-Za-z0-9_-]+$",
        description="Crate artifact name without the .wasm suffix",
    )
    target_triple: str = Field("wasm32-unknown-unknown", min_length=1)
    profile: str = Field("release", min_length=1, description="Cargo build profile")
    target_dir: str = Field("../target", description="Cargo target directory")
    release_dir: str = Field("../res", description="Shared release-artifact directory")
    state_dir: str = Field("neardev", min_length=1, description="Local deploy state cache")
    cargo_bin: str = Field("cargo", min_length=1)
    near_bin: str = Field("near", min_length=1)
    step_timeout_seconds: int | None = Field(None, gt=0)
    verify_rpc_url: str | None = Field(
        None, description="NEAR JSON-RPC endpoint used to confirm the deployed code"
    )
    run_log_dir: str | None = Field(None, description="Where run_<timestamp>.json is written")

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @property
    def profile_dir(self) -> str:
        """Cargo maps the `dev` profile to the `debug` output folder."""
        return "debug" if self.profile == "dev" else self.profile

    @property
    def wasm_filename(self) -> str:
        return f"{self.artifact_name}.wasm"

    @property
    def toolchain_output(self) -> str:
        """Relative path where cargo leaves the compiled artifact."""
        return str(Path(self.target_dir) / self.target_triple / self.profile_dir / self.wasm_filename)

    @property
    def staged_artifact(self) -> str:
        """Relative path of the staged artifact handed to the deploy tool."""
        return str(Path(self.release_dir) / self.wasm_filename)


@dataclass
class StepResult:
    """Outcome of a single pipeline step."""

    step: StepName
    command: list[str]
    exit_code: int
    duration_seconds: float = 0.0
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass
class PipelineResult:
    """
    Outcome of a whole run.

    Terminal states:
    - Succeeded: every step exited zero (failed_step is None, exit_code 0)
    - Failed@step: the first non-zero step; later steps never ran
    """

    results: list[StepResult] = field(default_factory=list)
    failed_step: StepName | None = None
    exit_code: int = 0
    artifact_sha256: str | None = None
    dev_account: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.failed_step is None and self.exit_code == 0

    @property
    def executed_steps(self) -> list[StepName]:
        return [r.step for r in self.results]
