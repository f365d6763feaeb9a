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
# THE TOOLCHAIN - CARGO CLEAN & BUILD
# -----------------------------------------------------------------------------
# Responsibility: Drive cargo for the first two pipeline steps.
#
# - clean: wipe the whole target directory so every artifact is fresh
# - build: compile for wasm32-unknown-unknown with the configured profile
#
# Cargo is an opaque collaborator: we only rely on its exit code.
# -----------------------------------------------------------------------------

from rich.console import Console

from src.core.errors import ToolchainError
from src.domain.models import PipelineConfig
from src.infra.process import CommandResult, CommandRunner

console = Console()


class Toolchain:
    """Thin cargo wrapper used by the Clean and Build steps."""

    def __init__(self, config: PipelineConfig, runner: CommandRunner) -> None:
        self._config = config
        self._runner = runner

    def clean_command(self) -> list[str]:
        return [self._config.cargo_bin, "clean"]

    def build_command(self) -> list[str]:
        """`cargo build --target <triple> --release` (or `--profile <name>`)."""
        cmd = [self._config.cargo_bin, "build", "--target", self._config.target_triple]
        if self._config.profile == "release":
            cmd.append("--release")
        else:
            cmd.extend(["--profile", self._config.profile])
        return cmd

    def clean(self) -> CommandResult:
        """
        Remove previous build outputs.

        Raises:
            ToolchainError: If cargo clean exits non-zero.
        """
        console.print("[cyan][TOOLCHAIN] Cleaning previous build outputs...[/cyan]")
        return self._invoke(self.clean_command(), "clean")

    def build(self) -> CommandResult:
        """
        Compile the contract to WebAssembly.

        Raises:
            ToolchainError: If compilation fails.
        """
        console.print(
            f"[cyan][TOOLCHAIN] Building {self._config.artifact_name} "
            f"({self._config.target_triple}, {self._config.profile})...[/cyan]"
        )
        return self._invoke(self.build_command(), "build")

    def _invoke(self, cmd: list[str], action: str) -> CommandResult:
        result = self._runner.run(cmd)
        if result.exit_code != 0:
            console.print(f"[red][TOOLCHAIN] cargo {action} failed (exit {result.exit_code})[/red]")
            raise ToolchainError(
                f"cargo {action} failed with exit code {result.exit_code}",
                exit_code=result.exit_code,
                output=result.output,
                command=cmd,
            )
        console.print(f"[green][TOOLCHAIN] cargo {action} OK[/green]")
        return result
