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
# THE PIPELINE RUNNER - BUILD / STAGE / DEPLOY
# -----------------------------------------------------------------------------
# Responsibility: Run the five steps in fixed order and stop at the first
# failure.
#
#   clean -> build -> stage -> reset_state -> deploy
#
# Fail-fast: the first step that fails decides the run's exit code and no
# later step is started. There is no retry, no rollback and no resume; the
# only recovery is to run the whole pipeline again.
#
# Ctrl-C is not handled here. It propagates to the caller with the current
# child already terminated and no cleanup of half-finished steps.
# -----------------------------------------------------------------------------

import time
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.core.deployer import Deployer
from src.core.errors import PipelineError
from src.core.recorder import RunRecorder
from src.core.stager import Stager
from src.core.toolchain import Toolchain
from src.domain.models import PipelineConfig, PipelineResult, StepName, StepResult
from src.infra.process import CommandResult, CommandRunner

console = Console()


class Pipeline:
    """
    Sequential build-and-deploy runner.

    Collaborators are built from the config but can be injected, which is how
    the tests swap in a recording runner instead of real cargo/near.
    """

    def __init__(
        self,
        config: PipelineConfig,
        workdir: str | Path = ".",
        runner: CommandRunner | None = None,
        recorder: RunRecorder | None = None,
    ) -> None:
        self._config = config
        self._workdir = Path(workdir)
        self._runner = runner or CommandRunner(self._workdir, timeout=config.step_timeout_seconds)
        self._recorder = recorder or RunRecorder(
            self._workdir / config.run_log_dir if config.run_log_dir else None
        )

        self.toolchain = Toolchain(config, self._runner)
        self.stager = Stager(config, self._workdir)
        self.deployer = Deployer(config, self._runner, self._workdir)
        self._artifact_sha256: str | None = None

    def plan(self) -> list[tuple[StepName, list[str]]]:
        """The commands the run will execute, in order."""
        return [
            (StepName.CLEAN, self.toolchain.clean_command()),
            (StepName.BUILD, self.toolchain.build_command()),
            (StepName.STAGE, self.stager.stage_command()),
            (StepName.RESET_STATE, self.deployer.reset_command()),
            (StepName.DEPLOY, self.deployer.deploy_command()),
        ]

    def _steps(self) -> list[tuple[StepName, Callable[[], CommandResult]]]:
        return [
            (StepName.CLEAN, self.toolchain.clean),
            (StepName.BUILD, self.toolchain.build),
            (StepName.STAGE, self._stage),
            (StepName.RESET_STATE, self.deployer.reset_state),
            (StepName.DEPLOY, self._deploy),
        ]

    def _stage(self) -> CommandResult:
        result = self.stager.stage()
        self._artifact_sha256 = self.stager.digest()
        self._recorder.log("ARTIFACT_DIGEST", self._artifact_sha256)
        return result

    def _deploy(self) -> CommandResult:
        return self.deployer.deploy(expected_sha256=self._artifact_sha256)

    def run(self) -> PipelineResult:
        """
        Execute every step until one fails.

        Returns:
            PipelineResult. exit_code is 0 on success, otherwise the exit code
            of the first failing step.
        """
        console.rule(f"[bold cyan]wasmforge: {self._config.artifact_name}[/bold cyan]")
        self._artifact_sha256 = None
        self.deployer.last_account = None
        outcome = PipelineResult()
        self._recorder.start()
        self._recorder.log("RUN_STARTED", str(self._workdir.resolve()))

        for name, step in self._steps():
            self._recorder.log("STEP_STARTED", name.value)
            started = time.monotonic()

            try:
                done = step()
            except PipelineError as e:
                failed = StepResult(
                    step=name,
                    command=e.command,
                    exit_code=e.exit_code,
                    duration_seconds=time.monotonic() - started,
                    output=e.output,
                )
                outcome.results.append(failed)
                outcome.failed_step = name
                outcome.exit_code = e.exit_code
                outcome.error = str(e)
                self._recorder.record_step(failed)
                break

            step_result = StepResult(
                step=name,
                command=done.command,
                exit_code=done.exit_code,
                duration_seconds=time.monotonic() - started,
                output=done.output,
            )
            outcome.results.append(step_result)
            self._recorder.record_step(step_result)

        outcome.artifact_sha256 = self._artifact_sha256
        outcome.dev_account = self.deployer.last_account
        self._recorder.log("RUN_FINISHED", f"exit {outcome.exit_code}")
        self._recorder.finalize(outcome)
        self._report(outcome)
        return outcome

    def _report(self, outcome: PipelineResult) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Step")
        table.add_column("Exit")
        table.add_column("Time")

        for r in outcome.results:
            style = "green" if r.ok else "red"
            table.add_row(r.step.value, f"[{style}]{r.exit_code}[/{style}]", f"{r.duration_seconds:.1f}s")

        for name in list(StepName)[len(outcome.results):]:
            table.add_row(f"[dim]{name.value}[/dim]", "[dim]-[/dim]", "[dim]skipped[/dim]")

        if outcome.succeeded:
            title = "[bold green]DEPLOYED[/bold green]"
            border = "green"
        else:
            title = f"[bold red]FAILED @ {outcome.failed_step.value}[/bold red]"
            border = "red"

        console.print(Panel(table, title=title, border_style=border))
        if outcome.dev_account:
            console.print(f"[green]Dev account: {outcome.dev_account}[/green]")
        if outcome.artifact_sha256:
            console.print(f"[dim]sha256: {outcome.artifact_sha256}[/dim]")
