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
# PROCESS INFRASTRUCTURE - Blocking Sub-process Execution
# -----------------------------------------------------------------------------
# Responsibility: Run one external command to completion in the working
# directory, echo its output live, and hand back the exit code plus the
# captured text.
#
# Contract:
# - Output is passed through untouched (no markup, no wrapping)
# - The caller decides what a non-zero exit means
# - A missing executable is reported as exit 127, like a shell would
# - A timed-out command is killed and reported as exit 124
# - A child killed by signal N is reported as exit 128+N
# - Ctrl-C terminates the child, waits for it, and re-raises KeyboardInterrupt
# -----------------------------------------------------------------------------

import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

console = Console()

EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127

INTERRUPT_GRACE_SECONDS = 5


@dataclass
class CommandResult:
    """Exit status and combined stdout/stderr of a finished command."""

    command: list[str]
    exit_code: int
    output: str = ""


class CommandRunner:
    """
    Synchronous sub-process wrapper.

    One command at a time: run() does not return until the child has exited,
    so callers get strict sequencing for free.
    """

    def __init__(self, workdir: str | Path = ".", timeout: int | None = None) -> None:
        """
        Args:
            workdir: Directory every command runs in.
            timeout: Optional per-command limit in seconds.
        """
        self._workdir = Path(workdir)
        self._timeout = timeout

    @property
    def workdir(self) -> Path:
        return self._workdir

    def run(self, cmd: list[str]) -> CommandResult:
        """
        Run a command and stream its output.

        Args:
            cmd: Command parts (e.g., ["cargo", "clean"])

        Returns:
            CommandResult with the child's exit code and output.
        """
        console.print(f"[dim]$ {' '.join(cmd)}[/dim]", highlight=False)

        try:
            proc = subprocess.Popen(
                cmd,
                cwd=self._workdir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except FileNotFoundError:
            message = f"{cmd[0]}: command not found"
            console.print(f"[red]{message}[/red]")
            return CommandResult(command=cmd, exit_code=EXIT_NOT_FOUND, output=message)

        lines: list[str] = []

        def _pump():
            for line in proc.stdout:
                lines.append(line)
                console.out(line, end="", highlight=False)

        reader = threading.Thread(target=_pump, daemon=True)
        reader.start()

        try:
            exit_code = proc.wait(timeout=self._timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
            reader.join(timeout=5)
            console.print(f"[red]{cmd[0]}: timed out after {self._timeout}s[/red]")
            return CommandResult(command=cmd, exit_code=EXIT_TIMEOUT, output="".join(lines))
        except KeyboardInterrupt:
            proc.terminate()
            try:
                proc.wait(timeout=INTERRUPT_GRACE_SECONDS)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
            reader.join(timeout=INTERRUPT_GRACE_SECONDS)
            raise

        reader.join()
        # Killed by signal N: report 128+N like a shell does
        if exit_code < 0:
            exit_code = 128 - exit_code
        return CommandResult(command=cmd, exit_code=exit_code, output="".join(lines))
