# -----------------------------------------------------------------------------
# THE STAGER - RELEASE ARTIFACT COPY
# -----------------------------------------------------------------------------
# Responsibility: Copy the freshly built .wasm from cargo's output folder to
# the shared release directory, overwriting whatever was there.
#
# The staged file has no versioning; its sha256 is reported so two runs over
# the same sources can be compared byte for byte.
# -----------------------------------------------------------------------------

import hashlib
import shutil
from pathlib import Path

from rich.console import Console

from src.core.errors import StagingError
from src.domain.models import PipelineConfig
from src.infra.process import CommandResult

console = Console()


def sha256_file(path: Path) -> str:
    """Hex sha256 of a file, read in chunks."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


class Stager:
    """Copies the build output into the release directory."""

    def __init__(self, config: PipelineConfig, workdir: Path) -> None:
        self._config = config
        self._workdir = Path(workdir)

    def stage_command(self) -> list[str]:
        return ["cp", self._config.toolchain_output, self._config.staged_artifact]

    @property
    def staged_path(self) -> Path:
        return self._workdir / self._config.staged_artifact

    def stage(self) -> CommandResult:
        """
        Copy the artifact into place.

        The release directory is created if it does not exist yet.

        Returns:
            CommandResult describing the copy (exit code 0).

        Raises:
            StagingError: If the build output is missing or the copy fails.
        """
        source = self._workdir / self._config.toolchain_output
        destination = self.staged_path
        cmd = self.stage_command()

        if not source.is_file():
            message = f"Build artifact not found: {self._config.toolchain_output}"
            console.print(f"[red][STAGE] {message}[/red]")
            raise StagingError(message, exit_code=1, output=message, command=cmd)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as e:
            message = f"Cannot stage artifact to {self._config.staged_artifact}: {e}"
            console.print(f"[red][STAGE] {message}[/red]")
            raise StagingError(message, exit_code=1, output=message, command=cmd)

        size = destination.stat().st_size
        console.print(f"[green][STAGE] {self._config.staged_artifact} ({size} bytes)[/green]")
        return CommandResult(command=cmd, exit_code=0)

    def digest(self) -> str:
        """sha256 of the currently staged artifact."""
        return sha256_file(self.staged_path)
