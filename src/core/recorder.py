# -----------------------------------------------------------------------------
# RUN RECORDER - BLACK BOX
# -----------------------------------------------------------------------------
# Responsibility: Keep a timestamped trail of every step of a run, pass or
# fail, and optionally persist it as run_<timestamp>.json.
#
# The recorder only observes. It never changes the outcome of a run.
# -----------------------------------------------------------------------------

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console

from src.domain.models import PipelineResult, StepResult

console = Console()


@dataclass
class RunLogEntry:
    """A single entry in the run log."""

    timestamp: str
    event: str
    details: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RunRecorder:
    """Collects run events; writes them out on finalize() if a folder is set."""

    def __init__(self, log_dir: str | Path | None = None) -> None:
        self.folder = Path(log_dir) if log_dir else None
        self._log: list[RunLogEntry] = []
        self._started = _now()

    def start(self) -> None:
        """Begin a fresh run: drop earlier events and re-stamp the start time."""
        self._log = []
        self._started = _now()

    @property
    def entries(self) -> list[RunLogEntry]:
        return list(self._log)

    def log(self, event: str, details: str | None = None) -> None:
        """Record an event."""
        self._log.append(RunLogEntry(timestamp=_now(), event=event, details=details))

    def record_step(self, result: StepResult) -> None:
        event = "STEP_OK" if result.ok else "STEP_FAILED"
        self.log(event, f"{result.step.value}: exit {result.exit_code} ({result.duration_seconds:.2f}s)")

    def finalize(self, result: PipelineResult) -> Path | None:
        """
        Persist the run log.

        Returns:
            Path to the written JSON file, or None when no folder is configured
            or the folder cannot be written.
        """
        if self.folder is None:
            return None

        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.folder / f"run_{stamp}.json"

        report = {
            "started": self._started,
            "finished": _now(),
            "verdict": "PASS" if result.succeeded else "FAIL",
            "exit_code": result.exit_code,
            "failed_step": result.failed_step.value if result.failed_step else None,
            "artifact_sha256": result.artifact_sha256,
            "dev_account": result.dev_account,
            "steps": [
                {
                    "step": r.step.value,
                    "command": r.command,
                    "exit_code": r.exit_code,
                    "duration_seconds": round(r.duration_seconds, 3),
                }
                for r in result.results
            ],
            "events": [
                {"timestamp": e.timestamp, "event": e.event, "details": e.details} for e in self._log
            ],
        }

        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(report, f, indent=2)
        except OSError as e:
            console.print(f"[yellow][RECORDER] Could not save run log to {self.folder}: {e}[/yellow]")
            return None

        console.print(f"[green][RECORDER] Run log saved: {path}[/green]")
        return path
