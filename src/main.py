# -----------------------------------------------------------------------------
# WASMFORGE - COMMAND LINE ENTRY POINT
# -----------------------------------------------------------------------------
# Responsibility: The single entry point. With no arguments it runs the full
# clean -> build -> stage -> reset_state -> deploy pipeline in the current
# directory and exits with the pipeline's exit code.
#
# Exit codes:
# - 0: every step succeeded
# - N: exit code of the first failing step
# - 2: invalid configuration
# - 130: interrupted (Ctrl-C)
# -----------------------------------------------------------------------------

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from src.core.config import load_config
from src.core.errors import ConfigError
from src.core.pipeline import Pipeline

console = Console()

EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

app = typer.Typer(add_completion=False, help="Build, stage and dev-deploy a NEAR wasm contract.")


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Pipeline YAML file"),
    workdir: Path = typer.Option(Path("."), "--workdir", "-C", help="Contract crate directory"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the commands without running them"),
) -> None:
    """
    Run the build-and-deploy pipeline.
    """
    load_dotenv(workdir / ".env")

    try:
        settings = load_config(config, workdir)
    except ConfigError as exc:
        console.print(f"[bold red][CONFIG] {exc}[/bold red]")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    pipeline = Pipeline(settings, workdir)

    if dry_run:
        for name, cmd in pipeline.plan():
            typer.echo(f"{name.value}: {' '.join(cmd)}")
        raise typer.Exit(code=0)

    try:
        result = pipeline.run()
    except KeyboardInterrupt:
        console.print("\n[bold yellow][PIPELINE] Interrupted[/bold yellow]")
        raise typer.Exit(code=EXIT_INTERRUPTED)

    raise typer.Exit(code=result.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
