# -----------------------------------------------------------------------------
# PIPELINE ERRORS
# -----------------------------------------------------------------------------
# Every fatal step failure is a PipelineError carrying the exit code the
# pipeline must terminate with and whatever the failing tool printed.
# The runner never wraps or rewrites these; it just stops.
# -----------------------------------------------------------------------------


class PipelineError(Exception):
    """Base class for step failures that abort the run."""

    def __init__(
        self, message: str, exit_code: int = 1, output: str = "", command: list[str] | None = None
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output
        self.command = command or []


class ToolchainError(PipelineError):
    """Raised when `cargo clean` or `cargo build` exits non-zero."""

    pass


class StagingError(PipelineError):
    """Raised when the built artifact cannot be copied to the release dir."""

    pass


class StateResetError(PipelineError):
    """Raised when the local deploy state exists but cannot be removed."""

    pass


class DeployError(PipelineError):
    """Raised when `near dev-deploy` exits non-zero."""

    pass


class VerificationError(DeployError):
    """Raised when the RPC node does not show code on the dev account."""

    pass


class ConfigError(Exception):
    """Raised when the pipeline configuration file is unreadable or invalid."""

    pass
