# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level infrastructure wrappers:
# - CommandRunner: blocking sub-process execution with live output
# -----------------------------------------------------------------------------

from .process import CommandResult, CommandRunner

__all__ = ["CommandResult", "CommandRunner"]
