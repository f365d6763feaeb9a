# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Contains the pipeline settings (Pydantic) and the step/run result records
# shared between the runner and its collaborators.
# -----------------------------------------------------------------------------

from .models import PipelineConfig, PipelineResult, StepName, StepResult

__all__ = ["PipelineConfig", "PipelineResult", "StepName", "StepResult"]
