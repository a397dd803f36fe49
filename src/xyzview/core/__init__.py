"""xyzview core: pipeline runner, base step, shared contracts."""

from .step_base import BaseStep
from .contracts import PipelineConfig, StepEntry, StepMeta
from .pipeline_runner import run_pipeline, load_pipeline_config
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "PipelineConfig",
    "StepEntry",
    "StepMeta",
    "run_pipeline",
    "load_pipeline_config",
    "setup_logging",
]
