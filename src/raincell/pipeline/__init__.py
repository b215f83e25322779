"""Pipeline modules.

- orchestrator: Main pipeline controller
- processor: Per-file processing and result table
"""

from raincell.pipeline.orchestrator import PipelineOrchestrator
from raincell.pipeline.processor import FrameProcessor, FrameResult, results_to_dataframe

__all__ = [
    "PipelineOrchestrator",
    "FrameProcessor",
    "FrameResult",
    "results_to_dataframe",
]
