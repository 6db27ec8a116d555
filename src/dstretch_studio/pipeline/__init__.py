"""
Pipeline module.

Chains the stretch, tonal and relief stages and offloads runs to a
background worker.
"""

from dstretch_studio.pipeline.processor import EnhancementPipeline, ProcessingResult
from dstretch_studio.pipeline.worker import PipelineWorker

__all__ = [
    "EnhancementPipeline",
    "ProcessingResult",
    "PipelineWorker",
]
