"""
Domain models for the status sync.

These models carry the state of one sync request between pipeline stages.
"""

from .pipeline_state import PipelineState

__all__ = ["PipelineState"]
