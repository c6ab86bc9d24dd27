"""
Value objects for the domain layer.

Value objects are immutable objects that represent concepts
with no conceptual identity, only defined by their attributes.
"""

from .status_update import STATUS_COMPLETE, StatusUpdate

__all__ = ["StatusUpdate", "STATUS_COMPLETE"]
