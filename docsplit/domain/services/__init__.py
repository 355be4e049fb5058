"""
Domain services for business logic that doesn't belong to a specific entity.

Domain services contain business logic that:
- Operates on sequences of entities
- Implements the bundle boundary rules
"""
from .segmentation_engine import BoundaryReason, SegmentationEngine, SegmentationRules

__all__ = ["BoundaryReason", "SegmentationEngine", "SegmentationRules"]
