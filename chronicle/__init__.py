"""
Event Chronicle core.

Geometry normalization and multi-target projection of chronicle events into
card, Timeline and StoryMap view shapes.
"""

from chronicle.errors import InvalidEvent, UnparseableGeometry
from chronicle.normalization.geometry import normalize
from chronicle.projection.projector import EventProjector
from chronicle.schemas.event import Author, Event, SourceType
from chronicle.schemas.geo import GeoPoint
from chronicle.schemas.slides import ProjectionTarget

__all__ = [
    "Author",
    "Event",
    "EventProjector",
    "GeoPoint",
    "InvalidEvent",
    "ProjectionTarget",
    "SourceType",
    "UnparseableGeometry",
    "normalize",
]
