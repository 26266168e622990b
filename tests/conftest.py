"""
Shared pytest fixtures for the Event Chronicle test suite.

Provides reusable fixtures for creating Event test objects.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest

from chronicle.projection.options import ProjectionOptions
from chronicle.projection.projector import EventProjector
from chronicle.schemas.event import Author, Event, SourceType
from chronicle.schemas.geo import GeoPoint


@pytest.fixture
def create_event():
    """
    Return a function that creates Event objects with sensible defaults.

    Factory fixture to create Event instances for testing.
    All defaults can be overridden via keyword arguments.

    Example:
        event = create_event(title="My Event", geo=None)
    """

    def _create_event(
        title: str = "Forbidden City reopens",
        timestamp: Optional[datetime] = None,
        **kwargs,
    ) -> Event:
        if timestamp is None:
            timestamp = datetime(2024, 6, 15, 20, 30, tzinfo=timezone.utc)

        author_id = str(uuid.uuid4())
        defaults = {
            "id": str(uuid.uuid4()),
            "title": title,
            "description": "The palace museum reopened to visitors.",
            "timestamp": timestamp,
            "source_type": SourceType.NEWS,
            "images": ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"],
            "tags": ["culture", "history"],
            "author_id": author_id,
            "author": Author(id=author_id, name="Li Wei", email="li@example.com"),
            "geo": GeoPoint(lat=39.9042, lng=116.4074),
        }

        # Merge defaults with provided kwargs
        defaults.update(kwargs)

        return Event(**defaults)

    return _create_event


@pytest.fixture
def sample_event(create_event):
    """
    Return a single default test event.
    """
    return create_event()


@pytest.fixture
def projector():
    """Projector with built-in defaults, independent of the YAML file."""
    return EventProjector(ProjectionOptions())
