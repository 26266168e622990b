"""
Full Timeline and StoryMap payloads.

A Timeline document is a title slide plus one slide per event; a StoryMap
document wraps an overview slide and one slide per event in the renderer's
``storymap`` envelope. Events that cannot be projected are skipped with a
warning unless ``strict`` is set.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterable, TypeVar

from chronicle.errors import InvalidEvent
from chronicle.monitoring.logging import with_context
from chronicle.projection.projector import EventProjector
from chronicle.projection.sequence import SlideSequence
from chronicle.schemas.event import Event
from chronicle.schemas.slides import (
    SlideText,
    StoryMapLocation,
    TimelineBackground,
    TimelineTitleSlide,
)

logger = logging.getLogger(__name__)

S = TypeVar("S")


def _project_all(
    events: Iterable[Event | Mapping[str, Any]],
    project: Callable[[Event | Mapping[str, Any]], S],
    *,
    strict: bool,
    collection_id: str | None,
) -> list[S]:
    log = with_context(logger, collection_id=collection_id)
    slides: list[S] = []
    for event in events:
        try:
            slides.append(project(event))
        except InvalidEvent as e:
            if strict:
                raise
            log.warning("Skipping event %s: %s", e.event_id, e)
    return slides


def build_timeline_document(
    title: str,
    description: str = "",
    events: Iterable[Event | Mapping[str, Any]] = (),
    *,
    background: TimelineBackground | Mapping[str, Any] | None = None,
    projector: EventProjector | None = None,
    strict: bool = False,
    collection_id: str | None = None,
) -> dict:
    """
    Build the JSON payload handed to the Timeline renderer.

    Returns:
        ``{"title": {...}, "events": [...], "background"?: {...}}``
    """
    projector = projector or EventProjector()
    slides = _project_all(
        events,
        projector.to_timeline_slide,
        strict=strict,
        collection_id=collection_id,
    )

    document: dict = {
        "title": TimelineTitleSlide(text=SlideText(headline=title or "", text=description or "")).to_wire(),
        "events": [slide.to_wire() for slide in slides],
    }

    if background is not None:
        if isinstance(background, Mapping):
            background = TimelineBackground.model_validate(dict(background))
        wire = background.to_wire()
        if wire:
            document["background"] = wire

    return document


def build_storymap_sequence(
    name: str,
    description: str = "",
    events: Iterable[Event | Mapping[str, Any]] = (),
    *,
    location: StoryMapLocation | None = None,
    projector: EventProjector | None = None,
    strict: bool = False,
    collection_id: str | None = None,
) -> SlideSequence:
    """Assemble the overview slide and event slides of a StoryMap, overview first."""
    projector = projector or EventProjector()
    slides = _project_all(
        events,
        projector.to_storymap_slide,
        strict=strict,
        collection_id=collection_id,
    )
    return SlideSequence(
        slides,
        overview=projector.overview_slide(name, description, location=location),
    )


def build_storymap_document(
    name: str,
    description: str = "",
    events: Iterable[Event | Mapping[str, Any]] = (),
    *,
    location: StoryMapLocation | None = None,
    projector: EventProjector | None = None,
    strict: bool = False,
    collection_id: str | None = None,
) -> dict:
    """
    Build the JSON payload handed to the StoryMap renderer.

    Returns:
        ``{"storymap": {"language", "map_type", "map_as_image", "slides"}}``
    """
    projector = projector or EventProjector()
    sequence = build_storymap_sequence(
        name,
        description,
        events,
        location=location,
        projector=projector,
        strict=strict,
        collection_id=collection_id,
    )
    options = projector.options
    return {
        "storymap": {
            "language": options.storymap_language,
            "map_type": options.storymap_map_type,
            "map_as_image": options.storymap_map_as_image,
            "slides": sequence.dump(),
        }
    }
