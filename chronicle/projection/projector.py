"""
Event Projector.

Projects a canonical ``Event`` into the view shapes consumed downstream:

- ``CardView`` for event lists
- ``TimelineSlide`` for the Timeline renderer
- ``StoryMapSlide`` (plus a synthetic overview slide) for the StoryMap renderer

Projection is pure: the same event and target always give the same output,
and the only error raised is ``InvalidEvent`` (missing title or timestamp).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from chronicle.errors import InvalidEvent
from chronicle.monitoring.logging import with_context
from chronicle.projection.dates import date_only, decompose
from chronicle.projection.options import DEFAULT_STORYMAP_LOCATION, ProjectionOptions
from chronicle.schemas.event import Event, parse_instant
from chronicle.schemas.geo import GeoPoint
from chronicle.schemas.slides import (
    CardView,
    OverviewSlide,
    ProjectionTarget,
    SlideText,
    StoryMapLocation,
    StoryMapMedia,
    StoryMapSlide,
    TimelineDate,
    TimelineMedia,
    TimelineSlide,
)

logger = logging.getLogger(__name__)


def truncate(text: str, max_length: int = 100, marker: str = "...") -> str:
    """
    Shorten ``text`` to ``max_length`` characters plus ``marker``.

    Text at or under the limit is returned unchanged.
    """
    if max_length < 0:
        raise ValueError("max_length must not be negative")
    if len(text) <= max_length:
        return text
    return text[:max_length] + marker


def to_story_map_location(
    geo: GeoPoint | None,
    default: StoryMapLocation = DEFAULT_STORYMAP_LOCATION,
) -> StoryMapLocation:
    """
    Convert an application point to the StoryMap ``{lat, lon}`` shape.

    No axis swap: ``lon`` is ``geo.lng``. Unlike GeoJSON, both sides here are
    named, so the order never flips. Absent geometry maps to ``default``.
    """
    if geo is None:
        return default
    return StoryMapLocation(lat=geo.lat, lon=geo.lng)


class EventProjector:
    """
    Stateless projector from Event to target view shapes.

    Safe to share between threads: it holds only read-only options.
    """

    def __init__(self, options: ProjectionOptions | None = None) -> None:
        self.options = options or ProjectionOptions.from_config()

    def project(
        self,
        event: Event | Mapping[str, Any],
        target: ProjectionTarget | str,
        *,
        max_length: int | None = None,
    ) -> CardView | TimelineSlide | StoryMapSlide:
        """
        Project an event into one target shape.

        Args:
            event: Canonical Event, or a raw mapping validated into one
            target: ProjectionTarget (or its string value)
            max_length: Card description limit; defaults to the configured one

        Returns:
            CardView, TimelineSlide or StoryMapSlide

        Raises:
            InvalidEvent: If the title or timestamp is missing or unreadable
            ValueError: If max_length is negative (a caller error, not an event one)
        """
        target = ProjectionTarget(target)

        if target == ProjectionTarget.CARD:
            return self.to_card(event, max_length=max_length)
        if target == ProjectionTarget.TIMELINE:
            return self.to_timeline_slide(event)
        return self.to_storymap_slide(event)

    def project_many(
        self,
        events: list[Event | Mapping[str, Any]],
        target: ProjectionTarget | str,
        **kwargs: Any,
    ) -> list[CardView | TimelineSlide | StoryMapSlide]:
        """Project every event, in order. Any InvalidEvent propagates."""
        return [self.project(event, target, **kwargs) for event in events]

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def to_card(self, event: Event | Mapping[str, Any], max_length: int | None = None) -> CardView:
        limit = self.options.card_max_length if max_length is None else max_length
        if limit < 0:
            raise ValueError(f"max_length must not be negative, got {limit}")
        event = self._ensure_event(event)

        return CardView(
            id=event.id,
            title=event.title,
            description=truncate(event.description, limit, self.options.truncation_marker),
            timestamp_date_only=date_only(self._timestamp(event)),
            images=list(event.images),
            tags=list(event.tags),
            geo=event.geo,
        )

    def to_timeline_slide(self, event: Event | Mapping[str, Any]) -> TimelineSlide:
        event = self._ensure_event(event)
        parts = decompose(self._timestamp(event))

        start_date = TimelineDate(year=parts.year, month=parts.month, day=parts.day)
        if self.options.timeline_include_time:
            start_date = TimelineDate(
                year=parts.year,
                month=parts.month,
                day=parts.day,
                hour=parts.hour,
                minute=parts.minute,
            )

        # Lossy on purpose: the renderer shows one image and one group per slide
        return TimelineSlide(
            start_date=start_date,
            text=SlideText(headline=event.title, text=event.description),
            media=TimelineMedia(url=event.images[0]) if event.images else None,
            group=event.tags[0] if event.tags else None,
            unique_id=event.id,
        )

    def to_storymap_slide(self, event: Event | Mapping[str, Any]) -> StoryMapSlide:
        event = self._ensure_event(event)

        if event.geo is None:
            with_context(logger, event_id=event.id, target=ProjectionTarget.STORYMAP.value).debug(
                "Event has no location; using default StoryMap location"
            )

        return StoryMapSlide(
            id=event.id,
            date=date_only(self._timestamp(event)),
            text=SlideText(headline=event.title, text=event.description),
            location=to_story_map_location(event.geo, self.options.default_location),
            media=StoryMapMedia(url=event.images[0]) if event.images else None,
        )

    def overview_slide(
        self,
        headline: str,
        text: str = "",
        location: StoryMapLocation | GeoPoint | None = None,
        zoom: int | None = None,
    ) -> OverviewSlide:
        """
        Build the synthetic overview slide that opens a StoryMap.

        Location falls back to the configured default, zoom to the configured
        overview zoom.
        """
        if isinstance(location, GeoPoint):
            location = to_story_map_location(location)

        return OverviewSlide(
            text=SlideText(headline=headline or "", text=text or ""),
            location=location or self.options.default_location,
            zoom=self.options.overview_zoom if zoom is None else zoom,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _ensure_event(event: Event | Mapping[str, Any]) -> Event:
        if isinstance(event, Event):
            missing = []
            if not isinstance(event.title, str) or not event.title.strip():
                missing.append("title")
            if parse_instant(event.timestamp) is None:
                missing.append("timestamp")
            if missing:
                raise InvalidEvent(
                    f"Event {event.id!r} cannot be projected: invalid {', '.join(missing)}",
                    event_id=event.id or None,
                    missing=tuple(missing),
                )
            return event

        if isinstance(event, Mapping):
            return Event.from_mapping(event)

        raise InvalidEvent(f"Cannot project a {type(event).__name__}; expected an Event")

    @staticmethod
    def _timestamp(event: Event) -> datetime:
        # Already checked by _ensure_event
        return parse_instant(event.timestamp)
