"""
Ordered StoryMap slide list.

A StoryMap may open with one overview slide. While it exists it always sits at
index 0: inserts at the front land right after it, moves cannot displace it,
and removing event slides keeps the relative order of the rest.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Union

from chronicle.schemas.slides import OverviewSlide, StoryMapSlide

logger = logging.getLogger(__name__)

Slide = Union[OverviewSlide, StoryMapSlide]


class SlideSequence:
    """
    Overview-first sequence of StoryMap slides.

    Indices address the whole sequence, overview included.
    """

    def __init__(
        self,
        slides: Iterable[Slide] = (),
        overview: OverviewSlide | None = None,
    ) -> None:
        self._overview: OverviewSlide | None = None
        self._events: list[StoryMapSlide] = []
        if overview is not None:
            self.set_overview(overview)
        self.extend(slides)

    # ------------------------------------------------------------------
    # Overview
    # ------------------------------------------------------------------

    @property
    def overview(self) -> OverviewSlide | None:
        return self._overview

    @property
    def event_slides(self) -> tuple[StoryMapSlide, ...]:
        return tuple(self._events)

    def set_overview(self, overview: OverviewSlide) -> None:
        """Place ``overview`` at index 0, replacing any existing one."""
        if not isinstance(overview, OverviewSlide):
            raise TypeError("set_overview expects an OverviewSlide")
        if self._overview is not None:
            logger.debug("Replacing existing overview slide")
        self._overview = overview

    def clear_overview(self) -> OverviewSlide | None:
        overview, self._overview = self._overview, None
        return overview

    # ------------------------------------------------------------------
    # Event slides
    # ------------------------------------------------------------------

    def append(self, slide: Slide) -> None:
        if isinstance(slide, OverviewSlide):
            self.set_overview(slide)
            return
        self._events.append(slide)

    def extend(self, slides: Iterable[Slide]) -> None:
        for slide in slides:
            self.append(slide)

    def insert(self, index: int, slide: Slide) -> None:
        """
        Insert at a sequence index. Index 0 means "first event slide" while an
        overview is present.
        """
        if isinstance(slide, OverviewSlide):
            self.set_overview(slide)
            return

        if index < 0:
            index = max(len(self) + index, 0)
        position = min(max(index - self._offset, 0), len(self._events))
        self._events.insert(position, slide)

    def remove(self, index: int) -> Slide:
        """Remove and return the slide at ``index`` (0 is the overview, if any)."""
        index = self._resolve(index)
        if self._overview is not None and index == 0:
            return self.clear_overview()
        return self._events.pop(index - self._offset)

    def remove_by_id(self, slide_id: str) -> StoryMapSlide | None:
        """Remove the first event slide with ``slide_id``; None if absent."""
        for position, slide in enumerate(self._events):
            if slide.id == slide_id:
                return self._events.pop(position)
        return None

    def move(self, source: int, destination: int) -> None:
        """
        Move an event slide. The overview cannot be moved, and a destination of
        0 with an overview present means "first event slide".
        """
        source = self._resolve(source)
        if self._overview is not None and source == 0:
            raise ValueError("The overview slide is fixed at index 0")

        slide = self._events.pop(source - self._offset)
        if destination < 0:
            destination = max(len(self) + 1 + destination, 0)
        position = min(max(destination - self._offset, 0), len(self._events))
        self._events.insert(position, slide)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def to_list(self) -> list[Slide]:
        head: list[Slide] = [self._overview] if self._overview is not None else []
        return head + list(self._events)

    def dump(self) -> list[dict]:
        """Wire form of every slide, overview first."""
        return [slide.to_wire() for slide in self.to_list()]

    def __len__(self) -> int:
        return len(self._events) + self._offset

    def __iter__(self) -> Iterator[Slide]:
        return iter(self.to_list())

    def __getitem__(self, index: int) -> Slide:
        return self.to_list()[index]

    @property
    def _offset(self) -> int:
        return 1 if self._overview is not None else 0

    def _resolve(self, index: int) -> int:
        size = len(self)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("slide index out of range")
        return index
