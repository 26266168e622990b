"""
Projection target shapes.

These models are the wire contract with the card list UI, the Timeline
renderer and the StoryMap renderer. Field names and nesting are read literally
by those libraries (``text.headline``, ``media.url``, ``location.lon``), so
they must not be renamed.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from chronicle.schemas.geo import GeoPoint


class ProjectionTarget(str, Enum):
    """
    Shapes an Event can be projected into.
    """

    CARD = "card"
    TIMELINE = "timeline"
    STORYMAP = "storymap"


class WireModel(BaseModel):
    """Base for target shapes: optional members are omitted on the wire."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict:
        """Dump by alias without ``None`` members."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class SlideText(WireModel):
    headline: str
    text: str = ""


# ============================================================================
# CARD VIEW
# ============================================================================


class CardView(WireModel):
    """
    List/summary shape of an event.
    """

    id: str
    title: str
    description: str = ""
    timestamp_date_only: str = Field(
        alias="timestampDateOnly",
        description="Event date as YYYY-MM-DD (UTC)",
    )
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    geo: Optional[GeoPoint] = None


# ============================================================================
# TIMELINE
# ============================================================================


class TimelineDate(WireModel):
    """
    Calendar date as read by the Timeline renderer.
    """

    year: int
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    hour: Optional[int] = Field(default=None, ge=0, le=23)
    minute: Optional[int] = Field(default=None, ge=0, le=59)


class TimelineMedia(WireModel):
    url: str


class TimelineSlide(WireModel):
    """
    One event on a Timeline. Only the first image and first tag are carried.
    """

    start_date: TimelineDate
    text: SlideText
    media: Optional[TimelineMedia] = None
    group: Optional[str] = None
    unique_id: str


class TimelineBackground(WireModel):
    url: Optional[str] = None
    alt: Optional[str] = None
    color: Optional[str] = None


class TimelineTitleSlide(WireModel):
    text: SlideText


# ============================================================================
# STORYMAP
# ============================================================================


class StoryMapLocation(WireModel):
    """
    StoryMap location. Note the renderer reads ``lon``, not ``lng``.
    """

    lat: float
    lon: float


class StoryMapMedia(WireModel):
    url: str
    credit: str = ""
    caption: str = ""


class StoryMapSlide(WireModel):
    """
    One event on a StoryMap.
    """

    id: str
    date: str
    text: SlideText
    location: StoryMapLocation
    media: Optional[StoryMapMedia] = None


class OverviewSlide(WireModel):
    """
    Synthetic first slide of a StoryMap describing the whole collection.
    """

    type: Literal["overview"] = "overview"
    text: SlideText
    location: Optional[StoryMapLocation] = None
    zoom: Optional[int] = None
