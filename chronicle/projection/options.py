"""Projection defaults, loaded from ``projection.yaml``."""

from __future__ import annotations

from pydantic import BaseModel, Field

from chronicle.configs.config import Config
from chronicle.schemas.slides import StoryMapLocation

# Shown on a StoryMap for events without a location (Beijing).
DEFAULT_STORYMAP_LOCATION = StoryMapLocation(lat=39.9042, lon=116.4074)


class ProjectionOptions(BaseModel):
    """
    Tunables for EventProjector and the document builders.
    """

    card_max_length: int = Field(default=100, ge=0)
    truncation_marker: str = "..."
    timeline_include_time: bool = False
    default_location: StoryMapLocation = DEFAULT_STORYMAP_LOCATION
    overview_zoom: int | None = 4
    storymap_language: str = "en"
    storymap_map_type: str = "osm:standard"
    storymap_map_as_image: bool = False

    @classmethod
    def from_config(cls) -> "ProjectionOptions":
        """Build options from the ``projection`` and ``storymap`` YAML sections."""
        projection = Config.get_projection_section("projection")
        storymap = Config.get_projection_section("storymap")

        values = dict(projection)
        for key in ("language", "map_type", "map_as_image"):
            if key in storymap:
                values[f"storymap_{key}"] = storymap[key]
        return cls.model_validate(values)
