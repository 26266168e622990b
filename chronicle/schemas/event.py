# chronicle/schemas/event.py
"""
Canonical Event Schema for the Event Chronicle.

This is the already-normalized form every projection reads from: scalar fields
are coerced, list fields degrade to empty lists and the geography column is
reduced to an optional ``GeoPoint``. Only a missing title or timestamp makes an
event unusable.
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from chronicle.errors import InvalidEvent
from chronicle.normalization.geometry import normalize
from chronicle.schemas.geo import GeoPoint

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "timestamp")


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 instant (or datetime/date) as an aware UTC datetime.

    Naive values are taken to be UTC. Returns None when the value cannot be read.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # Offset pushes the instant past datetime.min or datetime.max
        return None


def _string_list(value: Any, field_name: str) -> List[str]:
    """Coerce a list-ish value into a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        logger.debug("Dropping malformed %s value of type %s", field_name, type(value).__name__)
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


# ============================================================================
# ENUMS
# ============================================================================


class SourceType(str, Enum):
    """
    Where the chronicled event was reported.
    """

    NEWS = "news"
    SOCIAL = "social"
    PERSONAL = "personal"
    OTHER = "other"


# ============================================================================
# AUTHOR
# ============================================================================


class Author(BaseModel):
    """
    The user who recorded the event.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    name: str = "Unknown user"
    email: str = ""
    image: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return "" if v is None else str(v)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v):
        return v if isinstance(v, str) and v else "Unknown user"

    @field_validator("email", "image", mode="before")
    @classmethod
    def default_blank(cls, v):
        return v if isinstance(v, str) else ""


# ============================================================================
# MAIN EVENT SCHEMA
# ============================================================================


class Event(BaseModel):
    """
    Canonical chronicle event.

    Accepts snake_case or camelCase keys; ``geo`` may also arrive as ``geom``
    in any raw geometry encoding and is normalized on the way in.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "evt_01",
                "title": "Forbidden City reopens",
                "description": "The palace museum reopened to visitors.",
                "timestamp": "2024-05-01T08:30:00Z",
                "sourceType": "news",
                "images": ["https://cdn.example.com/fc.jpg"],
                "tags": ["culture"],
                "authorId": "usr_01",
                "geo": {"lat": 39.9163, "lng": 116.3972},
            }
        },
    )

    # ---- CORE ----
    id: str = ""
    title: str
    description: str = ""
    timestamp: datetime
    source_type: SourceType = SourceType.NEWS

    # ---- CONTENT ----
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    # ---- AUTHORSHIP ----
    author_id: str = ""
    author: Optional[Author] = None

    # ---- LOCATION ----
    geo: Optional[GeoPoint] = Field(
        default=None,
        validation_alias=AliasChoices("geo", "geom"),
        serialization_alias="geo",
    )

    # ---- PLATFORM TIMESTAMPS ----
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", "author_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v):
        return "" if v is None else str(v)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("title is missing or blank")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, v):
        parsed = parse_instant(v)
        if parsed is None:
            raise ValueError("timestamp is missing or not ISO-8601")
        return parsed

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def lenient_instant(cls, v):
        return parse_instant(v)

    @field_validator("source_type", mode="before")
    @classmethod
    def coerce_source_type(cls, v):
        if v is None:
            return SourceType.NEWS
        if isinstance(v, SourceType):
            return v
        try:
            return SourceType(str(v).strip().lower())
        except ValueError:
            return SourceType.OTHER

    @field_validator("images", mode="before")
    @classmethod
    def coerce_images(cls, v):
        return _string_list(v, "images")

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        return _string_list(v, "tags")

    @field_validator("author", mode="before")
    @classmethod
    def coerce_author(cls, v):
        if v is None or isinstance(v, (Author, Mapping)):
            return v
        return None

    @field_validator("geo", mode="before")
    @classmethod
    def normalize_geo(cls, v):
        return normalize(v)

    @model_validator(mode="after")
    def link_author(self) -> "Event":
        """Keep ``author_id`` and ``author.id`` consistent when only one is given."""
        if self.author is None and self.author_id:
            self.author = Author(id=self.author_id)
        elif self.author is not None and not self.author_id:
            self.author_id = self.author.id
        return self

    @field_serializer("timestamp", "created_at", "updated_at")
    def serialize_instant(self, v: Optional[datetime]) -> Optional[str]:
        """Serialize instants as ISO-8601 UTC with a ``Z`` suffix."""
        if v is None:
            return None
        return v.isoformat().replace("+00:00", "Z")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Event":
        """
        Build an Event from a raw mapping, reporting failures as InvalidEvent.

        Raises:
            InvalidEvent: If title or timestamp is missing or unreadable
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            missing = tuple(
                sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            )
            event_id = data.get("id")
            raise InvalidEvent(
                f"Event {event_id!r} cannot be projected: invalid {', '.join(missing) or 'fields'}",
                event_id=None if event_id is None else str(event_id),
                missing=missing,
            ) from e

    def to_wire(self) -> dict:
        """Dump with camelCase keys, omitting absent optional members."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
