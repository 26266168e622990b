"""
Event Record Mapper.

Maps persistence rows to canonical ``Event`` objects using configured paths.
Supports:
- Dot notation for nested fields: "user.name"
- List indexing: "photos[0].url"
- Mapping rows and attribute-style (ORM) rows

The geography column goes through the geometry normalizer as part of Event
validation, so rows may carry it in any supported encoding.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, Optional

from chronicle.configs.config import Config
from chronicle.schemas.event import Event

logger = logging.getLogger(__name__)

# One path step: a key name or a [n] list index
PATH_SEGMENT = re.compile(r"([^.\[\]]+)|\[(\d+)\]")

# Row layout of the events table as read by the route handlers
DEFAULT_RECORD_MAPPING: Dict[str, str] = {
    "id": "id",
    "title": "title",
    "description": "description",
    "timestamp": "date",
    "source_type": "sourceType",
    "images": "imageUrl",
    "tags": "tags",
    "author_id": "userId",
    "author": "user",
    "geo": "geom",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


class EventRecordMapper:
    """
    Maps raw persistence rows to Event objects using configured field paths.
    """

    def __init__(self, field_mappings: Optional[Dict[str, str]] = None):
        """
        Initialize the record mapper.

        Args:
            field_mappings: Dict mapping Event field names to row paths.
                Example: {"timestamp": "date", "author": "user"}
        """
        self.field_mappings = dict(field_mappings or DEFAULT_RECORD_MAPPING)

    def map_record(self, record: Any) -> Dict[str, Any]:
        """
        Extract Event fields from a row. Missing paths map to None.

        Args:
            record: Row as a mapping or an object with attributes

        Returns:
            Dict keyed by Event field name
        """
        result = {}

        for target_field, source_path in self.field_mappings.items():
            result[target_field] = self._extract_field(record, source_path)

        return {key: value for key, value in result.items() if value is not None}

    def to_event(self, record: Any) -> Event:
        """
        Map a row and validate it into an Event.

        Raises:
            InvalidEvent: If the row has no usable title or timestamp
        """
        mapped = self.map_record(record)

        author = mapped.get("author")
        if author is not None and not isinstance(author, Mapping):
            # ORM relation object: read the public user fields off it
            mapped["author"] = {
                key: getattr(author, key, None) for key in ("id", "name", "email", "image")
            }

        if "geo" in self.field_mappings and mapped.get("geo") is None:
            logger.debug("Row %s has no geometry", mapped.get("id"))

        return Event.from_mapping(mapped)

    def _extract_field(self, data: Any, path: str) -> Any:
        """
        Walk ``path`` through a row, one segment at a time.

        ``user.name`` reads nested keys or attributes, ``images[0]`` indexes a
        list. Any missing step yields None.
        """
        value = data
        for name, index in PATH_SEGMENT.findall(path):
            if value is None:
                return None
            if name:
                value = self._get_value(value, name)
                continue
            position = int(index)
            if not isinstance(value, (list, tuple)) or position >= len(value):
                return None
            value = value[position]
        return value

    @staticmethod
    def _get_value(data: Any, key: str) -> Any:
        """Get a key from a mapping or an attribute from an object; None otherwise."""
        if isinstance(data, Mapping):
            return data.get(key)
        if data is None or isinstance(data, (str, bytes, int, float, list, tuple)):
            return None
        return getattr(data, key, None)


def create_record_mapper_from_config() -> EventRecordMapper:
    """
    Create an EventRecordMapper from the ``record_mapping`` YAML section.

    Falls back to DEFAULT_RECORD_MAPPING when the section is absent.
    """
    mappings = Config.get_projection_section("record_mapping")
    return EventRecordMapper(field_mappings=mappings or None)
