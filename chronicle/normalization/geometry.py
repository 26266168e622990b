"""
Geometry Normalizer.

Turns a geography value read from storage into a canonical ``GeoPoint``.
The persistence layer hands the column over in one of four shapes:

- GeoJSON-style mapping: ``{"type": "Point", "coordinates": [lng, lat]}``
- Application mapping: ``{"lat": 39.9, "lng": 116.4}`` (numbers or numeric strings)
- A JSON string holding either of the above (``ST_AsGeoJSON`` output)
- (E)WKT text: ``"SRID=4326;POINT(116.4074 39.9042)"``

Anything else is treated as "no location". The normalizer never raises.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from decimal import Decimal
from numbers import Real
from typing import Any

from pydantic import ValidationError

from chronicle.configs.config import Config
from chronicle.configs.settings import get_settings
from chronicle.errors import UnparseableGeometry
from chronicle.schemas.geo import GeoPoint

logger = logging.getLogger(__name__)

# Value used for a coordinate token that does not parse (or parses to NaN).
MALFORMED_COORDINATE_FALLBACK = 0.0

# Optional SRID prefix, then POINT(<lng> <lat>); Z/M members after lat are ignored
WKT_POINT_PATTERN = re.compile(
    r"^\s*(?:SRID=(?P<srid>\d+)\s*;\s*)?POINT\s*(?:ZM|Z|M)?\s*\(\s*(?P<lng>[^\s()]+)\s+(?P<lat>[^\s()]+)(?:\s+[^\s()]+){0,2}\s*\)\s*$",
    re.IGNORECASE,
)


class GeometryNormalizer:
    """
    Parse raw geometry values into ``GeoPoint`` instances.

    Axis order differs per encoding: GeoJSON and WKT are lon-first, the
    application's own mapping is lat/lng by name. Each encoding has its own
    entry point so the convention in use stays visible at the call site.
    """

    @classmethod
    def normalize(cls, raw: Any) -> GeoPoint | None:
        """
        Normalize any supported geometry encoding.

        Rules are applied in order, first match wins:

        1. ``None`` -> ``None``
        2. mapping with ``coordinates`` of length >= 2 -> GeoJSON (lng, lat)
        3. mapping with ``lat`` and ``lng`` -> used as-is
        4. string -> JSON-decoded and retried against rules 2 and 3
        5. string matching ``[SRID=n;]POINT(lng lat)`` -> WKT (lng, lat)
        6. anything else -> ``None``

        Args:
            raw: Geometry value in any of the supported encodings

        Returns:
            GeoPoint, or None when the value carries no usable location
        """
        if raw is None:
            return None

        try:
            return cls._parse(raw)
        except UnparseableGeometry as e:
            logger.debug("Treating geometry as absent: %s", e.reason)
            return None

    @classmethod
    def from_geojson(cls, geometry: Mapping[str, Any] | Sequence[Any]) -> GeoPoint:
        """
        Read a GeoJSON position (``[lng, lat]``) or a mapping carrying one.

        GeoJSON positions are longitude first.

        Raises:
            UnparseableGeometry: If no position with two members is present
        """
        coordinates = geometry.get("coordinates") if isinstance(geometry, Mapping) else geometry

        if isinstance(coordinates, (str, bytes)) or not isinstance(coordinates, Sequence):
            raise UnparseableGeometry(geometry, "coordinates is not an array")
        if len(coordinates) < 2:
            raise UnparseableGeometry(geometry, "coordinates has fewer than two members")

        return cls._point(
            lat=cls._to_float(coordinates[1]),
            lng=cls._to_float(coordinates[0]),
            raw=geometry,
        )

    @classmethod
    def from_lat_lng(cls, geometry: Mapping[str, Any]) -> GeoPoint:
        """
        Read the application's own ``{lat, lng}`` mapping. No axis swap.

        Raises:
            UnparseableGeometry: If either field is missing or not a number/string
        """
        lat = geometry.get("lat")
        lng = geometry.get("lng")
        if not cls._is_scalar(lat) or not cls._is_scalar(lng):
            raise UnparseableGeometry(geometry, "lat/lng missing or not scalar")

        return cls._point(lat=cls._to_float(lat), lng=cls._to_float(lng), raw=geometry)

    @classmethod
    def parse_wkt(cls, text: str) -> GeoPoint:
        """
        Read ``POINT(lng lat)`` text, optionally prefixed by ``SRID=n;``.

        The first token is longitude, the second latitude.

        Raises:
            UnparseableGeometry: If the text is not a WKT point
        """
        match = WKT_POINT_PATTERN.match(text)
        if not match:
            raise UnparseableGeometry(text, "not a WKT point")

        return cls._point(
            lat=cls._to_float(match.group("lat")),
            lng=cls._to_float(match.group("lng")),
            raw=text,
        )

    @staticmethod
    def to_ewkt(point: GeoPoint, srid: int | None = None) -> str:
        """
        Format a point as EWKT for the persistence layer.

        The SRID defaults to ``geometry.srid`` in ``projection.yaml``, then to
        ``Settings.DEFAULT_SRID``.

        Example:
            >>> GeometryNormalizer.to_ewkt(GeoPoint(lat=39.9042, lng=116.4074))
            'SRID=4326;POINT(116.4074 39.9042)'
        """
        if srid is None:
            srid = Config.get_projection_section("geometry").get("srid", get_settings().DEFAULT_SRID)
        return f"SRID={srid};POINT({point.lng} {point.lat})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @classmethod
    def _parse(cls, raw: Any) -> GeoPoint:
        if isinstance(raw, GeoPoint):
            return raw

        if isinstance(raw, Mapping):
            return cls._parse_mapping(raw)

        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")

        if isinstance(raw, str):
            try:
                decoded = json.loads(raw)
            except RecursionError:
                raise UnparseableGeometry(raw[:80], "JSON nested too deeply")
            except ValueError:
                # Not JSON; WKT is the only encoding left
                return cls.parse_wkt(raw)
            if isinstance(decoded, Mapping):
                return cls._parse_mapping(decoded)
            raise UnparseableGeometry(raw, "JSON value is not an object")

        raise UnparseableGeometry(raw, f"unsupported type {type(raw).__name__}")

    @classmethod
    def _parse_mapping(cls, raw: Mapping[str, Any]) -> GeoPoint:
        coordinates = raw.get("coordinates")
        if (
            isinstance(coordinates, Sequence)
            and not isinstance(coordinates, (str, bytes))
            and len(coordinates) >= 2
        ):
            return cls.from_geojson(raw)

        if "lat" in raw and "lng" in raw:
            return cls.from_lat_lng(raw)

        raise UnparseableGeometry(raw, "mapping has neither coordinates nor lat/lng")

    @staticmethod
    def _is_scalar(value: Any) -> bool:
        return isinstance(value, (Real, Decimal, str)) and not isinstance(value, bool)

    @staticmethod
    def _to_float(value: Any) -> float:
        """Parse one coordinate token, applying the malformed-token fallback."""
        if isinstance(value, bool):
            return MALFORMED_COORDINATE_FALLBACK
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return MALFORMED_COORDINATE_FALLBACK
        except OverflowError:
            # Too large for a float; out of range for any WGS84 point
            return math.inf
        if math.isnan(number):
            return MALFORMED_COORDINATE_FALLBACK
        return number

    @staticmethod
    def _point(lat: float, lng: float, raw: Any) -> GeoPoint:
        try:
            return GeoPoint(lat=lat, lng=lng)
        except ValidationError:
            raise UnparseableGeometry(raw, f"out of range lat={lat} lng={lng}")


normalize = GeometryNormalizer.normalize
from_geojson = GeometryNormalizer.from_geojson
parse_wkt = GeometryNormalizer.parse_wkt
to_ewkt = GeometryNormalizer.to_ewkt
