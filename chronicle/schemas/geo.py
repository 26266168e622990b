"""Canonical point type shared by the normalizer and the event schema."""

from pydantic import BaseModel, ConfigDict, field_validator


class GeoPoint(BaseModel):
    """
    A WGS84 point in the application's own lat/lng order.
    """

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    @field_validator("lat")
    def validate_lat(cls, v):
        if not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @field_validator("lng")
    def validate_lng(cls, v):
        if not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        return v
