"""
Normalization module for chronicle data.

This package provides:
- GeometryNormalizer: raw geography values -> GeoPoint
- EventRecordMapper: persistence rows -> canonical Event
"""
