"""
Schema module for chronicle data.

This package provides:
- GeoPoint: canonical WGS84 point
- Event / Author / SourceType: canonical event record
- Slide models: CardView, TimelineSlide, StoryMapSlide, OverviewSlide
- Pagination: PageRequest, Page, CursorMode and boundary adapters
"""
