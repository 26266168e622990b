"""
Projection module for chronicle events.

This package provides:
- EventProjector: Event -> CardView / TimelineSlide / StoryMapSlide
- SlideSequence: overview-first slide list for StoryMaps
- Document builders for full Timeline and StoryMap payloads
"""
