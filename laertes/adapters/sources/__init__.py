"""Source adapters - Implementations of HotspotSourcePort.

Available implementations:
- KmlHotspotSource: placemarks from KML map documents
- TwitterHotspotSource: geotagged tweets
"""

from .kml_source import KmlHotspotSource
from .twitter_source import TweepySearchClient, TwitterHotspotSource

__all__ = ["KmlHotspotSource", "TwitterHotspotSource", "TweepySearchClient"]
