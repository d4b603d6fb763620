"""Source port - Abstraction for hotspot data sources.

Every data source (map markers, social posts, ...) fetches its own
upstream data, normalizes it into PointOfInterest records and applies
the distance and recency filters. The aggregator only ever sees the
resulting SourceResult, so new sources plug in without touching it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import SourceRequest, SourceResult


class HotspotSourcePort(Protocol):
    """Port for hotspot sources.

    Implementations:
    - adapters/sources/kml_source.py (KmlHotspotSource)
    - adapters/sources/twitter_source.py (TwitterHotspotSource)

    Implementations must not raise: upstream failures are reported as
    SourceFailure entries on the returned result.
    """

    @property
    def name(self) -> str:
        """Return the source name used in logs and failures."""
        ...

    def fetch(self, request: SourceRequest) -> SourceResult:
        """Fetch, normalize and filter hotspots for one request.

        Args:
            request: Origin, effective radius, layer and recency cutoff.

        Returns:
            SourceResult with zero or more hotspots and any failures.
        """
        ...
