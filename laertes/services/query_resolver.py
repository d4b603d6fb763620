"""Query resolution - from raw getPOIs parameters to an aggregated result.

A Layar getPOIs call looks like:

    /?lang=en&countryCode=CA&userId=6f85012345&lon=-79.3881000
     &version=6.0&radius=1500&lat=43.6840131&layerName=code4lib2013
     &CHECKBOXLIST=1,2&RADIOLIST=8

Only lat, lon, layerName, radius, CHECKBOXLIST and RADIOLIST matter
here; every other parameter is ignored.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..domain.errors import QueryValidationError
from ..domain.models import AggregatedResult, GeoLocation, Query, RecencyFilter, SourceKind
from ..ports.layers import LayerRegistryPort
from .aggregator import HotspotAggregator

# CHECKBOXLIST values
CHECKBOX_SOURCES = {
    "1": SourceKind.SOCIAL,
    "2": SourceKind.MAP,
}

# RADIOLIST values
RADIO_RECENCY = {
    1: RecencyFilter.LAST_HOUR,
    4: RecencyFilter.LAST_4_HOURS,
    8: RecencyFilter.LAST_24_HOURS,
    16: RecencyFilter.TODAY,
    32: RecencyFilter.ALL,
}


def _required_float(params: Mapping[str, str], name: str) -> float:
    raw = params.get(name)
    if raw is None or not str(raw).strip():
        raise QueryValidationError(f"Missing required parameter '{name}'", parameter=name)
    try:
        value = float(raw)
    except ValueError as e:
        raise QueryValidationError(
            f"Parameter '{name}' is not a number: {raw!r}", parameter=name, cause=e
        )
    if not math.isfinite(value):
        raise QueryValidationError(f"Parameter '{name}' must be finite", parameter=name)
    return value


def parse_radius(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        radius = float(raw)
    except ValueError as e:
        raise QueryValidationError(
            f"Parameter 'radius' is not a number: {raw!r}", parameter="radius", cause=e
        )
    if not math.isfinite(radius) or radius < 0:
        raise QueryValidationError(
            f"Parameter 'radius' must be a non-negative number, got {raw!r}",
            parameter="radius",
        )
    return radius


def parse_sources(raw: Optional[str]) -> frozenset[SourceKind]:
    """Sources enabled by CHECKBOXLIST; all of them when it is absent."""
    if raw is None:
        return frozenset(SourceKind)
    tokens = {token.strip() for token in raw.split(",")}
    return frozenset(kind for value, kind in CHECKBOX_SOURCES.items() if value in tokens)


def parse_recency(raw: Optional[str]) -> RecencyFilter:
    """Window selected by RADIOLIST; NONE when nothing recognizable was picked."""
    if raw is None:
        return RecencyFilter.NONE
    try:
        return RADIO_RECENCY.get(int(raw.strip()), RecencyFilter.NONE)
    except ValueError:
        return RecencyFilter.NONE


def parse_query(params: Mapping[str, str]) -> Query:
    """Build a validated Query from request parameters.

    Args:
        params: Case-sensitive request parameters.

    Returns:
        The parsed Query.

    Raises:
        QueryValidationError: If lat/lon are missing or invalid, or
            radius is unparseable.
    """
    lat = _required_float(params, "lat")
    lon = _required_float(params, "lon")
    try:
        location = GeoLocation(latitude=lat, longitude=lon)
    except ValueError as e:
        raise QueryValidationError(str(e), parameter="lat/lon", cause=e)

    return Query(
        location=location,
        layer_name=params.get("layerName", ""),
        radius_m=parse_radius(params.get("radius")),
        recency=parse_recency(params.get("RADIOLIST")),
        sources=parse_sources(params.get("CHECKBOXLIST")),
    )


@dataclass
class QueryResolver:
    """Entry point for one getPOIs request.

    Attributes:
        registry: Layer registry
        aggregator: Hotspot aggregator
    """

    registry: LayerRegistryPort
    aggregator: HotspotAggregator

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def resolve(self, params: Mapping[str, str]) -> AggregatedResult:
        """Resolve request parameters into an aggregated result.

        An unknown (or missing) layer always yields the unknown-layer
        result, whatever the other parameters are.

        Raises:
            QueryValidationError: If the request parameters are invalid.
        """
        layer_name = params.get("layerName", "")
        layer = self.registry.get(layer_name) if layer_name else None
        if layer is None:
            return self.aggregator.unknown_layer(layer_name)

        query = parse_query(params)
        self._logger.debug(
            "Query parsed",
            extra={
                "layer": query.layer_name,
                "radius": query.radius_m,
                "recency": query.recency.name,
                "map_points": query.include_map_points,
                "social_posts": query.include_social_posts,
            },
        )
        return self.aggregator.aggregate(query, layer)
