"""Services layer - Application orchestration.

This module contains the application services that orchestrate
the flow of data through adapters to fulfill use cases.

Available services:
- HotspotAggregator: runs sources, merges and sorts hotspots
- QueryResolver: parses a getPOIs request and drives the aggregator
"""

from .aggregator import HotspotAggregator
from .query_resolver import QueryResolver, parse_query
from .serialization import invalid_query_payload, to_layar_payload

__all__ = [
    "HotspotAggregator",
    "QueryResolver",
    "parse_query",
    "to_layar_payload",
    "invalid_query_payload",
]
