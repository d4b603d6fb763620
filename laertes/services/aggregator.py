"""Hotspot aggregator - Main orchestrator.

Runs the enabled sources for a query side by side, merges what they
return, sorts it by distance from the requester and builds the Layar
response. Nothing raised by a source escapes: every outcome becomes a
well-formed AggregatedResult.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Mapping, Optional

from ..config import SourcesConfig, get_config
from ..dates import recency_cutoff, utcnow
from ..domain.models import (
    AggregatedResult,
    FailureReason,
    LayerConfig,
    PointOfInterest,
    Query,
    SourceKind,
    SourceRequest,
    SourceResult,
    StatusCode,
)
from ..geo import distance_between
from ..ports.sources import HotspotSourcePort

NO_RESULTS_MESSAGE = (
    "No results found.  Try adjusting your search range and any filters."
)


@dataclass
class HotspotAggregator:
    """Main service answering getPOIs queries.

    The pipeline is:
    1. Unknown layer short-circuit
    2. Effective radius and recency cutoff
    3. Enabled sources, run concurrently with a shared deadline
    4. Merge in source order, stable sort by distance
    5. Status code and response assembly

    Attributes:
        sources: Ordered registry of data sources; merge order follows it
        config: Source configuration (default radius, timeout)
        clock: Returns the current aware datetime
    """

    sources: Mapping[SourceKind, HotspotSourcePort]
    config: SourcesConfig = field(default_factory=lambda: get_config().sources)
    clock: Callable[[], datetime] = field(default=utcnow, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def unknown_layer(self, layer_name: str) -> AggregatedResult:
        """Result for a layer missing from the registry."""
        message = f"No such layer ({layer_name}) exists"
        self._logger.error(message, extra={"layer": layer_name})
        return AggregatedResult(
            layer_name=layer_name,
            error_code=StatusCode.UNKNOWN_LAYER,
            error_string=message,
        )

    def _run_sources(
        self, query: Query, request: SourceRequest
    ) -> list[SourceResult]:
        enabled = [
            (kind, source)
            for kind, source in self.sources.items()
            if kind in query.sources
        ]
        if not enabled:
            self._logger.debug("No sources enabled; this will not be informative")
            return []

        executor = ThreadPoolExecutor(
            max_workers=len(enabled), thread_name_prefix="laertes-source"
        )
        try:
            futures: list[tuple[HotspotSourcePort, Future[SourceResult]]] = [
                (source, executor.submit(source.fetch, request))
                for _kind, source in enabled
            ]
            wait(
                [future for _source, future in futures],
                timeout=self.config.source_timeout_seconds,
            )
            return [self._collect(source, future) for source, future in futures]
        finally:
            # Do not wait on sources still running past the deadline
            executor.shutdown(wait=False, cancel_futures=True)

    def _collect(
        self, source: HotspotSourcePort, future: Future[SourceResult]
    ) -> SourceResult:
        if not future.done():
            future.cancel()
            self._logger.error(
                "Source timed out",
                extra={
                    "source": source.name,
                    "timeout": self.config.source_timeout_seconds,
                },
            )
            return SourceResult.failed(
                source.name,
                FailureReason.TIMEOUT,
                f"No response within {self.config.source_timeout_seconds}s",
            )

        try:
            return future.result()
        except Exception as e:
            self._logger.exception(
                "Unexpected error in source", extra={"source": source.name}
            )
            return SourceResult.failed(source.name, FailureReason.UNEXPECTED, str(e))

    def aggregate(self, query: Query, layer: Optional[LayerConfig]) -> AggregatedResult:
        """Answer a query against a layer.

        Args:
            query: The validated request.
            layer: The layer configuration, None if the layer is unknown.

        Returns:
            AggregatedResult; never raises for source failures.
        """
        if layer is None:
            return self.unknown_layer(query.layer_name)

        radius = (
            query.radius_m if query.radius_m is not None else self.config.default_radius_m
        )
        cutoff = recency_cutoff(query.recency, self.clock())
        if cutoff is not None:
            self._logger.info(
                "Tweet time limit set",
                extra={"cutoff": cutoff.isoformat(), "recency": query.recency.name},
            )

        request = SourceRequest(
            origin=query.location, radius_m=radius, layer=layer, cutoff=cutoff
        )
        results = self._run_sources(query, request)

        hotspots: list[PointOfInterest] = []
        for result in results:
            hotspots.extend(result.hotspots)
            for failure in result.failures:
                self._logger.warning(
                    "Source contributed no records",
                    extra={
                        "source": failure.source,
                        "reason": failure.reason.name,
                        "endpoint": failure.endpoint,
                    },
                )

        # list.sort is stable, so ties keep source-then-insertion order
        hotspots.sort(key=lambda poi: distance_between(query.location, poi.location))

        self._logger.info(
            "Hotspots returned",
            extra={"layer": layer.name, "count": len(hotspots)},
        )

        if hotspots:
            code, message = StatusCode.OK, "ok"
        else:
            code, message = StatusCode.NO_RESULTS, NO_RESULTS_MESSAGE

        return AggregatedResult(
            layer_name=layer.name,
            hotspots=tuple(hotspots),
            error_code=code,
            error_string=message,
            show_message=layer.show_message,
            radius=None if query.radius_supplied else radius,
            source_results=tuple(results),
        )
