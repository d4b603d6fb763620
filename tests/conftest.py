"""Shared fixtures for the Laertes test suite."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

import pytest

from laertes.config import SourcesConfig
from laertes.domain.models import (
    GeoLocation,
    LayerConfig,
    PointOfInterest,
    SourceRequest,
    SourceResult,
)

# Toronto, the requester position used throughout
ORIGIN = GeoLocation(latitude=43.6840131, longitude=-79.3881000)

# One degree of latitude in meters on the 6371 km sphere
METERS_PER_DEGREE = 6371000 * 3.141592653589793 / 180


def north_of(origin: GeoLocation, meters: float) -> GeoLocation:
    """A point the given distance due north of origin."""
    return GeoLocation(
        latitude=origin.latitude + meters / METERS_PER_DEGREE,
        longitude=origin.longitude,
    )


def make_poi(id, location: GeoLocation, title: str = "") -> PointOfInterest:
    return PointOfInterest(
        id=id,
        title=title or f"poi {id}",
        description="",
        footnote="",
        image_url="https://example.org/icon.png",
        icon_url="https://example.org/icon.png",
        location=location,
    )


class FakeSource:
    """HotspotSourcePort test double returning canned hotspots."""

    def __init__(
        self,
        name: str,
        hotspots: Sequence[PointOfInterest] = (),
        error: Optional[Exception] = None,
        block: Optional[threading.Event] = None,
    ) -> None:
        self._name = name
        self.hotspots = tuple(hotspots)
        self.error = error
        self.block = block
        self.requests: list[SourceRequest] = []

    @property
    def name(self) -> str:
        return self._name

    def fetch(self, request: SourceRequest) -> SourceResult:
        self.requests.append(request)
        if self.block is not None:
            self.block.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return SourceResult(source=self._name, hotspots=self.hotspots)


@pytest.fixture
def origin() -> GeoLocation:
    return ORIGIN


@pytest.fixture
def layer() -> LayerConfig:
    return LayerConfig(
        name="laertesdev",
        map_sources=("https://example.org/a.kml",),
        search="#laertes",
        icon_url="https://example.org/icon.png",
        show_message=True,
    )


@pytest.fixture
def sources_config() -> SourcesConfig:
    return SourcesConfig(source_timeout_seconds=1.0, http_timeout_seconds=1.0)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 5, 17, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def fake_source() -> Callable[..., FakeSource]:
    return FakeSource


@pytest.fixture(name="north_of")
def north_of_fixture() -> Callable[[GeoLocation, float], GeoLocation]:
    return north_of


@pytest.fixture(name="make_poi")
def make_poi_fixture() -> Callable[..., PointOfInterest]:
    return make_poi
