"""KML map-marker source.

Fetches each of a layer's KML documents over HTTP and turns every
Placemark with a Point geometry inside the search radius into a
hotspot. Each endpoint fails on its own: a broken feed contributes no
records and is reported as a SourceFailure, the others carry on.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Iterator, Union

import requests
from bs4 import BeautifulSoup

from ...config import SourcesConfig, get_config
from ...domain.errors import SourceFetchError
from ...domain.models import (
    FailureReason,
    GeoLocation,
    PointOfInterest,
    SourceFailure,
    SourceRequest,
    SourceResult,
)
from ...geo import within_radius

logger = logging.getLogger(__name__)


def _local_name(element: ET.Element) -> str:
    return element.tag.rsplit("}", 1)[-1]


def _descendants(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in element.iter():
        if child is not element and _local_name(child) == name:
            yield child


def _child_text(element: ET.Element, name: str) -> str:
    for child in element:
        if _local_name(child) == name:
            return "".join(child.itertext()).strip()
    return ""


def html_to_text(fragment: str) -> str:
    """Plain-text content of an HTML fragment."""
    if not fragment:
        return ""
    return BeautifulSoup(fragment, "html.parser").get_text(" ", strip=True)


@dataclass(frozen=True, slots=True)
class Placemark:
    """A KML placemark reduced to what a hotspot needs."""

    name: str
    description: str
    location: GeoLocation


def parse_coordinates(text: str) -> GeoLocation:
    """Parse a KML 'lon,lat[,alt]' tuple; altitude is discarded.

    Raises:
        ValueError: If the tuple is malformed or out of range.
    """
    tokens = text.split()
    if not tokens:
        raise ValueError("empty coordinates")
    parts = tokens[0].split(",")
    if len(parts) < 2:
        raise ValueError(f"expected lon,lat got {tokens[0]!r}")
    return GeoLocation(latitude=float(parts[1]), longitude=float(parts[0]))


def parse_placemarks(document: bytes) -> list[Placemark]:
    """Extract point placemarks from a KML document.

    Placemarks without a Point are ignored; placemarks whose
    coordinates cannot be parsed are skipped with a warning.

    Raises:
        ET.ParseError: If the document is not well-formed XML.
    """
    root = ET.fromstring(document)

    placemarks: list[Placemark] = []
    for element in _descendants(root, "Placemark"):
        point = next(_descendants(element, "Point"), None)
        if point is None:
            continue
        coordinates = next(_descendants(point, "coordinates"), None)
        if coordinates is None:
            continue

        name = _child_text(element, "name")
        try:
            location = parse_coordinates(coordinates.text or "")
        except ValueError as e:
            logger.warning(
                "Skipping placemark with bad coordinates",
                extra={"placemark": name, "error": str(e)},
            )
            continue

        placemarks.append(
            Placemark(
                name=name,
                description=html_to_text(_child_text(element, "description")),
                location=location,
            )
        )
    return placemarks


@dataclass
class KmlHotspotSource:
    """Map-marker source reading KML documents over HTTP.

    Implements HotspotSourcePort.

    Attributes:
        config: Source configuration (timeouts, default icon, URL suffix)
        session: HTTP session shared across requests
    """

    config: SourcesConfig = field(default_factory=lambda: get_config().sources)
    session: requests.Session = field(default_factory=requests.Session)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.session.headers["User-Agent"] = self.config.user_agent

    @property
    def name(self) -> str:
        return "map"

    def _download(self, url: str) -> bytes:
        """GET one KML document.

        Raises:
            SourceFetchError: On network errors or non-2xx responses.
        """
        try:
            response = self.session.get(
                url + self.config.kml_url_suffix,
                timeout=self.config.http_timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise SourceFetchError(
                "KML fetch failed", source=self.name, endpoint=url, cause=e
            )
        return response.content

    def _load(self, url: str) -> list[Placemark]:
        document = self._download(url)
        try:
            return parse_placemarks(document)
        except ET.ParseError as e:
            raise SourceFetchError(
                "KML parse failed", source=self.name, endpoint=url, cause=e
            )

    def fetch(self, request: SourceRequest) -> SourceResult:
        """Collect in-range placemarks from every map source of the layer.

        Endpoints are downloaded side by side under a shared deadline; a
        slow endpoint is reported as TIMEOUT and the others still count.
        Hotspot ids count up from 1 across all endpoints, in order.
        """
        urls = request.layer.map_sources
        if not urls:
            return SourceResult(source=self.name)

        deadline = self.config.endpoint_deadline_seconds
        executor = ThreadPoolExecutor(
            max_workers=len(urls), thread_name_prefix="laertes-kml"
        )
        try:
            futures = [(url, executor.submit(self._load, url)) for url in urls]
            wait([future for _url, future in futures], timeout=deadline)
            outcomes = [(url, self._outcome(url, future, deadline)) for url, future in futures]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        icon_url = request.layer.icon_url or self.config.default_icon_url
        hotspots: list[PointOfInterest] = []
        failures: list[SourceFailure] = []
        counter = 1

        for url, outcome in outcomes:
            if isinstance(outcome, SourceFailure):
                failures.append(outcome)
                continue

            in_range = 0
            for placemark in outcome:
                if not within_radius(request.origin, placemark.location, request.radius_m):
                    continue
                hotspots.append(
                    PointOfInterest(
                        id=counter,
                        title=placemark.name,
                        description=placemark.description,
                        footnote="",
                        image_url=icon_url,
                        icon_url=icon_url,
                        location=placemark.location,
                    )
                )
                counter += 1
                in_range += 1

            self._logger.debug(
                "Map source read",
                extra={"endpoint": url, "placemarks": len(outcome), "in_range": in_range},
            )

        self._logger.debug("Map points returned", extra={"count": len(hotspots)})
        return SourceResult(
            source=self.name, hotspots=tuple(hotspots), failures=tuple(failures)
        )

    def _outcome(
        self, url: str, future: Future[list[Placemark]], deadline: float
    ) -> Union[list[Placemark], SourceFailure]:
        if not future.done():
            future.cancel()
            self._logger.error(
                "Map source timed out", extra={"endpoint": url, "timeout": deadline}
            )
            return SourceFailure(
                self.name, FailureReason.TIMEOUT, f"No response within {deadline}s", url
            )

        try:
            return future.result()
        except SourceFetchError as e:
            reason = (
                FailureReason.PARSE_FAILED
                if isinstance(e.cause, ET.ParseError)
                else FailureReason.FETCH_FAILED
            )
            self._logger.error(
                "Map source failed",
                extra={"endpoint": url, "reason": reason.name, "error": str(e)},
            )
            return SourceFailure(self.name, reason, str(e), url)
