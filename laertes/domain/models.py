"""Immutable domain models for the Laertes hotspot service.

All models are frozen dataclasses with slots. They describe one
request's worth of data: the parsed query, the layer it targets, the
points of interest each source produces and the aggregated answer.
Nothing here outlives a request except LayerConfig.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum, auto
from typing import Optional, Union


class RecencyFilter(Enum):
    """Time window selected for social posts (RADIOLIST)."""

    NONE = auto()
    LAST_HOUR = auto()
    LAST_4_HOURS = auto()
    LAST_24_HOURS = auto()
    TODAY = auto()
    ALL = auto()


class SourceKind(Enum):
    """Data sources a requester can toggle (CHECKBOXLIST)."""

    MAP = "map"
    SOCIAL = "social"


class StatusCode(IntEnum):
    """Layar errorCode values. 20-29 denote a problem."""

    OK = 0
    INVALID_QUERY = 20
    NO_RESULTS = 21
    UNKNOWN_LAYER = 22


class FailureReason(Enum):
    """Why a source contributed fewer records than it might have."""

    FETCH_FAILED = auto()
    PARSE_FAILED = auto()
    CREDENTIALS_MISSING = auto()
    TIMEOUT = auto()
    UNEXPECTED = auto()


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True, slots=True)
class Query:
    """A validated getPOIs request.

    Attributes:
        location: Requester position
        layer_name: Requested layer identifier
        radius_m: Requested radius in meters, None when not supplied
        recency: Time window for social posts
        sources: Enabled data sources
    """

    location: GeoLocation
    layer_name: str
    radius_m: Optional[float] = None
    recency: RecencyFilter = RecencyFilter.NONE
    sources: frozenset[SourceKind] = frozenset(SourceKind)

    @property
    def radius_supplied(self) -> bool:
        return self.radius_m is not None

    @property
    def include_map_points(self) -> bool:
        return SourceKind.MAP in self.sources

    @property
    def include_social_posts(self) -> bool:
        return SourceKind.SOCIAL in self.sources


@dataclass(frozen=True, slots=True)
class LayerConfig:
    """A named content feed as declared in the layer registry.

    Attributes:
        name: Layer identifier (Layar layerName)
        map_sources: KML endpoint URLs
        search: Keyword/hashtag string for the social search
        icon_url: Icon for map points, None to use the default
        show_message: Echoed verbatim as showMessage
    """

    name: str
    map_sources: tuple[str, ...] = field(default_factory=tuple)
    search: str = ""
    icon_url: Optional[str] = None
    show_message: bool = False


@dataclass(frozen=True, slots=True)
class Action:
    """A Layar hotspot action, e.g. a link back to the original post."""

    uri: str
    label: str
    content_type: str = "text/html"
    activity_type: int = 27
    method: str = "GET"


@dataclass(frozen=True, slots=True)
class PointOfInterest:
    """One normalized hotspot.

    Attributes:
        id: Map counter (int) or native post id
        title: First text line
        description: Body text
        footnote: Small print, e.g. the post age
        image_url: Banner image
        icon_url: Floating icon image
        location: Anchor position
        icon_type: Layar icon type
        actions: Optional actions
        created_at: Post timestamp, for time-filterable sources only
    """

    id: Union[int, str]
    title: str
    description: str
    footnote: str
    image_url: str
    icon_url: str
    location: GeoLocation
    icon_type: int = 0
    actions: tuple[Action, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class SourceRequest:
    """Everything a source needs to fetch, normalize and filter.

    Attributes:
        origin: Requester position
        radius_m: Effective search radius in meters
        layer: Layer being served
        cutoff: Earliest accepted post time, None for no limit
    """

    origin: GeoLocation
    radius_m: float
    layer: LayerConfig
    cutoff: Optional[datetime] = None

    @property
    def radius_km(self) -> float:
        return self.radius_m / 1000


@dataclass(frozen=True, slots=True)
class SourceFailure:
    """A structured reason a source (or one of its endpoints) yielded nothing."""

    source: str
    reason: FailureReason
    message: str
    endpoint: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SourceResult:
    """Outcome of one source invocation.

    A result may carry hotspots and failures at the same time when some
    endpoints of a source failed and others did not.
    """

    source: str
    hotspots: tuple[PointOfInterest, ...] = field(default_factory=tuple)
    failures: tuple[SourceFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        """Check if the source completed without any failure."""
        return not self.failures

    @classmethod
    def failed(
        cls,
        source: str,
        reason: FailureReason,
        message: str,
        endpoint: Optional[str] = None,
    ) -> SourceResult:
        """Build an empty result carrying a single failure."""
        return cls(
            source=source,
            failures=(SourceFailure(source, reason, message, endpoint),),
        )


@dataclass(frozen=True, slots=True)
class AggregatedResult:
    """The response for one getPOIs request.

    Attributes:
        layer_name: Echoed layer identifier
        hotspots: Points of interest, nearest first (never None)
        error_code: Layar status code
        error_string: Human-readable status message
        show_message: Echoed from the layer, None for an unknown layer
        radius: Effective radius, set only when the request omitted it
        refresh_distance: Client refresh hint in meters
        refresh_interval: Client refresh hint in seconds
        source_results: Per-source outcomes, for diagnostics only
    """

    layer_name: str
    hotspots: tuple[PointOfInterest, ...] = field(default_factory=tuple)
    error_code: StatusCode = StatusCode.OK
    error_string: str = "ok"
    show_message: Optional[bool] = None
    radius: Optional[float] = None
    refresh_distance: int = 300
    refresh_interval: int = 100
    source_results: tuple[SourceResult, ...] = field(default_factory=tuple)

    @property
    def is_success(self) -> bool:
        return self.error_code == StatusCode.OK
