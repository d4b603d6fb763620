"""Twitter social-post source.

Searches recent geotagged tweets around the requester that match the
layer's search string and turns them into hotspots linking back to the
tweet. Missing credentials are detected before any remote call and
reported separately from search failures; either way the source yields
no records instead of failing the request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

import tweepy

from ...config import SourcesConfig, TwitterConfig, get_config
from ...dates import as_aware, since, utcnow
from ...domain.errors import CredentialsMissingError, SourceFetchError
from ...domain.models import (
    Action,
    FailureReason,
    GeoLocation,
    PointOfInterest,
    SourceRequest,
    SourceResult,
)
from ...geo import within_radius
from ...ports.social import SocialSearchPort

# Layar activityType showing the "eye" icon for external links
EXTERNAL_LINK_ACTIVITY = 27


@dataclass
class TweepySearchClient:
    """SocialSearchPort backed by the Twitter v1.1 standard search API.

    Attributes:
        credentials: OAuth 1.0a user-context credentials
        timeout_seconds: Timeout for the HTTP call
    """

    credentials: TwitterConfig
    timeout_seconds: float = 10.0

    _api: Optional[tweepy.API] = field(default=None, repr=False)

    def _get_api(self) -> tweepy.API:
        if self._api is None:
            c = self.credentials
            auth = tweepy.OAuth1UserHandler(
                c.consumer_key.get_secret_value(),  # type: ignore[union-attr]
                c.consumer_secret.get_secret_value(),  # type: ignore[union-attr]
                c.access_token.get_secret_value(),  # type: ignore[union-attr]
                c.access_token_secret.get_secret_value(),  # type: ignore[union-attr]
            )
            self._api = tweepy.API(auth, timeout=self.timeout_seconds)
        return self._api

    def search_recent(self, query: str, geocode: str, limit: int) -> Sequence[Any]:
        return self._get_api().search_tweets(
            q=query,
            geocode=geocode,
            result_type="recent",
            count=limit,
            include_entities=True,
            tweet_mode="extended",
        )


def _coordinates(post: Any) -> Optional[GeoLocation]:
    """Post position from GeoJSON 'coordinates' or the legacy 'geo' field."""
    coordinates = getattr(post, "coordinates", None)
    if coordinates and coordinates.get("coordinates"):
        lon, lat = coordinates["coordinates"][:2]
        return GeoLocation(latitude=float(lat), longitude=float(lon))

    geo = getattr(post, "geo", None)
    if geo and geo.get("coordinates"):
        lat, lon = geo["coordinates"][:2]
        return GeoLocation(latitude=float(lat), longitude=float(lon))

    return None


def _photo_url(post: Any) -> Optional[str]:
    entities = getattr(post, "entities", None) or {}
    media = entities.get("media") or []
    if not media:
        return None
    url = media[0].get("media_url_https")
    return f"{url}:thumb" if url else None


def post_url(post: Any) -> str:
    return f"https://twitter.com/{post.user.screen_name}/status/{post.id}"


@dataclass
class TwitterHotspotSource:
    """Social-post source.

    Implements HotspotSourcePort.

    Attributes:
        credentials: Twitter credentials (checked on every fetch)
        config: Source configuration
        client: Search client; built from the credentials when omitted
        clock: Returns "now" for post ages
    """

    credentials: TwitterConfig = field(default_factory=lambda: get_config().twitter)
    config: SourcesConfig = field(default_factory=lambda: get_config().sources)
    client: Optional[SocialSearchPort] = None
    clock: Callable[[], datetime] = field(default=utcnow, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return "social"

    def _get_client(self) -> SocialSearchPort:
        if self.client is None:
            self.client = TweepySearchClient(
                self.credentials, timeout_seconds=self.config.http_timeout_seconds
            )
        return self.client

    def _search(self, request: SourceRequest) -> Sequence[Any]:
        """Run the remote search.

        Raises:
            CredentialsMissingError: If any credential is unset.
            SourceFetchError: If the search itself fails.
        """
        missing = self.credentials.missing
        if missing:
            raise CredentialsMissingError(
                "Twitter credentials are not set",
                source=self.name,
                missing=missing,
            )

        origin = request.origin
        geocode = f"{origin.latitude},{origin.longitude},{request.radius_km}km"
        self._logger.debug(
            "Searching Twitter",
            extra={"query": request.layer.search, "geocode": geocode},
        )
        try:
            return self._get_client().search_recent(
                request.layer.search, geocode, self.config.max_posts
            )
        except Exception as e:
            raise SourceFetchError("Twitter search failed", source=self.name, cause=e)

    def to_hotspot(self, post: Any, location: GeoLocation, now: datetime) -> PointOfInterest:
        user = post.user
        avatar = user.profile_image_url_https
        created_at = as_aware(post.created_at)
        text = getattr(post, "full_text", None) or post.text

        return PointOfInterest(
            id=post.id,
            title=f"@{user.screen_name} ({user.name})",
            description=text,
            footnote=since(created_at, now),
            image_url=avatar.replace("_normal", "_bigger"),
            icon_url=_photo_url(post) or avatar,
            location=location,
            actions=(
                Action(
                    uri=post_url(post),
                    label="Read on Twitter",
                    content_type="text/html",
                    activity_type=EXTERNAL_LINK_ACTIVITY,
                    method="GET",
                ),
            ),
            created_at=created_at,
        )

    def fetch(self, request: SourceRequest) -> SourceResult:
        """Geotagged posts within the radius, newer than the cutoff if any.

        A post that cannot be turned into a hotspot is skipped on its own.
        """
        try:
            posts = self._search(request)
        except CredentialsMissingError as e:
            self._logger.warning(
                "Twitter credentials are not set; Twitter search will not work",
                extra={"missing": list(e.missing)},
            )
            return SourceResult.failed(
                self.name, FailureReason.CREDENTIALS_MISSING, str(e)
            )
        except SourceFetchError as e:
            self._logger.error("Twitter search failed", extra={"error": str(e)})
            return SourceResult.failed(self.name, FailureReason.FETCH_FAILED, str(e))

        now = self.clock()
        hotspots: list[PointOfInterest] = []
        for post in posts:
            try:
                location = _coordinates(post)
            except (TypeError, ValueError) as e:
                self._logger.warning(
                    "Skipping tweet with bad coordinates",
                    extra={"tweet": post.id, "error": str(e)},
                )
                continue
            if location is None:
                self._logger.debug("Skipping tweet without geo", extra={"tweet": post.id})
                continue

            if request.cutoff is not None and as_aware(post.created_at) < request.cutoff:
                self._logger.debug(
                    "Skipping tweet older than cutoff",
                    extra={"tweet": post.id, "cutoff": request.cutoff.isoformat()},
                )
                continue

            if not within_radius(request.origin, location, request.radius_m):
                self._logger.debug("Skipping tweet beyond radius", extra={"tweet": post.id})
                continue

            try:
                hotspots.append(self.to_hotspot(post, location, now))
            except (AttributeError, TypeError, ValueError) as e:
                self._logger.warning(
                    "Skipping tweet that cannot be normalized",
                    extra={"tweet": post.id, "error": str(e)},
                )

        self._logger.debug(
            "Tweets returned", extra={"found": len(posts), "count": len(hotspots)}
        )
        return SourceResult(source=self.name, hotspots=tuple(hotspots))
