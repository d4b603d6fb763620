"""Tests for the Twitter social-post source."""

from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from laertes.adapters.sources.twitter_source import (
    TweepySearchClient,
    TwitterHotspotSource,
)
from laertes.config import TwitterConfig
from laertes.dates import recency_cutoff
from laertes.domain.models import FailureReason, LayerConfig, RecencyFilter, SourceRequest

CREDENTIAL_ENV = (
    "LAERTES_CONSUMER_KEY",
    "LAERTES_CONSUMER_SECRET",
    "LAERTES_ACCESS_TOKEN",
    "LAERTES_ACCESS_TOKEN_SECRET",
)


def tweet(
    id: int,
    created_at: datetime,
    lat: float = 43.685,
    lon: float = -79.388,
    geotagged: bool = True,
    media: bool = False,
    **extra,
) -> SimpleNamespace:
    entities = {"hashtags": []}
    if media:
        entities["media"] = [
            {"type": "photo", "media_url_https": f"https://pbs.twimg.com/media/{id}.jpg"}
        ]
    return SimpleNamespace(
        id=id,
        text=f"tweet {id} #laertes",
        created_at=created_at,
        user=SimpleNamespace(
            screen_name="wdenton",
            name="William Denton",
            profile_image_url_https="https://pbs.twimg.com/profile_images/9/me_normal.png",
        ),
        coordinates={"type": "Point", "coordinates": [lon, lat]} if geotagged else None,
        geo=None,
        entities=entities,
        **extra,
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CREDENTIAL_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials():
    return TwitterConfig(
        consumer_key="ck",
        consumer_secret="cs",
        access_token="at",
        access_token_secret="ats",
    )


@pytest.fixture
def layer():
    return LayerConfig(name="laertesdev", search="#laertes")


class TestTwitterHotspotSource:
    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def source(self, credentials, sources_config, client, fixed_now):
        return TwitterHotspotSource(
            credentials=credentials,
            config=sources_config,
            client=client,
            clock=lambda: fixed_now,
        )

    def test_search_is_scoped_by_keyword_and_geocode(self, source, client, origin, layer):
        client.search_recent.return_value = []
        request = SourceRequest(origin=origin, radius_m=2000.0, layer=layer)

        result = source.fetch(request)

        assert result.ok
        client.search_recent.assert_called_once_with(
            "#laertes", "43.6840131,-79.3881,2.0km", 100
        )

    def test_builds_hotspot(self, source, client, origin, layer, fixed_now):
        client.search_recent.return_value = [
            tweet(31337, fixed_now - timedelta(minutes=90), lat=43.69, lon=-79.39)
        ]

        result = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer))

        (poi,) = result.hotspots
        assert poi.id == 31337
        assert poi.title == "@wdenton (William Denton)"
        assert poi.description == "tweet 31337 #laertes"
        assert poi.footnote == "1 hour and 30 minutes ago"
        assert (poi.location.latitude, poi.location.longitude) == (43.69, -79.39)
        assert poi.image_url == "https://pbs.twimg.com/profile_images/9/me_bigger.png"
        assert poi.icon_url == "https://pbs.twimg.com/profile_images/9/me_normal.png"
        assert poi.created_at == fixed_now - timedelta(minutes=90)

        (action,) = poi.actions
        assert action.uri == "https://twitter.com/wdenton/status/31337"
        assert action.label == "Read on Twitter"
        assert action.content_type == "text/html"
        assert action.activity_type == 27
        assert action.method == "GET"

    def test_attached_photo_becomes_icon(self, source, client, origin, layer, fixed_now):
        client.search_recent.return_value = [tweet(7, fixed_now, media=True)]

        (poi,) = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer)).hotspots

        assert poi.icon_url == "https://pbs.twimg.com/media/7.jpg:thumb"

    def test_extended_text_is_preferred(self, source, client, origin, layer, fixed_now):
        client.search_recent.return_value = [
            tweet(8, fixed_now, full_text="the whole, untruncated tweet")
        ]

        (poi,) = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer)).hotspots

        assert poi.description == "the whole, untruncated tweet"

    def test_skips_tweets_without_geolocation(self, source, client, origin, layer, fixed_now):
        client.search_recent.return_value = [
            tweet(1, fixed_now, geotagged=False),
            tweet(2, fixed_now),
        ]

        result = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer))

        assert [p.id for p in result.hotspots] == [2]

    def test_legacy_geo_field(self, source, client, origin, layer, fixed_now):
        post = tweet(3, fixed_now, geotagged=False)
        post.geo = {"type": "Point", "coordinates": [43.7, -79.4]}
        client.search_recent.return_value = [post]

        (poi,) = source.fetch(SourceRequest(origin=origin, radius_m=5000.0, layer=layer)).hotspots

        assert (poi.location.latitude, poi.location.longitude) == (43.7, -79.4)

    def test_last_24_hours_cutoff(self, source, client, origin, layer, fixed_now):
        client.search_recent.return_value = [
            tweet(25, fixed_now - timedelta(hours=25)),
            tweet(23, fixed_now - timedelta(hours=23)),
        ]
        cutoff = recency_cutoff(RecencyFilter.LAST_24_HOURS, fixed_now)

        result = source.fetch(
            SourceRequest(origin=origin, radius_m=1500.0, layer=layer, cutoff=cutoff)
        )

        assert [p.id for p in result.hotspots] == [23]

    def test_naive_timestamps_are_utc(self, source, client, origin, layer, fixed_now):
        naive = (fixed_now - timedelta(hours=2)).replace(tzinfo=None)
        client.search_recent.return_value = [tweet(4, naive)]
        cutoff = fixed_now - timedelta(hours=3)

        (poi,) = source.fetch(
            SourceRequest(origin=origin, radius_m=1500.0, layer=layer, cutoff=cutoff)
        ).hotspots

        assert poi.created_at == fixed_now - timedelta(hours=2)

    def test_bad_coordinates_skip_only_that_tweet(self, source, client, origin, layer, fixed_now):
        client.search_recent.return_value = [
            tweet(5, fixed_now, lat=95.0),
            tweet(6, fixed_now),
        ]

        result = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer))

        assert [p.id for p in result.hotspots] == [6]

    def test_malformed_tweet_skips_only_that_tweet(
        self, source, client, origin, layer, fixed_now
    ):
        broken = tweet(1, fixed_now)
        broken.user.profile_image_url_https = None
        client.search_recent.return_value = [broken, tweet(2, fixed_now)]

        result = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer))

        assert [p.id for p in result.hotspots] == [2]
        assert result.ok

    def test_tweets_beyond_radius_are_dropped(
        self, source, client, origin, layer, fixed_now, north_of
    ):
        near, far = north_of(origin, 900), north_of(origin, 1600)
        client.search_recent.return_value = [
            tweet(10, fixed_now, lat=far.latitude, lon=far.longitude),
            tweet(11, fixed_now, lat=near.latitude, lon=near.longitude),
        ]

        result = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer))

        assert [p.id for p in result.hotspots] == [11]

    def test_search_failure_yields_no_records(self, source, client, origin, layer):
        client.search_recent.side_effect = RuntimeError("429 Too Many Requests")

        result = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer))

        assert result.hotspots == ()
        (failure,) = result.failures
        assert failure.reason == FailureReason.FETCH_FAILED
        assert "429" in failure.message


class TestCredentials:
    def test_missing_credentials_are_detected_before_searching(
        self, sources_config, origin, layer, caplog
    ):
        client = MagicMock()
        source = TwitterHotspotSource(
            credentials=TwitterConfig(consumer_key="ck"),
            config=sources_config,
            client=client,
        )

        with caplog.at_level("WARNING"):
            result = source.fetch(SourceRequest(origin=origin, radius_m=1500.0, layer=layer))

        client.search_recent.assert_not_called()
        assert result.hotspots == ()
        assert result.failures[0].reason == FailureReason.CREDENTIALS_MISSING
        assert "credentials are not set" in caplog.text

    def test_missing_lists_unset_names(self):
        config = TwitterConfig(consumer_key="ck", access_token="  ")
        assert config.missing == ("consumer_secret", "access_token", "access_token_secret")
        assert not config.is_complete

    def test_complete_credentials(self, credentials):
        assert credentials.missing == ()
        assert credentials.is_complete

    def test_credentials_read_from_environment(self, monkeypatch):
        for name in CREDENTIAL_ENV:
            monkeypatch.setenv(name, name.lower())
        config = TwitterConfig()
        assert config.is_complete
        assert config.consumer_key.get_secret_value() == "laertes_consumer_key"


class TestTweepySearchClient:
    def test_search_recent_calls_standard_search(self, credentials):
        with patch(
            "laertes.adapters.sources.twitter_source.tweepy"
        ) as tweepy_mock:
            api = tweepy_mock.API.return_value
            api.search_tweets.return_value = ["a"]

            client = TweepySearchClient(credentials, timeout_seconds=3.0)
            posts = client.search_recent("#laertes", "1.0,2.0,1.5km", 100)

        assert posts == ["a"]
        tweepy_mock.OAuth1UserHandler.assert_called_once_with("ck", "cs", "at", "ats")
        tweepy_mock.API.assert_called_once_with(
            tweepy_mock.OAuth1UserHandler.return_value, timeout=3.0
        )
        api.search_tweets.assert_called_once_with(
            q="#laertes",
            geocode="1.0,2.0,1.5km",
            result_type="recent",
            count=100,
            include_entities=True,
            tweet_mode="extended",
        )
