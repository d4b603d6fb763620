from datetime import datetime, timedelta, timezone

import pytest

from laertes.dates import as_aware, recency_cutoff, since
from laertes.domain.models import RecencyFilter

NOW = datetime(2024, 5, 17, 15, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (timedelta(minutes=90), "1 hour and 30 minutes ago"),
        (timedelta(hours=50), "2 days ago"),
        (timedelta(hours=25), "1 day and 1 hour ago"),
        (timedelta(hours=26, minutes=59), "1 day and 2 hours ago"),
        (timedelta(hours=24), "1 day and 0 hours ago"),
        (timedelta(hours=2, minutes=5), "2 hours and 5 minutes ago"),
        (timedelta(minutes=5, seconds=59), "5 minutes ago"),
        (timedelta(seconds=30), "0 minutes ago"),
        (timedelta(days=14), "14 days ago"),
    ],
)
def test_since(elapsed, expected):
    assert since(NOW - elapsed, NOW) == expected


def test_since_future_timestamp_is_zero_minutes():
    assert since(NOW + timedelta(minutes=3), NOW) == "0 minutes ago"


def test_since_treats_naive_timestamps_as_utc():
    naive = datetime(2024, 5, 17, 13, 30)
    assert since(naive, NOW) == "2 hours and 0 minutes ago"


def test_since_defaults_to_current_time():
    assert since(datetime.now(timezone.utc) - timedelta(hours=3)).startswith("3 hours")


def test_as_aware_keeps_existing_timezone():
    aware = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=-5)))
    assert as_aware(aware) is aware


@pytest.mark.parametrize(
    "recency, window",
    [
        (RecencyFilter.LAST_HOUR, timedelta(seconds=3600)),
        (RecencyFilter.LAST_4_HOURS, timedelta(seconds=14400)),
        (RecencyFilter.LAST_24_HOURS, timedelta(seconds=86400)),
    ],
)
def test_recency_cutoff_windows(recency, window):
    assert recency_cutoff(recency, NOW) == NOW - window


@pytest.mark.parametrize("recency", [RecencyFilter.ALL, RecencyFilter.NONE])
def test_recency_cutoff_none_for_unbounded(recency):
    assert recency_cutoff(recency, NOW) is None


def test_recency_cutoff_today_is_local_midnight():
    cutoff = recency_cutoff(RecencyFilter.TODAY, NOW)
    local_now = NOW.astimezone()

    assert cutoff is not None
    assert (cutoff.hour, cutoff.minute, cutoff.second, cutoff.microsecond) == (0, 0, 0, 0)
    assert cutoff.date() == local_now.date()
    assert cutoff <= NOW
    assert NOW - cutoff < timedelta(days=1)
