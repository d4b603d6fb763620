"""Social search port - Raw access to a geotagged post search API."""

from __future__ import annotations

from typing import Any, Protocol, Sequence


class SocialSearchPort(Protocol):
    """Port for the remote post search.

    Implementation: adapters/sources/twitter_source.py (TweepySearchClient)

    Returned posts follow the Twitter v1.1 status shape (id, user,
    created_at, coordinates/geo, entities, text/full_text).
    """

    def search_recent(self, query: str, geocode: str, limit: int) -> Sequence[Any]:
        """Search for the most recent posts matching a query.

        Args:
            query: Keyword or hashtag string.
            geocode: 'lat,lon,radiuskm' restriction.
            limit: Maximum number of posts to return.

        Returns:
            Matching posts, newest first.
        """
        ...
