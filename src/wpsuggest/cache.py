"""Redis store for fetched suggestions, one entry per site and suggestion type."""

import json
import logging
from typing import Any

import redis

from wpsuggest.errors import PersistenceError
from wpsuggest.models import SUGGESTION_CLASSES, Suggestion, SuggestionType

logger = logging.getLogger(__name__)


class SuggestionCache:
    """key = <prefix>:<type>:<site_id>, value = JSON list of suggestion dicts.

    Entries survive restarts; ttl_seconds=None keeps them until the next refresh.
    """

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "wpsuggest:cache",
        ttl_seconds: int | None = None,
    ) -> None:
        self.client = client
        self.prefix = key_prefix.rstrip(":")
        self.ttl = ttl_seconds

    def _key(self, site_id: int, suggestion_type: SuggestionType) -> str:
        return f"{self.prefix}:{suggestion_type.value}:{site_id}"

    def read(
        self,
        site_id: int,
        suggestion_type: SuggestionType = SuggestionType.XPOSTS,
    ) -> list[Suggestion] | None:
        """Return cached suggestions or None if miss."""
        key = self._key(site_id, suggestion_type)
        try:
            raw = self.client.get(key)
        except redis.RedisError as e:
            raise PersistenceError(f"Reading {key}: {e}") from e
        if raw is None:
            return None
        try:
            rows: list[dict[str, Any]] = json.loads(raw)
            cls = SUGGESTION_CLASSES[suggestion_type]
            return [cls.from_dict(row) for row in rows]
        except (json.JSONDecodeError, TypeError, KeyError):
            logger.warning("Ignoring unreadable cache entry %s", key)
            return None

    def replace_all(
        self,
        site_id: int,
        suggestions: list[Suggestion],
        suggestion_type: SuggestionType = SuggestionType.XPOSTS,
    ) -> None:
        """Purge the site's entry and store suggestions in one MULTI/EXEC transaction."""
        key = self._key(site_id, suggestion_type)
        payload = json.dumps([s.to_dict() for s in suggestions])
        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.delete(key)
            pipe.set(key, payload, ex=self.ttl)
            pipe.execute()
        except redis.RedisError as e:
            raise PersistenceError(f"Replacing {key}: {e}") from e

    def delete(
        self,
        site_id: int,
        suggestion_type: SuggestionType = SuggestionType.XPOSTS,
    ) -> None:
        """Invalidate the cached list for a site."""
        try:
            self.client.delete(self._key(site_id, suggestion_type))
        except redis.RedisError as e:
            raise PersistenceError(str(e)) from e
