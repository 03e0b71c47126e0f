"""Serve suggestions for a site: cache first, then the network, one fetch per site at a time."""

import asyncio
import logging

from prometheus_client import Counter

from wpsuggest.cache import SuggestionCache
from wpsuggest.errors import (
    FetchTimeout,
    HostnameUnavailable,
    MissingClient,
    MissingPersistenceContext,
    NoResultsAvailable,
    SuggestionError,
)
from wpsuggest.models import Site, Suggestion, SuggestionType
from wpsuggest.reachability import Reachability, StaticReachability

logger = logging.getLogger(__name__)

FETCH_COUNT = Counter(
    "wpsuggest_fetches_total",
    "Suggestion fetches sent to WordPress.com",
    ["type", "outcome"],
)

FetchKey = tuple[SuggestionType, int]


class SuggestionService:
    """Coordinates the suggestion store and the REST client.

    Concurrent lookups for the same site and type share one network fetch;
    lookups for different sites run independently. Must be used from a
    single event loop, the one that owns the store.
    """

    def __init__(
        self,
        cache: SuggestionCache | None,
        reachability: Reachability | None = None,
        fetch_timeout: float | None = 15.0,
    ) -> None:
        self.cache = cache
        self.reachability = reachability or StaticReachability(True)
        self.fetch_timeout = fetch_timeout
        self._in_flight: dict[FetchKey, asyncio.Task] = {}

    def _require_cache(self) -> SuggestionCache:
        if self.cache is None:
            raise MissingPersistenceContext()
        return self.cache

    def is_fetching(self, site: Site, suggestion_type: SuggestionType = SuggestionType.XPOSTS) -> bool:
        return (suggestion_type, site.site_id) in self._in_flight

    async def get_suggestions(
        self,
        site: Site,
        suggestion_type: SuggestionType = SuggestionType.XPOSTS,
    ) -> list[Suggestion]:
        """Cached suggestions if any, otherwise fetched ones if online.

        Raises a SuggestionError subclass; a failed refresh leaves the cache as it was.
        """
        cache = self._require_cache()
        # redis calls are blocking; keep them off the event loop
        cached = await asyncio.to_thread(cache.read, site.site_id, suggestion_type)
        if cached:
            logger.debug("Cache hit for %s on site %s", suggestion_type.value, site.site_id)
            return cached

        reachable = await asyncio.to_thread(self.reachability.is_reachable)
        if not reachable:
            raise NoResultsAvailable()
        return await self._fetch_once(site, suggestion_type)

    async def refresh(
        self,
        site: Site,
        suggestion_type: SuggestionType = SuggestionType.XPOSTS,
    ) -> list[Suggestion]:
        """Fetch from the network even when the cache has entries."""
        self._require_cache()
        return await self._fetch_once(site, suggestion_type)

    def invalidate(self, site: Site, suggestion_type: SuggestionType = SuggestionType.XPOSTS) -> None:
        self._require_cache().delete(site.site_id, suggestion_type)

    async def suggestions_or_none(
        self,
        site: Site,
        suggestion_type: SuggestionType = SuggestionType.XPOSTS,
    ) -> list[Suggestion] | None:
        """Like get_suggestions but any failure yields None, for list views that just hide."""
        try:
            return await self.get_suggestions(site, suggestion_type)
        except SuggestionError as e:
            logger.info("No %s for site %s: %s", suggestion_type.value, site.site_id, e)
            return None

    async def _fetch_once(self, site: Site, suggestion_type: SuggestionType) -> list[Suggestion]:
        if site.api is None:
            raise MissingClient()
        if suggestion_type is SuggestionType.XPOSTS and not site.hostname:
            raise HostnameUnavailable()

        key = (suggestion_type, site.site_id)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch_and_persist(key, site, suggestion_type))
            self._in_flight[key] = task
        else:
            logger.debug("Joining in-flight %s fetch for site %s", suggestion_type.value, site.site_id)
        # A cancelled waiter leaves the shared fetch running for the others.
        return await asyncio.shield(task)

    async def _fetch_and_persist(
        self,
        key: FetchKey,
        site: Site,
        suggestion_type: SuggestionType,
    ) -> list[Suggestion]:
        cache = self._require_cache()
        logger.info("Fetching %s for site %s", suggestion_type.value, site.site_id)
        try:
            try:
                suggestions = await asyncio.wait_for(
                    site.api.fetch_suggestions(site, suggestion_type),
                    timeout=self.fetch_timeout,
                )
            except asyncio.TimeoutError as e:
                raise FetchTimeout(
                    f"No response for {suggestion_type.value} after {self.fetch_timeout}s"
                ) from e
            await asyncio.to_thread(cache.replace_all, site.site_id, suggestions, suggestion_type)
        except SuggestionError as e:
            FETCH_COUNT.labels(type=suggestion_type.value, outcome=e.code).inc()
            logger.warning("Fetching %s for site %s failed: %s", suggestion_type.value, site.site_id, e)
            raise
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

        FETCH_COUNT.labels(type=suggestion_type.value, outcome="ok").inc()
        logger.info("Stored %d %s for site %s", len(suggestions), suggestion_type.value, site.site_id)
        return suggestions

    async def aclose(self) -> None:
        """Cancel outstanding fetches, e.g. when the editor goes away."""
        tasks = list(self._in_flight.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()
