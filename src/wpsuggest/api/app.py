"""FastAPI app: /suggest serves cached or freshly fetched mentions and cross-posts; Prometheus metrics."""

import time
from contextlib import asynccontextmanager
from typing import Any

import redis
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import RedirectResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from wpsuggest.cache import SuggestionCache
from wpsuggest.client import WordPressComClient
from wpsuggest.config import Settings, load_settings
from wpsuggest.errors import (
    DecodeError,
    FetchTimeout,
    HostnameUnavailable,
    MissingClient,
    MissingPersistenceContext,
    NoResultsAvailable,
    PersistenceError,
    SuggestionError,
    TransportError,
)
from wpsuggest.filter import search
from wpsuggest.logging_setup import configure_logging
from wpsuggest.models import Site, Suggestion, SuggestionType, display_title
from wpsuggest.reachability import HttpReachability
from wpsuggest.service import SuggestionService

# --- Prometheus metrics ---
REQUEST_COUNT = Counter(
    "wpsuggest_requests_total",
    "Total suggest requests",
    ["type", "outcome"],
)
REQUEST_LATENCY = Histogram(
    "wpsuggest_request_duration_seconds",
    "Suggest request latency",
    ["type"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)
SUGGESTIONS_RETURNED = Histogram(
    "wpsuggest_suggestions_returned",
    "Number of suggestions returned",
    buckets=(0, 1, 5, 10, 20, 50),
)

STATUS_BY_ERROR: dict[type[SuggestionError], int] = {
    NoResultsAvailable: 503,
    MissingClient: 409,
    HostnameUnavailable: 409,
    TransportError: 502,
    DecodeError: 502,
    FetchTimeout: 504,
    PersistenceError: 500,
    MissingPersistenceContext: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cancel outstanding fetches and close the WordPress.com client on shutdown."""
    yield
    if _service is not None:
        await _service.aclose()
    if _client is not None:
        await _client.aclose()


app = FastAPI(
    title="Suggestions API",
    description="@mention and +cross-post suggestions for WordPress.com sites, cached in Redis",
    version="0.1.0",
    lifespan=lifespan,
)

_settings: Settings | None = None
_redis: redis.Redis | None = None
_client: WordPressComClient | None = None
_service: SuggestionService | None = None
_sites: dict[int, Site] | None = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
        configure_logging(_settings.log_level, _settings.log_path)
    return _settings


def _get_redis() -> redis.Redis:
    global _redis
    if _redis is None:
        s = _get_settings()
        _redis = redis.Redis(host=s.redis_host, port=s.redis_port, db=s.redis_db, decode_responses=True)
    return _redis


def _get_client() -> WordPressComClient:
    global _client
    if _client is None:
        s = _get_settings()
        _client = WordPressComClient(s.api_base_url, token=s.api_token, timeout_seconds=s.api_timeout_seconds)
    return _client


def _get_service() -> SuggestionService:
    global _service
    if _service is None:
        s = _get_settings()
        cache = SuggestionCache(_get_redis(), key_prefix=s.cache_key_prefix, ttl_seconds=s.cache_ttl_seconds)
        _service = SuggestionService(
            cache,
            reachability=HttpReachability(s.api_base_url),
            fetch_timeout=s.fetch_timeout_seconds,
        )
    return _service


def _get_sites() -> dict[int, Site]:
    global _sites
    if _sites is None:
        s = _get_settings()
        _sites = {
            sc.site_id: Site(sc.site_id, sc.hostname, _get_client() if sc.wpcom else None)
            for sc in s.sites
        }
    return _sites


def _get_site(site_id: int) -> Site:
    site = _get_sites().get(site_id)
    if site is None:
        raise HTTPException(status_code=404, detail=f"Unknown site {site_id}")
    return site


def _error_status(error: SuggestionError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def _serialize(suggestion: Suggestion) -> dict[str, Any]:
    return {
        "key": suggestion.key,
        "label": suggestion.label,
        "avatar_url": suggestion.avatar_url,
        "title": display_title(suggestion),
        "insertion_text": suggestion.insertion_text,
    }


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse(url="/docs")


@app.get("/health")
def health() -> dict:
    """Liveness: service is up."""
    return {"status": "ok"}


@app.get("/ready")
def ready() -> dict:
    """Readiness: Redis is reachable."""
    try:
        _get_redis().ping()
    except redis.RedisError as e:
        raise HTTPException(status_code=503, detail=f"Redis: {e}")
    return {"status": "ready"}


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/suggest")
async def suggest(
    site_id: int = Query(..., description="Site the suggestions belong to"),
    q: str = Query("", description="Word being typed, with or without its trigger character"),
    suggestion_type: SuggestionType = Query(
        SuggestionType.XPOSTS, alias="type", description="mentions (@) or xposts (+)"
    ),
    limit: int = Query(20, ge=1, le=100),
) -> dict:
    """Return suggestions for the site that match q. Cache first, network on a miss."""
    site = _get_site(site_id)
    start = time.perf_counter()
    try:
        suggestions = await _get_service().get_suggestions(site, suggestion_type)
    except SuggestionError as e:
        REQUEST_COUNT.labels(type=suggestion_type.value, outcome=e.code).inc()
        raise HTTPException(status_code=_error_status(e), detail={"code": e.code, "message": str(e)})
    finally:
        REQUEST_LATENCY.labels(type=suggestion_type.value).observe(time.perf_counter() - start)

    matches = search(suggestions, q, suggestion_type)[:limit]
    REQUEST_COUNT.labels(type=suggestion_type.value, outcome="ok").inc()
    SUGGESTIONS_RETURNED.observe(len(matches))
    return {
        "site_id": site_id,
        "type": suggestion_type.value,
        "trigger": suggestion_type.trigger,
        "query": q,
        "suggestions": [_serialize(s) for s in matches],
    }


@app.post("/sites/{site_id}/suggestions/{suggestion_type}/refresh")
async def refresh(site_id: int, suggestion_type: SuggestionType) -> dict:
    """Refetch a site's suggestions regardless of what is cached."""
    site = _get_site(site_id)
    try:
        suggestions = await _get_service().refresh(site, suggestion_type)
    except SuggestionError as e:
        raise HTTPException(status_code=_error_status(e), detail={"code": e.code, "message": str(e)})
    return {"site_id": site_id, "type": suggestion_type.value, "count": len(suggestions)}
