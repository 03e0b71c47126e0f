"""WordPress.com REST client for the two suggestion endpoints."""

import json
import logging
from typing import Any

import httpx

from wpsuggest.errors import DecodeError, HostnameUnavailable, TransportError
from wpsuggest.models import Site, SiteSuggestion, Suggestion, SuggestionType, UserSuggestion

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://public-api.wordpress.com"


def xposts_path(hostname: str) -> str:
    return f"/wpcom/v2/sites/{hostname}/xposts"


USERS_SUGGEST_PATH = "/rest/v1.1/users/suggest"


def parse_xposts(payload: Any) -> list[SiteSuggestion]:
    """Decode the /xposts body: a JSON array of site objects."""
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a list of sites, got {type(payload).__name__}")
    try:
        return [SiteSuggestion.from_api(item) for item in payload]
    except (KeyError, TypeError, AttributeError) as e:
        raise DecodeError(f"Malformed site suggestion: {e!r}") from e


def parse_user_suggestions(payload: Any) -> list[UserSuggestion]:
    """Decode the /users/suggest body: {"suggestions": [user, ...]}."""
    if not isinstance(payload, dict) or not isinstance(payload.get("suggestions"), list):
        raise DecodeError("Expected an object with a 'suggestions' list")
    try:
        return [UserSuggestion.from_api(item) for item in payload["suggestions"]]
    except (KeyError, TypeError, AttributeError) as e:
        raise DecodeError(f"Malformed user suggestion: {e!r}") from e


class WordPressComClient:
    """Async client; pass transport to stub the network in tests."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def __aenter__(self) -> "WordPressComClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._http.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("GET %s returned %s", path, e.response.status_code)
            raise TransportError(
                f"GET {path} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning("GET %s failed: %s", path, e)
            raise TransportError(f"GET {path} failed: {e}") from e
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"GET {path} returned invalid JSON") from e

    async def xposts(self, hostname: str) -> list[SiteSuggestion]:
        return parse_xposts(await self.get_json(xposts_path(hostname)))

    async def user_suggestions(self, site_id: int) -> list[UserSuggestion]:
        payload = await self.get_json(USERS_SUGGEST_PATH, params={"site_id": site_id})
        return parse_user_suggestions(payload)

    async def fetch_suggestions(self, site: Site, suggestion_type: SuggestionType) -> list[Suggestion]:
        if suggestion_type is SuggestionType.MENTIONS:
            return list(await self.user_suggestions(site.site_id))
        if not site.hostname:
            raise HostnameUnavailable()
        return list(await self.xposts(site.hostname))
