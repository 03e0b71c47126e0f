"""Suggestion types: users for @mentions, sites for +cross-posts."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

if TYPE_CHECKING:
    from wpsuggest.client import WordPressComClient


class SuggestionType(str, Enum):
    MENTIONS = "mentions"
    XPOSTS = "xposts"

    @property
    def trigger(self) -> str:
        """Character that opens the suggestion list in the editor."""
        return "@" if self is SuggestionType.MENTIONS else "+"


class Suggestion(Protocol):
    """Common shape of every suggestion: a key, a label and an optional avatar."""

    suggestion_type: ClassVar[SuggestionType]

    @property
    def key(self) -> str: ...

    @property
    def label(self) -> str: ...

    @property
    def avatar_url(self) -> str | None: ...

    @property
    def insertion_text(self) -> str: ...

    def to_dict(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class UserSuggestion:
    username: str
    display_name: str = ""
    image_url: str | None = None

    suggestion_type: ClassVar[SuggestionType] = SuggestionType.MENTIONS

    @property
    def key(self) -> str:
        return self.username

    @property
    def label(self) -> str:
        return self.display_name

    @property
    def avatar_url(self) -> str | None:
        return self.image_url

    @property
    def subtitle(self) -> str:
        return self.display_name

    @property
    def insertion_text(self) -> str:
        """Text put into the editor when the suggestion is picked."""
        return self.username

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserSuggestion":
        return cls(
            username=data["username"],
            display_name=data.get("display_name") or "",
            image_url=data.get("image_url"),
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "UserSuggestion":
        """Build from a /users/suggest entry (user_login, display_name, image_URL)."""
        username = data["user_login"]
        if not isinstance(username, str) or not username:
            raise TypeError(f"user_login must be a non-empty string, got {username!r}")
        return cls(
            username=username,
            display_name=str(data.get("display_name") or ""),
            image_url=data.get("image_URL") or None,
        )


@dataclass(frozen=True)
class SiteSuggestion:
    subdomain: str
    title: str = ""
    site_url: str | None = None
    blavatar_url: str | None = None

    suggestion_type: ClassVar[SuggestionType] = SuggestionType.XPOSTS

    @property
    def key(self) -> str:
        return self.subdomain

    @property
    def label(self) -> str:
        return self.title

    @property
    def avatar_url(self) -> str | None:
        return self.blavatar_url

    @property
    def subtitle(self) -> str:
        return self.title

    @property
    def insertion_text(self) -> str:
        return self.title

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SiteSuggestion":
        return cls(
            subdomain=data["subdomain"],
            title=data.get("title") or "",
            site_url=data.get("site_url"),
            blavatar_url=data.get("blavatar_url"),
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SiteSuggestion":
        """Build from an /xposts entry (subdomain, title, siteurl, blavatar)."""
        subdomain = data["subdomain"]
        if not isinstance(subdomain, str) or not subdomain:
            raise TypeError(f"subdomain must be a non-empty string, got {subdomain!r}")
        return cls(
            subdomain=subdomain,
            title=str(data.get("title") or ""),
            site_url=data.get("siteurl") or None,
            blavatar_url=data.get("blavatar") or None,
        )


SUGGESTION_CLASSES: dict[SuggestionType, type] = {
    SuggestionType.MENTIONS: UserSuggestion,
    SuggestionType.XPOSTS: SiteSuggestion,
}


def display_title(suggestion: Suggestion) -> str:
    """Row title shown in the list: trigger followed by the key."""
    return f"{suggestion.suggestion_type.trigger}{suggestion.key}"


@dataclass(frozen=True)
class Site:
    """The blog suggestions are scoped to. api is None when the site has no WordPress.com client."""

    site_id: int
    hostname: str | None = None
    api: "WordPressComClient | None" = None
