"""Filter a fetched suggestion list against the word being typed."""

from typing import Sequence, TypeVar

from wpsuggest.models import Suggestion, SuggestionType

S = TypeVar("S", bound=Suggestion)


def filter_suggestions(suggestions: Sequence[S], query: str) -> list[S]:
    """Return suggestions whose key or label contains query (case-insensitive), in input order."""
    needle = query.casefold()
    if not needle:
        return list(suggestions)
    return [
        s
        for s in suggestions
        if needle in s.key.casefold() or needle in s.label.casefold()
    ]


def strip_trigger(search_text: str, suggestion_type: SuggestionType) -> str:
    """Drop the leading @ or + from the typed word."""
    if search_text.startswith(suggestion_type.trigger):
        return search_text[len(suggestion_type.trigger):]
    return search_text


def search(
    suggestions: Sequence[S],
    search_text: str,
    suggestion_type: SuggestionType,
) -> list[S]:
    """Filter suggestions for raw editor text such as "+news"."""
    return filter_suggestions(suggestions, strip_trigger(search_text, suggestion_type))
