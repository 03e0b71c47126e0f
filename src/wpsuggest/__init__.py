"""Mention and cross-post autocomplete suggestions for WordPress.com sites."""

from wpsuggest.filter import filter_suggestions, search, strip_trigger
from wpsuggest.models import Site, SiteSuggestion, SuggestionType, UserSuggestion
from wpsuggest.service import SuggestionService

__all__ = [
    "Site",
    "SiteSuggestion",
    "SuggestionService",
    "SuggestionType",
    "UserSuggestion",
    "filter_suggestions",
    "search",
    "strip_trigger",
]
