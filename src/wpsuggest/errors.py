"""Failure kinds for a suggestion lookup. None are retried; callers may ask again later."""


class SuggestionError(Exception):
    code = "suggestion_error"
    description = "Suggestions are not available"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.description)


class MissingClient(SuggestionError):
    code = "missing_client"
    description = "Site has no WordPress.com API client"


class MissingPersistenceContext(SuggestionError):
    code = "missing_persistence_context"
    description = "Suggestion store not available"


class HostnameUnavailable(SuggestionError):
    code = "hostname_unavailable"
    description = "Site hostname not available"


class NoResultsAvailable(SuggestionError):
    code = "no_results_available"
    description = "The device is offline and there are no suggestions in the cache"


class TransportError(SuggestionError):
    code = "transport_error"
    description = "Suggestion request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(SuggestionError):
    code = "decode_error"
    description = "Suggestion payload could not be decoded"


class PersistenceError(SuggestionError):
    code = "persistence_error"
    description = "Suggestions could not be stored"


class FetchTimeout(SuggestionError):
    code = "fetch_timeout"
    description = "Suggestion request timed out"
