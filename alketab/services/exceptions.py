"""Closed error taxonomy of the search client.

Every failure of a search call is raised as one of the ``SearchError``
subclasses below. The session layer catches them and stores the ``kind`` and
``user_message`` in its state, so nothing escapes to the presentation layer.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    EMPTY_QUERY = "empty_query"
    MISSING_CONTINUATION_TOKEN = "missing_continuation_token"
    INVALID_URL = "invalid_url"
    NETWORK_ERROR = "network_error"
    NO_DATA = "no_data"
    PARSING_ERROR = "parsing_error"
    API_ERROR = "api_error"
    NO_RESULTS = "no_results"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    UNAUTHORIZED = "unauthorized"


class SearchError(Exception):
    kind = ErrorKind.API_ERROR
    is_configuration_error = False

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(self.user_message)

    @property
    def user_message(self) -> str:
        return self.detail or "Search failed"


class EmptyQuery(SearchError):
    kind = ErrorKind.EMPTY_QUERY

    @property
    def user_message(self) -> str:
        return "Search query is empty"


class MissingContinuationToken(SearchError):
    kind = ErrorKind.MISSING_CONTINUATION_TOKEN

    @property
    def user_message(self) -> str:
        return "No continuation token available for pagination"


class InvalidURL(SearchError):
    kind = ErrorKind.INVALID_URL

    @property
    def user_message(self) -> str:
        return "Invalid search URL"


class NetworkError(SearchError):
    kind = ErrorKind.NETWORK_ERROR

    @property
    def user_message(self) -> str:
        return f"Connection error: {self.detail}"


class NoData(SearchError):
    kind = ErrorKind.NO_DATA

    @property
    def user_message(self) -> str:
        return "No data received from server"


class ParsingError(SearchError):
    kind = ErrorKind.PARSING_ERROR

    @property
    def user_message(self) -> str:
        return f"Data parsing error: {self.detail}"


class ApiError(SearchError):
    kind = ErrorKind.API_ERROR

    def __init__(self, code: int, detail: str) -> None:
        self.code = code
        super().__init__(detail)

    @property
    def user_message(self) -> str:
        return f"Error {self.code}: {self.detail}"


class BadRequest(ApiError):
    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(400, detail)


class NoResults(SearchError):
    kind = ErrorKind.NO_RESULTS

    @property
    def user_message(self) -> str:
        return "No results found"


class InsufficientCredits(SearchError):
    kind = ErrorKind.INSUFFICIENT_CREDITS
    is_configuration_error = True

    @property
    def user_message(self) -> str:
        return "Service currently unavailable, please try again later"


class Unauthorized(SearchError):
    kind = ErrorKind.UNAUTHORIZED
    is_configuration_error = True

    @property
    def user_message(self) -> str:
        return "Unauthorized: please configure a valid AlKetab API key (ALKETAB_API__API_KEY)."


__all__ = [
    "ApiError",
    "BadRequest",
    "EmptyQuery",
    "ErrorKind",
    "InsufficientCredits",
    "InvalidURL",
    "MissingContinuationToken",
    "NetworkError",
    "NoData",
    "NoResults",
    "ParsingError",
    "SearchError",
    "Unauthorized",
]
