"""HTTP client for the AlKetab natural-language Quran search API.

The API is used in two steps:

1. ``search_initial`` sends the user's free text as ``message``. The response
   carries the first page, an AI explanation and an opaque ``generated_query``.
2. ``search_continuation`` fetches any further page. Pagination is stateless on
   the server and keyed solely by the ``generated_query`` token; the original
   text is never sent again.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from alketab.config import ApiSettings
from alketab.domain.models import NormalizedPage, RawApiResponse, SortOrder
from alketab.logging import logger
from alketab.services.exceptions import (
    ApiError,
    BadRequest,
    EmptyQuery,
    InsufficientCredits,
    InvalidURL,
    MissingContinuationToken,
    NetworkError,
    NoData,
    NoResults,
    ParsingError,
    Unauthorized,
)
from alketab.services.normalize import normalize_response

RAW_BODY_LOG_LIMIT = 4000


class SearchClient:
    """Builds, sends and decodes AlKetab search requests.

    Holds no state between calls; every method issues exactly one GET request
    and either returns a ``NormalizedPage`` or raises a ``SearchError``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: ApiSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or ApiSettings()

    async def search_initial(self, query: str) -> NormalizedPage:
        message = (query or "").strip()
        if not message:
            raise EmptyQuery()
        return await self._perform_request({"message": message})

    async def search_continuation(
        self,
        token: str,
        page: int,
        sort: SortOrder = SortOrder.mushaf,
    ) -> NormalizedPage:
        if not token:
            raise MissingContinuationToken()
        params = {
            "generated_query": token,
            "page": str(page),
            "sort_by": sort.value,
        }
        return await self._perform_request(params)

    async def _perform_request(self, params: dict[str, str]) -> NormalizedPage:
        url = str(self._settings.base_url)
        logger.info("alketab_request_started", url=url, params=params)
        try:
            response = await self._client.get(
                url,
                params=params,
                headers=self._auth_headers(),
                timeout=self._settings.request_timeout_seconds,
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            logger.error("alketab_invalid_url", url=url, error=str(exc))
            raise InvalidURL(str(exc)) from exc
        except httpx.TimeoutException as exc:
            logger.warning("alketab_request_timeout", url=url, error=str(exc))
            raise NetworkError(str(exc) or "Request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("alketab_network_error", url=url, error=str(exc))
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        logger.info("alketab_response_received", status_code=response.status_code)
        self._raise_for_status(response)

        body = response.content
        if not body:
            logger.warning("alketab_no_data", status_code=response.status_code)
            raise NoData()

        logger.debug("alketab_raw_response", body=response.text[:RAW_BODY_LOG_LIMIT])
        return self._parse_response(body)

    def _auth_headers(self) -> dict[str, str]:
        api_key = _read_secret(self._settings.api_key)
        if not api_key:
            return {}
        return {self._settings.api_key_header: api_key}

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status_code = response.status_code
        if status_code == 401:
            logger.error("alketab_unauthorized")
            raise Unauthorized()
        if status_code == 402:
            logger.error("alketab_insufficient_credits")
            raise InsufficientCredits()
        if status_code == 400:
            logger.warning("alketab_bad_request", body=response.text[:500])
            raise BadRequest()

    @staticmethod
    def _parse_response(body: bytes) -> NormalizedPage:
        try:
            api_response = RawApiResponse.model_validate_json(body)
        except ValidationError as exc:
            logger.warning("alketab_parsing_error", errors=exc.error_count())
            raise ParsingError(str(exc)) from exc

        if not api_response.success:
            explain = api_response.ai.explain if api_response.ai else None
            logger.warning("alketab_api_error", explain=explain)
            raise ApiError(0, explain or "Search failed")

        page = normalize_response(api_response)
        if page is None:
            logger.info("alketab_no_results")
            raise NoResults()

        logger.info(
            "alketab_page_decoded",
            page=page.page,
            total_pages=page.total_pages,
            total_results=page.total_results,
            verses=len(page.verses),
        )
        return page


def _read_secret(secret: Any) -> str | None:
    if not secret:
        return None
    try:
        return secret.get_secret_value()
    except AttributeError:
        return str(secret)


__all__ = ["SearchClient"]
