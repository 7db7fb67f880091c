"""Tests for the AlKetab search client."""

from __future__ import annotations

import json

import httpx
import pytest
from pydantic import SecretStr

from alketab.config import ApiSettings
from alketab.domain.models import SortOrder
from alketab.services.exceptions import (
    ApiError,
    BadRequest,
    EmptyQuery,
    ErrorKind,
    InsufficientCredits,
    InvalidURL,
    MissingContinuationToken,
    NetworkError,
    NoData,
    NoResults,
    ParsingError,
    SearchError,
    Unauthorized,
)
from alketab.services.search import SearchClient


def _settings(**overrides) -> ApiSettings:
    values = {"api_key": SecretStr("ak_test")}
    values.update(overrides)
    return ApiSettings(**values)


def _json_handler(payload, requests: list[httpx.Request] | None = None, status_code: int = 200):
    async def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


@pytest.mark.asyncio
async def test_search_initial_sends_trimmed_message_and_api_key(sample_payload):
    requests: list[httpx.Request] = []
    transport = httpx.MockTransport(_json_handler(sample_payload, requests))
    async with httpx.AsyncClient(transport=transport) as client:
        page = await SearchClient(client, settings=_settings()).search_initial("  patience  ")

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/api/search"
    assert dict(request.url.params) == {"message": "patience"}
    assert request.headers["X-API-Key"] == "ak_test"

    assert [verse.id for verse in page.verses] == [10, 11, 12]
    assert page.page == 1
    assert page.total_pages == 3
    assert page.total_results == 30
    assert page.continuation_token == "gq-token"
    assert page.sort_order is SortOrder.relevance
    assert page.ai_explanation == "Verses about patience."
    assert page.runtime == 0.25


@pytest.mark.asyncio
async def test_search_initial_rejects_blank_query_without_request():
    requests: list[httpx.Request] = []
    transport = httpx.MockTransport(_json_handler({}, requests))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(EmptyQuery) as excinfo:
            await SearchClient(client, settings=_settings()).search_initial(" \n\t ")

    assert requests == []
    assert excinfo.value.kind is ErrorKind.EMPTY_QUERY


@pytest.mark.asyncio
async def test_search_continuation_sends_token_page_and_sort_only(sample_payload):
    requests: list[httpx.Request] = []
    transport = httpx.MockTransport(_json_handler(sample_payload, requests))
    async with httpx.AsyncClient(transport=transport) as client:
        service = SearchClient(client, settings=_settings())
        await service.search_continuation("gq-token", 2, SortOrder.revelation)

    params = dict(requests[0].url.params)
    assert params == {"generated_query": "gq-token", "page": "2", "sort_by": "tanzil"}
    assert "message" not in params


@pytest.mark.asyncio
async def test_search_continuation_requires_token():
    requests: list[httpx.Request] = []
    transport = httpx.MockTransport(_json_handler({}, requests))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(MissingContinuationToken):
            await SearchClient(client, settings=_settings()).search_continuation("", 2)

    assert requests == []


@pytest.mark.asyncio
async def test_custom_header_and_missing_key(sample_payload):
    requests: list[httpx.Request] = []
    transport = httpx.MockTransport(_json_handler(sample_payload, requests))
    async with httpx.AsyncClient(transport=transport) as client:
        await SearchClient(client, settings=_settings(api_key_header="X-Key")).search_initial("q")
        await SearchClient(client, settings=ApiSettings()).search_initial("q")

    assert requests[0].headers["X-Key"] == "ak_test"
    assert "X-API-Key" not in requests[1].headers


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "error_type"),
    [(401, Unauthorized), (402, InsufficientCredits), (400, BadRequest)],
)
async def test_status_codes_are_classified_before_decoding(status_code, error_type, sample_payload):
    transport = httpx.MockTransport(_json_handler(sample_payload, status_code=status_code))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(error_type):
            await SearchClient(client, settings=_settings()).search_initial("patience")


@pytest.mark.asyncio
async def test_bad_request_is_an_api_error_with_code_400():
    transport = httpx.MockTransport(_json_handler({"success": False}, status_code=400))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(ApiError) as excinfo:
            await SearchClient(client, settings=_settings()).search_initial("patience")

    assert excinfo.value.code == 400
    assert excinfo.value.kind is ErrorKind.API_ERROR
    assert excinfo.value.user_message == "Error 400: Bad Request"


def test_unauthorized_and_credits_are_configuration_errors():
    assert Unauthorized().is_configuration_error is True
    assert InsufficientCredits().is_configuration_error is True
    assert NetworkError("boom").is_configuration_error is False


@pytest.mark.asyncio
async def test_other_error_status_falls_through_to_decoding(sample_payload):
    transport = httpx.MockTransport(_json_handler(sample_payload, status_code=500))
    async with httpx.AsyncClient(transport=transport) as client:
        page = await SearchClient(client, settings=_settings()).search_initial("patience")

    assert len(page.verses) == 3


@pytest.mark.asyncio
async def test_empty_body_raises_no_data():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NoData):
            await SearchClient(client, settings=_settings()).search_initial("patience")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [b"<html>oops</html>", b"[]", json.dumps({"success": True, "search": {"ayas": "nope"}}).encode()],
)
async def test_undecodable_body_raises_parsing_error(body):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ParsingError) as excinfo:
            await SearchClient(client, settings=_settings()).search_initial("patience")

    assert excinfo.value.user_message.startswith("Data parsing error:")


@pytest.mark.asyncio
async def test_unsuccessful_payload_raises_api_error_with_explanation():
    payload = {"success": False, "ai": {"explain": "Query not understood"}}
    transport = httpx.MockTransport(_json_handler(payload))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(ApiError) as excinfo:
            await SearchClient(client, settings=_settings()).search_initial("patience")

    assert excinfo.value.code == 0
    assert excinfo.value.detail == "Query not understood"


@pytest.mark.asyncio
async def test_unsuccessful_payload_without_explanation_uses_generic_detail():
    transport = httpx.MockTransport(_json_handler({"success": False}))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(ApiError) as excinfo:
            await SearchClient(client, settings=_settings()).search_initial("patience")

    assert excinfo.value.detail == "Search failed"


@pytest.mark.asyncio
@pytest.mark.parametrize("ayas", [None, {}])
async def test_successful_payload_without_verses_raises_no_results(ayas, make_payload):
    transport = httpx.MockTransport(_json_handler(make_payload(ayas)))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(NoResults):
            await SearchClient(client, settings=_settings()).search_initial("patience")


@pytest.mark.asyncio
async def test_successful_payload_without_search_raises_no_results():
    transport = httpx.MockTransport(_json_handler({"success": True}))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(NoResults):
            await SearchClient(client, settings=_settings()).search_initial("patience")


@pytest.mark.asyncio
async def test_network_failure_raises_network_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError) as excinfo:
            await SearchClient(client, settings=_settings()).search_initial("patience")

    assert "connection refused" in excinfo.value.user_message


@pytest.mark.asyncio
async def test_timeout_raises_network_error_and_uses_configured_timeout():
    seen_timeouts: list[dict] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen_timeouts.append(request.extensions["timeout"])
        raise httpx.ReadTimeout("timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        service = SearchClient(client, settings=_settings(request_timeout_seconds=5))
        with pytest.raises(NetworkError):
            await service.search_initial("patience")

    assert seen_timeouts[0]["read"] == 5


@pytest.mark.asyncio
async def test_unsupported_url_raises_invalid_url():
    settings = ApiSettings.model_construct(
        base_url="ftp://alketab.example/search",
        api_key=None,
        api_key_header="X-API-Key",
        request_timeout_seconds=60,
    )
    async with httpx.AsyncClient() as client:
        with pytest.raises(InvalidURL):
            await SearchClient(client, settings=settings).search_initial("patience")


def test_base_search_error_has_generic_message():
    assert SearchError().user_message == "Search failed"
    assert str(SearchError()) == "Search failed"
    assert SearchError("upstream hiccup").user_message == "upstream hiccup"
