"""Tests for EvidenceServiceClient against an in-process httpx transport."""

import json

import httpx
import pytest

from verifaible_bench.config.domain.tools import ToolServiceConfig
from verifaible_bench.tools.infrastructure.errors import ToolServiceError
from verifaible_bench.tools.infrastructure.evidence_client import EvidenceServiceClient

_CONFIG = ToolServiceConfig(api_base="http://evidence.test/api/v1/", user_id="7")


class RecordingTransport:
    """Answers every request with a canned response and keeps the requests."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def _client(transport: RecordingTransport) -> EvidenceServiceClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return EvidenceServiceClient(config=_CONFIG, http=http)


class TestRequests:
    async def test_web_search_applies_defaults_and_cap(self) -> None:
        transport = RecordingTransport(httpx.Response(200, json={"success": True}))

        await _client(transport).web_search(query="gdp 2024", max_results=50)

        request = transport.requests[0]
        assert str(request.url) == "http://evidence.test/api/v1/agent/web/search"
        assert json.loads(request.content) == {
            "query": "gdp 2024",
            "max_results": 10,
            "search_depth": "basic",
            "include_answer": True,
        }

    async def test_analyze_page_omits_unset_fields(self) -> None:
        transport = RecordingTransport(httpx.Response(200, json={"content_type": "html"}))

        await _client(transport).analyze_page(url="https://example.com")

        assert json.loads(transport.requests[0].content) == {"url": "https://example.com"}

    async def test_create_evidence_sends_user_id(self) -> None:
        transport = RecordingTransport(httpx.Response(200, json={"user_seq": 3}))

        data = await _client(transport).create_evidence(
            fields={"claim": "c", "source_url": "u", "anchor": None}
        )

        request = transport.requests[0]
        assert request.url.path == "/api/v1/agent/evidence/create-from-web"
        assert request.headers["X-User-ID"] == "7"
        assert json.loads(request.content) == {"claim": "c", "source_url": "u"}
        assert data == {"user_seq": 3}

    async def test_unauthenticated_calls_omit_user_id(self) -> None:
        transport = RecordingTransport(httpx.Response(200, json={"success": True}))

        await _client(transport).web_fetch(url="https://example.com")

        assert "X-User-ID" not in transport.requests[0].headers


class TestFailures:
    async def test_non_2xx_raises_with_status(self) -> None:
        transport = RecordingTransport(httpx.Response(502, text="bad gateway"))

        with pytest.raises(ToolServiceError, match="API 502: bad gateway"):
            await _client(transport).web_fetch(url="https://example.com")

    async def test_non_object_body_raises(self) -> None:
        transport = RecordingTransport(httpx.Response(200, json=[1, 2]))

        with pytest.raises(ToolServiceError, match="not a JSON object"):
            await _client(transport).web_fetch(url="https://example.com")

    async def test_non_json_body_raises(self) -> None:
        transport = RecordingTransport(httpx.Response(200, text="<html>"))

        with pytest.raises(ToolServiceError, match="not JSON"):
            await _client(transport).web_fetch(url="https://example.com")

    async def test_transport_error_raises(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = EvidenceServiceClient(
            config=_CONFIG, http=httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        )
        with pytest.raises(ToolServiceError, match="connection refused"):
            await client.web_fetch(url="https://example.com")
