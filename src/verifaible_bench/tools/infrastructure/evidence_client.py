"""EvidenceServiceClient — HTTP client for the remote web and evidence tools."""

from typing import Any

import httpx

from verifaible_bench.config.domain.tools import ToolServiceConfig
from verifaible_bench.tools.infrastructure.errors import ToolServiceError

type JsonDict = dict[str, Any]

_MAX_SEARCH_RESULTS = 10
_ERROR_BODY_CHARS = 500


def _drop_unset(params: dict[str, Any]) -> JsonDict:
    return {key: value for key, value in params.items() if value is not None}


class EvidenceServiceClient:
    """Thin async wrapper over the evidence service REST API.

    Every call is a single stateless POST. Browser-backed endpoints
    (page analysis, action-step testing) get the longer browser timeout.
    The shared httpx.AsyncClient is owned by the caller.
    """

    def __init__(self, config: ToolServiceConfig, http: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http

    async def web_search(
        self,
        query: str,
        max_results: int | None = None,
        search_depth: str | None = None,
        include_answer: bool | None = None,
    ) -> JsonDict:
        return await self._post(
            "/agent/web/search",
            body={
                "query": query,
                "max_results": min(max_results or 5, _MAX_SEARCH_RESULTS),
                "search_depth": search_depth or "basic",
                "include_answer": True if include_answer is None else include_answer,
            },
        )

    async def web_fetch(self, url: str) -> JsonDict:
        return await self._post("/agent/web/fetch", body={"url": url})

    async def analyze_page(self, url: str, action_steps: str | None = None) -> JsonDict:
        return await self._post(
            "/evidence/analyze",
            body=_drop_unset({"url": url, "action_steps": action_steps}),
            timeout=self._config.browser_timeout_seconds,
        )

    async def test_action_steps(
        self,
        url: str,
        action_steps: str,
        verify_type: str = "text",
        anchor: str | None = None,
        row_anchor: str | None = None,
        element_selector: str | None = None,
        element_alt: str | None = None,
    ) -> JsonDict:
        return await self._post(
            "/evidence/test-steps",
            body=_drop_unset(
                {
                    "url": url,
                    "action_steps": action_steps,
                    "verify_type": verify_type,
                    "anchor": anchor,
                    "row_anchor": row_anchor,
                    "element_selector": element_selector,
                    "element_alt": element_alt,
                }
            ),
            timeout=self._config.browser_timeout_seconds,
        )

    async def create_evidence(self, fields: dict[str, Any]) -> JsonDict:
        """Create a persisted evidence record. Unset fields are omitted."""
        return await self._post(
            "/agent/evidence/create-from-web",
            body=_drop_unset(fields),
            auth=True,
        )

    async def _post(
        self,
        path: str,
        body: JsonDict,
        timeout: float | None = None,
        auth: bool = False,
    ) -> JsonDict:
        """POST body to the service and return the decoded JSON object.

        Raises:
            ToolServiceError: on transport failure, timeout, non-2xx status,
                or a response body that is not a JSON object.
        """
        url = f"{self._config.api_base.rstrip('/')}{path}"
        headers = {"Content-Type": "application/json"}
        if auth:
            headers["X-User-ID"] = self._config.user_id

        try:
            response = await self._http.post(
                url,
                json=body,
                headers=headers,
                timeout=timeout or self._config.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise ToolServiceError(service=path, reason=f"timed out ({exc})") from exc
        except httpx.HTTPError as exc:
            raise ToolServiceError(service=path, reason=str(exc)) from exc

        if response.is_error:
            raise ToolServiceError(
                service=path,
                reason=f"API {response.status_code}: {response.text[:_ERROR_BODY_CHARS]}",
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ToolServiceError(service=path, reason="response is not JSON") from exc
        if not isinstance(data, dict):
            raise ToolServiceError(service=path, reason="response is not a JSON object")
        return data
