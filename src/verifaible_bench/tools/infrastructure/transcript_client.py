"""TranscriptClient — fetches timestamped YouTube transcripts from the Supadata API."""

import asyncio
from typing import Any

import httpx
from pydantic import BaseModel

from verifaible_bench.config.domain.tools import ToolServiceConfig
from verifaible_bench.tools.infrastructure.errors import ToolServiceError

_SERVICE = "transcript API"


class TranscriptSegment(BaseModel, frozen=True):
    text: str
    offset: int  # milliseconds from the start of the video
    duration: int = 0
    lang: str | None = None


class Transcript(BaseModel, frozen=True):
    lang: str
    segments: list[TranscriptSegment]


class TranscriptClient:
    """Retrieves transcripts, polling the async job endpoint for long videos."""

    def __init__(
        self,
        config: ToolServiceConfig,
        http: httpx.AsyncClient,
        poll_interval_seconds: float = 3.0,
        max_polls: int = 10,
    ) -> None:
        self._config = config
        self._http = http
        self._poll_interval_seconds = poll_interval_seconds
        self._max_polls = max_polls

    @property
    def configured(self) -> bool:
        return bool(self._config.transcript_api_key)

    async def fetch(self, url: str) -> Transcript | None:
        """Return the transcript for url, or None if the video has no subtitles.

        Raises:
            ToolServiceError: on HTTP failures, a failed job, or polling timeout.
        """
        data = await self._get(
            "/transcript", params={"url": url, "text": "false", "lang": "en"}
        )
        lang = str(data.get("lang") or "en")

        job_id = data.get("jobId")
        if job_id:
            segments = await self._poll_job(job_id=str(job_id))
        elif data.get("content"):
            segments = data["content"]
        else:
            return None

        return Transcript(
            lang=lang,
            segments=[TranscriptSegment.model_validate(seg) for seg in segments],
        )

    async def _poll_job(self, job_id: str) -> list[Any]:
        for _ in range(self._max_polls):
            await asyncio.sleep(self._poll_interval_seconds)
            try:
                data = await self._get(f"/transcript/{job_id}")
            except ToolServiceError:
                # The job endpoint answers non-2xx while the job is still queued.
                continue
            if data.get("content"):
                return list(data["content"])
            if data.get("status") == "failed":
                raise ToolServiceError(service=_SERVICE, reason="transcript job failed")
        raise ToolServiceError(
            service=_SERVICE,
            reason=f"transcript job timed out after {self._max_polls} polls",
        )

    async def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        url = f"{self._config.transcript_api_base.rstrip('/')}{path}"
        try:
            response = await self._http.get(
                url,
                params=params,
                headers={"x-api-key": self._config.transcript_api_key},
                timeout=self._config.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise ToolServiceError(service=_SERVICE, reason=str(exc)) from exc

        if response.is_error:
            raise ToolServiceError(
                service=_SERVICE,
                reason=f"API {response.status_code}: {response.text[:300]}",
            )
        data = response.json()
        if not isinstance(data, dict):
            raise ToolServiceError(service=_SERVICE, reason="response is not a JSON object")
        return data
