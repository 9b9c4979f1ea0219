"""ProviderAdapter Protocol — structural interface for every LLM backend family."""

from typing import Protocol

from verifaible_bench.provider.domain.conversation import Conversation
from verifaible_bench.provider.domain.output import TurnOutput
from verifaible_bench.provider.domain.sampling import SamplingParams
from verifaible_bench.tools.domain.schema import ToolSchema


class ProviderAdapter(Protocol):
    """Translates the canonical conversation to one backend's wire format and back.

    Implementations retry transient transport failures internally and raise
    ProviderTransportError once the retry budget is spent. They report tool
    calls exactly as the backend returned them; they never parse text for calls.
    """

    async def send(
        self,
        model: str,
        conversation: Conversation,
        tools: list[ToolSchema],
        sampling: SamplingParams,
        continuation_id: str | None = None,
    ) -> TurnOutput: ...
