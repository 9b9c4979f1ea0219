"""ResponsesAdapter — "responses"-style protocol (OpenRouter) via the openai SDK."""

from typing import Any

import httpx
from openai import AsyncOpenAI
from pydantic import ValidationError

from verifaible_bench.config.domain.provider import ProviderConfig
from verifaible_bench.provider.domain.conversation import (
    AssistantMessage,
    Conversation,
    ConversationItem,
    SystemMessage,
    ToolCallItem,
    ToolResultItem,
    UserMessage,
)
from verifaible_bench.provider.domain.observer import ProviderObserver
from verifaible_bench.provider.domain.output import (
    OutputItem,
    ReasoningOutput,
    TextOutput,
    ToolCallOutput,
    TurnOutput,
    arguments_json_text,
    new_call_id,
)
from verifaible_bench.provider.domain.sampling import SamplingParams
from verifaible_bench.provider.domain.usage import TokenUsage
from verifaible_bench.provider.infrastructure.errors import ProviderTransportError
from verifaible_bench.provider.infrastructure.retry import call_with_retry
from verifaible_bench.tools.domain.schema import ToolSchema

type WireItem = dict[str, Any]

_ROLE_BY_KIND = {"system": "system", "user": "user", "assistant": "assistant"}


def encode_responses_input(conversation: Conversation) -> list[WireItem]:
    """Encode the conversation as a responses ``input`` array."""
    wire: list[WireItem] = []
    for item in conversation:
        if isinstance(item, ToolCallItem):
            wire.append(
                {
                    "type": "function_call",
                    "call_id": item.call_id,
                    "name": item.name,
                    "arguments": item.arguments_json,
                }
            )
        elif isinstance(item, ToolResultItem):
            wire.append(
                {"type": "function_call_output", "call_id": item.call_id, "output": item.output}
            )
        else:
            wire.append({"role": _ROLE_BY_KIND[item.kind], "content": item.text})
    return wire


def decode_responses_input(wire: list[WireItem]) -> Conversation:
    """Inverse of encode_responses_input.

    Raises:
        ValueError: on an item that is neither a message nor a function call/output.
        ConversationOrderError: if the items break call/result pairing.
    """
    items: list[ConversationItem] = []
    for entry in wire:
        kind = entry.get("type")
        if kind == "function_call":
            items.append(
                ToolCallItem(
                    call_id=entry["call_id"],
                    name=entry["name"],
                    arguments_json=arguments_json_text(entry.get("arguments")),
                )
            )
        elif kind == "function_call_output":
            items.append(ToolResultItem(call_id=entry["call_id"], output=entry["output"]))
        elif entry.get("role") == "system":
            items.append(SystemMessage(text=entry["content"]))
        elif entry.get("role") == "user":
            items.append(UserMessage(text=entry["content"]))
        elif entry.get("role") == "assistant":
            items.append(AssistantMessage(text=entry["content"]))
        else:
            raise ValueError(f"unrecognised responses input item: {entry!r}")
    return Conversation(items)


def encode_responses_tools(tools: list[ToolSchema]) -> list[WireItem]:
    return [
        {
            "type": "function",
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameters,
        }
        for tool in tools
    ]


def _joined_text(parts: Any) -> str:
    if not isinstance(parts, list):
        return ""
    return "".join(
        str(part.get("text") or "") for part in parts if isinstance(part, dict)
    )


def parse_responses_output(payload: dict[str, Any]) -> TurnOutput:
    """Map a responses API body to a TurnOutput, keeping the emitted item order.

    Raises:
        ProviderTransportError: if the body reports an error instead of
            output, or is malformed.
    """
    try:
        return _responses_turn_output(payload)
    except (ValidationError, AttributeError, TypeError) as exc:
        raise ProviderTransportError(reason=f"malformed responses body: {exc}") from exc


def _responses_turn_output(payload: dict[str, Any]) -> TurnOutput:
    error = payload.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else error
        raise ProviderTransportError(reason=f"provider returned an error: {message}")

    items: list[OutputItem] = []
    for entry in payload.get("output") or []:
        kind = entry.get("type")
        if kind == "function_call":
            items.append(
                ToolCallOutput(
                    call_id=entry.get("call_id") or entry.get("id") or new_call_id(),
                    name=entry.get("name", ""),
                    arguments_json=arguments_json_text(entry.get("arguments")),
                )
            )
        elif kind == "message":
            for part in entry.get("content") or []:
                if part.get("type") in ("output_text", "text") and part.get("text"):
                    items.append(TextOutput(text=part["text"]))
        elif kind == "text" and entry.get("text"):
            items.append(TextOutput(text=entry["text"]))
        elif kind == "reasoning":
            # Some providers fill content, others only the summary.
            text = _joined_text(entry.get("content")) or _joined_text(entry.get("summary"))
            if text:
                items.append(ReasoningOutput(text=text))

    usage = payload.get("usage") or {}
    return TurnOutput(
        response_id=payload.get("id"),
        items=items,
        usage=TokenUsage(
            input_tokens=usage.get("input_tokens") or 0,
            output_tokens=usage.get("output_tokens") or 0,
        ),
    )


class ResponsesAdapter:
    """ProviderAdapter for responses-style endpoints.

    The raw JSON body is read instead of the SDK's typed model, because
    OpenRouter emits output item shapes the SDK does not model.
    """

    def __init__(
        self,
        config: ProviderConfig,
        observer: ProviderObserver,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._config = config
        self._observer = observer
        self._client = client or AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            default_headers=config.headers or None,
            max_retries=0,
        )

    async def send(
        self,
        model: str,
        conversation: Conversation,
        tools: list[ToolSchema],
        sampling: SamplingParams,
        continuation_id: str | None = None,
    ) -> TurnOutput:
        """Send one round and return the canonical output.

        Raises:
            ProviderTransportError: once retries are exhausted, on a
                non-retryable failure, or on an error or malformed body.
        """
        body: dict[str, Any] = {
            "model": model,
            "input": encode_responses_input(conversation),
        }
        if tools:
            body["tools"] = encode_responses_tools(tools)
        if continuation_id:
            body["previous_response_id"] = continuation_id
        if sampling.temperature is not None:
            body["temperature"] = sampling.temperature
        if sampling.max_output_tokens is not None:
            body["max_output_tokens"] = sampling.max_output_tokens

        async def _post() -> httpx.Response:
            return await self._client.post("/responses", body=body, cast_to=httpx.Response)

        response = await call_with_retry(
            operation=_post,
            policy=self._config.retry,
            model=model,
            observer=self._observer,
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderTransportError(reason="response body is not JSON") from exc
        if not isinstance(payload, dict):
            raise ProviderTransportError(reason="response body is not a JSON object")
        return parse_responses_output(payload)
