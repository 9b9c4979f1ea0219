"""ChatCompletionsAdapter — classical chat-completions protocol via LiteLLM."""

from typing import Any

import litellm
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

type WireMessage = dict[str, Any]


def _tool_call_entry(item: ToolCallItem) -> WireMessage:
    return {
        "id": item.call_id,
        "type": "function",
        "function": {"name": item.name, "arguments": item.arguments_json},
    }


def encode_chat_messages(conversation: Conversation) -> list[WireMessage]:
    """Encode the full history as chat messages.

    An assistant message and the tool calls directly after it collapse into one
    assistant message carrying a ``tool_calls`` array. Results become ``tool``
    messages. Reasoning is not sent back.
    """
    messages: list[WireMessage] = []
    open_assistant: WireMessage | None = None

    for item in conversation:
        if isinstance(item, ToolCallItem):
            if open_assistant is None:
                open_assistant = {"role": "assistant", "content": None}
                messages.append(open_assistant)
            open_assistant.setdefault("tool_calls", []).append(_tool_call_entry(item))
            continue

        if isinstance(item, AssistantMessage):
            open_assistant = {"role": "assistant", "content": item.text or None}
            messages.append(open_assistant)
            continue

        open_assistant = None
        if isinstance(item, ToolResultItem):
            messages.append({"role": "tool", "tool_call_id": item.call_id, "content": item.output})
        else:
            messages.append({"role": item.kind, "content": item.text})

    return messages


def decode_chat_messages(messages: list[WireMessage]) -> Conversation:
    """Inverse of encode_chat_messages.

    Raises:
        ValueError: on an unknown role.
        ConversationOrderError: if the messages break call/result pairing.
    """
    items: list[ConversationItem] = []
    for message in messages:
        role = message.get("role")
        if role == "system":
            items.append(SystemMessage(text=message["content"]))
        elif role == "user":
            items.append(UserMessage(text=message["content"]))
        elif role == "assistant":
            if message.get("content"):
                items.append(AssistantMessage(text=message["content"]))
            for call in message.get("tool_calls") or []:
                items.append(
                    ToolCallItem(
                        call_id=call["id"],
                        name=call["function"]["name"],
                        arguments_json=arguments_json_text(call["function"].get("arguments")),
                    )
                )
        elif role == "tool":
            items.append(ToolResultItem(call_id=message["tool_call_id"], output=message["content"]))
        else:
            raise ValueError(f"unrecognised chat message role: {role!r}")
    return Conversation(items)


def encode_chat_tools(tools: list[ToolSchema]) -> list[WireMessage]:
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            },
        }
        for tool in tools
    ]


def parse_chat_completion(payload: dict[str, Any]) -> TurnOutput:
    """Map a chat completion body to a TurnOutput.

    Raises:
        ProviderTransportError: if the body has no choices or is malformed.
    """
    try:
        return _chat_turn_output(payload)
    except (ValidationError, AttributeError, TypeError) as exc:
        raise ProviderTransportError(reason=f"malformed chat completion: {exc}") from exc


def _chat_turn_output(payload: dict[str, Any]) -> TurnOutput:
    choices = payload.get("choices") or []
    if not choices:
        raise ProviderTransportError(reason="chat completion has no choices")
    message = choices[0].get("message") or {}

    items: list[OutputItem] = []
    if message.get("reasoning_content"):
        items.append(ReasoningOutput(text=message["reasoning_content"]))
    if message.get("content"):
        items.append(TextOutput(text=message["content"]))
    for call in message.get("tool_calls") or []:
        function = call.get("function") or {}
        items.append(
            ToolCallOutput(
                call_id=call.get("id") or new_call_id(),
                name=function.get("name") or "",
                arguments_json=arguments_json_text(function.get("arguments")),
            )
        )

    usage = payload.get("usage") or {}
    return TurnOutput(
        response_id=payload.get("id"),
        items=items,
        usage=TokenUsage(
            input_tokens=usage.get("prompt_tokens") or 0,
            output_tokens=usage.get("completion_tokens") or 0,
        ),
    )


class ChatCompletionsAdapter:
    """ProviderAdapter for OpenAI-compatible chat-completions endpoints.

    The protocol is stateless, so continuation_id is ignored and the whole
    conversation is resubmitted every round.
    """

    def __init__(self, config: ProviderConfig, observer: ProviderObserver) -> None:
        self._config = config
        self._observer = observer

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
                non-retryable failure, or on a missing or malformed body.
        """
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": encode_chat_messages(conversation),
            "api_base": self._config.base_url,
            "api_key": self._config.api_key,
            "custom_llm_provider": "openai",
        }
        if tools:
            kwargs["tools"] = encode_chat_tools(tools)
        if self._config.headers:
            kwargs["extra_headers"] = dict(self._config.headers)
        if sampling.temperature is not None:
            kwargs["temperature"] = sampling.temperature
        if sampling.max_output_tokens is not None:
            kwargs["max_tokens"] = sampling.max_output_tokens

        async def _complete() -> Any:
            return await litellm.acompletion(**kwargs)

        response = await call_with_retry(
            operation=_complete,
            policy=self._config.retry,
            model=model,
            observer=self._observer,
        )
        return parse_chat_completion(response.model_dump())
