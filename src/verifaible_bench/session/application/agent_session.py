"""AgentSession — the bounded, tool-augmented conversation loop."""

import json
import time

from verifaible_bench.config.domain.session import SessionConfig
from verifaible_bench.core.text import truncate
from verifaible_bench.provider.domain.adapter import ProviderAdapter
from verifaible_bench.provider.domain.conversation import (
    AssistantMessage,
    Conversation,
    SystemMessage,
    ToolCallItem,
    ToolResultItem,
    UserMessage,
)
from verifaible_bench.provider.domain.output import ToolCallOutput, new_call_id
from verifaible_bench.provider.domain.sampling import SamplingParams
from verifaible_bench.provider.domain.usage import TokenUsage
from verifaible_bench.provider.infrastructure.errors import ProviderTransportError
from verifaible_bench.session.domain.fallback import extract_tool_calls
from verifaible_bench.session.domain.observer import SessionObserver
from verifaible_bench.session.domain.result import (
    MAX_ROUNDS_ANSWER,
    SessionResult,
    SessionStatus,
)
from verifaible_bench.session.domain.turn import TOOL_ERROR_PREFIX, ToolCallRecord, Turn
from verifaible_bench.tools.domain.registry import ToolRegistry

TRUNCATION_MARKER = "...[truncated]"
_TOOL_ERROR_MAX_CHARS = 500


class AgentSession:
    """Runs one model against one prompt until it answers, fails, or runs out of rounds.

    One instance is constructed per (model, case) run and owns its
    conversation, turn log, and counters. Tool calls are dispatched one at a
    time in emission order; the next provider call starts only after every
    result of the current round is appended.
    """

    def __init__(
        self,
        model: str,
        case_id: str,
        adapter: ProviderAdapter,
        registry: ToolRegistry,
        config: SessionConfig,
        observer: SessionObserver,
    ) -> None:
        self._model = model
        self._case_id = case_id
        self._adapter = adapter
        self._registry = registry
        self._config = config
        self._observer = observer

    async def run(self, prompt: str) -> SessionResult:
        """Drive the conversation to a terminal status.

        Provider failures end the session as FAILED; tool failures become
        tool results and the loop carries on.
        """
        self._observer.session_started(model=self._model, case_id=self._case_id)
        start = time.monotonic()

        conversation = Conversation(
            [SystemMessage(text=self._config.system_prompt), UserMessage(text=prompt)]
        )
        tools = self._registry.schemas()
        sampling = SamplingParams(temperature=self._config.temperature)
        turns: list[Turn] = []
        usage = TokenUsage()
        continuation_id: str | None = None

        for round_index in range(self._config.max_rounds):
            self._observer.session_round_started(
                model=self._model, case_id=self._case_id, round_index=round_index
            )
            try:
                output = await self._adapter.send(
                    model=self._model,
                    conversation=conversation,
                    tools=tools,
                    sampling=sampling,
                    continuation_id=continuation_id,
                )
            except ProviderTransportError as exc:
                self._observer.session_failed(
                    model=self._model, case_id=self._case_id, reason=str(exc)
                )
                return self._finish(
                    status=SessionStatus.FAILED,
                    answer="",
                    turns=turns,
                    usage=usage,
                    round_trips=round_index + 1,
                    start=start,
                    error=str(exc),
                )

            usage = usage + output.usage
            continuation_id = output.response_id

            text = output.text
            calls = output.tool_calls
            recovered = False
            if not calls:
                extraction = extract_tool_calls(text)
                text = extraction.visible_text
                calls = extraction.calls
                recovered = bool(calls)
                if recovered:
                    self._observer.session_tool_calls_recovered(
                        model=self._model, case_id=self._case_id, count=len(calls)
                    )

            if not calls:
                conversation.append(AssistantMessage(text=text, reasoning=output.reasoning))
                turns.append(
                    Turn(
                        index=round_index,
                        text=text,
                        reasoning=output.reasoning,
                        usage=output.usage,
                    )
                )
                return self._finish(
                    status=SessionStatus.COMPLETED,
                    answer=text,
                    turns=turns,
                    usage=usage,
                    round_trips=round_index + 1,
                    start=start,
                )

            if text:
                conversation.append(AssistantMessage(text=text, reasoning=output.reasoning))
            calls = _with_unique_ids(calls)
            conversation.extend(
                ToolCallItem(call_id=call.call_id, name=call.name, arguments_json=call.arguments_json)
                for call in calls
            )

            records: list[ToolCallRecord] = []
            for call in calls:
                record = await self._dispatch(call=call, recovered=recovered)
                conversation.append(ToolResultItem(call_id=call.call_id, output=record.result_text))
                records.append(record)

            turns.append(
                Turn(
                    index=round_index,
                    text=text,
                    reasoning=output.reasoning,
                    tool_calls=records,
                    usage=output.usage,
                )
            )

        return self._finish(
            status=SessionStatus.MAX_ROUNDS_EXCEEDED,
            answer=MAX_ROUNDS_ANSWER,
            turns=turns,
            usage=usage,
            round_trips=self._config.max_rounds,
            start=start,
        )

    async def _dispatch(self, call: ToolCallOutput, recovered: bool) -> ToolCallRecord:
        """Execute one tool call. Every failure becomes the result text."""
        start = time.monotonic()
        arguments, parse_error = _parse_arguments(call.arguments_json)
        is_error = True

        handler = self._registry.handler(call.name)
        if handler is None:
            result = f"Unknown tool: {call.name}"
        elif parse_error is not None:
            result = f"{TOOL_ERROR_PREFIX} invalid arguments JSON: {parse_error}"
        else:
            try:
                result = await handler(arguments)
                is_error = False
            except Exception as exc:
                result = truncate(
                    f"{TOOL_ERROR_PREFIX} {str(exc) or type(exc).__name__}",
                    _TOOL_ERROR_MAX_CHARS,
                )

        duration_ms = int((time.monotonic() - start) * 1000)
        if is_error:
            self._observer.session_tool_call_failed(
                model=self._model, case_id=self._case_id, tool=call.name, reason=result
            )
        else:
            self._observer.session_tool_call_completed(
                model=self._model, case_id=self._case_id, tool=call.name, duration_ms=duration_ms
            )

        return ToolCallRecord(
            call_id=call.call_id,
            name=call.name,
            arguments=arguments,
            arguments_json=call.arguments_json,
            result_text=truncate(result, self._config.tool_result_max_chars, TRUNCATION_MARKER),
            duration_ms=duration_ms,
            is_error=is_error,
            recovered=recovered,
        )

    def _finish(
        self,
        status: SessionStatus,
        answer: str,
        turns: list[Turn],
        usage: TokenUsage,
        round_trips: int,
        start: float,
        error: str | None = None,
    ) -> SessionResult:
        result = SessionResult(
            model=self._model,
            case_id=self._case_id,
            status=status,
            answer=answer,
            turns=turns,
            usage=usage,
            round_trips=round_trips,
            tool_call_count=sum(len(turn.tool_calls) for turn in turns),
            duration_ms=int((time.monotonic() - start) * 1000),
            error=error,
        )
        if status is not SessionStatus.FAILED:
            self._observer.session_completed(
                model=self._model,
                case_id=self._case_id,
                status=status.value,
                round_trips=result.round_trips,
                tool_call_count=result.tool_call_count,
                duration_ms=result.duration_ms,
            )
        return result


def _with_unique_ids(calls: list[ToolCallOutput]) -> list[ToolCallOutput]:
    """Replace call ids repeated within one round with generated ones."""
    seen: set[str] = set()
    unique: list[ToolCallOutput] = []
    for call in calls:
        if call.call_id in seen:
            call = call.model_copy(update={"call_id": new_call_id()})
        seen.add(call.call_id)
        unique.append(call)
    return unique


def _parse_arguments(arguments_json: str) -> tuple[dict[str, object], str | None]:
    """Decode call arguments; returns ({}, reason) unless they are a JSON object."""
    try:
        parsed = json.loads(arguments_json or "{}")
    except ValueError as exc:
        return {}, str(exc)
    if not isinstance(parsed, dict):
        return {}, "expected a JSON object"
    return parsed, None
