"""Tests for the AgentSession orchestration loop."""

import pytest

from tests.session.fake_adapter import FakeProviderAdapter
from tests.session.fake_observer import FakeSessionObserver
from tests.session.fake_tools import ScriptedHandler, make_registry
from verifaible_bench.config.domain.session import SessionConfig
from verifaible_bench.provider.domain.conversation import ToolResultItem
from verifaible_bench.provider.domain.output import TextOutput, ToolCallOutput, TurnOutput
from verifaible_bench.provider.domain.usage import TokenUsage
from verifaible_bench.provider.infrastructure.errors import ProviderTransportError
from verifaible_bench.session.application.agent_session import AgentSession
from verifaible_bench.session.domain.result import MAX_ROUNDS_ANSWER, SessionStatus
from verifaible_bench.tools.domain.registry import ToolRegistry
from verifaible_bench.tools.infrastructure.errors import ToolServiceError


def _answer(text: str, usage: TokenUsage | None = None) -> TurnOutput:
    return TurnOutput(items=[TextOutput(text=text)], usage=usage or TokenUsage())


def _calls(
    *calls: tuple[str, str, str],
    text: str = "",
    response_id: str | None = None,
    usage: TokenUsage | None = None,
) -> TurnOutput:
    items: list[TextOutput | ToolCallOutput] = [TextOutput(text=text)] if text else []
    items += [
        ToolCallOutput(call_id=call_id, name=name, arguments_json=arguments)
        for call_id, name, arguments in calls
    ]
    return TurnOutput(response_id=response_id, items=items, usage=usage or TokenUsage())


def _session(
    adapter: FakeProviderAdapter,
    registry: ToolRegistry | None = None,
    observer: FakeSessionObserver | None = None,
    **config: object,
) -> AgentSession:
    return AgentSession(
        model="test-model",
        case_id="case-1",
        adapter=adapter,
        registry=registry or make_registry(web_fetch=ScriptedHandler("page a")),
        config=SessionConfig(system_prompt="You are a test agent.", **config),  # type: ignore[arg-type]
        observer=observer or FakeSessionObserver(),
    )


def _kinds(items: tuple[object, ...]) -> list[str]:
    return [item.kind for item in items]  # type: ignore[attr-defined]


class TestTextOnlyAnswer:
    """A response without tool calls ends the session."""

    async def test_completes_in_one_round(self) -> None:
        adapter = FakeProviderAdapter([_answer("The rate is 67% [@v:1].")])
        observer = FakeSessionObserver()

        result = await _session(adapter, observer=observer).run(prompt="What is the rate?")

        assert result.status is SessionStatus.COMPLETED
        assert result.answer == "The rate is 67% [@v:1]."
        assert result.round_trips == 1
        assert result.tool_call_count == 0
        assert result.error is None
        assert observer.completed[0].status == "completed"

    async def test_first_request_is_system_then_user(self) -> None:
        adapter = FakeProviderAdapter([_answer("done")])

        await _session(adapter, temperature=0.1).run(prompt="What is the rate?")

        sent = adapter.calls[0]
        assert _kinds(sent.items) == ["system", "user"]
        assert sent.items[0].text == "You are a test agent."  # type: ignore[union-attr]
        assert sent.items[1].text == "What is the rate?"  # type: ignore[union-attr]
        assert sent.tool_names == ["web_fetch"]
        assert sent.sampling.temperature == 0.1
        assert sent.continuation_id is None


class TestToolRound:
    """Tool calls are dispatched and their results sent back next round."""

    async def test_dispatches_and_continues(self) -> None:
        handler = ScriptedHandler("page a")
        adapter = FakeProviderAdapter(
            [
                _calls(
                    ("c1", "web_fetch", '{"url": "https://a"}'),
                    text="Fetching.",
                    response_id="resp_1",
                    usage=TokenUsage(input_tokens=10, output_tokens=5),
                ),
                _answer("Answer [@v:1]", usage=TokenUsage(input_tokens=20, output_tokens=3)),
            ]
        )

        result = await _session(adapter, registry=make_registry(web_fetch=handler)).run(prompt="q")

        assert handler.calls == [{"url": "https://a"}]
        assert result.status is SessionStatus.COMPLETED
        assert result.round_trips == 2
        assert result.tool_call_count == 1
        assert result.usage == TokenUsage(input_tokens=30, output_tokens=8)
        record = result.turns[0].tool_calls[0]
        assert record.result_text == "page a"
        assert record.arguments == {"url": "https://a"}
        assert record.is_error is False
        assert adapter.calls[1].continuation_id == "resp_1"
        assert _kinds(adapter.calls[1].items) == [
            "system",
            "user",
            "assistant",
            "tool_call",
            "tool_result",
        ]

    async def test_all_calls_precede_results(self) -> None:
        adapter = FakeProviderAdapter(
            [
                _calls(("c1", "web_fetch", '{"url": "a"}'), ("c2", "web_fetch", '{"url": "b"}')),
                _answer("done"),
            ]
        )

        await _session(adapter).run(prompt="q")

        assert _kinds(adapter.calls[1].items) == [
            "system",
            "user",
            "tool_call",
            "tool_call",
            "tool_result",
            "tool_result",
        ]

    async def test_duplicate_ids_in_a_round_are_replaced(self) -> None:
        handler = ScriptedHandler("page")
        adapter = FakeProviderAdapter(
            [
                _calls(("dup", "web_fetch", '{"url": "a"}'), ("dup", "web_fetch", '{"url": "b"}')),
                _answer("done"),
            ]
        )

        result = await _session(adapter, registry=make_registry(web_fetch=handler)).run(prompt="q")

        ids = [record.call_id for record in result.tool_calls()]
        assert ids[0] == "dup"
        assert ids[1] != "dup"
        assert len(handler.calls) == 2


class TestToolFailures:
    """Tool problems become tool results; the session keeps going."""

    async def test_unknown_tool(self) -> None:
        observer = FakeSessionObserver()
        adapter = FakeProviderAdapter(
            [_calls(("c1", "delete_everything", "{}")), _answer("sorry")]
        )

        result = await _session(adapter, observer=observer).run(prompt="q")

        record = next(result.tool_calls())
        assert record.result_text == "Unknown tool: delete_everything"
        assert record.is_error is True
        assert observer.tool_calls_failed[0].tool == "delete_everything"
        assert result.status is SessionStatus.COMPLETED

    async def test_invalid_arguments_json(self) -> None:
        handler = ScriptedHandler()
        adapter = FakeProviderAdapter([_calls(("c1", "web_fetch", "{not json")), _answer("x")])

        result = await _session(adapter, registry=make_registry(web_fetch=handler)).run(prompt="q")

        record = next(result.tool_calls())
        assert record.result_text.startswith("Tool error: invalid arguments JSON:")
        assert record.arguments == {}
        assert handler.calls == []

    async def test_non_object_arguments(self) -> None:
        adapter = FakeProviderAdapter([_calls(("c1", "web_fetch", "[1, 2]")), _answer("x")])

        result = await _session(adapter).run(prompt="q")

        assert next(result.tool_calls()).result_text == (
            "Tool error: invalid arguments JSON: expected a JSON object"
        )

    async def test_handler_exception(self) -> None:
        handler = ScriptedHandler(error=ToolServiceError(service="/agent/web/fetch", reason="boom"))
        adapter = FakeProviderAdapter([_calls(("c1", "web_fetch", "{}")), _answer("x")])

        result = await _session(adapter, registry=make_registry(web_fetch=handler)).run(prompt="q")

        record = next(result.tool_calls())
        assert record.result_text == "Tool error: Failed to call /agent/web/fetch: boom"
        assert record.is_error is True
        results = [i for i in adapter.calls[1].items if isinstance(i, ToolResultItem)]
        assert results[0].output == record.result_text

    async def test_exception_without_message_uses_type_name(self) -> None:
        handler = ScriptedHandler(error=RuntimeError())
        adapter = FakeProviderAdapter([_calls(("c1", "web_fetch", "{}")), _answer("x")])

        result = await _session(adapter, registry=make_registry(web_fetch=handler)).run(prompt="q")

        assert next(result.tool_calls()).result_text == "Tool error: RuntimeError"

    async def test_long_error_message_is_capped(self) -> None:
        handler = ScriptedHandler(error=RuntimeError("e" * 1000))
        adapter = FakeProviderAdapter([_calls(("c1", "web_fetch", "{}")), _answer("x")])

        result = await _session(adapter, registry=make_registry(web_fetch=handler)).run(prompt="q")

        assert len(next(result.tool_calls()).result_text) == 503


class TestTruncation:
    async def test_long_result_truncated_with_marker(self) -> None:
        handler = ScriptedHandler("x" * 500)
        adapter = FakeProviderAdapter([_calls(("c1", "web_fetch", "{}")), _answer("x")])

        result = await _session(
            adapter, registry=make_registry(web_fetch=handler), tool_result_max_chars=100
        ).run(prompt="q")

        expected = "x" * 100 + "...[truncated]"
        assert next(result.tool_calls()).result_text == expected
        results = [i for i in adapter.calls[1].items if isinstance(i, ToolResultItem)]
        assert results[0].output == expected


class TestFallbackRecovery:
    async def test_text_embedded_call_is_dispatched(self) -> None:
        handler = ScriptedHandler("page a")
        observer = FakeSessionObserver()
        adapter = FakeProviderAdapter(
            [
                _answer(
                    'Let me fetch.<tool_call>{"name": "web_fetch", '
                    '"arguments": {"url": "https://a"}}</tool_call>'
                ),
                _answer("Answer [@v:1]"),
            ]
        )

        result = await _session(
            adapter, registry=make_registry(web_fetch=handler), observer=observer
        ).run(prompt="q")

        assert handler.calls == [{"url": "https://a"}]
        assert observer.recovered == [1]
        assert result.turns[0].text == "Let me fetch."
        assert result.turns[0].tool_calls[0].recovered is True
        assert result.answer == "Answer [@v:1]"

    async def test_unrecoverable_markup_is_a_final_answer(self) -> None:
        adapter = FakeProviderAdapter([_answer('Answer 67 <tool_call>{"name": oops')])

        result = await _session(adapter).run(prompt="q")

        assert result.status is SessionStatus.COMPLETED
        assert result.answer == 'Answer 67 {"name": oops'


class TestTerminalStatuses:
    async def test_max_rounds_exceeded(self) -> None:
        observer = FakeSessionObserver()
        adapter = FakeProviderAdapter(
            [], default=_calls(("c1", "web_fetch", '{"url": "a"}'))
        )

        result = await _session(adapter, observer=observer, max_rounds=3).run(prompt="q")

        assert result.status is SessionStatus.MAX_ROUNDS_EXCEEDED
        assert result.answer == MAX_ROUNDS_ANSWER
        assert result.round_trips == 3
        assert result.tool_call_count == 3
        assert len(adapter.calls) == 3
        assert observer.rounds == [0, 1, 2]
        assert observer.completed[0].status == "max_rounds_exceeded"

    async def test_provider_failure_fails_session(self) -> None:
        observer = FakeSessionObserver()
        adapter = FakeProviderAdapter(
            [
                _calls(("c1", "web_fetch", "{}")),
                ProviderTransportError(reason="giving up after 5 attempts", retriable=True),
            ]
        )

        result = await _session(adapter, observer=observer).run(prompt="q")

        assert result.status is SessionStatus.FAILED
        assert result.answer == ""
        assert result.error == "Failed to call provider: giving up after 5 attempts"
        assert result.round_trips == 2
        assert len(result.turns) == 1
        assert observer.failed == [result.error]
        assert observer.completed == []

    async def test_unexpected_adapter_errors_propagate(self) -> None:
        adapter = FakeProviderAdapter([KeyError("bug")])

        with pytest.raises(KeyError):
            await _session(adapter).run(prompt="q")
