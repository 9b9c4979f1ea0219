"""Fallback tool-call extractor — recovers tool calls that a model wrote as text.

Some backends do not return structured calls and instead print their
native call markup into the answer. This module only looks at text that
carries one of those sentinels; everything else passes through untouched.
It never raises.
"""

import json
import re

from pydantic import BaseModel, Field

from verifaible_bench.provider.domain.output import ToolCallOutput, new_call_id

DOUBAO_SENTINELS = ("<|FunctionCallBegin|>", "<|FunctionCallEnd|>")
KIMI_SENTINELS = (
    "<|tool_calls_section_begin|>",
    "<|tool_calls_section_end|>",
    "<|tool_call_begin|>",
    "<|tool_call_argument_begin|>",
    "<|tool_call_end|>",
)
DEEPSEEK_SENTINELS = (
    "<｜tool▁calls▁begin｜>",
    "<｜tool▁calls▁end｜>",
    "<｜tool▁call▁begin｜>",
    "<｜tool▁sep｜>",
    "<｜tool▁call▁end｜>",
)
HERMES_SENTINELS = ("<tool_call>", "</tool_call>")

# Longest first so that no sentinel is stripped as part of a longer one.
SENTINELS = tuple(
    sorted(
        DOUBAO_SENTINELS + KIMI_SENTINELS + DEEPSEEK_SENTINELS + HERMES_SENTINELS,
        key=len,
        reverse=True,
    )
)

_FENCED_BLOCK = re.compile(r"```[\w-]*[ \t]*\n?(.*?)```", re.DOTALL)

# Kimi: <|tool_call_begin|>functions.web_fetch:0<|tool_call_argument_begin|>{...}<|tool_call_end|>
_KIMI_CALL = re.compile(
    r"<\|tool_call_begin\|>\s*(?P<name>[^<\s]+?)\s*"
    r"<\|tool_call_argument_begin\|>(?P<body>.*?)<\|tool_call_end\|>",
    re.DOTALL,
)
# DeepSeek: <｜tool▁call▁begin｜>function<｜tool▁sep｜>web_fetch\n```json\n{...}\n```<｜tool▁call▁end｜>
_DEEPSEEK_CALL = re.compile(
    r"<｜tool▁call▁begin｜>\s*\w*\s*<｜tool▁sep｜>\s*(?P<name>[^\s<`]+)"
    r"(?P<body>.*?)<｜tool▁call▁end｜>",
    re.DOTALL,
)
_KIMI_NAME = re.compile(r"^(?:functions\.)?(?P<name>.+?)(?::\d+)?$")


class ExtractionResult(BaseModel, frozen=True):
    calls: list[ToolCallOutput] = Field(default_factory=list)
    visible_text: str


def extract_tool_calls(text: str) -> ExtractionResult:
    """Recover tool calls written as text by a model.

    Fenced code blocks are tried first, then the last balanced JSON value
    before each sentinel (latest sentinel first), then the per-call markup
    of backends that put the tool name outside the JSON. On success the
    consumed span and every sentinel are removed from the visible text.
    """
    if not any(sentinel in text for sentinel in SENTINELS):
        return ExtractionResult(visible_text=text)

    for match in _FENCED_BLOCK.finditer(text):
        calls = _parse_calls(match.group(1))
        if calls:
            return _success(calls=calls, text=text, spans=[match.span()])

    for anchor in _anchor_positions(text):
        span = _balanced_span_before(text=text, end=anchor)
        if span is None:
            continue
        calls = _parse_calls(text[span[0] : span[1]])
        if calls:
            return _success(calls=calls, text=text, spans=[span])

    calls, spans = _parse_named_sections(text)
    if calls:
        return _success(calls=calls, text=text, spans=spans)

    return ExtractionResult(visible_text=strip_sentinels(text))


def strip_sentinels(text: str) -> str:
    for sentinel in SENTINELS:
        text = text.replace(sentinel, "")
    return text.strip()


def _success(
    calls: list[ToolCallOutput], text: str, spans: list[tuple[int, int]]
) -> ExtractionResult:
    for start, end in sorted(spans, reverse=True):
        text = text[:start] + text[end:]
    return ExtractionResult(calls=calls, visible_text=strip_sentinels(text))


def _anchor_positions(text: str) -> list[int]:
    """Sentinel start offsets plus end of text, latest first."""
    positions = {len(text)}
    for sentinel in SENTINELS:
        start = text.find(sentinel)
        while start != -1:
            positions.add(start)
            start = text.find(sentinel, start + 1)
    return sorted(positions, reverse=True)


def _is_escaped(text: str, index: int) -> bool:
    backslashes = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        backslashes += 1
        index -= 1
    return backslashes % 2 == 1


def _string_start(text: str, closing_quote: int) -> int:
    index = closing_quote - 1
    while index >= 0:
        if text[index] == '"' and not _is_escaped(text, index):
            return index
        index -= 1
    return -1


def _balanced_span_before(text: str, end: int) -> tuple[int, int] | None:
    """Find the last balanced {...} or [...] that closes before end.

    Walks backward from the closing bracket, tracking depth and jumping
    over string literals so brackets inside strings do not count.
    """
    close = max(text.rfind("}", 0, end), text.rfind("]", 0, end))
    if close == -1:
        return None

    depth = 0
    index = close
    while index >= 0:
        char = text[index]
        if char == '"' and not _is_escaped(text, index):
            index = _string_start(text, index)
            if index == -1:
                return None
        elif char in "}]":
            depth += 1
        elif char in "{[":
            depth -= 1
            if depth == 0:
                return index, close + 1
        index -= 1
    return None


def _parse_calls(candidate: str) -> list[ToolCallOutput]:
    """Parse a JSON object or array of {name, arguments|parameters} entries.

    Returns an empty list unless every entry is a well-formed call.
    """
    try:
        data = json.loads(candidate.strip())
    except ValueError:
        return []

    entries = data if isinstance(data, list) else [data]
    calls: list[ToolCallOutput] = []
    for entry in entries:
        if not isinstance(entry, dict):
            return []
        name = entry.get("name")
        arguments = entry.get("arguments", entry.get("parameters"))
        if not isinstance(name, str) or not name or arguments is None:
            return []
        calls.append(
            ToolCallOutput(
                call_id=new_call_id(),
                name=name,
                arguments_json=(
                    arguments
                    if isinstance(arguments, str)
                    else json.dumps(arguments, ensure_ascii=False)
                ),
            )
        )
    return calls


def _unfence(body: str) -> str:
    body = body.strip()
    match = _FENCED_BLOCK.fullmatch(body)
    return match.group(1).strip() if match else body


def _parse_named_sections(text: str) -> tuple[list[ToolCallOutput], list[tuple[int, int]]]:
    calls: list[ToolCallOutput] = []
    spans: list[tuple[int, int]] = []
    matches = sorted(
        [*_KIMI_CALL.finditer(text), *_DEEPSEEK_CALL.finditer(text)],
        key=lambda match: match.start(),
    )
    for match in matches:
        body = _unfence(match.group("body"))
        try:
            json.loads(body)
        except ValueError:
            continue
        name_match = _KIMI_NAME.match(match.group("name"))
        name = name_match.group("name") if name_match else match.group("name")
        calls.append(ToolCallOutput(call_id=new_call_id(), name=name, arguments_json=body))
        spans.append(match.span())
    return calls, spans
