"""Scoring engine — deterministic, gated grading of a session transcript.

Four dimensions are weighted 40/25/15/20: answer correctness, citation
created, citation marker in the answer, evidence type. The composite is
all-or-nothing on the first three, so a partly right answer scores 0.
"""

import re

from verifaible_bench.dataset.domain.case import TestCase
from verifaible_bench.scoring.domain.score import ScoreDetails, ScoreResult
from verifaible_bench.session.domain.result import SessionResult
from verifaible_bench.session.domain.turn import TOOL_ERROR_PREFIX, ToolCallRecord
from verifaible_bench.tools.domain import names

ANSWER_WEIGHT = 40
CITATION_CREATED_WEIGHT = 25
CITATION_IN_TEXT_WEIGHT = 15
EVIDENCE_TYPE_WEIGHT = 20

LIST_SEPARATOR = "、"
DEFAULT_EVIDENCE_TYPE = "text"

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")
_WHITESPACE = re.compile(r"\s+")
_CITATION_MARKER = re.compile(r"\[@v:\d+\]")
_RECORD_ID = re.compile(r"user_seq=\d+|evidence_id=(?!None\b)[^\s,)]+|\[@v:\d+\]")


def extract_key_values(expected_answer: str) -> list[str]:
    """Split an expected answer into the values that must all be found.

    A list answer yields its items, otherwise every numeric token (thousands
    separators dropped, so "1,204" is one key), otherwise the whole trimmed
    string.
    """
    if LIST_SEPARATOR in expected_answer:
        return [item.strip() for item in expected_answer.split(LIST_SEPARATOR) if item.strip()]

    numbers = _NUMBER.findall(_THOUSANDS_SEPARATOR.sub("", expected_answer))
    if numbers:
        return numbers

    stripped = expected_answer.strip()
    return [stripped] if stripped else []


def _normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def key_found(key: str, text: str) -> bool:
    """Whether key occurs in text.

    Text keys are whitespace-normalized substrings. Numeric keys must stand
    alone once thousands separators are removed: "91" matches "91%" and
    "91." but not "910" or "0.91".
    """
    normalized = _normalize_whitespace(text)
    if not _NUMBER.fullmatch(key):
        return _normalize_whitespace(key) in normalized

    digits = re.escape(key.removeprefix("-"))
    if key.startswith("-"):
        pattern = rf"[-−]\s*{digits}(?!\d|\.\d)"
    else:
        pattern = rf"(?<![\d.]){digits}(?!\d|\.\d)"
    return re.search(pattern, _THOUSANDS_SEPARATOR.sub("", normalized)) is not None


def cite_calls(transcript: SessionResult) -> list[ToolCallRecord]:
    return [call for call in transcript.tool_calls() if call.name == names.CITE]


def search_text(transcript: SessionResult) -> str:
    """The final answer plus the claim and quote of every citation call."""
    parts = [transcript.answer]
    for call in cite_calls(transcript):
        for field in ("claim", "quoted_text"):
            value = call.arguments.get(field)
            if value:
                parts.append(str(value))
    return "\n".join(parts)


def citation_created(transcript: SessionResult) -> bool:
    """True if any citation call returned a record identifier without error."""
    return any(
        not call.result_text.startswith(TOOL_ERROR_PREFIX)
        and _RECORD_ID.search(call.result_text) is not None
        for call in cite_calls(transcript)
    )


def expected_evidence_type(case: TestCase) -> str | None:
    if case.evidence_type:
        return case.evidence_type
    if case.category in ("text", "table"):
        return case.category
    if case.category.startswith("video"):
        return "video"
    return None


def actual_evidence_type(transcript: SessionResult) -> str | None:
    """evidence_type of the last citation call, or None without any."""
    calls = cite_calls(transcript)
    if not calls:
        return None
    value = calls[-1].arguments.get("evidence_type")
    return str(value) if value else DEFAULT_EVIDENCE_TYPE


def evidence_type_matches(expected: str | None, actual: str | None) -> bool | None:
    """None when nothing is expected; expected may list alternatives with "|"."""
    if expected is None:
        return None
    if actual is None:
        return False
    return actual in {option.strip() for option in expected.split("|")}


def score_session(case: TestCase, transcript: SessionResult) -> ScoreResult:
    """Grade a transcript against its case. Pure: same inputs, same result."""
    expected_keys = extract_key_values(case.answer)
    haystack = search_text(transcript)
    matched_keys = [key for key in expected_keys if key_found(key, haystack)]
    answer_correct = len(matched_keys) / len(expected_keys) if expected_keys else 0.0

    created = citation_created(transcript)
    in_text = _CITATION_MARKER.search(transcript.answer) is not None

    expected_type = expected_evidence_type(case)
    actual_type = actual_evidence_type(transcript)
    type_match = evidence_type_matches(expected=expected_type, actual=actual_type)
    type_points = EVIDENCE_TYPE_WEIGHT if type_match is not False else 0

    ungated = (
        answer_correct * ANSWER_WEIGHT
        + (CITATION_CREATED_WEIGHT if created else 0)
        + (CITATION_IN_TEXT_WEIGHT if in_text else 0)
        + type_points
    )
    passed_gate = answer_correct == 1.0 and created and in_text
    total = (
        ANSWER_WEIGHT + CITATION_CREATED_WEIGHT + CITATION_IN_TEXT_WEIGHT + type_points
        if passed_gate
        else 0
    )

    return ScoreResult(
        answer_correct=answer_correct,
        citation_created=created,
        citation_in_text=in_text,
        evidence_type_match=type_match,
        total_score=round(total),
        ungated_score=round(ungated),
        details=ScoreDetails(
            expected_keys=expected_keys,
            matched_keys=matched_keys,
            actual_evidence_type=actual_type,
            expected_evidence_type=expected_type,
        ),
    )
