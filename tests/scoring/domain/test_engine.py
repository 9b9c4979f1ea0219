"""Tests for the gated scoring engine."""

import pytest

from tests.scoring.builders import cite_call, fetch_call, make_case, make_transcript
from verifaible_bench.scoring.domain.engine import (
    evidence_type_matches,
    expected_evidence_type,
    extract_key_values,
    key_found,
    score_session,
    search_text,
)
from verifaible_bench.session.domain.result import MAX_ROUNDS_ANSWER, SessionStatus


class TestWorkedScenarios:
    def test_correct_answer_without_citation_scores_zero(self) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript("The closing price was 90.9%."),
        )

        assert score.answer_correct == 1.0
        assert score.citation_created is False
        assert score.total_score == 0

    def test_correct_cited_matching_type_scores_100(self) -> None:
        score = score_session(
            case=make_case(answer="90.9", category="table"),
            transcript=make_transcript(
                "The closing price was 90.9 [@v:7].", calls=[fetch_call(), cite_call("table")]
            ),
        )

        assert score.answer_correct == 1.0
        assert score.citation_created is True
        assert score.citation_in_text is True
        assert score.evidence_type_match is True
        assert score.total_score == 100
        assert score.ungated_score == 100

    def test_type_mismatch_scores_80(self) -> None:
        score = score_session(
            case=make_case(answer="90.9", category="table"),
            transcript=make_transcript("90.9 [@v:7]", calls=[cite_call("text")]),
        )

        assert score.evidence_type_match is False
        assert score.total_score == 80
        assert score.details.actual_evidence_type == "text"
        assert score.details.expected_evidence_type == "table"

    def test_partial_list_answer_scores_zero(self) -> None:
        score = score_session(
            case=make_case(answer="apple、banana、cherry", category="text"),
            transcript=make_transcript(
                "apple and banana [@v:7]",
                calls=[cite_call("text", claim="fruits", quoted_text="apple, banana")],
            ),
        )

        assert score.answer_correct == pytest.approx(2 / 3)
        assert score.details.matched_keys == ["apple", "banana"]
        assert score.total_score == 0
        assert score.ungated_score == 87

    def test_max_rounds_placeholder_scores_zero(self) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript(
                MAX_ROUNDS_ANSWER, calls=[fetch_call()], status=SessionStatus.MAX_ROUNDS_EXCEEDED
            ),
        )

        assert score.answer_correct == 0.0
        assert score.total_score == 0


class TestGate:
    def test_missing_marker_scores_zero(self) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript("The price was 90.9.", calls=[cite_call("table")]),
        )

        assert score.citation_created is True
        assert score.citation_in_text is False
        assert score.total_score == 0
        assert score.ungated_score == 85

    def test_missing_marker_with_type_mismatch_scores_zero(self) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript("The price was 90.9.", calls=[cite_call("text")]),
        )

        assert score.ungated_score == 65
        assert score.total_score == 0

    def test_failed_cite_call_is_not_a_citation(self) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript(
                "90.9 [@v:7]",
                calls=[cite_call("table", result_text="Tool error: Failed to call /x: 500")],
            ),
        )

        assert score.citation_created is False
        assert score.total_score == 0

    def test_any_successful_cite_call_counts(self) -> None:
        failed = cite_call("table", result_text="Tool error: timed out")
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript("90.9 [@v:7]", calls=[failed, cite_call("table")]),
        )

        assert score.citation_created is True
        assert score.total_score == 100

    def test_unknown_expected_type_is_full_credit(self) -> None:
        score = score_session(
            case=make_case(answer="1204", category="dynamic"),
            transcript=make_transcript("1,204 users [@v:7]", calls=[cite_call("image")]),
        )

        assert score.evidence_type_match is None
        assert score.total_score == 100

    @pytest.mark.parametrize(
        "answer",
        ["90 [@v:7]", "no idea", "90.95 [@v:7]"],
    )
    def test_wrong_answer_always_zero(self, answer: str) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript(answer, calls=[cite_call("table", claim="x", quoted_text="y")]),
        )

        assert score.answer_correct < 1.0
        assert score.total_score == 0

    def test_scoring_is_idempotent(self) -> None:
        case = make_case(answer="90.9")
        transcript = make_transcript("90.9 [@v:7]", calls=[cite_call("table")])

        assert score_session(case=case, transcript=transcript) == score_session(
            case=case, transcript=transcript
        )

    def test_comma_joined_list_answer_scores_100(self) -> None:
        score = score_session(
            case=make_case(answer="2019、2020", category="text"),
            transcript=make_transcript(
                "The years are 2019,2020 [@v:7]",
                calls=[cite_call("text", claim="x", quoted_text="y")],
            ),
        )

        assert score.answer_correct == 1.0
        assert score.total_score == 100

    def test_result_without_record_values_is_not_a_citation(self) -> None:
        empty = cite_call(
            "table",
            result_text=(
                "Citation created (user_seq=None, evidence_id=None)."
                " Mark it in the answer with [@v:None]."
            ),
        )
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript("90.9 [@v:7]", calls=[empty]),
        )

        assert score.citation_created is False
        assert score.total_score == 0

    def test_evidence_id_alone_is_a_citation(self) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript(
                "90.9 [@v:7]",
                calls=[cite_call("table", result_text="Citation created (evidence_id=ev-9).")],
            ),
        )

        assert score.citation_created is True


class TestKeyExtraction:
    def test_list_items(self) -> None:
        assert extract_key_values("北京、 上海 、广州") == ["北京", "上海", "广州"]

    def test_numbers(self) -> None:
        assert extract_key_values("GDP grew 5.2%, CPI -0.7") == ["5.2", "-0.7"]

    def test_thousands_separator_kept_together(self) -> None:
        assert extract_key_values("140,489 people") == ["140489"]

    def test_text_answer(self) -> None:
        assert extract_key_values("  Tesla Inc. ") == ["Tesla Inc."]

    def test_empty_answer(self) -> None:
        assert extract_key_values("   ") == []


class TestKeyFound:
    @pytest.mark.parametrize(
        ("text", "found"),
        [
            ("The rate is 91%.", True),
            ("It ended at 91.", True),
            ("About 910 units", False),
            ("Ratio 0.91", False),
            ("Value 91.5", False),
        ],
    )
    def test_integer_boundaries(self, text: str, found: bool) -> None:
        assert key_found("91", text) is found

    def test_thousands_separators_in_text(self) -> None:
        assert key_found("140489", "population 140,489 in total")

    def test_negative_numbers(self) -> None:
        assert key_found("-0.7", "CPI fell − 0.7 percent")
        assert not key_found("-0.7", "CPI rose 0.7 percent")

    def test_text_keys_normalize_whitespace(self) -> None:
        assert key_found("Tesla  Inc.", "Maker:\nTesla Inc. (US)")

    def test_comma_joined_numbers_stay_separate(self) -> None:
        assert key_found("2019", "The years are 2019,2020")
        assert key_found("2020", "The years are 2019,2020")
        assert not key_found("20192020", "The years are 2019,2020")

    def test_separator_group_is_not_a_standalone_number(self) -> None:
        assert not key_found("204", "1,204 active users")


class TestSearchText:
    def test_includes_cite_claim_and_quote(self) -> None:
        transcript = make_transcript(
            "See citation [@v:7]", calls=[cite_call(claim="Close was 90.9", quoted_text="90.9 USD")]
        )

        assert search_text(transcript) == "See citation [@v:7]\nClose was 90.9\n90.9 USD"

    def test_value_only_in_citation_counts(self) -> None:
        score = score_session(
            case=make_case(answer="90.9"),
            transcript=make_transcript("Cited here [@v:7]", calls=[cite_call("table")]),
        )

        assert score.answer_correct == 1.0


class TestEvidenceType:
    def test_explicit_field_wins(self) -> None:
        assert expected_evidence_type(make_case(category="text", evidence_type="pdf")) == "pdf"

    def test_inferred_from_category(self) -> None:
        assert expected_evidence_type(make_case(category="video_bilibili")) == "video"
        assert expected_evidence_type(make_case(category="dynamic")) is None

    def test_pipe_separated_alternatives(self) -> None:
        assert evidence_type_matches(expected="table|text", actual="text") is True
        assert evidence_type_matches(expected="table|text", actual="pdf") is False

    def test_expected_type_without_cite_call_fails(self) -> None:
        assert evidence_type_matches(expected="table", actual=None) is False

    def test_default_actual_type_is_text(self) -> None:
        score = score_session(
            case=make_case(answer="90.9", category="text"),
            transcript=make_transcript("90.9 [@v:7]", calls=[cite_call(evidence_type=None)]),
        )

        assert score.details.actual_evidence_type == "text"
        assert score.total_score == 100
