"""ScoreResult — the auditable outcome of scoring one transcript."""

from pydantic import BaseModel, Field


class ScoreDetails(BaseModel, frozen=True):
    """What the engine compared, kept so a score can be checked by hand."""

    expected_keys: list[str]
    matched_keys: list[str]
    actual_evidence_type: str | None
    expected_evidence_type: str | None


class ScoreResult(BaseModel, frozen=True):
    """Per-dimension results plus the gated composite.

    total_score is 0 unless the answer is fully correct, a citation was
    created and the answer carries a citation marker; then it is 100, or 80
    on an evidence type mismatch. The marker is part of the gate rather than
    a 15-point partial: the weighted formula with an optional marker would
    also yield 85 and 65, yet a gated score must only ever be 0, 80 or 100.
    Requiring the marker keeps that set closed. ungated_score is the plain
    weighted sum of the four dimensions, for auditing.
    """

    answer_correct: float = Field(ge=0.0, le=1.0)
    citation_created: bool
    citation_in_text: bool
    evidence_type_match: bool | None  # None when the case expects no type
    total_score: int = Field(ge=0, le=100)
    ungated_score: int = Field(ge=0, le=100)
    details: ScoreDetails
