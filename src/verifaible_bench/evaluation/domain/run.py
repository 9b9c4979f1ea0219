"""BenchmarkRun — the result of one (model, case) run."""

from pydantic import BaseModel

from verifaible_bench.dataset.domain.case import TestCase
from verifaible_bench.scoring.domain.score import ScoreResult
from verifaible_bench.session.domain.result import SessionResult, SessionStatus

type RunId = str


class BenchmarkRun(BaseModel, frozen=True):
    """Immutable record of one run: session transcript plus its score.

    score is None exactly when the session failed; failed runs are reported
    but never scored.
    """

    run_id: RunId
    model: str
    case: TestCase
    transcript: SessionResult
    score: ScoreResult | None

    @property
    def failed(self) -> bool:
        return self.transcript.status is SessionStatus.FAILED
