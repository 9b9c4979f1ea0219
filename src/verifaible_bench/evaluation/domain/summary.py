"""RunSummary — the aggregate result of a completed benchmark run."""

from pydantic import BaseModel, Field

from verifaible_bench.evaluation.domain.run import BenchmarkRun


class RunSummary(BaseModel, frozen=True):
    """Immutable summary returned when a benchmark run completes.

    Captures the run identity, the test set hash used, the config name, and
    every BenchmarkRun sorted by (model, case id).
    """

    run_id: str = Field(min_length=1)
    dataset_sha256: str = Field(min_length=1)
    config_name: str = Field(min_length=1)
    runs: list[BenchmarkRun]
