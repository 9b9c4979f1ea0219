"""Aggregator — per-model statistics over the scored runs of a benchmark."""

import statistics
from dataclasses import dataclass

from verifaible_bench.evaluation.domain.run import BenchmarkRun


@dataclass(frozen=True)
class ModelAggregate:
    """Statistics for one model. Failed runs are counted but excluded from the means."""

    model: str
    total_runs: int
    failed_runs: int
    scored_runs: int
    mean_total_score: float
    mean_answer_correct: float
    citation_created_rate: float
    citation_in_text_rate: float
    perfect_runs: int
    mean_tokens: float
    mean_duration_ms: float


def _mean(values: list[float]) -> float:
    return statistics.mean(values) if values else 0.0


def aggregate(runs: list[BenchmarkRun]) -> list[ModelAggregate]:
    """Group runs by model, preserving first-occurrence order."""
    groups: dict[str, list[BenchmarkRun]] = {}
    for run in runs:
        groups.setdefault(run.model, []).append(run)

    results: list[ModelAggregate] = []
    for model, group in groups.items():
        scored = [run for run in group if not run.failed and run.score is not None]
        scores = [run.score for run in scored if run.score is not None]
        results.append(
            ModelAggregate(
                model=model,
                total_runs=len(group),
                failed_runs=len(group) - len(scored),
                scored_runs=len(scored),
                mean_total_score=_mean([float(s.total_score) for s in scores]),
                mean_answer_correct=_mean([s.answer_correct for s in scores]),
                citation_created_rate=_mean([float(s.citation_created) for s in scores]),
                citation_in_text_rate=_mean([float(s.citation_in_text) for s in scores]),
                perfect_runs=sum(1 for s in scores if s.total_score == 100),
                mean_tokens=_mean([float(r.transcript.usage.total_tokens) for r in scored]),
                mean_duration_ms=_mean([float(r.transcript.duration_ms) for r in scored]),
            )
        )
    return results
