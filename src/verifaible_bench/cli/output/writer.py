"""Result files — the summary JSON and the per-run JSONL record stream."""

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from verifaible_bench.cli.output.aggregator import ModelAggregate
from verifaible_bench.cli.output.errors import RunsFileError
from verifaible_bench.evaluation.domain.run import BenchmarkRun
from verifaible_bench.evaluation.domain.summary import RunSummary


def output_stem(config_name: str, run_id: str, now: datetime | None = None) -> str:
    """Build the output file stem: {config_name}_{YYYYMMDD-HHMMSS}_{short_run_id}."""
    timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return f"{config_name}_{timestamp}_{run_id[:8]}"


def build_summary_json(
    summary: RunSummary, aggregates: list[ModelAggregate], runs_file: str
) -> dict[str, Any]:
    return {
        "run_id": summary.run_id,
        "config_name": summary.config_name,
        "dataset_sha256": summary.dataset_sha256,
        "total_runs": len(summary.runs),
        "failed_runs": sum(1 for run in summary.runs if run.failed),
        "models": [asdict(item) for item in aggregates],
        "runs_file": runs_file,
    }


def write_outputs(
    output_dir: Path,
    stem: str,
    summary: RunSummary,
    aggregates: list[ModelAggregate],
) -> tuple[Path, Path]:
    """Write <stem>.json and <stem>.runs.jsonl. Returns (json_path, jsonl_path)."""
    json_path = output_dir / f"{stem}.json"
    jsonl_path = output_dir / f"{stem}.runs.jsonl"

    json_path.write_text(
        json.dumps(
            build_summary_json(summary=summary, aggregates=aggregates, runs_file=jsonl_path.name),
            indent=2,
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    jsonl_path.write_text(
        "".join(run.model_dump_json() + "\n" for run in summary.runs),
        encoding="utf-8",
    )
    return json_path, jsonl_path


def read_runs(path: Path) -> list[BenchmarkRun]:
    """Read every record of a runs JSONL file.

    Raises:
        RunsFileError: if the file is missing or any line is not a valid record;
            all bad line numbers are reported together.
    """
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError as exc:
        raise RunsFileError(path=path, reason="file not found") from exc

    runs: list[BenchmarkRun] = []
    bad_lines: list[str] = []
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            runs.append(BenchmarkRun.model_validate_json(line))
        except ValidationError as exc:
            bad_lines.append(f"line {line_no}: {exc.error_count()} error(s)")

    if bad_lines:
        raise RunsFileError(path=path, reason="; ".join(bad_lines))
    return runs
