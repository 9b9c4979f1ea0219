"""CLI entrypoint for verifaible-bench — typer app with `run` and `rescore` commands."""

import asyncio
import logging
import sys
import time
from pathlib import Path

import httpx
import structlog
import typer

from verifaible_bench.cli.output.aggregator import ModelAggregate, aggregate
from verifaible_bench.cli.output.writer import output_stem, read_runs, write_outputs
from verifaible_bench.config.domain.config import BenchConfig
from verifaible_bench.config.domain.dataset import DatasetConfig
from verifaible_bench.config.infrastructure.observer import StructlogConfigObserver
from verifaible_bench.config.infrastructure.yaml_loader import YamlConfigLoader
from verifaible_bench.core.errors import BenchError
from verifaible_bench.dataset.infrastructure.observer import StructlogDatasetObserver
from verifaible_bench.dataset.infrastructure.testset_loader import JsonTestSetLoader
from verifaible_bench.evaluation.application.rescore import rescore_runs
from verifaible_bench.evaluation.application.runner import BenchmarkRunner
from verifaible_bench.evaluation.domain.observer import BenchmarkObserver
from verifaible_bench.evaluation.domain.run import BenchmarkRun
from verifaible_bench.evaluation.domain.summary import RunSummary
from verifaible_bench.evaluation.infrastructure.composite_observer import (
    CompositeBenchmarkObserver,
)
from verifaible_bench.evaluation.infrastructure.observer import StructlogBenchmarkObserver
from verifaible_bench.evaluation.infrastructure.progress_observer import (
    ProgressBenchmarkObserver,
)
from verifaible_bench.provider.domain.adapter import ProviderAdapter
from verifaible_bench.provider.infrastructure.observer import StructlogProviderObserver
from verifaible_bench.provider.infrastructure.registry import create_provider_adapter
from verifaible_bench.session.infrastructure.factory import AgentSessionFactory
from verifaible_bench.session.infrastructure.observer import StructlogSessionObserver
from verifaible_bench.tools.infrastructure.catalog import build_default_registry
from verifaible_bench.tools.infrastructure.evidence_client import EvidenceServiceClient
from verifaible_bench.tools.infrastructure.transcript_client import TranscriptClient

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str, verbose: bool = False) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


async def _run_benchmark(
    config: BenchConfig,
    observer: BenchmarkObserver,
    models: list[str],
    case_ids: list[str],
) -> RunSummary:
    """Wire the tool clients, adapters and session factory, then run the matrix."""
    async with httpx.AsyncClient() as http:
        registry = build_default_registry(
            evidence_client=EvidenceServiceClient(config=config.tools, http=http),
            transcript_client=TranscriptClient(config=config.tools, http=http),
            enabled=config.session.tools,
        )
        provider_observer = StructlogProviderObserver()
        adapters: dict[str, ProviderAdapter] = {
            name: create_provider_adapter(config=provider, observer=provider_observer)
            for name, provider in config.providers.items()
        }
        runner = BenchmarkRunner(
            config=config,
            dataset_loader=JsonTestSetLoader(observer=StructlogDatasetObserver()),
            session_factory=AgentSessionFactory(
                adapters=adapters,
                registry=registry,
                config=config.session,
                observer=StructlogSessionObserver(),
            ),
            observer=observer,
        )
        return await runner.run(models=models or None, case_ids=case_ids or None)


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_WHITE = "\033[97m"

_MAX_MODEL_LEN = 28


def _score_color(score: float) -> str:
    if score >= 80:
        return _GREEN
    if score >= 40:
        return _YELLOW
    return _RED


def _rule(width: int = 96, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _truncate(name: str, max_len: int = _MAX_MODEL_LEN) -> str:
    if len(name) <= max_len:
        return name
    return name[: max_len - 1] + "…"


def _format_elapsed(elapsed_seconds: float) -> str:
    """Format elapsed seconds as '1m 23.4s' or '5.2s'."""
    minutes, seconds = divmod(elapsed_seconds, 60)
    if minutes >= 1:
        return f"{int(minutes)}m {seconds:.1f}s"
    return f"{elapsed_seconds:.1f}s"


def _print_runs(runs: list[BenchmarkRun]) -> None:
    """One row per run: model, case, status, rounds, tool calls, score."""
    header = (
        f"  {_DIM}{'Model':<{_MAX_MODEL_LEN}}  {'Case':<12}  {'Category':<12}"
        f"  {'Status':<20}  {'Rounds':>6}  {'Tools':>5}  {'Score':>5}{_RESET}"
    )
    typer.echo(header)
    for run in runs:
        if run.score is None:
            score_cell = f"{_RED}{'ERR':>5}{_RESET}"
        else:
            color = _score_color(score=run.score.total_score)
            score_cell = f"{color}{run.score.total_score:>5}{_RESET}"
        typer.echo(
            f"  {_WHITE}{_truncate(run.model):<{_MAX_MODEL_LEN}}{_RESET}"
            f"  {run.case.id:<12}  {run.case.category:<12}"
            f"  {run.transcript.status.value:<20}"
            f"  {run.transcript.round_trips:>6}  {run.transcript.tool_call_count:>5}"
            f"  {score_cell}"
        )
        if run.transcript.error:
            typer.echo(f"  {_DIM}  └ {run.transcript.error[:90]}{_RESET}")


def _print_aggregates(aggregates: list[ModelAggregate]) -> None:
    """Per-model table; means cover scored runs only."""
    typer.echo(
        f"  {_DIM}{'Model':<{_MAX_MODEL_LEN}}  {'Runs':>4}  {'Fail':>4}  {'Score':>6}"
        f"  {'Answer':>6}  {'Cited':>6}  {'Marker':>6}  {'100s':>4}  {'Tokens':>8}"
        f"  {'Time':>7}{_RESET}"
    )
    for item in aggregates:
        color = _score_color(score=item.mean_total_score)
        fail_color = _RED if item.failed_runs else _DIM
        typer.echo(
            f"  {_WHITE}{_truncate(item.model):<{_MAX_MODEL_LEN}}{_RESET}"
            f"  {item.total_runs:>4}"
            f"  {fail_color}{item.failed_runs:>4}{_RESET}"
            f"  {color}{item.mean_total_score:>6.1f}{_RESET}"
            f"  {item.mean_answer_correct:>6.0%}"
            f"  {item.citation_created_rate:>6.0%}"
            f"  {item.citation_in_text_rate:>6.0%}"
            f"  {item.perfect_runs:>4}"
            f"  {item.mean_tokens:>8.0f}"
            f"  {_format_elapsed(item.mean_duration_ms / 1000):>7}"
        )


def _print_summary(
    title: str,
    runs: list[BenchmarkRun],
    aggregates: list[ModelAggregate],
    meta_rows: list[tuple[str, str]],
) -> None:
    """Print a colorized summary to stdout."""
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  verifaible-bench  ·  {title}{_RESET}")
    _rule(color=_CYAN)
    typer.echo("")

    label_w = max(len(label) for label, _ in meta_rows)
    for label, value in meta_rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")

    typer.echo("")
    _rule(color=_BLUE)
    typer.echo(f"{_BLUE}{_BOLD}  Runs{_RESET}")
    typer.echo("")
    _print_runs(runs=runs)

    typer.echo("")
    _rule(color=_BLUE)
    typer.echo(f"{_BLUE}{_BOLD}  Results by Model{_RESET}")
    typer.echo("")
    _print_aggregates(aggregates=aggregates)

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo("")


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    output_dir: Path = typer.Option(
        Path("./results"),
        "--output-dir",
        "-o",
        help="Directory for output files",
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
    models: list[str] = typer.Option(
        [], "--model", "-m", help="Only run this model (repeatable)"
    ),
    case_ids: list[str] = typer.Option(
        [], "--case", "-c", help="Only run this case id (repeatable)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug events"),
) -> None:
    """Run the benchmark described by a YAML config file."""
    try:
        _configure_structlog(log_format=log_format, verbose=verbose)

        loader = YamlConfigLoader(observer=StructlogConfigObserver())
        config = loader.load(path=config_path)

        output_dir.mkdir(parents=True, exist_ok=True)

        observers: list[BenchmarkObserver] = [StructlogBenchmarkObserver()]
        if log_format != "json":
            observers.append(ProgressBenchmarkObserver())

        started_at = time.monotonic()
        summary = asyncio.run(
            _run_benchmark(
                config=config,
                observer=CompositeBenchmarkObserver(observers=observers),
                models=models,
                case_ids=case_ids,
            )
        )
        elapsed_seconds = time.monotonic() - started_at

        aggregates = aggregate(runs=summary.runs)
        stem = output_stem(config_name=summary.config_name, run_id=summary.run_id)
        json_path, jsonl_path = write_outputs(
            output_dir=output_dir, stem=stem, summary=summary, aggregates=aggregates
        )

        _print_summary(
            title="Run Complete",
            runs=summary.runs,
            aggregates=aggregates,
            meta_rows=[
                ("Run ID", f"{summary.run_id[:8]}-..."),
                ("Config", summary.config_name),
                ("Test set SHA256", f"{summary.dataset_sha256[:16]}..."),
                ("Models", ", ".join(item.model for item in aggregates)),
                ("Total runs", str(len(summary.runs))),
                ("Elapsed", _format_elapsed(elapsed_seconds=elapsed_seconds)),
                ("Summary JSON", str(json_path)),
                ("Runs JSONL", str(jsonl_path)),
            ],
        )

    except KeyboardInterrupt:
        typer.echo("Benchmark interrupted.")
        sys.exit(1)
    except typer.Exit:
        raise
    except BenchError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command()
def rescore(
    runs_path: Path = typer.Argument(..., help="Path to a <stem>.runs.jsonl file"),
    testset_path: Path = typer.Argument(..., help="Path to the test set JSON"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Re-score persisted transcripts with the current scoring rules."""
    try:
        _configure_structlog(log_format=log_format)

        load_result = JsonTestSetLoader(observer=StructlogDatasetObserver()).load(
            config=DatasetConfig(path=testset_path)
        )
        runs = rescore_runs(runs=read_runs(path=runs_path), cases=load_result.cases)
        runs.sort(key=lambda r: (r.model, r.case.id))

        _print_summary(
            title="Rescore",
            runs=runs,
            aggregates=aggregate(runs=runs),
            meta_rows=[
                ("Runs file", str(runs_path)),
                ("Test set SHA256", f"{load_result.sha256[:16]}..."),
                ("Total runs", str(len(runs))),
            ],
        )

    except KeyboardInterrupt:
        typer.echo("Rescore interrupted.")
        sys.exit(1)
    except typer.Exit:
        raise
    except BenchError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


if __name__ == "__main__":
    app()
