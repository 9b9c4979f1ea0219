"""ProgressBenchmarkObserver — live Rich progress bars, one per model, on stderr."""

from __future__ import annotations

import sys

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text

_OVERALL = "Overall"
_MODEL_COLORS: list[str] = ["cyan", "green", "yellow", "magenta", "blue"]


class _CountsColumn(ProgressColumn):
    """done+running/total, colored like the bar segments."""

    def render(self, task: Task) -> Text:
        return Text.assemble(
            (str(int(task.fields.get("done", 0))), "bright_green"),
            ("+", "dim white"),
            (str(int(task.fields.get("running", 0))), "grey50"),
            ("/", "dim white"),
            (str(int(task.total or 0)), "default"),
        )


class _ModelEtaColumn(ProgressColumn):
    """ETA for model rows only; the Overall row leaves it blank.

    Overall finishes with the slowest model, which its summed rate hides.
    """

    def __init__(self) -> None:
        super().__init__()
        self._remaining = TimeRemainingColumn()

    def render(self, task: Task) -> Text:
        if task.fields.get("is_overall", False):
            return Text("")
        result = self._remaining.render(task)
        return result if isinstance(result, Text) else Text(str(result))


class _SegmentedBarColumn(ProgressColumn):
    """Bar with three segments: done, running, waiting."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        total = task.total or 0
        done_cells = running_cells = 0
        if total > 0:
            done_cells = int(task.completed / total * self.bar_width)
            running = int(task.fields.get("running", 0))
            running_cells = min(int(running / total * self.bar_width), self.bar_width - done_cells)
        waiting_cells = self.bar_width - done_cells - running_cells

        bar = Text()
        bar.append("█" * done_cells, style="bright_green")
        bar.append("▒" * running_cells, style="grey50")
        bar.append("░" * waiting_cells, style="dim white")
        return bar


def _make_progress(console: Console) -> Progress:
    return Progress(
        TextColumn("{task.description}"),
        _SegmentedBarColumn(bar_width=40),
        _CountsColumn(),
        TimeElapsedColumn(),
        TextColumn("{task.fields[eta_label]}"),
        _ModelEtaColumn(),
        TextColumn("{task.fields[rate]}"),
        console=console,
        refresh_per_second=10,
        transient=False,
    )


class ProgressBenchmarkObserver:
    """Renders one progress row per model plus an Overall row on stderr.

    Only benchmark_started, run_started, benchmark_progress and
    benchmark_completed change the display; other events are no-ops.
    Pass ``disabled=True`` to keep the counters without any terminal output.

    Does NOT inherit from BenchmarkObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._reset()

    def _reset(self) -> None:
        self._done: dict[str, int] = {}
        self._running: dict[str, int] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._overall_progress: Progress | None = None
        self._model_progress: Progress | None = None
        self._live: Live | None = None

    def counts(self, key: str) -> tuple[int, int]:
        """(done, running) for a model name or "Overall"."""
        return self._done.get(key, 0), self._running.get(key, 0)

    def _describe(self, name: str, index: int, pad_width: int) -> str:
        if name == _OVERALL:
            return f"[bold]{name:<{pad_width}}[/bold]"
        if sys.stderr.isatty():
            color = _MODEL_COLORS[index % len(_MODEL_COLORS)]
            return f"[{color}]{name:<{pad_width}}[/{color}]"
        return f"{name:<{pad_width}}"

    def _progress_for(self, key: str) -> Progress | None:
        return self._overall_progress if key == _OVERALL else self._model_progress

    def _rate(self, key: str) -> str:
        progress = self._progress_for(key)
        task_id = self._task_ids.get(key)
        if progress is None or task_id is None:
            return "--s/run"
        task = progress.tasks[task_id]
        if task.elapsed and task.completed > 0:
            return f"{task.elapsed / task.completed:.1f}s/run"
        return "--s/run"

    def _refresh(self, key: str) -> None:
        progress = self._progress_for(key)
        if self._disabled or progress is None or key not in self._task_ids:
            return
        done, running = self.counts(key)
        progress.update(
            self._task_ids[key], completed=done, done=done, running=running, rate=self._rate(key)
        )

    def _move(self, model: str, done: int = 0, running: int = 0) -> None:
        for key in (model, _OVERALL):
            if key in self._done:
                self._done[key] += done
                self._running[key] = max(0, self._running[key] + running)
            self._refresh(key)

    def benchmark_started(
        self,
        run_id: str,
        total_cases: int,
        model_names: list[str],
        max_concurrent: int,
    ) -> None:
        self._reset()
        totals = {name: total_cases for name in model_names}
        totals[_OVERALL] = total_cases * len(model_names)
        for key in totals:
            self._done[key] = 0
            self._running[key] = 0

        if self._disabled:
            return

        pad_width = max(len(name) for name in totals)
        console = Console(stderr=True)
        self._overall_progress = _make_progress(console=console)
        self._model_progress = _make_progress(console=console)

        self._task_ids[_OVERALL] = self._overall_progress.add_task(
            description=self._describe(name=_OVERALL, index=0, pad_width=pad_width),
            total=float(totals[_OVERALL]),
            done=0,
            running=0,
            rate="--s/run",
            is_overall=True,
            eta_label="",
        )
        for index, name in enumerate(model_names):
            self._task_ids[name] = self._model_progress.add_task(
                description=self._describe(name=name, index=index, pad_width=pad_width),
                total=float(total_cases),
                done=0,
                running=0,
                rate="--s/run",
                is_overall=False,
                eta_label="eta",
            )

        legend = Text.assemble(
            "  Legend:  ",
            ("█", "bright_green"),
            " done  ",
            ("▒", "grey50"),
            " running  ",
            ("░", "dim white"),
            " waiting",
        )
        self._live = Live(
            Group(self._overall_progress, Text(""), self._model_progress, Text(""), legend),
            console=console,
            refresh_per_second=10,
        )
        self._live.start()

    def benchmark_completed(
        self, run_id: str, total_runs: int, failed_runs: int, elapsed_seconds: float
    ) -> None:
        if self._live is not None:
            self._live.stop()
        self._reset()

    def benchmark_progress(self, run_id: str, model: str, completed: int, total: int) -> None:
        self._move(model=model, done=1, running=-1)

    def run_started(self, run_id: str, model: str, case_id: str) -> None:
        self._move(model=model, running=1)

    def run_completed(
        self, run_id: str, model: str, case_id: str, status: str, total_score: int
    ) -> None:
        pass

    def run_failed(self, run_id: str, model: str, case_id: str, reason: str) -> None:
        pass
