"""Progress reporting for the initialization pipeline.

Stages report through a plain callback that receives :class:`ProgressMessage`
objects. The helpers here map stage-local progress onto each stage's window
of the overall percentage, time the stages and measure throughput.

``ConsoleProgressReporter`` is a callback implementation for terminals. It
uses simple ``console.print()`` statements and an in-place stderr bar, with
no Rich background threads, so it behaves the same whether the pipeline runs
inline or its batches are dispatched to an executor.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from typing import Any

from rich.console import Console

from ..config.defaults import STAGE_LABELS, STAGE_WINDOWS
from .models import ProgressMessage

ProgressCallback = Callable[[ProgressMessage], None]


def noop_progress(message: ProgressMessage) -> None:
    """Progress callback that discards every message."""
    return None


class ProgressCalculator:
    """Map stage-local progress (0-1) into the stage's overall window."""

    def __init__(self, stage: str, window: tuple[int, int] | None = None):
        self.stage = stage
        self.window = window or STAGE_WINDOWS[stage]

    def calculate(self, stage_progress: float) -> int:
        """Return the overall percentage for ``stage_progress``.

        Values outside 0-1 are clamped, so the result always lies inside
        the window.
        """
        start, end = self.window
        clamped = min(1.0, max(0.0, stage_progress))
        return round(start + (end - start) * clamped)

    def create_message(
        self,
        stage_progress: float,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> ProgressMessage:
        return ProgressMessage(
            stage=self.stage,
            stage_progress=min(1.0, max(0.0, stage_progress)),
            progress=self.calculate(stage_progress),
            message=message,
            details=details or {},
        )


class PerformanceTimer:
    """Named marks relative to a start time (milliseconds)."""

    def __init__(self) -> None:
        self._start: float = 0.0
        self._marks: dict[str, float] = {}

    def start(self) -> None:
        self._start = time.perf_counter()
        self._marks.clear()

    def mark(self, name: str) -> None:
        self._marks[name] = time.perf_counter()

    def measure(self, name: str) -> float:
        """Milliseconds from start to ``name`` (0 if the mark is missing)."""
        mark = self._marks.get(name)
        if mark is None:
            return 0.0
        return (mark - self._start) * 1000

    def measure_between(self, start_mark: str, end_mark: str) -> float:
        start = self._marks.get(start_mark)
        end = self._marks.get(end_mark)
        if start is None or end is None:
            return 0.0
        return (end - start) * 1000

    def reset(self) -> None:
        self._start = 0.0
        self._marks.clear()


class ProcessingSpeedCalculator:
    """Throughput and ETA for a stream of processed items."""

    def __init__(self) -> None:
        self.processed = 0
        self._start = 0.0

    def start(self) -> None:
        self.processed = 0
        self._start = time.perf_counter()

    def update(self, count: int) -> None:
        self.processed += count

    def elapsed_seconds(self) -> float:
        return time.perf_counter() - self._start

    def rate(self) -> float:
        elapsed = self.elapsed_seconds()
        if elapsed <= 0:
            return 0.0
        return self.processed / elapsed

    def speed(self) -> str:
        return f"{round(self.rate())} nodes/s"

    def estimate_remaining(self, remaining: int) -> int:
        """Estimated milliseconds to process ``remaining`` more items."""
        rate = self.rate()
        if rate <= 0 or self.processed == 0:
            return 0
        return round(remaining / rate * 1000)


class ConsoleProgressReporter:
    """Print pipeline progress to a Rich console.

    Example:
        reporter = ConsoleProgressReporter(console, verbose=True)
        result = await pipeline.run(dataset, on_progress=reporter)
        reporter.complete(f"Laid out {len(result.nodes)} nodes")
    """

    def __init__(self, console: Console, verbose: bool = False, bar_width: int = 40):
        """Initialize progress reporter.

        Args:
            console: Rich Console instance for formatted output
            verbose: Also print every intermediate stage message
            bar_width: Width of the inline progress bar in characters
        """
        self.console = console
        self.verbose = verbose
        self.bar_width = bar_width
        self.current_stage: str | None = None
        self._stage_start: float | None = None
        self._start = time.time()
        self._bar_open = False

    def __call__(self, message: ProgressMessage) -> None:
        if message.stage == "error":
            self._close_bar()
            self.console.print(f"\n[red]✗ {message.message}: {message.error}[/red]")
            return

        if message.stage != self.current_stage:
            self._start_stage(message.stage)

        details = message.details
        total = details.get("total_nodes")
        processed = details.get("processed_nodes")
        if total and processed is not None:
            self.progress_bar(
                processed,
                total,
                prefix=STAGE_LABELS.get(message.stage, message.stage),
                eta_ms=details.get("estimated_remaining"),
            )
        elif self.verbose:
            self.console.print(f"  [dim]→ {message.message} ({message.progress}%)[/dim]")

    def _start_stage(self, stage: str) -> None:
        self._close_bar()
        if self._stage_start is not None:
            elapsed = time.time() - self._stage_start
            self.console.print(f"[dim]  (completed in {elapsed:.2f}s)[/dim]")

        self.current_stage = stage
        self._stage_start = time.time()
        index = list(STAGE_WINDOWS).index(stage) + 1 if stage in STAGE_WINDOWS else "?"
        self.console.print(
            f"\n[cyan]Stage {index}/{len(STAGE_WINDOWS)}: "
            f"{STAGE_LABELS.get(stage, stage)}[/cyan]"
        )

    def _close_bar(self) -> None:
        if self._bar_open:
            sys.stderr.write("\n")
            sys.stderr.flush()
            self._bar_open = False

    def progress_bar(
        self,
        current: int,
        total: int,
        prefix: str = "",
        eta_ms: int | None = None,
    ) -> None:
        """Display an inline progress bar that updates in place.

        Example:
            reporter.progress_bar(5400, 8100, prefix="Calculating layout")
            # Output: Calculating layout... ━━━━━━━━━━━━━━━━━━━━━━━━━━        66% 5,400/8,100
        """
        if total == 0:
            return

        percentage = min(100, int((current / total) * 100))
        filled_width = min(self.bar_width, int((current / total) * self.bar_width))
        bar = "━" * filled_width + " " * (self.bar_width - filled_width)

        eta_str = ""
        if eta_ms and current < total:
            remaining = eta_ms / 1000
            minutes = int(remaining // 60)
            seconds = int(remaining % 60)
            eta_str = f" [{minutes:02d}:{seconds:02d} remaining]"

        sys.stderr.write(f"\r  {prefix}... {bar} {percentage}% {current:,}/{total:,}{eta_str}")
        sys.stderr.flush()
        self._bar_open = current < total

        if current >= total:
            sys.stderr.write("\n")
            sys.stderr.flush()

    def complete(self, summary: str, time_taken: float | None = None) -> None:
        """Mark the run complete and print the total time."""
        self._close_bar()
        if self._stage_start is not None:
            elapsed = time.time() - self._stage_start
            self.console.print(f"[dim]  (completed in {elapsed:.2f}s)[/dim]")

        if time_taken is None:
            time_taken = time.time() - self._start

        self.console.print(f"\n[green]✓ {summary}[/green]")
        self.console.print(f"  Time: {time_taken:.2f}s")
