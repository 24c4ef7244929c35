"""Tests for progress calculation, timing and console reporting."""

import io
from unittest.mock import patch

from rich.console import Console

from lazy_radial.core.models import ProgressMessage
from lazy_radial.core.progress import (
    ConsoleProgressReporter,
    PerformanceTimer,
    ProcessingSpeedCalculator,
    ProgressCalculator,
)


class TestProgressCalculator:
    """Stage-local progress maps into the stage window."""

    def test_window_bounds(self):
        calc = ProgressCalculator("layout-calc")
        assert calc.calculate(0) == 20
        assert calc.calculate(0.5) == 35
        assert calc.calculate(1) == 50

    def test_out_of_range_is_clamped(self):
        calc = ProgressCalculator("data-adapt")
        assert calc.calculate(-1) == 0
        assert calc.calculate(3) == 20

    def test_custom_window(self):
        assert ProgressCalculator("custom", (70, 100)).calculate(0.5) == 85

    def test_create_message(self):
        message = ProgressCalculator("style-gen").create_message(0.5, "half", {"x": 1})
        assert message.stage == "style-gen"
        assert message.stage_progress == 0.5
        assert message.progress == 60
        assert message.details == {"x": 1}

    def test_message_serializes_camel_case(self):
        message = ProgressMessage(
            stage="error", stage_progress=0, progress=20, message="m", error="e", error_stack="tb"
        )
        payload = message.to_dict()
        assert payload["stageProgress"] == 0
        assert payload["error"] == "e"
        assert payload["errorStack"] == "tb"


class TestPerformanceTimer:
    def test_marks_are_relative_to_start(self):
        timer = PerformanceTimer()
        with patch("lazy_radial.core.progress.time.perf_counter", side_effect=[1.0, 1.5, 2.0]):
            timer.start()
            timer.mark("a")
            timer.mark("b")

        assert timer.measure("a") == 500
        assert timer.measure_between("a", "b") == 500
        assert timer.measure("missing") == 0

    def test_reset(self):
        timer = PerformanceTimer()
        timer.start()
        timer.mark("a")
        timer.reset()
        assert timer.measure("a") == 0


class TestProcessingSpeedCalculator:
    def test_speed_and_eta(self):
        speed = ProcessingSpeedCalculator()
        with patch("lazy_radial.core.progress.time.perf_counter", return_value=10.0):
            speed.start()
        speed.update(100)

        with patch("lazy_radial.core.progress.time.perf_counter", return_value=11.0):
            assert speed.speed() == "100 nodes/s"
            assert speed.estimate_remaining(50) == 500

    def test_no_progress_means_no_estimate(self):
        speed = ProcessingSpeedCalculator()
        speed.start()
        assert speed.estimate_remaining(100) == 0


class TestConsoleProgressReporter:
    """Reporter prints stage headers and errors."""

    def make_reporter(self):
        output = io.StringIO()
        console = Console(file=output, force_terminal=False, width=120)
        return ConsoleProgressReporter(console, verbose=True), output

    def test_stage_header_printed_once(self):
        reporter, output = self.make_reporter()
        calc = ProgressCalculator("data-adapt")
        reporter(calc.create_message(0, "start"))
        reporter(calc.create_message(1, "done"))

        text = output.getvalue()
        assert text.count("Stage 1/3: Adapting data") == 1
        assert "done" in text

    def test_error_message_printed(self):
        reporter, output = self.make_reporter()
        reporter(
            ProgressMessage(
                stage="error", stage_progress=0, progress=0, message="Failed", error="bad input"
            )
        )
        assert "bad input" in output.getvalue()

    def test_complete_prints_summary(self):
        reporter, output = self.make_reporter()
        reporter.complete("All done", time_taken=1.5)
        text = output.getvalue()
        assert "All done" in text
        assert "1.50s" in text
