# Tests for run metrics and telemetry recording

import json

import pytest
from railsim.analysis.logger import FrameRecorder, setup_logging
from railsim.analysis.metrics import compute_par_metrics, compute_run_metrics


class TestRunMetrics:

    def test_basic(self):
        metrics = compute_run_metrics(
            speeds=[10.0, 20.0, 30.0],
            safe_speeds=[15.0, 15.0, 25.0],
            comforts=[100.0, 90.0, 95.0],
            dt=0.5,
            completion_time_ms=1500,
        )
        assert metrics["mean_speed_kmh"] == pytest.approx(72.0)
        assert metrics["max_speed_kmh"] == pytest.approx(108.0)
        assert metrics["duration_s"] == pytest.approx(1.5)
        assert metrics["overspeed_fraction"] == pytest.approx(2.0 / 3.0)
        assert metrics["max_overspeed"] == pytest.approx(5.0)
        assert metrics["final_comfort"] == 95.0
        assert metrics["min_comfort"] == 90.0
        assert metrics["completion_time_ms"] == 1500.0

    def test_empty(self):
        assert compute_run_metrics([], [], [], 0.1) == {}

    def test_never_overspeed(self):
        metrics = compute_run_metrics([5.0, 6.0], [10.0, 10.0], [], 0.1)
        assert metrics["overspeed_fraction"] == 0.0
        assert metrics["max_overspeed"] == 0.0


class TestParMetrics:

    def test_ignores_unreachable(self):
        metrics = compute_par_metrics([60_000, None, 80_000])
        assert metrics["levels"] == 3.0
        assert metrics["unreachable_levels"] == 1.0
        assert metrics["mean_min_time_ms"] == pytest.approx(70_000.0)
        assert metrics["min_min_time_ms"] == 60_000.0
        assert metrics["max_min_time_ms"] == 80_000.0

    def test_all_unreachable(self):
        metrics = compute_par_metrics([None, None])
        assert "mean_min_time_ms" not in metrics


class TestFrameRecorder:

    def test_series(self):
        recorder = FrameRecorder()
        recorder.record(0, {"speed": 1.0})
        recorder.record(1, {"speed": 2.0, "comfort": 99.0})
        assert recorder.get_series("speed") == [1.0, 2.0]
        assert recorder.get_series("comfort") == [99.0]
        recorder.clear()
        assert recorder.rows == []

    def test_save(self, temp_dir):
        recorder = FrameRecorder()
        recorder.record(0, {"speed": 1.0, "status": "RUNNING"})
        csv_path = temp_dir / "out" / "telemetry.csv"
        recorder.save_csv(csv_path)
        lines = csv_path.read_text().splitlines()
        assert lines[0] == "tick,speed,status"
        assert lines[1] == "0,1.0,RUNNING"

        summary_path = temp_dir / "summary.json"
        recorder.save_summary(summary_path, {"status": "WON"})
        with open(summary_path) as f:
            summary = json.load(f)
        assert summary["status"] == "WON"
        assert "timestamp" in summary


class TestSetupLogging:

    def test_file_handler(self, temp_dir):
        log_file = temp_dir / "logs" / "run.log"
        logger = setup_logging("DEBUG", log_file)
        try:
            logger.getChild("test").info("hello")
            for handler in logger.handlers:
                handler.flush()
            assert "hello" in log_file.read_text()
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
