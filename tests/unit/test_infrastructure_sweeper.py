"""Unit tests for PeriodicSweeper."""

import threading
from unittest.mock import MagicMock

import pytest

from schoolgate.infrastructure.jobs import PeriodicSweeper


class TestRunOnce:
    """Tests for a single sweep pass."""

    def test_runs_every_job(self, logger: MagicMock) -> None:
        sweeper = PeriodicSweeper(
            name="test-sweeper",
            interval_seconds=60,
            jobs={"cache": lambda: 3, "limits": lambda: 0},
            logger=logger,
        )

        assert sweeper.run_once() == {"cache": 3, "limits": 0}
        logger.info.assert_called_once_with("sweep_completed", job="cache", removed=3)

    def test_failing_job_does_not_stop_others(self, logger: MagicMock) -> None:
        def broken() -> int:
            raise RuntimeError("boom")

        sweeper = PeriodicSweeper(
            name="test-sweeper",
            interval_seconds=60,
            jobs={"broken": broken, "ok": lambda: 1},
            logger=logger,
        )

        assert sweeper.run_once() == {"broken": 0, "ok": 1}
        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["job"] == "broken"

    def test_rejects_non_positive_interval(self, logger: MagicMock) -> None:
        with pytest.raises(ValueError, match="interval_seconds must be positive"):
            PeriodicSweeper(name="x", interval_seconds=0, jobs={}, logger=logger)


class TestBackgroundThread:
    """Tests for start/close."""

    def test_thread_runs_jobs_until_closed(self, logger: MagicMock) -> None:
        ran = threading.Event()

        def job() -> int:
            ran.set()
            return 0

        sweeper = PeriodicSweeper(
            name="test-sweeper", interval_seconds=0.01, jobs={"job": job}, logger=logger
        )
        sweeper.start()
        try:
            assert ran.wait(timeout=2.0)
            assert sweeper.is_running
        finally:
            sweeper.close()

        assert not sweeper.is_running

    def test_start_twice_is_noop(self, logger: MagicMock) -> None:
        sweeper = PeriodicSweeper(
            name="test-sweeper", interval_seconds=60, jobs={}, logger=logger
        )
        sweeper.start()
        try:
            first = sweeper._thread
            sweeper.start()
            assert sweeper._thread is first
        finally:
            sweeper.close()
